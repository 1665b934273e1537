from rest_framework.permissions import BasePermission


class IsPortfolioAdmin(BasePermission):
    """Signed-in staff user (the admin session set by the login endpoint)."""

    message = "Authentication required"

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_staff)
