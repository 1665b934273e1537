"""
URL configuration for the portfolio_site project.

Public read endpoints live under ``api/``; the session-guarded content API
lives under ``api/admin/``. Paths have no trailing slash.
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework import routers

from portfolio import views as portfolio_views

router = routers.DefaultRouter(trailing_slash=False)
router.register(r"experiences", portfolio_views.ExperienceViewSet, basename="experience")
router.register(r"education", portfolio_views.EducationViewSet, basename="education")
router.register(r"case-studies", portfolio_views.CaseStudyViewSet, basename="case-study")

admin_router = routers.SimpleRouter(trailing_slash=False)
admin_router.register(r"experiences", portfolio_views.AdminExperienceViewSet, basename="admin-experience")
admin_router.register(r"education", portfolio_views.AdminEducationViewSet, basename="admin-education")
admin_router.register(r"case-studies", portfolio_views.AdminCaseStudyViewSet, basename="admin-case-study")

admin_api = [
    path("login", portfolio_views.AdminLoginView.as_view(), name="admin-login"),
    path("logout", portfolio_views.AdminLogoutView.as_view(), name="admin-logout"),
    path("me", portfolio_views.AdminMeView.as_view(), name="admin-me"),
    path("profile", portfolio_views.AdminProfileView.as_view(), name="admin-profile"),
    path("tools-order", portfolio_views.ToolsOrderView.as_view(), name="admin-tools-order"),
    path("industries-order", portfolio_views.IndustriesOrderView.as_view(), name="admin-industries-order"),
    path("", include(admin_router.urls)),
]

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/health", lambda request: JsonResponse({"status": "ok"}), name="health"),
    path("api/profile", portfolio_views.ProfileView.as_view(), name="profile"),
    path("api/upload-image", portfolio_views.ImageUploadView.as_view(), name="upload-image"),
    path("api/admin/", include(admin_api)),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="docs"),
    path("api/", include(router.urls)),
]
