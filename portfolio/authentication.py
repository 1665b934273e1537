from rest_framework.authentication import SessionAuthentication


class AdminSessionAuthentication(SessionAuthentication):
    """Session cookie authentication that answers 401 instead of 403.

    DRF only uses 401 when the authenticator supplies a WWW-Authenticate value;
    plain SessionAuthentication has none, so anonymous admin calls would get 403.
    """

    def authenticate_header(self, request):
        return 'Session realm="admin"'
