from rest_framework_simplejwt.authentication import JWTAuthentication

ACCESS_TOKEN_COOKIE = 'access_token'
REFRESH_TOKEN_COOKIE = 'refresh_token'


class CookieJWTAuthentication(JWTAuthentication):
    """
    JWT auth that reads the Authorization header first and falls back to the
    HTTP-only access_token cookie set at login.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is not None:
            return super().authenticate(request)

        raw_token = request.COOKIES.get(ACCESS_TOKEN_COOKIE)
        if not raw_token:
            return None

        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token
