from typing import Optional, Tuple
from django.conf import settings
from rest_framework.request import Request
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.tokens import Token


class CookieJWTAuthentication(JWTAuthentication):
    """
    Authenticates with a JWT access token from the 'Authorization: Bearer' header,
    or from the HttpOnly 'access_token' cookie set at login.

    An explicit header wins over the cookie. The validated token becomes
    request.auth, so views read the caller's role and name claims from it.
    """

    def authenticate(self, request: Request) -> Optional[Tuple[object, Token]]:
        if self.get_header(request) is not None:
            return super().authenticate(request)

        cookie_name = getattr(settings, 'JWT_ACCESS_COOKIE_NAME', 'access_token')
        raw = request.COOKIES.get(cookie_name)
        if not raw:
            return None
        validated = self.get_validated_token(raw)
        return self.get_user(validated), validated
