import logging

from django.conf import settings # access Django settings for lifetimes/flags
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView # DRF base API view
from rest_framework.request import Request
from rest_framework.response import Response # DRF HTTP response wrapper
from rest_framework import status # symbolic HTTP status codes
from rest_framework_simplejwt.tokens import RefreshToken # token parser for refresh JWTs
from rest_framework_simplejwt.exceptions import TokenError
from auth_app.api.serializers import RegisterSerializer, LoginSerializer
from auth_app.models import display_name, role_of
from auth_app.tokens import tokens_for_user

logger = logging.getLogger(__name__)


def _cookie_names():
    """Returns (access, refresh) cookie names with fallbacks"""
    return (
        getattr(settings, 'JWT_ACCESS_COOKIE_NAME', 'access_token'),
        getattr(settings, 'JWT_REFRESH_COOKIE_NAME', 'refresh_token'),
    )


def _lifetime_seconds(key: str, fallback: int) -> int:
    """Reads a SIMPLE_JWT lifetime as seconds, used as cookie max_age"""
    lifetime = getattr(settings, 'SIMPLE_JWT', {}).get(key)
    return int(lifetime.total_seconds()) if lifetime else fallback


def _set_token_cookie(resp: Response, name: str, value: str, max_age: int) -> None:
    """Writes a JWT as HttpOnly cookie using the configured security flags"""
    resp.set_cookie(
        key=name,
        value=value,
        max_age=max_age,
        secure=getattr(settings, 'JWT_COOKIE_SECURE', True),  # HTTPS-only in prod
        httponly=True,                                        # no JS access
        samesite=getattr(settings, 'JWT_COOKIE_SAMESITE', 'Lax'),
        path='/',
    )


class RegisterView(APIView):
    """
    API endpoint for registering a new user.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        """
        Handle POST requests to create a new user with its profile.
        """
        serializer = RegisterSerializer(data=request.data)  # init serializer with request data
        if serializer.is_valid():  # validate input
            user = serializer.save()  # create user + profile
            logger.info('Registered user %s with role %s', user.id, role_of(user))
            return Response({'message': 'User created successfully!'}, status=status.HTTP_201_CREATED)

        # return validation errors
        return Response({'message': 'Invalid input.', 'errors': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)


@method_decorator(csrf_exempt, name='dispatch')
class LoginView(APIView):
    """
    Handle user login and issue JWTs carrying {user_id, role, name}.

    On success:
      - returns 200 with user payload, both tokens and a 'message'
      - sets 'access_token' and 'refresh_token' as HttpOnly cookies

    On failure:
      - returns 401 for invalid credentials
      - returns 500 for unexpected server errors (global exception handler)
    """
    # allow unauthenticated access
    permission_classes = [AllowAny]
    # no authentication on the login endpoint itself
    authentication_classes = []

    def post(self, request: Request):
        """
        Validate credentials, generate JWT tokens, and set them in HttpOnly cookies.
        """
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'message': _first_error(serializer.errors)}, status=status.HTTP_401_UNAUTHORIZED)
        user = serializer.validated_data['user']

        refresh = tokens_for_user(user)
        access = refresh.access_token

        resp = Response({
            'message': 'Login successfully!',
            'access': str(access),
            'refresh': str(refresh),
            'user': {
                'id': user.id,
                'name': display_name(user),
                'email': user.email,
                'role': role_of(user),
            },
        }, status=status.HTTP_200_OK)

        access_cookie_name, refresh_cookie_name = _cookie_names()
        _set_token_cookie(resp, access_cookie_name, str(access), _lifetime_seconds('ACCESS_TOKEN_LIFETIME', 300))
        _set_token_cookie(resp, refresh_cookie_name, str(refresh), _lifetime_seconds('REFRESH_TOKEN_LIFETIME', 86400))
        logger.info('User %s logged in', user.id)
        return resp


def _first_error(detail) -> str:
    """Extracts the first readable message from serializer errors (list, dict, str)"""
    if isinstance(detail, list) and detail:
        return _first_error(detail[0])
    if isinstance(detail, dict):
        for v in detail.values():
            return _first_error(v)
    if detail:
        return str(detail)
    return 'Invalid credentials.'


@method_decorator(csrf_exempt, name='dispatch')
class LogoutView(APIView):
    """
    Log the user out by clearing JWT cookies and blacklisting the refresh token.
    """

    authentication_classes = []
    permission_classes = []

    def post(self, request):
        """
        Steps:
          1) Check if the refresh cookie is present -> else 401.
          2) Blacklist the refresh token (invalid or expired tokens are ignored).
          3) Delete both cookies on the response and return 200.
        """
        access_cookie_name, refresh_cookie_name = _cookie_names()
        cookie_samesite = getattr(settings, 'JWT_COOKIE_SAMESITE', 'Lax')

        refresh_token = request.COOKIES.get(refresh_cookie_name)
        if not refresh_token:
            return Response(
                {'message': 'Authentication credentials were not provided.'},
                status=status.HTTP_401_UNAUTHORIZED
            )

        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError:
            # already invalid, nothing to revoke
            logger.info('Logout with an invalid or expired refresh token')

        resp = Response(
            {'message': 'Log-Out successfully! All Tokens will be deleted. Refresh token is now invalid.'},
            status=status.HTTP_200_OK
        )
        resp.delete_cookie(key=access_cookie_name, path='/', samesite=cookie_samesite)
        resp.delete_cookie(key=refresh_cookie_name, path='/', samesite=cookie_samesite)
        return resp


@method_decorator(csrf_exempt, name='dispatch')
class TokenRefreshView(APIView):
    """
    Issue a new access token from the refresh token stored in an HttpOnly cookie.

    Behavior:
      - Requires the presence of the 'refresh_token' cookie.
      - Validates the refresh token and issues a new access token (role/name claims are copied).
      - Sets the new 'access_token' cookie on the response.
      - Returns JSON body: {'message': 'Token refreshed', 'access': '<new_access>'}.
      - Returns 401 if the refresh cookie is missing or invalid.
    """

    authentication_classes = []  # gated by the cookie check
    permission_classes = []

    def post(self, request):
        """
        POST: Refresh the access token using the refresh cookie.
        """
        access_cookie_name, refresh_cookie_name = _cookie_names()

        refresh_token = request.COOKIES.get(refresh_cookie_name)
        if not refresh_token:
            return Response(
                {'message': 'Refresh token missing.'},
                status=status.HTTP_401_UNAUTHORIZED
            )

        try:
            new_access = RefreshToken(refresh_token).access_token  # may raise TokenError if malformed/expired/blacklisted
        except TokenError:
            return Response(
                {'message': 'Invalid refresh token.'},
                status=status.HTTP_401_UNAUTHORIZED
            )

        resp = Response({'message': 'Token refreshed', 'access': str(new_access)}, status=status.HTTP_200_OK)
        _set_token_cookie(resp, access_cookie_name, str(new_access), _lifetime_seconds('ACCESS_TOKEN_LIFETIME', 300))
        return resp


class MeView(APIView):
    """
    Returns the identity claims of the authenticated request.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        u = request.user
        claims = request.auth if request.auth is not None else {}
        return Response({
            'id': u.id,
            'name': claims.get('name', display_name(u)),
            'email': u.email,
            'role': claims.get('role', role_of(u)),
        }, status=200)
