from rest_framework_simplejwt.tokens import RefreshToken

from auth_app.models import display_name, role_of


def tokens_for_user(user) -> RefreshToken:
    """
    Issues a refresh token whose claims carry the caller identity.

    The derived access token copies the custom claims, so every request
    authenticated with it exposes {user_id, role, name}.
    """
    refresh = RefreshToken.for_user(user)
    refresh['role'] = role_of(user)
    refresh['name'] = display_name(user)
    return refresh
