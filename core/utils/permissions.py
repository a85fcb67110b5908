from typing import Optional
from rest_framework.permissions import BasePermission  # Basis für eigene Permissions

ADMIN_ROLE = 'admin'
USER_ROLE = 'user'


def role_claim(request) -> Optional[str]:
    """Returns the role claim of the request's validated token, None if unauthenticated"""
    token = getattr(request, 'auth', None)
    if token is None:
        return None
    try:
        return token.get('role', USER_ROLE)
    except AttributeError:
        return None


class IsAdminRole(BasePermission):                                  # nur Admin-Token darf zugreifen
    message = 'Forbidden'                                           # 403-Fehlermeldung

    def has_permission(self, request, view):                        # view-weite Prüfung
        # nicht eingeloggt → DRF behandelt als 401
        if not request.user or not request.user.is_authenticated:
            return False
        return role_claim(request) == ADMIN_ROLE                    # Rolle kommt ausschließlich aus dem Token
