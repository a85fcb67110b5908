from dataclasses import dataclass

from core.utils.errors import AuthError
from core.utils.permissions import ADMIN_ROLE, USER_ROLE, role_claim


@dataclass(frozen=True)
class Caller:
    """Identity claims of one request: who is calling and with which role"""
    id: int
    role: str = USER_ROLE

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    @classmethod
    def from_request(cls, request) -> 'Caller':
        """Builds the caller from the validated token of an authenticated request"""
        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated:
            raise AuthError()
        return cls(id=user.id, role=role_claim(request) or USER_ROLE)
