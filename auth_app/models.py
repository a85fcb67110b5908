from django.conf import settings
from django.db import models


class Profile(models.Model):
    """
    Extra identity data for a Django user.

    - name: display name, used by the results name filter.
    - role: 'admin' may author quizzes and see all results, 'user' takes quizzes.
    """
    ROLE_ADMIN = 'admin'
    ROLE_USER = 'user'
    ROLE_CHOICES = (
        (ROLE_ADMIN, 'Admin'),
        (ROLE_USER, 'User'),
    )

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='profile',
    )
    name = models.CharField(max_length=150)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_USER)

    def __str__(self) -> str:
        return f'Profile({self.user_id}): {self.name} [{self.role}]'


def display_name(user) -> str:
    """Profile name if present, otherwise the username"""
    profile = getattr(user, 'profile', None)
    if profile is not None and profile.name:
        return profile.name
    return getattr(user, 'username', '') or ''


def role_of(user) -> str:
    profile = getattr(user, 'profile', None)
    return profile.role if profile is not None else Profile.ROLE_USER
