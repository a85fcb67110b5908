import re
from django.contrib.auth.models import User
from rest_framework.exceptions import ValidationError

from core.utils.permissions import ADMIN_ROLE, USER_ROLE

EMAIL_REGEX = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
SPECIAL_CHARACTER_REGEX = r"[!@#$%^&*(),.?\":{}|<>]"
ROLES = (ADMIN_ROLE, USER_ROLE)


def validate_email_format(email: str):
    """Checks the email format"""
    if not re.match(EMAIL_REGEX, email):
        raise ValidationError({"email": "Invalid email address."})


def validate_email_unique(email: str):
    """Checks if email already exists"""
    if User.objects.filter(email__iexact=email).exists():
        raise ValidationError({"email": "Email address is already in use."})


def validate_password_strength(password: str):
    """Checks the password strength"""
    if len(password) < 8:
        raise ValidationError(
            {"password": "Password must be at least 8 characters long."})
    if not re.search(r"[A-Z]", password):
        raise ValidationError(
            {"password": "At least one uppercase letter is required."})
    if not re.search(r"[a-z]", password):
        raise ValidationError(
            {"password": "At least one lowercase letter is required."})
    if not re.search(r"\d", password):
        raise ValidationError(
            {"password": "At least one digit is required."})
    if not re.search(SPECIAL_CHARACTER_REGEX, password):
        raise ValidationError(
            {"password": "At least one special character is required."})


def validate_non_empty(value, field_name: str) -> str:
    """Rejects blank or non-string values, returns the stripped string"""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError({field_name: "This field may not be blank."})
    return value.strip()


def validate_role(role: str) -> str:
    """Accepts only the known roles"""
    if role not in ROLES:
        raise ValidationError({"role": f"Role must be one of: {', '.join(ROLES)}."})
    return role
