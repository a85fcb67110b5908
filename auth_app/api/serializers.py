from django.contrib.auth.models import User
from django.contrib.auth import authenticate
from django.db import transaction
from rest_framework import serializers
from auth_app.models import Profile
from core.utils.validators import (
    validate_email_format,
    validate_email_unique,
    validate_non_empty,
    validate_password_strength,
    validate_role,
)


class RegisterSerializer(serializers.Serializer):
    """Serializer for user registration. The email doubles as username, 'password' is validated for strength and stored hashed"""
    name = serializers.CharField(required=True, max_length=150)
    email = serializers.EmailField(required=True, allow_blank=False)
    password = serializers.CharField(write_only=True)
    role = serializers.CharField(required=False, default=Profile.ROLE_USER)

    def validate_name(self, value: str) -> str:
        return validate_non_empty(value, field_name='name')

    def validate_email(self, value: str) -> str:
        """Validates email format and uniqueness using custom validators"""
        validate_email_format(value)
        validate_email_unique(value)
        return value.lower()

    def validate_password(self, value: str) -> str:
        """Validates the password strength using custom validator"""
        validate_password_strength(value)
        return value

    def validate_role(self, value: str) -> str:
        return validate_role(value)

    @transaction.atomic
    def create(self, validated_data: dict) -> User:
        """Creates a new User with a hashed password plus its Profile"""
        user = User(
            username=validated_data['email'],
            email=validated_data['email'],
        )
        user.set_password(validated_data['password'])
        user.save()
        Profile.objects.create(user=user, name=validated_data['name'], role=validated_data['role'])
        return user


class LoginSerializer(serializers.Serializer):
    """Validates email/password for login. Ensures that the fields are present and correct"""
    email = serializers.EmailField(write_only=True, required=True)
    password = serializers.CharField(write_only=True, required=True, style={'input_type': 'password'})

    def validate(self, attrs):
        """Returns the authenticated user instance or raises a validation error"""
        email = attrs.get('email')
        password = attrs.get('password')
        user_obj = User.objects.filter(email__iexact=email).first()
        if user_obj is None:
            raise serializers.ValidationError('Invalid credentials.')
        if not user_obj.is_active and user_obj.check_password(password):
            raise serializers.ValidationError('User account is disabled.')

        user = authenticate(username=user_obj.username, password=password)

        if user is None:
            raise serializers.ValidationError('Invalid credentials.')

        attrs['user'] = user
        return attrs
