import pytest  # required to define shared fixtures
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from auth_app.models import Profile
from auth_app.tokens import tokens_for_user
from quiz_app.services import authoring
from quiz_app.services.authoring import QuestionData


@pytest.fixture
def api_client():
    """Returns a DRF APIClient instance for making HTTP requests in tests"""
    return APIClient()


@pytest.fixture
def make_user(db):
    """Factory for users with a profile; role defaults to 'user'"""
    def _make(username, role=Profile.ROLE_USER, name=None, email=None, password='Str0ng!Pass'):
        User = get_user_model()
        user = User.objects.create_user(
            username=username,
            email=email or f'{username}@example.com',
            password=password,
        )
        Profile.objects.create(user=user, name=name or username.title(), role=role)
        return user
    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user('alice', role=Profile.ROLE_ADMIN, name='Alice Admin')


@pytest.fixture
def other_admin(make_user):
    return make_user('bob', role=Profile.ROLE_ADMIN, name='Bob Boss')


@pytest.fixture
def participant(make_user):
    return make_user('carol', name='Carol Player')


@pytest.fixture
def authenticate(api_client):
    """Sets a Bearer access token (with role claim) for 'user' on the shared client"""
    def _auth(user):
        token = tokens_for_user(user).access_token
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        return api_client
    return _auth


@pytest.fixture
def make_quiz(admin_user):
    """Creates a quiz through the authoring service; two capital-city questions by default"""
    def _make(owner=None, title='Capitals', questions=None, **kwargs):
        if questions is None:
            questions = [
                QuestionData('Capital of France?', ['Paris', 'Rome', 'Madrid', 'Berlin'], 'Paris'),
                QuestionData('Capital of Italy?', ['Paris', 'Rome', 'Madrid', 'Berlin'], 'Rome'),
            ]
        return authoring.create_quiz(owner or admin_user, title, questions=questions, **kwargs)
    return _make
