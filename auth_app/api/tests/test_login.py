import pytest
from django.conf import settings
from django.urls import reverse
from rest_framework.test import APIClient
from rest_framework import status
from rest_framework_simplejwt.tokens import AccessToken


@pytest.mark.django_db
def test_login_success(make_user):
    """Creates a user, POSTs valid credentials to /api/login/, expects 200 OK with correct body and cookies"""
    user = make_user('alice', name='Alice Example')
    client = APIClient()
    url = reverse('api-login')
    payload = {'email': 'alice@example.com', 'password': 'Str0ng!Pass'}
    response = client.post(url, payload, format='json')
    assert response.status_code == status.HTTP_200_OK
    assert response.data['message'] == 'Login successfully!'
    assert response.data['user'] == {
        'id': user.id,
        'name': 'Alice Example',
        'email': 'alice@example.com',
        'role': 'user',
    }
    access_cookie_name = getattr(settings, 'JWT_ACCESS_COOKIE_NAME', 'access_token')
    refresh_cookie_name = getattr(settings, 'JWT_REFRESH_COOKIE_NAME', 'refresh_token')
    assert access_cookie_name in response.cookies
    assert refresh_cookie_name in response.cookies
    assert response.cookies[access_cookie_name]['httponly']
    assert response.cookies[refresh_cookie_name]['httponly']
    assert response.cookies[access_cookie_name].value == response.data['access']


@pytest.mark.django_db
def test_login_email_is_case_insensitive(make_user):
    make_user('alice')
    response = APIClient().post(
        reverse('api-login'), {'email': 'ALICE@Example.com', 'password': 'Str0ng!Pass'}, format='json'
    )
    assert response.status_code == status.HTTP_200_OK


@pytest.mark.django_db
def test_login_token_carries_role_and_name(make_user):
    """The access token exposes user_id, role and name claims"""
    user = make_user('root', role='admin', name='Root Admin')
    response = APIClient().post(
        reverse('api-login'), {'email': 'root@example.com', 'password': 'Str0ng!Pass'}, format='json'
    )
    token = AccessToken(response.data['access'])
    assert token['user_id'] in (user.id, str(user.id))
    assert token['role'] == 'admin'
    assert token['name'] == 'Root Admin'


@pytest.mark.django_db
@pytest.mark.parametrize('payload', [
    {'email': 'bob@example.com', 'password': 'wrongpass'},
    {'email': 'nobody@example.com', 'password': 'Str0ng!Pass'},
    {'email': 'bob@example.com'},
])
def test_login_invalid_credentials(make_user, payload):
    """POST invalid credentials to /api/login/, expect 401 Unauthorized with a message"""
    make_user('bob')
    client = APIClient()
    url = reverse('api-login')
    response = client.post(url, payload, format='json')
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert 'message' in response.data
    assert 'access_token' not in response.cookies


@pytest.mark.django_db
def test_login_internal_error_returns_500(monkeypatch, make_user):
    """Forces an unexpected exception during validation to hit the generic 500 branch"""
    make_user('crash')
    from auth_app.api import serializers as auth_serializers
    def boom(*args, **kwargs):
        raise Exception('unexpected')
    monkeypatch.setattr(auth_serializers.LoginSerializer, 'is_valid', boom)
    client = APIClient()
    url = reverse('api-login')
    response = client.post(url, {'email': 'crash@example.com', 'password': 'whatever'}, format='json')
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.data == {'message': 'Internal server error.'}


@pytest.mark.django_db
def test_me_returns_token_identity(authenticate, admin_user):
    response = authenticate(admin_user).get(reverse('api-me'))
    assert response.status_code == status.HTTP_200_OK
    assert response.data == {'id': admin_user.id, 'name': 'Alice Admin', 'email': 'alice@example.com', 'role': 'admin'}


@pytest.mark.django_db
def test_me_requires_authentication(api_client):
    assert api_client.get(reverse('api-me')).status_code == status.HTTP_401_UNAUTHORIZED
