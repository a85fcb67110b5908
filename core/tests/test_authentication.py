import pytest
from django.urls import reverse
from rest_framework import status

from auth_app.tokens import tokens_for_user


@pytest.mark.django_db
class TestCookieJWTAuthentication:
    """Token lookup order: Authorization header, then the access cookie"""

    def test_cookie_token_authenticates(self, api_client, participant):
        api_client.cookies['access_token'] = str(tokens_for_user(participant).access_token)
        resp = api_client.get(reverse('api-me'))
        assert resp.status_code == status.HTTP_200_OK
        assert resp.data['id'] == participant.id

    def test_header_wins_over_cookie(self, api_client, participant, admin_user):
        api_client.cookies['access_token'] = str(tokens_for_user(participant).access_token)
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {tokens_for_user(admin_user).access_token}')
        resp = api_client.get(reverse('api-me'))
        assert resp.data['id'] == admin_user.id
        assert resp.data['role'] == 'admin'

    def test_invalid_cookie_is_rejected(self, api_client):
        api_client.cookies['access_token'] = 'not-a-jwt'
        resp = api_client.get(reverse('api-me'))
        assert resp.status_code == status.HTTP_401_UNAUTHORIZED

    def test_no_token_is_anonymous(self, api_client):
        resp = api_client.get(reverse('api-me'))
        assert resp.status_code == status.HTTP_401_UNAUTHORIZED
        assert resp.data == {'message': 'Authentication credentials were not provided.'}
