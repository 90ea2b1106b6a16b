"""Tests for accounts HTTP views."""

from unittest import mock

import pytest
from django.urls import reverse

from server.apps.accounts.exceptions import AuthenticationError
from server.apps.accounts.logic.sign_in import TokenSet

_TOKENS = TokenSet(
    id_token='id-token',
    access_token='access-token',
    expires_in=3600,
    refresh_token='refresh-token',
)


def test_login(client):
    """Test login answers with camelCase tokens."""
    with mock.patch(
        'server.apps.accounts.views.sign_in.sign_in',
        return_value=_TOKENS,
    ) as sign_in:
        response = client.post(
            reverse('accounts:login'),
            {'username': 'alice', 'password': 'secret'},
            content_type='application/json',
        )

    assert response.status_code == 200
    assert response.json() == {
        'idToken': 'id-token',
        'accessToken': 'access-token',
        'expiresIn': 3600,
        'refreshToken': 'refresh-token',
    }
    sign_in.assert_called_once_with('alice', 'secret')


def test_login_missing_password(client):
    """Test login requires both credentials."""
    response = client.post(
        reverse('accounts:login'),
        {'username': 'alice'},
        content_type='application/json',
    )

    assert response.status_code == 400
    assert response.json() == {'error': 'Missing required fields: password'}


def test_login_rejected(client):
    """Test rejected credentials are a 401."""
    with mock.patch(
        'server.apps.accounts.views.sign_in.sign_in',
        side_effect=AuthenticationError('Incorrect username or password.'),
    ):
        response = client.post(
            reverse('accounts:login'),
            {'username': 'alice', 'password': 'wrong'},
            content_type='application/json',
        )

    assert response.status_code == 401
    assert response.json() == {'error': 'Incorrect username or password.'}


def test_login_without_pool(client):
    """Test sign-in is unavailable when no pool is configured."""
    response = client.post(
        reverse('accounts:login'),
        {'username': 'alice', 'password': 'secret'},
        content_type='application/json',
    )

    assert response.status_code == 503


def test_refresh_omits_missing_refresh_token(client):
    """Test refreshed sessions keep their refresh token client side."""
    tokens = TokenSet(id_token='id', access_token='access', expires_in=60)
    with mock.patch(
        'server.apps.accounts.views.sign_in.refresh',
        return_value=tokens,
    ):
        response = client.post(
            reverse('accounts:refresh'),
            {'refreshToken': 'refresh-token'},
            content_type='application/json',
        )

    assert response.status_code == 200
    assert 'refreshToken' not in response.json()


def test_logout(api_client):
    """Test logout revokes the given access token."""
    with mock.patch('server.apps.accounts.views.sign_in.sign_out') as sign_out:
        response = api_client.post(
            reverse('accounts:logout'),
            {'accessToken': 'access-token'},
            content_type='application/json',
        )

    assert response.status_code == 200
    assert response.json() == {'success': True}
    sign_out.assert_called_once_with('access-token')


def test_logout_requires_token(client):
    """Test logout is protected."""
    response = client.post(
        reverse('accounts:logout'),
        {'accessToken': 'access-token'},
        content_type='application/json',
    )

    assert response.status_code == 401
    assert response.json() == {'error': 'Authorization header is missing'}


@pytest.mark.django_db
def test_get_preferences(api_client):
    """Test defaults are served to new users."""
    response = api_client.get(reverse('accounts:preferences'))

    assert response.status_code == 200
    assert response.json() == {
        'deleteProtection': True,
        'viewMode': True,
        'itemsPerPage': 20,
        'defaultView': 'list',
    }


@pytest.mark.django_db
def test_put_preferences(api_client):
    """Test updates are stored and echoed back."""
    response = api_client.put(
        reverse('accounts:preferences'),
        {'deleteProtection': False, 'defaultView': 'grid'},
        content_type='application/json',
    )

    assert response.status_code == 200
    assert response.json()['deleteProtection'] is False
    assert response.json()['defaultView'] == 'grid'

    reloaded = api_client.get(reverse('accounts:preferences')).json()
    assert reloaded['deleteProtection'] is False
    assert reloaded['itemsPerPage'] == 20


@pytest.mark.django_db
def test_put_unknown_preference(api_client):
    """Test unknown fields are rejected."""
    response = api_client.put(
        reverse('accounts:preferences'),
        {'theme': 'dark'},
        content_type='application/json',
    )

    assert response.status_code == 400
    assert response.json() == {'error': 'Unknown preferences: theme'}


def test_preferences_require_token(client):
    """Test preferences are protected."""
    response = client.get(reverse('accounts:preferences'))

    assert response.status_code == 401


@pytest.mark.django_db
def test_preferences_with_verified_token(
    client,
    cognito_pool,
    fetch_jwks,
    make_token,
):
    """Test verified users get their own preferences."""
    response = client.put(
        reverse('accounts:preferences'),
        {'itemsPerPage': 50},
        content_type='application/json',
        HTTP_AUTHORIZATION=f'Bearer {make_token()}',
    )

    assert response.status_code == 200
    other = client.get(
        reverse('accounts:preferences'),
        HTTP_AUTHORIZATION=f'Bearer {make_token(**{"cognito:username": "bob"})}',
    )
    assert other.json()['itemsPerPage'] == 20
