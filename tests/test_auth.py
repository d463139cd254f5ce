"""
Tests for bearer-token authentication.
"""

import pytest

from booktalk.api.auth import Identity, authenticate_request
from booktalk.core.errors import APIError, UnauthenticatedError
from booktalk.core.security import create_access_token

from conftest import API, auth

VALID_LOOKING_ID = '0' * 32

PROTECTED = [
    ('get', '/auth/profile'),
    ('post', '/auth/profile'),
    ('post', '/books'),
    ('delete', f'/books/{VALID_LOOKING_ID}'),
    ('post', '/discussions'),
    ('patch', f'/discussions/{VALID_LOOKING_ID}'),
    ('delete', f'/discussions/{VALID_LOOKING_ID}'),
    ('post', f'/discussions/{VALID_LOOKING_ID}/join'),
    ('post', f'/discussions/{VALID_LOOKING_ID}/unjoin'),
    ('post', '/comments'),
    ('delete', f'/comments/{VALID_LOOKING_ID}'),
    ('post', f'/comments/{VALID_LOOKING_ID}/like'),
    ('post', '/photo/avatar'),
    ('delete', '/photo/avatar'),
    ('post', '/photo/cover'),
    ('delete', f'/photo/cover/{VALID_LOOKING_ID}'),
]


def _error(response):
    return response.get_json()['error']


@pytest.mark.parametrize('method,path', PROTECTED)
def test_malformed_token_rejected_on_every_protected_route(client, method, path):
    response = getattr(client, method)(f'{API}{path}', headers=auth('not-a-real-token'))
    assert response.status_code == 401
    assert _error(response) == {'kind': 'UnauthenticatedError', 'message': 'Authentication invalid'}


@pytest.mark.parametrize('method,path', PROTECTED)
def test_missing_header_rejected_on_every_protected_route(client, method, path):
    response = getattr(client, method)(f'{API}{path}')
    assert response.status_code == 401
    assert _error(response)['message'] == 'Authentication token missing or invalid'


def test_non_bearer_scheme_rejected(client):
    response = client.get(f'{API}/auth/profile', headers={'Authorization': 'Basic YW5uOnNlY3JldA=='})
    assert response.status_code == 401
    assert _error(response)['message'] == 'Authentication token missing or invalid'


@pytest.mark.parametrize('header', ['Bearer ', 'Bearer    '])
def test_empty_bearer_token_rejected(client, header):
    response = client.get(f'{API}/auth/profile', headers={'Authorization': header})
    assert response.status_code == 401
    assert _error(response) == {'kind': 'APIError', 'message': 'Authentication token missing'}


def test_authenticate_request_with_empty_token(app):
    with app.test_request_context(headers={'Authorization': 'Bearer   '}):
        with pytest.raises(APIError) as excinfo:
            authenticate_request()
    assert excinfo.value.status_code == 401
    assert not isinstance(excinfo.value, UnauthenticatedError)


def test_expired_token_rejected(client):
    token = create_access_token({'userId': VALID_LOOKING_ID}, 'test-secret', lifetime_minutes=-5)
    response = client.get(f'{API}/auth/profile', headers=auth(token))
    assert response.status_code == 401
    assert _error(response)['message'] == 'Authentication invalid'


def test_token_signed_with_other_secret_rejected(client):
    token = create_access_token({'userId': VALID_LOOKING_ID}, 'another-secret', lifetime_minutes=5)
    response = client.get(f'{API}/auth/profile', headers=auth(token))
    assert response.status_code == 401
    assert _error(response)['message'] == 'Authentication invalid'


def test_token_without_user_claim_rejected(client):
    token = create_access_token({'name': 'Ann'}, 'test-secret', lifetime_minutes=5)
    response = client.get(f'{API}/auth/profile', headers=auth(token))
    assert response.status_code == 401
    assert _error(response) == {'kind': 'UnauthenticatedError', 'message': 'Invalid token'}


def test_authenticate_request_returns_identity(app):
    token = create_access_token({'userId': VALID_LOOKING_ID, 'name': 'Ann'}, 'test-secret', lifetime_minutes=5)
    with app.test_request_context(headers=auth(token)):
        identity = authenticate_request()
    assert identity == Identity(user_id=VALID_LOOKING_ID, name='Ann')


def test_authenticate_request_does_not_require_a_stored_user(app):
    # Identity comes from the token alone; controllers re-fetch the user
    token = create_access_token({'userId': 'f' * 32}, 'test-secret', lifetime_minutes=5)
    with app.test_request_context(headers=auth(token)):
        assert authenticate_request().user_id == 'f' * 32


def test_authenticate_request_without_header(app):
    with app.test_request_context():
        with pytest.raises(UnauthenticatedError):
            authenticate_request()


def test_valid_token_reaches_view(client, register):
    token = register()
    response = client.get(f'{API}/auth/profile', headers=auth(token))
    assert response.status_code == 200
    assert response.get_json()['user']['email'] == 'ann@x.com'
