"""
Tests for error normalization.
"""

from werkzeug.exceptions import MethodNotAllowed, NotFound

from booktalk.api.error_handlers import GENERIC_MESSAGE, normalize_error
from booktalk.core.errors import (
    APIError,
    BadRequestError,
    DuplicateKeyError,
    InvalidIdentifierError,
    NotFoundError,
    UnauthenticatedError,
    ValidationFailedError,
)

from conftest import API


def test_validation_failure_joins_field_messages():
    status, body = normalize_error(ValidationFailedError(
        ['email: Field required', 'password: String should have at least 6 characters'],
        ['email', 'password']
    ))
    assert status == 400
    assert body == {'error': {
        'kind': 'ValidationError',
        'message': 'email: Field required, password: String should have at least 6 characters',
    }}


def test_invalid_identifier_names_field_and_value():
    status, body = normalize_error(InvalidIdentifierError('commentId', 'xyz'))
    assert status == 400
    assert body['error'] == {'kind': 'InvalidIdentifierError', 'message': 'Invalid value for commentId: xyz'}


def test_duplicate_key_names_fields():
    status, body = normalize_error(DuplicateKeyError(['email']))
    assert status == 400
    assert body['error']['message'] == 'Duplicate field value entered for email'


def test_domain_errors_keep_their_status():
    assert normalize_error(BadRequestError('bad'))[0] == 400
    assert normalize_error(UnauthenticatedError('who'))[0] == 401
    status, body = normalize_error(NotFoundError('gone'))
    assert status == 404
    assert body['error'] == {'kind': 'NotFoundError', 'message': 'gone'}


def test_generic_api_error_uses_given_status():
    status, body = normalize_error(APIError('Authentication token missing', 401))
    assert status == 401
    assert body['error']['kind'] == 'APIError'


def test_http_exceptions():
    status, body = normalize_error(NotFound())
    assert (status, body['error']['kind'], body['error']['message']) == (404, 'NotFoundError', 'Not Found')
    assert normalize_error(MethodNotAllowed())[0] == 405


def test_unexpected_error_is_generic_500():
    status, body = normalize_error(RuntimeError('connection reset by peer'))
    assert status == 500
    assert body['error'] == {'kind': 'InternalServerError', 'message': GENERIC_MESSAGE}


def test_unknown_route_returns_envelope(client):
    response = client.get(f'{API}/nowhere')
    assert response.status_code == 404
    assert response.get_json() == {'error': {'kind': 'NotFoundError', 'message': 'Not Found'}}


def test_wrong_method_returns_envelope(client):
    response = client.put(f'{API}/books')
    assert response.status_code == 405
    assert response.get_json()['error']['kind'] == 'MethodNotAllowedError'


def test_unhandled_view_error_returns_single_500(app, client):
    @app.route('/boom')
    def boom():
        raise RuntimeError('kaboom')

    response = client.get('/boom')
    assert response.status_code == 500
    assert response.get_json()['error']['message'] == GENERIC_MESSAGE
    assert 'kaboom' not in response.get_data(as_text=True)


def test_non_object_body_is_validation_error(client, register):
    token = register()
    response = client.post(f'{API}/books', json=['not', 'an', 'object'], headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 400
    assert response.get_json()['error']['kind'] == 'ValidationError'
