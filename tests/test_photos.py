"""
Tests for avatar and cover uploads.
"""

import io

import pytest

from conftest import API, auth


@pytest.fixture
def token(register):
    return register()


def _image(name='pic.png', content=b'\x89PNG fake image bytes'):
    return (io.BytesIO(content), name)


def _profile(client, token):
    return client.get(f'{API}/auth/profile', headers=auth(token)).get_json()['user']


def test_upload_avatar(client, token, photo_store):
    response = client.post(f'{API}/photo/avatar', data={'file': _image()}, headers=auth(token),
                           content_type='multipart/form-data')
    assert response.status_code == 200
    body = response.get_json()
    assert body['autoCroppedUrl'].endswith('/c_auto,g_auto,w_150,h_150/avatars/avatar_1')
    assert body['optimizedUrl'].endswith('/f_auto,q_auto/avatars/avatar_1')
    assert photo_store.uploads[0]['filename'] == 'pic.png'
    assert _profile(client, token)['photo'] == body['autoCroppedUrl']


def test_replacing_avatar_discards_previous(client, token, photo_store):
    for _ in range(2):
        client.post(f'{API}/photo/avatar', data={'file': _image()}, headers=auth(token),
                    content_type='multipart/form-data')
    assert photo_store.deleted == ['avatars/avatar_1']


def test_upload_without_file(client, token):
    response = client.post(f'{API}/photo/avatar', data={}, headers=auth(token), content_type='multipart/form-data')
    assert response.status_code == 400
    assert response.get_json()['error']['message'] == 'file is required'


def test_upload_empty_file(client, token):
    response = client.post(f'{API}/photo/avatar', data={'file': _image(content=b'')}, headers=auth(token),
                           content_type='multipart/form-data')
    assert response.status_code == 400
    assert response.get_json()['error']['message'] == 'file is empty'


def test_upload_failure_maps_to_502(client, token, photo_store):
    photo_store.fail = True
    response = client.post(f'{API}/photo/avatar', data={'file': _image()}, headers=auth(token),
                           content_type='multipart/form-data')
    assert response.status_code == 502
    assert response.get_json()['error']['kind'] == 'PhotoStorageError'
    assert _profile(client, token)['photo'] is None


def test_delete_avatar(client, token, photo_store):
    client.post(f'{API}/photo/avatar', data={'file': _image()}, headers=auth(token),
                content_type='multipart/form-data')
    response = client.delete(f'{API}/photo/avatar', headers=auth(token))
    assert response.status_code == 200
    assert photo_store.deleted == ['avatars/avatar_1']
    assert _profile(client, token)['photo'] is None


def test_delete_avatar_when_none(client, token):
    response = client.delete(f'{API}/photo/avatar', headers=auth(token))
    assert response.status_code == 400
    assert response.get_json()['error']['message'] == 'No photo to delete'


def test_upload_cover(client, token, create_book):
    book = create_book(token)
    response = client.post(f'{API}/photo/cover', data={'file': _image(), 'bookId': book['id']},
                           headers=auth(token), content_type='multipart/form-data')
    assert response.status_code == 200
    assert response.get_json()['autoCroppedUrl'].endswith('/c_auto,g_auto,w_1200,h_1800/covers/cover_1')

    stored = client.get(f'{API}/books/{book["id"]}').get_json()['book']
    assert stored['imageLinks']['bookCoverId'] == 'covers/cover_1'
    assert stored['imageLinks']['thumbnail'] == response.get_json()['autoCroppedUrl']


def test_upload_cover_requires_book_id(client, token):
    response = client.post(f'{API}/photo/cover', data={'file': _image()}, headers=auth(token),
                           content_type='multipart/form-data')
    assert response.status_code == 400
    assert response.get_json()['error']['message'] == 'bookId is required'


def test_upload_cover_for_missing_book(client, token, photo_store):
    response = client.post(f'{API}/photo/cover', data={'file': _image(), 'bookId': '9' * 32},
                           headers=auth(token), content_type='multipart/form-data')
    assert response.status_code == 404
    assert photo_store.uploads == []


def test_delete_cover(client, token, create_book, photo_store):
    book = create_book(token)
    client.post(f'{API}/photo/cover', data={'file': _image(), 'bookId': book['id']},
                headers=auth(token), content_type='multipart/form-data')

    response = client.delete(f'{API}/photo/cover/{book["id"]}', headers=auth(token))
    assert response.status_code == 200
    assert photo_store.deleted == ['covers/cover_1']
    assert client.get(f'{API}/books/{book["id"]}').get_json()['book']['imageLinks']['bookCoverId'] is None


def test_delete_cover_when_none(client, token, create_book):
    book = create_book(token)
    response = client.delete(f'{API}/photo/cover/{book["id"]}', headers=auth(token))
    assert response.status_code == 404
    assert response.get_json()['error']['message'] == 'No cover to delete for this book'
