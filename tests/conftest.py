"""
Pytest configuration and fixtures.
"""

import pytest

from booktalk import create_app, db
from booktalk.core.config import Settings
from booktalk.core.errors import EmailDeliveryError, PhotoStorageError
from booktalk.models import User
from booktalk.models.database import init_db
from booktalk.services import UploadedPhoto

API = '/api/v1'

BOOK_1984 = {
    'title': '1984',
    'authors': ['Orwell'],
    'publisher': 'Secker',
    'description': '...',
    'publishedDate': '1949-06-08',
    'categories': ['Dystopian'],
}


class FakeMailer:
    """Records messages instead of calling Mailjet."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, to_email, subject, text_content='', html_content=''):
        if self.fail:
            raise EmailDeliveryError("Failed to send email")
        self.sent.append({
            'to': to_email,
            'subject': subject,
            'text': text_content,
            'html': html_content,
        })
        return {'Messages': [{'Status': 'success'}]}


class FakePhotoStore:
    """Records uploads and deletes instead of calling Cloudinary."""

    def __init__(self):
        self.uploads = []
        self.deleted = []
        self.fail = False

    def upload(self, content, filename, folder, width, height, prefix='photo'):
        if self.fail:
            raise PhotoStorageError("Error during image upload")
        public_id = f"{folder}/{prefix}_{len(self.uploads) + 1}"
        self.uploads.append({'public_id': public_id, 'filename': filename, 'size': len(content)})
        base = 'https://res.cloudinary.com/demo/image/upload'
        return UploadedPhoto(
            public_id=public_id,
            secure_url=f"{base}/{public_id}",
            optimized_url=f"{base}/f_auto,q_auto/{public_id}",
            auto_crop_url=f"{base}/c_auto,g_auto,w_{width},h_{height}/{public_id}",
        )

    def delete(self, public_id):
        if self.fail:
            raise PhotoStorageError("Error deleting the photo from cloud storage")
        self.deleted.append(public_id)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        jwt_secret='test-secret',
        rate_limit_requests=0,
        log_level='WARNING',
        testing=True,
    )


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def photo_store():
    return FakePhotoStore()


@pytest.fixture
def app(settings, mailer, photo_store):
    """Create and configure a test Flask application."""
    app = create_app(settings, mailer=mailer, photo_store=photo_store)
    with app.app_context():
        init_db()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create a test client."""
    return app.test_client()


def auth(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def register(client):
    """Register a user and return its access token."""
    def _register(name='Ann', email='ann@x.com', password='secret1'):
        response = client.post(f'{API}/auth/register', json={
            'name': name, 'email': email, 'password': password
        })
        assert response.status_code == 201, response.get_json()
        return response.get_json()['token']
    return _register


@pytest.fixture
def make_admin(app):
    def _make_admin(email):
        user = User.find_by_email(email)
        user.role = 'admin'
        db.session.commit()
        db.session.remove()
    return _make_admin


@pytest.fixture
def create_book(client):
    """Create a book as the given user and return its JSON."""
    def _create_book(token, **overrides):
        payload = dict(BOOK_1984, **overrides)
        response = client.post(f'{API}/books', json=payload, headers=auth(token))
        assert response.status_code == 201, response.get_json()
        return response.get_json()['book']
    return _create_book


@pytest.fixture
def create_discussion(client):
    def _create_discussion(token, book_id, **overrides):
        payload = {
            'title': 'Reading 1984',
            'book': book_id,
            'content': 'Chapters 1-5',
            'date': '2030-05-01T18:00:00Z',
            'meetingLink': 'https://meet.example.org/1984',
        }
        payload.update(overrides)
        response = client.post(f'{API}/discussions', json=payload, headers=auth(token))
        assert response.status_code == 201, response.get_json()
        return response.get_json()['discussion']
    return _create_discussion
