"""
Image hosting through the Cloudinary upload API.
"""

import hashlib
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from booktalk.core.config import CloudinarySettings
from booktalk.core.errors import PhotoStorageError

logger = logging.getLogger(__name__)

API_BASE = 'https://api.cloudinary.com/v1_1'
DELIVERY_BASE = 'https://res.cloudinary.com'


@dataclass
class UploadedPhoto:
    public_id: str
    secure_url: str
    optimized_url: str
    auto_crop_url: str


def sign_params(params: Dict[str, str], api_secret: str) -> str:
    """Cloudinary request signature: SHA-1 of the sorted params plus the secret."""
    to_sign = '&'.join(f"{key}={params[key]}" for key in sorted(params))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode('utf-8')).hexdigest()


class CloudinaryPhotoStore:
    """Uploads, transforms and deletes images on Cloudinary."""

    def __init__(self, settings: CloudinarySettings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()
        if not settings.configured:
            logger.warning("Cloudinary credentials are not set; photo uploads are disabled")

    def _signed(self, params: Dict[str, str]) -> Dict[str, str]:
        params = dict(params, timestamp=str(int(time.time())))
        params['signature'] = sign_params(params, self.settings.api_secret)
        params['api_key'] = self.settings.api_key
        return params

    def _send(self, url: str, data: Dict[str, str], files=None) -> requests.Response:
        return self.session.post(url, data=data, files=files, timeout=self.settings.timeout)

    def _post(self, action: str, data: Dict[str, str], files=None) -> dict:
        if not self.settings.configured:
            raise PhotoStorageError("Photo storage is not configured")
        url = f"{API_BASE}/{self.settings.cloud_name}/image/{action}"
        try:
            response = self._send(url, self._signed(data), files)
        except requests.RequestException as e:
            logger.error(f"Cloudinary {action} failed: {e}")
            raise PhotoStorageError(f"Error during image {action}") from e
        if response.status_code >= 400:
            logger.error(f"Cloudinary {action} rejected: {response.status_code} {response.text[:200]}")
            raise PhotoStorageError(f"Error during image {action}")
        return response.json()

    def url(self, public_id: str, transformation: str) -> str:
        return f"{DELIVERY_BASE}/{self.settings.cloud_name}/image/upload/{transformation}/{public_id}"

    def upload(self, content: bytes, filename: str, folder: str, width: int, height: int, prefix: str = 'photo') -> UploadedPhoto:
        """Upload image bytes and return delivery URLs for the stored image."""
        if not content:
            raise PhotoStorageError("No file content available")

        result = self._post(
            'upload',
            {'folder': folder, 'public_id': f"{prefix}_{uuid.uuid4().hex}"},
            files={'file': (filename, content)}
        )
        public_id = result['public_id']
        logger.info(f"Uploaded image {public_id}")
        return UploadedPhoto(
            public_id=public_id,
            secure_url=result.get('secure_url', ''),
            optimized_url=self.url(public_id, 'f_auto,q_auto'),
            auto_crop_url=self.url(public_id, f'c_auto,g_auto,w_{width},h_{height}'),
        )

    def delete(self, public_id: str):
        """Remove an image; raises PhotoStorageError unless Cloudinary reports 'ok'."""
        result = self._post('destroy', {'public_id': public_id})
        if result.get('result') != 'ok':
            logger.error(f"Cloudinary could not delete {public_id}: {result}")
            raise PhotoStorageError("Error deleting the photo from cloud storage")
        logger.info(f"Deleted image {public_id}")
