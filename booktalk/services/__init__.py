"""
Services package containing the external service adapters.
Includes the Mailjet mailer, the Cloudinary photo store and notifications.
"""

from .mailer import MailjetMailer
from .photo_store import CloudinaryPhotoStore, UploadedPhoto
from .notifications import notify_participation

__all__ = ['MailjetMailer', 'CloudinaryPhotoStore', 'UploadedPhoto', 'notify_participation']
