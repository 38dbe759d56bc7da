import logging
import os
import time
import uuid

import magic
from django.conf import settings
from django.core import signing
from django.core.files.storage import default_storage
from django.urls import reverse
from django.utils.translation import gettext as _

from irecruit.core.exceptions import (
    InvalidDocument, InvalidDocumentType, DocumentNotFound, DocumentStorageError
)
from irecruit.core.utils.common import get_complete_url
from irecruit.recruitment.constants import DOCUMENT_REF_FIELDS

logger = logging.getLogger(__name__)

DOWNLOAD_TOKEN_SALT = 'irecruit.recruitment.document-download'


class DocumentStorage:
    """
    Applicant documents on Django's storage backend. Objects are keyed
    ``<owner_ref>/<purpose>/<uuid>.<ext>``; the key is the ref kept on the
    application.
    """

    def __init__(self, storage=None):
        self.storage = storage or default_storage

    def store(self, file, purpose, owner_ref):
        if purpose not in DOCUMENT_REF_FIELDS:
            raise InvalidDocumentType(_('Invalid document type: {}').format(purpose))
        extension = self.validate(file)
        key = f'{owner_ref}/{purpose}/{uuid.uuid4()}.{extension}'
        try:
            ref = self.storage.save(key, file)
        except Exception as e:
            raise DocumentStorageError(
                _('Failed to upload {}: {}').format(purpose, e)
            ) from e
        logger.info(f'Stored {purpose} for {owner_ref} as {ref}')
        return ref

    @staticmethod
    def validate(file):
        """
        :return: normalized extension of the file
        """
        if not file or not getattr(file, 'name', None):
            raise InvalidDocument(_('File is empty'))

        extension = os.path.splitext(file.name)[1].lstrip('.').lower()
        if extension not in settings.DOCUMENT_ALLOWED_EXTENSIONS:
            raise InvalidDocument(
                _('Invalid file extension. Allowed: {}').format(
                    ', '.join(settings.DOCUMENT_ALLOWED_EXTENSIONS)
                )
            )

        content_type = getattr(file, 'content_type', None)
        if content_type and content_type not in settings.DOCUMENT_ALLOWED_CONTENT_TYPES:
            raise InvalidDocument(_('Only PDF files are allowed'))

        if not file.size:
            raise InvalidDocument(_('File is empty'))
        if file.size > settings.DOCUMENT_MAX_SIZE:
            raise InvalidDocument(
                _('File size exceeds maximum allowed size of {} MB').format(
                    settings.DOCUMENT_MAX_SIZE // (1024 * 1024)
                )
            )

        file.seek(0)
        detected = magic.from_buffer(file.read(2048), mime=True)
        file.seek(0)
        if detected not in settings.DOCUMENT_ALLOWED_CONTENT_TYPES:
            raise InvalidDocument(_('Only PDF files are allowed'))
        return extension

    def delete(self, ref):
        if not ref:
            return
        try:
            self.storage.delete(ref)
        except Exception as e:
            raise DocumentStorageError(
                _('Failed to delete document {}: {}').format(ref, e)
            ) from e
        logger.info(f'Deleted document {ref}')

    def open(self, ref):
        try:
            if not self.storage.exists(ref):
                raise DocumentNotFound()
            return self.storage.open(ref, 'rb')
        except DocumentNotFound:
            raise
        except Exception as e:
            raise DocumentStorageError(
                _('Failed to read document {}: {}').format(ref, e)
            ) from e

    @staticmethod
    def presigned_url(ref, expiry_minutes):
        expiry_minutes = int(expiry_minutes)
        if not 0 < expiry_minutes <= settings.DOCUMENT_URL_MAX_EXPIRY_MINUTES:
            raise InvalidDocument(
                _('Expiry must be between 1 and {} minutes').format(
                    settings.DOCUMENT_URL_MAX_EXPIRY_MINUTES
                )
            )
        token = signing.dumps(
            {'ref': ref, 'exp': int(time.time()) + expiry_minutes * 60},
            salt=DOWNLOAD_TOKEN_SALT,
            compress=True
        )
        return get_complete_url(
            reverse('api_v1:recruitment:document-download', kwargs={'token': token})
        )

    @staticmethod
    def ref_for_token(token):
        """
        :return: document ref of a presigned url token
        :raises DocumentNotFound: for tampered or expired tokens
        """
        try:
            data = signing.loads(token, salt=DOWNLOAD_TOKEN_SALT)
        except signing.BadSignature:
            raise DocumentNotFound(_('Invalid download link'))
        if not isinstance(data, dict) or data.get('exp', 0) < time.time():
            raise DocumentNotFound(_('Download link has expired'))
        return data['ref']
