from unittest.mock import MagicMock, patch

from django.core.files.storage import InMemoryStorage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, override_settings
from freezegun import freeze_time

from irecruit.core.exceptions import (
    InvalidDocument, InvalidDocumentType, DocumentNotFound, DocumentStorageError
)
from irecruit.recruitment.constants import RESUME, COVER_LETTER
from irecruit.recruitment.utils.storage import DocumentStorage

PDF_CONTENT = b'%PDF-1.7\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF'


def pdf(name='resume.pdf', content=PDF_CONTENT, content_type='application/pdf'):
    return SimpleUploadedFile(name, content, content_type=content_type)


class TestDocumentStorage(SimpleTestCase):
    def setUp(self):
        self.backend = InMemoryStorage()
        self.storage = DocumentStorage(self.backend)

    def test_store_keys_by_owner_and_purpose(self):
        ref = self.storage.store(pdf('My CV.PDF'), RESUME, 'seeker-1')

        self.assertTrue(ref.startswith('seeker-1/resume/'))
        self.assertTrue(ref.endswith('.pdf'))
        with self.storage.open(ref) as stored:
            self.assertEqual(stored.read(), PDF_CONTENT)

    def test_rejects_invalid_documents(self):
        cases = {
            'extension': pdf('resume.docx'),
            'content type': pdf(content_type='image/png'),
            'empty': pdf(content=b''),
            'zip content': pdf(content=b'PK\x03\x04\x14\x00\x06\x00' + b'\x00' * 64),
            'text content': pdf(content=b'plain text renamed to pdf'),
        }
        for case, upload in cases.items():
            with self.subTest(case=case):
                with self.assertRaises(InvalidDocument):
                    self.storage.store(upload, RESUME, 'seeker-1')

    @override_settings(DOCUMENT_MAX_SIZE=16)
    def test_rejects_oversized_documents(self):
        with self.assertRaises(InvalidDocument):
            self.storage.store(pdf(), COVER_LETTER, 'seeker-1')

    def test_content_is_sniffed_not_trusted(self):
        upload = pdf(content=b'GIF89a\x01\x00\x01\x00')
        with patch('irecruit.recruitment.utils.storage.magic.from_buffer',
                   return_value='image/gif') as sniff:
            with self.assertRaises(InvalidDocument):
                self.storage.store(upload, RESUME, 'seeker-1')
        sniff.assert_called_once_with(b'GIF89a\x01\x00\x01\x00', mime=True)

    def test_rejects_unknown_purpose(self):
        with self.assertRaises(InvalidDocumentType):
            self.storage.store(pdf(), 'photo', 'seeker-1')

    def test_backend_failures_are_storage_errors(self):
        backend = MagicMock()
        backend.save.side_effect = OSError('disk full')
        backend.delete.side_effect = OSError('gone away')
        storage = DocumentStorage(backend)

        with self.assertRaises(DocumentStorageError):
            storage.store(pdf(), RESUME, 'seeker-1')
        with self.assertRaises(DocumentStorageError):
            storage.delete('seeker-1/resume/x.pdf')

    def test_delete(self):
        ref = self.storage.store(pdf(), RESUME, 'seeker-1')

        self.storage.delete(ref)
        self.storage.delete('')

        self.assertFalse(self.backend.exists(ref))
        with self.assertRaises(DocumentNotFound):
            self.storage.open(ref)

    @override_settings(BACKEND_URL='https://recruit.example.com')
    def test_presigned_url_round_trip(self):
        url = DocumentStorage.presigned_url('seeker-1/resume/x.pdf', 15)

        self.assertTrue(url.startswith('https://recruit.example.com/api/v1/recruitment/documents/'))
        token = url.rstrip('/').rsplit('/', 1)[-1]
        self.assertEqual(DocumentStorage.ref_for_token(token), 'seeker-1/resume/x.pdf')

    def test_presigned_url_expiry(self):
        with freeze_time('2026-01-01 10:00:00'):
            url = DocumentStorage.presigned_url('seeker-1/resume/x.pdf', 15)
        token = url.rstrip('/').rsplit('/', 1)[-1]

        with freeze_time('2026-01-01 10:16:00'):
            with self.assertRaises(DocumentNotFound):
                DocumentStorage.ref_for_token(token)
        with self.assertRaises(DocumentNotFound):
            DocumentStorage.ref_for_token(token[:-2] + 'xx')

        for expiry in (0, 60 * 24 * 7 + 1):
            with self.subTest(expiry=expiry):
                with self.assertRaises(InvalidDocument):
                    DocumentStorage.presigned_url('seeker-1/resume/x.pdf', expiry)
