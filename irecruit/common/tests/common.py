import contextlib

from django.db import transaction
from django.test import TestCase
from rest_framework.test import APITestCase

from irecruit.identity.constants import APPLICANT, HR

IN_MEMORY_STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.InMemoryStorage',
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}


class BaseTestCase(TestCase):

    @contextlib.contextmanager
    def atomicSubTest(self, **kwargs):
        """
        :keyword kwargs: kwargs to pass in subTest
        """
        with self.subTest(**kwargs):
            try:
                with transaction.atomic():
                    yield
                    raise transaction.TransactionManagementError('rollback')
            except transaction.TransactionManagementError:
                pass


class RecruitAPITestCase(APITestCase):
    """
    Authenticates requests the way the API gateway forwards them.
    """

    def login_as(self, account_id, role):
        self.client.credentials(
            HTTP_X_ACCOUNT_ID=str(account_id),
            HTTP_X_ACCOUNT_ROLE=role
        )

    def login_as_applicant(self, job_seeker):
        self.login_as(job_seeker.identity_ref, APPLICANT)

    def login_as_hr(self, staff_member):
        self.login_as(staff_member.identity_ref, HR)

    def assertErrorCode(self, response, status_code, code):
        self.assertEqual(response.status_code, status_code, response.data)
        self.assertEqual(response.data.get('code'), code)
