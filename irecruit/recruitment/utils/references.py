from irecruit.core.utils.common import coerce_uuid
from irecruit.identity.models import JobSeeker, DOMAIN_ENTITY_MODELS
from irecruit.recruitment.constants import (
    JOB_SEEKER, JOB_POSTING, APPLICATION, INTERVIEWER
)
from irecruit.recruitment.models import JobPosting, Application


class ReferenceChecker:
    """
    Answers whether an id referenced by a request exists, so that a missing
    reference fails with ``ReferenceNotFound`` instead of a constraint error.
    """

    def exists(self, entity_type, entity_id):
        checker = {
            JOB_SEEKER: self._job_seeker_exists,
            JOB_POSTING: self._job_posting_exists,
            APPLICATION: self._application_exists,
            INTERVIEWER: self._identity_exists,
        }.get(entity_type)
        if checker is None:
            raise ValueError(f'Unknown entity type {entity_type!r}')
        if entity_id in (None, ''):
            return False
        return checker(entity_id)

    @staticmethod
    def _job_seeker_exists(entity_id):
        pk = coerce_uuid(entity_id)
        return pk is not None and JobSeeker.objects.filter(pk=pk).exists()

    @staticmethod
    def _job_posting_exists(entity_id):
        pk = coerce_uuid(entity_id)
        return pk is not None and JobPosting.objects.alive().filter(pk=pk).exists()

    @staticmethod
    def _application_exists(entity_id):
        pk = coerce_uuid(entity_id)
        return pk is not None and Application.objects.alive().filter(pk=pk).exists()

    @staticmethod
    def _identity_exists(entity_id):
        return any(
            model.objects.filter(identity_ref=str(entity_id)).exists()
            for model in DOMAIN_ENTITY_MODELS
        )
