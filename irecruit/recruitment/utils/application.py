import logging

from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.translation import gettext as _

from irecruit.core.exceptions import (
    ReferenceNotFound, NotFound, DuplicateSubmission, Finalized,
    InvalidTransition, Forbidden, InvalidDocumentType, DocumentNotFound,
    DocumentStorageError
)
from irecruit.core.utils.common import coerce_uuid
from irecruit.recruitment.constants import (
    APPLICATION_TRANSITIONS, APPLICATION_STATUS_TIMESTAMPS,
    DOCUMENT_REF_FIELDS, WITHDRAWN, JOB_SEEKER, JOB_POSTING
)
from irecruit.recruitment.models import Application, JobPosting
from irecruit.recruitment.utils.events import (
    publish_on_commit, application_event_payload,
    APPLICATION_SUBMITTED, APPLICATION_STATUS_CHANGED
)
from irecruit.recruitment.utils.references import ReferenceChecker
from irecruit.recruitment.utils.storage import DocumentStorage

logger = logging.getLogger(__name__)


def _append(existing, addition):
    if not addition:
        return existing
    return f'{existing}\n{addition}' if existing else addition


class ApplicationLifecycle:
    """
    Owns every write to :class:`Application`. Other services, interviews
    included, change an application only through :meth:`update_status`.
    """

    def __init__(self, references=None, storage=None):
        self.references = references or ReferenceChecker()
        self.storage = storage or DocumentStorage()

    # Queries

    @staticmethod
    def get(application_id, for_update=False):
        pk = coerce_uuid(application_id)
        qs = Application.objects.alive()
        if for_update:
            qs = qs.select_for_update()
        application = qs.filter(pk=pk).first() if pk else None
        if application is None:
            raise NotFound(_('Application not found'))
        return application

    @staticmethod
    def _filter_status(qs, status=None):
        return qs.filter(status=status) if status else qs

    def for_applicant(self, applicant_ref, status=None):
        return self._filter_status(
            Application.objects.alive().filter(applicant_ref=applicant_ref), status
        )

    def for_job_posting(self, job_posting_ref, status=None):
        return self._filter_status(
            Application.objects.alive().filter(job_posting_ref=job_posting_ref), status
        )

    def for_company(self, company_ref, status=None):
        postings = JobPosting.objects.filter(company_id=company_ref).values('id')
        return self._filter_status(
            Application.objects.alive().filter(job_posting_ref__in=postings), status
        )

    # Commands

    def submit(self, applicant_ref, job_posting_ref, submitter_ref, document_refs=None):
        """
        :param document_refs: mapping of document type (coverLetter, resume,
            portfolio) to a ref returned by ``DocumentStorage.store``
        """
        if not self.references.exists(JOB_SEEKER, applicant_ref):
            raise ReferenceNotFound(JOB_SEEKER, applicant_ref)
        if not self.references.exists(JOB_POSTING, job_posting_ref):
            raise ReferenceNotFound(JOB_POSTING, job_posting_ref)

        document_refs = document_refs or {}
        unknown = set(document_refs) - set(DOCUMENT_REF_FIELDS)
        if unknown:
            raise InvalidDocumentType(
                _('Invalid document type: {}').format(', '.join(sorted(unknown)))
            )

        if Application.objects.alive().filter(
            applicant_ref=applicant_ref, job_posting_ref=job_posting_ref
        ).exists():
            raise DuplicateSubmission()

        try:
            with transaction.atomic():
                application = Application.objects.create(
                    applicant_ref=applicant_ref,
                    job_posting_ref=job_posting_ref,
                    submitter_ref=submitter_ref,
                    modified_by_ref=submitter_ref,
                    submitted_at=timezone.now(),
                    **{
                        DOCUMENT_REF_FIELDS[document_type]: ref or ''
                        for document_type, ref in document_refs.items()
                    }
                )
                publish_on_commit(
                    APPLICATION_SUBMITTED,
                    **application_event_payload(
                        application,
                        JobPosting.objects.filter(pk=job_posting_ref).first()
                    )
                )
        except IntegrityError:
            # lost a race against a concurrent submit of the same pair
            raise DuplicateSubmission()

        logger.info(
            f'Application {application.id} submitted by {applicant_ref} '
            f'for job posting {job_posting_ref}'
        )
        return application

    @transaction.atomic
    def update_status(self, application_id, new_status, actor_ref, notes=None,
                      rejection_reason=None):
        application = self.get(application_id, for_update=True)
        previous_status = application.status

        if application.is_finalized:
            raise Finalized()
        if new_status not in APPLICATION_TRANSITIONS:
            raise InvalidTransition(previous_status, new_status)
        if new_status != previous_status and \
                new_status not in APPLICATION_TRANSITIONS[previous_status]:
            raise InvalidTransition(previous_status, new_status)

        application.status = new_status
        application.reviewer_ref = actor_ref
        application.modified_by_ref = actor_ref
        application.hr_notes = _append(application.hr_notes, notes)
        application.rejection_reason = _append(application.rejection_reason, rejection_reason)
        self._stamp(application, new_status)
        application.save()

        if new_status != previous_status:
            self._publish_status_change(application, previous_status, actor_ref)
            logger.info(
                f'Application {application.id} moved from {previous_status} '
                f'to {new_status} by {actor_ref}'
            )
        return application

    @transaction.atomic
    def withdraw(self, application_id, applicant_ref, actor_ref):
        application = self.get(application_id, for_update=True)
        if str(application.applicant_ref) != str(applicant_ref):
            raise Forbidden()
        if application.is_finalized:
            raise Finalized()

        previous_status = application.status
        application.status = WITHDRAWN
        application.modified_by_ref = actor_ref
        self._stamp(application, WITHDRAWN)
        application.save()

        self._publish_status_change(application, previous_status, actor_ref)
        logger.info(f'Application {application.id} withdrawn by {actor_ref}')
        return application

    def soft_delete(self, application_id, actor_ref):
        application = self.get(application_id)

        for document_type, ref in application.document_refs.items():
            if not ref:
                continue
            try:
                self.storage.delete(ref)
            except DocumentStorageError:
                logger.warning(
                    f'Could not delete {document_type} {ref} of application '
                    f'{application.id}; leaving it orphaned.',
                    exc_info=True
                )

        with transaction.atomic():
            application = self.get(application.id, for_update=True)
            application.mark_deleted(actor_ref)
            application.modified_by_ref = actor_ref
            application.save()
        logger.info(f'Application {application.id} deleted by {actor_ref}')
        return application

    def generate_presigned_url(self, application_id, document_type, expiry_minutes):
        application = self.get(application_id)
        field = DOCUMENT_REF_FIELDS.get(document_type)
        if field is None:
            raise InvalidDocumentType(
                _('Invalid document type: {}. Must be one of: {}').format(
                    document_type, ', '.join(DOCUMENT_REF_FIELDS)
                )
            )
        ref = getattr(application, field)
        if not ref:
            raise DocumentNotFound(
                _('{} not found for this application').format(document_type)
            )
        return self.storage.presigned_url(ref, expiry_minutes)

    # Helpers

    @staticmethod
    def _stamp(application, status):
        field = APPLICATION_STATUS_TIMESTAMPS.get(status)
        if field and getattr(application, field) is None:
            setattr(application, field, timezone.now())

    @staticmethod
    def _publish_status_change(application, previous_status, actor_ref):
        publish_on_commit(
            APPLICATION_STATUS_CHANGED,
            previousStatus=previous_status,
            newStatus=application.status,
            updatedBy=actor_ref,
            **application_event_payload(
                application,
                JobPosting.objects.filter(pk=application.job_posting_ref).first()
            )
        )
