import json
import uuid
from unittest.mock import MagicMock, patch

from django.test import TestCase
from django.utils import timezone
from freezegun import freeze_time

from irecruit.core.exceptions import (
    ReferenceNotFound, NotFound, DuplicateSubmission, Finalized,
    InvalidTransition, Forbidden, InvalidDocumentType, DocumentNotFound,
    DocumentStorageError
)
from irecruit.identity.tests.factory import JobSeekerFactory, StaffMemberFactory
from irecruit.recruitment.api.v1.tests.factory import (
    ApplicationFactory, JobPostingFactory
)
from irecruit.recruitment.constants import (
    SUBMITTED, UNDER_REVIEW, INTERVIEW_SCHEDULED, INTERVIEWED, OFFER_EXTENDED,
    ACCEPTED, REJECTED, WITHDRAWN, COVER_LETTER, RESUME, PORTFOLIO,
    APPLICATION_TRANSITIONS, JOB_SEEKER, JOB_POSTING
)
from irecruit.recruitment.models import Application
from irecruit.recruitment.utils.application import ApplicationLifecycle


class ApplicationLifecycleTestMixin:
    def setUp(self):
        super().setUp()
        self.storage = MagicMock()
        self.lifecycle = ApplicationLifecycle(storage=self.storage)
        self.hr = StaffMemberFactory()
        self.job_seeker = JobSeekerFactory()
        self.job_posting = JobPostingFactory()

    def submit(self, **kwargs):
        kwargs.setdefault('applicant_ref', self.job_seeker.id)
        kwargs.setdefault('job_posting_ref', self.job_posting.id)
        kwargs.setdefault('submitter_ref', self.job_seeker.identity_ref)
        kwargs.setdefault('document_refs', {
            COVER_LETTER: 'seeker/coverLetter/a.pdf',
            RESUME: 'seeker/resume/b.pdf',
        })
        return self.lifecycle.submit(**kwargs)


class TestApplicationSubmission(ApplicationLifecycleTestMixin, TestCase):
    def test_submit_then_duplicate(self):
        application = self.submit()

        self.assertEqual(application.status, SUBMITTED)
        self.assertIsNotNone(application.submitted_at)
        self.assertEqual(application.cover_letter_ref, 'seeker/coverLetter/a.pdf')
        self.assertEqual(application.portfolio_ref, '')

        with self.assertRaises(DuplicateSubmission):
            self.submit()
        self.assertEqual(Application.objects.count(), 1)

    def test_concurrent_duplicate_is_rejected_by_constraint(self):
        existing = self.submit()
        # the other submit passed the pre-check before this row committed
        stale_check = MagicMock()
        stale_check.return_value.filter.return_value.exists.return_value = False

        with patch.object(Application.objects, 'alive', stale_check):
            with self.assertRaises(DuplicateSubmission):
                self.submit()

        stale_check.return_value.filter.assert_called_once_with(
            applicant_ref=self.job_seeker.id, job_posting_ref=self.job_posting.id
        )
        self.assertEqual(
            list(Application.objects.alive().values_list('id', flat=True)),
            [existing.id]
        )

    def test_deleted_application_does_not_block_resubmission(self):
        application = self.submit()
        application.mark_deleted(self.job_seeker.identity_ref)
        application.save()

        self.assertEqual(self.submit().status, SUBMITTED)
        self.assertEqual(Application.objects.alive().count(), 1)

    def test_missing_references(self):
        missing = uuid.uuid4()
        with self.assertRaises(ReferenceNotFound) as cm:
            self.submit(applicant_ref=missing)
        self.assertEqual(cm.exception.entity_type, JOB_SEEKER)
        self.assertEqual(
            str(cm.exception.detail), f"Job seeker with ID '{missing}' does not exist"
        )

        with self.assertRaises(ReferenceNotFound) as cm:
            self.submit(job_posting_ref='not-a-uuid')
        self.assertEqual(cm.exception.entity_type, JOB_POSTING)
        self.assertFalse(Application.objects.exists())

    def test_unknown_document_type(self):
        with self.assertRaises(InvalidDocumentType):
            self.submit(document_refs={'photo': 'seeker/photo/x.pdf'})

    def test_submission_event_is_published_after_commit(self):
        with patch('irecruit.recruitment.utils.events.redix') as redix:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                application = self.submit()

        self.assertEqual(len(callbacks), 1)
        stream, fields = redix.general.return_value.xadd.call_args[0]
        event = json.loads(fields['payload'])
        self.assertEqual(stream, 'platform.application.submitted')
        self.assertEqual(event['eventType'], 'APPLICATION_SUBMITTED')
        self.assertEqual(event['applicationId'], str(application.id))
        self.assertEqual(event['companyId'], str(self.job_posting.company_id))

    def test_queries(self):
        application = self.submit()
        ApplicationFactory(status=REJECTED)

        self.assertEqual(list(self.lifecycle.for_applicant(self.job_seeker.id)), [application])
        self.assertEqual(
            list(self.lifecycle.for_job_posting(self.job_posting.id, status=SUBMITTED)),
            [application]
        )
        self.assertFalse(
            self.lifecycle.for_job_posting(self.job_posting.id, status=REJECTED).exists()
        )
        self.assertEqual(
            list(self.lifecycle.for_company(self.job_posting.company_id)), [application]
        )
        with self.assertRaises(NotFound):
            self.lifecycle.get(uuid.uuid4())
        with self.assertRaises(NotFound):
            self.lifecycle.get('garbage')


class TestApplicationStatus(ApplicationLifecycleTestMixin, TestCase):
    def test_transitions_follow_review_order(self):
        application = self.submit()

        with self.assertRaises(InvalidTransition) as cm:
            self.lifecycle.update_status(application.id, OFFER_EXTENDED, self.hr.identity_ref)
        self.assertEqual(
            str(cm.exception.detail),
            'Invalid status transition from SUBMITTED to OFFER_EXTENDED'
        )

        self.lifecycle.update_status(application.id, UNDER_REVIEW, self.hr.identity_ref)
        application = self.lifecycle.update_status(
            application.id, INTERVIEW_SCHEDULED, self.hr.identity_ref
        )
        self.assertEqual(application.status, INTERVIEW_SCHEDULED)
        self.assertEqual(application.reviewer_ref, self.hr.identity_ref)

    def test_only_listed_transitions_are_accepted(self):
        for from_status, allowed in APPLICATION_TRANSITIONS.items():
            for to_status in APPLICATION_TRANSITIONS:
                if to_status == from_status:
                    continue
                application = ApplicationFactory(status=from_status)
                with self.subTest(from_status=from_status, to_status=to_status):
                    if from_status in (ACCEPTED, REJECTED, WITHDRAWN):
                        with self.assertRaises(Finalized):
                            self.lifecycle.update_status(application.id, to_status, 'hr')
                    elif to_status in allowed:
                        self.lifecycle.update_status(application.id, to_status, 'hr')
                    else:
                        with self.assertRaises(InvalidTransition):
                            self.lifecycle.update_status(application.id, to_status, 'hr')

    def test_status_change_stamps_timestamps_once(self):
        application = self.submit()
        with freeze_time('2026-03-02 09:00:00'):
            self.lifecycle.update_status(application.id, UNDER_REVIEW, 'hr')
        with freeze_time('2026-03-03 09:00:00'):
            application = self.lifecycle.update_status(
                application.id, UNDER_REVIEW, 'hr', notes='second look'
            )
        self.assertEqual(application.reviewed_at.day, 2)
        self.assertEqual(application.hr_notes, 'second look')

        for status in (INTERVIEW_SCHEDULED, INTERVIEWED, OFFER_EXTENDED, ACCEPTED):
            application = self.lifecycle.update_status(application.id, status, 'hr')
        self.assertIsNotNone(application.interview_scheduled_at)
        self.assertIsNotNone(application.interviewed_at)
        self.assertIsNotNone(application.offer_extended_at)
        self.assertIsNotNone(application.finalized_at)

    def test_notes_and_rejection_reason_are_appended(self):
        application = self.submit()
        self.lifecycle.update_status(application.id, UNDER_REVIEW, 'hr', notes='Strong CV')
        application = self.lifecycle.update_status(
            application.id, REJECTED, 'hr', notes='Position filled',
            rejection_reason='Position filled'
        )
        self.assertEqual(application.hr_notes, 'Strong CV\nPosition filled')
        self.assertEqual(application.rejection_reason, 'Position filled')

    def test_finalized_application_is_frozen(self):
        application = ApplicationFactory(status=REJECTED, hr_notes='closed')

        with self.assertRaises(Finalized):
            self.lifecycle.update_status(application.id, REJECTED, 'hr', notes='again')

        application.refresh_from_db()
        self.assertEqual(application.hr_notes, 'closed')

    def test_status_change_publishes_event(self):
        application = self.submit()
        with self.captureOnCommitCallbacks() as callbacks:
            self.lifecycle.update_status(application.id, UNDER_REVIEW, 'hr')
        self.assertEqual(len(callbacks), 1)

        with self.captureOnCommitCallbacks() as callbacks:
            self.lifecycle.update_status(application.id, UNDER_REVIEW, 'hr')
        self.assertEqual(len(callbacks), 0)


class TestApplicationWithdrawal(ApplicationLifecycleTestMixin, TestCase):
    def test_withdraw_own_application(self):
        application = self.submit()

        application = self.lifecycle.withdraw(
            application.id, self.job_seeker.id, self.job_seeker.identity_ref
        )

        self.assertEqual(application.status, WITHDRAWN)
        self.assertIsNotNone(application.finalized_at)

    def test_withdraw_restrictions(self):
        application = self.submit()

        with self.assertRaises(Forbidden):
            self.lifecycle.withdraw(application.id, JobSeekerFactory().id, 'someone')

        accepted = ApplicationFactory(status=ACCEPTED)
        with self.assertRaises(Finalized):
            self.lifecycle.withdraw(accepted.id, accepted.applicant_ref, 'owner')

        application.refresh_from_db()
        self.assertEqual(application.status, SUBMITTED)


class TestApplicationDocuments(ApplicationLifecycleTestMixin, TestCase):
    def test_soft_delete_survives_storage_failure(self):
        application = self.submit(document_refs={
            COVER_LETTER: 'seeker/coverLetter/a.pdf',
            RESUME: 'seeker/resume/b.pdf',
            PORTFOLIO: 'seeker/portfolio/c.pdf',
        })
        self.storage.delete.side_effect = [
            None, DocumentStorageError('bucket unavailable'), None
        ]

        with self.assertLogs('irecruit.recruitment.utils.application', level='WARNING'):
            self.lifecycle.soft_delete(application.id, self.hr.identity_ref)

        self.assertEqual(self.storage.delete.call_count, 3)
        application = Application.objects.get(pk=application.id)
        self.assertTrue(application.deleted)
        self.assertEqual(application.deleted_by_ref, self.hr.identity_ref)
        with self.assertRaises(NotFound):
            self.lifecycle.get(application.id)

    def test_soft_delete_skips_missing_documents(self):
        application = self.submit(document_refs={RESUME: 'seeker/resume/b.pdf'})
        self.lifecycle.soft_delete(application.id, self.hr.identity_ref)
        self.storage.delete.assert_called_once_with('seeker/resume/b.pdf')

    def test_presigned_url(self):
        application = self.submit()
        self.storage.presigned_url.return_value = 'http://testserver/documents/x/'

        url = self.lifecycle.generate_presigned_url(application.id, RESUME, 30)

        self.assertEqual(url, 'http://testserver/documents/x/')
        self.storage.presigned_url.assert_called_once_with('seeker/resume/b.pdf', 30)

    def test_presigned_url_errors(self):
        application = self.submit()

        with self.assertRaises(InvalidDocumentType):
            self.lifecycle.generate_presigned_url(application.id, 'photo', 30)
        with self.assertRaises(DocumentNotFound):
            self.lifecycle.generate_presigned_url(application.id, PORTFOLIO, 30)
        with self.assertRaises(NotFound):
            self.lifecycle.generate_presigned_url(uuid.uuid4(), RESUME, 30)
