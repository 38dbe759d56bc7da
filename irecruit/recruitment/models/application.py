from django.db import models
from django.db.models import Q
from django.utils import timezone

from irecruit.common.models import TimeStampedModel, UUIDModel, SoftDeleteModel
from irecruit.recruitment.constants import (
    APPLICATION_STATUS_CHOICES, SUBMITTED, TERMINAL_APPLICATION_STATUSES,
    DOCUMENT_REF_FIELDS
)


class Application(UUIDModel, TimeStampedModel, SoftDeleteModel):
    # JobSeeker.id and JobPosting.id; existence is checked by
    # ReferenceChecker before any write
    applicant_ref = models.UUIDField(db_index=True)
    job_posting_ref = models.UUIDField(db_index=True)

    # identity account refs of the people acting on the application
    submitter_ref = models.CharField(max_length=64)
    reviewer_ref = models.CharField(max_length=64, blank=True)
    modified_by_ref = models.CharField(max_length=64, blank=True)

    cover_letter_ref = models.CharField(max_length=512, blank=True)
    resume_ref = models.CharField(max_length=512, blank=True)
    portfolio_ref = models.CharField(max_length=512, blank=True)

    status = models.CharField(
        max_length=32,
        choices=APPLICATION_STATUS_CHOICES,
        default=SUBMITTED,
        db_index=True
    )
    submitted_at = models.DateTimeField(default=timezone.now)
    reviewed_at = models.DateTimeField(null=True, blank=True)
    interview_scheduled_at = models.DateTimeField(null=True, blank=True)
    interviewed_at = models.DateTimeField(null=True, blank=True)
    offer_extended_at = models.DateTimeField(null=True, blank=True)
    finalized_at = models.DateTimeField(null=True, blank=True)

    hr_notes = models.TextField(blank=True)
    rejection_reason = models.TextField(blank=True)

    class Meta(TimeStampedModel.Meta):
        constraints = [
            models.UniqueConstraint(
                fields=['applicant_ref', 'job_posting_ref'],
                condition=Q(deleted=False),
                name='unique_live_application_per_posting'
            ),
        ]

    def __str__(self):
        return f'{self.applicant_ref} -> {self.job_posting_ref} ({self.status})'

    @property
    def is_finalized(self):
        return self.status in TERMINAL_APPLICATION_STATUSES

    @property
    def document_refs(self):
        return {
            document_type: getattr(self, field)
            for document_type, field in DOCUMENT_REF_FIELDS.items()
        }
