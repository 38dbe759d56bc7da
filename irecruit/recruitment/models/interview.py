from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from irecruit.common.models import TimeStampedModel, UUIDModel, SoftDeleteModel
from irecruit.recruitment.constants import (
    INTERVIEW_TYPE_CHOICES, INTERVIEW_STATUS_CHOICES, SCHEDULED,
    MIN_INTERVIEW_RATING, MAX_INTERVIEW_RATING
)
from irecruit.recruitment.models.application import Application


class Interview(UUIDModel, TimeStampedModel, SoftDeleteModel):
    application = models.ForeignKey(
        Application,
        on_delete=models.PROTECT,
        related_name='interviews'
    )
    interview_type = models.CharField(max_length=16, choices=INTERVIEW_TYPE_CHOICES)
    status = models.CharField(
        max_length=16,
        choices=INTERVIEW_STATUS_CHOICES,
        default=SCHEDULED,
        db_index=True
    )
    scheduled_at = models.DateTimeField(db_index=True)
    duration_minutes = models.PositiveIntegerField(null=True, blank=True)
    location = models.CharField(max_length=255, blank=True)
    meeting_link = models.URLField(max_length=500, blank=True)
    description = models.TextField(blank=True)
    notes = models.TextField(blank=True)

    # identity account ref of the interviewer
    interviewer_ref = models.CharField(max_length=64, blank=True, db_index=True)

    feedback = models.TextField(blank=True)
    rating = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[
            MinValueValidator(MIN_INTERVIEW_RATING),
            MaxValueValidator(MAX_INTERVIEW_RATING)
        ]
    )
    completed_at = models.DateTimeField(null=True, blank=True)

    created_by_ref = models.CharField(max_length=64, blank=True)
    modified_by_ref = models.CharField(max_length=64, blank=True)

    class Meta:
        ordering = ('scheduled_at',)

    def __str__(self):
        return f'{self.get_interview_type_display()} interview at {self.scheduled_at}'
