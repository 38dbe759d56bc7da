import logging
from typing import Optional, Protocol

from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext as _
from rest_framework.exceptions import ValidationError

from irecruit.core.exceptions import (
    ReferenceNotFound, NotFound, NotSchedulable, NotCompleted, InvalidSchedule,
    Finalized
)
from irecruit.core.utils.common import coerce_uuid, get_today, get_tomorrow
from irecruit.recruitment.constants import (
    SCHEDULED, COMPLETED, CANCELLED, NO_SHOW, INTERVIEW_SCHEDULED, INTERVIEWED,
    REJECTED, NO_SHOW_REJECTION_REASON, APPLICATION, INTERVIEWER,
    MIN_INTERVIEW_RATING, MAX_INTERVIEW_RATING
)
from irecruit.recruitment.models import Interview
from irecruit.recruitment.utils.application import ApplicationLifecycle
from irecruit.recruitment.utils.references import ReferenceChecker

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    'scheduled_at', 'interview_type', 'duration_minutes', 'location',
    'meeting_link', 'description', 'notes', 'interviewer_ref',
)


class ApplicationStatusUpdater(Protocol):
    def update_status(self, application_id, new_status, actor_ref,
                      notes: Optional[str] = None,
                      rejection_reason: Optional[str] = None): ...


class InterviewLifecycle:
    """
    Interview state machine. Each transition that affects the parent
    application calls ``status_updater.update_status`` inside the same
    transaction, so either both rows change or neither does.
    """

    def __init__(self, status_updater: Optional[ApplicationStatusUpdater] = None,
                 references=None):
        self.status_updater = status_updater or ApplicationLifecycle()
        self.references = references or ReferenceChecker()

    # Queries

    @staticmethod
    def get(interview_id, for_update=False):
        pk = coerce_uuid(interview_id)
        qs = Interview.objects.alive()
        if for_update:
            qs = qs.select_for_update()
        interview = qs.filter(pk=pk).first() if pk else None
        if interview is None:
            raise NotFound(_('Interview not found with id: {}').format(interview_id))
        return interview

    @staticmethod
    def for_application(application_id):
        return Interview.objects.alive().filter(application_id=application_id)

    @staticmethod
    def for_interviewer(interviewer_ref):
        return Interview.objects.alive().filter(interviewer_ref=interviewer_ref)

    @staticmethod
    def upcoming(start, end):
        if start > end:
            raise ValidationError(_('Start date must be before end date'))
        return Interview.objects.alive().filter(
            status=SCHEDULED,
            scheduled_at__gte=start,
            scheduled_at__lte=end
        )

    @staticmethod
    def todays():
        return Interview.objects.alive().filter(
            status=SCHEDULED,
            scheduled_at__gte=get_today(with_time=True, reset_hours=True),
            scheduled_at__lt=get_tomorrow(with_time=True, reset_hours=True)
        )

    # Commands

    def schedule_interview(self, application_ref, scheduled_at, interview_type,
                           actor_ref, **details):
        self._validate_future(scheduled_at)
        if not self.references.exists(APPLICATION, application_ref):
            raise ReferenceNotFound(APPLICATION, application_ref)
        interviewer_ref = details.get('interviewer_ref')
        if interviewer_ref and not self.references.exists(INTERVIEWER, interviewer_ref):
            raise ReferenceNotFound(INTERVIEWER, interviewer_ref)

        with transaction.atomic():
            interview = Interview.objects.create(
                application_id=application_ref,
                scheduled_at=scheduled_at,
                interview_type=interview_type,
                status=SCHEDULED,
                created_by_ref=actor_ref,
                modified_by_ref=actor_ref,
                **{
                    key: value for key, value in details.items()
                    if key in UPDATABLE_FIELDS and value is not None
                }
            )
            self.status_updater.update_status(
                application_ref, INTERVIEW_SCHEDULED, actor_ref
            )

        logger.info(
            f'Interview {interview.id} scheduled for application '
            f'{application_ref} at {scheduled_at} by {actor_ref}'
        )
        return interview

    @transaction.atomic
    def update_interview(self, interview_id, actor_ref, **changes):
        interview = self._get_scheduled(interview_id)

        if 'scheduled_at' in changes and changes['scheduled_at'] is not None:
            self._validate_future(changes['scheduled_at'])
        interviewer_ref = changes.get('interviewer_ref')
        if interviewer_ref and interviewer_ref != interview.interviewer_ref and \
                not self.references.exists(INTERVIEWER, interviewer_ref):
            raise ReferenceNotFound(INTERVIEWER, interviewer_ref)

        for field, value in changes.items():
            if field in UPDATABLE_FIELDS and value is not None:
                setattr(interview, field, value)
        interview.modified_by_ref = actor_ref
        interview.save()
        logger.info(f'Interview {interview.id} updated by {actor_ref}')
        return interview

    @transaction.atomic
    def cancel_interview(self, interview_id, actor_ref):
        interview = self.get(interview_id, for_update=True)
        interview.status = CANCELLED
        interview.mark_deleted(actor_ref)
        interview.modified_by_ref = actor_ref
        interview.save()
        logger.info(f'Interview {interview.id} cancelled by {actor_ref}')
        return interview

    @transaction.atomic
    def mark_as_completed(self, interview_id, actor_ref):
        interview = self._get_scheduled(interview_id)
        interview.status = COMPLETED
        interview.completed_at = timezone.now()
        interview.modified_by_ref = actor_ref
        interview.save()

        self.status_updater.update_status(
            interview.application_id, INTERVIEWED, actor_ref
        )
        logger.info(f'Interview {interview.id} completed')
        return interview

    @transaction.atomic
    def mark_as_no_show(self, interview_id, actor_ref):
        interview = self._get_scheduled(interview_id)
        interview.status = NO_SHOW
        interview.completed_at = timezone.now()
        interview.modified_by_ref = actor_ref
        interview.save()

        try:
            with transaction.atomic():
                self.status_updater.update_status(
                    interview.application_id,
                    REJECTED,
                    actor_ref,
                    notes=_('Candidate did not attend scheduled interview on {}').format(
                        interview.scheduled_at.isoformat()
                    ),
                    rejection_reason=NO_SHOW_REJECTION_REASON
                )
        except Finalized:
            logger.warning(
                f'Interview {interview.id} marked as no-show but application '
                f'{interview.application_id} is already finalized'
            )
        logger.info(f'Interview {interview.id} marked as no-show')
        return interview

    @transaction.atomic
    def add_feedback(self, interview_id, feedback, rating, actor_ref):
        if not MIN_INTERVIEW_RATING <= rating <= MAX_INTERVIEW_RATING:
            raise ValidationError({
                'rating': _('Rating must be between {} and {}').format(
                    MIN_INTERVIEW_RATING, MAX_INTERVIEW_RATING
                )
            })
        interview = self.get(interview_id, for_update=True)
        if interview.status != COMPLETED:
            raise NotCompleted(
                _('Feedback can only be added to completed interviews. '
                  'Current status: {}').format(interview.status)
            )
        interview.feedback = feedback
        interview.rating = rating
        interview.modified_by_ref = actor_ref
        interview.save()
        logger.info(f'Feedback added to interview {interview.id} by {actor_ref}')
        return interview

    # Helpers

    def _get_scheduled(self, interview_id):
        interview = self.get(interview_id, for_update=True)
        if interview.status != SCHEDULED:
            raise NotSchedulable(
                _('Only scheduled interviews can be updated. Current status: {}').format(
                    interview.status
                )
            )
        return interview

    @staticmethod
    def _validate_future(scheduled_at):
        if scheduled_at <= timezone.now():
            raise InvalidSchedule()
