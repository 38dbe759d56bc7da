"""
Platform events for the notification service, appended to Redis streams
once the transaction that produced them has committed.
"""
import json
import logging
import uuid

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from redis.exceptions import RedisError

from irecruit.core import redix

logger = logging.getLogger(__name__)

APPLICATION_SUBMITTED = 'APPLICATION_SUBMITTED'
APPLICATION_STATUS_CHANGED = 'APPLICATION_STATUS_CHANGED'

EVENT_STREAM_KEYS = {
    APPLICATION_SUBMITTED: 'application-submitted',
    APPLICATION_STATUS_CHANGED: 'application-status-changed',
}


def _publish(stream, event):
    try:
        redix.general().xadd(
            stream,
            {'payload': json.dumps(event, default=str)},
            maxlen=settings.PLATFORM_EVENT_STREAM_MAXLEN,
            approximate=True
        )
    except RedisError:
        # the application change is committed already; notification lags
        logger.exception(f"Could not publish {event['eventType']} {event['eventId']}")


def publish_on_commit(event_type, **payload):
    event = {
        'eventId': str(uuid.uuid4()),
        'eventType': event_type,
        'occurredAt': timezone.now().isoformat(),
        **payload
    }
    stream = settings.PLATFORM_EVENT_STREAMS[EVENT_STREAM_KEYS[event_type]]
    transaction.on_commit(lambda: _publish(stream, event))
    return event


def application_event_payload(application, job_posting=None):
    company = getattr(job_posting, 'company_id', None)
    return {
        'applicationId': str(application.id),
        'applicantId': str(application.applicant_ref),
        'jobPostingId': str(application.job_posting_ref),
        'companyId': str(company) if company else None,
    }
