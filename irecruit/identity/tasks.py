import logging

from django.conf import settings
from django.utils import timezone

from irecruit.identity.constants import LOG_PREFIX
from irecruit.identity.models import ProcessedEvent
from irecruit.identity.streams import replay_parked

logger = logging.getLogger(__name__)


def purge_processed_events(days=None):
    days = settings.PROCESSED_EVENT_RETENTION_DAYS if days is None else int(days)
    threshold = timezone.now() - timezone.timedelta(days=days)
    deleted = ProcessedEvent.objects.purge_processed_before(threshold)
    logger.info(
        f'{LOG_PREFIX} Purged {deleted} processed events older than {threshold.isoformat()}.'
    )
    return deleted


def replay_parked_identity_events(stream=None):
    return replay_parked(stream=stream)


def report_failed_identity_events():
    failures = ProcessedEvent.objects.retryable_failures(
        settings.IDENTITY_EVENT_MAX_DELIVERIES
    ).order_by('processed_at')
    for failure in failures:
        logger.warning(
            f'{LOG_PREFIX} {failure.event_type} event {failure.event_id} for '
            f'{failure.related_entity_id or "unknown entity"} failed '
            f'{failure.attempts} time(s): {failure.error_message}'
        )
    return failures.count()
