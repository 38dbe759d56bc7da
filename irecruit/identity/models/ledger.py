from django.db import models
from django.utils import timezone

from irecruit.identity.constants import (
    EVENT_KIND_CHOICES, PROCESSED_EVENT_STATUS_CHOICES, PROCESSED, FAILED
)


class ProcessedEventQuerySet(models.QuerySet):
    def processed(self):
        return self.filter(status=PROCESSED)

    def failed(self):
        return self.filter(status=FAILED)

    def retryable_failures(self, max_attempts):
        return self.failed().filter(attempts__lt=max_attempts)

    def count_by_kind(self, kind):
        return self.filter(event_type=kind).count()

    def purge_processed_before(self, threshold):
        """
        Deletes PROCESSED rows older than threshold. Returns deleted count.

        A purged event id is no longer deduplicated, so threshold must lie
        well beyond the broker's redelivery window.
        """
        deleted, _ = self.processed().filter(processed_at__lt=threshold).delete()
        return deleted


class ProcessedEvent(models.Model):
    """
    One row per identity event id seen by the consumer. A PROCESSED row
    means the event's effects are committed; a FAILED row counts attempts
    that rolled back.
    """
    event_id = models.UUIDField(unique=True)
    event_type = models.CharField(max_length=32, choices=EVENT_KIND_CHOICES)
    related_entity_id = models.CharField(max_length=64, blank=True)
    processed_at = models.DateTimeField(default=timezone.now)
    status = models.CharField(
        max_length=16,
        choices=PROCESSED_EVENT_STATUS_CHOICES,
        default=PROCESSED,
        db_index=True
    )
    error_message = models.TextField(blank=True)
    attempts = models.PositiveIntegerField(default=1)

    objects = ProcessedEventQuerySet.as_manager()

    class Meta:
        indexes = [
            models.Index(
                fields=['event_type', 'processed_at'],
                name='identity_event_type_proc_idx'
            ),
        ]

    def __str__(self):
        return f'{self.event_type} {self.event_id} ({self.status})'
