import logging
import time

from django.db import IntegrityError, transaction
from django.utils import timezone

from irecruit.core.exceptions import HandlerTimedOut
from irecruit.identity.constants import PROCESSED, FAILED, LOG_PREFIX
from irecruit.identity.models import ProcessedEvent

logger = logging.getLogger(__name__)


class ProcessedEventLedger:
    """
    Decides whether an identity event still has to be applied.

    ``apply_once`` runs the effect and writes the PROCESSED row in one
    transaction. The unique ``event_id`` column settles concurrent
    deliveries: the loser's insert fails, its effect rolls back and the
    delivery is treated as a duplicate.
    """

    @staticmethod
    def has_processed(event_id):
        return ProcessedEvent.objects.processed().filter(event_id=event_id).exists()

    @staticmethod
    def _locked_entry(event_id):
        return ProcessedEvent.objects.select_for_update().filter(
            event_id=event_id
        ).first()

    @staticmethod
    def record_processed(event_id, kind, related_entity_id, entry=None):
        """
        Must run inside the transaction that applied the effects.
        A FAILED row for the same event is promoted instead of duplicated.
        """
        if entry is not None:
            entry.status = PROCESSED
            entry.related_entity_id = related_entity_id or entry.related_entity_id
            entry.processed_at = timezone.now()
            entry.error_message = ''
            entry.attempts += 1
            entry.save(update_fields=[
                'status', 'related_entity_id', 'processed_at',
                'error_message', 'attempts'
            ])
            return entry
        return ProcessedEvent.objects.create(
            event_id=event_id,
            event_type=kind,
            related_entity_id=related_entity_id or '',
            status=PROCESSED,
            attempts=1,
        )

    @staticmethod
    @transaction.atomic
    def record_failure(event_id, kind, related_entity_id, error):
        entry = ProcessedEvent.objects.select_for_update().filter(
            event_id=event_id
        ).first()
        if entry is None:
            return ProcessedEvent.objects.create(
                event_id=event_id,
                event_type=kind,
                related_entity_id=related_entity_id or '',
                status=FAILED,
                error_message=str(error),
                attempts=1,
            )
        if entry.status == PROCESSED:
            # a concurrent delivery got through; nothing to count
            return entry
        entry.attempts += 1
        entry.error_message = str(error)
        entry.processed_at = timezone.now()
        entry.save(update_fields=['attempts', 'error_message', 'processed_at'])
        return entry

    def apply_once(self, envelope, effect, deadline=None):
        """
        :param envelope: EventEnvelope being handled
        :param effect: callable applying the event, returns the related
            entity id (or None)
        :param deadline: ``time.monotonic()`` value after which the
            effect is abandoned instead of recorded
        :return: True if the effect was applied by this call, False if the
            event had already been processed
        """
        try:
            with transaction.atomic():
                entry = self._locked_entry(envelope.event_id)
                if entry is not None and entry.status == PROCESSED:
                    logger.info(
                        f'{LOG_PREFIX} Event {envelope.event_id} already '
                        f'processed, skipping.'
                    )
                    return False

                related_entity_id = effect()

                if deadline is not None and time.monotonic() > deadline:
                    raise HandlerTimedOut(
                        f'Handler for {envelope.kind} {envelope.event_id} '
                        f'exceeded its time budget'
                    )
                self.record_processed(
                    envelope.event_id,
                    envelope.kind,
                    str(related_entity_id) if related_entity_id else '',
                    entry=entry
                )
        except IntegrityError:
            if self.has_processed(envelope.event_id):
                logger.info(
                    f'{LOG_PREFIX} Event {envelope.event_id} was processed by '
                    f'a concurrent delivery, skipping.'
                )
                return False
            raise
        return True
