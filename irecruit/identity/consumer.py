import logging
import time

from django.conf import settings
from django.db import DatabaseError

from irecruit.core.exceptions import (
    EntityNotYetProjected, EventStoreUnavailable, RetryableEventError
)
from irecruit.identity.constants import (
    USER_REGISTERED, EMAIL_VERIFIED, ROLE_CHANGED, ACCOUNT_DISABLED, LOG_PREFIX
)
from irecruit.identity.events import EntityVariant, parse_event
from irecruit.identity.ledger import ProcessedEventLedger
from irecruit.identity.models import (
    JobSeeker, Company, StaffMember, DOMAIN_ENTITY_MODELS
)

logger = logging.getLogger(__name__)

VARIANT_MODELS = {
    EntityVariant.JOB_SEEKER: JobSeeker,
    EntityVariant.COMPANY: Company,
    EntityVariant.STAFF_MEMBER: StaffMember,
}


def find_domain_entity(identity_ref, for_update=False):
    """
    :return: the single JobSeeker, Company or StaffMember projected for
        identity_ref, or None.
    """
    for model in DOMAIN_ENTITY_MODELS:
        qs = model.objects.select_for_update() if for_update else model.objects.all()
        entity = qs.filter(identity_ref=identity_ref).first()
        if entity is not None:
            return entity
    return None


class IdentityEventConsumer:
    """
    Applies identity events to the domain entity store.

    ``handle`` returns True when the event changed something, False when it
    was a duplicate. It raises :class:`RetryableEventError` when the event
    must be redelivered; the caller then leaves the stream entry pending.
    """

    def __init__(self, ledger=None, timeout=None):
        self.ledger = ledger or ProcessedEventLedger()
        self.timeout = settings.IDENTITY_EVENT_HANDLER_TIMEOUT if timeout is None else timeout
        self.handlers = {
            USER_REGISTERED: self.on_identity_created,
            EMAIL_VERIFIED: self.on_email_verified,
            ROLE_CHANGED: self.on_role_changed,
            ACCOUNT_DISABLED: self.on_account_disabled,
        }

    def handle(self, kind, raw):
        envelope = parse_event(kind, raw)
        logger.debug(
            f'{LOG_PREFIX} Received {kind} event {envelope.event_id} '
            f'for account {envelope.identity_ref}'
        )
        handler = self.handlers[envelope.kind]
        deadline = time.monotonic() + self.timeout if self.timeout else None

        try:
            if self.ledger.has_processed(envelope.event_id):
                logger.info(
                    f'{LOG_PREFIX} Event {envelope.event_id} already processed, skipping.'
                )
                return False
            return self.ledger.apply_once(
                envelope, lambda: handler(envelope), deadline=deadline
            )
        except RetryableEventError as e:
            self._record_failure(envelope, e)
            raise
        except DatabaseError as e:
            self._record_failure(envelope, e)
            raise EventStoreUnavailable(str(e)) from e

    def _record_failure(self, envelope, error):
        logger.error(
            f'{LOG_PREFIX} Failed to apply {envelope.kind} event '
            f'{envelope.event_id}: {error}'
        )
        try:
            self.ledger.record_failure(
                envelope.event_id, envelope.kind, envelope.identity_ref, error
            )
        except DatabaseError:
            logger.exception(
                f'{LOG_PREFIX} Could not record failure of event {envelope.event_id}'
            )

    # handlers run inside the ledger transaction and return the related
    # entity id

    def on_identity_created(self, envelope):
        payload = envelope.payload
        existing = find_domain_entity(payload.account_id)
        if existing is not None:
            logger.warning(
                f'{LOG_PREFIX} {existing.__class__.__name__} already exists for '
                f'account {payload.account_id}, not creating another.'
            )
            return existing.id

        variant = payload.variant
        model = VARIANT_MODELS.get(variant)
        if model is None:
            logger.warning(
                f'{LOG_PREFIX} Unknown role {payload.role!r} for account '
                f'{payload.account_id}, no domain entity created.'
            )
            return None

        context = payload.registration_context
        attributes = dict(
            identity_ref=payload.account_id,
            email=payload.email,
            first_name=payload.first_name,
            last_name=payload.last_name,
        )
        if variant is EntityVariant.COMPANY:
            attributes['name'] = str(context.get('companyName') or '')[:255]
        elif variant is EntityVariant.STAFF_MEMBER:
            attributes['employer_ref'] = str(context.get('companyId') or '')[:64]
            attributes['department'] = str(context.get('department') or '')[:150]
            attributes['position'] = str(context.get('position') or '')[:150]

        entity = model.objects.create(**attributes)
        logger.info(
            f'{LOG_PREFIX} Created {model.__name__} {entity.id} for account '
            f'{payload.account_id}.'
        )
        return entity.id

    def on_email_verified(self, envelope):
        entity = self._require_entity(envelope)
        if not entity.email_verified:
            entity.email_verified = True
            entity.save(update_fields=['email_verified', 'modified_at'])
        logger.info(
            f'{LOG_PREFIX} Email verified for {entity.__class__.__name__} {entity.id}.'
        )
        return entity.id

    def on_role_changed(self, envelope):
        payload = envelope.payload
        entity = find_domain_entity(payload.account_id)
        # no entity migration between variants on a role change
        logger.info(
            f'{LOG_PREFIX} Role of account {payload.account_id} changed from '
            f'{payload.old_role} to {payload.new_role} by {payload.changed_by or "system"}; '
            f'domain entity left unchanged.'
        )
        return entity.id if entity else None

    def on_account_disabled(self, envelope):
        payload = envelope.payload
        entity = self._require_entity(envelope)
        if entity.active:
            entity.active = False
            entity.save(update_fields=['active', 'modified_at'])
        logger.info(
            f'{LOG_PREFIX} Deactivated {entity.__class__.__name__} {entity.id} '
            f'(reason: {payload.reason or "not given"}).'
        )
        return entity.id

    @staticmethod
    def _require_entity(envelope):
        entity = find_domain_entity(envelope.identity_ref, for_update=True)
        if entity is None:
            raise EntityNotYetProjected(envelope.identity_ref)
        return entity
