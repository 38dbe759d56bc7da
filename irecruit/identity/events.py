"""
Identity events as received from the identity service.

Raw stream payloads are validated with DRF serializers and turned into
immutable :class:`EventEnvelope` values. Anything that does not validate
raises :class:`DeserializationFailure`.
"""
import enum
import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from rest_framework import serializers

from irecruit.core.exceptions import DeserializationFailure
from irecruit.identity.constants import (
    USER_REGISTERED, EMAIL_VERIFIED, ROLE_CHANGED, ACCOUNT_DISABLED,
    APPLICANT, COMPANY_ADMIN, HR
)


class EntityVariant(enum.Enum):
    JOB_SEEKER = 'job_seeker'
    COMPANY = 'company'
    STAFF_MEMBER = 'staff_member'
    UNKNOWN_ROLE = 'unknown_role'


ROLE_VARIANTS = {
    APPLICANT: EntityVariant.JOB_SEEKER,
    COMPANY_ADMIN: EntityVariant.COMPANY,
    HR: EntityVariant.STAFF_MEMBER,
}


def variant_for_role(role: Optional[str]) -> EntityVariant:
    return ROLE_VARIANTS.get((role or '').strip().upper(), EntityVariant.UNKNOWN_ROLE)


@dataclass(frozen=True)
class IdentityCreated:
    account_id: str
    email: str
    role: str
    first_name: str = ''
    last_name: str = ''
    registered_at: Optional[datetime] = None
    registration_context: Dict[str, Any] = field(default_factory=dict)

    @property
    def variant(self) -> EntityVariant:
        return variant_for_role(self.role)


@dataclass(frozen=True)
class EmailVerified:
    account_id: str
    email: str = ''
    verified_at: Optional[datetime] = None


@dataclass(frozen=True)
class RoleChanged:
    account_id: str
    old_role: str = ''
    new_role: str = ''
    changed_by: str = ''
    changed_at: Optional[datetime] = None


@dataclass(frozen=True)
class AccountDisabled:
    account_id: str
    reason: str = ''
    disabled_by: str = ''
    disabled_at: Optional[datetime] = None


@dataclass(frozen=True)
class EventEnvelope:
    event_id: UUID
    kind: str
    occurred_at: datetime
    payload: Any

    @property
    def identity_ref(self) -> str:
        return self.payload.account_id


class RegistrationContextField(serializers.Field):
    """
    ``registrationContext`` arrives either as a JSON object or as a JSON
    encoded string of one.
    """
    def to_internal_value(self, data):
        if data in (None, ''):
            return {}
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except ValueError:
                raise serializers.ValidationError('Not a valid JSON object.')
        if not isinstance(data, dict):
            raise serializers.ValidationError('Not a valid JSON object.')
        return data

    def to_representation(self, value):
        return value


class EventEnvelopeSerializer(serializers.Serializer):
    eventId = serializers.UUIDField()
    eventType = serializers.CharField(required=False)
    occurredAt = serializers.DateTimeField()
    accountId = serializers.CharField(max_length=64)


class IdentityCreatedSerializer(EventEnvelopeSerializer):
    email = serializers.EmailField()
    firstName = serializers.CharField(required=False, allow_blank=True, default='')
    lastName = serializers.CharField(required=False, allow_blank=True, default='')
    role = serializers.CharField(allow_blank=True)
    registeredAt = serializers.DateTimeField(required=False, allow_null=True, default=None)
    registrationContext = RegistrationContextField(required=False, default=dict)

    def build_payload(self, data):
        return IdentityCreated(
            account_id=data['accountId'],
            email=data['email'],
            role=data['role'],
            first_name=data['firstName'],
            last_name=data['lastName'],
            registered_at=data['registeredAt'],
            registration_context=data['registrationContext'],
        )


class EmailVerifiedSerializer(EventEnvelopeSerializer):
    email = serializers.EmailField(required=False, allow_blank=True, default='')
    verifiedAt = serializers.DateTimeField(required=False, allow_null=True, default=None)

    def build_payload(self, data):
        return EmailVerified(
            account_id=data['accountId'],
            email=data['email'],
            verified_at=data['verifiedAt'],
        )


class RoleChangedSerializer(EventEnvelopeSerializer):
    oldRole = serializers.CharField(required=False, allow_blank=True, default='')
    newRole = serializers.CharField(required=False, allow_blank=True, default='')
    changedBy = serializers.CharField(required=False, allow_blank=True, default='')
    changedAt = serializers.DateTimeField(required=False, allow_null=True, default=None)

    def build_payload(self, data):
        return RoleChanged(
            account_id=data['accountId'],
            old_role=data['oldRole'],
            new_role=data['newRole'],
            changed_by=data['changedBy'],
            changed_at=data['changedAt'],
        )


class AccountDisabledSerializer(EventEnvelopeSerializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')
    disabledBy = serializers.CharField(required=False, allow_blank=True, default='')
    disabledAt = serializers.DateTimeField(required=False, allow_null=True, default=None)

    def build_payload(self, data):
        return AccountDisabled(
            account_id=data['accountId'],
            reason=data['reason'],
            disabled_by=data['disabledBy'],
            disabled_at=data['disabledAt'],
        )


EVENT_SERIALIZERS = {
    USER_REGISTERED: IdentityCreatedSerializer,
    EMAIL_VERIFIED: EmailVerifiedSerializer,
    ROLE_CHANGED: RoleChangedSerializer,
    ACCOUNT_DISABLED: AccountDisabledSerializer,
}


def parse_event(kind: str, raw) -> EventEnvelope:
    """
    :param kind: event kind the topic carries
    :param raw: JSON text/bytes or an already decoded dict
    :return: EventEnvelope
    """
    serializer_class = EVENT_SERIALIZERS.get(kind)
    if serializer_class is None:
        raise DeserializationFailure(f'Unsupported event kind {kind!r}')

    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode('utf-8', errors='replace')
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            raise DeserializationFailure(f'Malformed {kind} payload: {e}') from e
    if not isinstance(raw, dict):
        raise DeserializationFailure(f'Malformed {kind} payload: expected an object')

    declared_kind = raw.get('eventType')
    if declared_kind and declared_kind != kind:
        raise DeserializationFailure(
            f'Event type {declared_kind!r} received on the {kind} topic'
        )

    serializer = serializer_class(data=raw)
    if not serializer.is_valid():
        raise DeserializationFailure(
            f'Invalid {kind} payload: {dict(serializer.errors)}'
        )
    data = serializer.validated_data
    return EventEnvelope(
        event_id=data['eventId'],
        kind=kind,
        occurred_at=data['occurredAt'],
        payload=serializer.build_payload(data),
    )
