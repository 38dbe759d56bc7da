"""
Error kinds raised by the lifecycle services and the identity consumer.

Lifecycle errors are ``APIException`` subclasses so that the REST layer maps
them to a status code and a stable ``code`` without any translation step.
Consumer errors never reach an HTTP caller; they only decide whether a stream
entry is acknowledged.
"""
from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler as drf_exception_handler


class RecruitmentError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _('Bad Request')
    default_code = 'invalid'


class ReferenceNotFound(RecruitmentError):
    default_detail = _('Referenced entity does not exist.')
    default_code = 'reference_not_found'

    def __init__(self, entity_type, entity_id):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            _("{} with ID '{}' does not exist").format(entity_type, entity_id)
        )


class NotFound(RecruitmentError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = _('Not found.')
    default_code = 'not_found'


class DuplicateSubmission(RecruitmentError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = _('You have already applied to this job posting')
    default_code = 'duplicate_submission'


class Finalized(RecruitmentError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = _(
        'Cannot modify an application that has been finalized '
        '(ACCEPTED, REJECTED, or WITHDRAWN)'
    )
    default_code = 'finalized'


class InvalidTransition(RecruitmentError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = _('Invalid status transition.')
    default_code = 'invalid_transition'

    def __init__(self, from_status, to_status):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            _('Invalid status transition from {} to {}').format(
                from_status, to_status
            )
        )


class Forbidden(RecruitmentError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = _('You can only withdraw your own applications')
    default_code = 'forbidden'


class InvalidDocumentType(RecruitmentError):
    default_detail = _('Invalid document type.')
    default_code = 'invalid_document_type'


class InvalidDocument(RecruitmentError):
    default_detail = _('Invalid document.')
    default_code = 'invalid_document'


class DocumentNotFound(RecruitmentError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = _('Document not found.')
    default_code = 'document_not_found'


class InvalidSchedule(RecruitmentError):
    default_detail = _('Interview must be scheduled in the future.')
    default_code = 'invalid_schedule'


class NotSchedulable(RecruitmentError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = _('Only scheduled interviews can be updated.')
    default_code = 'not_schedulable'


class NotCompleted(RecruitmentError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = _('Feedback can only be added to completed interviews')
    default_code = 'not_completed'


class DownstreamUnavailable(RecruitmentError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = _('A dependent service is temporarily unavailable.')
    default_code = 'downstream_unavailable'


class DocumentStorageError(DownstreamUnavailable):
    default_detail = _('Document storage is temporarily unavailable.')
    default_code = 'document_storage_unavailable'


# Consumer side

class RetryableEventError(Exception):
    """
    The event could not be applied now but may be later. The stream entry
    stays pending and is redelivered until the delivery limit parks it.
    """


class DeserializationFailure(RetryableEventError):
    pass


class EventStoreUnavailable(RetryableEventError):
    pass


class EntityNotYetProjected(RetryableEventError):
    def __init__(self, identity_ref):
        self.identity_ref = identity_ref
        super().__init__(
            'No domain entity exists yet for identity {}'.format(identity_ref)
        )


class HandlerTimedOut(RetryableEventError):
    pass


def exception_handler(exc, context):
    """
    Adds the stable error ``code`` next to DRF's ``detail``.
    """
    response = drf_exception_handler(exc, context)
    if response is not None and isinstance(exc, RecruitmentError):
        response.data = {
            'code': exc.default_code,
            'detail': exc.detail,
        }
    return response
