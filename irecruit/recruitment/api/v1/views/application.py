import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.mixins import ListModelMixin, RetrieveModelMixin
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from irecruit.core.exceptions import ReferenceNotFound, DocumentStorageError
from irecruit.identity.constants import APPLICANT
from irecruit.identity.models import JobSeeker
from irecruit.recruitment.api.v1.permissions import (
    ApplicantPermission, RecruitmentStaffPermission, RecruitmentReadPermission
)
from irecruit.recruitment.api.v1.serializers.application import (
    ApplicationSerializer, ApplicationSubmitSerializer,
    ApplicationStatusSerializer, DocumentUrlSerializer
)
from irecruit.recruitment.constants import (
    COVER_LETTER, RESUME, PORTFOLIO, JOB_SEEKER
)
from irecruit.recruitment.models import Application
from irecruit.recruitment.utils.application import ApplicationLifecycle

logger = logging.getLogger(__name__)

# upload field -> document type
UPLOAD_FIELDS = {
    'cover_letter': COVER_LETTER,
    'resume': RESUME,
    'portfolio': PORTFOLIO,
}


def find_job_seeker_ref(user):
    return JobSeeker.objects.filter(
        identity_ref=user.account_id
    ).values_list('id', flat=True).first()


def get_job_seeker_ref(user):
    job_seeker_id = find_job_seeker_ref(user)
    if job_seeker_id is None:
        raise ReferenceNotFound(JOB_SEEKER, user.account_id)
    return job_seeker_id


def limit_to_applicant(queryset, user, lookup='applicant_ref'):
    """
    Narrow `queryset` to the rows of the calling applicant. Staff see
    everything; an applicant that is not projected yet sees nothing.
    """
    if user.role != APPLICANT:
        return queryset
    job_seeker_id = find_job_seeker_ref(user)
    if job_seeker_id is None:
        return queryset.none()
    return queryset.filter(**{lookup: job_seeker_id})


class ApplicationViewSet(ListModelMixin, RetrieveModelMixin, GenericViewSet):
    """
    list:
    Applications visible to the caller; applicants only see their own.

    create:
    Submit an application with cover letter, resume and an optional
    portfolio (multipart).

    update_status:
    Move an application to another status.

    withdraw:
    Withdraw the caller's own application.

    destroy:
    Soft delete an application and its documents.

    document_url:
    Time limited download link for one of the application's documents.
    """
    queryset = Application.objects.alive()
    serializer_class = ApplicationSerializer
    filterset_fields = ['status', 'job_posting_ref', 'applicant_ref']
    lifecycle_class = ApplicationLifecycle

    def get_permissions(self):
        if self.action in ('create', 'withdraw'):
            return [IsAuthenticated(), ApplicantPermission()]
        if self.action in ('update_status', 'destroy', 'document_url'):
            return [IsAuthenticated(), RecruitmentStaffPermission()]
        return [IsAuthenticated(), RecruitmentReadPermission()]

    def get_queryset(self):
        return limit_to_applicant(super().get_queryset(), self.request.user)

    @property
    def lifecycle(self):
        return self.lifecycle_class()

    def create(self, request, *args, **kwargs):
        serializer = ApplicationSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        applicant_ref = get_job_seeker_ref(request.user)
        lifecycle = self.lifecycle

        document_refs = {}
        try:
            for field, document_type in UPLOAD_FIELDS.items():
                upload = serializer.validated_data.get(field)
                if upload:
                    document_refs[document_type] = lifecycle.storage.store(
                        upload, document_type, applicant_ref
                    )
            application = lifecycle.submit(
                applicant_ref=applicant_ref,
                job_posting_ref=serializer.validated_data['job_posting'],
                submitter_ref=request.user.account_id,
                document_refs=document_refs
            )
        except Exception:
            self._discard_uploads(lifecycle, document_refs)
            raise

        return Response(
            ApplicationSerializer(application, context=self.get_serializer_context()).data,
            status=status.HTTP_201_CREATED
        )

    @staticmethod
    def _discard_uploads(lifecycle, document_refs):
        for ref in document_refs.values():
            try:
                lifecycle.storage.delete(ref)
            except DocumentStorageError:
                logger.warning(f'Could not discard upload {ref}', exc_info=True)

    @action(detail=True, methods=['POST'], url_path='status', url_name='status')
    def update_status(self, request, *args, **kwargs):
        serializer = ApplicationStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        application = self.lifecycle.update_status(
            kwargs.get('pk'),
            serializer.validated_data['status'],
            request.user.account_id,
            notes=serializer.validated_data.get('notes'),
            rejection_reason=serializer.validated_data.get('rejection_reason')
        )
        return Response(ApplicationSerializer(application).data)

    @action(detail=True, methods=['POST'], url_path='withdraw', url_name='withdraw')
    def withdraw(self, request, *args, **kwargs):
        application = self.lifecycle.withdraw(
            kwargs.get('pk'),
            get_job_seeker_ref(request.user),
            request.user.account_id
        )
        return Response(ApplicationSerializer(application).data)

    def destroy(self, request, *args, **kwargs):
        self.lifecycle.soft_delete(kwargs.get('pk'), request.user.account_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['GET'], url_path='document-url', url_name='document-url')
    def document_url(self, request, *args, **kwargs):
        serializer = DocumentUrlSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        url = self.lifecycle.generate_presigned_url(
            kwargs.get('pk'),
            serializer.validated_data['document_type'],
            serializer.validated_data['expiry_minutes']
        )
        return Response({
            'url': url,
            'expiry_minutes': serializer.validated_data['expiry_minutes']
        })
