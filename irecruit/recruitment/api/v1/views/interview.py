from rest_framework import status
from rest_framework.decorators import action
from rest_framework.mixins import ListModelMixin, RetrieveModelMixin
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from irecruit.recruitment.api.v1.permissions import InterviewPermission
from irecruit.recruitment.api.v1.serializers.interview import (
    InterviewSerializer, InterviewScheduleSerializer, InterviewUpdateSerializer,
    InterviewFeedbackSerializer, InterviewWindowSerializer
)
from irecruit.recruitment.api.v1.views.application import limit_to_applicant
from irecruit.recruitment.models import Interview
from irecruit.recruitment.utils.interview import InterviewLifecycle


class InterviewViewSet(ListModelMixin, RetrieveModelMixin, GenericViewSet):
    queryset = Interview.objects.alive().select_related('application')
    serializer_class = InterviewSerializer
    permission_classes = [IsAuthenticated, InterviewPermission]
    filterset_fields = ['status', 'application', 'interviewer_ref', 'interview_type']
    lifecycle_class = InterviewLifecycle

    def get_queryset(self):
        return self._scoped(super().get_queryset())

    def _scoped(self, qs):
        return limit_to_applicant(qs, self.request.user, 'application__applicant_ref')

    @property
    def lifecycle(self):
        return self.lifecycle_class()

    def create(self, request, *args, **kwargs):
        serializer = InterviewScheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        details = dict(serializer.validated_data)
        interview = self.lifecycle.schedule_interview(
            application_ref=details.pop('application'),
            scheduled_at=details.pop('scheduled_at'),
            interview_type=details.pop('interview_type'),
            actor_ref=request.user.account_id,
            **details
        )
        return Response(InterviewSerializer(interview).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        serializer = InterviewUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        interview = self.lifecycle.update_interview(
            kwargs.get('pk'), request.user.account_id, **serializer.validated_data
        )
        return Response(InterviewSerializer(interview).data)

    def destroy(self, request, *args, **kwargs):
        self.lifecycle.cancel_interview(kwargs.get('pk'), request.user.account_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['POST'], url_path='complete', url_name='complete')
    def complete(self, request, *args, **kwargs):
        interview = self.lifecycle.mark_as_completed(kwargs.get('pk'), request.user.account_id)
        return Response(InterviewSerializer(interview).data)

    @action(detail=True, methods=['POST'], url_path='no-show', url_name='no-show')
    def no_show(self, request, *args, **kwargs):
        interview = self.lifecycle.mark_as_no_show(kwargs.get('pk'), request.user.account_id)
        return Response(InterviewSerializer(interview).data)

    @action(detail=True, methods=['POST'], url_path='feedback', url_name='feedback')
    def feedback(self, request, *args, **kwargs):
        serializer = InterviewFeedbackSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        interview = self.lifecycle.add_feedback(
            kwargs.get('pk'),
            serializer.validated_data['feedback'],
            serializer.validated_data['rating'],
            request.user.account_id
        )
        return Response(InterviewSerializer(interview).data)

    @action(detail=False, methods=['GET'], url_path='upcoming', url_name='upcoming')
    def upcoming(self, request, *args, **kwargs):
        serializer = InterviewWindowSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        qs = self.lifecycle.upcoming(
            serializer.validated_data['start'], serializer.validated_data['end']
        ).select_related('application')
        return self._paginated(self._scoped(qs))

    @action(detail=False, methods=['GET'], url_path='today', url_name='today')
    def today(self, request, *args, **kwargs):
        return self._paginated(
            self._scoped(self.lifecycle.todays().select_related('application'))
        )

    def _paginated(self, qs):
        page = self.paginate_queryset(self.filter_queryset(qs))
        if page is not None:
            return self.get_paginated_response(InterviewSerializer(page, many=True).data)
        return Response(InterviewSerializer(qs, many=True).data)
