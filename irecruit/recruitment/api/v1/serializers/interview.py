from django.utils import timezone
from rest_framework import serializers

from irecruit.recruitment.constants import (
    INTERVIEW_TYPE_CHOICES, MIN_INTERVIEW_RATING, MAX_INTERVIEW_RATING
)
from irecruit.recruitment.models import Interview


class InterviewSerializer(serializers.ModelSerializer):
    application_status = serializers.ReadOnlyField(source='application.status')

    class Meta:
        model = Interview
        exclude = ['deleted', 'deleted_by_ref']


class InterviewDetailSerializer(serializers.Serializer):
    scheduled_at = serializers.DateTimeField()
    interview_type = serializers.ChoiceField(choices=INTERVIEW_TYPE_CHOICES)
    duration_minutes = serializers.IntegerField(
        required=False, allow_null=True, min_value=1, max_value=24 * 60
    )
    location = serializers.CharField(required=False, allow_blank=True, max_length=255)
    meeting_link = serializers.URLField(required=False, allow_blank=True, max_length=500)
    description = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    interviewer_ref = serializers.CharField(required=False, allow_blank=True, max_length=64)


class InterviewScheduleSerializer(InterviewDetailSerializer):
    application = serializers.UUIDField()


class InterviewUpdateSerializer(InterviewDetailSerializer):
    def get_fields(self):
        fields = super().get_fields()
        for field in fields.values():
            field.required = False
        return fields


class InterviewFeedbackSerializer(serializers.Serializer):
    feedback = serializers.CharField()
    rating = serializers.IntegerField(
        min_value=MIN_INTERVIEW_RATING, max_value=MAX_INTERVIEW_RATING
    )


class InterviewWindowSerializer(serializers.Serializer):
    start = serializers.DateTimeField(required=False)
    end = serializers.DateTimeField(required=False)

    def validate(self, attrs):
        attrs.setdefault('start', timezone.now())
        attrs.setdefault('end', attrs['start'] + timezone.timedelta(days=7))
        return attrs
