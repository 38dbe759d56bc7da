from rest_framework import serializers

from irecruit.recruitment.constants import APPLICATION_STATUS_CHOICES
from irecruit.recruitment.models import Application


class ApplicationSerializer(serializers.ModelSerializer):
    is_finalized = serializers.ReadOnlyField()
    has_cover_letter = serializers.SerializerMethodField()
    has_resume = serializers.SerializerMethodField()
    has_portfolio = serializers.SerializerMethodField()

    class Meta:
        model = Application
        exclude = [
            'deleted', 'deleted_at', 'deleted_by_ref',
            'cover_letter_ref', 'resume_ref', 'portfolio_ref'
        ]

    @staticmethod
    def get_has_cover_letter(instance):
        return bool(instance.cover_letter_ref)

    @staticmethod
    def get_has_resume(instance):
        return bool(instance.resume_ref)

    @staticmethod
    def get_has_portfolio(instance):
        return bool(instance.portfolio_ref)


class ApplicationSubmitSerializer(serializers.Serializer):
    job_posting = serializers.UUIDField()
    cover_letter = serializers.FileField()
    resume = serializers.FileField()
    portfolio = serializers.FileField(required=False, allow_null=True)


class ApplicationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=APPLICATION_STATUS_CHOICES)
    notes = serializers.CharField(required=False, allow_blank=True, max_length=2000)
    rejection_reason = serializers.CharField(
        required=False, allow_blank=True, max_length=1000
    )


class DocumentUrlSerializer(serializers.Serializer):
    # validated against the document types by ApplicationLifecycle
    document_type = serializers.CharField(max_length=32)
    expiry_minutes = serializers.IntegerField(default=60, min_value=1)
