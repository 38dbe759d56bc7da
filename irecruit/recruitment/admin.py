from django.contrib import admin

from irecruit.recruitment.models import JobPosting, Application, Interview


class JobPostingAdmin(admin.ModelAdmin):
    search_fields = ['title']
    list_display = [
        'title',
        'company',
        'deleted',
        'created_at'
    ]
    list_filter = ['deleted']


admin.site.register(JobPosting, JobPostingAdmin)


class ApplicationAdmin(admin.ModelAdmin):
    search_fields = ['applicant_ref', 'job_posting_ref']
    list_display = [
        'id',
        'applicant_ref',
        'job_posting_ref',
        'status',
        'submitted_at',
        'deleted'
    ]
    list_filter = ['status', 'deleted']
    # status changes go through ApplicationLifecycle
    readonly_fields = [
        'status', 'reviewed_at', 'interview_scheduled_at', 'interviewed_at',
        'offer_extended_at', 'finalized_at'
    ]


admin.site.register(Application, ApplicationAdmin)


class InterviewAdmin(admin.ModelAdmin):
    search_fields = ['interviewer_ref', 'application__id']
    list_display = [
        'application',
        'interview_type',
        'status',
        'scheduled_at',
        'interviewer_ref'
    ]
    list_filter = ['status', 'interview_type']
    readonly_fields = ['status', 'completed_at']


admin.site.register(Interview, InterviewAdmin)
