from django.contrib import admin

from irecruit.identity.models import ProcessedEvent, JobSeeker, Company, StaffMember


class ProcessedEventAdmin(admin.ModelAdmin):
    search_fields = ['event_id', 'related_entity_id']
    list_display = [
        'event_id',
        'event_type',
        'status',
        'attempts',
        'processed_at'
    ]
    list_filter = ['event_type', 'status']
    readonly_fields = [f.name for f in ProcessedEvent._meta.fields]


admin.site.register(ProcessedEvent, ProcessedEventAdmin)


class DomainEntityAdmin(admin.ModelAdmin):
    search_fields = ['identity_ref', 'email', 'first_name', 'last_name']
    list_display = [
        'identity_ref',
        'email',
        'email_verified',
        'active',
        'created_at'
    ]
    list_filter = ['email_verified', 'active']
    readonly_fields = ['identity_ref', 'email_verified', 'active']

    # rows are created and retired by the identity event consumer only
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


admin.site.register(JobSeeker, DomainEntityAdmin)
admin.site.register(Company, DomainEntityAdmin)
admin.site.register(StaffMember, DomainEntityAdmin)
