from collections import OrderedDict

from django.core.management import BaseCommand
from django_q.models import Schedule


class Command(BaseCommand):
    help = 'Register django-q schedules for identity event housekeeping.'

    SCHEDULES = [
        OrderedDict([
            ('name', 'Purge processed identity events'),
            ('func', 'irecruit.identity.tasks.purge_processed_events'),
            ('schedule_type', Schedule.DAILY),
        ]),
        OrderedDict([
            ('name', 'Report failed identity events'),
            ('func', 'irecruit.identity.tasks.report_failed_identity_events'),
            ('schedule_type', Schedule.HOURLY),
        ]),
    ]

    def handle(self, *args, **options):
        for datum in self.SCHEDULES:
            obj, created = Schedule.objects.get_or_create(**datum)
            if not created:
                self.stdout.write(self.style.ERROR(
                    f"{obj.name} already exists and was ignored"
                ))
                continue
            self.stdout.write(self.style.SUCCESS(
                f"Created {obj.name} with next run {obj.next_run}"
            ))
