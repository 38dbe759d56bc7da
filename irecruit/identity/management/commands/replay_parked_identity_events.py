from django.core.management import BaseCommand
from django_q.tasks import async_task

from irecruit.identity.tasks import replay_parked_identity_events


class Command(BaseCommand):
    help = 'Move parked identity events back to their source streams.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--stream',
            help='Source stream, e.g. auth.email.verified:2. Defaults to all.'
        )
        parser.add_argument(
            '--async', action='store_true', dest='run_async',
            help='Queue the replay on the django-q cluster.'
        )

    def handle(self, *args, **options):
        func = 'irecruit.identity.tasks.replay_parked_identity_events'
        if options['run_async']:
            task_id = async_task(func, stream=options['stream'])
            self.stdout.write(self.style.SUCCESS(f'Queued replay as task {task_id}'))
            return
        replayed = replay_parked_identity_events(stream=options['stream'])
        self.stdout.write(self.style.SUCCESS(f'Replayed {replayed} parked events'))
