import json
import uuid

from django.conf import settings
from django.core.management import BaseCommand, CommandError
from django.utils import timezone

from irecruit.identity.constants import TOPIC_EVENT_KINDS
from irecruit.identity.streams import publish_identity_event


class Command(BaseCommand):
    help = (
        'Publish an identity event the way the identity service does. '
        'Meant for local development.'
    )

    def add_arguments(self, parser):
        parser.add_argument('topic', choices=sorted(settings.IDENTITY_EVENT_TOPICS))
        parser.add_argument('payload', help='JSON object with the event fields.')

    def handle(self, *args, **options):
        try:
            event = json.loads(options['payload'])
        except ValueError as e:
            raise CommandError(f'Payload is not valid JSON: {e}')
        if not isinstance(event, dict) or not event.get('accountId'):
            raise CommandError('Payload must be an object with an accountId.')
        event.setdefault('eventId', str(uuid.uuid4()))
        event.setdefault('eventType', TOPIC_EVENT_KINDS[options['topic']])
        event.setdefault('occurredAt', timezone.now().isoformat())
        entry_id = publish_identity_event(options['topic'], event)
        self.stdout.write(self.style.SUCCESS(
            f"Published {event['eventId']} as {entry_id}"
        ))
