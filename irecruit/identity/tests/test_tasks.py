from unittest.mock import patch

from django.test import TestCase, override_settings
from django.utils import timezone

from irecruit.identity.constants import FAILED
from irecruit.identity.models import ProcessedEvent
from irecruit.identity.tasks import (
    purge_processed_events, report_failed_identity_events,
    replay_parked_identity_events
)
from irecruit.identity.tests.factory import ProcessedEventFactory


class TestIdentityTasks(TestCase):
    @override_settings(PROCESSED_EVENT_RETENTION_DAYS=30)
    def test_purge_keeps_recent_and_failed_events(self):
        old = timezone.now() - timezone.timedelta(days=31)
        stale = ProcessedEventFactory(processed_at=old)
        stale_failure = ProcessedEventFactory(processed_at=old, status=FAILED)
        recent = ProcessedEventFactory()

        self.assertEqual(purge_processed_events(), 1)

        self.assertFalse(ProcessedEvent.objects.filter(pk=stale.pk).exists())
        self.assertTrue(ProcessedEvent.objects.filter(pk=stale_failure.pk).exists())
        self.assertTrue(ProcessedEvent.objects.filter(pk=recent.pk).exists())

    def test_purge_with_explicit_days(self):
        ProcessedEventFactory(processed_at=timezone.now() - timezone.timedelta(days=3))
        self.assertEqual(purge_processed_events(days='2'), 1)

    @override_settings(IDENTITY_EVENT_MAX_DELIVERIES=5)
    def test_report_counts_retryable_failures(self):
        ProcessedEventFactory(status=FAILED, attempts=2, error_message='not projected')
        ProcessedEventFactory(status=FAILED, attempts=5)
        ProcessedEventFactory()

        with self.assertLogs('irecruit.identity.tasks', level='WARNING') as logs:
            self.assertEqual(report_failed_identity_events(), 1)
        self.assertIn('not projected', logs.output[0])

    @patch('irecruit.identity.tasks.replay_parked', return_value=2)
    def test_replay_delegates_to_stream(self, replay):
        self.assertEqual(replay_parked_identity_events('auth.email.verified:1'), 2)
        replay.assert_called_once_with(stream='auth.email.verified:1')
