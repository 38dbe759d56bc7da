"""
Redis Streams transport for identity events.

Every topic is split into ``IDENTITY_EVENT_PARTITIONS`` streams named
``<topic>:<n>``; the producer picks ``n`` from the account id, so all events
of one account land on one stream in publish order. A stream is read by
exactly one worker of the consumer group, which keeps that order: a
failing entry is retried before anything after it on the same stream.
"""
import json
import logging
import time
import zlib
from collections import Counter

from django.conf import settings
from django.db import close_old_connections
from redis.exceptions import ConnectionError as RedisConnectionError, ResponseError

from irecruit.core import redix
from irecruit.core.exceptions import RetryableEventError
from irecruit.identity.constants import TOPIC_EVENT_KINDS, PARKED_STREAM_SUFFIX, LOG_PREFIX
from irecruit.identity.consumer import IdentityEventConsumer

logger = logging.getLogger(__name__)


def stream_name(topic, partition):
    return f'{topic}:{partition}'


def partition_for(identity_ref, partitions=None):
    partitions = partitions or settings.IDENTITY_EVENT_PARTITIONS
    return zlib.crc32(str(identity_ref).encode('utf-8')) % partitions


def partitions_for_worker(worker_index, workers, partitions=None):
    partitions = partitions or settings.IDENTITY_EVENT_PARTITIONS
    return [p for p in range(partitions) if p % workers == worker_index]


def publish_identity_event(topic_key, event, client=None):
    """
    Appends an identity event to the partition stream of its account.
    :param topic_key: key of settings.IDENTITY_EVENT_TOPICS
    :param event: dict in wire format (``eventId``, ``accountId``, ...)
    :return: stream entry id
    """
    client = client or redix.general()
    topic = settings.IDENTITY_EVENT_TOPICS[topic_key]
    stream = stream_name(topic, partition_for(event['accountId']))
    return client.xadd(stream, {'payload': json.dumps(event, default=str)})


class IdentityStreamWorker:
    def __init__(self, consumer_name, partitions, client=None, consumer=None,
                 group=None, batch_size=10, block_ms=5000, max_deliveries=None,
                 retry_delay=None):
        self.consumer_name = consumer_name
        self.client = client or redix.general()
        self.consumer = consumer or IdentityEventConsumer()
        self.group = group or settings.IDENTITY_EVENT_GROUP
        self.batch_size = batch_size
        self.block_ms = block_ms
        self.max_deliveries = max_deliveries or settings.IDENTITY_EVENT_MAX_DELIVERIES
        self.retry_delay = (
            settings.IDENTITY_EVENT_RETRY_DELAY if retry_delay is None else retry_delay
        )
        self.streams = {
            stream_name(topic, partition): TOPIC_EVENT_KINDS[topic_key]
            for topic_key, topic in settings.IDENTITY_EVENT_TOPICS.items()
            for partition in partitions
        }
        # failed attempts per entry id, since the last restart
        self.attempts = Counter()

    def ensure_groups(self):
        for stream in self.streams:
            try:
                self.client.xgroup_create(stream, self.group, id='0', mkstream=True)
            except ResponseError as e:
                if 'BUSYGROUP' not in str(e):
                    raise

    def run(self, stop_event):
        self.ensure_groups()
        logger.info(
            f'{LOG_PREFIX} {self.consumer_name} consuming {", ".join(sorted(self.streams))}'
        )
        try:
            while not stop_event.is_set():
                try:
                    self.poll()
                except RedisConnectionError:
                    logger.exception(
                        f'{LOG_PREFIX} {self.consumer_name} lost its redis connection.'
                    )
                    stop_event.wait(self.retry_delay or 1)
        finally:
            close_old_connections()

    def poll(self):
        """
        One round: retry this consumer's pending entries, then read new ones
        from streams that have nothing left pending.
        :return: number of entries acknowledged
        """
        acknowledged = 0
        blocked = set()

        pending = self.client.xreadgroup(
            self.group, self.consumer_name,
            {stream: '0' for stream in self.streams},
            count=self.batch_size
        )
        for stream, entries in pending or []:
            done, failed = self._process_entries(stream, entries)
            acknowledged += done
            if failed:
                blocked.add(stream)

        ready = [stream for stream in self.streams if stream not in blocked]
        if not ready:
            time.sleep(self.retry_delay)
            return acknowledged

        fresh = self.client.xreadgroup(
            self.group, self.consumer_name,
            {stream: '>' for stream in ready},
            count=self.batch_size,
            block=self.retry_delay * 1000 if blocked else self.block_ms
        )
        for stream, entries in fresh or []:
            done, _ = self._process_entries(stream, entries)
            acknowledged += done
        return acknowledged

    def _process_entries(self, stream, entries):
        done = 0
        for message_id, fields in entries:
            if not self.process(stream, message_id, fields):
                # later entries stay pending behind the failed one
                return done, True
            done += 1
        return done, False

    def process(self, stream, message_id, fields):
        """
        :return: True once the entry is acknowledged (applied, duplicate or
            parked), False if it stays pending for another attempt.
        """
        if not fields:
            # trimmed from the stream while pending
            self.client.xack(stream, self.group, message_id)
            return True

        kind = self.streams[stream]
        close_old_connections()
        try:
            self.consumer.handle(kind, fields.get('payload'))
        except RetryableEventError as e:
            return self._retry_or_park(stream, message_id, fields, e)
        except Exception as e:
            logger.exception(
                f'{LOG_PREFIX} Unexpected error handling {kind} entry {message_id} '
                f'on {stream}.'
            )
            return self._retry_or_park(stream, message_id, fields, e)

        self.attempts.pop(message_id, None)
        self.client.xack(stream, self.group, message_id)
        return True

    def _retry_or_park(self, stream, message_id, fields, error):
        self.attempts[message_id] += 1
        attempts = self.attempts[message_id]
        if attempts < self.max_deliveries:
            logger.warning(
                f'{LOG_PREFIX} Entry {message_id} on {stream} failed '
                f'(attempt {attempts}/{self.max_deliveries}): {error}'
            )
            return False
        self.park(stream, message_id, fields, attempts, error)
        self.attempts.pop(message_id, None)
        return True

    def park(self, stream, message_id, fields, attempts, error):
        parked_stream = f'{stream}{PARKED_STREAM_SUFFIX}'
        pipe = self.client.pipeline()
        pipe.xadd(parked_stream, {
            **fields,
            'source_stream': stream,
            'source_id': message_id,
            'attempts': attempts,
            'error': str(error)[:1000],
        })
        pipe.xack(stream, self.group, message_id)
        pipe.execute()
        logger.error(
            f'{LOG_PREFIX} Parked entry {message_id} from {stream} to '
            f'{parked_stream} after {attempts} attempts: {error}'
        )


def replay_parked(stream=None, client=None):
    """
    Moves parked entries back onto their source stream.
    :param stream: source stream to replay; every partition of every topic
        when omitted
    :return: number of entries replayed
    """
    client = client or redix.general()
    if stream:
        sources = [stream]
    else:
        sources = [
            stream_name(topic, partition)
            for topic in settings.IDENTITY_EVENT_TOPICS.values()
            for partition in range(settings.IDENTITY_EVENT_PARTITIONS)
        ]

    replayed = 0
    for source in sources:
        parked_stream = f'{source}{PARKED_STREAM_SUFFIX}'
        for entry_id, fields in client.xrange(parked_stream):
            pipe = client.pipeline()
            pipe.xadd(fields.get('source_stream') or source, {'payload': fields.get('payload', '')})
            pipe.xdel(parked_stream, entry_id)
            pipe.execute()
            replayed += 1
    if replayed:
        logger.info(f'{LOG_PREFIX} Replayed {replayed} parked identity events.')
    return replayed
