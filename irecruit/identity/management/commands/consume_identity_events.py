import signal
import socket
import threading

from django.conf import settings
from django.core.management import BaseCommand

from irecruit.identity.streams import IdentityStreamWorker, partitions_for_worker


class Command(BaseCommand):
    help = 'Consume identity events from the partitioned identity streams.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--workers', type=int, default=2,
            help='Worker threads; each owns a disjoint set of partitions.'
        )
        parser.add_argument(
            '--consumer-name', default=socket.gethostname(),
            help='Consumer name prefix inside the consumer group.'
        )
        parser.add_argument('--batch-size', type=int, default=10)
        parser.add_argument('--block-ms', type=int, default=5000)

    def handle(self, *args, **options):
        workers = max(1, min(options['workers'], settings.IDENTITY_EVENT_PARTITIONS))
        stop_event = threading.Event()

        def stop(signum, frame):
            self.stdout.write(self.style.WARNING('Stopping identity consumers ...'))
            stop_event.set()

        signal.signal(signal.SIGINT, stop)
        signal.signal(signal.SIGTERM, stop)

        threads = []
        for index in range(workers):
            worker = IdentityStreamWorker(
                consumer_name=f"{options['consumer_name']}-{index}",
                partitions=partitions_for_worker(index, workers),
                batch_size=options['batch_size'],
                block_ms=options['block_ms'],
            )
            thread = threading.Thread(
                target=worker.run, args=(stop_event,),
                name=worker.consumer_name, daemon=True
            )
            thread.start()
            threads.append(thread)
            self.stdout.write(self.style.SUCCESS(
                f"Started {worker.consumer_name} on {len(worker.streams)} streams"
            ))

        while any(thread.is_alive() for thread in threads):
            for thread in threads:
                thread.join(timeout=1)
        self.stdout.write(self.style.SUCCESS('Identity consumers stopped.'))
