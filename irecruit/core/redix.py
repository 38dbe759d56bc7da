from redis import ConnectionPool, StrictRedis
from django.conf import settings

# Streams on this connection:
#                   1. Identity events consumed by irecruit.identity.streams
#                   2. Platform events published by irecruit.recruitment.utils.events

REDIS_POOL = ConnectionPool(**getattr(settings, 'REDIS_DATABASE'))


def general():
    return StrictRedis(connection_pool=REDIS_POOL)
