import logging
import uuid

from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)


def get_today(with_time=False, reset_hours=False):
    """
    Returns today's date.

    Setting `with_time` to True returns a datetime.datetime object.
    Setting `with_time` to False returns a datetime.date object.

    Setting `reset_hours` to True resets the time to the start of the day but
    `with_time` must be set to True while using `reset_hours`.
    """
    datetime_now = timezone.localtime() if with_time else timezone.localdate()
    if reset_hours and with_time:
        datetime_now = datetime_now.replace(hour=0, minute=0, second=0, microsecond=0)
    return datetime_now


def get_tomorrow(with_time=False, reset_hours=False):
    return get_today(with_time, reset_hours) + timezone.timedelta(days=1)


def get_complete_url(url=''):
    """
    Returns complete uri of a path served by this backend.
    :param url: absolute path, e.g. /api/v1/...
    :return: Complete URL
    """
    if not hasattr(settings, 'BACKEND_URL'):
        logger.warning('The server url has not been set.')
    server_url = getattr(settings, 'BACKEND_URL', 'http://localhost:8000')
    return f'{server_url}{url}'


def coerce_uuid(value):
    """
    :return: ``uuid.UUID`` for value, or None when value is not a valid uuid.
    """
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None
