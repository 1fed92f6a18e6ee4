"""Various tools that don't belong some place specific."""
import uuid
from datetime import datetime
from typing import Any, Optional

import pytz


def fqcn(cls: type) -> str:
    """Fully Qualified Class Name."""
    return str(cls.__module__ + "." + cls.__name__)


def utcnow() -> datetime:
    """Return a new aware datetime with current date and time, in UTC TZ."""
    return datetime.now(pytz.utc)


def utc_dt(dt: datetime) -> datetime:
    """Set UTC timezone on a datetime object.

    A naive datetime is assumed to be in UTC TZ.
    """
    if not dt.tzinfo:
        return pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc)


def naive_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Return a naive datetime in UTC TZ, as stored in `DateTime` columns."""
    if dt is None:
        return None
    return utc_dt(dt).replace(tzinfo=None)


def assert_uuid(value: Any) -> None:
    if not isinstance(value, uuid.UUID):
        raise TypeError("Not an uuid.UUID instance", value)
