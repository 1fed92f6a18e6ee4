import uuid
from datetime import datetime, timedelta, timezone

import pytest
import pytz

from billtag.core.util import assert_uuid, fqcn, naive_utc, utc_dt


def test_utc_dt() -> None:
    dt = utc_dt(datetime(2026, 1, 1, 12, 0))
    assert dt.tzinfo is pytz.utc

    paris = timezone(timedelta(hours=1))
    dt = utc_dt(datetime(2026, 1, 1, 12, 0, tzinfo=paris))
    assert dt == datetime(2026, 1, 1, 11, 0, tzinfo=pytz.utc)


def test_naive_utc() -> None:
    paris = timezone(timedelta(hours=1))
    dt = naive_utc(datetime(2026, 1, 1, 12, 0, tzinfo=paris))
    assert dt == datetime(2026, 1, 1, 11, 0)
    assert dt.tzinfo is None
    assert naive_utc(None) is None


def test_assert_uuid() -> None:
    assert_uuid(uuid.uuid4())
    with pytest.raises(TypeError):
        assert_uuid(str(uuid.uuid4()))


def test_fqcn() -> None:
    assert fqcn(datetime) == "datetime.datetime"
