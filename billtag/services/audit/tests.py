""""""
import uuid
from datetime import datetime, timedelta

import pytz
import sqlalchemy as sa
import sqlalchemy.exc
from pytest import raises

from billtag.core.callcontext import CallContext, CallOrigin, UserType
from billtag.services.tagging.models import TagHistoryEntry

from . import DELETE, INSERT, AuditLog, audit_service

CREATED = datetime(2026, 3, 1, 12, 0, tzinfo=pytz.utc)
UPDATED = CREATED + timedelta(minutes=5)


def make_context(**kwargs):
    return CallContext(
        "auditor",
        created_date=CREATED,
        updated_date=UPDATED,
        origin=CallOrigin.TEST,
        user_type=UserType.TEST,
        reason_code="CHECK",
        **kwargs,
    )


def test_log(session):
    ctx = make_context()
    entry = audit_service.log(session, "some_history", 1, INSERT, ctx)
    session.flush()

    assert entry.id is not None
    assert entry.changed_by == "auditor"
    assert entry.reason_code == "CHECK"
    assert entry.user_token == ctx.user_token
    # dates are stored as naive UTC datetimes
    assert entry.change_date == datetime(2026, 3, 1, 12, 0)

    delete_entry = audit_service.log(session, "some_history", 2, DELETE, ctx)
    session.flush()
    assert delete_entry.change_date == datetime(2026, 3, 1, 12, 5)

    entries = audit_service.entries_for("some_history", 1)
    assert entries == [entry]
    assert entries[0].origin is CallOrigin.TEST
    assert entries[0].user_type is UserType.TEST


def test_log_invalid_arguments(session):
    ctx = make_context()
    with raises(ValueError):
        audit_service.log(session, "some_history", 1, "MERGE", ctx)

    with raises(ValueError):
        audit_service.log(session, "some_history", None, INSERT, ctx)


def test_one_audit_row_per_history_row(session):
    ctx = make_context()
    audit_service.log(session, "some_history", 1, INSERT, ctx)
    session.flush()

    audit_service.log(session, "some_history", 1, INSERT, ctx)
    with raises(sa.exc.IntegrityError):
        session.flush()
    session.rollback()


def test_tenant(session):
    ctx = make_context(tenant_record_id=42)
    entry = audit_service.log(session, "some_history", 1, INSERT, ctx)
    session.flush()
    assert entry.tenant_record_id == 42


def test_entries_for_history_empty(session):
    assert audit_service.entries_for_history(TagHistoryEntry, uuid.uuid4()) == []
    assert session.query(AuditLog).count() == 0
