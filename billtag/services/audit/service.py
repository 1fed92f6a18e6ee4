"""Audit service: writes and queries the audit log.

Audit rows are written explicitly by the services owning history tables,
inside the transaction that writes the history row.
"""
import logging
from datetime import datetime
from typing import List, Optional, Tuple

import sqlalchemy as sa
from sqlalchemy.orm import Session

from billtag.core.callcontext import CallContext
from billtag.core.extensions import db
from billtag.core.util import naive_utc
from billtag.services.base import Service

from .models import CHANGE_TYPES, INSERT, AuditLog

log = logging.getLogger(__name__)


class AuditService(Service):
    name = "audit"

    def log(
        self,
        session: Session,
        table_name: str,
        record_id: int,
        change_type: str,
        context: CallContext,
        change_date: Optional[datetime] = None,
    ) -> AuditLog:
        """Add an audit row for history row `record_id` of `table_name`.

        `change_date` defaults to the context creation date for inserts and to
        its update date otherwise.
        """
        if change_type not in CHANGE_TYPES:
            raise ValueError(f"Invalid change type: {change_type!r}")
        if record_id is None:
            raise ValueError("history row must be flushed before being audited")

        if change_date is None:
            change_date = (
                context.created_date if change_type == INSERT else context.updated_date
            )

        entry = AuditLog(
            table_name=table_name,
            record_id=record_id,
            change_type=change_type,
            change_date=naive_utc(change_date),
            changed_by=context.user_name,
            reason_code=context.reason_code,
            comments=context.comments,
            user_token=context.user_token,
            origin=context.origin,
            user_type=context.user_type,
            tenant_record_id=context.tenant_record_id,
        )
        session.add(entry)
        log.debug(
            "audit %s %s#%d by %s", change_type, table_name, record_id, context.user_name
        )
        return entry

    def entries_for(
        self, table_name: str, record_id: int, session: Optional[Session] = None
    ) -> List[AuditLog]:
        session = session if session is not None else db.session
        stmt = (
            sa.select(AuditLog)
            .where(AuditLog.table_name == table_name, AuditLog.record_id == record_id)
            .order_by(AuditLog.id)
        )
        return list(session.execute(stmt).scalars())

    def entries_for_history(
        self,
        history_model: type,
        id_value,
        change_type: Optional[str] = None,
        session: Optional[Session] = None,
    ) -> List[Tuple[AuditLog, object]]:
        """Join audit rows with the rows of `history_model` having `id ==
        id_value`, oldest first.

        `history_model` must have `record_id`, `id` and `change_type` columns.
        """
        session = session if session is not None else db.session
        stmt = (
            sa.select(AuditLog, history_model)
            .join(
                history_model,
                sa.and_(
                    AuditLog.table_name == history_model.__tablename__,
                    AuditLog.record_id == history_model.record_id,
                ),
            )
            .where(history_model.id == id_value)
            .order_by(history_model.record_id)
        )
        if change_type is not None:
            stmt = stmt.where(AuditLog.change_type == change_type)

        return [tuple(row) for row in session.execute(stmt)]


audit_service = AuditService()
