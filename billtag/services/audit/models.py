"""Audit log: one row per committed change of an audited table.

Audited tables are history tables: each history row gets exactly one audit
row, joined on `(table_name, record_id)`, written in the same transaction.
"""
import sqlalchemy as sa
from sqlalchemy.schema import Column
from sqlalchemy.types import DateTime, Integer, String, UnicodeText

from billtag.core.callcontext import CallOriginType, UserTypeType
from billtag.core.models import Model, TenantMixin
from billtag.core.sqlalchemy import UUID

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"

CHANGE_TYPES = (INSERT, UPDATE, DELETE)


class AuditLog(TenantMixin, Model):
    """Logs one committed change to an audited table."""

    __tablename__ = "audit_log"

    id = Column(Integer, primary_key=True)

    #: audited (history) table
    table_name = Column(String(50), nullable=False)

    #: `record_id` of the history row describing the change
    record_id = Column(Integer, nullable=False)

    change_type = Column(String(6), nullable=False)  # INSERT / UPDATE / DELETE
    change_date = Column(DateTime, nullable=False, index=True)
    changed_by = Column(String(50), nullable=False)

    reason_code = Column(String(255))
    comments = Column(UnicodeText())
    user_token = Column(UUID())
    origin = Column(CallOriginType())
    user_type = Column(UserTypeType())

    __table_args__ = (
        sa.UniqueConstraint(table_name, record_id),
        sa.CheckConstraint(change_type.in_(CHANGE_TYPES)),
    )

    def __repr__(self):
        return (
            "<AuditLog id={} {} {}#{} by={!r} at={}>".format(
                repr(self.id),
                self.change_type,
                self.table_name,
                self.record_id,
                self.changed_by,
                self.change_date,
            )
        )
