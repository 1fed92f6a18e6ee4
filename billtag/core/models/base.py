"""Base model and column mixins shared by the services tables."""
import uuid

from sqlalchemy.schema import Column
from sqlalchemy.types import DateTime, Integer, String

from billtag.core.callcontext import DEFAULT_TENANT, CallContext
from billtag.core.extensions import db
from billtag.core.sqlalchemy import UUID
from billtag.core.util import naive_utc


#: Base Model class.
class Model(db.Model):
    __abstract__ = True


class RecordIdMixin:
    """Monotonic surrogate key, as referenced by audit rows."""

    record_id = Column(Integer, primary_key=True, autoincrement=True)


class UUIDMixin:
    """Public, stable identifier."""

    id = Column(UUID(), nullable=False, unique=True, default=uuid.uuid4)


class TenantMixin:
    tenant_record_id = Column(Integer, nullable=False, default=DEFAULT_TENANT, index=True)


class CallContextMixin(TenantMixin):
    """Who created and last updated a row, and when.

    Dates are stored as naive datetimes in UTC TZ.
    """

    created_by = Column(String(50), nullable=False)
    created_date = Column(DateTime, nullable=False)
    updated_by = Column(String(50))
    updated_date = Column(DateTime)

    def set_created(self, context: CallContext) -> None:
        self.created_by = self.updated_by = context.user_name
        self.created_date = naive_utc(context.created_date)
        self.updated_date = naive_utc(context.created_date)
        self.tenant_record_id = context.tenant_record_id

    def set_updated(self, context: CallContext) -> None:
        self.updated_by = context.user_name
        self.updated_date = naive_utc(context.updated_date)
