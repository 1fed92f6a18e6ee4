"""Call contexts: who is doing a change, from where, and when.

Every mutating operation of the tag services takes a :class:`CallContext`.
Audit rows copy `user_name` and the context timestamps.
"""
import uuid
from datetime import datetime
from typing import Optional

from .clock import Clock
from .singleton import UniqueName, UniqueNameType
from .util import utc_dt

__all__ = [
    "CallOrigin",
    "UserType",
    "CallContext",
    "CallContextFactory",
    "CallOriginType",
    "UserTypeType",
    "DEFAULT_TENANT",
]

#: record id of the tenant used when no tenant is specified
DEFAULT_TENANT = 0


class CallOrigin(UniqueName):
    """Where a call comes from."""


CallOrigin.INTERNAL = CallOrigin("internal")
CallOrigin.EXTERNAL = CallOrigin("external")
CallOrigin.TEST = CallOrigin("test")


class UserType(UniqueName):
    """Kind of user performing a call."""


UserType.SYSTEM = UserType("system")
UserType.ADMIN = UserType("admin")
UserType.CUSTOMER = UserType("customer")
UserType.MIGRATION = UserType("migration")
UserType.TEST = UserType("test")


class CallOriginType(UniqueNameType):
    Type = CallOrigin
    cache_ok = True


class UserTypeType(UniqueNameType):
    Type = UserType
    cache_ok = True


class CallContext:
    """Immutable description of a call."""

    def __init__(
        self,
        user_name: str,
        created_date: datetime,
        updated_date: Optional[datetime] = None,
        origin: CallOrigin = CallOrigin.INTERNAL,
        user_type: UserType = UserType.SYSTEM,
        reason_code: Optional[str] = None,
        comments: Optional[str] = None,
        user_token: Optional[uuid.UUID] = None,
        tenant_record_id: int = DEFAULT_TENANT,
    ) -> None:
        if not user_name or not user_name.strip():
            raise ValueError("a call context requires a user name")

        self.__dict__.update(
            user_name=user_name.strip(),
            created_date=utc_dt(created_date),
            updated_date=utc_dt(updated_date or created_date),
            origin=CallOrigin(origin),
            user_type=UserType(user_type),
            reason_code=reason_code,
            comments=comments,
            user_token=user_token or uuid.uuid4(),
            tenant_record_id=tenant_record_id,
        )

    def __setattr__(self, key, value):
        raise AttributeError("CallContext is immutable")

    def __repr__(self):
        return (
            f"<{self.__class__.__name__} user_name={self.user_name!r} "
            f"origin={self.origin} user_type={self.user_type} "
            f"tenant={self.tenant_record_id} "
            f"created_date={self.created_date.isoformat()}>"
        )


class CallContextFactory:
    """Build call contexts timestamped by a :class:`~.clock.Clock`."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock = clock if clock is not None else Clock()

    def create_call_context(
        self,
        user_name: str,
        origin: CallOrigin = CallOrigin.INTERNAL,
        user_type: UserType = UserType.SYSTEM,
        reason_code: Optional[str] = None,
        comments: Optional[str] = None,
        user_token: Optional[uuid.UUID] = None,
        tenant_record_id: int = DEFAULT_TENANT,
    ) -> CallContext:
        now = self.clock.utcnow()
        return CallContext(
            user_name,
            created_date=now,
            updated_date=now,
            origin=origin,
            user_type=user_type,
            reason_code=reason_code,
            comments=comments,
            user_token=user_token,
            tenant_record_id=tenant_record_id,
        )

    def create_migration_call_context(
        self,
        user_name: str,
        created_date: datetime,
        updated_date: datetime,
        tenant_record_id: int = DEFAULT_TENANT,
    ) -> CallContext:
        """Context for data imported from another system, keeping its
        original dates."""
        return CallContext(
            user_name,
            created_date=created_date,
            updated_date=updated_date,
            origin=CallOrigin.INTERNAL,
            user_type=UserType.MIGRATION,
            tenant_record_id=tenant_record_id,
        )
