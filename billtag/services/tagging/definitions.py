"""Registry of tag definitions.

Control tag definitions are never stored: one is synthesized per
:class:`~.controls.ControlTagType`, with the well-known id of its kind, so
they are always present and cannot be deleted.
"""
import uuid
from typing import Any, List, Optional

import sqlalchemy as sa
import sqlalchemy.exc

from billtag.core.callcontext import DEFAULT_TENANT, CallContext
from billtag.core.dao import EntityDao
from billtag.core.signals import tag_definition_created, tag_definition_deleted
from billtag.services.audit import DELETE, INSERT, audit_service

from .controls import ControlTagType, kind_for_name
from .exceptions import AlreadyExists, InUse, InvalidName, NotFound, Reserved
from .models import TagDefinition, TagDefinitionHistoryEntry, TagEntry
from .tags import definition_name

#: max length of a definition name, as stored
MAX_NAME_LENGTH = TagDefinition.__table__.c.name.type.length


def control_definition(kind: ControlTagType) -> TagDefinition:
    """Transient definition of a control tag type."""
    kind = ControlTagType(kind)
    return TagDefinition(
        id=kind.id,
        name=kind.name,
        description=kind.description,
        is_control_tag=True,
        tenant_record_id=DEFAULT_TENANT,
    )


def control_definitions() -> List[TagDefinition]:
    """Definitions of all control tag types, in declaration order."""
    return [control_definition(kind) for kind in ControlTagType]


def _control_kind_for_id(id_value: uuid.UUID) -> Optional[ControlTagType]:
    for kind in ControlTagType:
        if kind.id == id_value:
            return kind
    return None


class TagDefinitionDao(EntityDao):
    autocommit_config_key = "TAGGING_AUTOCOMMIT"

    def create(
        self, name: str, description: Optional[str], context: CallContext
    ) -> TagDefinition:
        """Register a new tag definition.

        :raise InvalidName: if `name` is blank, too long or reserved by a
            control tag type.
        :raise AlreadyExists: if `name` is already registered for the tenant.
        """
        name = (name or "").strip()
        if not name:
            raise InvalidName("Tag definition name must not be empty")
        if len(name) > MAX_NAME_LENGTH:
            raise InvalidName(
                f"Tag definition name must not exceed {MAX_NAME_LENGTH} characters"
            )
        if kind_for_name(name) is not None:
            raise InvalidName(f"{name!r} is reserved by a control tag")

        tenant = context.tenant_record_id
        if self._query(name, tenant) is not None:
            raise AlreadyExists(name)

        try:
            with self.transaction() as txn:
                session = txn.session
                definition = TagDefinition(
                    id=uuid.uuid4(),
                    name=name,
                    description=description or "",
                    is_control_tag=False,
                )
                definition.set_created(context)
                session.add(definition)
                session.flush()

                self._log_change(session, definition, INSERT, context)
                txn.notify(tag_definition_created, definition=definition, context=context)
        except sa.exc.IntegrityError as e:
            # concurrent creation of the same name
            raise AlreadyExists(name) from e

        self.logger.info("Created tag definition %r (%s)", name, definition.id)
        return definition

    def get_by_name(
        self, name: Any, tenant_record_id: int = DEFAULT_TENANT
    ) -> Optional[TagDefinition]:
        kind = kind_for_name(definition_name(name))
        if kind is not None:
            return control_definition(kind)
        return self._query(definition_name(name), tenant_record_id)

    def get_by_id(
        self, id_value: uuid.UUID, tenant_record_id: int = DEFAULT_TENANT
    ) -> Optional[TagDefinition]:
        kind = _control_kind_for_id(id_value)
        if kind is not None:
            return control_definition(kind)
        stmt = sa.select(TagDefinition).where(
            TagDefinition.tenant_record_id == tenant_record_id,
            TagDefinition.id == id_value,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list(self, tenant_record_id: int = DEFAULT_TENANT) -> List[TagDefinition]:
        """Control definitions first, then registered definitions by name."""
        stmt = (
            sa.select(TagDefinition)
            .where(TagDefinition.tenant_record_id == tenant_record_id)
            .order_by(TagDefinition.name)
        )
        return control_definitions() + list(self.session.execute(stmt).scalars())

    get_tag_definitions = list

    def is_in_use(self, name: Any, tenant_record_id: int = DEFAULT_TENANT) -> bool:
        """`True` if a live tag references definition `name`."""
        stmt = sa.select(
            sa.exists().where(
                TagEntry.tenant_record_id == tenant_record_id,
                TagEntry.tag_definition_name == definition_name(name),
            )
        )
        return self.session.execute(stmt).scalar()

    def delete(self, name: Any, context: CallContext) -> None:
        """Delete a registered definition.

        :raise Reserved: for control tag definitions.
        :raise NotFound: if `name` is not registered.
        :raise InUse: while a tag references the definition.
        """
        name = definition_name(name)
        if kind_for_name(name) is not None:
            raise Reserved(f"Control tag definition {name!r} cannot be deleted")

        tenant = context.tenant_record_id
        with self.transaction() as txn:
            session = txn.session
            definition = self._query(name, tenant, for_update=True)
            if definition is None:
                raise NotFound(name)
            if self.is_in_use(name, tenant):
                raise InUse(f"Tag definition {name!r} is still in use")

            definition_id = definition.id
            self._log_change(session, definition, DELETE, context)
            session.delete(definition)
            txn.notify(tag_definition_deleted, definition=definition, context=context)

        self.logger.info("Deleted tag definition %r (%s)", name, definition_id)

    delete_tag_definition = delete

    def _query(
        self, name: str, tenant_record_id: int, for_update: bool = False
    ) -> Optional[TagDefinition]:
        stmt = sa.select(TagDefinition).where(
            TagDefinition.tenant_record_id == tenant_record_id,
            TagDefinition.name == name,
        )
        if for_update:
            stmt = stmt.with_for_update()
        return self.session.execute(stmt).scalar_one_or_none()

    def _log_change(self, session, definition, change_type, context) -> None:
        history = TagDefinitionHistoryEntry.of(definition, change_type)
        history.set_created(context)
        if change_type != INSERT:
            history.set_updated(context)
        session.add(history)
        session.flush()
        audit_service.log(
            session,
            TagDefinitionHistoryEntry.__tablename__,
            history.record_id,
            change_type,
            context,
        )
