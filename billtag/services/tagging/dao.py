"""Persistence of tags, with history and audit rows.

Each insertion or deletion of a `tags` row appends one `tag_history` row
and one `audit_log` row referencing it, within a single savepoint.

Changes of the tags of one object are serialized: each of them first locks
the `tag_targets` row of the object, creating it if needed.
"""
import uuid
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import sqlalchemy as sa
import sqlalchemy.exc

from billtag.core.callcontext import DEFAULT_TENANT, CallContext
from billtag.core.dao import EntityDao
from billtag.core.signals import tag_created, tag_deleted
from billtag.core.transaction import Transaction
from billtag.core.util import assert_uuid
from billtag.services.audit import DELETE, INSERT, AuditLog, audit_service

from .controls import kind_for_name
from .exceptions import AlreadyTagged, DefinitionMissing
from .models import TagDefinition, TagEntry, TagHistoryEntry, TagTarget
from .objects import ObjectType
from .tags import Tag, definition_name, make_tag


class TagDao(EntityDao):
    autocommit_config_key = "TAGGING_AUTOCOMMIT"

    def insert_tag(
        self,
        object_id: uuid.UUID,
        object_type: Union[ObjectType, str],
        definition: Any,
        context: CallContext,
    ) -> Tag:
        """Attach a tag to an object.

        `definition` is a tag definition, its name, a control tag type or a
        :class:`Tag` (whose id is kept).

        :raise DefinitionMissing: if the definition is neither a control tag
            type nor registered for the context tenant.
        :raise AlreadyTagged: if the object already carries this tag.
        """
        assert_uuid(object_id)
        object_type = ObjectType(object_type)
        if isinstance(definition, Tag):
            tag = definition.bind(object_id, object_type)
        else:
            tag = make_tag(definition, object_id=object_id, object_type=object_type)

        try:
            with self.transaction() as txn:
                self._lock_target(txn, object_id, object_type, context.tenant_record_id)
                if self._get_entry(tag, context.tenant_record_id) is not None:
                    raise AlreadyTagged(tag.tag_definition_name, object_type, object_id)
                self._insert(txn, tag, context)
        except sa.exc.IntegrityError as e:
            raise AlreadyTagged(tag.tag_definition_name, object_type, object_id) from e

        return tag

    def delete_tag(
        self,
        object_id: uuid.UUID,
        object_type: Union[ObjectType, str],
        definition: Any,
        context: CallContext,
    ) -> Optional[Tag]:
        """Remove a tag from an object, if present.

        :returns: the removed tag, or `None`.
        """
        assert_uuid(object_id)
        object_type = ObjectType(object_type)
        name = definition_name(definition)

        with self.transaction() as txn:
            self._lock_target(txn, object_id, object_type, context.tenant_record_id)
            stmt = (
                self._entries_stmt(object_id, object_type, context.tenant_record_id)
                .where(TagEntry.tag_definition_name == name)
                .with_for_update()
            )
            entry = txn.session.execute(stmt).scalar_one_or_none()
            if entry is None:
                return None
            tag = self._delete(txn, entry, context)

        return tag

    def load_entities(
        self,
        object_id: uuid.UUID,
        object_type: Union[ObjectType, str],
        tenant_record_id: int = DEFAULT_TENANT,
    ) -> Dict[str, Tag]:
        """Current tags of an object, keyed by definition name."""
        assert_uuid(object_id)
        stmt = self._entries_stmt(
            object_id, ObjectType(object_type), tenant_record_id
        ).order_by(TagEntry.tag_definition_name)
        entries = self.session.execute(stmt).scalars()
        return {entry.tag_definition_name: entry.to_tag() for entry in entries}

    def save_entities(
        self,
        object_id: uuid.UUID,
        object_type: Union[ObjectType, str],
        tags: Union[Mapping[str, Tag], Iterable[Tag]],
        context: CallContext,
    ) -> Tuple[List[Tag], List[Tag]]:
        """Make the tags of an object those of `tags`.

        Tags are compared by definition name: missing ones are inserted with
        their own id, extra ones are deleted, and the others are left
        untouched. Either all changes are applied, or none.

        :returns: `(inserted, deleted)` tags.
        """
        assert_uuid(object_id)
        object_type = ObjectType(object_type)
        if isinstance(tags, Mapping):
            tags = tags.values()

        desired: Dict[str, Tag] = {}
        for tag in tags:
            tag.bind(object_id, object_type)
            desired.setdefault(tag.tag_definition_name, tag)

        inserted, deleted = [], []
        try:
            with self.transaction() as txn:
                tenant = context.tenant_record_id
                self._lock_target(txn, object_id, object_type, tenant)
                stmt = self._entries_stmt(object_id, object_type, tenant)
                current = {
                    entry.tag_definition_name: entry
                    for entry in txn.session.execute(stmt).scalars()
                }

                for name in sorted(desired.keys() - current.keys()):
                    inserted.append(self._insert(txn, desired[name], context))
                for name in sorted(current.keys() - desired.keys()):
                    deleted.append(self._delete(txn, current[name], context))
        except sa.exc.IntegrityError as e:
            raise AlreadyTagged(object_type, object_id) from e

        if inserted or deleted:
            self.logger.debug(
                "Saved tags of %s:%s: +%r -%r",
                object_type,
                object_id,
                [str(tag) for tag in inserted],
                [str(tag) for tag in deleted],
            )
        return inserted, deleted

    def get_history(
        self,
        object_id: uuid.UUID,
        object_type: Union[ObjectType, str],
        tenant_record_id: int = DEFAULT_TENANT,
    ) -> List[TagHistoryEntry]:
        """Changes of the tags of an object, oldest first."""
        stmt = (
            sa.select(TagHistoryEntry)
            .where(
                TagHistoryEntry.tenant_record_id == tenant_record_id,
                TagHistoryEntry.object_id == object_id,
                TagHistoryEntry.object_type == ObjectType(object_type),
            )
            .order_by(TagHistoryEntry.record_id)
        )
        return list(self.session.execute(stmt).scalars())

    def audit_entries_for(
        self, tag_id: uuid.UUID, change_type: Optional[str] = None
    ) -> List[Tuple[AuditLog, TagHistoryEntry]]:
        """Audit rows of the changes of tag `tag_id`, with their history
        rows."""
        return audit_service.entries_for_history(
            TagHistoryEntry, tag_id, change_type=change_type, session=self.session
        )

    def get_objects_tagged_with(
        self,
        definition: Any,
        object_type: Optional[Union[ObjectType, str]] = None,
        tenant_record_id: int = DEFAULT_TENANT,
    ) -> List[Tuple[uuid.UUID, ObjectType]]:
        stmt = (
            sa.select(TagEntry.object_id, TagEntry.object_type)
            .where(
                TagEntry.tenant_record_id == tenant_record_id,
                TagEntry.tag_definition_name == definition_name(definition),
            )
            .order_by(TagEntry.record_id)
        )
        if object_type is not None:
            stmt = stmt.where(TagEntry.object_type == ObjectType(object_type))
        return [tuple(row) for row in self.session.execute(stmt)]

    #
    # Internals, called within a transaction
    #
    def _entries_stmt(self, object_id, object_type, tenant_record_id):
        return sa.select(TagEntry).where(
            TagEntry.tenant_record_id == tenant_record_id,
            TagEntry.object_id == object_id,
            TagEntry.object_type == object_type,
        )

    def _lock_target(
        self,
        txn: Transaction,
        object_id: uuid.UUID,
        object_type: ObjectType,
        tenant_record_id: int,
    ) -> None:
        """Lock the `tag_targets` row of an object until the end of the
        enclosing transaction."""
        session = txn.session
        stmt = (
            sa.select(TagTarget.record_id)
            .where(
                TagTarget.tenant_record_id == tenant_record_id,
                TagTarget.object_id == object_id,
                TagTarget.object_type == object_type,
            )
            .with_for_update()
        )
        if session.execute(stmt).scalar_one_or_none() is not None:
            return

        # an inserted row stays locked until commit
        target = TagTarget(
            tenant_record_id=tenant_record_id,
            object_id=object_id,
            object_type=object_type,
        )
        try:
            with session.begin_nested():
                session.add(target)
                session.flush()
        except sa.exc.IntegrityError:
            # inserted by a concurrent transaction, which has now committed
            session.execute(stmt).scalar_one()

    def _get_entry(self, tag: Tag, tenant_record_id: int) -> Optional[TagEntry]:
        stmt = self._entries_stmt(
            tag.object_id, tag.object_type, tenant_record_id
        ).where(TagEntry.tag_definition_name == tag.tag_definition_name)
        return self.session.execute(stmt).scalar_one_or_none()

    def _check_definition(self, name: str, tenant_record_id: int) -> None:
        if kind_for_name(name) is not None:
            return
        # shared lock: the definition cannot be deleted before we commit
        stmt = (
            sa.select(TagDefinition.record_id)
            .where(
                TagDefinition.tenant_record_id == tenant_record_id,
                TagDefinition.name == name,
            )
            .with_for_update(read=True)
        )
        if self.session.execute(stmt).scalar_one_or_none() is None:
            raise DefinitionMissing(name)

    def _insert(self, txn: Transaction, tag: Tag, context: CallContext) -> Tag:
        self._check_definition(tag.tag_definition_name, context.tenant_record_id)

        session = txn.session
        entry = TagEntry.from_tag(tag)
        entry.set_created(context)
        session.add(entry)
        session.flush()

        self._log_change(txn, entry, INSERT, context)
        tag.created_date = context.created_date
        txn.notify(tag_created, tag=tag, context=context)
        return tag

    def _delete(self, txn: Transaction, entry: TagEntry, context: CallContext) -> Tag:
        tag = entry.to_tag()
        self._log_change(txn, entry, DELETE, context)
        txn.session.delete(entry)
        txn.notify(tag_deleted, tag=tag, context=context)
        return tag

    def _log_change(
        self, txn: Transaction, entry: TagEntry, change_type: str, context: CallContext
    ) -> None:
        session = txn.session
        history = TagHistoryEntry.of(entry, change_type)
        history.set_created(context)
        if change_type != INSERT:
            history.set_updated(context)
        session.add(history)
        session.flush()
        audit_service.log(
            session,
            TagHistoryEntry.__tablename__,
            history.record_id,
            change_type,
            context,
        )
