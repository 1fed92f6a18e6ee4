"""Tables of the tagging service.

`tags` and `tag_definitions` hold the current state. `tag_history` and
`tag_definition_history` are append-only: each row is referenced by exactly
one :class:`~billtag.services.audit.models.AuditLog` row on `record_id`.
`tag_targets` only holds the per-object rows locked while tags change.
"""
import sqlalchemy as sa
from sqlalchemy.schema import Column
from sqlalchemy.types import Boolean, Integer, String, UnicodeText

from billtag.core.models import (
    CallContextMixin,
    Model,
    RecordIdMixin,
    TenantMixin,
    UUIDMixin,
)
from billtag.core.sqlalchemy import UUID
from billtag.services.audit.models import CHANGE_TYPES

from .objects import ObjectTypeType
from .tags import Tag, make_tag

__all__ = [
    "TagDefinition",
    "TagDefinitionHistoryEntry",
    "TagEntry",
    "TagHistoryEntry",
    "TagTarget",
]


class TagDefinition(RecordIdMixin, UUIDMixin, CallContextMixin, Model):
    """Registered tag definition.

    Control tag definitions are never stored: they are synthesized by
    :func:`~.definitions.control_definitions`.
    """

    __tablename__ = "tag_definitions"

    name = Column(String(50), nullable=False)
    description = Column(UnicodeText(), nullable=False, default="")
    is_control_tag = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        sa.UniqueConstraint("tenant_record_id", "name"),
        sa.CheckConstraint(
            sa.and_(sa.func.trim(name) == name, sa.func.length(name) > 0),
            name="tag_definition_valid_name",
        ),
    )

    def __str__(self):
        return self.name

    def __repr__(self):
        return "<{} id={!r} name={!r}{}>".format(
            self.__class__.__name__,
            self.id,
            self.name,
            " control" if self.is_control_tag else "",
        )


class TagDefinitionHistoryEntry(RecordIdMixin, CallContextMixin, Model):
    __tablename__ = "tag_definition_history"

    id = Column(UUID(), nullable=False, index=True)
    name = Column(String(50), nullable=False)
    description = Column(UnicodeText())
    is_control_tag = Column(Boolean, nullable=False, default=False)
    change_type = Column(String(6), nullable=False)

    __table_args__ = (sa.CheckConstraint(change_type.in_(CHANGE_TYPES)),)

    @classmethod
    def of(cls, definition: TagDefinition, change_type: str) -> "TagDefinitionHistoryEntry":
        return cls(
            id=definition.id,
            name=definition.name,
            description=definition.description,
            is_control_tag=definition.is_control_tag,
            change_type=change_type,
        )


class TagEntry(RecordIdMixin, UUIDMixin, CallContextMixin, Model):
    """A tag currently attached to an object."""

    __tablename__ = "tags"

    tag_definition_name = Column(String(50), nullable=False, index=True)
    object_id = Column(UUID(), nullable=False)
    object_type = Column(ObjectTypeType(), nullable=False)

    __table_args__ = (
        sa.UniqueConstraint(
            "tenant_record_id", object_id, object_type, tag_definition_name
        ),
        sa.Index("ix_tags_object", object_id, object_type),
    )

    @classmethod
    def from_tag(cls, tag: Tag) -> "TagEntry":
        return cls(
            id=tag.id,
            tag_definition_name=tag.tag_definition_name,
            object_id=tag.object_id,
            object_type=tag.object_type,
        )

    def to_tag(self) -> Tag:
        return make_tag(
            self.tag_definition_name,
            id=self.id,
            object_id=self.object_id,
            object_type=self.object_type,
            created_date=self.created_date,
        )

    def __repr__(self):
        return "<{} id={!r} {!r} on {}:{}>".format(
            self.__class__.__name__,
            self.id,
            self.tag_definition_name,
            self.object_type,
            self.object_id,
        )


class TagHistoryEntry(RecordIdMixin, CallContextMixin, Model):
    """One change of the `tags` table."""

    __tablename__ = "tag_history"

    #: id of the tag
    id = Column(UUID(), nullable=False, index=True)
    #: `record_id` of the changed `tags` row
    target_record_id = Column(Integer, nullable=False)
    change_type = Column(String(6), nullable=False)
    tag_definition_name = Column(String(50), nullable=False)
    object_id = Column(UUID(), nullable=False)
    object_type = Column(ObjectTypeType(), nullable=False)

    __table_args__ = (
        sa.CheckConstraint(change_type.in_(CHANGE_TYPES)),
        sa.Index("ix_tag_history_object", object_id, object_type),
    )

    @classmethod
    def of(cls, entry: TagEntry, change_type: str) -> "TagHistoryEntry":
        return cls(
            id=entry.id,
            target_record_id=entry.record_id,
            change_type=change_type,
            tag_definition_name=entry.tag_definition_name,
            object_id=entry.object_id,
            object_type=entry.object_type,
        )

    def __repr__(self):
        return "<{} #{} {} {!r} on {}:{}>".format(
            self.__class__.__name__,
            self.record_id,
            self.change_type,
            self.tag_definition_name,
            self.object_type,
            self.object_id,
        )


class TagTarget(RecordIdMixin, TenantMixin, Model):
    """An object whose tags have been changed at least once.

    Its row is locked by every change of the object's tags, so that these
    changes are serialized even when the object has no tag row to lock.
    """

    __tablename__ = "tag_targets"

    object_id = Column(UUID(), nullable=False)
    object_type = Column(ObjectTypeType(), nullable=False)

    __table_args__ = (
        sa.UniqueConstraint("tenant_record_id", object_id, object_type),
    )

    def __repr__(self):
        return "<{} {}:{}>".format(
            self.__class__.__name__, self.object_type, self.object_id
        )
