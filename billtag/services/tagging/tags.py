"""In-memory tags.

A :class:`Tag` is either descriptive (`control_type is None`) or a control
tag, whose :class:`~.controls.ControlTagType` carries behavioral effects.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, Optional, Union

from billtag.core.util import assert_uuid

from .controls import ControlTagType, kind_for_name
from .objects import ObjectType


def definition_name(definition: Any) -> str:
    """Name of a tag definition given as a definition, a control tag type, a
    :class:`Tag` or a plain string."""
    if isinstance(definition, ControlTagType):
        return definition.name
    if isinstance(definition, Tag):
        return definition.tag_definition_name
    name = getattr(definition, "name", definition)
    if not isinstance(name, str):
        raise TypeError("Not a tag definition or a tag definition name", definition)
    kind = kind_for_name(name)
    return kind.name if kind is not None else name.strip()


class Tag:
    """A named annotation attached to one object.

    `object_id` and `object_type` may be left unset until the tag is added to
    a :class:`~.store.TagStore`.
    """

    def __init__(
        self,
        tag_definition_name: str,
        object_id: Optional[uuid.UUID] = None,
        object_type: Optional[Union[ObjectType, str]] = None,
        id: Optional[uuid.UUID] = None,
        control_type: Optional[ControlTagType] = None,
        created_date: Optional[datetime] = None,
    ) -> None:
        tag_definition_name = (tag_definition_name or "").strip()
        if not tag_definition_name:
            raise ValueError("a tag requires a tag definition name")

        # a reserved name always denotes its control tag type
        kind = kind_for_name(tag_definition_name)
        if control_type is None:
            control_type = kind
        elif kind is not control_type:
            raise ValueError(
                f"control tag {control_type} cannot be named {tag_definition_name!r}"
            )
        if control_type is not None:
            tag_definition_name = control_type.name

        if object_id is not None:
            assert_uuid(object_id)
        if id is not None:
            assert_uuid(id)

        self.id = id if id is not None else uuid.uuid4()
        self.tag_definition_name = tag_definition_name
        self.object_id = object_id
        self.object_type = ObjectType(object_type) if object_type is not None else None
        self.control_type = control_type
        self.created_date = created_date

    @property
    def is_control(self) -> bool:
        return self.control_type is not None

    @property
    def effects(self) -> Dict[str, bool]:
        """Predicates forced to `False` by this tag."""
        if self.control_type is None:
            return {}
        return self.control_type.effects

    @property
    def is_bound(self) -> bool:
        return self.object_id is not None

    def bind(self, object_id: uuid.UUID, object_type: Union[ObjectType, str]) -> "Tag":
        """Attach this tag to an object.

        :raise ValueError: if the tag is already attached to another object.
        """
        assert_uuid(object_id)
        object_type = ObjectType(object_type)
        if not self.is_bound:
            self.object_id = object_id
            self.object_type = object_type
        elif (self.object_id, self.object_type) != (object_id, object_type):
            raise ValueError(
                f"{self!r} is attached to {self.object_type}:{self.object_id}, "
                f"not to {object_type}:{object_id}"
            )
        return self

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Tag):
            return NotImplemented
        return (
            self.id == other.id
            and self.tag_definition_name == other.tag_definition_name
        )

    def __hash__(self) -> int:
        return hash((self.id, self.tag_definition_name))

    def __str__(self):
        return self.tag_definition_name

    def __repr__(self):
        cls = self.__class__
        kind = "control" if self.is_control else "descriptive"
        return (
            "<{mod}.{cls} {kind} id={t.id!r} name={t.tag_definition_name!r} "
            "object={t.object_type}:{t.object_id} at 0x{addr:x}>".format(
                mod=cls.__module__, cls=cls.__name__, kind=kind, t=self, addr=id(self)
            )
        )


def descriptive_tag(definition: Any, **kwargs: Any) -> Tag:
    """Create a descriptive tag for a user tag definition (or its name)."""
    name = definition_name(definition)
    if kind_for_name(name) is not None:
        raise ValueError(f"{name!r} is a control tag name: use control_tag()")
    return Tag(name, **kwargs)


def control_tag(kind: Union[ControlTagType, str], **kwargs: Any) -> Tag:
    """Create a control tag."""
    control_type = kind_for_name(kind)
    if control_type is None:
        raise ValueError(f"Unknown control tag type: {kind!r}")
    return Tag(control_type.name, control_type=control_type, **kwargs)


def make_tag(definition: Any, **kwargs: Any) -> Tag:
    """Create the tag variant matching a definition name."""
    return Tag(definition_name(definition), **kwargs)
