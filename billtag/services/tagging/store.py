"""In-memory tag membership of one object, and the billing predicates it
implies."""
import uuid
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Union

from billtag.core.util import assert_uuid

from .controls import ENFORCE_OVERDUE, GENERATE_INVOICE, PREDICATES, PROCESS_PAYMENT
from .objects import ObjectType
from .tags import Tag, definition_name


class TagStore:
    """Tags of the object `(object_id, object_type)`, keyed by definition name.

    At most one tag per definition name. The store is a plain value: it does
    no I/O and is not thread safe.
    """

    def __init__(
        self,
        object_id: uuid.UUID,
        object_type: Union[ObjectType, str],
        tags: Iterable[Tag] = (),
    ) -> None:
        assert_uuid(object_id)
        self.object_id = object_id
        self.object_type = ObjectType(object_type)
        self._tags: Dict[str, Tag] = {}
        for tag in tags:
            self.add(tag)

    @classmethod
    def from_tags(
        cls,
        object_id: uuid.UUID,
        object_type: Union[ObjectType, str],
        tags: Union[Mapping[str, Tag], Iterable[Tag]],
    ) -> "TagStore":
        if isinstance(tags, Mapping):
            tags = tags.values()
        return cls(object_id, object_type, tags)

    def add(self, tag: Tag) -> None:
        """Add `tag`, unless a tag with the same definition name is already
        there.

        An unbound tag is bound to this store's object.

        :raise ValueError: if `tag` is bound to another object.
        """
        tag.bind(self.object_id, self.object_type)
        self._tags.setdefault(tag.tag_definition_name, tag)

    def remove(self, tag: Tag) -> None:
        self._tags.pop(tag.tag_definition_name, None)

    def remove_by_name(self, name) -> None:
        self._tags.pop(definition_name(name), None)

    def clear(self) -> None:
        self._tags.clear()

    def get(self, name) -> Optional[Tag]:
        return self._tags.get(definition_name(name))

    def members(self) -> List[Tag]:
        """Tags sorted by definition name."""
        return [self._tags[name] for name in sorted(self._tags)]

    def names(self) -> List[str]:
        return sorted(self._tags)

    def allows(self, predicate: str) -> bool:
        """`False` if any control tag of the store suppresses `predicate`."""
        if predicate not in PREDICATES:
            raise ValueError(f"Unknown billing predicate: {predicate!r}")
        return all(tag.effects.get(predicate, True) for tag in self._tags.values())

    def generate_invoice(self) -> bool:
        return self.allows(GENERATE_INVOICE)

    def process_payment(self) -> bool:
        return self.allows(PROCESS_PAYMENT)

    def enforce_overdue(self) -> bool:
        return self.allows(ENFORCE_OVERDUE)

    def __len__(self):
        return len(self._tags)

    def __iter__(self) -> Iterator[Tag]:
        return iter(self.members())

    def __contains__(self, item) -> bool:
        if isinstance(item, Tag):
            return item.tag_definition_name in self._tags
        return definition_name(item) in self._tags

    def __repr__(self):
        return "<{} {}:{} {!r}>".format(
            self.__class__.__name__, self.object_type, self.object_id, self.names()
        )
