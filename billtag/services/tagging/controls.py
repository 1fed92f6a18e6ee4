"""Control tags: reserved tag names that suppress billing actions.

Control semantics live in code: billing code branches on
:class:`ControlTagType` members, never on strings. The name of each member is
the reserved tag definition name.
"""
import enum
import uuid
from typing import Dict, FrozenSet, Optional, Union

#: billing predicates. They default to `True`; control tags force them to
#: `False`.
GENERATE_INVOICE = "generate_invoice"
PROCESS_PAYMENT = "process_payment"
ENFORCE_OVERDUE = "enforce_overdue"

PREDICATES = (GENERATE_INVOICE, PROCESS_PAYMENT, ENFORCE_OVERDUE)


class ControlTagType(enum.Enum):
    #: (number, description, suppressed predicates)
    AUTO_PAY_OFF = (
        1,
        "Suspends payments until removed.",
        frozenset({PROCESS_PAYMENT}),
    )
    AUTO_INVOICING_OFF = (
        2,
        "Suspends invoicing until removed.",
        frozenset({GENERATE_INVOICE}),
    )
    OVERDUE_ENFORCEMENT_OFF = (
        3,
        "Suspends overdue enforcement behaviour until removed.",
        frozenset({ENFORCE_OVERDUE}),
    )
    WRITTEN_OFF = (
        4,
        "Indicates that an invoice is written off. No billing or payment "
        "effect on the existing invoice.",
        frozenset({ENFORCE_OVERDUE}),
    )
    MANUAL_PAY = (
        5,
        "Indicates that payments for this account are only made manually.",
        frozenset({PROCESS_PAYMENT}),
    )
    TEST = (
        6,
        "Indicates that this is a test account.",
        frozenset(),
    )

    def __init__(
        self, number: int, description: str, suppressed: FrozenSet[str]
    ) -> None:
        #: well-known id of the matching tag definition
        self.id = uuid.UUID(int=number)
        self.description = description
        self.suppressed = suppressed

    @property
    def effects(self) -> Dict[str, bool]:
        return {predicate: False for predicate in self.suppressed}

    def __str__(self) -> str:
        return self.name


def effects_of(kind: ControlTagType) -> Dict[str, bool]:
    """Map of predicates forced to `False` by `kind`."""
    return ControlTagType(kind).effects


def _normalize(name: str) -> str:
    return str(name).strip().upper()


_KINDS_BY_NAME = {kind.name: kind for kind in ControlTagType}


def kind_for_name(name: Union[str, ControlTagType]) -> Optional[ControlTagType]:
    """Return control tag type reserving `name`, or `None`.

    Lookup ignores case and surrounding spaces, so that no user definition can
    shadow a control name.
    """
    if isinstance(name, ControlTagType):
        return name
    if name is None:
        return None
    return _KINDS_BY_NAME.get(_normalize(name))


def is_reserved_name(name: str) -> bool:
    return kind_for_name(name) is not None
