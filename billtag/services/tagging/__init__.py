"""Tagging service: descriptive and control tags on billing objects."""
from .controls import (
    ENFORCE_OVERDUE,
    GENERATE_INVOICE,
    PREDICATES,
    PROCESS_PAYMENT,
    ControlTagType,
    effects_of,
    is_reserved_name,
    kind_for_name,
)
from .dao import TagDao
from .definitions import TagDefinitionDao, control_definition, control_definitions
from .exceptions import (
    AlreadyExists,
    AlreadyTagged,
    DefinitionMissing,
    InUse,
    InvalidName,
    NotFound,
    Reserved,
    StorageFailure,
    TagApiError,
    TagDefinitionError,
    TagError,
)
from .models import (
    TagDefinition,
    TagDefinitionHistoryEntry,
    TagEntry,
    TagHistoryEntry,
    TagTarget,
)
from .objects import ObjectType
from .service import TagService, tag_service
from .store import TagStore
from .tags import Tag, control_tag, descriptive_tag, make_tag

__all__ = [
    "ControlTagType",
    "GENERATE_INVOICE",
    "PROCESS_PAYMENT",
    "ENFORCE_OVERDUE",
    "PREDICATES",
    "effects_of",
    "is_reserved_name",
    "kind_for_name",
    "control_definition",
    "control_definitions",
    "Tag",
    "descriptive_tag",
    "control_tag",
    "make_tag",
    "TagStore",
    "ObjectType",
    "TagDefinition",
    "TagDefinitionHistoryEntry",
    "TagEntry",
    "TagHistoryEntry",
    "TagTarget",
    "TagDefinitionDao",
    "TagDao",
    "TagService",
    "tag_service",
    "TagError",
    "TagDefinitionError",
    "TagApiError",
    "InvalidName",
    "AlreadyExists",
    "NotFound",
    "Reserved",
    "InUse",
    "DefinitionMissing",
    "AlreadyTagged",
    "StorageFailure",
]
