"""Types of the business objects that can be tagged.

A closed vocabulary: `ObjectType("foo")` raises :class:`ValueError`. Names
are stored in lower case and looked up case-insensitively, so
`ObjectType("ACCOUNT") is ACCOUNT`.
"""
from billtag.core.singleton import UniqueName, UniqueNameType


class ObjectType(UniqueName):
    """Type of a taggable object, e.g. `ObjectType("account")`."""


ACCOUNT = ObjectType("account")
BUNDLE = ObjectType("bundle")
SUBSCRIPTION = ObjectType("subscription")
INVOICE = ObjectType("invoice")
INVOICE_ITEM = ObjectType("invoice_item")
PAYMENT = ObjectType("payment")
PAYMENT_METHOD = ObjectType("payment_method")
TAG_DEFINITION = ObjectType("tag_definition")
TENANT = ObjectType("tenant")

ObjectType.close()

ALL_OBJECT_TYPES = ObjectType.members()


class ObjectTypeType(UniqueNameType):
    Type = ObjectType
    cache_ok = True
