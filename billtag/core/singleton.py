"""Vocabularies of names, as value singletons.

`CallOrigin("test") is CallOrigin("TEST")`: one instance per normalized
name and per namespace. A closed namespace refuses names it does not know
yet, which makes it usable for fixed vocabularies such as object types.
"""
from typing import Any, Dict, Optional, Tuple, Type

from sqlalchemy.engine.interfaces import Dialect
from sqlalchemy.types import String, TypeDecorator


def normalize(value: Any) -> str:
    return str(value).strip().lower()


class ValueSingletonMeta(type):
    def __new__(
        mcs: Type["ValueSingletonMeta"],
        name: str,
        bases: Tuple[Type],
        dct: Dict[str, Any],
    ) -> Type:
        dct["__instances__"] = {}
        dct["__closed__"] = False
        dct.setdefault("__slots__", ())
        return type.__new__(mcs, name, bases, dct)

    def __call__(cls, value: Any, *args, **kwargs) -> Any:
        if isinstance(value, cls):
            return value

        key = normalize(value)
        if key not in cls.__instances__:
            if cls.__closed__:
                raise ValueError(f"Unknown {cls.__name__}: {value!r}")
            instance = type.__call__(cls, value, *args, **kwargs)
            cls.__instances__[instance.name] = instance
        return cls.__instances__[key]


class UniqueName(metaclass=ValueSingletonMeta):
    """Base class to create singletons from strings.

    A subclass of :class:`UniqueName` defines a namespace.
    """

    __slots__ = ("_hash", "__name")

    def __init__(self, name: str) -> None:
        self.__name = normalize(name)
        if not self.__name:
            raise ValueError(f"{self.__class__.__name__} name must not be empty")
        self._hash = hash(self.__name)

    @classmethod
    def close(cls) -> None:
        """Refuse any name not created yet."""
        cls.__closed__ = True

    @classmethod
    def members(cls) -> Tuple["UniqueName", ...]:
        """Known names, in creation order."""
        return tuple(cls.__instances__.values())

    @property
    def name(self) -> str:
        return self.__name

    def __repr__(self):
        return f"{self.__class__.__name__}({self.name!r})"

    def __str__(self) -> str:
        return self.name

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, self.__class__):
            return self._hash == other._hash
        return self.__name == str(other)

    def __hash__(self) -> int:
        return self._hash


class UniqueNameType(TypeDecorator):
    """Column type storing a :class:`UniqueName` by its name.

    Subclasses must set `cache_ok` themselves: SQLAlchemy does not inherit
    it::

        class OriginType(UniqueNameType):
            Type = Origin
            cache_ok = True
    """

    impl = String
    cache_ok = True
    Type: type
    default_max_length = 50

    def __init__(self, *args, **kwargs) -> None:
        assert self.Type is not None
        kwargs.setdefault("length", self.default_max_length)
        TypeDecorator.__init__(self, *args, **kwargs)

    def process_bind_param(self, value: Any, dialect: Dialect) -> Optional[str]:
        if value is not None:
            value = self.Type(value).name
        return value

    def process_result_value(self, value: Optional[str], dialect: Dialect) -> Any:
        if value is not None:
            value = self.Type(value)
        return value
