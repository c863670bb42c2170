"""
Field Binder - Typed Record Fields <-> Data Map

A record declares the fields that take part in validation with the Field
descriptor. Each Field maps an external key (the name used in the data map,
in rule sets and in scenes) to an attribute on the record:

    class UserParams(Validator):
        username = Field("username", str, default="")
        user_id = Field("user_id", int, default=0)

Plain attributes are not part of the data map.

The key -> Field table for a class is built once and cached, so binding never
walks the class at validation time.
"""

from functools import lru_cache
from typing import Any, Dict, Mapping, Tuple, Type, Union

from .errors import ConfigurationError

_MISSING = object()

FieldType = Union[type, Tuple[type, ...]]


def type_name(field_type: FieldType) -> str:
    if isinstance(field_type, tuple):
        return " | ".join(t.__name__ for t in field_type)
    return field_type.__name__


class Field:
    """Accessor/mutator pair binding one record attribute to one data-map key."""

    def __init__(self, key: str = None, field_type: FieldType = object,
                 default: Any = None, nullable: bool = False,
                 default_factory=None):
        """
        Args:
            key: External key in the data map (defaults to the attribute name)
            field_type: Type or tuple of types an assigned value must be an instance of
            default: Value returned before anything is assigned
            nullable: Whether None may be assigned
            default_factory: Zero-argument callable building a fresh default per record
        """
        self.key = key
        self.field_type = field_type
        self.default = default
        self.default_factory = default_factory
        self.nullable = nullable
        self.name = None

    def __set_name__(self, owner, name):
        self.name = name
        if not self.key:
            self.key = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        value = instance.__dict__.get(self.name, _MISSING)
        if value is _MISSING:
            if self.default_factory is not None:
                value = self.default_factory()
                instance.__dict__[self.name] = value
            else:
                value = self.default
        return value

    def __set__(self, instance, value):
        if not self.accepts(value):
            raise TypeError(self.mismatch_message(value))
        instance.__dict__[self.name] = value

    def accepts(self, value: Any) -> bool:
        if value is None:
            return self.nullable
        if isinstance(value, bool):
            # bool subclasses int but only binds where bool is declared
            types = self.field_type if isinstance(self.field_type, tuple) else (self.field_type,)
            return any(t is bool or t is object for t in types)
        return isinstance(value, self.field_type)

    def mismatch_message(self, value: Any) -> str:
        return (
            f"field [{self.key}] is declared as {type_name(self.field_type)} "
            f"but got {value!r} of type {type(value).__name__}"
        )

    def __repr__(self) -> str:
        return f"Field(key={self.key!r}, field_type={type_name(self.field_type)})"


@lru_cache(maxsize=None)
def field_table(cls: Type) -> Dict[str, Field]:
    """
    Return the key -> Field table for a record class.

    Walks the MRO base-first so a subclass redeclaring a key replaces the
    base's Field while keeping its position.
    """
    table: Dict[str, Field] = {}
    for klass in reversed(cls.__mro__):
        for attr in vars(klass).values():
            if isinstance(attr, Field):
                table[attr.key] = attr
    return table


def to_map(record: Any) -> Dict[str, Any]:
    """Snapshot every declared field of record into a new data map."""
    return {key: getattr(record, f.name) for key, f in field_table(type(record)).items()}


def from_map(record: Any, data: Mapping[str, Any]) -> None:
    """
    Assign every declared field whose key is present in data.

    All values are type-checked before any is assigned, so a mismatch leaves
    the record untouched. Keys without a declared field are ignored.

    Raises:
        ConfigurationError: If a value is not assignable to its field
    """
    fields = field_table(type(record))
    updates = []
    for key, value in data.items():
        f = fields.get(key)
        if f is None:
            continue
        if not f.accepts(value):
            raise ConfigurationError(f.mismatch_message(value))
        updates.append((f, value))

    for f, value in updates:
        record.__dict__[f.name] = value
