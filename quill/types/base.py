# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the `Type` contract, the closed `TypeKind` union of known variants, and
the `TypeRegistry` that resolves type specs to `Type` instances.

A type converts between text and values:
- `parse(arg)` turns an `Argument` into a `Conversion` carrying a `Status`.
- `stringify(value)` turns a value back into text.
- `increment(value)` / `decrement(value)` step through values where that makes
  sense, returning None otherwise.
- `get_default()` supplies a blank value for types that have a natural one.

Round-trip contract: for any value produced by `parse`, `parse(stringify(v))`
yields an equal value.

Type specs accepted by `TypeRegistry.get_type()`:
- a `Type` instance, returned unchanged
- a registered name, e.g. "string"
- a mapping with a "name" key plus options, e.g. {"name": "array", "subtype": "number"}
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Union

from quill.argument import Argument
from quill.conversion import Conversion
from quill.exceptions import TypeRegistrationError
from quill.logger import logger


class TypeKind(Enum):
    """The closed set of type variants the engine dispatches on."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SELECTION = "selection"
    ARRAY = "array"
    DEFERRED = "deferred"
    BLANK = "blank"
    COMMAND = "command"

    def __str__(self) -> str:
        return self.value


class Type:
    """Base class for all argument types."""

    name: str = ""
    kind: TypeKind

    def stringify(self, value: Any) -> str:
        raise NotImplementedError(f"{type(self).__name__}.stringify")

    def parse(self, arg: Argument) -> Conversion:
        raise NotImplementedError(f"{type(self).__name__}.parse")

    def parse_string(self, text: str) -> Conversion:
        """Parse a bare string, as if typed with no surrounding whitespace."""
        return self.parse(Argument(text))

    def increment(self, value: Any) -> Any:
        return None

    def decrement(self, value: Any) -> Any:
        return None

    def get_default(self) -> Conversion | None:
        return None

    def resolve(self) -> Type:
        """Return the type that currently does the work (self unless deferred)."""
        return self

    @classmethod
    def from_spec(cls, registry: TypeRegistry, **options: Any) -> Type:
        return cls(**options)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


TypeSpec = Union[Type, str, Mapping[str, Any]]


class TypeRegistry:
    """
    Name → type lookup used when commands and parameters are registered.

    Entries are either ready `Type` instances or `Type` subclasses acting as
    factories; factories are instantiated on each lookup via `from_spec`, so
    parametrised types (arrays, selections, numbers with bounds) get their own
    instance.

    Example:
        registry = TypeRegistry.with_defaults()
        registry.get_type({"name": "number", "min": 0, "max": 42})
    """

    def __init__(self) -> None:
        self._types: dict[str, Type | type[Type]] = {}

    @classmethod
    def with_defaults(cls) -> TypeRegistry:
        """Create a registry holding every built-in type."""
        from quill.types.basic import BUILTIN_TYPES

        registry = cls()
        for builtin in BUILTIN_TYPES:
            registry.register_type(builtin)
        return registry

    def register_type(self, type_: Type | type[Type]) -> None:
        name = getattr(type_, "name", None)
        if not isinstance(type_, Type) and not (
            isinstance(type_, type) and issubclass(type_, Type)
        ):
            raise TypeRegistrationError(
                f"Can't register {type_!r}: expected a Type instance or subclass"
            )
        if not name:
            raise TypeRegistrationError(f"Type {type_!r} must have a name")
        if name in self._types:
            logger.debug("Replacing registered type '%s'", name)
        self._types[name] = type_

    def deregister_type(self, type_: Type | type[Type] | str) -> None:
        name = type_ if isinstance(type_, str) else getattr(type_, "name", None)
        self._types.pop(name, None)

    def get_type_names(self) -> list[str]:
        return sorted(self._types)

    def get_type(self, spec: TypeSpec) -> Type | None:
        """
        Resolve a type spec to a `Type` instance.

        Returns:
            Type | None: The resolved type, or None if the name is unknown.

        Raises:
            TypeRegistrationError: If the spec is malformed.
        """
        if isinstance(spec, Type):
            return spec

        if isinstance(spec, str):
            name, options = spec, {}
        elif isinstance(spec, Mapping):
            options = dict(spec)
            name = options.pop("name", None)
            if not name:
                raise TypeRegistrationError(f"Type spec {spec!r} has no name")
        else:
            raise TypeRegistrationError(f"Unsupported type spec: {spec!r}")

        entry = self._types.get(name)
        if entry is None:
            return None
        if isinstance(entry, Type):
            if options:
                raise TypeRegistrationError(
                    f"Type '{name}' is registered as an instance and takes no options"
                )
            return entry
        try:
            return entry.from_spec(self, **options)
        except TypeError as error:
            raise TypeRegistrationError(
                f"Invalid options for type '{name}': {error}"
            ) from error

    def __contains__(self, name: str) -> bool:
        return name in self._types
