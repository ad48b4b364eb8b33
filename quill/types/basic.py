# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Built-in argument types: string, number, boolean, selection, array, deferred
and blank.

- `StringType`: always VALID; the value is the raw text.
- `NumberType`: blank is INCOMPLETE, non-numeric or out of bounds is ERROR.
  Increment and decrement snap to `step` and clamp to the bounds.
- `SelectionType`: a fixed or supplied list of named options with prefix
  completion. Increment and decrement cycle through the options, wrapping.
- `BooleanType`: a selection over true/false that also understands present and
  absent flags without looking at any text.
- `ArrayType`: parses every element of an `ArrayArgument` with its subtype.
- `DeferredType`: delegates every operation to whatever type its `defer`
  callable returns right now, so a parameter's type can follow a sibling's value.
- `BlankType`: a null-valued placeholder used while a deferred type has nothing
  to defer to.
"""
from __future__ import annotations

import math
import re
from typing import Any, Callable, Iterable, Mapping, Sequence

from quill.argument import (
    Argument,
    ArrayArgument,
    FalseNamedArgument,
    TrueNamedArgument,
    quote_if_needed,
)
from quill.conversion import ArrayConversion, Conversion, Prediction
from quill.exceptions import MisuseError, TypeRegistrationError
from quill.status import Status
from quill.tokenizer import tokenize
from quill.types.base import Type, TypeKind, TypeRegistry, TypeSpec

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


class StringType(Type):
    name = "string"
    kind = TypeKind.STRING

    def stringify(self, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    def parse(self, arg: Argument) -> Conversion:
        return Conversion(arg.text, arg)


class NumberType(Type):
    """
    Whole numbers (or decimals with `allow_float`) within optional bounds.

    Args:
        min (int | float | Callable | None): Lowest accepted value.
        max (int | float | Callable | None): Highest accepted value.
        step (int | float): Increment/decrement step.
        allow_float (bool): Accept decimal input.
    """

    name = "number"
    kind = TypeKind.NUMBER

    def __init__(
        self,
        min: int | float | Callable[[], int | float] | None = None,
        max: int | float | Callable[[], int | float] | None = None,
        step: int | float = 1,
        allow_float: bool = False,
    ) -> None:
        if not step or step < 0:
            raise TypeRegistrationError(f"NumberType step must be positive, got {step}")
        self._min = min
        self._max = max
        self.step = step
        self.allow_float = allow_float

    def get_min(self) -> int | float | None:
        return self._min() if callable(self._min) else self._min

    def get_max(self) -> int | float | None:
        return self._max() if callable(self._max) else self._max

    def stringify(self, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    def _convert(self, text: str) -> int | float:
        if _INTEGER_PATTERN.fullmatch(text):
            return int(text)
        if not self.allow_float or not _FLOAT_PATTERN.fullmatch(text):
            raise ValueError(text)
        value = float(text)
        if not math.isfinite(value):
            raise ValueError(text)
        return value

    def parse(self, arg: Argument) -> Conversion:
        text = arg.text.strip()
        if not text:
            return Conversion(None, arg, Status.INCOMPLETE, "")

        try:
            value = self._convert(text)
        except ValueError:
            return Conversion(
                None, arg, Status.ERROR, f"Can't convert '{arg.text}' to a number."
            )

        maximum = self.get_max()
        if maximum is not None and value > maximum:
            return Conversion(
                None,
                arg,
                Status.ERROR,
                f"{value} is greater than the maximum allowed: {maximum}.",
            )
        minimum = self.get_min()
        if minimum is not None and value < minimum:
            return Conversion(
                None,
                arg,
                Status.ERROR,
                f"{value} is smaller than the minimum allowed: {minimum}.",
            )
        return Conversion(value, arg)

    def _bounds_check(self, value: int | float) -> int | float:
        minimum = self.get_min()
        if minimum is not None and value < minimum:
            return minimum
        maximum = self.get_max()
        if maximum is not None and value > maximum:
            return maximum
        return value

    @staticmethod
    def _is_number(value: Any) -> bool:
        return isinstance(value, (int, float)) and not isinstance(value, bool)

    def increment(self, value: Any) -> int | float:
        if not self._is_number(value):
            minimum = self.get_min()
            return minimum if minimum is not None else 0
        new_value = math.floor((value + self.step) / self.step) * self.step
        return self._bounds_check(new_value)

    def decrement(self, value: Any) -> int | float:
        if not self._is_number(value):
            maximum = self.get_max()
            return maximum if maximum is not None else 0
        new_value = math.ceil((value - self.step) / self.step) * self.step
        return self._bounds_check(new_value)


SelectionData = Sequence[str] | Callable[[], Sequence[str]]
SelectionLookup = (
    Sequence[Prediction | tuple[str, Any] | Mapping[str, Any]]
    | Callable[[], Sequence[Prediction | tuple[str, Any] | Mapping[str, Any]]]
)


def _to_prediction(item: Prediction | tuple[str, Any] | Mapping[str, Any] | str) -> Prediction:
    if isinstance(item, Prediction):
        return item
    if isinstance(item, str):
        return Prediction(item, item)
    if isinstance(item, Mapping):
        return Prediction(item["name"], item.get("value", item["name"]))
    name, value = item
    return Prediction(name, value)


class SelectionType(Type):
    """
    A choice among named options.

    Options come from either `data` (names that are also the values) or
    `lookup` (name/value pairs), each given as a list or as a zero-argument
    callable that is re-invoked on every parse so the option set can change.
    """

    name = "selection"
    kind = TypeKind.SELECTION

    def __init__(
        self,
        data: SelectionData | None = None,
        lookup: SelectionLookup | None = None,
    ) -> None:
        if data is None and lookup is None:
            raise TypeRegistrationError("SelectionType needs either data or lookup")
        self.data = data
        self.lookup = lookup

    def get_lookup(self) -> list[Prediction]:
        if self.lookup is not None:
            items: Iterable = self.lookup() if callable(self.lookup) else self.lookup
        else:
            items = self.data() if callable(self.data) else self.data  # type: ignore[misc]
        return [_to_prediction(item) for item in items or []]

    def stringify(self, value: Any) -> str:
        if value is None:
            return ""
        for item in self.get_lookup():
            if item.value == value:
                return item.name
        return str(value)

    def _find_predictions(self, text: str) -> list[Prediction]:
        return [item for item in self.get_lookup() if item.name.startswith(text)]

    def parse(self, arg: Argument) -> Conversion:
        def predict() -> list[Prediction]:
            return self._find_predictions(arg.text)

        lookup = self.get_lookup()
        for item in lookup:
            if item.name == arg.text:
                return Conversion(item.value, arg, Status.VALID, "", predict)

        if any(item.name.startswith(arg.text) for item in lookup):
            return Conversion(None, arg, Status.INCOMPLETE, "", predict)

        return Conversion(None, arg, Status.ERROR, f"Can't use '{arg.text}'.", predict)

    def _find_value(self, lookup: list[Prediction], value: Any) -> int:
        for index, item in enumerate(lookup):
            if item.value == value and type(item.value) is type(value):
                return index
        return -1

    def increment(self, value: Any) -> Any:
        lookup = self.get_lookup()
        if not lookup:
            return None
        index = self._find_value(lookup, value)
        if index == -1:
            return lookup[0].value
        return lookup[(index + 1) % len(lookup)].value

    def decrement(self, value: Any) -> Any:
        lookup = self.get_lookup()
        if not lookup:
            return None
        index = self._find_value(lookup, value)
        if index == -1:
            return lookup[-1].value
        return lookup[(index - 1) % len(lookup)].value


class BooleanType(SelectionType):
    name = "boolean"
    kind = TypeKind.BOOLEAN

    def __init__(self) -> None:
        super().__init__(lookup=[Prediction("true", True), Prediction("false", False)])

    def parse(self, arg: Argument) -> Conversion:
        if isinstance(arg, TrueNamedArgument):
            return Conversion(True, arg)
        if isinstance(arg, FalseNamedArgument):
            return Conversion(False, arg)
        return super().parse(arg)

    def stringify(self, value: Any) -> str:
        if value is None:
            return ""
        return "true" if value else "false"

    def get_default(self) -> Conversion:
        return Conversion(False, FalseNamedArgument())


class ArrayType(Type):
    """An ordered list of values sharing one subtype."""

    name = "array"
    kind = TypeKind.ARRAY

    def __init__(self, subtype: Type) -> None:
        if not isinstance(subtype, Type):
            raise TypeRegistrationError(f"ArrayType subtype must be a Type, got {subtype!r}")
        self.subtype = subtype

    @classmethod
    def from_spec(
        cls, registry: TypeRegistry, subtype: TypeSpec | None = None, **options: Any
    ) -> ArrayType:
        if subtype is None:
            raise TypeRegistrationError("Array types need a 'subtype'")
        resolved = registry.get_type(subtype)
        if resolved is None:
            raise TypeRegistrationError(f"Unknown array subtype: {subtype!r}")
        return cls(resolved, **options)

    def stringify(self, values: Any) -> str:
        if not values:
            return ""
        return " ".join(quote_if_needed(self.subtype.stringify(value)) for value in values)

    def parse(self, arg: Argument) -> ArrayConversion:
        if not isinstance(arg, ArrayArgument):
            raise MisuseError(
                f"ArrayType.parse requires an ArrayArgument, got {type(arg).__name__}"
            )
        conversions = [self.subtype.parse(element) for element in arg.get_arguments()]
        return ArrayConversion(conversions, arg)

    def parse_string(self, text: str) -> ArrayConversion:
        elements = [token for token in tokenize(text) if not token.is_blank()]
        return self.parse(ArrayArgument(elements))

    def get_default(self) -> ArrayConversion:
        return ArrayConversion([], ArrayArgument())


class DeferredType(Type):
    """
    A type resolved at use time.

    Args:
        defer (Callable[[], Type]): Returns the type to delegate to right now.
    """

    name = "deferred"
    kind = TypeKind.DEFERRED

    def __init__(self, defer: Callable[[], Type] | None = None) -> None:
        if not callable(defer):
            raise TypeRegistrationError(
                "DeferredType needs a 'defer' callable that returns a Type"
            )
        self.defer = defer

    def resolve(self) -> Type:
        return self.defer().resolve()

    def stringify(self, value: Any) -> str:
        return self.defer().stringify(value)

    def parse(self, arg: Argument) -> Conversion:
        return self.defer().parse(arg)

    def parse_string(self, text: str) -> Conversion:
        return self.defer().parse_string(text)

    def increment(self, value: Any) -> Any:
        return self.defer().increment(value)

    def decrement(self, value: Any) -> Any:
        return self.defer().decrement(value)

    def get_default(self) -> Conversion | None:
        return self.defer().get_default()


class BlankType(Type):
    name = "blank"
    kind = TypeKind.BLANK

    def stringify(self, value: Any) -> str:
        return ""

    def parse(self, arg: Argument) -> Conversion:
        return Conversion(None, arg)


BUILTIN_TYPES: tuple[type[Type], ...] = (
    StringType,
    NumberType,
    BooleanType,
    SelectionType,
    ArrayType,
    DeferredType,
    BlankType,
)
