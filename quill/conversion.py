# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `Conversion`, the result of parsing one `Argument` with one `Type`.

A conversion pairs the typed value with the argument it came from, a `Status`,
an optional human readable message and a list of predictions (candidate
completions). Predictions may be supplied as a callable so that they are
computed on demand: the candidate set (registered commands, selection data)
can change between the moment a conversion is created and the moment a UI
asks what would complete it.

`ArrayConversion` aggregates one conversion per array element. Its status is
the worst element status, and it can answer the status of a single element
when asked about one of that element's tokens.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence, Union

from quill.argument import Argument, ArrayArgument
from quill.status import Status


@dataclass(frozen=True)
class Prediction:
    """A candidate completion: the text to insert and the value it stands for."""

    name: str
    value: Any = None


Predictions = Union[Sequence[Prediction], Callable[[], Sequence[Prediction]], None]


class Conversion:
    """
    The typed outcome of parsing one argument.

    Attributes:
        value (Any): The parsed value, or None when nothing usable was parsed.
        arg (Argument): The argument that was parsed.
        status (Status): VALID, INCOMPLETE or ERROR.
        message (str): Why the status is not VALID, if it isn't.
    """

    def __init__(
        self,
        value: Any,
        arg: Argument,
        status: Status = Status.VALID,
        message: str = "",
        predictions: Predictions = None,
    ) -> None:
        if arg is None:
            raise ValueError("Conversion requires an Argument")
        self.value = value
        self.arg = arg
        self.status = status
        self.message = message or ""
        self._predictions = predictions

    def assign(self, assignment: Any) -> None:
        self.arg.assign(assignment)

    def get_status(self, arg: Argument | None = None) -> Status:
        return self.status

    def get_predictions(self) -> list[Prediction]:
        """Evaluate the predictions, calling the supplier if one was given."""
        predictions = self._predictions
        if callable(predictions):
            predictions = predictions()
        return list(predictions or [])

    def is_data_provided(self) -> bool:
        return self.value is not None or self.arg.text != ""

    def value_equals(self, other: Conversion | None) -> bool:
        if other is None:
            return False
        return self.value == other.value

    def __str__(self) -> str:
        return str(self.arg)

    def __repr__(self) -> str:
        return (
            f"Conversion(value={self.value!r}, arg={str(self.arg)!r}, "
            f"status={self.status.name}, message={self.message!r})"
        )


class ArrayConversion(Conversion):
    """The conversion of an `ArrayArgument`, one sub-conversion per element."""

    def __init__(self, conversions: list[Conversion], arg: ArrayArgument) -> None:
        super().__init__(
            [conversion.value for conversion in conversions],
            arg,
            Status.combine(conversion.get_status() for conversion in conversions),
        )
        self.message = next(
            (conversion.message for conversion in conversions if conversion.message), ""
        )
        self.conversions = conversions

    def get_status(self, arg: Argument | None = None) -> Status:
        if arg is not None:
            for conversion in self.conversions:
                if conversion.arg is arg or any(
                    token is arg for token in conversion.arg.get_args()
                ):
                    return conversion.get_status()
        return self.status

    def get_predictions(self) -> list[Prediction]:
        for conversion in self.conversions:
            if conversion.get_status() != Status.VALID:
                return conversion.get_predictions()
        return []

    def is_data_provided(self) -> bool:
        return len(self.conversions) > 0

    def value_equals(self, other: Conversion | None) -> bool:
        if not isinstance(other, ArrayConversion):
            return False
        if len(self.conversions) != len(other.conversions):
            return False
        return all(
            mine.value_equals(theirs)
            for mine, theirs in zip(self.conversions, other.conversions)
        )

    def __str__(self) -> str:
        return "[ " + ", ".join(str(conversion) for conversion in self.conversions) + " ]"
