# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `Assignment`, the live binding of one command parameter to the
`Conversion` currently filling it.

An assignment always holds a conversion: an unfilled parameter is represented
by its default (or by parsing an empty argument), never by None.

Changing the conversion publishes:
- `EventType.ASSIGNMENT_CHANGE` when the parsed value differs from before.
- `EventType.ARGUMENT_CHANGE` when only the argument changed, e.g. the user
  retyped "6" as "06". The `Requisition` listens to both so that its token
  list stays in step; renderers normally only care about the first.

Specialised assignments:
- `CommandAssignment`: holds the resolved command (parameter "__command").
- `UnassignedAssignment`: collects tokens that matched no parameter. It is in
  ERROR whenever it holds any.
"""
from __future__ import annotations

from typing import Any

from quill.argument import (
    Argument,
    ArrayArgument,
    FalseNamedArgument,
    NamedArgument,
    TrueNamedArgument,
    escape,
)
from quill.canon import UNSET, Canon, Parameter
from quill.conversion import ArrayConversion, Conversion, Prediction
from quill.events import AssignmentChangeEvent, EventManager, EventType
from quill.status import Status
from quill.types.base import TypeKind, TypeRegistry
from quill.types.basic import StringType


class Assignment:
    """
    Binds a `Parameter` to its current `Conversion`.

    Args:
        param (Parameter): The parameter being filled.
        param_index (int | None): Position of the parameter in its command, -1
            for the command itself and None for the unassigned bucket.
    """

    is_command = False

    def __init__(self, param: Parameter, param_index: int | None) -> None:
        self.param = param
        self.param_index = param_index
        self.events = EventManager()
        self.conversion: Conversion = None  # type: ignore[assignment]
        self.set_default()

    @property
    def arg(self) -> Argument:
        return self.conversion.arg

    @property
    def value(self) -> Any:
        return self.conversion.value

    def set_conversion(self, conversion: Conversion) -> None:
        """
        Replace the current conversion.

        Publishes ASSIGNMENT_CHANGE if the value changed, ARGUMENT_CHANGE if
        only the argument did, and nothing the first time a conversion is set.
        """
        old_conversion = self.conversion
        self.conversion = conversion
        conversion.assign(self)

        if old_conversion is None or old_conversion is conversion:
            return
        event = AssignmentChangeEvent(self, conversion, old_conversion)
        if not conversion.value_equals(old_conversion) and not (
            conversion.value is None and old_conversion.value is None
        ):
            self.events.publish(EventType.ASSIGNMENT_CHANGE, event)
        elif conversion.arg is not old_conversion.arg:
            self.events.publish(EventType.ARGUMENT_CHANGE, event)

    def parse(self, arg: Argument) -> Conversion:
        """Parse `arg` with the parameter type, wrapping it when the type is an array."""
        type_ = self.param.type
        if type_.resolve().kind is TypeKind.ARRAY and not isinstance(arg, ArrayArgument):
            arg = ArrayArgument([] if arg.is_blank() else [arg])
        return type_.parse(arg)

    def set_default(self) -> None:
        """Fill the parameter with its default."""
        type_ = self.param.type
        default = self.param.default_value
        natural = type_.get_default() if type_.kind is not TypeKind.DEFERRED else None

        if default is not UNSET:
            if natural is not None and natural.value == default:
                conversion = natural
            else:
                conversion = Conversion(default, Argument())
        elif natural is not None:
            conversion = natural
        else:
            conversion = self.parse(Argument())
        self.set_conversion(conversion)

    def get_status(self, arg: Argument | None = None) -> Status:
        if not self.param.is_data_required() and self.arg.is_blank():
            return Status.VALID
        if self.param.is_data_required() and not self.conversion.is_data_provided():
            return Status.ERROR
        return self.conversion.get_status(arg)

    def get_message(self) -> str:
        if self.get_status() == Status.VALID:
            return ""
        if self.param.is_data_required() and not self.conversion.is_data_provided():
            return f"Value required for '{self.param.name}'."
        return self.conversion.message

    def get_predictions(self) -> list[Prediction]:
        predictions = self.conversion.get_predictions()
        kind = self.param.type.resolve().kind
        if (
            not predictions
            and self.arg.is_blank()
            and kind not in (TypeKind.ARRAY, TypeKind.BOOLEAN)
        ):
            predictions = self.parse(Argument()).get_predictions()
        return predictions

    def _beget(self, text: str) -> Argument:
        arg = self.arg
        if (
            not self.param.is_positional_allowed()
            and not isinstance(arg, NamedArgument)
        ):
            name_arg = Argument(f"--{self.param.name}", " ", "")
            return NamedArgument(name_arg, Argument("", " ", "").beget(text))
        return arg.beget(text, prefix_space=not arg.prefix)

    def complete(self) -> bool:
        """Commit the first prediction. Returns False if there was none."""
        predictions = self.get_predictions()
        if not predictions:
            return False
        name = predictions[0].name

        if isinstance(self.conversion, ArrayConversion):
            elements = list(self.conversion.arg.get_arguments())  # type: ignore[attr-defined]
            target = next(
                (
                    index
                    for index, each in enumerate(self.conversion.conversions)
                    if each.get_status() != Status.VALID
                ),
                None,
            )
            if target is None:
                return False
            elements[target] = elements[target].beget(name, prefix_space=True)
            self.set_conversion(self.param.type.parse(ArrayArgument(elements)))
            return True

        self.set_conversion(self.parse(self._beget(name)))
        return True

    def _commit_value(self, value: Any) -> None:
        if value is None:
            return
        type_ = self.param.type
        if type_.kind is TypeKind.BOOLEAN:
            arg = TrueNamedArgument(self.param.name) if value else FalseNamedArgument()
            self.set_conversion(type_.parse(arg))
            return
        self.set_conversion(self.parse(self._beget(type_.stringify(value))))

    def increment(self) -> None:
        self._commit_value(self.param.type.increment(self.value))

    def decrement(self) -> None:
        self._commit_value(self.param.type.decrement(self.value))

    def refresh(self) -> None:
        """Re-parse the current argument, e.g. after a deferred type's target moved."""
        if self.arg.is_blank() or isinstance(self.arg, ArrayArgument):
            return
        self.set_conversion(self.parse(self.arg))

    def ensure_visible_argument(self) -> bool:
        """
        Give an argument with no visible text a placeholder token so this
        positional slot survives serialisation.

        The conversion is replaced silently. Returns True if it was.
        """
        if type(self.arg) is not Argument or str(self.arg) != "":
            return False
        if self.param.type.resolve().kind is TypeKind.ARRAY:
            return False
        text = self.param.type.stringify(self.value) if self.value is not None else ""
        arg = self.arg.beget(text, prefix_space=not self.is_command)
        self.conversion = self.param.type.parse(arg)
        self.conversion.assign(self)
        return True

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(param={self.param.name!r}, "
            f"value={self.value!r}, arg={str(self.arg)!r})"
        )


class CommandAssignment(Assignment):
    """The assignment holding the resolved command."""

    is_command = True

    def __init__(self, canon: Canon) -> None:
        param = Parameter(
            {"name": "__command", "type": canon.command_type}, "", canon.types
        )
        super().__init__(param, -1)

    def _beget(self, text: str) -> Argument:
        arg = self.arg
        return Argument(
            text,
            arg.prefix.rstrip("'\""),
            arg.suffix.lstrip("'\""),
            raw=escape(text),
        )


class UnassignedAssignment(Assignment):
    """Collects the tokens no parameter accepted."""

    def __init__(self) -> None:
        param = Parameter(
            {"name": "__unassigned", "type": StringType(), "default": None},
            "",
            TypeRegistry(),
        )
        self.args: list[Argument] = []
        super().__init__(param, None)

    def set_unassigned(self, args: list[Argument]) -> None:
        self.args = list(args)
        if not self.args:
            self.set_conversion(Conversion(None, Argument()))
            return
        text = " ".join(arg.text for arg in self.args)
        self.set_conversion(
            Conversion(
                None,
                ArrayArgument(self.args),
                Status.ERROR,
                f"Unexpected input: '{text}'.",
            )
        )

    def get_status(self, arg: Argument | None = None) -> Status:
        return Status.ERROR if self.args else Status.VALID

    def get_message(self) -> str:
        return self.conversion.message if self.args else ""
