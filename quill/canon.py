# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the command registry (`Canon`) and the `Command` and `Parameter`
definitions it holds.

Commands are registered from plain mappings or from functions carrying a
`metadata` attribute (see the `command` decorator). Names may contain several
words, e.g. "git commit"; registering such a command synthesises the missing
parent commands ("git") so that the parent can be typed, completed and
reported as needing a subcommand. Implicit parents are removed again when
their last child goes away.

Each `Parameter` resolves its type through the canon's `TypeRegistry`, checks
its default value by round-tripping it through `stringify` and `parse`, and
knows the shortest `--flag` abbreviation that tells it apart from its
siblings.

The `CommandType` registered as "command" is how the `Requisition` resolves
the leading words of the input line to a `Command`.

Example:
    canon = Canon()

    @command("echo", params=[{"name": "message", "type": "string"}])
    def echo(message):
        return message

    canon.add_command(echo)
"""
from __future__ import annotations

import inspect
from typing import Any, Callable, Iterable, Mapping

from quill.argument import Argument
from quill.conversion import Conversion, Prediction
from quill.events import CanonChangeEvent, EventManager, EventType
from quill.exceptions import CommandRegistrationError, TypeRegistrationError
from quill.logger import logger
from quill.report import ReportList
from quill.status import Status
from quill.types.base import Type, TypeKind, TypeRegistry


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def normalize_name(name: str) -> str:
    return " ".join(name.split())


class Parameter:
    """
    One named, typed input of a command.

    Attributes:
        name (str): The parameter name, also its `--name` flag.
        type (Type): The resolved type.
        description (str): Help text.
        default_value (Any): The default, or UNSET when data is required.
        group (str | None): Option group name. Grouped parameters are named-only.
        short (str | None): Single character for the `-x` form of the flag.
        short_prefix (str): Shortest unambiguous abbreviation of the name.
    """

    def __init__(
        self,
        spec: Mapping[str, Any],
        command_name: str,
        types: TypeRegistry,
        group: str | None = None,
    ) -> None:
        if not isinstance(spec, Mapping):
            raise CommandRegistrationError(
                f"In {command_name}: parameter specs must be mappings, got {spec!r}"
            )
        name = spec.get("name")
        if not name or not isinstance(name, str):
            raise CommandRegistrationError(f"In {command_name}: all params need a name")

        self.name = name
        self.command_name = command_name
        self.group = group
        self.description = spec.get("description", "")
        self.short = spec.get("short")
        if self.short is not None and (
            not isinstance(self.short, str) or len(self.short) != 1
        ):
            raise CommandRegistrationError(
                f"In {command_name}/{name}: short flags must be a single character"
            )
        self.short_prefix = name

        type_spec = spec.get("type", "string")
        try:
            resolved = types.get_type(type_spec)
        except TypeRegistrationError as error:
            raise CommandRegistrationError(
                f"In {command_name}/{name}: {error}"
            ) from error
        if resolved is None:
            raise CommandRegistrationError(
                f"In {command_name}/{name}: can't find type for {type_spec!r}"
            )
        self.type: Type = resolved

        has_default = "default" in spec
        if self.type.kind is TypeKind.BOOLEAN:
            if has_default:
                raise CommandRegistrationError(
                    f"In {command_name}/{name}: boolean parameters can not have a default."
                )
            self.default_value: Any = False
        elif has_default:
            self.default_value = spec["default"]
            self._check_default()
        elif self.type.kind is TypeKind.DEFERRED:
            self.default_value = UNSET
        else:
            natural = self.type.get_default()
            self.default_value = natural.value if natural is not None else UNSET

        if not self.is_positional_allowed() and self.is_data_required():
            raise CommandRegistrationError(
                f"In {command_name}/{name}: named parameters (those in a group) "
                "must have a default value"
            )

    def _check_default(self) -> None:
        if self.default_value is None or self.type.kind is TypeKind.DEFERRED:
            return
        text = self.type.stringify(self.default_value)
        conversion = self.type.parse_string(text)
        if conversion.get_status() != Status.VALID:
            logger.error(
                "In %s/%s: default value %r (as '%s') does not parse: %s",
                self.command_name,
                self.name,
                self.default_value,
                text,
                conversion.message or conversion.get_status(),
            )

    def is_data_required(self) -> bool:
        return self.default_value is UNSET

    def is_positional_allowed(self) -> bool:
        return self.group is None and self.type.kind is not TypeKind.BOOLEAN

    def is_known_as(self, text: str) -> bool:
        """True if `text` is one of the flag forms naming this parameter."""
        if self.short is not None and text == f"-{self.short}":
            return True
        if not text.startswith("--"):
            return False
        typed = text[2:]
        if typed == self.name:
            return True
        return len(typed) >= len(self.short_prefix) and self.name.startswith(typed)

    def __repr__(self) -> str:
        return f"Parameter(name={self.name!r}, type={self.type!r})"


def compute_short_prefixes(params: list[Parameter]) -> None:
    for param in params:
        siblings = [other.name for other in params if other is not param]
        param.short_prefix = param.name
        for length in range(1, len(param.name) + 1):
            prefix = param.name[:length]
            if not any(sibling.startswith(prefix) for sibling in siblings):
                param.short_prefix = prefix
                break


class Command:
    """
    A registered command: a possibly multi-word name, ordered parameters and
    the action that runs it.

    A command without an action is a parent: it exists so its children can be
    reached and is never executed itself.

    Attributes:
        name (str): Whitespace-normalised command name.
        description (str): One line help text.
        manual (str): Longer help text.
        params (list[Parameter]): Parameters in declaration order.
        exec (Callable | None): The action.
        functional (bool): Call the action with positional arguments.
        hidden (bool): Exclude from predictions.
        implicit (bool): Synthesised parent, removed with its last child.
    """

    def __init__(
        self, spec: Mapping[str, Any], types: TypeRegistry, implicit: bool = False
    ) -> None:
        name = spec.get("name")
        if not name or not isinstance(name, str) or not normalize_name(name):
            raise CommandRegistrationError("All registered commands must have a name")
        self.name = normalize_name(name)
        self.description = spec.get("description", "")
        self.manual = spec.get("manual", "")
        self.hidden = bool(spec.get("hidden", False))
        self.functional = bool(spec.get("functional", False))
        self.implicit = implicit

        action = spec.get("exec", spec.get("action"))
        if action is not None and not callable(action):
            raise CommandRegistrationError(
                f"In {self.name}: exec must be callable, got {action!r}"
            )
        self.exec: Callable[..., Any] | None = action

        raw_params = spec.get("params", [])
        if raw_params is None:
            raw_params = []
        if not isinstance(raw_params, (list, tuple)):
            raise CommandRegistrationError(
                f"In {self.name}: params must be a list, got {type(raw_params).__name__}"
            )
        self.params: list[Parameter] = []
        for entry in raw_params:
            if isinstance(entry, Mapping) and "group" in entry and "params" in entry:
                group_params = entry["params"]
                if not isinstance(group_params, (list, tuple)):
                    raise CommandRegistrationError(
                        f"In {self.name}: group '{entry['group']}' params must be a list"
                    )
                for grouped in group_params:
                    self.params.append(
                        Parameter(grouped, self.name, types, group=entry["group"])
                    )
            else:
                self.params.append(Parameter(entry, self.name, types))

        names = [param.name for param in self.params]
        duplicates = {each for each in names if names.count(each) > 1}
        if duplicates:
            raise CommandRegistrationError(
                f"In {self.name}: duplicate parameter names: {', '.join(sorted(duplicates))}"
            )
        compute_short_prefixes(self.params)

    @property
    def is_parent(self) -> bool:
        return self.exec is None

    def get_parameter(self, name: str) -> Parameter | None:
        return next((param for param in self.params if param.name == name), None)

    def __repr__(self) -> str:
        return f"Command(name={self.name!r}, params={[p.name for p in self.params]})"


class CommandType(Type):
    """
    The "command" type: resolves text to a registered `Command`.

    - An exact match on a command with an action is VALID.
    - An exact match on a parent is INCOMPLETE ("requires a subcommand").
    - Text that is a prefix of some command name is INCOMPLETE.
    - Anything else is ERROR.
    """

    name = "command"
    kind = TypeKind.COMMAND

    def __init__(self, canon: Canon) -> None:
        self.canon = canon

    def stringify(self, value: Any) -> str:
        if value is None:
            return ""
        return value.name

    def _find_predictions(self, text: str) -> list[Prediction]:
        depth = text.count(" ")
        exact = self.canon.get_command(text)
        matches: list[Command] = []
        for candidate in self.canon.get_commands():
            if candidate.hidden or not candidate.name.startswith(text):
                continue
            if candidate.name.count(" ") <= depth:
                matches.append(candidate)
            elif (
                exact is not None
                and exact.is_parent
                and candidate.name.count(" ") == depth + 1
            ):
                matches.append(candidate)
        matches.sort(key=lambda each: (each.name != text, len(each.name), each.name))
        return [Prediction(each.name, each) for each in matches]

    def parse(self, arg: Argument) -> Conversion:
        text = normalize_name(arg.text)

        def predict() -> list[Prediction]:
            return self._find_predictions(text)

        found = self.canon.get_command(text) if text else None
        if found is not None:
            if found.is_parent:
                return Conversion(
                    found, arg, Status.INCOMPLETE, "requires a subcommand", predict
                )
            return Conversion(found, arg, Status.VALID, "", predict)

        if predict():
            return Conversion(None, arg, Status.INCOMPLETE, "", predict)
        return Conversion(None, arg, Status.ERROR, f"Can't use '{text}'.", predict)


class Canon:
    """
    Registry of commands.

    Publishes `EventType.CANON_CHANGE` with a `CanonChangeEvent` whenever a
    command is added or removed. Owns the `ReportList` used by requisitions that
    are not given their own.

    Args:
        types (TypeRegistry | None): Type registry for parameter types. A
            registry with the built-in types is created when omitted.
        report_list (ReportList | None): Execution history.
    """

    def __init__(
        self,
        types: TypeRegistry | None = None,
        report_list: ReportList | None = None,
    ) -> None:
        self.types = types if types is not None else TypeRegistry.with_defaults()
        self.report_list = report_list if report_list is not None else ReportList()
        self.events = EventManager()
        self._commands: dict[str, Command] = {}
        self.command_type = CommandType(self)
        self.types.register_type(self.command_type)

    def add_command(self, spec: Any, name: str | None = None) -> Command:
        """
        Register a command.

        Args:
            spec: A `Command`, a mapping, or a function with a `metadata` mapping
                (registered as a functional command calling the function).
            name (str | None): Overrides the name in the spec.

        Returns:
            Command: The registered command.

        Raises:
            CommandRegistrationError: If the spec is malformed.
        """
        if isinstance(spec, Command):
            if name and normalize_name(name) != spec.name:
                raise CommandRegistrationError(
                    f"Can't rename an existing Command ({spec.name} → {name})"
                )
            command = spec
        else:
            if callable(spec) and isinstance(getattr(spec, "metadata", None), Mapping):
                raw = {**spec.metadata, "exec": spec, "functional": True}
            elif isinstance(spec, Mapping):
                raw = dict(spec)
            else:
                raise CommandRegistrationError(
                    f"Can't register {spec!r}: expected a mapping or a function "
                    "with metadata"
                )
            if name:
                raw["name"] = name
            command = Command(raw, self.types)

        if command.name in self._commands:
            logger.debug("Replacing command '%s'", command.name)
        self._add_parents(command.name)
        self._commands[command.name] = command
        logger.debug("Registered command '%s'", command.name)
        self.events.publish(
            EventType.CANON_CHANGE, CanonChangeEvent(self, command, added=True)
        )
        return command

    def _add_parents(self, name: str) -> None:
        words = name.split(" ")
        for length in range(1, len(words)):
            parent_name = " ".join(words[:length])
            if parent_name in self._commands:
                continue
            parent = Command({"name": parent_name}, self.types, implicit=True)
            self._commands[parent_name] = parent
            logger.debug("Synthesised parent command '%s'", parent_name)
            self.events.publish(
                EventType.CANON_CHANGE, CanonChangeEvent(self, parent, added=True)
            )

    def add_commands(
        self, commands: Mapping[str, Any] | Iterable[Any] | object, namespace: str = ""
    ) -> list[Command]:
        """
        Register several commands under an optional namespace.

        `commands` is a mapping of name to spec, an iterable of specs, or an
        object whose attributes carrying `metadata` are functional commands.
        With a namespace, each command is registered as "namespace name".
        """
        prefix = normalize_name(namespace)
        added: list[Command] = []
        for key, spec in self._iter_specs(commands):
            name = key
            if isinstance(spec, Mapping) and spec.get("name"):
                name = spec["name"]
            elif callable(spec) and isinstance(getattr(spec, "metadata", None), Mapping):
                name = spec.metadata.get("name") or key
            if not name:
                raise CommandRegistrationError(f"Can't find a name for {spec!r}")
            full_name = f"{prefix} {name}" if prefix else name
            added.append(self.add_command(spec, full_name))
        return added

    @staticmethod
    def _iter_specs(commands: Any) -> Iterable[tuple[str | None, Any]]:
        if isinstance(commands, Mapping):
            return list(commands.items())
        if isinstance(commands, (list, tuple)):
            return [(None, spec) for spec in commands]
        return [
            (attr, getattr(commands, attr))
            for attr in dir(commands)
            if not attr.startswith("_")
            and isinstance(getattr(getattr(commands, attr), "metadata", None), Mapping)
        ]

    def remove_command(self, command_or_name: Command | str) -> bool:
        """
        Remove a command, and any implicit parents left without children.

        A command that still has subcommands is replaced by an implicit parent.
        """
        name = (
            command_or_name.name
            if isinstance(command_or_name, Command)
            else normalize_name(command_or_name)
        )
        command = self._commands.pop(name, None)
        if command is None:
            return False
        logger.debug("Removed command '%s'", name)
        self.events.publish(
            EventType.CANON_CHANGE, CanonChangeEvent(self, command, added=False)
        )
        if self.get_children(name):
            parent = Command({"name": name}, self.types, implicit=True)
            self._commands[name] = parent
            logger.debug("Synthesised parent command '%s'", name)
            self.events.publish(
                EventType.CANON_CHANGE, CanonChangeEvent(self, parent, added=True)
            )
            return True

        words = name.split(" ")
        for length in range(len(words) - 1, 0, -1):
            parent_name = " ".join(words[:length])
            parent = self._commands.get(parent_name)
            if parent is None or not parent.implicit or self.get_children(parent_name):
                break
            del self._commands[parent_name]
            logger.debug("Removed implicit parent command '%s'", parent_name)
            self.events.publish(
                EventType.CANON_CHANGE, CanonChangeEvent(self, parent, added=False)
            )
        return True

    def remove_commands(
        self, commands: Mapping[str, Any] | Iterable[Any] | object, namespace: str = ""
    ) -> None:
        prefix = normalize_name(namespace)
        for key, spec in self._iter_specs(commands):
            name = key
            if isinstance(spec, Mapping) and spec.get("name"):
                name = spec["name"]
            elif isinstance(spec, Command):
                name = spec.name
            elif callable(spec) and isinstance(getattr(spec, "metadata", None), Mapping):
                name = spec.metadata.get("name") or key
            if name:
                self.remove_command(f"{prefix} {name}" if prefix else name)

    def get_command(self, name: str) -> Command | None:
        return self._commands.get(normalize_name(name))

    def get_commands(self) -> list[Command]:
        return [self._commands[name] for name in sorted(self._commands)]

    def get_command_names(self) -> list[str]:
        return sorted(self._commands)

    def get_children(self, name: str) -> list[Command]:
        """Direct subcommands of the named command."""
        prefix = normalize_name(name) + " "
        depth = prefix.count(" ")
        return [
            each
            for each in self.get_commands()
            if each.name.startswith(prefix) and each.name.count(" ") == depth
        ]

    def __contains__(self, name: str) -> bool:
        return normalize_name(name) in self._commands

    def __len__(self) -> int:
        return len(self._commands)


def command(
    name: str | None = None,
    *,
    description: str = "",
    params: list[Any] | None = None,
    hidden: bool = False,
    manual: str = "",
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Attach command metadata to a function so `Canon.add_command` can register it.

    The function is registered as a functional command: it is called with the
    parameter values as positional arguments, in declaration order.
    """

    def decorator(function: Callable[..., Any]) -> Callable[..., Any]:
        doc = inspect.getdoc(function) or ""
        function.metadata = {  # type: ignore[attr-defined]
            "name": name or function.__name__.replace("_", " "),
            "description": description or (doc.splitlines()[0] if doc else ""),
            "manual": manual,
            "params": list(params or []),
            "hidden": hidden,
        }
        return function

    return decorator
