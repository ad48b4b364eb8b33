# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the `Requisition`, the session object that turns one line of typed
input into a resolved command with typed parameter values, and runs it.

Every call to `update(typed)` runs the pipeline:

1. Tokenize the input into `Argument`s (and split `--flag=value` tokens).
2. Split: resolve the leading tokens against the canon's "command" type,
   extending across words while the match is a parent command, so that
   "git commit" resolves as one two-word command.
3. Assign the remaining tokens to parameters: named flags first, then
   positional values in declaration order; leftovers go to the unassigned
   bucket, which is always in ERROR.
4. Publish `EventType.INPUT_CHANGE`.

The requisition keeps its token list (`_args`) consistent with its
assignments: the command tokens, each parameter's tokens and the unassigned
tokens, in textual order. When an assignment is changed programmatically
(completion, increment, `set_conversion`), the old tokens are swapped for the
new ones at the same position, earlier blank positional parameters get
visible placeholders, and parameters with deferred types are re-parsed.

Queries answer what a host needs for live feedback: the overall status, the
assignment under the cursor, a per-character status markup and a canonical
rendering of the current state. `exec()` runs the resolved command and records
a `Report` in the report list.

Example:
    requisition = Requisition(canon, environment=env)
    requisition.update("tsv option1 6")
    requisition.get_status()          → Status.VALID
    requisition.get_args_object()     → {"optionType": ..., "optionValue": 6}
    requisition.exec()
"""
from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Literal, Mapping

from quill.argument import (
    Argument,
    ArrayArgument,
    MergedArgument,
    NamedArgument,
    TrueNamedArgument,
    quote_if_needed,
)
from quill.assignment import Assignment, CommandAssignment, UnassignedAssignment
from quill.canon import UNSET, Canon, Command
from quill.conversion import Conversion
from quill.environment import environment_scope
from quill.events import (
    AssignmentChangeEvent,
    CommandChangeEvent,
    EventManager,
    EventType,
    InputChangeEvent,
    Subscription,
)
from quill.exceptions import MisuseError
from quill.logger import logger
from quill.report import Report, ReportList
from quill.status import Status
from quill.tokenizer import split_inline_values, tokenize
from quill.types.base import TypeKind


@dataclass
class Cursor:
    start: int = 0
    end: int = 0


@dataclass
class ArgTrace:
    """One character of the input and the argument part it belongs to."""

    character: str
    arg: Argument
    part: Literal["prefix", "text", "suffix"]


def _is_quoted(arg: Argument) -> bool:
    return bool(arg.prefix) and arg.prefix[-1] in "'\""


class Requisition:
    """
    Resolves typed input against a canon and executes the result.

    Args:
        canon (Canon): The command registry.
        environment (Any): Opaque host object passed to command actions.
        report_list (ReportList | None): Where executions are recorded; the
            canon's report list by default.
    """

    def __init__(
        self,
        canon: Canon,
        environment: Any = None,
        report_list: ReportList | None = None,
    ) -> None:
        self.canon = canon
        self.environment = environment
        self.report_list = report_list if report_list is not None else canon.report_list
        self.events = EventManager()
        self.cursor = Cursor()

        self._args: list[Argument] | None = None
        self._assignments: dict[str, Assignment] = {}
        self._subscriptions: list[tuple[EventManager, Subscription]] = []
        self._structural_change_in_progress = False
        self._refreshing = False
        self._pending: set[asyncio.Future] = set()

        self._unassigned = UnassignedAssignment()
        self.command_assignment = CommandAssignment(canon)
        self.command_assignment.events.subscribe(
            EventType.ASSIGNMENT_CHANGE,
            self._on_command_assignment_change,
            critical=True,
        )
        self.command_assignment.events.subscribe(
            EventType.ARGUMENT_CHANGE,
            self._on_command_argument_change,
            critical=True,
        )

    @property
    def command(self) -> Command | None:
        return self.command_assignment.value

    @property
    def unassigned(self) -> UnassignedAssignment:
        return self._unassigned

    def update(self, typed: str | None, cursor: Cursor | tuple[int, int] | None = None):
        """
        Re-parse the whole input line.

        Args:
            typed (str | None): The current input.
            cursor (Cursor | tuple | None): Selection start and end; the end of
                the input when omitted.
        """
        typed = typed or ""
        if cursor is None:
            self.cursor = Cursor(len(typed), len(typed))
        elif isinstance(cursor, Cursor):
            self.cursor = cursor
        else:
            self.cursor = Cursor(*cursor)

        self._structural_change_in_progress = True
        try:
            self._args = split_inline_values(tokenize(typed))
            remaining = self._split(list(self._args))
            self._assign(remaining)
        finally:
            self._structural_change_in_progress = False

        self.events.publish(EventType.INPUT_CHANGE, InputChangeEvent(self))

    def _split(self, args: list[Argument]) -> list[Argument]:
        """Resolve the command from the leading tokens and return the rest."""
        command_type = self.canon.command_type
        best: Conversion | None = None
        consumed = 0
        for length in range(1, len(args) + 1):
            arg = args[0] if length == 1 else MergedArgument(args[:length])
            conversion = command_type.parse(arg)
            if length > 1 and conversion.get_status() == Status.ERROR:
                break
            best, consumed = conversion, length
            if conversion.value is None or not conversion.value.is_parent:
                break

        if best is None:
            best = command_type.parse(Argument())
        self.command_assignment.set_conversion(best)
        return args[consumed:]

    def _rebuild_assignments(self, command: Command | None) -> None:
        for manager, subscription in self._subscriptions:
            manager.unsubscribe(subscription)
        self._subscriptions = []
        self._assignments = {}
        if command is None:
            return
        for index, param in enumerate(command.params):
            assignment = Assignment(param, index)
            self._subscriptions.append(
                (
                    assignment.events,
                    assignment.events.subscribe(
                        EventType.ASSIGNMENT_CHANGE,
                        self._on_assignment_value_change,
                        critical=True,
                    ),
                )
            )
            self._subscriptions.append(
                (
                    assignment.events,
                    assignment.events.subscribe(
                        EventType.ARGUMENT_CHANGE,
                        self._on_assignment_argument_change,
                        critical=True,
                    ),
                )
            )
            self._assignments[param.name] = assignment

    def _is_flag(self, arg: Argument) -> bool:
        return not _is_quoted(arg) and any(
            assignment.param.is_known_as(arg.text)
            for assignment in self._assignments.values()
        )

    def _assign(self, args: list[Argument]) -> None:
        """
        Bind tokens to parameters.

        The plan is computed first without touching any assignment, then
        applied in declaration order so deferred types see earlier values.
        """
        assignments = list(self._assignments.values())
        plan: dict[str, Argument] = {}
        unassigned: list[Argument] = []

        if self.command is None or not assignments:
            unassigned = list(args)
        elif (
            len(assignments) == 1
            and assignments[0].param.type.kind is TypeKind.STRING
            and assignments[0].param.is_positional_allowed()
            and args
            and not self._is_flag(args[0])
        ):
            plan[assignments[0].param.name] = (
                args[0] if len(args) == 1 else MergedArgument(args)
            )
        else:
            consumed: set[int] = set()
            arrays: dict[str, ArrayArgument] = {}
            index = 0
            while index < len(args):
                arg = args[index]
                match = None
                if not _is_quoted(arg):
                    match = next(
                        (
                            each
                            for each in assignments
                            if each.param.is_known_as(arg.text)
                        ),
                        None,
                    )
                if match is None:
                    index += 1
                    continue

                name = match.param.name
                kind = match.param.type.resolve().kind
                consumed.add(index)
                if kind is TypeKind.BOOLEAN:
                    named: Argument = TrueNamedArgument(arg=arg)
                    index += 1
                else:
                    following = args[index + 1] if index + 1 < len(args) else None
                    if following is None or self._is_flag(following):
                        named = NamedArgument(arg, Argument())
                        index += 1
                    else:
                        named = NamedArgument(arg, following)
                        consumed.add(index + 1)
                        index += 2

                if kind is TypeKind.ARRAY:
                    arrays.setdefault(name, ArrayArgument()).add_argument(named)
                    continue
                if name in plan:
                    unassigned.extend(plan[name].get_args())
                plan[name] = named

            remaining = [arg for position, arg in enumerate(args) if position not in consumed]
            for assignment in assignments:
                name = assignment.param.name
                if name in plan or name in arrays:
                    continue
                if not assignment.param.is_positional_allowed() or not remaining:
                    continue
                if assignment.param.type.resolve().kind is TypeKind.ARRAY:
                    arrays[name] = ArrayArgument(remaining)
                    remaining = []
                else:
                    plan[name] = remaining.pop(0)
            unassigned.extend(remaining)
            plan.update(arrays)

        for assignment in assignments:
            arg = plan.get(assignment.param.name)
            if arg is None:
                assignment.set_default()
            else:
                assignment.set_conversion(assignment.parse(arg))

        positions = {id(token): position for position, token in enumerate(self._args or [])}
        unassigned.sort(key=lambda token: positions.get(id(token), len(positions)))
        self._unassigned.set_unassigned(unassigned)

    def _on_command_assignment_change(self, event: AssignmentChangeEvent) -> None:
        self._rebuild_assignments(event.conversion.value)
        self.events.publish(
            EventType.COMMAND_CHANGE,
            CommandChangeEvent(self, event.conversion.value, event.old_conversion.value),
        )
        if self._structural_change_in_progress or self._args is None:
            return
        self._replace_tokens(self.command_assignment, event.old_conversion.arg)
        self.update(self.to_string())

    def _on_command_argument_change(self, event: AssignmentChangeEvent) -> None:
        if self._structural_change_in_progress or self._args is None:
            return
        self._replace_tokens(self.command_assignment, event.old_conversion.arg)
        self.events.publish(EventType.INPUT_CHANGE, InputChangeEvent(self))

    def _on_assignment_value_change(self, event: AssignmentChangeEvent) -> None:
        self._on_assignment_change(event, value_changed=True)

    def _on_assignment_argument_change(self, event: AssignmentChangeEvent) -> None:
        self._on_assignment_change(event, value_changed=False)

    def _on_assignment_change(
        self, event: AssignmentChangeEvent, value_changed: bool
    ) -> None:
        if self._structural_change_in_progress or self._args is None:
            if value_changed:
                self.events.publish(EventType.ASSIGNMENT_CHANGE, event)
            return

        assignment = event.assignment
        if (
            assignment.param.is_positional_allowed()
            and not isinstance(assignment.arg, NamedArgument)
            and assignment.arg.get_args()
            and not assignment.arg.is_blank()
        ):
            for earlier in self.get_assignments():
                if earlier is assignment:
                    break
                if earlier.param.is_positional_allowed() and earlier.ensure_visible_argument():
                    position = self._insertion_index(earlier)
                    self._args[position:position] = earlier.arg.get_args()

        self._replace_tokens(assignment, event.old_conversion.arg)

        if not self._refreshing:
            self._refreshing = True
            try:
                for other in self.get_assignments():
                    if other is not assignment and other.param.type.kind is TypeKind.DEFERRED:
                        other.refresh()
            finally:
                self._refreshing = False

        if value_changed:
            self.events.publish(EventType.ASSIGNMENT_CHANGE, event)
        self.events.publish(EventType.INPUT_CHANGE, InputChangeEvent(self))

    def _replace_tokens(self, assignment: Assignment, old_arg: Argument) -> None:
        """Swap an assignment's old tokens for its current ones, in place."""
        assert self._args is not None
        old_tokens = old_arg.get_args()
        positions = [
            position
            for position, token in enumerate(self._args)
            if any(token is old for old in old_tokens)
        ]
        for position in reversed(positions):
            del self._args[position]
        if positions:
            insert_at = positions[0]
        else:
            insert_at = self._insertion_index(assignment)
        self._args[insert_at:insert_at] = assignment.arg.get_args()

    def _insertion_index(self, assignment: Assignment) -> int:
        """Where tokens go for an assignment that has none in `_args` yet."""
        assert self._args is not None
        if assignment.is_command:
            return 0
        positional = (
            assignment.param.is_positional_allowed() and assignment.param_index is not None
        )
        for position, token in enumerate(self._args):
            owner = token.assignment
            if owner is self._unassigned:
                return position
            if not positional or owner is None or owner.is_command:
                continue
            if (
                owner.param_index is not None
                and owner.param_index > assignment.param_index  # type: ignore[operator]
                and owner.param.is_positional_allowed()
                and not isinstance(owner.arg, (NamedArgument, TrueNamedArgument))
            ):
                return position
        return len(self._args)

    def get_assignment(self, name_or_index: str | int) -> Assignment | None:
        if isinstance(name_or_index, int):
            assignments = self.get_assignments()
            if 0 <= name_or_index < len(assignments):
                return assignments[name_or_index]
            return None
        if name_or_index == self.command_assignment.param.name:
            return self.command_assignment
        return self._assignments.get(name_or_index)

    def get_assignments(self, include_command: bool = False) -> list[Assignment]:
        assignments = list(self._assignments.values())
        if include_command:
            assignments.insert(0, self.command_assignment)
        return assignments

    def get_parameter_names(self) -> list[str]:
        return list(self._assignments)

    def get_args_object(self) -> dict[str, Any]:
        return {name: assignment.value for name, assignment in self._assignments.items()}

    def set_default_arguments(self) -> None:
        for assignment in self.get_assignments():
            assignment.set_default()

    def get_status(self, include_command: bool = False) -> Status:
        """The worst status across the parameters and the unassigned bucket."""
        return Status.combine(
            [assignment.get_status() for assignment in self.get_assignments(include_command)],
            self._unassigned.get_status(),
        )

    def get_messages(self) -> list[str]:
        return [
            message
            for message in (
                assignment.get_message()
                for assignment in [
                    *self.get_assignments(include_command=True),
                    self._unassigned,
                ]
            )
            if message
        ]

    def create_input_arg_trace(self) -> list[ArgTrace]:
        """
        Attribute every character of the reconstructed input to its argument.

        Raises:
            MisuseError: If `update()` has not been called.
        """
        if self._args is None:
            raise MisuseError("Need to call update() before asking for an input trace")
        trace: list[ArgTrace] = []
        for arg in self._args:
            trace.extend(ArgTrace(char, arg, "prefix") for char in arg.prefix)
            trace.extend(ArgTrace(char, arg, "text") for char in arg.raw)
            trace.extend(ArgTrace(char, arg, "suffix") for char in arg.suffix)
        return trace

    def _first_blank_positional_assignment(self) -> Assignment | None:
        for assignment in self.get_assignments():
            if assignment.param.is_positional_allowed() and assignment.arg.is_blank():
                return assignment
        return None

    def get_assignment_at(self, position: int) -> Assignment:
        """
        Return the assignment that typing at `position` affects.

        Position p refers to the character before it (p - 1). Whitespace after
        an argument counts towards the next argument, or, at the end of the
        line, towards the first blank positional parameter.
        """
        if not self._args:
            return self.command_assignment

        owners: list[Assignment] = []
        for index, arg in enumerate(self._args):
            owner = arg.assignment or self.command_assignment
            owners.extend([owner] * (len(arg.prefix) + len(arg.raw)))

            closing = len(arg.suffix) - len(arg.suffix.lstrip("'\""))
            following = owner
            if not isinstance(owner.arg, NamedArgument):
                if index + 1 < len(self._args):
                    following = self._args[index + 1].assignment or owner
                else:
                    following = self._first_blank_positional_assignment() or owner
            owners.extend([owner] * closing)
            owners.extend([following] * (len(arg.suffix) - closing))

        if not owners:
            return self.command_assignment
        position = min(max(position, 0), len(owners))
        if position == 0:
            return self.command_assignment
        return owners[position - 1]

    def get_input_status_markup(self, cursor: int | None = None) -> list[Status]:
        """
        Status of every character of the input, for highlighting.

        Only argument text carries a status; whitespace and quotes are VALID.
        INCOMPLETE text is shown as ERROR unless the cursor is inside it.
        """
        trace = self.create_input_arg_trace()
        if cursor is None:
            cursor = self.cursor.start
        cursor = min(max(cursor, 0), len(trace))
        cursor_trace = trace[cursor - 1 if cursor > 0 else 0] if trace else None

        markup: list[Status] = []
        for each in trace:
            status = Status.VALID
            if each.part == "text":
                owner = each.arg.assignment or self.command_assignment
                status = owner.get_status(each.arg)
                if status == Status.INCOMPLETE and (
                    cursor_trace is None
                    or cursor_trace.part != "text"
                    or cursor_trace.arg is not each.arg
                ):
                    status = Status.ERROR
            markup.append(status)
        return markup

    def get_input_status_runs(self, cursor: int | None = None) -> list[tuple[Status, str]]:
        """The status markup merged into runs of equal status."""
        trace = self.create_input_arg_trace()
        runs: list[tuple[Status, str]] = []
        for each, status in zip(trace, self.get_input_status_markup(cursor)):
            if runs and runs[-1][0] == status:
                runs[-1] = (status, runs[-1][1] + each.character)
            else:
                runs.append((status, each.character))
        return runs

    def to_string(self) -> str:
        """The input line as currently represented, verbatim."""
        if not self._args:
            return ""
        return "".join(str(arg) for arg in self._args)

    def __str__(self) -> str:
        return self.to_string()

    def to_canonical_string(self) -> str:
        """
        A normalised rendering: full command name, positional values in order
        (trailing defaults dropped), then `--name value` options and `--flag`
        booleans.
        """
        command = self.command
        if command is None:
            return " ".join(self.command_assignment.arg.text.split())

        positional: list[str] = []
        pending: list[str] = []
        named: list[str] = []
        for assignment in self.get_assignments():
            param = assignment.param
            value = assignment.value
            kind = param.type.resolve().kind
            if kind is TypeKind.BOOLEAN:
                if value:
                    named.append(f"--{param.name}")
                continue

            if kind is TypeKind.ARRAY:
                text = param.type.stringify(value) if value else ""
            else:
                text = quote_if_needed(
                    param.type.stringify(value) if value is not None else ""
                )

            if not param.is_positional_allowed() or isinstance(assignment.arg, NamedArgument):
                if not assignment.arg.is_blank() and text:
                    named.append(f"--{param.name} {text}")
                continue

            if kind is TypeKind.ARRAY and not text:
                continue
            pending.append(text)
            if not assignment.arg.is_blank():
                positional.extend(pending)
                pending = []

        return " ".join([command.name, *positional, *named])

    def exec(
        self,
        typed: str | None = None,
        args: Mapping[str, Any] | None = None,
        *,
        report: bool = True,
    ) -> bool:
        """
        Run the resolved command.

        Args:
            typed (str | None): Input to update with first, or, together with
                `args`, the name of the command to run.
            args (Mapping | None): Pre-parsed parameter values.
            report (bool): Record the execution in the report list.

        Returns:
            bool: False if no executable command is resolved, True otherwise.
        """
        if typed is not None and args is not None:
            command = self.canon.get_command(typed)
            if command is None:
                return False
            args_object = dict(args)
            for param in command.params:
                if param.name not in args_object:
                    args_object[param.name] = (
                        None if param.default_value is UNSET else param.default_value
                    )
            typed_text = typed
        else:
            if typed is not None:
                self.update(typed)
            command = self.command
            args_object = self.get_args_object()
            typed_text = self.to_string()

        if command is None or command.exec is None:
            return False

        record = Report(command=command.name, typed=typed_text, args=args_object)
        record.start_timer()
        if report:
            self.report_list.add_report(record)
        logger.debug("Executing '%s' with %r", command.name, args_object)

        try:
            with environment_scope(self.environment):
                if command.functional:
                    output = command.exec(*(args_object[p.name] for p in command.params))
                else:
                    output = command.exec(self.environment, args_object)
        except Exception as error:
            logger.warning("[%s] action raised an exception: %s", command.name, error)
            self._settle(record, error, True, report)
            return True

        if isinstance(output, (asyncio.Future, concurrent.futures.Future)):
            output.add_done_callback(
                lambda future: self._settle_future(record, future, report)
            )
        elif inspect.isawaitable(output):
            self._run_awaitable(record, output, report)
        else:
            self._settle(record, output, False, report)
        return True

    def _run_awaitable(self, record: Report, awaitable: Awaitable[Any], report: bool):
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            try:
                output = asyncio.run(self._resolve(awaitable))
            except Exception as error:
                logger.warning("[%s] eventual result failed: %s", record.command, error)
                self._settle(record, error, True, report)
            else:
                self._settle(record, output, False, report)
            return
        task = asyncio.ensure_future(awaitable)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        task.add_done_callback(lambda future: self._settle_future(record, future, report))

    @staticmethod
    async def _resolve(awaitable: Awaitable[Any]) -> Any:
        return await awaitable

    def _settle_future(self, record: Report, future: Any, report: bool) -> None:
        if future.cancelled():
            self._settle(record, asyncio.CancelledError(), True, report)
            return
        error = future.exception()
        if error is not None:
            logger.warning("[%s] eventual result failed: %s", record.command, error)
            self._settle(record, error, True, report)
        else:
            self._settle(record, future.result(), False, report)

    def _settle(self, record: Report, output: Any, error: bool, report: bool) -> None:
        record.complete(output, error)
        if report:
            self.report_list.update_report(record)
        else:
            logger.debug(record.to_log_line())
