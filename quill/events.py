# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the `EventManager` and `EventType` used by the Quill engine to notify
collaborators (renderers, completers, report views) about state changes.

Each engine object that publishes notifications owns its own `EventManager`
under the `events` attribute. Subscribing returns a `Subscription` handle that
is later used to unsubscribe. Publishing is a synchronous fan-out in
subscription order; a handler that raises is logged and skipped so that one
faulty subscriber cannot break the parse pipeline.

Key Components:
- EventType: Enum of the notifications the engine publishes
- Event payloads: `CommandChangeEvent`, `AssignmentChangeEvent`, `InputChangeEvent`,
  `CanonChangeEvent`, `ReportsChangeEvent`
- EventManager: subscribe / unsubscribe / clear / publish

Usage:
    requisition.events.subscribe(EventType.INPUT_CHANGE, redraw)
"""
from __future__ import annotations

import itertools
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from quill.logger import logger

if TYPE_CHECKING:
    from quill.assignment import Assignment
    from quill.canon import Canon, Command
    from quill.conversion import Conversion
    from quill.report import Report, ReportList
    from quill.requisition import Requisition


class EventType(Enum):
    """
    Enum of notifications published by the engine.

    Members:
        COMMAND_CHANGE: The resolved command of a requisition changed.
        ASSIGNMENT_CHANGE: An assignment's parsed value changed.
        ARGUMENT_CHANGE: An assignment's argument changed but its value did not.
        INPUT_CHANGE: The requisition's input line changed.
        CANON_CHANGE: A command was added to or removed from a canon.
        REPORTS_CHANGE: A report was added to or updated in a report list.

    Aliases:
        "command" → "command_change"
        "assignment" → "assignment_change"
        "input" → "input_change"
        "canon" → "canon_change"
        "reports" → "reports_change"

    Example:
        EventType("input") → EventType.INPUT_CHANGE
    """

    COMMAND_CHANGE = "command_change"
    ASSIGNMENT_CHANGE = "assignment_change"
    ARGUMENT_CHANGE = "argument_change"
    INPUT_CHANGE = "input_change"
    CANON_CHANGE = "canon_change"
    REPORTS_CHANGE = "reports_change"

    @classmethod
    def _get_alias(cls, value: str) -> str:
        aliases = {
            "command": "command_change",
            "assignment": "assignment_change",
            "argument": "argument_change",
            "input": "input_change",
            "canon": "canon_change",
            "reports": "reports_change",
        }
        return aliases.get(value, value)

    @classmethod
    def _missing_(cls, value: object) -> EventType:
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        normalized = value.strip().lower().replace("-", "_")
        alias = cls._get_alias(normalized)
        for member in cls:
            if member.value == alias:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.value


@dataclass
class CommandChangeEvent:
    requisition: Requisition
    command: Command | None
    old_command: Command | None


@dataclass
class AssignmentChangeEvent:
    assignment: Assignment
    conversion: Conversion
    old_conversion: Conversion


@dataclass
class InputChangeEvent:
    requisition: Requisition


@dataclass
class CanonChangeEvent:
    canon: Canon
    command: Command
    added: bool


@dataclass
class ReportsChangeEvent:
    report_list: ReportList
    report: Report


Handler = Callable[[Any], None]


@dataclass(frozen=True)
class Subscription:
    """Handle returned by `EventManager.subscribe`, used to unsubscribe."""

    event_type: EventType
    handler: Handler
    id: int
    critical: bool = False


class EventManager:
    """
    Manages subscriptions for the notifications one engine object publishes.

    Methods:
        subscribe(event_type, handler): Register a handler, returning a handle.
        unsubscribe(subscription): Remove a handler by its handle.
        clear(event_type): Remove handlers for one or all event types.
        publish(event_type, event): Call every handler for the event type.

    Example:
        events = EventManager()
        handle = events.subscribe(EventType.INPUT_CHANGE, redraw)
        events.unsubscribe(handle)
    """

    _ids = itertools.count(1)

    def __init__(self) -> None:
        self._subscriptions: dict[EventType, list[Subscription]] = {
            event_type: [] for event_type in EventType
        }

    def subscribe(
        self, event_type: EventType | str, handler: Handler, critical: bool = False
    ) -> Subscription:
        """
        Register a handler for an event type.

        Exceptions from a critical handler are logged and then propagate out
        of `publish`.

        Raises:
            ValueError: If the event type is invalid.
            TypeError: If the handler is not callable.
        """
        event_type = EventType(event_type)
        if not callable(handler):
            raise TypeError(f"Event handler must be callable, got {handler!r}")
        subscription = Subscription(event_type, handler, next(self._ids), critical)
        self._subscriptions[event_type].append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Remove a subscription. Returns False if it was not registered."""
        handlers = self._subscriptions[subscription.event_type]
        if subscription in handlers:
            handlers.remove(subscription)
            return True
        return False

    def clear(self, event_type: EventType | None = None) -> None:
        if event_type:
            self._subscriptions[EventType(event_type)] = []
        else:
            for each in self._subscriptions:
                self._subscriptions[each] = []

    def has_subscribers(self, event_type: EventType) -> bool:
        return bool(self._subscriptions[event_type])

    def publish(self, event_type: EventType, event: Any) -> None:
        """
        Invoke every handler subscribed to the event type, in subscription order.

        Handler exceptions are logged and skipped, except those raised by
        critical handlers, which are re-raised.
        """
        for subscription in list(self._subscriptions[event_type]):
            try:
                subscription.handler(event)
            except Exception as handler_error:
                logger.warning(
                    "[Event:%s] handler '%s' raised an exception: %s",
                    event_type,
                    getattr(subscription.handler, "__name__", subscription.handler),
                    handler_error,
                )
                if subscription.critical:
                    raise

    def __str__(self) -> str:
        def format_handler_list(subscriptions: list[Subscription]) -> str:
            return (
                ", ".join(
                    getattr(each.handler, "__name__", repr(each.handler))
                    for each in subscriptions
                )
                if subscriptions
                else "—"
            )

        lines = ["<EventManager>"]
        for event_type in EventType:
            lines.append(
                f"  {event_type.value}: "
                f"{format_handler_list(self._subscriptions[event_type])}"
            )
        return "\n".join(lines)
