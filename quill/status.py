# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `Status`, the tri-valued validity signal attached to every conversion,
assignment and input character.

The members are ordered by severity so that combining several statuses is a
plain maximum:

    VALID(0) < INCOMPLETE(1) < ERROR(2)

INCOMPLETE means more typing could still make the input valid. ERROR means the
input is already wrong and needs correcting.

Example:
    Status.combine(Status.VALID, Status.INCOMPLETE)  → Status.INCOMPLETE
    Status.combine([Status.VALID], Status.ERROR)     → Status.ERROR
    Status.combine()                                 → Status.VALID
"""
from __future__ import annotations

from enum import IntEnum
from typing import Iterable


class Status(IntEnum):
    """Validity of a piece of input, ordered from best to worst."""

    VALID = 0
    INCOMPLETE = 1
    ERROR = 2

    @classmethod
    def combine(cls, *statuses: Status | Iterable[Status]) -> Status:
        """Return the worst of the given statuses, flattening nested iterables."""
        combined = cls.VALID
        for status in statuses:
            if not isinstance(status, Status):
                status = cls.combine(*status)
            if status > combined:
                combined = status
        return combined

    @classmethod
    def _missing_(cls, value: object) -> Status:
        if isinstance(value, str):
            normalized = value.strip().upper()
            for member in cls:
                if member.name == normalized:
                    return member
        valid = ", ".join(member.name.lower() for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: {value!r}. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.name
