"""
Quill Command Line Engine

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

import logging

from .argument import (
    Argument,
    ArrayArgument,
    FalseNamedArgument,
    MergedArgument,
    NamedArgument,
    TrueNamedArgument,
)
from .assignment import Assignment, CommandAssignment, UnassignedAssignment
from .canon import Canon, Command, Parameter, command
from .conversion import ArrayConversion, Conversion, Prediction
from .environment import get_environment
from .events import EventManager, EventType
from .report import Report, ReportList
from .requisition import Cursor, Requisition
from .status import Status
from .tokenizer import tokenize
from .types import TypeRegistry

logger = logging.getLogger("quill")


__all__ = [
    "Argument",
    "ArrayArgument",
    "ArrayConversion",
    "Assignment",
    "Canon",
    "Command",
    "CommandAssignment",
    "Conversion",
    "Cursor",
    "EventManager",
    "EventType",
    "FalseNamedArgument",
    "MergedArgument",
    "NamedArgument",
    "Parameter",
    "Prediction",
    "Report",
    "ReportList",
    "Requisition",
    "Status",
    "TrueNamedArgument",
    "TypeRegistry",
    "UnassignedAssignment",
    "command",
    "get_environment",
    "tokenize",
]
