# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Provides `RequisitionCompleter`, a Prompt Toolkit completer driven by a
`Requisition`.

On every completion request the requisition is updated with the buffer and
cursor, the assignment under the cursor is located, and its predictions
become completions:
- Command names, including multi-word names and the children of a parent
  command once a space has been typed after it
- Parameter values (selection options, booleans, nested commands, ...)
- `--flag` names for parameters that have not been given yet

Completions use longest-common-prefix behaviour: a single match is
inserted whole, several matches with a longer shared prefix insert that
prefix first, and suggestions containing spaces are quoted.
"""
from __future__ import annotations

import os
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from quill.requisition import Cursor, Requisition
from quill.types.base import TypeKind


class RequisitionCompleter(Completer):
    """
    Prompt Toolkit completer for Quill command input.

    Args:
        requisition (Requisition): The session whose state drives completion.
    """

    def __init__(self, requisition: Requisition):
        self.requisition = requisition

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        """
        Compute completions for the current user input.

        Args:
            document (Document): The current Prompt Toolkit document.
            complete_event: The triggering event; not used here.

        Yields:
            Completion: Completions for the text before the cursor.
        """
        position = document.cursor_position
        self.requisition.update(document.text, Cursor(position, position))
        assignment = self.requisition.get_assignment_at(position)
        text = document.text_before_cursor

        if assignment.is_command:
            stub = text.lstrip()
            suggestions = [prediction.name for prediction in assignment.get_predictions()]
            yield from self._yield_lcp_completions(suggestions, stub, quote=False)
            return

        fragment = "" if text.endswith(" ") else text.rsplit(" ", 1)[-1]
        stub = fragment.lstrip("'\"")
        if stub.startswith("-"):
            yield from self._yield_lcp_completions(self._suggest_flags(assignment), stub)
            return

        suggestions = [prediction.name for prediction in assignment.get_predictions()]
        if not suggestions and not stub:
            suggestions = self._suggest_flags(assignment)
        yield from self._yield_lcp_completions(suggestions, stub, quote=stub == fragment)

    def _suggest_flags(self, current) -> list[str]:
        """Flags of parameters not yet given, plus the one being typed."""
        flags = []
        for assignment in self.requisition.get_assignments():
            if assignment is current:
                flags.append(f"--{assignment.param.name}")
            elif assignment.param.type.kind is TypeKind.BOOLEAN:
                if not assignment.value:
                    flags.append(f"--{assignment.param.name}")
            elif assignment.arg.is_blank():
                flags.append(f"--{assignment.param.name}")
        return flags

    def _ensure_quote(self, text: str) -> str:
        """
        Quote a suggestion containing whitespace so it stays one token.

        Args:
            text (str): The input text to quote.

        Returns:
            str: The quoted text.
        """
        if " " in text or "\t" in text:
            quote = "'" if '"' in text else '"'
            return f"{quote}{text}{quote}"
        return text

    def _yield_lcp_completions(self, suggestions, stub, quote: bool = True):
        """
        Yield completions for the current stub using longest-common-prefix logic.

        Behavior:
        - If only one match → yield it fully.
        - If multiple matches share a longer prefix → insert the prefix, but also
            display all matches in the menu.
        - If no shared prefix → list all matches individually.

        Args:
            suggestions (list[str]): The raw suggestions to consider.
            stub (str): The currently typed prefix (used to offset insertion).
            quote (bool): Quote suggestions containing whitespace.

        Yields:
            Completion: Completion objects for the Prompt Toolkit menu.
        """
        matches = list(dict.fromkeys(s for s in suggestions if s.startswith(stub)))
        if not matches:
            return

        def render(match: str) -> str:
            return self._ensure_quote(match) if quote else match

        lcp = os.path.commonprefix(matches)

        if len(matches) == 1:
            yield Completion(
                render(matches[0]),
                start_position=-len(stub),
                display=matches[0],
            )
        elif len(lcp) > len(stub) and not lcp.startswith("-"):
            yield Completion(lcp, start_position=-len(stub), display=lcp)
            for match in matches:
                yield Completion(render(match), start_position=-len(stub), display=match)
        else:
            for match in matches:
                yield Completion(render(match), start_position=-len(stub), display=match)
