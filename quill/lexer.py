# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Status highlighting for typed input.

- `StatusLexer`: a Prompt Toolkit lexer colouring each character of the input
  line by its `Status` (style classes `status.valid`, `status.incomplete`,
  `status.error`), so errors show while the user types.
- `get_status_style()`: the matching Prompt Toolkit `Style`.
- `render_markup()`: the same markup as a rich `Text`, for printing.
"""
from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer
from prompt_toolkit.styles import Style
from rich.text import Text

from quill.console import STATUS_STYLES
from quill.requisition import Cursor, Requisition


def _style_class(status) -> str:
    return f"status.{status.name.lower()}"


def get_status_style() -> Style:
    return Style.from_dict(
        {_style_class(status): style for status, style in STATUS_STYLES.items()}
    )


def render_markup(requisition: Requisition, cursor: int | None = None) -> Text:
    """Render the requisition's current input as rich `Text` coloured by status."""
    text = Text()
    for status, run in requisition.get_input_status_runs(cursor):
        text.append(run, style=_style_class(status))
    return text


class StatusLexer(Lexer):
    """
    Prompt Toolkit lexer over a requisition's per-character status markup.

    Args:
        requisition (Requisition): The session used to parse the line.
    """

    def __init__(self, requisition: Requisition) -> None:
        self.requisition = requisition

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        position = document.cursor_position
        self.requisition.update(document.text, Cursor(position, position))
        fragments: StyleAndTextTuples = [
            (f"class:{_style_class(status)}", run)
            for status, run in self.requisition.get_input_status_runs(position)
        ]

        lines: list[StyleAndTextTuples] = [[]]
        for style, run in fragments:
            parts = run.split("\n")
            for index, part in enumerate(parts):
                if index:
                    lines.append([])
                if part:
                    lines[-1].append((style, part))

        def get_line(lineno: int) -> StyleAndTextTuples:
            return lines[lineno] if lineno < len(lines) else []

        return get_line
