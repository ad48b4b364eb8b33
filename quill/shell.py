# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Interactive shell over a `Canon`.

`Shell` wires one `Requisition` into a Prompt Toolkit `PromptSession` with the
requisition completer, validator and status lexer, then runs each accepted
line. Results and errors are printed with the shared rich console.

Built-ins (used only when no registered command has the same name):
- `history`: print the report list as a table
- `exit` / `quit`: leave the shell
"""
from __future__ import annotations

from typing import Any

from prompt_toolkit import PromptSession
from rich.console import Console
from rich.markup import escape

from quill.canon import Canon
from quill.completer import RequisitionCompleter
from quill.console import console as default_console
from quill.console import get_status_theme
from quill.lexer import StatusLexer, get_status_style
from quill.logger import logger
from quill.requisition import Requisition
from quill.status import Status
from quill.validators import RequisitionValidator

EXIT_WORDS = ("exit", "quit")
HISTORY_WORD = "history"


class Shell:
    """
    Read-eval-print loop for Quill commands.

    Args:
        canon (Canon): The commands available in the shell.
        environment (Any): Host object passed to command actions.
        prompt (str): Prompt text.
        console (Console | None): Where output goes.
    """

    def __init__(
        self,
        canon: Canon,
        environment: Any = None,
        prompt: str = "quill> ",
        console: Console | None = None,
    ) -> None:
        self.canon = canon
        self.requisition = Requisition(canon, environment)
        self.prompt = prompt
        self.console = console or default_console
        if console is not None:
            self.console.push_theme(get_status_theme())
        self._session: PromptSession | None = None

    def _is_builtin(self, word: str) -> bool:
        return word in (*EXIT_WORDS, HISTORY_WORD) and word not in self.canon

    @property
    def session(self) -> PromptSession:
        if self._session is None:
            self._session = PromptSession(
                completer=RequisitionCompleter(self.requisition),
                validator=RequisitionValidator(
                    self.requisition,
                    builtins=[
                        word
                        for word in (*EXIT_WORDS, HISTORY_WORD)
                        if self._is_builtin(word)
                    ],
                ),
                lexer=StatusLexer(self.requisition),
                style=get_status_style(),
                validate_while_typing=False,
                complete_while_typing=True,
            )
        return self._session

    def run_line(self, line: str) -> bool:
        """
        Handle one line of input.

        Returns:
            bool: False when the shell should stop.
        """
        word = line.strip()
        if not word:
            return True
        if self._is_builtin(word):
            if word in EXIT_WORDS:
                return False
            self.requisition.report_list.summary(target=self.console)
            return True

        self.requisition.update(line)
        if self.requisition.get_status(include_command=True) != Status.VALID:
            messages = self.requisition.get_messages() or ["Invalid input."]
            self.console.print(f"[status.error]❌ {escape(messages[0])}")
            return True

        self.requisition.exec()
        report = self.requisition.report_list.get_latest()
        if report is None or not report.completed:
            return True
        if report.error:
            self.console.print(f"[status.error]❌ {escape(repr(report.output))}")
        elif report.output is not None:
            self.console.print(report.output)
        return True

    def run(self) -> None:
        """Prompt for lines until EOF or an exit word."""
        logger.debug("Shell started with %d commands", len(self.canon))
        while True:
            try:
                line = self.session.prompt(self.prompt)
            except KeyboardInterrupt:
                continue
            except EOFError:
                break
            if not self.run_line(line):
                break
        logger.debug("Shell stopped")
