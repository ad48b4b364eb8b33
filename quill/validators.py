# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Input validators for use with Prompt Toolkit and the interactive Quill shell.

- `RequisitionValidator`: accepts a line only when the requisition resolves it
  to a command with every parameter VALID, placing the error cursor on the
  first character that is not.
"""
from typing import Iterable

from prompt_toolkit.validation import ValidationError, Validator

from quill.requisition import Requisition
from quill.status import Status


class RequisitionValidator(Validator):
    """
    Validates a whole input line against a `Requisition`.

    Args:
        requisition (Requisition): The session used to parse the line.
        builtins (Iterable[str]): Words the host handles itself, always accepted.
    """

    def __init__(self, requisition: Requisition, builtins: Iterable[str] = ()) -> None:
        self.requisition = requisition
        self.builtins = set(builtins)
        super().__init__()

    def validate(self, document):
        text = document.text
        if not text.strip() or text.strip() in self.builtins:
            return

        self.requisition.update(text)
        status = self.requisition.get_status(include_command=True)
        if status == Status.VALID:
            if self.requisition.command is None or self.requisition.command.is_parent:
                raise ValidationError(message="Unknown command.", cursor_position=0)
            return

        markup = self.requisition.get_input_status_markup(len(text))
        position = next(
            (index for index, each in enumerate(markup) if each != Status.VALID),
            len(text),
        )
        messages = self.requisition.get_messages()
        raise ValidationError(
            message=messages[0] if messages else f"Input is {status.name.lower()}.",
            cursor_position=min(position, len(text)),
        )
