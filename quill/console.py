# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global console instance and status theme for Quill."""
from rich.console import Console
from rich.theme import Theme

from quill.status import Status

STATUS_STYLES: dict[Status, str] = {
    Status.VALID: "#A3BE8C",
    Status.INCOMPLETE: "#EBCB8B",
    Status.ERROR: "bold #BF616A",
}


def get_status_theme() -> Theme:
    """Theme mapping `status.valid`, `status.incomplete` and `status.error`."""
    return Theme(
        {f"status.{status.name.lower()}": style for status, style in STATUS_STYLES.items()}
        | {"prompt": "bold #81A1C1", "hint": "italic #4C566A"}
    )


console = Console(color_system="truecolor", theme=get_status_theme())
