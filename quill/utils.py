# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""utils.py"""
from __future__ import annotations

import logging
import os

import pythonjsonlogger.json
from rich.logging import RichHandler


def running_in_container() -> bool:
    try:
        with open("/proc/1/cgroup", "r", encoding="UTF-8") as f:
            content = f.read()
            return (
                "docker" in content
                or "kubepods" in content
                or "containerd" in content
                or "podman" in content
            )
    except OSError:
        return False


_JSON_FIELDS = "%(asctime)s %(name)s %(levelname)s %(message)s"
_JSON_RENAMES = {"asctime": "time", "name": "logger", "levelname": "level"}
_NOISY_LOGGERS = ("asyncio", "prompt_toolkit")


def json_formatter() -> pythonjsonlogger.json.JsonFormatter:
    """JSON records as `{"time", "logger", "level", "message", "app"}`."""
    return pythonjsonlogger.json.JsonFormatter(
        _JSON_FIELDS,
        rename_fields=_JSON_RENAMES,
        static_fields={"app": "quill"},
    )


def _console_handler(mode: str) -> logging.Handler:
    if mode == "cli":
        return RichHandler(
            rich_tracebacks=True,
            show_time=True,
            show_level=True,
            show_path=False,
            markup=False,
            log_time_format="[%Y-%m-%d %H:%M:%S]",
        )
    if mode == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(json_formatter())
        return handler
    raise ValueError(f"Invalid log mode: {mode}")


def _file_handler(log_filename: str, as_json: bool) -> logging.Handler:
    handler = logging.FileHandler(log_filename, "a", "UTF-8")
    if as_json:
        handler.setFormatter(json_formatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(name)s] [%(levelname)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    return handler


def setup_logging(
    mode: str | None = None,
    log_filename: str | None = "quill.log",
    json_log_to_file: bool = False,
    file_log_level: int = logging.DEBUG,
    console_log_level: int = logging.WARNING,
):
    """
    Configure logging for the quill shell and engine.

    The console shows rich, human-readable logs in "cli" mode and one JSON
    object per record in "json" mode. The engine logs command execution
    (report lines), registry changes and failing event handlers under the
    "quill" logger; everything reaches the root handlers configured here.

    Args:
        mode (str | None):
            "cli" or "json". Defaults to `QUILL_LOG_MODE`, then to "json"
            inside a container and "cli" elsewhere.
        log_filename (str | None):
            Log file path. None disables file logging.
        json_log_to_file (bool):
            Write the log file as JSON records instead of plain text.
        file_log_level (int):
            Logging level for file output. Defaults to `logging.DEBUG`.
        console_log_level (int):
            Logging level for console output. Defaults to `logging.WARNING`.

    Raises:
        ValueError: If an invalid logging `mode` is passed.
    """
    if not mode:
        mode = os.getenv("QUILL_LOG_MODE") or (
            "json" if running_in_container() else "cli"
        )
    console_handler = _console_handler(mode)
    console_handler.setLevel(console_log_level)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    if root.hasHandlers():
        root.handlers.clear()
    root.addHandler(console_handler)

    if log_filename:
        file_handler = _file_handler(log_filename, json_log_to_file)
        file_handler.setLevel(file_log_level)
        root.addHandler(file_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger("quill")
    logger.propagate = True
    logger.debug("Logging initialized in '%s' mode.", mode)
