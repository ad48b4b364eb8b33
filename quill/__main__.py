"""
Quill Command Line Engine

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

import logging
import os
import sys
from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Sequence

from quill.canon import Canon
from quill.config import read_config, register_commands
from quill.console import console
from quill.exceptions import QuillError
from quill.shell import Shell
from quill.utils import setup_logging


def find_quill_config() -> Path | None:
    candidates = [
        Path.cwd() / "quill.yaml",
        Path.cwd() / "quill.yml",
        Path.cwd() / "quill.toml",
        Path(os.environ.get("QUILL_CONFIG", "quill.yaml")),
        Path.home() / ".config" / "quill" / "quill.yaml",
        Path.home() / ".config" / "quill" / "quill.toml",
    ]
    return next((p for p in candidates if p.exists()), None)


def get_root_parser(prog: str | None = "quill") -> ArgumentParser:
    """Construct the argument parser for the `quill` console script."""
    parser = ArgumentParser(
        prog=prog,
        description="Quill - an interactive shell over typed, completable commands.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to a YAML or TOML command config (default: quill.yaml/quill.toml).",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug logs on the console."
    )
    parser.add_argument(
        "--log-mode",
        choices=["cli", "json"],
        default=None,
        help="Console log format (default: QUILL_LOG_MODE or auto-detected).",
    )
    parser.add_argument(
        "--log-file", default="quill.log", help="Log file path ('' disables it)."
    )
    return parser


def build_shell(args: Namespace) -> Shell:
    config_path = args.config or find_quill_config()
    canon = Canon()
    prompt = "quill> "
    if config_path is None:
        console.print(
            "[hint]No quill.yaml or quill.toml found; starting with no commands."
        )
    else:
        if str(config_path.parent) not in sys.path:
            sys.path.insert(0, str(config_path.parent))
        config = read_config(config_path)
        register_commands(config, canon)
        prompt = config.prompt
    return Shell(canon, prompt=prompt)


def main(argv: Sequence[str] | None = None) -> int:
    args = get_root_parser().parse_args(argv)
    setup_logging(
        mode=args.log_mode,
        log_filename=args.log_file or None,
        console_log_level=logging.DEBUG if args.verbose else logging.WARNING,
    )
    try:
        shell = build_shell(args)
    except (QuillError, ValueError, FileNotFoundError) as error:
        console.print(f"[status.error]❌ {error}", markup=True)
        return 1
    shell.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
