# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""config.py
Configuration loader for Quill commands.

A config file (YAML or TOML) holds a `commands` list. Each entry names a
command, the dotted import path of its action and its parameters:

    prompt: "quill> "
    commands:
      - name: greet
        description: Say hello
        action: myapp.actions.greet
        functional: true
        params:
          - name: who
            type: string
          - group: Options
            params:
              - name: times
                type: {name: number, min: 1, max: 5}
                default: 1
                short: t

Type mappings may give `defer` (for deferred types) or `data` (for
selections) as a dotted import path to a callable.
"""
from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any, Callable

import toml
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from quill.canon import Canon, Command
from quill.exceptions import CommandRegistrationError
from quill.logger import logger

CALLABLE_TYPE_OPTIONS = ("defer", "data", "lookup")


def import_action(dotted_path: str) -> Callable[..., Any]:
    """Dynamically imports a callable from a dotted path like 'my.module.func'."""
    module_path, _, attr = dotted_path.rpartition(".")
    if not module_path:
        raise CommandRegistrationError(f"Invalid action path: {dotted_path}")
    try:
        module = importlib.import_module(module_path)
    except ModuleNotFoundError as error:
        logger.error("Failed to import module '%s': %s", module_path, error)
        raise CommandRegistrationError(
            f"Could not import '{dotted_path}': {error}. Ensure the module is "
            "installed and discoverable via PYTHONPATH."
        ) from error
    try:
        action = getattr(module, attr)
    except AttributeError as error:
        logger.error(
            "Module '%s' does not have attribute '%s': %s", module_path, attr, error
        )
        raise CommandRegistrationError(
            f"Module '{module_path}' has no attribute '{attr}'"
        ) from error
    if not callable(action):
        raise CommandRegistrationError(f"'{dotted_path}' is not callable")
    return action


class RawParameter(BaseModel):
    """Raw parameter model for Quill configuration."""

    model_config = ConfigDict(extra="forbid")

    name: str
    type: str | dict[str, Any] = "string"
    description: str = ""
    default: Any = None
    short: str | None = None

    def to_spec(self) -> dict[str, Any]:
        spec = self.model_dump(exclude_unset=True)
        if isinstance(self.type, dict):
            type_spec = dict(self.type)
            for option in CALLABLE_TYPE_OPTIONS:
                if isinstance(type_spec.get(option), str):
                    type_spec[option] = import_action(type_spec[option])
            spec["type"] = type_spec
        return spec


class RawGroup(BaseModel):
    """An option group: parameters that can only be given by name."""

    model_config = ConfigDict(extra="forbid")

    group: str
    params: list[RawParameter] = Field(default_factory=list)

    def to_spec(self) -> dict[str, Any]:
        return {"group": self.group, "params": [each.to_spec() for each in self.params]}


class RawCommand(BaseModel):
    """Raw command model for Quill configuration."""

    model_config = ConfigDict(extra="forbid")

    name: str
    description: str = ""
    manual: str = ""
    action: str | None = None
    hidden: bool = False
    functional: bool = False
    params: list[RawParameter | RawGroup] = Field(default_factory=list)

    def to_spec(self) -> dict[str, Any]:
        spec: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "manual": self.manual,
            "hidden": self.hidden,
            "functional": self.functional,
            "params": [each.to_spec() for each in self.params],
        }
        if self.action:
            spec["exec"] = import_action(self.action)
        return spec


class QuillConfig(BaseModel):
    """Quill configuration model."""

    prompt: str = "quill> "
    commands: list[RawCommand] = Field(default_factory=list)


def read_config(file_path: Path | str) -> QuillConfig:
    """
    Read and validate a YAML or TOML config file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the format is unsupported or the content is invalid.
    """
    if isinstance(file_path, (str, Path)):
        path = Path(file_path)
    else:
        raise TypeError("file_path must be a string or Path object.")

    if not path.is_file():
        raise FileNotFoundError(f"No such config file: {file_path}")

    suffix = path.suffix
    with path.open("r", encoding="UTF-8") as config_file:
        if suffix in (".yaml", ".yml"):
            raw_config = yaml.safe_load(config_file)
        elif suffix == ".toml":
            raw_config = toml.load(config_file)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration file must contain a mapping at the top level.")

    try:
        return QuillConfig.model_validate(raw_config)
    except ValidationError as error:
        raise ValueError(f"Invalid configuration in {path}: {error}") from error


def load_commands(file_path: Path | str, canon: Canon) -> list[Command]:
    """
    Register every command of a config file with a canon.

    Args:
        file_path (Path | str): Path to the config file (YAML or TOML).
        canon (Canon): The registry to add the commands to.

    Returns:
        list[Command]: The registered commands, in file order.

    Raises:
        ValueError: If the file cannot be parsed.
        CommandRegistrationError: If a command or action is invalid.
    """
    commands = register_commands(read_config(file_path), canon)
    logger.debug("Loaded %d commands from %s", len(commands), file_path)
    return commands


def register_commands(config: QuillConfig, canon: Canon) -> list[Command]:
    """Register the commands of an already validated config, in file order."""
    return [canon.add_command(raw.to_spec()) for raw in config.commands]
