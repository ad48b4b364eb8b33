import os

import pytest

from quill.canon import Canon
from quill.config import import_action, load_commands, read_config, register_commands
from quill.exceptions import CommandRegistrationError
from quill.requisition import Requisition

YAML_CONFIG = """
prompt: "paths> "
commands:
  - name: path join
    description: Join two path parts
    action: os.path.join
    functional: true
    params:
      - name: head
      - name: tail
  - name: path pick
    action: os.path.basename
    functional: true
    params:
      - name: path
        type: {name: selection, data: [/tmp/a, /tmp/b]}
      - group: Options
        params:
          - name: depth
            type: {name: number, min: 0, max: 3}
            default: 1
            short: d
"""

TOML_CONFIG = """
[[commands]]
name = "base"
action = "os.path.basename"
functional = true

  [[commands.params]]
  name = "path"
"""


def test_read_yaml_config(tmp_path):
    path = tmp_path / "quill.yaml"
    path.write_text(YAML_CONFIG)

    config = read_config(path)

    assert config.prompt == "paths> "
    assert [each.name for each in config.commands] == ["path join", "path pick"]


def test_load_commands_registers_actions(tmp_path):
    path = tmp_path / "quill.yml"
    path.write_text(YAML_CONFIG)
    canon = Canon()

    commands = load_commands(path, canon)

    assert [each.name for each in commands] == ["path join", "path pick"]
    assert canon.get_command("path").is_parent
    pick = canon.get_command("path pick")
    assert pick.get_parameter("depth").group == "Options"
    assert pick.get_parameter("depth").short == "d"

    requisition = Requisition(canon)
    requisition.exec("path join a b")
    assert requisition.report_list.get_latest().output == os.path.join("a", "b")


def test_read_toml_config(tmp_path):
    path = tmp_path / "quill.toml"
    path.write_text(TOML_CONFIG)
    canon = Canon()

    load_commands(path, canon)

    requisition = Requisition(canon)
    requisition.exec("base /tmp/file.txt")
    assert requisition.report_list.get_latest().output == "file.txt"


def test_register_commands_from_read_config(tmp_path):
    path = tmp_path / "quill.toml"
    path.write_text(TOML_CONFIG)
    canon = Canon()

    registered = register_commands(read_config(path), canon)

    assert [each.name for each in registered] == ["base"]
    assert canon.get_command("base").functional


def test_callable_type_options_are_imported(tmp_path):
    path = tmp_path / "quill.yaml"
    path.write_text(
        """
commands:
  - name: cwd
    action: os.getcwd
    functional: true
    params:
      - group: Options
        params:
          - name: where
            type: {name: selection, data: os.listdir}
            default: null
"""
    )
    command = load_commands(path, Canon())[0]
    assert command.get_parameter("where").type.data is os.listdir


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        read_config("does/not/exist.yaml")


def test_unsupported_format(tmp_path):
    path = tmp_path / "quill.json"
    path.write_text("{}")
    with pytest.raises(ValueError, match="Unsupported config format"):
        read_config(path)


def test_top_level_must_be_mapping(tmp_path):
    path = tmp_path / "quill.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ValueError):
        read_config(path)


def test_unknown_keys_are_rejected(tmp_path):
    path = tmp_path / "quill.yaml"
    path.write_text("commands:\n  - name: x\n    colour: red\n")
    with pytest.raises(ValueError, match="Invalid configuration"):
        read_config(path)


def test_empty_file(tmp_path):
    path = tmp_path / "quill.yaml"
    path.write_text("")
    assert read_config(path).commands == []


@pytest.mark.parametrize(
    "dotted",
    ["nodots", "no_such_module_anywhere.fn", "os.path.no_such_function", "os.sep"],
)
def test_import_action_errors(dotted):
    with pytest.raises(CommandRegistrationError):
        import_action(dotted)
