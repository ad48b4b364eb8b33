from types import SimpleNamespace

import pytest

from quill.canon import Canon, Command, command
from quill.events import EventType
from quill.exceptions import CommandRegistrationError
from quill.requisition import Requisition
from quill.types import TypeRegistry


def noop(env, args):
    return None


def test_add_command_from_mapping():
    canon = Canon()
    registered = canon.add_command({"name": "  greet  ", "exec": noop})
    assert registered.name == "greet"
    assert canon.get_command("greet") is registered
    assert "greet" in canon
    assert len(canon) == 1


@pytest.mark.parametrize(
    "spec",
    [
        {"name": ""},
        {"name": "   "},
        {"description": "no name"},
        {"name": "x", "params": "oops"},
        {"name": "x", "exec": "not callable"},
        {"name": "x", "params": [{"name": "a"}, {"name": "a"}]},
        {"name": "x", "params": [{"group": "G", "params": "oops"}]},
    ],
)
def test_add_command_rejects_malformed_specs(spec):
    with pytest.raises(CommandRegistrationError):
        Canon().add_command(spec)


def test_add_command_rejects_other_objects():
    with pytest.raises(CommandRegistrationError):
        Canon().add_command(42)


def test_groups_expand_into_named_parameters():
    canon = Canon()
    registered = canon.add_command(
        {
            "name": "x",
            "exec": noop,
            "params": [
                {"name": "text"},
                {"group": "Options", "params": [{"name": "count", "type": "number", "default": 1}]},
            ],
        }
    )
    assert [param.name for param in registered.params] == ["text", "count"]
    assert registered.get_parameter("count").group == "Options"
    assert registered.get_parameter("missing") is None


def test_multi_word_command_synthesises_parents():
    canon = Canon()
    canon.add_command({"name": "git remote add", "exec": noop})

    git = canon.get_command("git")
    remote = canon.get_command("git remote")
    assert git.is_parent and git.implicit
    assert remote.is_parent and remote.implicit
    assert [child.name for child in canon.get_children("git")] == ["git remote"]


def test_removing_last_child_removes_implicit_parents():
    canon = Canon()
    canon.add_command({"name": "git commit", "exec": noop})
    canon.add_command({"name": "git push", "exec": noop})

    assert canon.remove_command("git commit")
    assert "git" in canon

    assert canon.remove_command("git push")
    assert "git" not in canon
    assert not canon.remove_command("git push")


def test_explicit_parent_is_kept():
    canon = Canon()
    canon.add_command({"name": "git", "description": "version control"})
    canon.add_command({"name": "git push", "exec": noop})
    canon.remove_command("git push")
    assert canon.get_command("git").description == "version control"


def test_removing_explicit_parent_keeps_children_reachable():
    canon = Canon()
    canon.add_command({"name": "git", "exec": noop})
    canon.add_command({"name": "git commit", "exec": noop})
    seen = []
    canon.events.subscribe(
        EventType.CANON_CHANGE, lambda event: seen.append((event.command.name, event.added))
    )

    assert canon.remove_command("git")

    parent = canon.get_command("git")
    assert parent.implicit
    assert parent.exec is None
    assert seen == [("git", False), ("git", True)]

    requisition = Requisition(canon)
    requisition.update("git commit")
    assert requisition.command.name == "git commit"

    canon.remove_command("git commit")
    assert len(canon) == 0


def test_canon_change_events():
    canon = Canon()
    seen = []
    canon.events.subscribe(
        EventType.CANON_CHANGE, lambda event: seen.append((event.command.name, event.added))
    )

    canon.add_command({"name": "a b", "exec": noop})
    canon.remove_command("a b")

    assert seen == [("a", True), ("a b", True), ("a b", False), ("a", False)]


def test_command_decorator_registers_functional_command():
    @command("echo", params=[{"name": "message"}])
    def echo(message):
        """Print the message back."""
        return message

    canon = Canon()
    registered = canon.add_command(echo)
    assert registered.functional
    assert registered.exec is echo
    assert registered.description == "Print the message back."


def test_command_decorator_default_name():
    @command()
    def show_status():
        return "ok"

    assert show_status.metadata["name"] == "show status"


def test_add_command_accepts_command_instance():
    canon = Canon()
    existing = Command({"name": "x", "exec": noop}, canon.types)
    assert canon.add_command(existing) is existing
    with pytest.raises(CommandRegistrationError):
        canon.add_command(existing, name="y")


def test_add_commands_with_namespace():
    canon = Canon()
    added = canon.add_commands(
        {"commit": {"exec": noop}, "push": {"exec": noop}}, namespace="git"
    )
    assert [each.name for each in added] == ["git commit", "git push"]
    assert canon.get_command("git").is_parent

    canon.remove_commands({"commit": {}, "push": {}}, namespace="git")
    assert len(canon) == 0


def test_add_commands_from_object():
    @command(params=[{"name": "who"}])
    def hello(who):
        return f"hello {who}"

    module = SimpleNamespace(hello=hello, helper=lambda: None)
    canon = Canon()
    canon.add_commands(module, namespace="say")
    assert canon.get_command_names() == ["say", "say hello"]


def test_add_commands_from_list():
    canon = Canon()
    canon.add_commands([{"name": "a", "exec": noop}, {"name": "b", "exec": noop}])
    assert canon.get_command_names() == ["a", "b"]


def test_canon_uses_given_registry():
    types = TypeRegistry.with_defaults()
    canon = Canon(types=types)
    assert canon.types is types
    assert types.get_type("command") is canon.command_type
