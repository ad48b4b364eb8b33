import pytest

from quill.canon import Canon
from quill.requisition import Requisition
from quill.types import BlankType, NumberType, StringType


@pytest.fixture
def holder():
    return {}


@pytest.fixture
def canon(holder):
    canon = Canon()
    number_type = NumberType()
    string_type = StringType()

    def option_value_type():
        requisition = holder.get("requisition")
        if requisition is None:
            return BlankType()
        option_type = requisition.get_assignment("optionType")
        if option_type is None or option_type.value is None:
            return BlankType()
        return option_type.value

    canon.add_command(
        {
            "name": "tsn dif",
            "description": "different text",
            "params": [{"name": "text", "type": "string"}],
            "exec": lambda env, args: f"dif:{args['text']}",
        }
    )
    canon.add_command(
        {
            "name": "tsn ext",
            "params": [{"name": "text", "type": "string"}],
            "exec": lambda env, args: f"ext:{args['text']}",
        }
    )
    canon.add_command(
        {
            "name": "tsn exte",
            "params": [{"name": "text", "type": "string"}],
            "exec": lambda env, args: f"exte:{args['text']}",
        }
    )
    canon.add_command(
        {
            "name": "tsv",
            "params": [
                {
                    "name": "optionType",
                    "type": {
                        "name": "selection",
                        "lookup": [("option1", number_type), ("option2", string_type)],
                    },
                },
                {
                    "name": "optionValue",
                    "type": {"name": "deferred", "defer": option_value_type},
                },
            ],
            "exec": lambda env, args: args["optionValue"],
        }
    )
    canon.add_command(
        {
            "name": "tsg",
            "params": [
                {"name": "text", "type": "string"},
                {
                    "group": "Options",
                    "params": [
                        {"name": "count", "type": "number", "default": 1, "short": "c"},
                        {"name": "verbose", "type": "boolean"},
                    ],
                },
            ],
            "exec": lambda env, args: args,
        }
    )
    canon.add_command(
        {
            "name": "tsp",
            "params": [
                {"name": "first", "type": "string", "default": "one"},
                {"name": "second", "type": "string", "default": "two"},
            ],
            "exec": lambda env, args: args,
        }
    )
    canon.add_command(
        {
            "name": "tsa",
            "params": [{"name": "items", "type": {"name": "array", "subtype": "number"}}],
            "exec": lambda env, args: sum(args["items"]),
        }
    )
    canon.add_command(
        {
            "name": "tsb",
            "params": [
                {"name": "first", "type": "string"},
                {"name": "nums", "type": {"name": "array", "subtype": "number"}},
            ],
            "exec": lambda env, args: args,
        }
    )
    canon.add_command(
        {
            "name": "tsh",
            "hidden": True,
            "exec": lambda env, args: "hidden",
        }
    )
    return canon


@pytest.fixture
def requisition(canon, holder):
    requisition = Requisition(canon, environment={"name": "test-env"})
    holder["requisition"] = requisition
    return requisition
