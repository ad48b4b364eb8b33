import pytest

from quill.status import Status
from quill.types import ArrayType, BooleanType, NumberType, SelectionType, StringType


@pytest.mark.parametrize(
    "type_,value",
    [
        (StringType(), "hello world"),
        (StringType(), "it's"),
        (NumberType(min=-10, max=10), -3),
        (NumberType(allow_float=True), 2.5),
        (BooleanType(), True),
        (BooleanType(), False),
        (SelectionType(lookup=[("one", 1), ("two", 2)]), 2),
        (ArrayType(NumberType()), [1, 2, 3]),
        (ArrayType(StringType()), ["a b", "c"]),
    ],
)
def test_stringify_then_parse_returns_value(type_, value):
    conversion = type_.parse_string(type_.stringify(value))
    assert conversion.get_status() == Status.VALID
    assert conversion.value == value
