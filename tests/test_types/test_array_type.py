import pytest

from quill.argument import Argument, ArrayArgument
from quill.conversion import ArrayConversion
from quill.exceptions import MisuseError
from quill.status import Status
from quill.types import ArrayType, NumberType, StringType


def test_array_parses_each_element():
    numbers = ArrayType(NumberType())
    conversion = numbers.parse(ArrayArgument([Argument("1"), Argument("2", " ", "")]))
    assert isinstance(conversion, ArrayConversion)
    assert conversion.value == [1, 2]
    assert conversion.get_status() == Status.VALID


def test_array_status_is_worst_element():
    numbers = ArrayType(NumberType())
    bad = Argument("x", " ", "")
    conversion = numbers.parse(ArrayArgument([Argument("1"), bad]))
    assert conversion.value == [1, None]
    assert conversion.get_status() == Status.ERROR
    assert conversion.message == "Can't convert 'x' to a number."


def test_array_status_of_single_element():
    numbers = ArrayType(NumberType())
    good = Argument("1")
    bad = Argument("x", " ", "")
    conversion = numbers.parse(ArrayArgument([good, bad]))
    assert conversion.get_status(good) == Status.VALID
    assert conversion.get_status(bad) == Status.ERROR


def test_array_requires_array_argument():
    with pytest.raises(MisuseError):
        ArrayType(StringType()).parse(Argument("1"))


def test_array_parse_string():
    conversion = ArrayType(NumberType()).parse_string("1 2 3")
    assert conversion.value == [1, 2, 3]


def test_array_stringify_quotes_elements():
    strings = ArrayType(StringType())
    assert strings.stringify(["a b", "c"]) == "'a b' c"
    assert strings.stringify([]) == ""
    assert strings.parse_string("'a b' c").value == ["a b", "c"]


def test_array_default_is_empty():
    default = ArrayType(StringType()).get_default()
    assert default.value == []
    assert default.arg.is_blank()
