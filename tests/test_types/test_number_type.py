import pytest

from quill.argument import Argument
from quill.exceptions import TypeRegistrationError
from quill.status import Status
from quill.types import NumberType


@pytest.fixture
def bounded():
    return NumberType(min=0, max=42)


def test_number_parses_in_range(bounded):
    conversion = bounded.parse(Argument("6"))
    assert conversion.value == 6
    assert conversion.get_status() == Status.VALID


def test_number_blank_is_incomplete(bounded):
    conversion = bounded.parse(Argument(""))
    assert conversion.value is None
    assert conversion.get_status() == Status.INCOMPLETE


def test_number_rejects_text(bounded):
    conversion = bounded.parse(Argument("six"))
    assert conversion.get_status() == Status.ERROR
    assert conversion.message == "Can't convert 'six' to a number."


@pytest.mark.parametrize(
    "text,message",
    [
        ("50", "50 is greater than the maximum allowed: 42."),
        ("-1", "-1 is smaller than the minimum allowed: 0."),
    ],
)
def test_number_out_of_bounds(bounded, text, message):
    conversion = bounded.parse(Argument(text))
    assert conversion.get_status() == Status.ERROR
    assert conversion.message == message


@pytest.mark.parametrize("text", ["1_0", "\u0661\u0662", "1.5e", "nan", "inf", "0x10", "1e999"])
def test_number_rejects_non_decimal_forms(text):
    conversion = NumberType(allow_float=True).parse(Argument(text))
    assert conversion.get_status() == Status.ERROR


@pytest.mark.parametrize("text,value", [("-3", -3), ("+4", 4), (".5", 0.5), ("2e3", 2000.0)])
def test_number_accepts_signed_and_exponent_forms(text, value):
    assert NumberType(allow_float=True).parse(Argument(text)).value == value


def test_number_rejects_float_unless_allowed():
    assert NumberType().parse(Argument("1.5")).get_status() == Status.ERROR
    conversion = NumberType(allow_float=True).parse(Argument("1.5"))
    assert conversion.value == 1.5
    assert NumberType(allow_float=True).parse(Argument("inf")).get_status() == Status.ERROR


def test_number_callable_bounds():
    limit = {"max": 5}
    number = NumberType(max=lambda: limit["max"])
    assert number.parse(Argument("6")).get_status() == Status.ERROR
    limit["max"] = 10
    assert number.parse(Argument("6")).get_status() == Status.VALID


def test_increment_clamps(bounded):
    assert bounded.increment(41) == 42
    assert bounded.increment(42) == 42
    assert bounded.decrement(0) == 0
    assert bounded.decrement(1) == 0


def test_increment_from_nothing(bounded):
    assert bounded.increment(None) == 0
    assert bounded.decrement(None) == 42
    assert NumberType().increment(None) == 0


def test_increment_snaps_to_step():
    number = NumberType(step=5)
    assert number.increment(7) == 10
    assert number.decrement(7) == 5
    assert number.increment(10) == 15


def test_increment_float_step():
    number = NumberType(step=0.5, allow_float=True)
    assert number.increment(1.2) == 1.5
    assert number.decrement(1.2) == 1.0


def test_non_positive_step_is_rejected():
    with pytest.raises(TypeRegistrationError):
        NumberType(step=0)
    with pytest.raises(TypeRegistrationError):
        NumberType(step=-1)


def test_stringify():
    assert NumberType().stringify(None) == ""
    assert NumberType().stringify(12) == "12"
