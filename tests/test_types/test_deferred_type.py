import pytest

from quill.argument import Argument
from quill.exceptions import TypeRegistrationError
from quill.status import Status
from quill.types import BlankType, DeferredType, NumberType, StringType


def test_deferred_follows_its_target():
    target = {"type": NumberType()}
    deferred = DeferredType(lambda: target["type"])

    assert deferred.parse(Argument("6")).value == 6
    assert deferred.resolve() is target["type"]

    target["type"] = StringType()
    assert deferred.parse(Argument("6")).value == "6"
    assert deferred.stringify("abc") == "abc"


def test_deferred_delegates_stepping():
    deferred = DeferredType(lambda: NumberType(max=3))
    assert deferred.increment(3) == 3
    assert deferred.decrement(3) == 2


def test_deferred_needs_callable():
    with pytest.raises(TypeRegistrationError):
        DeferredType()
    with pytest.raises(TypeRegistrationError):
        DeferredType(defer="not callable")


def test_blank_type():
    blank = BlankType()
    conversion = blank.parse(Argument("anything"))
    assert conversion.value is None
    assert conversion.get_status() == Status.VALID
    assert blank.stringify(5) == ""
