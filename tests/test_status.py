import pytest

from quill.status import Status


def test_status_order():
    assert Status.VALID < Status.INCOMPLETE < Status.ERROR


def test_combine_takes_worst():
    assert Status.combine(Status.VALID, Status.INCOMPLETE) == Status.INCOMPLETE
    assert Status.combine([Status.VALID], Status.ERROR) == Status.ERROR
    assert Status.combine([Status.INCOMPLETE, [Status.VALID]]) == Status.INCOMPLETE


def test_combine_empty_is_valid():
    assert Status.combine() == Status.VALID
    assert Status.combine([]) == Status.VALID


def test_status_from_string():
    assert Status("error") == Status.ERROR
    assert Status(" Valid ") == Status.VALID
    with pytest.raises(ValueError):
        Status("broken")
