import pytest

from quill.argument import Argument, FalseNamedArgument, TrueNamedArgument
from quill.conversion import Prediction
from quill.exceptions import TypeRegistrationError
from quill.status import Status
from quill.types import BooleanType, SelectionType


@pytest.fixture
def colors():
    return SelectionType(data=["red", "green", "grey"])


def test_selection_exact_match(colors):
    conversion = colors.parse(Argument("red"))
    assert conversion.value == "red"
    assert conversion.get_status() == Status.VALID


def test_selection_prefix_is_incomplete(colors):
    conversion = colors.parse(Argument("gr"))
    assert conversion.value is None
    assert conversion.get_status() == Status.INCOMPLETE
    assert [each.name for each in conversion.get_predictions()] == ["green", "grey"]


def test_selection_blank_predicts_everything(colors):
    conversion = colors.parse(Argument(""))
    assert conversion.get_status() == Status.INCOMPLETE
    assert len(conversion.get_predictions()) == 3


def test_selection_unknown_is_error(colors):
    conversion = colors.parse(Argument("blue"))
    assert conversion.get_status() == Status.ERROR
    assert conversion.message == "Can't use 'blue'."
    assert conversion.get_predictions() == []


def test_selection_lookup_values():
    sizes = SelectionType(lookup=[("small", 1), {"name": "large", "value": 3}])
    assert sizes.parse(Argument("large")).value == 3
    assert sizes.stringify(1) == "small"


def test_selection_data_callable_is_reread():
    options = ["a"]
    selection = SelectionType(data=lambda: options)
    assert selection.parse(Argument("b")).get_status() == Status.ERROR
    options.append("b")
    assert selection.parse(Argument("b")).get_status() == Status.VALID


def test_selection_predictions_are_lazy():
    options = ["apple"]
    selection = SelectionType(data=lambda: options)
    conversion = selection.parse(Argument("a"))
    options.append("avocado")
    assert [each.name for each in conversion.get_predictions()] == ["apple", "avocado"]


def test_selection_cycles(colors):
    assert colors.increment("grey") == "red"
    assert colors.decrement("red") == "grey"
    assert colors.increment("red") == "green"
    assert colors.increment(None) == "red"
    assert colors.decrement(None) == "grey"


def test_selection_requires_options():
    with pytest.raises(TypeRegistrationError):
        SelectionType()


def test_boolean_parses_words_and_flags():
    boolean = BooleanType()
    assert boolean.parse(Argument("true")).value is True
    assert boolean.parse(Argument("false")).value is False
    assert boolean.parse(TrueNamedArgument("verbose")).value is True
    assert boolean.parse(FalseNamedArgument()).value is False
    assert boolean.parse(Argument("maybe")).get_status() == Status.ERROR


def test_boolean_default_is_absent_flag():
    default = BooleanType().get_default()
    assert default.value is False
    assert isinstance(default.arg, FalseNamedArgument)


def test_boolean_toggles():
    boolean = BooleanType()
    assert boolean.increment(True) is False
    assert boolean.increment(False) is True
    assert boolean.stringify(True) == "true"


def test_prediction_objects_pass_through():
    selection = SelectionType(lookup=[Prediction("one", 1)])
    assert selection.get_lookup() == [Prediction("one", 1)]
