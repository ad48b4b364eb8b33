import pytest

from quill.argument import (
    Argument,
    ArrayArgument,
    FalseNamedArgument,
    MergedArgument,
    NamedArgument,
    TrueNamedArgument,
    escape,
    quote_if_needed,
)


def test_beget_keeps_surrounding_whitespace():
    arg = Argument("abc", " ", "  ")
    child = arg.beget("xyz")
    assert str(child) == " xyz  "


def test_beget_quotes_text_with_spaces():
    child = Argument("abc", " ", "").beget("x y")
    assert child.text == "x y"
    assert str(child) == " 'x y'"


def test_beget_keeps_existing_quotes():
    child = Argument("ab", ' "', '"').beget("cd")
    assert str(child) == ' "cd"'


def test_beget_switches_quote_when_text_contains_it():
    child = Argument("ab", " '", "'").beget("it's")
    assert str(child) == ' "it\'s"'


def test_beget_prefix_space():
    assert str(Argument().beget("x", prefix_space=True)) == " x"
    assert str(Argument().beget("x")) == "x"


def test_beget_quotes_text_starting_with_quote():
    child = Argument("ab", " ", "").beget("'a")
    assert child.text == "'a"
    assert str(child) == " \"'a\""


def test_beget_escapes_quote_when_text_has_both():
    child = Argument("ab", " '", "'").beget('it\'s a "b"')
    assert child.text == 'it\'s a "b"'
    assert str(child) == " 'it\\'s a \"b\"'"


def test_beget_escapes_backslashes():
    child = Argument("ab", " ", "").beget("C:\\new")
    assert child.text == "C:\\new"
    assert str(child) == " C:\\\\new"


@pytest.mark.parametrize(
    "text,rendered",
    [
        ("plain", "plain"),
        ("", "''"),
        ("a b", "'a b'"),
        ("it's", "\"it's\""),
        ("'a", "\"'a\""),
        ("\"a", "'\"a'"),
        ("x's \"y\"", "'x\\'s \"y\"'"),
        ("a\\b", "a\\\\b"),
    ],
)
def test_quote_if_needed(text, rendered):
    assert quote_if_needed(text) == rendered


def test_escape_only_touches_backslashes_and_the_quote():
    assert escape("a'b\"c", "'") == "a\\'b\"c"
    assert escape("a\\b") == "a\\\\b"


def test_is_blank():
    assert Argument().is_blank()
    assert Argument("", "  ", "").is_blank()
    assert not Argument("", " '", "'").is_blank()
    assert not Argument("a").is_blank()


def test_merged_argument():
    merged = MergedArgument([Argument("tsn"), Argument("dif", " ", "")])
    assert merged.text == "tsn dif"
    assert str(merged) == "tsn dif"
    assert len(merged.get_args()) == 2


def test_named_argument():
    named = NamedArgument(Argument("--count", " ", ""), Argument("3", " ", ""))
    assert named.text == "3"
    assert str(named) == " --count 3"
    assert [arg.text for arg in named.get_args()] == ["--count", "3"]


def test_named_argument_beget_keeps_flag():
    named = NamedArgument(Argument("--count", " ", ""), Argument("3", " ", ""))
    child = named.beget("4")
    assert isinstance(child, NamedArgument)
    assert child.name_arg is named.name_arg
    assert str(child) == " --count 4"


def test_true_named_argument_from_name():
    arg = TrueNamedArgument("verbose")
    assert str(arg) == " --verbose"
    assert [str(each) for each in arg.get_args()] == [" --verbose"]


def test_true_named_argument_from_token():
    token = Argument("--verbose", " ", "")
    arg = TrueNamedArgument(arg=token)
    assert arg.get_args() == [token]


def test_false_named_argument_has_no_tokens():
    arg = FalseNamedArgument()
    assert str(arg) == ""
    assert arg.get_args() == []


def test_array_argument_flattens_tokens():
    named = NamedArgument(Argument("--n", " ", ""), Argument("1", " ", ""))
    array = ArrayArgument([Argument("a"), named])
    assert [arg.text for arg in array.get_args()] == ["a", "--n", "1"]
    assert array.get_arguments()[1] is named
    assert not array.is_blank()
    assert ArrayArgument().is_blank()


def test_assign_marks_every_token():
    marker = object()
    named = NamedArgument(Argument("--n", " ", ""), Argument("1", " ", ""))
    named.assign(marker)
    assert all(token.assignment is marker for token in named.get_args())
