import pytest
from prompt_toolkit.completion import Completion
from prompt_toolkit.document import Document

from quill.completer import RequisitionCompleter


@pytest.fixture
def completer(requisition):
    return RequisitionCompleter(requisition)


def texts(completions):
    return [completion.text for completion in completions]


def test_completes_command_names(completer):
    results = list(completer.get_completions(Document("tsn"), None))
    assert all(isinstance(each, Completion) for each in results)
    assert texts(results) == ["tsn", "tsn dif", "tsn ext", "tsn exte"]


def test_completes_multi_word_command(completer):
    results = list(completer.get_completions(Document("tsn d"), None))
    assert texts(results) == ["tsn dif"]
    assert results[0].start_position == -5


def test_command_lcp(completer):
    results = list(completer.get_completions(Document("tsn e"), None))
    assert texts(results) == ["tsn ext", "tsn ext", "tsn exte"]


def test_completes_selection_values(completer):
    results = list(completer.get_completions(Document("tsv op"), None))
    assert texts(results) == ["option", "option1", "option2"]
    assert all(each.start_position == -2 for each in results)


def test_completes_blank_selection(completer):
    results = list(completer.get_completions(Document("tsv "), None))
    assert texts(results) == ["option", "option1", "option2"]
    assert results[0].start_position == 0


def test_completes_flags(completer):
    results = list(completer.get_completions(Document("tsg hello --c"), None))
    assert texts(results) == ["--count"]
    assert results[0].start_position == -3


def test_flags_already_given_are_skipped(completer):
    results = list(completer.get_completions(Document("tsg hello --verbose -"), None))
    assert texts(results) == ["--count"]


def test_no_completions_for_free_text(completer):
    assert list(completer.get_completions(Document("tsn dif hel"), None)) == []


def test_ensure_quote(completer):
    assert completer._ensure_quote("a b") == '"a b"'
    assert completer._ensure_quote('say "hi" now') == "'say \"hi\" now'"
    assert completer._ensure_quote("plain") == "plain"


def test_lcp_completions_quote_spaces(completer):
    results = list(completer._yield_lcp_completions(["New York", "Newark"], "New"))
    assert texts(results) == ['"New York"', "Newark"]
    assert [each.display_text for each in results] == ["New York", "Newark"]
