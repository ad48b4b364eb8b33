# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the `Argument` token model and its composite variants.

An `Argument` is one lexical unit of the input line together with the exact
whitespace and quoting that surrounded it, so that concatenating
`prefix + text + suffix` over every token reproduces what the user typed.
Arguments are treated as immutable values: when an assignment's value changes,
a new argument is created with `beget()` rather than editing the old one.

Variants:
- `MergedArgument`: several adjacent tokens folded into one logical token.
- `NamedArgument`: a flag token plus its value token (`--flag value`).
- `TrueNamedArgument`: a boolean flag that is present (`--verbose`).
- `FalseNamedArgument`: a boolean flag that is absent; contributes no text.
- `ArrayArgument`: an ordered collection feeding one array parameter.

Every variant answers `get_args()` with the underlying tokens that make up the
visible command line, which is what the `Requisition` uses to keep its token
list in step with its assignments.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from quill.assignment import Assignment

QUOTES = ("'", '"')


def _quote_for(text: str) -> str:
    return '"' if "'" in text and '"' not in text else "'"


def _needs_quotes(text: str) -> bool:
    return text == "" or " " in text or text[0] in QUOTES


def escape(text: str, quote: str = "") -> str:
    """Backslash-escape `text` so the tokenizer reads it back unchanged."""
    escaped = text.replace("\\", "\\\\")
    if quote:
        escaped = escaped.replace(quote, "\\" + quote)
    return escaped


def quote_if_needed(text: str) -> str:
    """Render `text` as it would have to be typed to arrive as one token."""
    quote = _quote_for(text) if _needs_quotes(text) else ""
    return f"{quote}{escape(text, quote)}{quote}"


@dataclass(eq=False)
class Argument:
    """
    A single token of command line input.

    Attributes:
        text (str): The token's value with quotes and escapes removed.
        prefix (str): Whitespace and any opening quote before the text.
        suffix (str): Any closing quote and trailing whitespace after the text.
        assignment (Assignment | None): The assignment currently owning this token.
        raw (str | None): The text as it appears on the line, escapes included.
            Defaults to `text`.
    """

    text: str = ""
    prefix: str = ""
    suffix: str = ""
    assignment: Assignment | None = field(default=None, repr=False)
    raw: str | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.raw is None:
            self.raw = self.text

    def beget(self, text: str, prefix_space: bool = False) -> Argument:
        """
        Create a replacement argument carrying new text.

        Leading whitespace and trailing whitespace are preserved. The text is
        quoted when it would otherwise be unrepresentable (empty, containing a
        space or starting with a quote) or when this argument was already
        quoted. Backslashes and the chosen quote character are escaped.

        Args:
            text (str): The new token text.
            prefix_space (bool): Ensure the new argument is separated from the
                previous token by at least one space.
        """
        leading = self.prefix
        trailing = self.suffix
        quote = ""
        if leading and leading[-1] in QUOTES:
            quote = leading[-1]
            leading = leading[:-1]
            if trailing.startswith(quote):
                trailing = trailing[1:]
        if prefix_space and not leading:
            leading = " "
        if quote and quote in text:
            quote = _quote_for(text)
        elif not quote and _needs_quotes(text):
            quote = _quote_for(text)
        return Argument(
            text, leading + quote, quote + trailing, raw=escape(text, quote)
        )

    def merge(self, following: Argument) -> Argument:
        """Join this argument and the one after it into a single argument."""
        return Argument(
            self.text + self.suffix + following.prefix + following.text,
            self.prefix,
            following.suffix,
            raw=self.raw + self.suffix + following.prefix + following.raw,
        )

    def assign(self, assignment: Assignment | None) -> None:
        for arg in self.get_args():
            arg.assignment = assignment
        self.assignment = assignment

    def get_args(self) -> list[Argument]:
        """Return the visible tokens making up this argument."""
        return [self]

    def is_blank(self) -> bool:
        """True when there is no text and nothing but whitespace around it."""
        return (
            self.text == "" and self.prefix.strip() == "" and self.suffix.strip() == ""
        )

    def __str__(self) -> str:
        return f"{self.prefix}{self.raw}{self.suffix}"


def merge_arguments(args: Iterable[Argument]) -> Argument:
    """Fold a sequence of adjacent arguments into one plain `Argument`."""
    joined: Argument | None = None
    for arg in args:
        joined = arg if joined is None else joined.merge(arg)
    return joined if joined is not None else Argument()


class MergedArgument(Argument):
    """Several adjacent tokens treated as a single logical argument."""

    def __init__(self, args: list[Argument]) -> None:
        if not isinstance(args, list):
            raise TypeError("MergedArgument requires a list of Arguments")
        merged = merge_arguments(args)
        super().__init__(merged.text, merged.prefix, merged.suffix, raw=merged.raw)
        self.args = list(args)

    def get_args(self) -> list[Argument]:
        return self.args

    def beget(self, text: str, prefix_space: bool = False) -> Argument:
        return Argument(self.text, self.prefix, self.suffix, raw=self.raw).beget(
            text, prefix_space
        )


class NamedArgument(Argument):
    """A flag name token followed by its value token, e.g. `--count 3`."""

    def __init__(self, name_arg: Argument, value_arg: Argument) -> None:
        super().__init__(
            value_arg.text,
            str(name_arg) + value_arg.prefix,
            value_arg.suffix,
            raw=value_arg.raw,
        )
        self.name_arg = name_arg
        self.value_arg = value_arg

    def get_args(self) -> list[Argument]:
        return [self.name_arg, self.value_arg]

    def beget(self, text: str, prefix_space: bool = False) -> Argument:
        value_arg = self.value_arg.beget(text, prefix_space=True)
        return NamedArgument(self.name_arg, value_arg)


class TrueNamedArgument(Argument):
    """
    A boolean flag that is present on the command line.

    Built from the flag token when parsing, or synthesised from the parameter
    name (as ` --name`) when a boolean is switched on programmatically.
    """

    def __init__(self, name: str | None = None, arg: Argument | None = None) -> None:
        if arg is not None:
            super().__init__(arg.text, arg.prefix, arg.suffix, raw=arg.raw)
        else:
            super().__init__(f"--{name}", " ", "")
        self.arg = arg if arg is not None else Argument(self.text, self.prefix, "")

    def get_args(self) -> list[Argument]:
        return [self.arg]


class FalseNamedArgument(Argument):
    """A boolean flag that is absent. It contributes no visible token."""

    def __init__(self) -> None:
        super().__init__("", "", "")

    def get_args(self) -> list[Argument]:
        return []


class ArrayArgument(Argument):
    """An ordered collection of arguments feeding one array-typed parameter."""

    def __init__(self, args: Iterable[Argument] | None = None) -> None:
        super().__init__("", "", "")
        self.args: list[Argument] = list(args or [])

    def add_argument(self, arg: Argument) -> None:
        self.args.append(arg)

    def get_arguments(self) -> list[Argument]:
        return self.args

    def get_args(self) -> list[Argument]:
        tokens: list[Argument] = []
        for arg in self.args:
            tokens.extend(arg.get_args())
        return tokens

    def is_blank(self) -> bool:
        return all(arg.is_blank() for arg in self.args)

    def __str__(self) -> str:
        return "".join(str(arg) for arg in self.args)

