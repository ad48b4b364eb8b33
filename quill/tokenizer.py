# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Converts a raw input line into an ordered list of `Argument` tokens.

The tokenizer preserves everything it does not put into a token's text:
whitespace runs and quote characters are recorded in the token prefix and
suffix, and each token keeps its raw text with escapes intact, so
concatenating `prefix + raw + suffix` over the returned tokens rebuilds the
input exactly.

Scanning is a four state machine:

- OUTSIDE: between tokens; spaces accumulate into the next token's prefix.
- IN_SIMPLE: inside an unquoted token; a space ends it.
- IN_SINGLE_QUOTE / IN_DOUBLE_QUOTE: inside a quoted token; the matching quote
  ends it and is recorded as the suffix.

A backslash and the character after it are always scanned as a pair, so an
escaped space or quote never acts as a delimiter. Escape sequences (`\\\\`,
`\\b`, `\\f`, `\\n`, `\\r`, `\\t`, `\\v`, `\\ `, `\\'`, `\\"`) are unescaped
in each token's text.

Example:
    tokenize('12\\'34 "12 34" \\\\')
    → [Argument("12'34"), Argument("12 34", ' "', '"'), Argument("\\\\", " ")]
"""
from __future__ import annotations

import re
from enum import Enum

from quill.argument import Argument

_ESCAPES = {
    "\\": "\\",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    " ": " ",
    "'": "'",
    '"': '"',
}
_ESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)
_INLINE_VALUE_PATTERN = re.compile(r"^(--[^=\s]+)=(.*)$", re.DOTALL)


class ScanState(Enum):
    OUTSIDE = "outside"
    IN_SIMPLE = "in_simple"
    IN_SINGLE_QUOTE = "in_single_quote"
    IN_DOUBLE_QUOTE = "in_double_quote"


def is_simple(typed: str) -> bool:
    """True when the input has nothing that needs the full scanner."""
    return not any(char in " '\"\\" for char in typed)


def _escape(match: re.Match) -> str:
    char = match.group(1)
    return _ESCAPES.get(char, match.group(0))


def unescape(raw: str) -> str:
    return _ESCAPE_PATTERN.sub(_escape, raw)


def _token(raw: str, prefix: str, suffix: str) -> Argument:
    return Argument(unescape(raw), prefix, suffix, raw=raw)


def tokenize(typed: str | None) -> list[Argument]:
    """
    Split typed input into arguments.

    Blank input yields a single empty argument so that downstream code always
    operates on a non-empty list.

    Args:
        typed (str | None): The raw input line.

    Returns:
        list[Argument]: The tokens in textual order.
    """
    if not typed:
        return [Argument("", "", "")]

    if is_simple(typed):
        return [Argument(typed, "", "")]

    state = ScanState.OUTSIDE
    args: list[Argument] = []
    start = 0
    prefix = ""
    index = 0
    while index < len(typed):
        char = typed[index]
        if state == ScanState.OUTSIDE:
            if char == "'":
                prefix = typed[start : index + 1]
                state = ScanState.IN_SINGLE_QUOTE
                start = index + 1
            elif char == '"':
                prefix = typed[start : index + 1]
                state = ScanState.IN_DOUBLE_QUOTE
                start = index + 1
            elif char != " ":
                prefix = typed[start:index]
                state = ScanState.IN_SIMPLE
                start = index
                if char == "\\":
                    index += 1
        elif char == "\\":
            index += 1
        elif state == ScanState.IN_SIMPLE:
            # xx'xx stays a single token, as does xx"xx
            if char == " ":
                args.append(_token(typed[start:index], prefix, ""))
                state = ScanState.OUTSIDE
                start = index
                prefix = ""
        elif state == ScanState.IN_SINGLE_QUOTE and char == "'":
            args.append(_token(typed[start:index], prefix, char))
            state = ScanState.OUTSIDE
            start = index + 1
            prefix = ""
        elif state == ScanState.IN_DOUBLE_QUOTE and char == '"':
            args.append(_token(typed[start:index], prefix, char))
            state = ScanState.OUTSIDE
            start = index + 1
            prefix = ""
        index += 1

    if state == ScanState.OUTSIDE:
        if start != len(typed):
            trailing = typed[start:]
            if args:
                args[-1].suffix += trailing
            else:
                args.append(Argument("", trailing, ""))
    else:
        args.append(_token(typed[start:], prefix, ""))

    return args


def split_inline_values(args: list[Argument]) -> list[Argument]:
    """
    Split unquoted `--flag=value` tokens into a name token and a value token.

    The name token keeps the original prefix and takes `=` as its suffix, the
    value token carries the original suffix, so the input still reconstructs
    exactly.
    """
    result: list[Argument] = []
    for arg in args:
        quoted = bool(arg.prefix) and arg.prefix[-1] in "'\""
        match = None if quoted else _INLINE_VALUE_PATTERN.match(arg.raw)
        if match is None:
            result.append(arg)
            continue
        result.append(_token(match.group(1), arg.prefix, "="))
        result.append(_token(match.group(2), "", arg.suffix))
    return result
