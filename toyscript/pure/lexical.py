"""Lexical primitives for toyscript, plus the handful of combinators the grammar is assembled from.

There is no separate tokenization pass: every parser is a plain function that takes the remaining source text and
returns a tuple of (rest, value), where rest is the text left unconsumed. A parser that cannot match raises ParseError
with the text it was given, so a failure always knows where it happened.

```
<identifier> ::= [A-Za-z_] [A-Za-z0-9_]*   ; reserved keywords are not identifiers
<integer>    ::= "-"? [0-9]+               ; must fit in a signed 64-bit integer
<whitespace> ::= [ \t\r\n]*                ; skipped at every grammar boundary
```
"""

import re

from toyscript.lang.error import ParseError


I64_MIN = -2 ** 63
I64_MAX = 2 ** 63 - 1

KEYWORDS = frozenset(["define", "global", "if", "else", "while", "println"])

IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
INTEGER = re.compile(r"-?[0-9]+")
WHITESPACE = re.compile(r"[ \t\r\n]*")


def skip_ws(text):
    """Returns text without leading whitespace."""
    return text[WHITESPACE.match(text).end():]


def identifier(text):
    """identifier <- [A-Za-z_] [A-Za-z0-9_]*"""
    match = IDENTIFIER.match(text)
    if not match or match.group() in KEYWORDS:
        raise ParseError(text, "identifier")
    return text[match.end():], match.group()


def integer(text):
    """integer <- "-"? [0-9]+"""
    match = INTEGER.match(text)
    if not match:
        raise ParseError(text, "integer")

    value = int(match.group())
    if not I64_MIN <= value <= I64_MAX:
        raise ParseError(text, "64-bit integer")
    return text[match.end():], value


def tag(literal):
    """Returns a parser that matches literal exactly."""

    def parse(text):
        if not text.startswith(literal):
            raise ParseError(text, f"'{literal}'")
        return text[len(literal):], literal

    return parse


def keyword(word):
    """Returns a parser that matches word only as a whole word, so 'iffy' is not 'if' followed by 'fy'."""

    def parse(text):
        match = IDENTIFIER.match(text)
        if not match or match.group() != word:
            raise ParseError(text, f"'{word}'")
        return text[match.end():], word

    return parse


def ws(inner):
    """Returns a parser that also consumes whitespace before and after inner."""

    def parse(text):
        rest, value = inner(skip_ws(text))
        return skip_ws(rest), value

    return parse


def alt(*parsers):
    """Returns a parser that tries parsers in order and returns the first success. If every alternative fails, the
    error that got furthest into the input is raised, which is usually the most helpful one.
    """

    def parse(text):
        furthest = None
        for parser in parsers:
            try:
                return parser(text)
            except ParseError as error:
                if furthest is None or len(error.remaining) < len(furthest.remaining):
                    furthest = error
        raise furthest

    return parse


def separated_list0(separator, inner):
    """Returns a parser for zero or more inner values separated by separator. Once a separator has been consumed, an
    inner value must follow.
    """

    def parse(text):
        try:
            text, value = inner(text)
        except ParseError:
            return text, []

        values = [value]
        while True:
            try:
                rest, __ = separator(text)
            except ParseError:
                return text, values
            text, value = inner(rest)
            values.append(value)

    return parse


def parentheses(inner):
    """Returns a parser for "(" inner ")", with whitespace allowed inside the parentheses."""
    return _delimited("(", inner, ")")


def curly_brackets(inner):
    """Returns a parser for "{" inner "}", with whitespace allowed inside the brackets."""
    return _delimited("{", inner, "}")


def _delimited(opening, inner, closing):
    opening, inner, closing = tag(opening), ws(inner), tag(closing)

    def parse(text):
        text, __ = opening(text)
        text, value = inner(text)
        text, __ = closing(text)
        return text, value

    return parse
