"""Lexical analysis for the toyscript language: statements, definitions and whole programs, built on top of the
expression grammar in toyscript.pure.expression.

All grammar can be loosely defined as follows:

```
<line>                ::= <println> | <if> | <while> | <block> | <assignment> | <expression_line>
                                              ; alternatives are tried in this order
<println>             ::= "println" "(" <expression> ")" ";"
<if>                  ::= "if" "(" <expression> ")" <line> ("else" <line>)?
<while>               ::= "while" "(" <expression> ")" <line>
<block>               ::= "{" <line>* "}"
<assignment>          ::= <identifier> "=" <expression> ";"
<expression_line>     ::= <expression> ";"

<function_definition> ::= "define" <identifier> "(" (<identifier> ("," <identifier>)*)? ")" <block>
<global_definition>   ::= "global" <identifier> "=" <expression> ";"?
<program>             ::= (<function_definition> | <global_definition>)*
```

Whitespace is trimmed at every statement boundary. Parsers never recover from errors: the first failure propagates up
to the nearest alternative, and from there to the caller.
"""

from toyscript import ast
from toyscript.lang.error import ParseError
from toyscript.pure import lexical
from toyscript.pure.expression import expression


_semicolon = lexical.ws(lexical.tag(";"))
_parenthesized = lexical.ws(lexical.parentheses(expression))


def line(text):
    """line <- println / if / while / block / assignment / expression_line"""
    text = lexical.skip_ws(text)
    text, stmt = _line(text)
    return lexical.skip_ws(text), stmt


def println(text):
    """println <- "println" "(" expression ")" ";" """
    text, __ = lexical.keyword("println")(text)
    text, inner = _parenthesized(text)
    text, __ = _semicolon(text)
    return text, ast.println(inner)


def if_(text):
    """if <- "if" "(" expression ")" line ("else" line)?"""
    text, __ = lexical.keyword("if")(text)
    text, condition = _parenthesized(text)
    text, then_clause = line(text)

    try:
        rest, __ = lexical.keyword("else")(text)
    except ParseError:
        return text, ast.if_(condition, then_clause)

    text, else_clause = line(rest)
    return text, ast.if_(condition, then_clause, else_clause)


def while_(text):
    """while <- "while" "(" expression ")" line"""
    text, __ = lexical.keyword("while")(text)
    text, condition = _parenthesized(text)
    text, body = line(text)
    return text, ast.while_(condition, body)


def block(text):
    """block <- "{" line* "}" """
    text, elements = _block(text)
    return text, ast.block(*elements)


def _lines(text):
    elements = []
    while text and not text.startswith("}"):
        text, element = line(text)
        elements.append(element)
    return text, elements


_block = lexical.curly_brackets(_lines)


def assignment(text):
    """assignment <- identifier "=" expression ";"

    The "=" must not be the start of "==", which belongs to an expression line.
    """
    text, name = lexical.identifier(text)
    text = lexical.skip_ws(text)
    if not text.startswith("=") or text.startswith("=="):
        raise ParseError(text, "'='")

    text, value = expression(text[1:])
    text, __ = _semicolon(text)
    return text, ast.assignment(name, value)


def expression_line(text):
    """expression_line <- expression ";" """
    text, value = expression(text)
    text, __ = _semicolon(text)
    return text, value


_line = lexical.alt(println, if_, while_, block, assignment, expression_line)


def function_definition(text):
    """function_definition <- "define" identifier "(" (identifier ("," identifier)*)? ")" block"""
    text, __ = lexical.keyword("define")(text)
    text, name = lexical.ws(lexical.identifier)(text)

    params_text = text
    text, params = _parameters(text)
    for idx, param in enumerate(params):
        if param in params[:idx]:
            raise ParseError(params_text, f"unique parameter names (duplicate '{param}')")

    text, body = lexical.ws(block)(text)
    return text, ast.define_function(name, params, body)


_parameters = lexical.parentheses(lexical.separated_list0(lexical.ws(lexical.tag(",")), lexical.identifier))


def global_definition(text):
    """global_definition <- "global" identifier "=" expression ";"?"""
    text, __ = lexical.keyword("global")(text)
    text, name = lexical.ws(lexical.identifier)(text)
    text, __ = lexical.tag("=")(text)
    text, value = expression(text)

    text = lexical.skip_ws(text)
    if text.startswith(";"):
        text = text[1:]
    return text, ast.define_global(name, value)


_top_level = lexical.alt(function_definition, global_definition)


def top_level(text):
    """top_level <- function_definition / global_definition"""
    text = lexical.skip_ws(text)
    text, definition = _top_level(text)
    return lexical.skip_ws(text), definition


def parse_program(text):
    """program <- top_level* EOF

    Returns (remaining, Program). The whole of text is consumed, so remaining is always empty.
    """
    definitions = []
    text = lexical.skip_ws(text)
    while text:
        text, definition = top_level(text)
        definitions.append(definition)
    return text, ast.program(*definitions)


def parse_line(text):
    """Parses text as exactly one statement, surrounded by optional whitespace."""
    text, stmt = line(text)
    if text:
        raise ParseError(text, "end of input")
    return stmt


_entry = lexical.alt(top_level, line)


def parse_entries(text):
    """Parses text as any number of top-level definitions and statements, in order. Used by interactive mode, where
    definitions and statements can be mixed freely.
    """
    entries = []
    text = lexical.skip_ws(text)
    while text:
        text, entry = _entry(text)
        entries.append(entry)
    return entries
