"""Expression grammar for toyscript. Expressions are the side-effect free core of the language: statements in
toyscript.lang.lexical are built on top of them.

```
<expression>    ::= <comparative>
<comparative>   ::= <additive> (("<=" | ">=" | "==" | "!=" | "<" | ">") <additive>)*
<additive>      ::= <multitive> (("+" | "-") <multitive>)*
<multitive>     ::= <primary> (("*" | "/") <primary>)*
<primary>       ::= "(" <expression> ")"
                  | <integer>
                  | <function_call>                           ; identifier followed by "("
                  | <identifier>
<function_call> ::= <identifier> "(" (<expression> ("," <expression>)*)? ")"
```

Every binary level associates to the left: `a - b - c` is `(a - b) - c`, and `a < b == c` is `(a < b) == c`. Two
character comparison operators are listed before their one character prefixes so that `<=` is never read as `<`.
"""

from toyscript import ast
from toyscript.lang.error import ParseError
from toyscript.pure import lexical


COMPARATIVE = {symbol: ast.Operator(symbol) for symbol in ["<=", ">=", "==", "!=", "<", ">"]}
ADDITIVE = {symbol: ast.Operator(symbol) for symbol in ["+", "-"]}
MULTITIVE = {symbol: ast.Operator(symbol) for symbol in ["*", "/"]}


def expression(text):
    """expression <- comparative"""
    return comparative(text)


def comparative(text):
    return _fold_left(additive, COMPARATIVE, text)


def additive(text):
    return _fold_left(multitive, ADDITIVE, text)


def multitive(text):
    return _fold_left(primary, MULTITIVE, text)


def _fold_left(operand, operators, text):
    """Parses operand (operator operand)* and folds the result into left-leaning Binary nodes. Stops before the first
    operator that is not followed by an operand at all. An operand that starts but is malformed is an error.
    """
    text, lhs = operand(text)

    while True:
        rest = lexical.skip_ws(text)
        symbol = next((symbol for symbol in operators if rest.startswith(symbol)), None)
        if symbol is None:
            return text, lhs

        rest = rest[len(symbol):]
        try:
            rest, rhs = operand(rest)
        except ParseError as error:
            if error.remaining != lexical.skip_ws(rest) or error.expected != "expression":
                raise
            return text, lhs
        text, lhs = rest, ast.binary(operators[symbol], lhs, rhs)


def integer(text):
    text, value = lexical.integer(text)
    return text, ast.integer(value)


def identifier(text):
    text, name = lexical.identifier(text)
    return text, ast.identifier(name)


def function_call(text):
    """function_call <- identifier "(" (expression ("," expression)*)? ")"

    Only one token of look-ahead is needed: if no "(" follows the identifier, this is not a call.
    """
    text, name = lexical.identifier(text)
    text, args = _arguments(lexical.skip_ws(text))
    return text, ast.call(name, *args)


_arguments = lexical.parentheses(lexical.separated_list0(lexical.ws(lexical.tag(",")), expression))


def _function_call_or_identifier(text):
    rest, __ = lexical.identifier(text)
    if lexical.skip_ws(rest).startswith("("):
        return function_call(text)  # committed: malformed arguments are an error, not an identifier
    return identifier(text)


_primary = lexical.alt(lexical.parentheses(expression), integer, _function_call_or_identifier)


def primary(text):
    """primary <- "(" expression ")" / integer / function_call / identifier"""
    text = lexical.skip_ws(text)
    try:
        return _primary(text)
    except ParseError as error:
        if error.remaining != text:
            raise
        if lexical.INTEGER.match(text):
            raise ParseError(text, "64-bit integer")
        raise ParseError(text, "expression")
