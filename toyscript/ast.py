"""Abstract syntax tree for toyscript. Produced by the grammar in toyscript.pure/toyscript.lang and consumed by the
evaluator.

Every node is an immutable dataclass that exclusively owns its children (sequences are stored as tuples), so two trees
compare equal exactly when they were parsed from equivalent source. The builder functions at the bottom of this module
are shorthands for constructing trees by hand.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Operator(Enum):
    """Binary operators, valued by their source symbol."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    LESS_THAN = "<"
    LESS_OR_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_OR_EQUAL = ">="
    EQUAL = "=="
    NOT_EQUAL = "!="


class Expression:
    """Superclass of every expression node."""


@dataclass(frozen=True)
class Binary(Expression):
    operator: Operator
    lhs: Expression
    rhs: Expression


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int


@dataclass(frozen=True)
class Identifier(Expression):
    name: str


@dataclass(frozen=True)
class Assignment(Expression):
    name: str
    expression: Expression


@dataclass(frozen=True)
class Block(Expression):
    elements: Tuple[Expression, ...] = ()


@dataclass(frozen=True)
class While(Expression):
    condition: Expression
    body: Expression


@dataclass(frozen=True)
class If(Expression):
    condition: Expression
    then_clause: Expression
    else_clause: Optional[Expression] = None


@dataclass(frozen=True)
class FunctionCall(Expression):
    name: str
    args: Tuple[Expression, ...] = ()


@dataclass(frozen=True)
class PrintLn(Expression):
    expression: Expression


@dataclass(frozen=True)
class Function:
    """A named function. args holds the parameter names in declaration order."""
    name: str
    args: Tuple[str, ...]
    body: Expression


class TopLevel:
    """Superclass of the definitions a program is made of."""


@dataclass(frozen=True)
class FunctionDefinition(TopLevel):
    function: Function


@dataclass(frozen=True)
class GlobalVariableDefinition(TopLevel):
    name: str
    expression: Expression


@dataclass(frozen=True)
class Program:
    """Top-level definitions in source order: later globals may refer to earlier ones."""
    definitions: Tuple[TopLevel, ...] = ()


def binary(operator, lhs, rhs):
    return Binary(operator, lhs, rhs)


def add(lhs, rhs):
    return Binary(Operator.ADD, lhs, rhs)


def subtract(lhs, rhs):
    return Binary(Operator.SUBTRACT, lhs, rhs)


def multiply(lhs, rhs):
    return Binary(Operator.MULTIPLY, lhs, rhs)


def divide(lhs, rhs):
    return Binary(Operator.DIVIDE, lhs, rhs)


def less_than(lhs, rhs):
    return Binary(Operator.LESS_THAN, lhs, rhs)


def less_or_equal(lhs, rhs):
    return Binary(Operator.LESS_OR_EQUAL, lhs, rhs)


def greater_than(lhs, rhs):
    return Binary(Operator.GREATER_THAN, lhs, rhs)


def greater_or_equal(lhs, rhs):
    return Binary(Operator.GREATER_OR_EQUAL, lhs, rhs)


def equal(lhs, rhs):
    return Binary(Operator.EQUAL, lhs, rhs)


def not_equal(lhs, rhs):
    return Binary(Operator.NOT_EQUAL, lhs, rhs)


def integer(value):
    return IntegerLiteral(value)


def identifier(name):
    return Identifier(name)


def assignment(name, expression):
    return Assignment(name, expression)


def block(*elements):
    return Block(tuple(elements))


def while_(condition, body):
    return While(condition, body)


def if_(condition, then_clause, else_clause=None):
    return If(condition, then_clause, else_clause)


def call(name, *args):
    return FunctionCall(name, tuple(args))


def println(expression):
    return PrintLn(expression)


def define_function(name, args, body):
    return FunctionDefinition(Function(name, tuple(args), body))


def define_global(name, expression):
    return GlobalVariableDefinition(name, expression)


def program(*definitions):
    return Program(tuple(definitions))
