"""Tree-walking evaluator for toyscript.

All values are signed 64-bit integers: there is no boolean type, so comparisons give 1 or 0 and conditions are true
when nonzero. Arithmetic wraps around on overflow and division truncates toward zero.

Variables live in two places: a single global frame, and a stack of call frames. Each function call pushes a frame that
holds only its parameters, so a callee never sees its caller's bindings, only the globals. Assignments inside a call
bind in that call's frame and disappear when the call returns, even when the name is also a global. Outside of any call
(e.g. when statements are evaluated directly), assignments bind in the global frame.

Recursion in a toyscript program maps to Python recursion, so very deep programs end in RecursionError.
"""

import logging

from toyscript import ast
from toyscript.lang.error import (DivisionByZero, FunctionNotFound, MainNotFound, MissingArgument, MissingElseClause,
                                  VariableNotFound)

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


def wrap(value):
    """Wraps value into the signed 64-bit range, two's complement style."""
    return (value + 2 ** 63) % 2 ** 64 - 2 ** 63


def truncated_div(lhs, rhs):
    """Integer division rounding toward zero. Python's // rounds toward negative infinity."""
    quotient = abs(lhs) // abs(rhs)
    return quotient if (lhs < 0) == (rhs < 0) else -quotient


OPERATIONS = {
    ast.Operator.ADD: lambda lhs, rhs: lhs + rhs,
    ast.Operator.SUBTRACT: lambda lhs, rhs: lhs - rhs,
    ast.Operator.MULTIPLY: lambda lhs, rhs: lhs * rhs,
    ast.Operator.DIVIDE: truncated_div,
    ast.Operator.LESS_THAN: lambda lhs, rhs: int(lhs < rhs),
    ast.Operator.LESS_OR_EQUAL: lambda lhs, rhs: int(lhs <= rhs),
    ast.Operator.GREATER_THAN: lambda lhs, rhs: int(lhs > rhs),
    ast.Operator.GREATER_OR_EQUAL: lambda lhs, rhs: int(lhs >= rhs),
    ast.Operator.EQUAL: lambda lhs, rhs: int(lhs == rhs),
    ast.Operator.NOT_EQUAL: lambda lhs, rhs: int(lhs != rhs),
}


class Interpreter:
    """Evaluates expressions and runs programs against a function environment and a variable environment."""
    SENTINEL = 1     # value of while loops, println, and if without else whose condition is false
    EMPTY_BLOCK = 0  # value of {}

    def __init__(self, output=print, strict_if=False):
        """output is called with every value a println statement emits. If strict_if, an if statement whose condition
        is false and that has no else clause raises MissingElseClause instead of evaluating to SENTINEL.
        """
        self.output = output
        self.strict_if = strict_if

        self.functions = {}  # dict of name: ast.Function
        self.globals = {}    # dict of name: value
        self.frames = []     # stack of call frames, each a dict of name: value

    @property
    def variables(self):
        """The frame that assignments currently bind in."""
        return self.frames[-1] if self.frames else self.globals

    def reset(self):
        """Forgets every function and variable, as if newly constructed."""
        self.functions = {}
        self.globals = {}
        self.frames = []

    def interpret(self, expression):
        """Returns the value of expression. Raises an EvalFault on the first fault encountered."""
        if isinstance(expression, ast.Binary):
            lhs = self.interpret(expression.lhs)
            rhs = self.interpret(expression.rhs)

            if expression.operator is ast.Operator.DIVIDE and rhs == 0:
                raise DivisionByZero()
            return wrap(OPERATIONS[expression.operator](lhs, rhs))

        elif isinstance(expression, ast.IntegerLiteral):
            return expression.value

        elif isinstance(expression, ast.Identifier):
            return self.lookup(expression.name)

        elif isinstance(expression, ast.Assignment):
            value = self.interpret(expression.expression)
            self.variables[expression.name] = value
            return value

        elif isinstance(expression, ast.Block):
            value = Interpreter.EMPTY_BLOCK
            for element in expression.elements:
                value = self.interpret(element)
            return value

        elif isinstance(expression, ast.While):
            while self.interpret(expression.condition) != 0:
                self.interpret(expression.body)
            return Interpreter.SENTINEL

        elif isinstance(expression, ast.If):
            if self.interpret(expression.condition) != 0:
                return self.interpret(expression.then_clause)
            elif expression.else_clause is not None:
                return self.interpret(expression.else_clause)
            elif self.strict_if:
                raise MissingElseClause()
            return Interpreter.SENTINEL

        elif isinstance(expression, ast.FunctionCall):
            return self.call(expression.name, expression.args)

        elif isinstance(expression, ast.PrintLn):
            self.output(self.interpret(expression.expression))
            return Interpreter.SENTINEL

        raise TypeError(f"cannot interpret {expression!r}")

    evaluate = interpret

    def lookup(self, name):
        """Returns the value bound to name in the current call frame, falling back to the globals."""
        if self.frames and name in self.frames[-1]:
            return self.frames[-1][name]
        try:
            return self.globals[name]
        except KeyError:
            raise VariableNotFound(name)

    def call(self, name, args):
        """Calls function name with the argument expressions args, evaluated left to right in the caller's environment.
        Arguments beyond the function's parameters are ignored without being evaluated.
        """
        try:
            function = self.functions[name]
        except KeyError:
            raise FunctionNotFound(name)

        if len(args) < len(function.args):
            raise MissingArgument(function.args[len(args)])

        frame = {param: self.interpret(arg) for param, arg in zip(function.args, args)}
        return self._invoke(function, frame)

    def _invoke(self, function, frame):
        logger.debug("call %s with %s", function.name, frame)

        self.frames.append(frame)
        try:
            value = self.interpret(function.body)
        finally:
            self.frames.pop()  # the caller's view is restored even if the body faulted

        logger.debug("%s returned %d", function.name, value)
        return value

    def load(self, program):
        """Registers program's top-level definitions, in order. Globals are evaluated immediately, so they can refer to
        earlier globals and to functions defined before them.
        """
        for definition in program.definitions:
            if isinstance(definition, ast.FunctionDefinition):
                logger.debug("define %s(%s)", definition.function.name, ", ".join(definition.function.args))
                self.functions[definition.function.name] = definition.function

            elif isinstance(definition, ast.GlobalVariableDefinition):
                self.globals[definition.name] = self.interpret(definition.expression)
                logger.debug("global %s = %d", definition.name, self.globals[definition.name])

    def call_main(self, program):
        """Loads program and returns the value of calling its main function with no arguments."""
        self.load(program)

        try:
            main = self.functions["main"]
        except KeyError:
            raise MainNotFound()
        return self._invoke(main, {})

    run = call_main
