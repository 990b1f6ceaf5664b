"""Error handling for toyscript. Only GenericExceptions should be encountered during running: if another type of error
is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

There are two classes of language errors: ParseErrors, raised while source text is turned into a syntax tree, and
EvalFaults, raised while a syntax tree is evaluated. Both abort the current run immediately.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error message so that it can be used to throw a toyscript error."""

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException."""
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)


class ParseError(GenericException):
    """Raised when no grammar alternative matches. remaining is the unconsumed input at the point of failure."""

    def __init__(self, remaining, expected):
        self.remaining = remaining
        self.expected = expected

        expected = expected.replace("{", "{{").replace("}", "}}")  # msg is a format string
        snippet = remaining.split("\n", 1)[0].strip()[:20]
        if snippet:
            super().__init__(f"expected {expected}, found '{{}}'", snippet, end=1)
        else:
            super().__init__(f"expected {expected}, found end of input", diagnosis=False)

    def locate(self, source):
        """Returns (line_num, line, col) of the failure in source and points the diagnosis at it. Assumes remaining is
        a suffix of source.
        """
        offset = len(source) - len(self.remaining)
        line_start = source.rfind("\n", 0, offset) + 1
        line_end = source.find("\n", offset)
        if line_end == -1:
            line_end = len(source)

        line = source[line_start:line_end].rstrip()
        col = offset - line_start

        if col < len(line):
            self.expr = line
            self.start = col
            self.end = col + 1
        return source.count("\n", 0, offset) + 1, line, col


class EvalFault(GenericException):
    """Superclass of all runtime faults. Faults carry no source position, so no diagnosis is displayed."""

    def __init__(self, msg, exprs=None):
        super().__init__(msg, exprs, diagnosis=False)


class VariableNotFound(EvalFault):

    def __init__(self, name):
        self.name = name
        super().__init__("variable '{}' is not defined", name)


class FunctionNotFound(EvalFault):

    def __init__(self, name):
        self.name = name
        super().__init__("function '{}' is not defined", name)


class MissingArgument(EvalFault):

    def __init__(self, name):
        self.name = name
        super().__init__("missing argument for parameter '{}'", name)


class DivisionByZero(EvalFault):

    def __init__(self):
        super().__init__("division by zero")


class MissingElseClause(EvalFault):

    def __init__(self):
        super().__init__("condition of 'if' is false and there is no 'else' clause")


class MainNotFound(EvalFault):

    def __init__(self):
        super().__init__("no function named '{}' is defined", "main")


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom toyscript errors."""
    ERROR = "red"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error):
        """Returns offending part of error.expr highlighted and bolded."""
        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        for file in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(file)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded (try --recursion-limit)"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
