"""Session control for toyscript. Drives the grammar and the evaluator, either in file interpretation mode (parse a
whole program, then call its main function) or in command-line mode (definitions and statements arrive line by line).
"""

from toyscript import ast
from toyscript.lang.error import GenericException, ParseError
from toyscript.lang.evaluator import Interpreter
from toyscript.lang.lexical import parse_entries, parse_program


class Session:
    """Governs a toyscript session, with a single Interpreter whose environments live as long as the session."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, strict_if=False, output=print):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.interpreter = Interpreter(output, strict_if)
        self.program = ast.program()  # program parsed from path (file mode only)
        self.to_exec = []             # list of (line_num, line, statement) waiting to be run (command-line mode only)
        self.results = []             # values of statements that have been run

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            __, self.program = self.parse(parse_program, source)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line):
        """Preprocesses a line from the command-line. Returns the line without trailing whitespace and whether or not
        it needs a continuation, which is the case while brackets or parentheses are left open.
        """
        line = line.rstrip()
        return line, line.count("{") > line.count("}") or line.count("(") > line.count(")")

    def parse(self, parser, source, line_num=1):
        """Returns parser(source). On a ParseError, the offending line is registered with the error handler before the
        error propagates. line_num is the line number source starts at.
        """
        try:
            return parser(source)
        except ParseError as error:
            offset, line, __ = error.locate(source)
            self.error_handler.register_line(self.path, line, line_num + offset - 1)
            raise

    def add(self, line, line_num):
        """Adds a command-line entry to the session. Definitions take effect immediately, while statements are delayed
        until run is called.
        """
        self.error_handler.register_line(self.path, line, line_num)  # in case error is raised

        for entry in self.parse(parse_entries, line, line_num):
            if isinstance(entry, ast.TopLevel):
                self.interpreter.load(ast.program(entry))
            else:
                self.to_exec.append((line_num, line, entry))

        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """In file mode, calls the program's main function and returns its value. In command-line mode, evaluates the
        statements added since the last run and appends their values to self.results. Will raise any errors that are
        encountered, in which case no pending statement is run afterwards.
        """
        if not self.cmd_line:
            return self.interpreter.call_main(self.program)

        try:
            for line_num, line, stmt in self.to_exec:
                self.error_handler.register_line(self.path, line, line_num)
                self.results.append(self.interpreter.interpret(stmt))
                self.error_handler.remove_line(self.path)
        finally:
            self.to_exec = []

    def pop(self):
        """Removes and returns the oldest result."""
        return self.results.pop(0)
