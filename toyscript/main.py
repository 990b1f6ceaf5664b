"""Runs toyscript programs, or starts command-line mode when no file is given. Also uses the error handling context
manager. Called from the toys executable script.
"""

import argparse
import logging
import sys

from toyscript.lang.error import ErrorHandler
from toyscript.lang.session import Session
from toyscript.lang.shell import Shell


def main(argv=None):
    """Runs the toyscript interpreter. Called from the toys executable script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="toys")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--strict-if", action="store_true",
                            help="fail when an if without else has a false condition, instead of evaluating to 1")
        parser.add_argument("--print-result", action="store_true", help="print the value returned by main")
        parser.add_argument("--recursion-limit", type=int, help="raise python's recursion limit for deep programs")
        parser.add_argument("-v", "--verbose", action="store_true", help="log definitions and function calls")
        args = parser.parse_args(argv)

        logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                            format="%(name)s: %(message)s")
        if args.recursion_limit is not None:
            sys.setrecursionlimit(args.recursion_limit)

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, strict_if=args.strict_if)
            result = sess.run()

            if args.print_result:
                print(result)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, strict_if=args.strict_if)).cmdloop()
