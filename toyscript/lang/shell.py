"""Handles interactive/command-line mode for the toyscript interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """toyscript interpreter shell."""
    intro = "toyscript interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary toyscript definitions and statements."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(self._tmp_line + line)

            if add_to_prev:
                self._tmp_line = line + "\n"
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                self.sess.add(line, self.line_num)
                self.sess.run()

                while self.sess.results:
                    print(self.sess.pop())

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        if arg:
            return self.default(f"help {arg}")  # statement about a variable named help

        print("Welcome to the toyscript interpreter!\n\n"
              "toyscript is a small imperative language where every value is a 64-bit integer.\n"
              "Statements typed here are evaluated immediately and their values printed, and\n"
              "'define'/'global' definitions are remembered for the rest of the session.\n\n"
              "Try it out by typing 'define square(x) { x * x; }'. Next, try typing\n"
              "'square(7);'. This will call 'square' with 7, giving 49 as the result.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit("")

    def do_exit(self, arg):
        """Exits interpreter."""
        if arg:
            return self.default(f"exit {arg}")  # statement about a variable named exit
        return True
