import unittest

from toyscript import ast
from toyscript.lang.error import (DivisionByZero, FunctionNotFound, MainNotFound, MissingArgument, MissingElseClause,
                                  VariableNotFound)
from toyscript.lang.evaluator import Interpreter
from toyscript.lang.lexical import parse_entries, parse_line, parse_program


class InterpreterTestCase(unittest.TestCase):

    def setUp(self):
        self.printed = []
        self.interpreter = Interpreter(output=self.printed.append)

    def interpret(self, source):
        """Loads definitions and evaluates statements in source, in order. Returns the last statement's value."""
        value = None
        for entry in parse_entries(source):
            if isinstance(entry, ast.TopLevel):
                self.interpreter.load(ast.program(entry))
            else:
                value = self.interpreter.interpret(entry)
        return value

    def run_program(self, source):
        return self.interpreter.call_main(parse_program(source)[1])


class ExpressionTestCase(InterpreterTestCase):

    def test_integer_literal(self):
        for value in [0, 42, -42, 2 ** 63 - 1, -2 ** 63]:
            self.assertEqual(value, self.interpreter.interpret(ast.integer(value)), value)

    def test_arithmetic(self):
        cases = {
            "10 + 20;": 30,
            "30 - 20;": 10,
            "10 * 20;": 200,
            "200 / 20;": 10,
            "2 + 3 + 4;": 9,
            "2 * 3 * (4 + 5);": 54,
            "10 - 2 - 3;": 5,
            "1 + 2 * 3;": 7,
            "7 / 2;": 3,
            "-7 / 2;": -3,
            "7 / -2;": -3,
            "-7 / -2;": 3,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, self.interpret(case), case)

    def test_overflow_wraps(self):
        cases = {
            "9223372036854775807 + 1;": -2 ** 63,
            "-9223372036854775808 - 1;": 2 ** 63 - 1,
            "-9223372036854775808 / -1;": -2 ** 63,
            "4294967296 * 4294967296;": 0,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, self.interpret(case), case)

    def test_comparison(self):
        cases = {
            "1 < 2;": 1,
            "2 < 1;": 0,
            "2 <= 2;": 1,
            "3 > 2;": 1,
            "2 >= 3;": 0,
            "2 + 2 == 4;": 1,
            "2 + 2 != 4;": 0,
            "1 < 2 == 1;": 1,
            "3 > 2 > 1;": 0,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, self.interpret(case), case)

    def test_division_by_zero(self):
        self.assertRaises(DivisionByZero, self.interpret, "1 / 0;")
        self.assertRaises(DivisionByZero, self.interpret, "1 / (2 - 2);")

    def test_left_operand_first(self):
        self.interpret("define show(x) { println(x); x; }")
        self.assertEqual(-1, self.interpret("show(1) - show(2);"))
        self.assertEqual([1, 2], self.printed)


class StatementTestCase(InterpreterTestCase):

    def test_assignment(self):
        self.assertEqual(42, self.interpret("answer = 42;"))
        self.assertEqual(42, self.interpret("answer;"))
        self.assertEqual(43, self.interpret("answer = answer + 1;"))
        self.assertEqual(43, self.interpreter.globals["answer"])

    def test_variable_not_found(self):
        with self.assertRaises(VariableNotFound) as context:
            self.interpret("missing;")
        self.assertEqual("missing", context.exception.name)

    def test_block(self):
        self.assertEqual(3, self.interpret("{1; 2; 3;}"))
        self.assertEqual(0, self.interpret("{}"))
        self.assertEqual(0, self.interpret("{ {} }"))

    def test_while(self):
        self.interpret("answer = 0; i = 1; while (i <= 5) { answer = answer + i; i = i + 1; }")
        self.assertEqual(15, self.interpret("answer;"))

        self.assertEqual(1, self.interpret("while (0) 42;"))
        self.assertEqual(1, self.interpret("i = 3; while (i) i = i - 1;"))

    def test_if(self):
        self.assertEqual(42, self.interpret("if (2 + 2 == 4) { 42; }"))
        self.assertEqual(21, self.interpret("if (2 + 2 != 4) { 42; } else { 21; }"))
        self.assertEqual(42, self.interpret("if (-5) 42; else 21;"))

    def test_if_without_else(self):
        self.assertEqual(Interpreter.SENTINEL, self.interpret("if (0) { 42; }"))

        self.interpreter.strict_if = True
        self.assertRaises(MissingElseClause, self.interpret, "if (0) { 42; }")
        self.assertEqual(42, self.interpret("if (1) { 42; }"))

    def test_println(self):
        self.assertEqual(1, self.interpret("println(6 * 7);"))
        self.interpret("x = 2; println(x); println(x + 1);")
        self.assertEqual([42, 2, 3], self.printed)


class FunctionTestCase(InterpreterTestCase):

    def test_factorial(self):
        source = """
            define factorial(n) {
                if (n < 2) {
                    1;
                } else {
                    n * factorial(n - 1);
                }
            }
            define main() {
                factorial(5);
            }
        """
        self.assertEqual(120, self.run_program(source))
        self.assertNotIn("n", self.interpreter.globals)
        self.assertEqual([], self.interpreter.frames)

    def test_call_frame_isolation(self):
        self.interpret("define get_n() { n; } define set_n(x) { n = x; n; }")
        self.interpret("n = 1;")

        self.assertEqual(5, self.interpret("set_n(5);"))
        self.assertEqual(1, self.interpret("n;"))  # global left untouched
        self.assertEqual(1, self.interpret("get_n();"))  # callee reads globals

        source = """
            define peek() { local; }
            define main() { local = 3; peek(); }
        """
        self.assertRaises(VariableNotFound, self.run_program, source)

    def test_parameter_shadows_global(self):
        source = """
            global n = 100;
            define twice(n) { n * 2; }
            define main() { twice(4) + n; }
        """
        self.assertEqual(108, self.run_program(source))
        self.assertEqual(100, self.interpreter.globals["n"])

    def test_arguments_evaluated_in_caller(self):
        source = """
            define add(a, b) { a + b; }
            define main() { a = 10; b = 20; add(b, a + 1); }
        """
        self.assertEqual(31, self.run_program(source))

    def test_function_not_found(self):
        with self.assertRaises(FunctionNotFound) as context:
            self.interpret("nope(1);")
        self.assertEqual("nope", context.exception.name)

    def test_missing_argument(self):
        self.interpret("define add(a, b) { a + b; } define show(x) { println(x); x; }")

        with self.assertRaises(MissingArgument) as context:
            self.interpret("add(show(1));")
        self.assertEqual("b", context.exception.name)
        self.assertEqual([], self.printed)  # no argument was evaluated

    def test_extra_arguments_ignored(self):
        self.interpret("define one(a) { a; } define show(x) { println(x); x; }")
        self.assertEqual(7, self.interpret("one(7, show(8), missing);"))
        self.assertEqual([], self.printed)

    def test_frames_restored_after_fault(self):
        self.interpret("define boom(x) { y = x; x / 0; } define outer(z) { boom(z); }")
        self.assertRaises(DivisionByZero, self.interpret, "outer(3);")
        self.assertEqual([], self.interpreter.frames)
        self.assertRaises(VariableNotFound, self.interpret, "y;")


class ProgramTestCase(InterpreterTestCase):

    def test_globals_in_order(self):
        source = """
            define square(x) { x * x; }
            global a = 3;
            global b = square(a) + 1;
            define main() { a + b; }
        """
        self.assertEqual(13, self.run_program(source))
        self.assertEqual({"a": 3, "b": 10}, self.interpreter.globals)

    def test_global_before_definition(self):
        source = """
            global b = a + 1;
            global a = 1;
            define main() { b; }
        """
        self.assertRaises(VariableNotFound, self.run_program, source)

    def test_main_not_found(self):
        self.assertRaises(MainNotFound, self.run_program, "define notmain() { 1; }")
        self.assertRaises(MainNotFound, self.run_program, "")

    def test_main_with_println(self):
        self.assertEqual(1, self.run_program("define main() { println(1 + 1); }"))
        self.assertEqual([2], self.printed)

    def test_reset(self):
        self.run_program("global g = 1; define main() { g; }")
        self.interpreter.reset()
        self.assertEqual({}, self.interpreter.functions)
        self.assertRaises(VariableNotFound, self.interpret, "g;")

    def test_aliases(self):
        self.assertEqual(5, self.interpreter.evaluate(parse_line("2 + 3;")))
        self.assertEqual(5, self.interpreter.run(parse_program("define main() { 5; }")[1]))


if __name__ == '__main__':
    unittest.main()
