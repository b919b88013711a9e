"""Declaration and assignment recognition."""

import unittest

from cppscan.core.declarations import (
    DeclarationRecognizer, control_body, mask_literals, split_statements, split_top_level,
)
from cppscan.core.symbols import SymbolTable, VariableInfo


def apply(line, symbols=None, recognizer=None):
    symbols = symbols if symbols is not None else SymbolTable()
    recognizer = recognizer or DeclarationRecognizer()
    messages = [str(d) for d in recognizer.apply(line, 1, symbols)]
    return messages, symbols


class HelperTests(unittest.TestCase):
    def test_mask_literals_keeps_length(self) -> None:
        line = 'string s = "a;b";'
        masked = mask_literals(line)
        self.assertEqual(len(masked), len(line))
        self.assertNotIn(";b", masked)

    def test_split_top_level_ignores_nested_separators(self) -> None:
        self.assertEqual(split_top_level("a = f(1, 2), b", ","), ["a = f(1, 2)", " b"])
        self.assertEqual(split_top_level('c = ",", d', ","), ['c = ","', " d"])

    def test_split_statements(self) -> None:
        self.assertEqual(split_statements("a = 1; b = 2; c"),
                         [("a = 1", True), ("b = 2", True), ("c", False)])

    def test_control_body(self) -> None:
        self.assertEqual(control_body("else if (f(a) > 1) b = 1"), "b = 1")
        self.assertEqual(control_body("while (n) if (m) n = 0"), "n = 0")
        self.assertEqual(control_body("else x = 3"), "x = 3")
        self.assertEqual(control_body("if (a) {"), "{")
        self.assertEqual(control_body("if (f(a) > 1"), "")
        self.assertEqual(control_body("elsewhere = 1"), "elsewhere = 1")


class DeclarationTests(unittest.TestCase):
    def test_single_declaration(self) -> None:
        messages, symbols = apply("int x = 5;")
        self.assertEqual(messages, [])
        self.assertEqual(symbols.lookup("x"), VariableInfo("int", True, 1))

    def test_uninitialized_declaration(self) -> None:
        _, symbols = apply("double ratio;")
        self.assertFalse(symbols.lookup("ratio").initialized)

    def test_qualifiers_and_multiword_types(self) -> None:
        _, symbols = apply("const unsigned   int limit = 10;")
        self.assertEqual(symbols.lookup("limit").type, "unsigned int")

    def test_multiple_items_each_tracked(self) -> None:
        messages, symbols = apply("int a = 1, b, c = 'x';")
        self.assertEqual(messages,
                         ["Line 1: Invalid initialization value for variable 'c' of type int."])
        self.assertTrue(symbols.lookup("a").initialized)
        self.assertFalse(symbols.lookup("b").initialized)

    def test_invalid_single_initializer(self) -> None:
        messages, _ = apply('int x = "text";')
        self.assertEqual(messages, ["Line 1: Invalid initialization value for type int."])

    def test_empty_initializer_not_registered(self) -> None:
        messages, symbols = apply("int x = ;")
        self.assertEqual(messages, [])
        self.assertNotIn("x", symbols)

    def test_missing_variable_name(self) -> None:
        messages, symbols = apply("int;")
        self.assertEqual(messages, ["Line 1: Error - Declaration of 'int' without variable name."])
        self.assertEqual(len(symbols), 0)

    def test_name_validation(self) -> None:
        self.assertEqual(apply("int while = 1;")[0],
                         ["Line 1: Cannot use reserved keyword 'while' as variable name."])
        self.assertEqual(apply("int 2x = 1;")[0],
                         ["Line 1: Variable name '2x' must begin with a letter or underscore."])
        self.assertEqual(
            apply("int my-var = 1;")[0],
            ["Line 1: Variable name 'my-var' contains invalid characters. "
             "Only letters, digits, and underscores are allowed."])

    def test_function_prototype_is_not_a_declaration(self) -> None:
        messages, symbols = apply("int add(int a, int b);")
        self.assertEqual(messages, [])
        self.assertEqual(len(symbols), 0)

    def test_for_init_clause_declares(self) -> None:
        _, symbols = apply("for (int i = 0; i < 3; i++) {")
        self.assertTrue(symbols.lookup("i").initialized)

    def test_redeclaration_silent_by_default(self) -> None:
        symbols = SymbolTable()
        apply("int x = 1;", symbols)
        messages, _ = apply("int x = 2;", symbols)
        self.assertEqual(messages, [])

    def test_redeclaration_reported_when_enabled(self) -> None:
        symbols = SymbolTable()
        recognizer = DeclarationRecognizer(report_redeclarations=True)
        apply("int x = 1;", symbols, recognizer)
        messages, _ = apply("int x = 2;", symbols, recognizer)
        self.assertEqual(messages, ["Line 1: Variable 'x' is already declared."])

    def test_unterminated_statement_not_registered(self) -> None:
        _, symbols = apply("int x = 5")
        self.assertNotIn("x", symbols)

    def test_names_declared_on(self) -> None:
        recognizer = DeclarationRecognizer()
        self.assertEqual(recognizer.names_declared_on("int a, b = 2;"), {"a", "b"})
        self.assertEqual(recognizer.names_declared_on("a = 2;"), set())


class AssignmentTests(unittest.TestCase):
    def test_assignment_before_declaration(self) -> None:
        messages, symbols = apply("y = 5;")
        self.assertEqual(messages, ["Line 1: Variable 'y' used before declaration."])
        self.assertNotIn("y", symbols)

    def test_assignment_initializes(self) -> None:
        symbols = SymbolTable()
        symbols.declare("x", VariableInfo("int"))
        messages, _ = apply("x = 3;", symbols)
        self.assertEqual(messages, [])
        self.assertTrue(symbols.lookup("x").initialized)

    def test_compound_assignment_before_initialization(self) -> None:
        symbols = SymbolTable()
        symbols.declare("x", VariableInfo("int"))
        messages, _ = apply("x += 1;", symbols)
        self.assertEqual(messages, ["Line 1: Variable 'x' used in += before initialization."])
        self.assertTrue(symbols.lookup("x").initialized)

    def test_invalid_assigned_value(self) -> None:
        symbols = SymbolTable()
        symbols.declare("flag", VariableInfo("bool"))
        messages, _ = apply('flag = "no";', symbols)
        self.assertEqual(messages, ["Line 1: Invalid value for variable of type bool."])

    def test_assignment_after_control_header(self) -> None:
        symbols = SymbolTable()
        symbols.declare("y", VariableInfo("int", True))
        symbols.declare("z", VariableInfo("int"))
        symbols.declare("total", VariableInfo("int"))
        messages, _ = apply("if (y) z = 2;", symbols)
        self.assertEqual(messages, [])
        self.assertTrue(symbols.lookup("z").initialized)

        messages, _ = apply("for (int i = 0; i < 3; i++) total = i;", symbols)
        self.assertEqual(messages, [])
        self.assertTrue(symbols.lookup("i").initialized)
        self.assertTrue(symbols.lookup("total").initialized)

    def test_assignment_targets(self) -> None:
        recognizer = DeclarationRecognizer()
        self.assertEqual(recognizer.assignment_targets("a = 1; b <<= 2;"), {"a", "b"})
        self.assertEqual(recognizer.assignment_targets("a == 1;"), set())


if __name__ == "__main__":
    unittest.main()
