"""End-to-end runs of the analysis pipeline."""

import os
import tempfile
import unittest
from unittest import mock

from cppscan import AnalyzerConfig, SourceAnalyzer, SourceReadError, analyze, analyze_file
from cppscan.core.diagnostics import DiagnosticLevel, DiagnosticOrigin
from cppscan.core.tokens import TokenCategory

CLEAN_PROGRAM = """\
int main() {
    int x = 5;
    int y;
    y = x + 1;
    if (x > y) {
        x = 2;
    } else {
        x = 3;
    }
    return 0;
}
"""


class BasicPropertyTests(unittest.TestCase):
    def test_declaration_tokens(self) -> None:
        result = analyze("int x = 5;")
        self.assertEqual(
            [(t.category, t.lexeme, t.line) for t in result.tokens],
            [
                (TokenCategory.DECLARATION, "int", 1),
                (TokenCategory.IDENTIFIER, "x", 1),
                (TokenCategory.ASSIGNMENT_OPERATOR, "=", 1),
                (TokenCategory.NUMBER, "5", 1),
                (TokenCategory.SEPARATOR, ";", 1),
            ],
        )

    def test_initialized_declaration_is_clean(self) -> None:
        result = analyze("int x = 5;\n")
        info = result.symbols.lookup("x")
        self.assertEqual((info.type, info.initialized), ("int", True))
        self.assertEqual(result.diagnostics, [])
        self.assertTrue(result.succeeded)

    def test_missing_semicolon(self) -> None:
        result = analyze("int x = 5\n")
        self.assertTrue(any("Line 1" in line and "Missing semicolon" in line
                            for line in result.diagnostic_report.splitlines()))

    def test_unterminated_comment_aborts(self) -> None:
        result = analyze("/* never closed")
        self.assertTrue(result.aborted)
        self.assertEqual(len(result.diagnostics), 1)
        self.assertIn("Unterminated multi-line comment", str(result.diagnostics[0]))
        self.assertEqual(result.tokens, [])
        self.assertEqual(len(result.symbols), 0)

    def test_abort_discards_earlier_comment_errors(self) -> None:
        result = analyze("/* a /* b */\nint x = 1;\n/* open")
        self.assertEqual([str(d) for d in result.diagnostics],
                         ["Error: Unterminated multi-line comment starting at line 3"])

    def test_assignment_before_declaration(self) -> None:
        result = analyze("y = 5;\n")
        self.assertIn("Line 1: Variable 'y' used before declaration.", result.diagnostic_report)

    def test_uninitialized_declaration_warns_once(self) -> None:
        result = analyze("int x;\n")
        self.assertEqual(len(result.diagnostics), 1)
        warning = result.diagnostics[0]
        self.assertEqual(warning.level, DiagnosticLevel.WARNING)
        self.assertIn("'x'", warning.message)
        self.assertEqual(str(warning), "Warning: Variable 'x' is declared but never initialized.")
        self.assertFalse(result.has_errors)

    def test_empty_initializer_reported_once(self) -> None:
        result = analyze("int x = ;\n")
        self.assertEqual(
            [str(d) for d in result.diagnostics],
            ["Line 1: Syntax error - empty initialization or assignment (missing right-hand side)."])

    def test_runs_are_idempotent(self) -> None:
        source = "int a = 1;\nint b;\nb = a +;\nint main() {\n  int c;\n  c++;\n}\n"
        first, second = analyze(source), analyze(source)
        self.assertEqual(first.token_report, second.token_report)
        self.assertEqual(first.symbol_report, second.symbol_report)
        self.assertEqual(first.diagnostic_report, second.diagnostic_report)

    def test_nested_comment_reported_and_run_continues(self) -> None:
        result = analyze("/* a /* b */\nint x = 1;\n")
        self.assertEqual(result.diagnostic_report,
                         "Line 1: Error - Nested comments are not allowed in C++.\n")
        self.assertIn("x", result.symbols)


class MainStructureTests(unittest.TestCase):
    def test_clean_program(self) -> None:
        result = analyze(CLEAN_PROGRAM)
        self.assertEqual(result.diagnostic_report, "")

    def test_duplicate_main(self) -> None:
        source = "int main() {\n    return 0;\n}\nint main() {\n    return 0;\n}\n"
        result = analyze(source)
        self.assertEqual(
            [str(d) for d in result.diagnostics],
            ["Error: Multiple main functions detected. "
             "A C++ program can have only one main function."])

    def test_missing_main_only_when_required(self) -> None:
        config = AnalyzerConfig()
        config.require_main = True
        result = analyze("int x = 1;\n", config)
        self.assertEqual(result.diagnostic_report, "Error: No main() function found.\n")
        self.assertEqual(analyze("int x = 1;\n").diagnostic_report, "")

    def test_missing_opening_brace(self) -> None:
        result = analyze("int main()\nreturn 0;\n")
        self.assertIn("Error: Missing opening brace '{' for main function.", result.diagnostic_report)

    def test_missing_closing_brace(self) -> None:
        result = analyze("int main() {\n    if (1 > 0) {\n        return 0;\n}\n")
        self.assertIn("Error: Missing closing brace '}' for main function.", result.diagnostic_report)

    def test_malformed_main(self) -> None:
        result = analyze("main {\n}\n")
        self.assertIn("'main' keyword found but not properly declared as a function.",
                      result.diagnostic_report)
        result = analyze("int main( {\n}\n")
        self.assertIn("Invalid main function syntax.", result.diagnostic_report)

    def test_main_local_never_initialized(self) -> None:
        result = analyze("int main() {\n    int count;\n    return 0;\n}\n")
        self.assertEqual(
            result.diagnostic_report,
            "Main function line 2: Warning - Variable 'count' is declared in main "
            "but never initialized.\n")
        self.assertEqual(result.diagnostics[0].origin, DiagnosticOrigin.MAIN)

    def test_main_body_rules_do_not_duplicate_line_findings(self) -> None:
        result = analyze("int main() {\n    int x = 5\n    return 0;\n}\n")
        self.assertEqual(result.diagnostic_report.count("Line 2: Error - Missing semicolon."), 1)

    def test_main_only_rules_run_inside_main(self) -> None:
        outside = analyze("int a = 1;\nint b = 2;\na = a ** b;\n")
        inside = analyze("int main() {\n    int a = 1;\n    int b = 2;\n    a = a ** b;\n}\n")
        message = "Invalid or confusing consecutive arithmetic operators detected."
        self.assertNotIn(message, outside.diagnostic_report)
        self.assertIn("Line 4: " + message, inside.diagnostic_report)

    def test_globals_before_main_are_visible(self) -> None:
        source = "int total = 0;\nint main() {\n    if (total > 1) {\n        total = 2;\n    }\n}\n"
        self.assertEqual(analyze(source).diagnostic_report, "")

    def test_dangling_else_reported_once(self) -> None:
        source = "int main() {\n    int a = 1;\n    a = 2;\n    else {\n        a = 3;\n    }\n}\n"
        report = analyze(source).diagnostic_report
        self.assertEqual(report.count("Line 4: Error - 'else' without matching 'if'."), 1)

    def test_step_in_main_settles_initialization(self) -> None:
        result = analyze("int main() {\n    int c;\n    c++;\n    return 0;\n}\n")
        self.assertIn("Line 3: Variable 'c' used with increment/decrement operator "
                      "before initialization.", result.diagnostic_report)
        self.assertNotIn("never initialized", result.diagnostic_report)

    def test_assignment_after_if_header_initializes(self) -> None:
        source = "int main() {\n    int y = 1;\n    int z;\n    if (y) z = 2;\n    return 0;\n}\n"
        result = analyze(source)
        self.assertNotIn("never initialized", result.diagnostic_report)
        self.assertTrue(result.symbols.lookup("z").initialized)

    def test_unscoped_main_tracking(self) -> None:
        config = AnalyzerConfig()
        config.scoped_main = False
        result = analyze("int main() {\n    int count;\n    return 0;\n}\n", config)
        self.assertIn("Main function line 2: Warning - Variable 'count'", result.diagnostic_report)


class SessionTests(unittest.TestCase):
    def test_sinks_receive_lines_in_order(self) -> None:
        tokens, symbols, diagnostics = [], [], []
        SourceAnalyzer().analyze("int x;\ny = 1;\n", token_sink=tokens,
                                 symbol_sink=symbols, diagnostic_sink=diagnostics)
        self.assertEqual(tokens[0], "[DECLARATION]: int (Line 1)")
        self.assertEqual(symbols[0], "SYMBOL TABLE:")
        self.assertEqual(diagnostics, [
            "Line 2: Variable 'y' used before declaration.",
            "Warning: Variable 'x' is declared but never initialized.",
        ])

    def test_results_do_not_share_state(self) -> None:
        analyzer = SourceAnalyzer()
        first = analyzer.analyze("int a = 1;\n")
        second = analyzer.analyze("int b = 2;\n")
        self.assertNotIn("b", first.symbols)
        self.assertNotIn("a", second.symbols)

    def test_warnings_as_errors(self) -> None:
        config = AnalyzerConfig()
        config.warnings_as_errors = True
        self.assertTrue(analyze("int x;\n", config).has_errors)
        self.assertFalse(analyze("int x;\n").has_errors)

    def test_config_from_env(self) -> None:
        with mock.patch.dict(os.environ, {"CPPSCAN_REQUIRE_MAIN": "yes",
                                          "CPPSCAN_WARNINGS_AS_ERRORS": "0"}):
            config = AnalyzerConfig.from_env()
        self.assertTrue(config.require_main)
        self.assertFalse(config.warnings_as_errors)

    def test_to_dict(self) -> None:
        data = analyze("int x;\n").to_dict()
        self.assertFalse(data["succeeded"])
        self.assertEqual(data["warnings"], 1)
        self.assertEqual(data["symbols"], [
            {"name": "x", "type": "int", "initialized": False, "line": 1}])
        self.assertEqual(data["tokens"][0], {"lexeme": "int", "line": 1, "category": "DECLARATION"})
        self.assertEqual(data["diagnostics"][0]["origin"], "program")

    def test_analyze_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "sample.cpp")
            with open(path, "w", encoding="utf-8") as f:
                f.write("int x = 5;\n")
            result = analyze_file(path)
        self.assertTrue(result.succeeded)

    def test_analyze_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(SourceReadError):
                analyze_file(os.path.join(tmp, "missing.cpp"))


if __name__ == "__main__":
    unittest.main()
