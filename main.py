#!/usr/bin/env python3

import sys
import logging

from cppscan import AnalyzerConfig, CppScanError, SourceAnalyzer, __version__
from cppscan.utils.colors import Colors
from cppscan.utils.report import SUCCESS_MESSAGE, export_json, format_tokens
from cppscan.utils.term import (
    print_diagnostics, print_error, print_lines, print_stage, print_success, print_symbol_table,
)
from cppscan.analyzer import analyze_file

logger = logging.getLogger(__name__)


def build_parser():
    import argparse
    parser = argparse.ArgumentParser(
        description='Heuristic lexical and syntax checker for a C++ subset',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('input', help="C++ source file, or '-' to read standard input")
    parser.add_argument('--tokens', action='store_true', help='Print the token report')
    parser.add_argument('--symbols', action='store_true', help='Print the symbol table')
    parser.add_argument('--json', action='store_true', help='Print the whole result as JSON')
    parser.add_argument('--require-main', action='store_true',
                        help='Report a program without main() as an error')
    parser.add_argument('--warnings-as-errors', action='store_true')
    parser.add_argument('--minimal', action='store_true', help='Plain output without colors')
    parser.add_argument('-v', '--verbose', action='store_true')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s %(name)s: %(message)s')
    if args.minimal or args.json:
        Colors.MINIMAL = True

    config = AnalyzerConfig.from_env()
    if args.require_main:
        config.require_main = True
    if args.warnings_as_errors:
        config.warnings_as_errors = True
    logger.debug("require_main=%s warnings_as_errors=%s",
                 config.require_main, config.warnings_as_errors)

    try:
        if args.input == '-':
            result = SourceAnalyzer(config).analyze(sys.stdin.read())
        else:
            result = analyze_file(args.input, config)
    except CppScanError as e:
        print_error(str(e))
        return 1

    if args.json:
        print(export_json(result.to_dict()))
        return 1 if result.has_errors else 0

    if args.tokens:
        print_stage(1, 3, "Tokens")
        print_lines(format_tokens(result.tokens))
    if args.symbols:
        print_stage(2, 3, "Symbol table")
        print_symbol_table(result.symbols)
    if args.tokens or args.symbols:
        print_stage(3, 3, "Diagnostics")

    if result.succeeded:
        print_success(SUCCESS_MESSAGE)
        return 0
    print_diagnostics(result.diagnostics)
    return 1 if result.has_errors else 0


if __name__ == '__main__':
    raise SystemExit(main())
