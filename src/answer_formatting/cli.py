#!/usr/bin/env python3
"""CLI interface for the answer formatting engine."""

import argparse
import sys
from pathlib import Path

from common.env import env
from common.logger import error, progress, setup_logging, success

from .errors import FormattingError, PatternNotFound
from .fixer import AutoFormatter
from .patterns import PatternDetector, PatternLibrary
from .reporters import ValidationReporter
from .scoring import ScoringPolicy
from .validator import FormatValidator


def load_library(patterns: str | None) -> PatternLibrary:
    """Load patterns from a file, FORMAT_PATTERNS_PATH, or the bundled defaults."""
    path = Path(patterns) if patterns else env.patterns_path()
    if path is not None:
        return PatternLibrary.load(path)
    return PatternLibrary.with_defaults()


def read_answer(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def cmd_validate(args):
    """Validate an answer against a given or detected pattern.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if the answer is valid, non-zero otherwise)
    """
    library = load_library(args.patterns)

    if args.pattern:
        pattern = library.get_pattern(args.pattern)
        if pattern is None:
            raise PatternNotFound(args.pattern)
    elif args.question:
        pattern = PatternDetector(library).detect_pattern(args.question)
        if pattern is None:
            error("No pattern matches the question; pass --pattern explicitly")
            return 1
    else:
        error("Either --pattern or --question is required")
        return 2

    answer = read_answer(args.answer)
    validator = FormatValidator(ScoringPolicy.from_env())
    result = validator.validate(answer, pattern)

    formatted = None
    if args.fix and result.auto_fixable:
        formatted = AutoFormatter(validator).format(answer, pattern)
        result = validator.validate(formatted, pattern)

    reporter = ValidationReporter(show_info=not args.hide_info)

    if args.format == "json":
        output = reporter.report_json(result, pattern, formatted)
        if args.output:
            Path(args.output).write_text(output, encoding="utf-8")
            success(f"Validation results written to {args.output}")
        else:
            print(output)
    else:
        exit_code = reporter.report_console(result, pattern)
        if formatted is not None and args.output:
            Path(args.output).write_text(formatted, encoding="utf-8")
            success(f"Formatted answer written to {args.output}")
        return exit_code

    return 0 if result.is_valid else 1


def cmd_detect(args):
    """Show the patterns a question would be matched to.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if a pattern was detected, 1 otherwise)
    """
    library = load_library(args.patterns)
    detector = PatternDetector(library)

    pattern = detector.detect_pattern(args.question)
    if pattern is None:
        progress("No pattern detected")
        return 1

    success(f"{pattern.id} (confidence={detector.get_confidence():.2f})")
    for candidate in detector.get_suggested_patterns(args.question, limit=args.limit)[1:]:
        progress(f"  also: {candidate.id} (priority={candidate.priority})")
    return 0


def cmd_patterns(args):
    """List the available patterns, optionally exporting them.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    library = load_library(args.patterns)

    for pattern in library.get_all_patterns():
        required = ", ".join(s.name for s in pattern.required_sections) or "none"
        progress(f"[bold]{pattern.id}[/bold] (priority={pattern.priority}): {pattern.name}")
        progress(f"    required sections: {required}")

    if args.export:
        library.save(Path(args.export))
        success(f"{library.pattern_count} patterns saved to {args.export}")
    return 0


def main(argv: list[str] | None = None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Validate and format Q&A answers")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")
    parser.add_argument("--log-file", type=str, help="Also write logs to this file")
    parser.add_argument("--patterns", type=str, help="Path to a patterns JSON file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate an answer")
    validate_parser.add_argument(
        "--answer", type=str, required=True, help="Answer markdown file ('-' for stdin)"
    )
    validate_parser.add_argument("--question", type=str, help="Question used to detect the pattern")
    validate_parser.add_argument("--pattern", type=str, help="Pattern id to validate against")
    validate_parser.add_argument(
        "--format",
        choices=["console", "json"],
        default="console",
        help="Output format",
    )
    validate_parser.add_argument(
        "--output",
        type=str,
        help="Write JSON results (or the formatted answer with --fix) to a file",
    )
    validate_parser.add_argument(
        "--fix",
        action="store_true",
        help="Apply mechanical fixes and report the re-validated answer",
    )
    validate_parser.add_argument(
        "--hide-info",
        action="store_true",
        help="Hide info-level violations",
    )
    validate_parser.set_defaults(func=cmd_validate)

    # Detect command
    detect_parser = subparsers.add_parser("detect", help="Detect the pattern for a question")
    detect_parser.add_argument("question", type=str, help="Question text")
    detect_parser.add_argument("--limit", type=int, default=3, help="Number of candidates to list")
    detect_parser.set_defaults(func=cmd_detect)

    # Patterns command
    patterns_parser = subparsers.add_parser("patterns", help="List available patterns")
    patterns_parser.add_argument("--export", type=str, help="Save the patterns to a JSON file")
    patterns_parser.set_defaults(func=cmd_patterns)

    args = parser.parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        return args.func(args)
    except (FormattingError, OSError) as e:
        error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
