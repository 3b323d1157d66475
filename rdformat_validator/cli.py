"""
CLI - Command-line interface for RDFormat validation.

Main entry point for the application. Orchestrates:
1. Input loading (files or stdin)
2. JSON parsing
3. Validation and optional auto-fixing
4. Report output (text or JSON) to stdout or a file

Exit code is 0 when every (possibly fixed) document is valid, 1 otherwise.
"""

import argparse
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from . import __version__
from .core.config import AppConfig, OutputFormat, load_config
from .parser import JSONParser, ParseError, ParserResult
from .validator import FixLevel, RDFormatValidator, ValidationReport, validate_and_fix
from .utils.logger import LogContext, get_logger, log_exception, log_json, setup_logging

logger = get_logger(__name__)

PARSE_ERROR = "PARSE_ERROR"
UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


# ANSI color codes
class Colors:
    RESET = "\033[0m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    DIM = "\033[2m"


def color(text: str, color_code: str, enabled: bool = True) -> str:
    """Apply color to text."""
    if not enabled:
        return text
    return f"{color_code}{text}{Colors.RESET}"


def print_error(message: str, use_color: bool = False) -> None:
    """Print an error message to stderr."""
    print(color(f"[ERROR] {message}", Colors.RED, use_color), file=sys.stderr)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="rdformat-validator",
        description="Validate JSON data against the Reviewdog Diagnostic Format specification",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s file.json                          # Validate a file
  %(prog)s a.json b.json                      # Validate several files
  cat file.json | %(prog)s                    # Validate from stdin
  %(prog)s --fix file.json                    # Validate and fix issues
  %(prog)s --fix -o fixed.json file.json      # Write the fixed document
  %(prog)s --format json file.json            # Output in JSON format
  %(prog)s --strict --no-extra-fields file.json
        """,
    )

    parser.add_argument(
        "inputs",
        nargs="*",
        metavar="FILE",
        help="JSON files to validate (default: stdin)",
    )

    parser.add_argument(
        "-f", "--fix",
        action="store_true",
        default=None,
        help="Attempt to automatically fix common issues",
    )

    parser.add_argument(
        "--fix-level",
        choices=[level.value for level in FixLevel],
        help="Fix level (default: basic)",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Report unknown properties as errors",
    )

    parser.add_argument(
        "--no-extra-fields",
        action="store_true",
        help="Disallow fields that are not in the specification",
    )

    parser.add_argument(
        "--format",
        choices=[fmt.value for fmt in OutputFormat],
        help="Output format (default: text)",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Output file (default: stdout); with --fix, receives the fixed document",
    )

    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Configuration file (YAML)",
    )

    parser.add_argument(
        "--allow-comments",
        action="store_true",
        help="Accept // and /* */ comments in the input",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show every error, warning and fix, and enable debug logging",
    )

    parser.add_argument(
        "-s", "--silent",
        action="store_true",
        help="Suppress non-error output",
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    args = parser.parse_args(argv)
    if not args.inputs:
        args.inputs = ["-"]
    return args


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Let command-line flags take precedence over file configuration."""
    if args.strict is not None:
        config.validation.strict_mode = args.strict
    if args.no_extra_fields:
        config.validation.allow_extra_fields = False
    if args.fix is not None:
        config.fix.enabled = args.fix
    if args.fix_level:
        config.fix.fix_level = FixLevel(args.fix_level)
    if args.format:
        config.output.format = OutputFormat(args.format)
    if args.no_color:
        config.output.color = False
    if args.verbose:
        config.logging.level = "DEBUG"
    return config


def read_input(source: str, allow_comments: bool = False) -> ParserResult:
    """Parse a file path, or stdin for ``-``."""
    parser = JSONParser(allow_comments=allow_comments)
    if source == "-":
        return parser.parse_stream(sys.stdin)
    return parser.parse_file(source)


def format_text_report(
    report: ValidationReport,
    source: str,
    verbose: bool = False,
    use_color: bool = True,
) -> str:
    """
    Format a validation report as human-readable text.

    Errors are always listed; warnings and fixes only in verbose mode.
    """
    lines = []
    name = "<stdin>" if source == "-" else source

    status = color("VALID", Colors.GREEN + Colors.BOLD, use_color) if report.valid \
        else color("INVALID", Colors.RED + Colors.BOLD, use_color)
    lines.append(f"{name}: {status}")

    for error in report.errors:
        path = f"{color(error.path, Colors.DIM, use_color)}: " if error.path else ""
        lines.append(
            f"  {color('[ERROR]', Colors.RED, use_color)} {path}{error.message} "
            f"{color(f'({error.code.value})', Colors.DIM, use_color)}"
        )

    if verbose:
        for warning in report.warnings:
            path = f"{color(warning.path, Colors.DIM, use_color)}: " if warning.path else ""
            lines.append(
                f"  {color('[WARNING]', Colors.YELLOW, use_color)} {path}{warning.message} "
                f"{color(f'({warning.code.value})', Colors.DIM, use_color)}"
            )
        for fix in report.applied_fixes:
            path = f"{color(fix.path, Colors.DIM, use_color)}: " if fix.path else ""
            lines.append(f"  {color('[FIXED]', Colors.BLUE, use_color)} {path}{fix.message}")

    summary = (
        f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)"
    )
    if report.applied_fixes:
        summary += f", {len(report.applied_fixes)} fix(es) applied"
    lines.append("")
    lines.append(color(summary, Colors.RED if report.errors else Colors.GREEN, use_color))

    return "\n".join(lines)


def format_json_report(report: ValidationReport, indent: int = 2, ensure_ascii: bool = False) -> str:
    return json.dumps(report.to_dict(), indent=indent, ensure_ascii=ensure_ascii)


@dataclass
class FileOutcome:
    """Validation outcome of one input."""
    source: str
    data: Any = None
    report: Optional[ValidationReport] = None
    parse_errors: List[ParseError] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return self.report is not None and self.report.valid

    @property
    def error_count(self) -> int:
        return len(self.report.errors) if self.report else len(self.parse_errors)

    @property
    def warning_count(self) -> int:
        return len(self.report.warnings) if self.report else 0

    @property
    def fix_count(self) -> int:
        return len(self.report.applied_fixes) if self.report else 0

    def to_dict(self) -> Dict[str, Any]:
        if self.report is not None:
            return {"file": self.source, **self.report.to_dict()}
        return {
            "file": self.source,
            "valid": False,
            "errors": [{"code": PARSE_ERROR, **e.to_dict()} for e in self.parse_errors],
            "warnings": [],
        }


def summarize(outcomes: List[FileOutcome]) -> Dict[str, Any]:
    """Aggregate counts over all processed inputs."""
    valid_files = sum(1 for o in outcomes if o.valid)
    return {
        "success": valid_files == len(outcomes),
        "filesProcessed": len(outcomes),
        "validFiles": valid_files,
        "invalidFiles": len(outcomes) - valid_files,
        "totalErrors": sum(o.error_count for o in outcomes),
        "totalWarnings": sum(o.warning_count for o in outcomes),
        "totalFixes": sum(o.fix_count for o in outcomes),
    }


def format_summary(summary: Dict[str, Any], use_color: bool = True) -> str:
    """Format the multi-file summary block."""
    lines = [
        color("RDFormat Validation Results", Colors.BOLD, use_color),
        f"Files processed: {summary['filesProcessed']}",
        f"Valid files: {color(str(summary['validFiles']), Colors.GREEN, use_color)}",
        f"Invalid files: {color(str(summary['invalidFiles']), Colors.RED if summary['invalidFiles'] else Colors.GREEN, use_color)}",
        f"Total errors: {summary['totalErrors']}",
        f"Total warnings: {summary['totalWarnings']}",
    ]
    if summary["totalFixes"]:
        lines.append(f"Total fixes applied: {summary['totalFixes']}")
    return "\n".join(lines)


def report_parse_failure(outcome: FileOutcome, config: AppConfig, use_color: bool) -> None:
    """Report a single document that could not be decoded."""
    if config.output.format == OutputFormat.JSON:
        payload = outcome.to_dict()
        del payload["file"]
        print(json.dumps(payload, indent=config.output.indent, ensure_ascii=config.output.ensure_ascii))
        return

    for error in outcome.parse_errors:
        print_error(f"{PARSE_ERROR}: {error}", use_color)


def write_output(text: str, output: Optional[Path]) -> None:
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text + "\n", encoding="utf-8")
        logger.info(f"Output written to: {output}")
    else:
        print(text)


def validate_input(
    source: str,
    args: argparse.Namespace,
    config: AppConfig,
    validator: RDFormatValidator,
) -> FileOutcome:
    """Parse, validate and optionally fix one input."""
    parsed = read_input(source, allow_comments=args.allow_comments)
    if not parsed.success:
        logger.debug(f"Parse failed for {source}: {[str(e) for e in parsed.errors]}")
        return FileOutcome(source=source, parse_errors=parsed.errors)

    with LogContext(logger, "validate", source=source):
        report = validate_and_fix(
            parsed.data,
            auto_fix=config.fix.enabled,
            fix_level=config.fix.fix_level,
            max_iterations=config.fix.max_iterations,
            validator=validator,
        )
    log_json(logger, "Report", report.to_dict())
    return FileOutcome(source=source, data=parsed.data, report=report)


def report_single(
    outcome: FileOutcome,
    args: argparse.Namespace,
    config: AppConfig,
    use_color: bool,
) -> None:
    """Output for one input: its report, and the fixed document with --fix -o."""
    if outcome.report is None:
        report_parse_failure(outcome, config, use_color)
        return

    report = outcome.report
    fixed_to_file = config.fix.enabled and args.output is not None
    if fixed_to_file:
        document = report.fixed_data if report.applied_fixes else outcome.data
        write_output(
            json.dumps(document, indent=config.output.indent, ensure_ascii=config.output.ensure_ascii),
            args.output,
        )

    if not args.silent:
        if config.output.format == OutputFormat.JSON:
            text = format_json_report(report, config.output.indent, config.output.ensure_ascii)
        else:
            text = format_text_report(report, outcome.source, args.verbose, use_color)
        write_output(text, None if fixed_to_file else args.output)


def report_many(
    outcomes: List[FileOutcome],
    args: argparse.Namespace,
    config: AppConfig,
    use_color: bool,
) -> None:
    """Output for several inputs: per-file results plus an aggregate summary."""
    summary = summarize(outcomes)

    if config.output.format == OutputFormat.JSON:
        if not args.silent:
            payload = {**summary, "files": [o.to_dict() for o in outcomes]}
            write_output(
                json.dumps(payload, indent=config.output.indent, ensure_ascii=config.output.ensure_ascii),
                args.output,
            )
        return

    sections = []
    for outcome in outcomes:
        if outcome.report is None:
            if not args.silent:
                for error in outcome.parse_errors:
                    print_error(f"{outcome.source}: {PARSE_ERROR}: {error}", use_color)
            continue
        sections.append(format_text_report(outcome.report, outcome.source, args.verbose, use_color))

    if not args.silent:
        sections.append(format_summary(summary, use_color))
        write_output("\n\n".join(sections), args.output)


def run(args: argparse.Namespace, config: AppConfig) -> int:
    """
    Validate (and optionally fix) every input according to the configuration.

    A failing input is reported and counted; the remaining inputs are still
    processed.

    Returns:
        Exit code (0 if all inputs are valid, 1 otherwise)
    """
    use_color = config.output.color and args.output is None and sys.stdout.isatty()

    if len(args.inputs) > 1 and config.fix.enabled and args.output is not None:
        print_error("--fix with --output takes a single input file", use_color)
        return 1

    validator = RDFormatValidator()
    validator.set_options(config.validation.to_options())

    outcomes = [validate_input(source, args, config, validator) for source in args.inputs]

    if len(outcomes) == 1:
        report_single(outcomes[0], args, config, use_color)
    else:
        report_many(outcomes, args, config, use_color)

    return 0 if all(o.valid for o in outcomes) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    load_dotenv()
    args = parse_args(argv)

    try:
        config = apply_overrides(load_config(args.config), args)
    except (FileNotFoundError, ValueError) as e:
        print_error(f"Configuration error: {e}")
        return 1

    setup_logging(
        level=config.logging.level,
        format_string=config.logging.format,
        log_file=config.logging.file,
    )

    try:
        return run(args, config)
    except OSError as e:
        print_error(f"I/O error: {e}")
        return 1
    except Exception as e:
        log_exception(logger, UNEXPECTED_ERROR, e)
        print_error(f"{UNEXPECTED_ERROR}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
