"""Validation result reporters."""

import json

from common.logger import get_logger

from .models import FormatPattern, Severity, ValidationResult

logger = get_logger(__name__)


class ValidationReporter:
    """Format and display validation results."""

    def __init__(self, show_info: bool = True):
        """Initialize the reporter.

        Args:
            show_info: Whether to show info-level messages
        """
        self.show_info = show_info

    def report_console(self, result: ValidationResult, pattern: FormatPattern) -> int:
        """Print a validation result to console.

        Args:
            result: Validation result to report
            pattern: Pattern the answer was validated against

        Returns:
            Exit code (0 if valid, 1 otherwise)
        """
        status = "[green]valid[/green]" if result.is_valid else "[red]invalid[/red]"
        logger.info(f"Pattern [bold]{pattern.name}[/bold] ({pattern.id}): {status}")

        counts = {severity: 0 for severity in Severity}
        for violation in result.violations:
            counts[violation.severity] += 1

            if violation.severity == Severity.ERROR:
                icon = "[red]✗[/red]"
            elif violation.severity == Severity.WARNING:
                icon = "[yellow]⚠[/yellow]"
            else:
                if not self.show_info:
                    continue
                icon = "ℹ"

            where = f"Line [bold]{violation.location.line}[/bold]: " if violation.location else ""
            logger.info(f"  {icon} {where}{violation.message} ({violation.rule})")
            if violation.fix is not None:
                logger.info(f"      Auto-fix: {violation.fix.description or violation.fix.type.value}")
            elif violation.hint:
                logger.info(f"      Suggestion: {violation.hint}")

        logger.info("\n" + "=" * 60)
        logger.info(
            f"Score: [bold]{result.score}[/bold]/100 | "
            f"[bold]{counts[Severity.ERROR]}[/bold] errors, "
            f"[bold]{counts[Severity.WARNING]}[/bold] warnings, "
            f"[bold]{counts[Severity.INFO]}[/bold] info"
        )

        return 0 if result.is_valid else 1

    def report_json(
        self,
        result: ValidationResult,
        pattern: FormatPattern,
        formatted_answer: str | None = None,
    ) -> str:
        """Format a result as JSON.

        Args:
            result: Validation result to report
            pattern: Pattern the answer was validated against
            formatted_answer: Auto-formatted answer, if one was produced

        Returns:
            JSON string representation of the result
        """
        data = {
            "pattern": pattern.id,
            "is_valid": result.is_valid,
            "score": result.score,
            "violations": [
                {
                    "rule": v.rule,
                    "severity": v.severity.value,
                    "message": v.message,
                    "line": v.location.line if v.location else None,
                    "column": v.location.column if v.location else None,
                    "fix": (
                        {
                            "type": v.fix.type.value,
                            "start": v.fix.start,
                            "end": v.fix.end,
                            "replacement": v.fix.replacement,
                        }
                        if v.fix
                        else None
                    ),
                    "hint": v.hint,
                }
                for v in result.violations
                if self.show_info or v.severity != Severity.INFO
            ],
            "suggestions": list(result.suggestions),
        }
        if formatted_answer is not None:
            data["formatted_answer"] = formatted_answer

        return json.dumps(data, indent=2)
