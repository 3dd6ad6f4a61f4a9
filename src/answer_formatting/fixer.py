"""Apply mechanical fixes to answers based on validation results."""

from common.logger import get_logger

from .models import (
    Fix,
    FormatPattern,
    FormatSuggestion,
    Severity,
    ValidationResult,
    ValidationViolation,
)
from .validator import FormatValidator

logger = get_logger(__name__)

FIX_PRIORITY = {Severity.ERROR: 1, Severity.WARNING: 2, Severity.INFO: 3}


class AutoFormatter:
    """Applies fixes to answers and proposes manual fixes."""

    def __init__(self, validator: FormatValidator | None = None, max_passes: int = 3):
        """Initialize the formatter.

        Args:
            validator: Validator producing the fixes (default: a new FormatValidator)
            max_passes: Upper bound on validate-and-fix rounds in format()
        """
        self.validator = validator or FormatValidator()
        self.max_passes = max_passes
        self.fixes_applied = 0

    def format(self, answer: str, pattern: FormatPattern) -> str:
        """Apply every mechanical fix for an answer.

        Fixes are applied from the end of the answer backwards so earlier
        offsets stay valid. A fix skipped because an overlapping edit changed
        its span is picked up on the next pass. Never raises.

        Args:
            answer: Answer text
            pattern: Pattern the answer should follow

        Returns:
            The formatted answer (unchanged if nothing was fixable)
        """
        try:
            formatted = answer
            for _ in range(self.max_passes):
                result = self.validator.validate(formatted, pattern)
                fixes = [v.fix for v in result.violations if v.fix is not None]
                if not fixes:
                    break
                updated = self._apply_all(formatted, fixes)
                if updated == formatted:
                    break
                formatted = updated
            return formatted
        except Exception:
            logger.exception(f"Auto-format failed for pattern '{pattern.id}'")
            return answer

    def suggest_fixes(self, validation_result: ValidationResult) -> list[FormatSuggestion]:
        """Propose manual fixes for violations without a mechanical fix.

        Args:
            validation_result: Result to derive suggestions from

        Returns:
            Suggestions ordered most urgent first (error=1, warning=2, info=3)
        """
        suggestions = [
            FormatSuggestion(
                violation=violation,
                fixes=(),
                priority=FIX_PRIORITY[violation.severity],
                description=self._describe(violation),
            )
            for violation in validation_result.violations
            if violation.fix is None
        ]
        suggestions.sort(key=lambda s: s.priority)
        return suggestions

    def apply_fix(self, answer: str, fix: Fix) -> str:
        """Apply a single fix.

        The fix is only applied when its span still holds the expected target
        text, and an insert only when its text is not already in place, so
        re-applying a fix is a no-op.

        Args:
            answer: Answer text
            fix: Fix to apply

        Returns:
            The edited answer, or the input unchanged
        """
        if fix.start < 0 or fix.end < fix.start or fix.end > len(answer):
            logger.debug(f"Fix span {fix.start}-{fix.end} is outside the answer")
            return answer

        current = answer[fix.start : fix.end]
        if current != fix.target:
            logger.debug(f"Fix target mismatch at {fix.start}: expected {fix.target!r}, found {current!r}")
            return answer

        # Inserts have no target to check; skip them when already present
        if not fix.target and answer.startswith(fix.replacement, fix.start):
            return answer

        self.fixes_applied += 1
        return answer[: fix.start] + fix.replacement + answer[fix.end :]

    def _apply_all(self, answer: str, fixes: list[Fix]) -> str:
        """Apply fixes in descending offset order, skipping overlaps."""
        ordered = sorted(enumerate(fixes), key=lambda item: (item[1].start, item[0]), reverse=True)
        boundary = len(answer) + 1
        for _, fix in ordered:
            # An edit ending past the previous one's start would overlap it
            if fix.end > boundary or (fix.end == boundary and fix.start == fix.end == boundary):
                continue
            answer = self.apply_fix(answer, fix)
            boundary = fix.start
        return answer

    def _describe(self, violation: ValidationViolation) -> str:
        description = f"{violation.severity.value} issue: {violation.message}"
        if violation.hint:
            description += f" ({violation.hint})"
        return description
