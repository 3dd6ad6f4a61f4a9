"""Format validator orchestrating all section and pattern rules."""

from common.logger import get_logger

from . import constants as c
from .models import FormatPattern, Severity, ValidationResult, ValidationViolation
from .rules import (
    CodeBlockValidator,
    DiagramValidator,
    ListItemValidator,
    ProcessValidator,
    ProsConsValidator,
    RuleEvaluator,
    TableValidator,
    TextValidator,
    TroubleshootingValidator,
)
from .scoring import ScoringPolicy
from .text_index import TextIndex

logger = get_logger(__name__)


class FormatValidator:
    """Validates answers against format patterns.

    Only required sections are checked; optional sections describe the
    template but never produce violations. The result of the most recent
    ``validate`` call is kept for ``get_violations``/``get_suggestions``.
    """

    def __init__(self, scoring: ScoringPolicy | None = None):
        """Initialize the validator.

        Args:
            scoring: Penalty weights and pass threshold (default: from FORMAT_* variables)
        """
        self.scoring = scoring or ScoringPolicy.from_env()
        self.section_validators = [
            TableValidator(),
            ProcessValidator(),
            CodeBlockValidator(),
            ListItemValidator(),
            TextValidator(),
            DiagramValidator(),
            ProsConsValidator(),
            TroubleshootingValidator(),
        ]
        self.rule_evaluator = RuleEvaluator()
        self._by_format = {
            fmt: validator
            for validator in self.section_validators
            for fmt in validator.FORMATS
        }
        self._last_result = ValidationResult(is_valid=True, score=100)

    def validate(self, answer: str, pattern: FormatPattern) -> ValidationResult:
        """Validate an answer against a pattern.

        Args:
            answer: Answer text
            pattern: Pattern the answer should follow

        Returns:
            ValidationResult with violations ordered most severe first
        """
        if not answer.strip() and pattern.required_sections:
            violation = ValidationViolation(
                rule=c.EMPTY_ANSWER,
                severity=Severity.ERROR,
                message="Answer is empty",
                hint=f"Write an answer following the '{pattern.name}' pattern",
            )
            result = ValidationResult(
                is_valid=False,
                score=0,
                violations=(violation,),
                suggestions=(violation.hint,),
            )
            self._last_result = result
            return result

        index = TextIndex(answer)
        violations: list[ValidationViolation] = []

        for section in pattern.required_sections:
            validator = self._by_format.get(section.format)
            if validator is None:
                continue
            violations.extend(validator.validate(answer, index, section))

        violations.extend(self.rule_evaluator.validate(answer, index, pattern.rules))

        # Most severe first; ties keep discovery order
        violations.sort(key=lambda v: v.severity.rank)

        score = self.scoring.score(violations)
        result = ValidationResult(
            is_valid=self.scoring.is_passing(score, violations),
            score=score,
            violations=tuple(violations),
            suggestions=self._suggestions(violations),
        )
        logger.debug(
            f"Validated answer against '{pattern.id}': score={score}, "
            f"violations={len(violations)}"
        )
        self._last_result = result
        return result

    def get_violations(self) -> list[ValidationViolation]:
        """Get the violations of the last validation."""
        return list(self._last_result.violations)

    def get_suggestions(self) -> list[str]:
        """Get the suggestions of the last validation."""
        return list(self._last_result.suggestions)

    def _suggestions(self, violations: list[ValidationViolation]) -> tuple[str, ...]:
        """Deduplicated advice for violations without a mechanical fix."""
        seen: dict[str, None] = {}
        for violation in violations:
            if violation.fix is None:
                seen.setdefault(violation.hint or violation.message, None)
        return tuple(seen)
