"""Evaluation of pattern rules written in the rule language."""

import re

from common.logger import get_logger

from ..models import Fix, FixType, Rule, RuleKind, Severity, ValidationViolation
from ..text_index import TextIndex

logger = get_logger(__name__)


def section_heading_regex(name: str) -> re.Pattern:
    """Regex matching a heading or bold label with the given name."""
    escaped = re.escape(name.strip())
    return re.compile(
        rf"^ {{0,3}}(#{{1,6}}\s+{escaped}\b|\*\*{escaped}\b.*\*\*)", re.IGNORECASE | re.MULTILINE
    )


class RuleEvaluator:
    """Evaluates pattern rules against an answer.

    A rule whose evaluation raises is reported as an INFO violation so one
    malformed rule cannot block validation.
    """

    def validate(self, answer: str, index: TextIndex, rules: tuple[Rule, ...]) -> list[ValidationViolation]:
        """Evaluate every rule.

        Args:
            answer: Answer text
            index: Line index over the answer
            rules: Pattern rules

        Returns:
            Violations for failing or unevaluable rules
        """
        issues = []
        for rule in rules:
            try:
                violation = self._evaluate(answer, index, rule)
            except Exception as e:
                logger.warning(f"Rule '{rule.id}' could not be evaluated: {e}")
                issues.append(
                    ValidationViolation(
                        rule=rule.id,
                        severity=Severity.INFO,
                        message=f"Rule '{rule.id}' could not be evaluated: {e}",
                        hint=f"Check the definition of rule '{rule.id}'",
                    )
                )
                continue
            if violation is not None:
                issues.append(violation)
        return issues

    def _evaluate(self, answer: str, index: TextIndex, rule: Rule) -> ValidationViolation | None:
        location = None
        fix = None

        if rule.kind == RuleKind.REQUIRED_SECTION:
            passed = bool(section_heading_regex(str(rule.value)).search(answer))
        elif rule.kind == RuleKind.REGEX_PRESENT:
            passed = re.search(str(rule.value), answer, re.MULTILINE) is not None
        elif rule.kind == RuleKind.REGEX_ABSENT:
            match = re.search(str(rule.value), answer, re.MULTILINE)
            passed = match is None
            if match is not None:
                location = index.location(match.start())
                if rule.replacement is not None:
                    fix = Fix(
                        type=FixType.REPLACE if rule.replacement else FixType.DELETE,
                        start=match.start(),
                        end=match.end(),
                        target=match.group(0),
                        replacement=rule.replacement,
                        description=rule.description or f"Apply rule '{rule.id}'",
                    )
        elif rule.kind == RuleKind.MIN_LENGTH:
            passed = len(answer.strip()) >= int(rule.value)
        elif rule.kind == RuleKind.CUSTOM:
            if rule.predicate is None:
                raise ValueError("custom rule has no predicate")
            passed = bool(rule.predicate(answer))
        else:
            raise ValueError(f"unknown rule kind {rule.kind!r}")

        if passed:
            return None
        return ValidationViolation(
            rule=rule.id,
            severity=rule.severity,
            message=rule.error_message or rule.description or f"Rule '{rule.id}' failed",
            location=location,
            fix=fix,
            hint=f"Address the issue: {rule.description}" if rule.description else None,
        )
