"""Code section validation rules."""

from .. import constants as c
from ..models import Fix, FixType, Section, SectionFormat, Severity, ValidationViolation
from ..text_index import TextIndex
from .consistency_rules import IssueKind, LanguageConsistencyChecker
from .markdown import CodeBlock, code_blocks

# Consistency issue kind -> (rule id, severity)
CONSISTENCY_RULES = {
    IssueKind.COMPARISON: (c.CODE_CONSISTENCY, Severity.INFO),
    IssueKind.EXPLANATION: (c.CODE_EXPLANATION, Severity.INFO),
    IssueKind.SEPARATION: (c.CODE_SEPARATION, Severity.WARNING),
}


def guess_language(code: str) -> str:
    """Infer a language identifier from a code block body.

    Args:
        code: Code block body

    Returns:
        Likely language, or the default identifier when nothing matches
    """
    for language, signal in c.LANGUAGE_HINTS:
        if signal.search(code):
            return language
    return c.DEFAULT_CODE_LANGUAGE


class CodeBlockValidator:
    """Validates fenced code blocks in code sections.

    With the ``language-consistency`` constraint, answers holding several
    examples are also checked with LanguageConsistencyChecker.
    """

    FORMATS = (SectionFormat.CODE,)

    def __init__(self):
        self.consistency_checker = LanguageConsistencyChecker()

    def validate(self, answer: str, index: TextIndex, section: Section) -> list[ValidationViolation]:
        """Validate a code section.

        Args:
            answer: Answer text
            index: Line index over the answer
            section: Section definition

        Returns:
            List of violations found
        """
        blocks = code_blocks(answer)
        if not blocks:
            return [
                ValidationViolation(
                    rule=c.CODE_BLOCK_REQUIRED,
                    severity=Severity.ERROR,
                    message=f"{section.name} section requires a fenced code block",
                    hint="Wrap the example in ``` fences with a language identifier",
                )
            ]

        issues = []
        for block in blocks:
            if not block.language:
                language = guess_language(block.body)
                issues.append(
                    ValidationViolation(
                        rule=c.CODE_LANGUAGE,
                        severity=Severity.WARNING,
                        message="Code block is missing a language identifier",
                        location=index.location(block.start),
                        fix=self._language_fix(block, language),
                    )
                )

        min_lines = section.constraint("min-lines")
        if min_lines is not None:
            for block in blocks:
                if len(block.body_lines) < int(min_lines):
                    issues.append(
                        ValidationViolation(
                            rule=c.CODE_MIN_LINES,
                            severity=Severity.WARNING,
                            message=f"Code block has {len(block.body_lines)} lines, minimum is {min_lines}",
                            location=index.location(block.start),
                            hint="Expand the example into a complete, runnable snippet",
                        )
                    )

        if section.constraint("language-consistency") and len(blocks) > 1:
            issues.extend(self._consistency(answer, index))

        return issues

    def _consistency(self, answer: str, index: TextIndex) -> list[ValidationViolation]:
        result = self.consistency_checker.check_consistency(answer)
        issues = []
        for issue in result.issues:
            rule, severity = CONSISTENCY_RULES[issue.kind]
            issues.append(
                ValidationViolation(
                    rule=rule,
                    severity=severity,
                    message=issue.message,
                    location=index.location(issue.offset) if issue.offset is not None else None,
                    hint=issue.suggestion,
                )
            )
        return issues

    def _language_fix(self, block: CodeBlock, language: str) -> Fix:
        """Replace the bare opening fence line with a tagged one."""
        ending = block.opening[len(block.opening.rstrip("\r\n")) :]
        indent = block.opening[: len(block.opening) - len(block.opening.lstrip(" "))]
        return Fix(
            type=FixType.REPLACE,
            start=block.start,
            end=block.start + len(block.opening),
            target=block.opening,
            replacement=f"{indent}{block.fence}{language}{ending}",
            description=f"Add '{language}' language identifier to code block",
        )
