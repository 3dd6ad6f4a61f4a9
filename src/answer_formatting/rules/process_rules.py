"""Process (step-by-step) section validation rules."""

import re

from .. import constants as c
from ..models import Fix, FixType, Section, SectionFormat, Severity, ValidationViolation
from ..text_index import TextIndex
from .markdown import ListItem, code_blocks, list_items

INLINE_CODE = re.compile(r"`[^`\n]+`")


def step_number(item: ListItem) -> int:
    """Number of an ordered list item ("3." or "3)" -> 3)."""
    return int(item.marker[:-1])


def numbering_gaps(items: list[ListItem]) -> list[tuple[ListItem, int]]:
    """Find numbered items out of sequence.

    An item numbered 1 starts a new list, so "1. 1. 1." is accepted.

    Args:
        items: Ordered list items in document order

    Returns:
        (item, expected number) pairs for every misnumbered item
    """
    gaps = []
    expected = 1
    for item in items:
        number = step_number(item)
        if number == 1:
            expected = 1
        if number != expected:
            gaps.append((item, expected))
        expected += 1
    return gaps


def renumber_fix(answer: str, gaps: list[tuple[ListItem, int]]) -> Fix:
    """Rewrite the numbers of misnumbered items in one edit."""
    start = gaps[0][0].start
    last = gaps[-1][0]
    end = last.start + len(last.marker) - 1

    pieces = []
    cursor = start
    for item, expected in gaps:
        pieces.append(answer[cursor : item.start])
        pieces.append(str(expected))
        cursor = item.start + len(item.marker) - 1

    return Fix(
        type=FixType.REPLACE,
        start=start,
        end=end,
        target=answer[start:end],
        replacement="".join(pieces),
        description="Renumber steps in sequence",
    )


class ProcessValidator:
    """Validates that process sections read as concrete, numbered steps."""

    FORMATS = (SectionFormat.PROCESS,)

    def validate(self, answer: str, index: TextIndex, section: Section) -> list[ValidationViolation]:
        """Validate a process section.

        Args:
            answer: Answer text
            index: Line index over the answer
            section: Section definition

        Returns:
            List of violations found
        """
        issues = []
        items = list_items(answer)
        numbered = [item for item in items if item.ordered]

        if not numbered:
            bullets = [item for item in items if not item.ordered and not item.indent]
            issues.append(
                ValidationViolation(
                    rule=c.PROCESS_NUMBERED_STEPS,
                    severity=Severity.WARNING,
                    message=f"{section.name} section should list its steps as a numbered list",
                    location=index.location(bullets[0].line_start) if bullets else None,
                    fix=self._numbering_fix(answer, bullets) if bullets else None,
                    hint="Write each step as a numbered item: 1. 2. 3.",
                )
            )

        gaps = numbering_gaps([item for item in numbered if not item.indent])
        if gaps:
            item, expected = gaps[0]
            issues.append(
                ValidationViolation(
                    rule=c.PROCESS_STEP_SEQUENCE,
                    severity=Severity.WARNING,
                    message=f"Step numbered {step_number(item)} should be {expected}",
                    location=index.location(item.start),
                    fix=renumber_fix(answer, gaps),
                    hint="Number steps 1, 2, 3 without gaps or repeats",
                )
            )

        vague = list(c.VAGUE_STEP_PATTERN.finditer(answer))
        concrete = self._concrete_step_count(answer, numbered)
        if vague and len(vague) > concrete:
            issues.append(
                ValidationViolation(
                    rule=c.PROCESS_VAGUE_STEPS,
                    severity=Severity.WARNING,
                    message=f"Steps use vague phrasing such as '{vague[0].group(0)}' instead of concrete actions",
                    location=index.location(vague[0].start()),
                    hint=(
                        "Use concrete, numbered steps that start with an action verb "
                        "(e.g., '1. Run `npm install`')"
                    ),
                )
            )

        return issues

    def _concrete_step_count(self, answer: str, numbered: list[ListItem]) -> int:
        """Count signals of concrete steps: action-verb steps, commands, code blocks."""
        count = 0
        for item in numbered:
            words = item.content.split()
            first = words[0].strip("*_`:,.").lower() if words else ""
            if first in c.ACTION_VERBS or INLINE_CODE.search(item.content):
                count += 1
        count += len(code_blocks(answer))
        return count

    def _numbering_fix(self, answer: str, bullets: list[ListItem]) -> Fix:
        """Rewrite a run of top-level bullets as a numbered list."""
        start = bullets[0].line_start
        end = answer.find("\n", bullets[-1].start)
        if end == -1:
            end = len(answer)
        target = answer[start:end]

        bullet_starts = {item.line_start for item in bullets}
        step = 0
        offset = start
        rewritten = []
        for line in target.split("\n"):
            line_offset = offset
            offset += len(line) + 1
            if line_offset in bullet_starts:
                step += 1
                line = f"{step}. {line[1:].lstrip()}"
            rewritten.append(line)

        return Fix(
            type=FixType.REFORMAT,
            start=start,
            end=end,
            target=target,
            replacement="\n".join(rewritten),
            description="Convert bulleted steps to a numbered list",
        )
