"""Content validation rules for text, diagram, pros/cons and troubleshooting sections."""

import re

from .. import constants as c
from ..models import Section, SectionFormat, Severity, ValidationViolation
from ..text_index import TextIndex
from .markdown import (
    HeadingSection,
    code_blocks,
    heading_sections,
    headings,
    items_between,
    list_items,
    prose_lines,
)
from .process_rules import numbering_gaps, renumber_fix, step_number

PROS_HEADING = re.compile(r"\b(pros|advantages|benefits|strengths)\b", re.IGNORECASE)
CONS_HEADING = re.compile(r"\b(cons|disadvantages|drawbacks|weaknesses|limitations)\b", re.IGNORECASE)
PROS_LABEL = re.compile(r"^\s*(pros|advantages|benefits)\s*:", re.IGNORECASE | re.MULTILINE)
CONS_LABEL = re.compile(r"^\s*(cons|disadvantages|drawbacks)\s*:", re.IGNORECASE | re.MULTILINE)
SOLUTIONS_HEADING = re.compile(r"\bsolutions?\b", re.IGNORECASE)

# (heading name, pattern matching acceptable titles)
TROUBLESHOOTING_HEADINGS: tuple[tuple[str, re.Pattern], ...] = (
    ("Problem", re.compile(r"\b(problem|symptoms?|issue|error)\b", re.IGNORECASE)),
    ("Causes", re.compile(r"\b(causes?|root cause|why)\b", re.IGNORECASE)),
    ("Solutions", re.compile(r"\b(solutions?|fix(es)?|resolution|steps)\b", re.IGNORECASE)),
)


def _is_pros_title(title: str) -> bool:
    # "Disadvantages" also contains "advantages"
    return bool(PROS_HEADING.search(title)) and not CONS_HEADING.search(title)


class TextValidator:
    """Validates that text sections contain prose."""

    FORMATS = (SectionFormat.TEXT,)

    def validate(self, answer: str, index: TextIndex, section: Section) -> list[ValidationViolation]:
        issues = []
        prose = prose_lines(answer)
        if not prose:
            issues.append(
                ValidationViolation(
                    rule=c.TEXT_REQUIRED,
                    severity=Severity.WARNING,
                    message=f"{section.name} section requires an explanatory paragraph",
                    hint="Add a short paragraph of plain text explaining the answer",
                )
            )

        min_length = section.constraint("min-length")
        if min_length is not None:
            length = sum(len(line.text.strip()) for line in prose)
            if length < int(min_length):
                issues.append(
                    ValidationViolation(
                        rule=c.TEXT_MIN_LENGTH,
                        severity=Severity.WARNING,
                        message=f"{section.name} text is {length} characters, minimum is {min_length}",
                        location=index.location(prose[0].start) if prose else None,
                        hint="Expand the explanation",
                    )
                )
        return issues


class DiagramValidator:
    """Validates that diagram sections contain a Mermaid diagram.

    With the ``text-explanation`` constraint each diagram must also be
    introduced and followed by text.
    """

    FORMATS = (SectionFormat.DIAGRAM,)

    def validate(self, answer: str, index: TextIndex, section: Section) -> list[ValidationViolation]:
        diagrams = [block for block in code_blocks(answer) if block.language.lower() == "mermaid"]
        if not diagrams:
            return [
                ValidationViolation(
                    rule=c.DIAGRAM_REQUIRED,
                    severity=Severity.ERROR,
                    message=f"{section.name} section requires a ```mermaid diagram",
                    hint="Add a Mermaid diagram, e.g. ```mermaid graph TD; A-->B ```",
                )
            ]

        issues = []
        if section.constraint("text-explanation"):
            for diagram in diagrams:
                has_intro = bool(answer[: diagram.start].strip())
                has_conclusion = bool(answer[diagram.end :].strip())
                location = index.location(diagram.start)
                if not has_intro and not has_conclusion:
                    issues.append(
                        ValidationViolation(
                            rule=c.DIAGRAM_EXPLANATION,
                            severity=Severity.ERROR,
                            message="Diagram should be accompanied by explanatory text",
                            location=location,
                            hint="Add text before or after the diagram to give it context",
                        )
                    )
                elif not has_intro:
                    issues.append(
                        ValidationViolation(
                            rule=c.DIAGRAM_INTRO,
                            severity=Severity.WARNING,
                            message="Diagram should be preceded by introductory text",
                            location=location,
                            hint="Introduce the concept before showing the diagram",
                        )
                    )
                elif not has_conclusion:
                    issues.append(
                        ValidationViolation(
                            rule=c.DIAGRAM_CONCLUSION,
                            severity=Severity.INFO,
                            message="Consider adding explanatory text after the diagram",
                            location=location,
                            hint="Summarize or walk through the diagram after it",
                        )
                    )
        return issues


class ProsConsValidator:
    """Validates that pros/cons sections have both sides.

    Constraints:
        section-balance: neither side may be empty or have more than three
            times the other's items
        min-items-per-section: minimum bullet items on each non-empty side
    """

    FORMATS = (SectionFormat.PROS_CONS,)

    def validate(self, answer: str, index: TextIndex, section: Section) -> list[ValidationViolation]:
        sections = heading_sections(answer)
        titles = [s.title for s in sections]
        has_cons = any(CONS_HEADING.search(t) for t in titles) or bool(CONS_LABEL.search(answer))
        has_pros = any(_is_pros_title(t) for t in titles) or bool(PROS_LABEL.search(answer))

        issues = []
        missing = [name for name, present in (("Pros", has_pros), ("Cons", has_cons)) if not present]
        if missing:
            issues.append(
                ValidationViolation(
                    rule=c.PROS_CONS_SECTIONS,
                    severity=Severity.ERROR,
                    message=f"Missing {' and '.join(missing)} section in pros/cons answer",
                    hint="Add '## Pros' and '## Cons' headings, each followed by a bulleted list",
                )
            )

        pros = next((s for s in sections if _is_pros_title(s.title)), None)
        cons = next((s for s in sections if CONS_HEADING.search(s.title)), None)
        sides = [
            (name, side, self._count_items(answer, side))
            for name, side in (("Pros", pros), ("Cons", cons))
            if side is not None
        ]

        if section.constraint("section-balance"):
            issues.extend(self._balance(index, sides))

        min_items = section.constraint("min-items-per-section")
        if min_items is not None:
            for name, side, count in sides:
                if 0 < count < int(min_items):
                    issues.append(
                        ValidationViolation(
                            rule=c.PROS_CONS_MIN_ITEMS,
                            severity=Severity.INFO,
                            message=f"{name} section has {count} items, consider at least {min_items}",
                            location=index.location(side.start),
                            hint=f"Add more {name.lower()} to reach {min_items} items",
                        )
                    )
        return issues

    def _count_items(self, answer: str, side: HeadingSection) -> int:
        items = items_between(list_items(answer), side.body_start, side.end)
        return sum(1 for item in items if not item.ordered and not item.indent)

    def _balance(
        self, index: TextIndex, sides: list[tuple[str, HeadingSection, int]]
    ) -> list[ValidationViolation]:
        if len(sides) < 2 or all(count == 0 for _, _, count in sides):
            return []

        empty = [(name, side) for name, side, count in sides if count == 0]
        if empty:
            name, side = empty[0]
            return [
                ValidationViolation(
                    rule=c.PROS_CONS_EMPTY_SIDE,
                    severity=Severity.WARNING,
                    message=f"{name} section exists but contains no items",
                    location=index.location(side.start),
                    hint=f"Add bulleted items to the {name} section",
                )
            ]

        (_, _, pros_count), (_, _, cons_count) = sides
        if max(pros_count, cons_count) > c.PROS_CONS_MAX_RATIO * min(pros_count, cons_count):
            return [
                ValidationViolation(
                    rule=c.PROS_CONS_IMBALANCE,
                    severity=Severity.WARNING,
                    message=f"Pros/cons sections are imbalanced: {pros_count} pros vs {cons_count} cons",
                    hint="Give a balanced view with similar numbers of pros and cons",
                )
            ]
        return []


class TroubleshootingValidator:
    """Validates that troubleshooting sections cover problem, causes and solutions.

    With the ``numbered-solutions`` constraint the Solutions section must
    list its steps as a numbered sequence.
    """

    FORMATS = (SectionFormat.TROUBLESHOOTING,)

    def validate(self, answer: str, index: TextIndex, section: Section) -> list[ValidationViolation]:
        titles = [title for _, title in headings(answer)]
        issues = []
        for name, accepted in TROUBLESHOOTING_HEADINGS:
            if not any(accepted.search(title) for title in titles):
                issues.append(
                    ValidationViolation(
                        rule=c.TROUBLESHOOTING_SECTIONS,
                        severity=Severity.ERROR,
                        message=f"Troubleshooting answer is missing a '{name}' section",
                        hint=f"Add a '## {name}' heading",
                    )
                )

        if section.constraint("numbered-solutions"):
            issues.extend(self._solution_steps(answer, index))
        return issues

    def _solution_steps(self, answer: str, index: TextIndex) -> list[ValidationViolation]:
        solutions = next((s for s in heading_sections(answer) if SOLUTIONS_HEADING.search(s.title)), None)
        if solutions is None:
            return []

        items = items_between(list_items(answer), solutions.body_start, solutions.end)
        steps = [item for item in items if item.ordered and not item.indent]
        if not steps:
            return [
                ValidationViolation(
                    rule=c.TROUBLESHOOTING_NUMBERED_SOLUTIONS,
                    severity=Severity.ERROR,
                    message="Solutions section should use numbered steps",
                    location=index.location(solutions.start),
                    hint="List solutions as numbered steps (1. 2. 3.)",
                )
            ]

        gaps = numbering_gaps(steps)
        if not gaps:
            return []
        item, expected = gaps[0]
        return [
            ValidationViolation(
                rule=c.TROUBLESHOOTING_SOLUTION_SEQUENCE,
                severity=Severity.WARNING,
                message=f"Solution step numbered {step_number(item)} should be {expected}",
                location=index.location(item.start),
                fix=renumber_fix(answer, gaps),
                hint="Number solution steps 1, 2, 3 without gaps or repeats",
            )
        ]
