"""List item validation rules."""

from .. import constants as c
from ..models import Fix, FixType, Section, SectionFormat, Severity, ValidationViolation
from ..text_index import TextIndex
from .markdown import list_items


class ListItemValidator:
    """Validates list sections and list item formatting."""

    FORMATS = (SectionFormat.LIST,)

    def validate(self, answer: str, index: TextIndex, section: Section) -> list[ValidationViolation]:
        """Validate list formatting.

        Args:
            answer: Answer text
            index: Line index over the answer
            section: Section definition

        Returns:
            List of violations found
        """
        items = list_items(answer)
        if not items:
            return [
                ValidationViolation(
                    rule=c.LIST_REQUIRED,
                    severity=Severity.ERROR,
                    message=f"{section.name} section requires a bulleted or numbered list",
                    hint="Add a bulleted list using - or a numbered list using 1. 2. 3.",
                )
            ]

        issues = []

        # Lines starting with asterisk or plus instead of dash
        for item in items:
            if item.marker in ("*", "+"):
                issues.append(
                    ValidationViolation(
                        rule=c.LIST_BULLET_STYLE,
                        severity=Severity.INFO,
                        message=f"Use '-' for list items instead of '{item.marker}'",
                        location=index.location(item.start),
                        fix=Fix(
                            type=FixType.REPLACE,
                            start=item.start,
                            end=item.start + 1,
                            target=item.marker,
                            replacement="-",
                            description="Use '-' as the bullet marker",
                        ),
                    )
                )

        max_items = section.constraint("max-items")
        top_level = [item for item in items if not item.indent]
        if max_items is not None and len(top_level) > int(max_items):
            issues.append(
                ValidationViolation(
                    rule=c.LIST_MAX_ITEMS,
                    severity=Severity.INFO,
                    message=f"List has {len(top_level)} items, consider limiting to {max_items}",
                    location=index.location(top_level[int(max_items)].start),
                    hint=f"Consolidate the list to at most {max_items} items",
                )
            )

        return issues
