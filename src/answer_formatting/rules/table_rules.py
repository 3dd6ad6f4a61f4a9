"""Table section validation rules."""

from .. import constants as c
from ..models import Fix, FixType, Section, SectionFormat, Severity, ValidationViolation
from ..text_index import TextIndex
from .markdown import code_blocks, tables


class TableValidator:
    """Validates that table sections contain a well-formed markdown table."""

    FORMATS = (SectionFormat.TABLE,)

    def validate(self, answer: str, index: TextIndex, section: Section) -> list[ValidationViolation]:
        """Validate a table section.

        Args:
            answer: Answer text
            index: Line index over the answer
            section: Section definition with optional column hints

        Returns:
            List of violations found
        """
        found = tables(answer)
        if not found:
            # Text appended after an unterminated fence would land inside the code block
            unterminated = any(not block.closed for block in code_blocks(answer))
            return [
                ValidationViolation(
                    rule=c.TABLE_REQUIRED,
                    severity=Severity.ERROR,
                    message=f"{section.name} section requires a markdown table",
                    location=None,
                    fix=None if unterminated else self._skeleton_fix(answer, section),
                    hint="Add a markdown table with a header row and a |---| separator row",
                )
            ]

        issues = []
        table = found[0]
        location = index.location(table.start)
        columns = len(table.header)

        min_columns = section.constraint("min-columns")
        if min_columns is not None and columns < int(min_columns):
            issues.append(
                ValidationViolation(
                    rule=c.TABLE_MIN_COLUMNS,
                    severity=Severity.ERROR,
                    message=f"Table must have at least {min_columns} columns, found {columns}",
                    location=location,
                    hint=f"Add columns until the table has at least {min_columns}",
                )
            )

        if section.constraint("consistent-rows"):
            for row_number, (row, row_start) in enumerate(
                zip(table.rows, table.row_starts), start=1
            ):
                if len(row) != columns:
                    issues.append(
                        ValidationViolation(
                            rule=c.TABLE_INCONSISTENT_ROWS,
                            severity=Severity.ERROR,
                            message=f"Table row {row_number} has {len(row)} columns, expected {columns}",
                            location=index.location(row_start),
                            hint=f"Give every row exactly {columns} cells",
                        )
                    )

        min_rows = section.constraint("min-data-rows")
        if min_rows is not None and len(table.rows) < int(min_rows):
            issues.append(
                ValidationViolation(
                    rule=c.TABLE_MIN_DATA_ROWS,
                    severity=Severity.WARNING,
                    message=f"Table has {len(table.rows)} data rows, minimum required is {min_rows}",
                    location=location,
                    hint=f"Add comparison rows until there are at least {min_rows}",
                )
            )

        return issues

    def _column_hints(self, section: Section) -> list[str]:
        """Column headers for a skeleton table."""
        hinted = section.constraint("columns")
        if isinstance(hinted, str):
            hinted = [h.strip() for h in hinted.split(",") if h.strip()]
        if hinted:
            return list(hinted)

        columns = list(c.DEFAULT_TABLE_COLUMNS)
        min_columns = section.constraint("min-columns")
        if min_columns is not None:
            while len(columns) < int(min_columns):
                columns.append(f"Option {chr(ord('A') + len(columns) - 1)}")
        return columns

    def _skeleton_fix(self, answer: str, section: Section) -> Fix:
        """Build an insert fix appending a table skeleton to the answer."""
        columns = self._column_hints(section)
        header = "| " + " | ".join(columns) + " |"
        separator = "|" + "|".join(" --- " for _ in columns) + "|"
        row = "|" + "|".join("  " for _ in columns) + "|"

        if not answer or answer.endswith("\n\n"):
            prefix = ""
        elif answer.endswith("\n"):
            prefix = "\n"
        else:
            prefix = "\n\n"

        return Fix(
            type=FixType.INSERT,
            start=len(answer),
            end=len(answer),
            target="",
            replacement=f"{prefix}{header}\n{separator}\n{row}\n",
            description=f"Append a {len(columns)}-column table skeleton",
        )
