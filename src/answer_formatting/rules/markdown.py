"""Markdown structure scanning shared by the section rules.

All helpers report character offsets into the original answer so violations
and fixes can point at exact spans.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass

FENCE_OPEN = re.compile(r"^ {0,3}(`{3,})(.*)$")
TABLE_ROW = re.compile(r"^\s*\|.*\|\s*$")
TABLE_SEPARATOR = re.compile(r"^\s*\|(\s*:?-{2,}:?\s*\|)+\s*$")
LIST_ITEM = re.compile(r"^(\s*)([-*+]|\d+[.)])\s+(.*)$")
HEADING = re.compile(r"^ {0,3}#{1,6}\s+(.+?)\s*#*\s*$")
BOLD_LABEL = re.compile(r"^\s*\*\*(.+?)\*\*:?\s*$")


@dataclass(frozen=True)
class Line:
    """One line of the answer with its offset."""

    number: int  # 1-based
    start: int
    text: str  # Without the trailing newline
    raw: str  # With the trailing newline, if any
    in_code: bool


@dataclass(frozen=True)
class CodeBlock:
    """A fenced code block."""

    start: int  # Offset of the opening fence line
    opening: str  # Opening fence line including its newline
    fence: str
    info: str  # Info string (language identifier), possibly empty
    body: str
    closed: bool
    end: int  # Offset just past the closing fence line

    @property
    def language(self) -> str:
        return self.info.split()[0] if self.info.strip() else ""

    @property
    def body_lines(self) -> list[str]:
        return [line for line in self.body.split("\n") if line.strip()]


@dataclass(frozen=True)
class Table:
    """A markdown table: header row, separator row and data rows."""

    start: int
    header: list[str]
    separator: list[str]
    rows: list[list[str]]
    row_starts: list[int]


@dataclass(frozen=True)
class HeadingSection:
    """A heading and the text up to the next heading."""

    title: str
    start: int  # Offset of the heading line
    body_start: int
    end: int


@dataclass(frozen=True)
class ListItem:
    """A bulleted or numbered list item."""

    start: int
    line_start: int
    indent: str
    marker: str
    content: str

    @property
    def ordered(self) -> bool:
        return self.marker[0].isdigit()


def iter_lines(text: str) -> Iterator[Line]:
    """Yield lines with offsets, flagging lines inside fenced code blocks.

    Fence lines themselves are reported as in_code.
    """
    offset = 0
    fence: str | None = None
    for number, raw in enumerate(text.splitlines(keepends=True), start=1):
        line = raw.rstrip("\r\n")
        match = FENCE_OPEN.match(line)
        if fence is None and match:
            fence = match.group(1)
            in_code = True
        elif fence is not None:
            in_code = True
            if line.strip().startswith(fence) and not line.strip().strip("`"):
                fence = None
        else:
            in_code = False
        yield Line(number=number, start=offset, text=line, raw=raw, in_code=in_code)
        offset += len(raw)


def code_blocks(text: str) -> list[CodeBlock]:
    """Find fenced code blocks.

    Args:
        text: Answer text

    Returns:
        Code blocks in order of appearance; an unterminated block runs to the end
    """
    blocks: list[CodeBlock] = []
    current: dict | None = None
    for line in iter_lines(text):
        if current is None:
            match = FENCE_OPEN.match(line.text)
            if match:
                current = {
                    "start": line.start,
                    "opening": line.raw,
                    "fence": match.group(1),
                    "info": match.group(2).strip(),
                    "body": [],
                }
            continue
        stripped = line.text.strip()
        if stripped.startswith(current["fence"]) and not stripped.strip("`"):
            blocks.append(_make_block(current, closed=True, end=line.start + len(line.raw)))
            current = None
        else:
            current["body"].append(line.text)
    if current is not None:
        blocks.append(_make_block(current, closed=False, end=len(text)))
    return blocks


def _make_block(state: dict, closed: bool, end: int) -> CodeBlock:
    return CodeBlock(
        start=state["start"],
        opening=state["opening"],
        fence=state["fence"],
        info=state["info"],
        body="\n".join(state["body"]),
        closed=closed,
        end=end,
    )


def split_cells(row: str) -> list[str]:
    """Split a table row into trimmed cells."""
    inner = row.strip()
    if inner.startswith("|"):
        inner = inner[1:]
    if inner.endswith("|"):
        inner = inner[:-1]
    return [cell.strip() for cell in inner.split("|")]


def tables(text: str) -> list[Table]:
    """Find markdown tables (a row followed by a separator row)."""
    lines = [line for line in iter_lines(text)]
    found: list[Table] = []
    i = 0
    while i < len(lines) - 1:
        header, separator = lines[i], lines[i + 1]
        if (
            not header.in_code
            and not separator.in_code
            and TABLE_ROW.match(header.text)
            and TABLE_SEPARATOR.match(separator.text)
        ):
            rows: list[list[str]] = []
            row_starts: list[int] = []
            j = i + 2
            while j < len(lines) and not lines[j].in_code and TABLE_ROW.match(lines[j].text):
                rows.append(split_cells(lines[j].text))
                row_starts.append(lines[j].start)
                j += 1
            found.append(
                Table(
                    start=header.start,
                    header=split_cells(header.text),
                    separator=split_cells(separator.text),
                    rows=rows,
                    row_starts=row_starts,
                )
            )
            i = j
        else:
            i += 1
    return found


def has_table_row(text: str) -> bool:
    """Check for pipe-delimited rows outside code, with or without a separator."""
    return any(not line.in_code and TABLE_ROW.match(line.text) for line in iter_lines(text))


def list_items(text: str) -> list[ListItem]:
    """Find list items outside code blocks."""
    items: list[ListItem] = []
    for line in iter_lines(text):
        if line.in_code or TABLE_SEPARATOR.match(line.text):
            continue
        match = LIST_ITEM.match(line.text)
        if match:
            items.append(
                ListItem(
                    start=line.start + match.start(2),
                    line_start=line.start,
                    indent=match.group(1),
                    marker=match.group(2),
                    content=match.group(3).strip(),
                )
            )
    return items


def headings(text: str) -> list[tuple[int, str]]:
    """Find headings and bold labels outside code blocks.

    Returns:
        (offset, title) pairs
    """
    found = []
    for line in iter_lines(text):
        if line.in_code:
            continue
        match = HEADING.match(line.text) or BOLD_LABEL.match(line.text)
        if match:
            found.append((line.start, match.group(1).strip()))
    return found


def heading_sections(text: str) -> list[HeadingSection]:
    """Split the answer at headings and bold labels."""
    found = headings(text)
    sections = []
    for i, (start, title) in enumerate(found):
        line_end = text.find("\n", start)
        body_start = len(text) if line_end == -1 else line_end + 1
        end = found[i + 1][0] if i + 1 < len(found) else len(text)
        sections.append(HeadingSection(title=title, start=start, body_start=body_start, end=end))
    return sections


def items_between(items: list[ListItem], start: int, end: int) -> list[ListItem]:
    """List items whose line starts inside [start, end)."""
    return [item for item in items if start <= item.line_start < end]


def prose_lines(text: str) -> list[Line]:
    """Lines of plain text: not code, headings, lists or tables."""
    return [
        line
        for line in iter_lines(text)
        if line.text.strip()
        and not line.in_code
        and not HEADING.match(line.text)
        and not LIST_ITEM.match(line.text)
        and not TABLE_ROW.match(line.text)
    ]
