"""Tests for table validation rules."""

from answer_formatting.models import Constraint, FixType, Section, SectionFormat, Severity
from answer_formatting.rules import TableValidator
from answer_formatting.text_index import TextIndex


def table_section(*constraints):
    return Section(
        name="Comparison",
        format=SectionFormat.TABLE,
        required=True,
        constraints=tuple(Constraint(type=t, value=v) for t, v in constraints),
    )


def run(answer, section):
    return TableValidator().validate(answer, TextIndex(answer), section)


def test_accepts_well_formed_table():
    """Test that a table with consistent rows passes."""
    answer = "| A | B | C |\n|---|:---:|---|\n| 1 | 2 | 3 |\n| 4 | 5 | 6 |\n"
    issues = run(answer, table_section(("min-columns", 3), ("consistent-rows", True), ("min-data-rows", 2)))
    assert issues == []


def test_missing_table_is_error_with_skeleton_fix():
    """Test the missing-table error and its skeleton fix."""
    answer = "No table here."
    issues = run(answer, table_section())

    assert len(issues) == 1
    assert issues[0].rule == "table-required"
    assert issues[0].severity == Severity.ERROR
    fix = issues[0].fix
    assert fix.type == FixType.INSERT
    assert fix.start == fix.end == len(answer)
    assert fix.target == ""
    assert fix.replacement == (
        "\n\n| Feature | Option A | Option B |\n| --- | --- | --- |\n|  |  |  |\n"
    )


def test_skeleton_uses_column_hints():
    """Test that column hints shape the skeleton header."""
    issues = run("Text\n", table_section(("columns", ("Name", "Pros", "Cons"))))
    assert issues[0].fix.replacement.startswith("\n| Name | Pros | Cons |\n")


def test_skeleton_honours_min_columns():
    """Test that min-columns widens the default skeleton."""
    issues = run("Text\n\n", table_section(("min-columns", 4)))
    assert issues[0].fix.replacement.startswith("| Feature | Option A | Option B | Option C |")


def test_skeleton_fix_passes_table_check():
    """Test that applying the skeleton yields a detected table."""
    answer = "No table here."
    fix = run(answer, table_section())[0].fix
    fixed = answer[: fix.start] + fix.replacement
    assert run(fixed, table_section(("min-columns", 3))) == []


def test_no_fix_after_unterminated_code_block():
    """Test that no skeleton is offered when it would land inside code."""
    issues = run("```\nunterminated code", table_section())
    assert issues[0].rule == "table-required"
    assert issues[0].fix is None


def test_table_inside_code_block_is_ignored():
    """Test that tables in fenced code do not count."""
    answer = "```\n| A | B |\n| --- | --- |\n```\n"
    assert run(answer, table_section())[0].rule == "table-required"


def test_min_columns():
    """Test too few columns."""
    answer = "| A | B |\n| --- | --- |\n| 1 | 2 |\n"
    issues = run(answer, table_section(("min-columns", 3)))
    assert [i.rule for i in issues] == ["table-min-columns"]
    assert issues[0].location.line == 1


def test_inconsistent_rows():
    """Test rows with the wrong number of cells."""
    answer = "| A | B |\n| --- | --- |\n| 1 | 2 |\n| 3 |\n"
    issues = run(answer, table_section(("consistent-rows", True)))
    assert len(issues) == 1
    assert issues[0].rule == "table-inconsistent-rows"
    assert issues[0].location.line == 4


def test_min_data_rows_is_warning():
    """Test too few data rows."""
    answer = "| A | B |\n| --- | --- |\n| 1 | 2 |\n"
    issues = run(answer, table_section(("min-data-rows", 2)))
    assert [i.rule for i in issues] == ["table-min-data-rows"]
    assert issues[0].severity == Severity.WARNING
