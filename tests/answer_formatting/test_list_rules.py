"""Tests for list validation rules."""

from answer_formatting.models import Constraint, Section, SectionFormat, Severity
from answer_formatting.rules import ListItemValidator
from answer_formatting.text_index import TextIndex


def list_section(max_items=None):
    constraints = () if max_items is None else (Constraint(type="max-items", value=max_items),)
    return Section(name="Items", format=SectionFormat.LIST, required=True, constraints=constraints)


def run(answer, section=None):
    return ListItemValidator().validate(answer, TextIndex(answer), section or list_section())


def test_accepts_dash_and_numbered_lists():
    """Test that dash bullets and numbered items pass."""
    assert run("- one\n- two\n    - nested\n1. three\n") == []


def test_missing_list_is_error():
    """Test that a list section needs list items."""
    issues = run("No list at all.")
    assert [i.rule for i in issues] == ["list-required"]
    assert issues[0].severity == Severity.ERROR


def test_list_in_code_block_does_not_count():
    """Test that items inside fenced code are ignored."""
    assert run("```\n- not a list\n```")[0].rule == "list-required"


def test_asterisk_and_plus_bullets():
    """Test the bullet style info violations and fixes."""
    answer = "* one\n  + two\n- three"
    issues = run(answer)

    assert [i.rule for i in issues] == ["list-bullet-style", "list-bullet-style"]
    assert all(i.severity == Severity.INFO for i in issues)
    second = issues[1]
    assert second.location.line == 2
    assert second.location.column == 3
    assert answer[second.fix.start : second.fix.end] == "+"
    assert second.fix.replacement == "-"


def test_bold_line_is_not_a_bullet():
    """Test that bold text is not mistaken for an asterisk bullet."""
    assert run("**Key point**\n- item") == []


def test_max_items_counts_top_level_only():
    """Test the max-items info violation."""
    answer = "- a\n    - a1\n    - a2\n- b\n- c\n"
    assert run(answer, list_section(max_items=3)) == []

    issues = run(answer + "- d\n", list_section(max_items=3))
    assert [i.rule for i in issues] == ["list-max-items"]
    assert issues[0].location.line == 6
