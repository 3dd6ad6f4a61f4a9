"""Tests for process section validation rules."""

from answer_formatting.models import FixType, Section, SectionFormat, Severity
from answer_formatting.rules import ProcessValidator
from answer_formatting.text_index import TextIndex

STEPS = Section(name="Steps", format=SectionFormat.PROCESS, required=True)


def run(answer):
    return ProcessValidator().validate(answer, TextIndex(answer), STEPS)


def test_concrete_numbered_steps_pass():
    """Test that numbered action steps produce no violations."""
    answer = "1. Install the package\n2. Run `pytest`\n3. Check if it passes\n"
    assert run(answer) == []


def test_vague_steps_flagged():
    """Test vague phrasing without concrete steps."""
    answer = "1. The config should be correct\n2. You need to run the thing\n"
    issues = run(answer)

    assert [i.rule for i in issues] == ["process-vague-steps"]
    assert issues[0].severity == Severity.WARNING
    assert issues[0].location.line == 1
    assert issues[0].fix is None
    assert "numbered" in issues[0].hint


def test_code_block_counts_as_concrete():
    """Test that a command block offsets vague phrasing."""
    answer = "1. The server should be up\n\n```bash\ncurl localhost\n```\n"
    assert run(answer) == []


def test_missing_numbering_without_bullets():
    """Test prose-only steps."""
    issues = run("Just do the thing and then the other thing.")
    assert [i.rule for i in issues] == ["process-numbered-steps"]
    assert issues[0].fix is None


def test_bullets_get_numbering_fix():
    """Test the bullet-to-numbered rewrite fix."""
    answer = "Steps:\n\n- Install it\n  - with pip\n- Run it\n\nDone."
    issues = run(answer)

    assert [i.rule for i in issues] == ["process-numbered-steps"]
    fix = issues[0].fix
    assert fix.type == FixType.REFORMAT
    assert fix.target == "- Install it\n  - with pip\n- Run it"
    assert fix.replacement == "1. Install it\n  - with pip\n2. Run it"
    assert issues[0].location.line == 3


def test_gap_in_numbering():
    """Test a skipped step number and its renumbering fix."""
    answer = "1. Install it\n2. Run it\n4. Verify it\n"
    issues = run(answer)

    assert [i.rule for i in issues] == ["process-step-sequence"]
    assert issues[0].message == "Step numbered 4 should be 3"
    assert issues[0].location.line == 3
    fix = issues[0].fix
    assert fix.type == FixType.REPLACE
    assert (fix.target, fix.replacement) == ("4", "3")


def test_every_misnumbered_step_in_one_fix():
    """Test that one fix renumbers all out-of-sequence steps."""
    answer = "1. Run a\n3. Run b\n5. Run c"
    fix = run(answer)[0].fix
    assert fix.target == "3. Run b\n5"
    assert fix.replacement == "2. Run b\n3"


def test_restarted_numbering_is_accepted():
    """Test repeated 1. markers and lists that start over."""
    assert run("1. Run a\n1. Run b\n1. Run c") == []
    assert run("1. Run a\n2. Run b\n\nLater:\n\n1. Run c\n2. Run d") == []
