"""Tests for the command-line interface."""

import json
import logging

import pytest

from answer_formatting.cli import main


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture(autouse=True)
def default_patterns(monkeypatch):
    monkeypatch.delenv("FORMAT_PATTERNS_PATH", raising=False)


def write(tmp_path, text, name="answer.md"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_validate_valid_answer(tmp_path):
    """Test exit code 0 for a valid answer."""
    answer = write(tmp_path, "```python\nprint('hi')\n```\n")
    assert main(["validate", "--answer", answer, "--pattern", "code-example"]) == 0


def test_validate_invalid_answer_with_detection(tmp_path):
    """Test exit code 1 when the detected pattern fails."""
    answer = write(tmp_path, "No table here.")
    code = main(["validate", "--answer", answer, "--question", "Compare TCP versus UDP"])
    assert code == 1


def test_validate_json_output_with_fix(tmp_path):
    """Test JSON results including the formatted answer."""
    answer = write(tmp_path, "```\nprint('hi')\n```\n")
    output = tmp_path / "result.json"
    code = main(
        [
            "validate",
            "--answer",
            answer,
            "--pattern",
            "code-example",
            "--fix",
            "--format",
            "json",
            "--output",
            str(output),
        ]
    )

    data = json.loads(output.read_text())
    assert code == 0
    assert data["score"] == 100
    assert data["formatted_answer"].startswith("```python\n")


def test_validate_console_fix_writes_formatted_answer(tmp_path):
    """Test that --fix with --output saves the formatted answer."""
    answer = write(tmp_path, "* one\n* two\n")
    output = tmp_path / "fixed.md"
    code = main(["validate", "--answer", answer, "--pattern", "list", "--fix", "--output", str(output)])
    assert code == 0
    assert output.read_text() == "- one\n- two\n"


def test_validate_requires_pattern_or_question(tmp_path):
    """Test the usage error exit code."""
    answer = write(tmp_path, "text")
    assert main(["validate", "--answer", answer]) == 2


def test_unknown_pattern_exits_with_error(tmp_path, capsys):
    """Test that usage errors are reported, not raised."""
    answer = write(tmp_path, "text")
    assert main(["validate", "--answer", answer, "--pattern", "nope"]) == 1
    assert "nope" in capsys.readouterr().err


def test_missing_answer_file(tmp_path):
    """Test that unreadable files are reported."""
    assert main(["validate", "--answer", str(tmp_path / "missing.md"), "--pattern", "list"]) == 1


def test_detect(capsys):
    """Test the detect command."""
    assert main(["detect", "How to set up a virtualenv"]) == 0
    assert "process" in capsys.readouterr().out
    assert main(["detect", "Tell me a joke"]) == 1


def test_patterns_export_and_reload(tmp_path, capsys):
    """Test listing, exporting and loading patterns from a file."""
    exported = tmp_path / "patterns.json"
    assert main(["patterns", "--export", str(exported)]) == 0
    assert "comparison-table" in capsys.readouterr().out
    assert len(json.loads(exported.read_text())["patterns"]) == 9

    answer = write(tmp_path, "- one\n")
    assert main(["--patterns", str(exported), "validate", "--answer", answer, "--pattern", "list"]) == 0


def test_patterns_path_from_env(tmp_path, monkeypatch):
    """Test FORMAT_PATTERNS_PATH."""
    patterns = write(tmp_path, json.dumps([{"id": "only", "name": "Only"}]), name="p.json")
    monkeypatch.setenv("FORMAT_PATTERNS_PATH", patterns)
    answer = write(tmp_path, "anything")
    assert main(["validate", "--answer", answer, "--pattern", "only"]) == 0
    assert main(["validate", "--answer", answer, "--pattern", "list"]) == 1
