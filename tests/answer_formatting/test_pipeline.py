"""Tests for the end-to-end formatting pipeline."""

import pytest

from answer_formatting.errors import PatternNotFound
from answer_formatting.metrics import MetricsCollector
from answer_formatting.overrides import OverrideStore
from answer_formatting.patterns import PatternLibrary
from answer_formatting.pipeline import FormattingPipeline

NO_TABLE = "This is a comparison question but has no table."
COMPARISON_QUESTION = "What is the difference between TCP vs UDP?"


@pytest.fixture
def library():
    return PatternLibrary.with_defaults()


@pytest.fixture
def metrics(library):
    return MetricsCollector(library=library)


def test_detects_validates_and_fixes(library, metrics):
    """Test auto-formatting of a failing but fixable answer."""
    pipeline = FormattingPipeline(library, metrics=metrics, auto_format=True)
    result = pipeline.process("q1", COMPARISON_QUESTION, NO_TABLE, channel="help")

    assert result.pattern.id == "comparison-table"
    assert result.formatted_answer.startswith(NO_TABLE)
    assert "| Feature | Option A | Option B |" in result.formatted_answer
    assert result.validation_result.is_valid is True
    assert result.accepted is True
    assert result.metrics_recorded is True

    snapshot = metrics.get_metrics()
    assert snapshot.total_validations == 2
    assert snapshot.auto_fix_attempts == 1
    assert snapshot.auto_fix_successes == 1
    assert snapshot.validation_pass_rate == 0
    assert snapshot.pattern_usage["comparison-table"].detection_count == 1
    assert snapshot.channel_breakdown[0].channel == "help"


def test_without_auto_format(library, metrics):
    """Test that a failing answer is rejected when auto-format is off."""
    pipeline = FormattingPipeline(library, metrics=metrics, auto_format=False)
    result = pipeline.process("q1", COMPARISON_QUESTION, NO_TABLE)

    assert result.formatted_answer is None
    assert result.validation_result.is_valid is False
    assert result.accepted is False
    assert metrics.get_metrics().auto_fix_attempts == 0


def test_auto_format_follows_env(library, monkeypatch):
    """Test the FORMAT_AUTO_FIX default."""
    monkeypatch.setenv("FORMAT_AUTO_FIX", "false")
    assert FormattingPipeline(library).auto_format is False
    monkeypatch.setenv("FORMAT_AUTO_FIX", "true")
    assert FormattingPipeline(library).auto_format is True


def test_override_accepts_failing_answer(library):
    """Test that an override suppresses rejection without changing the score."""
    overrides = OverrideStore()
    overrides.add_override("q1", "Reviewed by the docs team")
    pipeline = FormattingPipeline(library, overrides=overrides, auto_format=False)

    result = pipeline.process("q1", COMPARISON_QUESTION, NO_TABLE)
    baseline = FormattingPipeline(library, auto_format=False).process("q1", COMPARISON_QUESTION, NO_TABLE)

    assert result.overridden is True
    assert result.accepted is True
    assert result.validation_result == baseline.validation_result
    assert result.validation_result.is_valid is False


def test_override_pattern_wins(library):
    """Test that an override pattern replaces the detected one."""
    overrides = OverrideStore()
    overrides.add_override("q1", "Better answered as a definition", override_pattern="definition")
    pipeline = FormattingPipeline(library, overrides=overrides, auto_format=False)

    result = pipeline.process("q1", COMPARISON_QUESTION, "TCP is a reliable transport protocol.")
    assert result.pattern.id == "definition"
    assert result.validation_result.is_valid is True


def test_pattern_hint_skips_detection(library):
    """Test the pattern id hint."""
    pipeline = FormattingPipeline(library, auto_format=False)
    result = pipeline.process("q1", "Anything at all", "- one\n- two", pattern_id_hint="list")
    assert result.pattern.id == "list"
    assert result.validation_result.is_clean


def test_unknown_hint_raises(library):
    """Test that an unknown hint is a usage error."""
    pipeline = FormattingPipeline(library)
    with pytest.raises(PatternNotFound):
        pipeline.process("q1", "question", "answer", pattern_id_hint="nope")


def test_no_pattern_is_vacuously_valid(library, metrics):
    """Test questions no pattern applies to."""
    pipeline = FormattingPipeline(library, metrics=metrics)
    result = pipeline.process("q1", "Tell me a joke", "Why did the chicken cross the road?")

    assert result.pattern is None
    assert result.validation_result.score == 100
    assert result.accepted is True
    assert result.metrics_recorded is False
    assert metrics.get_metrics().total_validations == 0


def test_without_metrics_collector(library):
    """Test that metrics are optional."""
    result = FormattingPipeline(library, auto_format=True).process("q1", COMPARISON_QUESTION, NO_TABLE)
    assert result.metrics_recorded is False
    assert result.formatted_answer is not None


def test_scoring_follows_env(library, monkeypatch):
    """Test that FORMAT_* penalties and threshold reach the default validator."""
    answer = "```\nprint('hi')\n```"
    monkeypatch.setenv("FORMAT_WARNING_PENALTY", "40")
    result = FormattingPipeline(library, auto_format=False).process("q1", "q", answer, pattern_id_hint="code-example")
    assert result.validation_result.score == 60
    assert result.accepted is False

    monkeypatch.setenv("FORMAT_PASS_THRESHOLD", "50")
    result = FormattingPipeline(library, auto_format=False).process("q1", "q", answer, pattern_id_hint="code-example")
    assert result.validation_result.is_valid is True
