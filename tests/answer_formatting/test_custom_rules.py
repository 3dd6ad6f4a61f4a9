"""Tests for pattern rule evaluation."""

import logging

from answer_formatting.models import FixType, Rule, RuleKind, Severity
from answer_formatting.rules import RuleEvaluator
from answer_formatting.text_index import TextIndex


def run(answer, *rules):
    return RuleEvaluator().validate(answer, TextIndex(answer), rules)


class TestRequiredSection:
    """Tests for requiredSection rules."""

    rule = Rule(id="summary", kind=RuleKind.REQUIRED_SECTION, value="Summary")

    def test_heading_satisfies(self):
        assert run("Intro\n\n## Summary\nAll good.", self.rule) == []

    def test_bold_label_satisfies(self):
        assert run("**Summary**: all good", self.rule) == []

    def test_missing_section(self):
        issues = run("Intro only", self.rule)
        assert [i.rule for i in issues] == ["summary"]
        assert issues[0].severity == Severity.ERROR


class TestRegexRules:
    """Tests for regexPresent and regexAbsent rules."""

    def test_regex_present(self):
        rule = Rule(id="has-link", kind=RuleKind.REGEX_PRESENT, value=r"https?://", error_message="Add a link")
        assert run("See https://example.com", rule) == []
        issues = run("No links", rule)
        assert issues[0].message == "Add a link"

    def test_regex_absent_locates_match(self):
        rule = Rule(id="no-todo", kind=RuleKind.REGEX_ABSENT, value=r"TODO", severity=Severity.WARNING)
        issues = run("Line one\nStill TODO here", rule)
        assert issues[0].location.line == 2
        assert issues[0].location.column == 7
        assert issues[0].fix is None

    def test_regex_absent_replacement_fix(self):
        rule = Rule(id="no-click-here", kind=RuleKind.REGEX_ABSENT, value=r"click here", replacement="see")
        answer = "Please click here for docs"
        fix = run(answer, rule)[0].fix
        assert fix.type == FixType.REPLACE
        assert answer[fix.start : fix.end] == fix.target == "click here"
        assert fix.replacement == "see"

    def test_regex_absent_empty_replacement_deletes(self):
        rule = Rule(id="no-filler", kind=RuleKind.REGEX_ABSENT, value=r"basically ", replacement="")
        fix = run("It is basically done", rule)[0].fix
        assert fix.type == FixType.DELETE


class TestMinLength:
    """Tests for minLength rules."""

    def test_min_length_ignores_surrounding_whitespace(self):
        rule = Rule(id="long", kind=RuleKind.MIN_LENGTH, value=10, description="Say more")
        issues = run("   short    ", rule)
        assert issues[0].message == "Say more"
        assert issues[0].hint == "Address the issue: Say more"
        assert run("long enough text", rule) == []


class TestCustomPredicate:
    """Tests for customPredicate rules and fail-open behavior."""

    def test_predicate_result(self):
        rule = Rule(id="mentions-python", kind=RuleKind.CUSTOM, predicate=lambda t: "python" in t.lower())
        assert run("Python is great", rule) == []
        assert run("Ruby is great", rule)[0].rule == "mentions-python"

    def test_raising_predicate_is_info(self, caplog):
        def broken(text):
            raise ZeroDivisionError("division by zero")

        rule = Rule(id="broken", kind=RuleKind.CUSTOM, predicate=broken)
        with caplog.at_level(logging.WARNING):
            issues = run("anything", rule)

        assert len(issues) == 1
        assert issues[0].severity == Severity.INFO
        assert "division by zero" in issues[0].message
        assert "could not be evaluated" in caplog.text

    def test_missing_predicate_is_info(self):
        rule = Rule(id="empty", kind=RuleKind.CUSTOM)
        assert run("anything", rule)[0].severity == Severity.INFO

    def test_bad_regex_is_info(self):
        rule = Rule(id="bad-regex", kind=RuleKind.REGEX_PRESENT, value="(unclosed")
        assert run("anything", rule)[0].severity == Severity.INFO

    def test_other_rules_still_run(self):
        broken = Rule(id="broken", kind=RuleKind.CUSTOM)
        failing = Rule(id="long", kind=RuleKind.MIN_LENGTH, value=100)
        issues = run("short", broken, failing)
        assert [i.rule for i in issues] == ["broken", "long"]
