"""Tests for cross-language code consistency checks."""

import pytest

from answer_formatting.models import Constraint, Section, SectionFormat, Severity
from answer_formatting.rules import CodeBlockValidator, LanguageConsistencyChecker
from answer_formatting.rules.consistency_rules import IssueKind, naming_style
from answer_formatting.text_index import TextIndex

CONSISTENT = (
    "Here is the Python version of the greeting helper:\n\n"
    "```python\ndef greet(name):\n    return name\n```\n"
    "In javascript, the greeting helper looks the same:\n\n"
    "```javascript\nfunction greet(name) {\n  return name;\n}\n```\n"
)

# Adjacent blocks with different shapes and no text at all
CRAMPED = (
    "```python\nclass Counter:\n    def count(self, items):\n        for item in items:\n            print(item)\n```\n"
    "```javascript\nconsole.log(1);\n```\n"
)


@pytest.fixture
def checker():
    return LanguageConsistencyChecker()


class TestLanguageConsistencyChecker:
    """Tests for LanguageConsistencyChecker."""

    def test_single_example_is_consistent(self, checker):
        """Test that one example has nothing to compare against."""
        result = checker.check_consistency("Example:\n\n```python\nx = 1\n```")
        assert result.score == 100
        assert result.is_consistent
        assert result.languages == ("python",)

    def test_empty_and_diagram_blocks_are_skipped(self, checker):
        """Test which blocks count as code examples."""
        answer = "```\n```\n\n```mermaid\ngraph TD\n```\n\n```\nx = 1\n```"
        examples = checker.extract_examples(answer)
        assert [e.language for e in examples] == ["unknown"]

    def test_matching_examples(self, checker):
        """Test two explained examples with the same shape."""
        result = checker.check_consistency(CONSISTENT)

        assert result.languages == ("python", "javascript")
        assert result.comparisons[0].is_consistent
        assert result.comparisons[0].similarity == 1.0
        assert result.is_consistent
        assert result.score == 100
        assert result.suggestions == ()

    def test_cramped_examples(self, checker):
        """Test differing structure, missing explanations and no separation."""
        result = checker.check_consistency(CRAMPED)

        assert [i.kind for i in result.issues] == [
            IssueKind.COMPARISON,
            IssueKind.EXPLANATION,
            IssueKind.SEPARATION,
        ]
        assert result.score == 55
        assert not result.is_consistent
        assert "class usage differs (python: True, javascript: False)" in result.comparisons[0].differences
        assert result.issues[2].offset == CRAMPED.index("```javascript")
        assert result.suggestions[-1].startswith("Consider adding transition text before the javascript example")

    def test_mixed_explanation_approach(self, checker):
        """Test one language-specific explanation next to a generic one."""
        answer = (
            "In Python the helper returns its argument unchanged.\n\n"
            "```python\ndef greet(name):\n    return name\n```\n\n"
            "The same helper, returning its argument unchanged.\n\n"
            "```ruby\ndef greet(name)\n  name\nend\n```\n"
        )
        result = checker.check_consistency(answer)
        messages = [i.message for i in result.issues if i.kind == IssueKind.EXPLANATION]
        assert any(m.startswith("Inconsistent explanation approach") for m in messages)

    @pytest.mark.parametrize(
        "names, style",
        [
            ((), "none"),
            (("userName", "itemCount"), "camelCase"),
            (("user_name", "item_count"), "snake_case"),
            (("UserName", "ItemCount"), "PascalCase"),
            (("UserName", "user_name"), "mixed"),
        ],
    )
    def test_naming_style(self, names, style):
        """Test dominant naming style detection."""
        assert naming_style(names) == style


class TestCodeValidatorConsistency:
    """Tests for the language-consistency constraint on code sections."""

    SECTION = Section(
        name="Code",
        format=SectionFormat.CODE,
        required=True,
        constraints=(Constraint(type="language-consistency", value=True),),
    )

    def test_issues_become_violations(self):
        """Test rule ids, severities and locations of consistency violations."""
        issues = CodeBlockValidator().validate(CRAMPED, TextIndex(CRAMPED), self.SECTION)

        assert [(i.rule, i.severity) for i in issues] == [
            ("code-consistency", Severity.INFO),
            ("code-explanation", Severity.INFO),
            ("code-separation", Severity.WARNING),
        ]
        assert issues[0].location is None
        assert issues[2].location.line == 7
        assert all(i.fix is None and i.hint for i in issues)

    def test_matching_examples_pass(self):
        """Test that consistent examples add no violations."""
        assert CodeBlockValidator().validate(CONSISTENT, TextIndex(CONSISTENT), self.SECTION) == []

    def test_checks_need_the_constraint(self):
        """Test that plain code sections skip consistency checks."""
        section = Section(name="Code", format=SectionFormat.CODE, required=True)
        assert CodeBlockValidator().validate(CRAMPED, TextIndex(CRAMPED), section) == []
