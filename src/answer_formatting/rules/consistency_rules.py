"""Cross-language consistency checks for answers with several code examples.

An answer that shows the same idea in, say, Python and JavaScript should keep
the examples comparable: similar structure and naming, explanations written
the same way, and each example clearly separated from the next.
"""

import re
from dataclasses import dataclass
from enum import Enum
from itertools import combinations

from .. import constants as c
from .markdown import code_blocks

# Language -> patterns whose first group is a declared name
VARIABLE_PATTERNS: dict[str, tuple[re.Pattern, ...]] = {
    "javascript": (
        re.compile(r"\b(?:var|let|const)\s+([A-Za-z_$][\w$]*)"),
        re.compile(r"([A-Za-z_$][\w$]*)\s*=(?!=)"),
    ),
    "typescript": (
        re.compile(r"\b(?:var|let|const)\s+([A-Za-z_$][\w$]*)"),
        re.compile(r"([A-Za-z_$][\w$]*)\s*:"),
    ),
    "python": (re.compile(r"^\s*([A-Za-z_]\w*)\s*=(?!=)", re.MULTILINE),),
    "java": (
        re.compile(r"\b(?:int|String|boolean|double|float|long|char)\s+([A-Za-z_$][\w$]*)"),
        re.compile(r"([A-Za-z_$][\w$]*)\s*=(?!=)"),
    ),
    "csharp": (
        re.compile(r"\b(?:int|string|bool|double|float|long|char|var)\s+([A-Za-z_]\w*)"),
        re.compile(r"([A-Za-z_]\w*)\s*=(?!=)"),
    ),
}

FUNCTION_PATTERNS: dict[str, tuple[re.Pattern, ...]] = {
    "javascript": (
        re.compile(r"\bfunction\s+([A-Za-z_$][\w$]*)"),
        re.compile(r"([A-Za-z_$][\w$]*)\s*=\s*(?:function\b|\([^)]*\)\s*=>)"),
    ),
    "typescript": (
        re.compile(r"\bfunction\s+([A-Za-z_$][\w$]*)"),
        re.compile(r"([A-Za-z_$][\w$]*)\s*=\s*(?:function\b|\([^)]*\)\s*=>)"),
    ),
    "python": (
        re.compile(r"\bdef\s+([A-Za-z_]\w*)"),
        re.compile(r"([A-Za-z_]\w*)\s*=\s*lambda\b"),
    ),
    "java": (re.compile(r"\b(?:public|private|protected)\s+(?:static\s+)?[\w<>\[\]]+\s+([A-Za-z_$][\w$]*)\s*\("),),
    "csharp": (re.compile(r"\b(?:public|private|protected)\s+(?:static\s+)?[\w<>\[\]]+\s+([A-Za-z_]\w*)\s*\("),),
}

IGNORED_NAMES = frozenset({"console", "print", "log", "true", "false", "null", "undefined", "None"})

LANGUAGE_TERMS: dict[str, tuple[str, ...]] = {
    "javascript": ("javascript", "js", "node", "npm", "react", "vue", "angular"),
    "python": ("python", "py", "pip", "django", "flask", "pandas"),
    "java": ("java", "jvm", "spring", "maven", "gradle"),
    "csharp": ("c#", "csharp", ".net", "dotnet", "visual studio"),
    "typescript": ("typescript", "ts", "angular", "type"),
}

GENERIC_TRANSITIONS = ("alternatively", "similarly", "in contrast")

HAS_CLASS = re.compile(r"\bclass\s+\w+")
HAS_FUNCTION = re.compile(r"\b(?:function|def|func|fn)\s+\w+|\b(?:public|private|protected)\s+\w+|=>")
HAS_LOOP = re.compile(r"\b(?:for|while|foreach)\b")
HAS_CONDITIONAL = re.compile(r"\b(?:if|switch|case|match)\b")

CAMEL_CASE = re.compile(r"^[a-z][a-zA-Z0-9]*$")
SNAKE_CASE = re.compile(r"^[a-z][a-z0-9_]*$")
PASCAL_CASE = re.compile(r"^[A-Z][a-zA-Z0-9]*$")


class IssueKind(Enum):
    """What a consistency issue is about."""

    COMPARISON = "comparison"  # Two examples differ in structure, naming or complexity
    EXPLANATION = "explanation"  # Explanations are missing or written inconsistently
    SEPARATION = "separation"  # Adjacent examples are not separated


@dataclass(frozen=True)
class CodeStructure:
    has_classes: bool
    has_functions: bool
    has_loops: bool
    has_conditionals: bool
    line_count: int

    @property
    def complexity(self) -> int:
        """Rough complexity: constructs used plus one point per five lines."""
        return (
            2 * self.has_classes
            + 2 * self.has_functions
            + self.has_loops
            + self.has_conditionals
            + self.line_count // 5
        )


@dataclass(frozen=True)
class CodeExample:
    """A non-empty fenced code block and what was extracted from it."""

    language: str
    code: str
    start: int
    end: int
    variables: tuple[str, ...]
    functions: tuple[str, ...]
    structure: CodeStructure


@dataclass(frozen=True)
class LanguageComparison:
    language1: str
    language2: str
    differences: tuple[str, ...]

    @property
    def is_consistent(self) -> bool:
        return not self.differences

    @property
    def similarity(self) -> float:
        """1.0 for identical shape, dropping by 0.1 per difference."""
        return max(0.0, 1 - len(self.differences) / 10)


@dataclass(frozen=True)
class ConsistencyIssue:
    kind: IssueKind
    message: str
    suggestion: str
    offset: int | None = None


@dataclass(frozen=True)
class ConsistencyResult:
    """Outcome of a consistency check.

    ``suggestions`` also carries advice that is not an issue, such as adding a
    transition sentence between examples in different languages.
    """

    score: int
    issues: tuple[ConsistencyIssue, ...] = ()
    suggestions: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()
    comparisons: tuple[LanguageComparison, ...] = ()

    @property
    def is_consistent(self) -> bool:
        return not self.issues


def naming_style(names: tuple[str, ...]) -> str:
    """Dominant naming style: camelCase, snake_case, PascalCase, mixed or none."""
    if not names:
        return "none"
    counts = {
        "camelCase": sum(1 for n in names if CAMEL_CASE.match(n)),
        "snake_case": sum(1 for n in names if SNAKE_CASE.match(n) and "_" in n),
        "PascalCase": sum(1 for n in names if PASCAL_CASE.match(n)),
    }
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    if ranked[0][1] > ranked[1][1]:
        return ranked[0][0]
    return "mixed"


def _names(code: str, patterns: tuple[re.Pattern, ...]) -> tuple[str, ...]:
    found: dict[str, None] = {}
    for pattern in patterns:
        for match in pattern.finditer(code):
            name = match.group(1)
            if name and name not in IGNORED_NAMES:
                found.setdefault(name, None)
    return tuple(found)


def _paragraphs(text: str) -> list[str]:
    return [p.strip() for p in re.split(r"\n\s*\n", text) if p.strip()]


class LanguageConsistencyChecker:
    """Checks that code examples in different languages stay consistent."""

    def extract_examples(self, answer: str) -> list[CodeExample]:
        """Find the non-empty code examples in an answer.

        Mermaid diagrams are not code examples and are skipped.
        """
        examples = []
        for block in code_blocks(answer):
            code = block.body.strip()
            language = (block.language or "unknown").lower()
            if not code or language == "mermaid":
                continue
            variables = VARIABLE_PATTERNS.get(language, VARIABLE_PATTERNS["javascript"])
            functions = FUNCTION_PATTERNS.get(language, FUNCTION_PATTERNS["javascript"])
            examples.append(
                CodeExample(
                    language=language,
                    code=code,
                    start=block.start,
                    end=block.end,
                    variables=_names(code, variables),
                    functions=_names(code, functions),
                    structure=CodeStructure(
                        has_classes=bool(HAS_CLASS.search(code)),
                        has_functions=bool(HAS_FUNCTION.search(code)),
                        has_loops=bool(HAS_LOOP.search(code)),
                        has_conditionals=bool(HAS_CONDITIONAL.search(code)),
                        line_count=len([line for line in code.split("\n") if line.strip()]),
                    ),
                )
            )
        return examples

    def check_consistency(self, answer: str) -> ConsistencyResult:
        """Check every pair of code examples and the text around them.

        Args:
            answer: Answer text

        Returns:
            ConsistencyResult; answers with fewer than two examples are
            trivially consistent with score 100
        """
        examples = self.extract_examples(answer)
        languages = tuple(e.language for e in examples)
        if len(examples) < 2:
            return ConsistencyResult(score=100, languages=languages)

        issues: list[ConsistencyIssue] = []
        suggestions: list[str] = []

        comparisons = tuple(self.compare(first, second) for first, second in combinations(examples, 2))
        for comparison in comparisons:
            if not comparison.is_consistent:
                issues.append(
                    ConsistencyIssue(
                        kind=IssueKind.COMPARISON,
                        message=(
                            f"Inconsistency between {comparison.language1} and {comparison.language2}: "
                            + ", ".join(comparison.differences)
                        ),
                        suggestion=(
                            f"Keep the {comparison.language1} and {comparison.language2} examples "
                            "consistent in structure and functionality"
                        ),
                    )
                )

        issues.extend(self._explanation_issues(answer, examples))
        separation, transitions = self._separation(answer, examples)
        issues.extend(separation)

        suggestions.extend(issue.suggestion for issue in issues)
        suggestions.extend(transitions)
        score = max(0, 100 - c.CONSISTENCY_PENALTY * len(issues))
        return ConsistencyResult(
            score=score,
            issues=tuple(issues),
            suggestions=tuple(dict.fromkeys(suggestions)),
            languages=languages,
            comparisons=comparisons,
        )

    def compare(self, first: CodeExample, second: CodeExample) -> LanguageComparison:
        """Compare structure, naming and complexity of two examples."""
        a, b = first.structure, second.structure
        names = (first.language, second.language)
        differences = []

        for label, left, right in (
            ("class usage", a.has_classes, b.has_classes),
            ("function usage", a.has_functions, b.has_functions),
            ("loop usage", a.has_loops, b.has_loops),
            ("conditional usage", a.has_conditionals, b.has_conditionals),
        ):
            if left != right:
                differences.append(f"{label} differs ({names[0]}: {left}, {names[1]}: {right})")

        longest = max(a.line_count, b.line_count)
        if longest and abs(a.line_count - b.line_count) / longest > 0.5:
            differences.append(
                f"significant line count difference ({names[0]}: {a.line_count}, {names[1]}: {b.line_count})"
            )

        if len(first.variables) != len(second.variables):
            differences.append(
                f"different number of variables ({names[0]}: {len(first.variables)}, "
                f"{names[1]}: {len(second.variables)})"
            )
        style_a, style_b = naming_style(first.variables), naming_style(second.variables)
        if first.variables and second.variables and style_a != style_b:
            differences.append(f"different naming styles ({names[0]}: {style_a}, {names[1]}: {style_b})")
        if len(first.functions) != len(second.functions):
            differences.append(
                f"different number of functions ({names[0]}: {len(first.functions)}, "
                f"{names[1]}: {len(second.functions)})"
            )

        if abs(a.complexity - b.complexity) > 2:
            differences.append(
                f"significant complexity difference ({names[0]}: {a.complexity}, {names[1]}: {b.complexity})"
            )

        return LanguageComparison(language1=names[0], language2=names[1], differences=tuple(differences))

    def _explanation_issues(self, answer: str, examples: list[CodeExample]) -> list[ConsistencyIssue]:
        explanations = []
        for i, example in enumerate(examples):
            previous_end = examples[i - 1].end if i > 0 else 0
            next_start = examples[i + 1].start if i + 1 < len(examples) else len(answer)
            before = _paragraphs(answer[previous_end : example.start])
            after = _paragraphs(answer[example.end : next_start])
            text = " ".join(p for p in (before[-1] if before else "", after[0] if after else "") if p)
            explanations.append((example, text))

        issues = []
        specific = [self._mentions_language(text, e.language) for e, text in explanations]
        if any(specific) and not all(specific):
            issues.append(
                ConsistencyIssue(
                    kind=IssueKind.EXPLANATION,
                    message=(
                        "Inconsistent explanation approach: some code examples have "
                        "language-specific explanations while others are generic"
                    ),
                    suggestion="Explain every example the same way, either all language-specific or all generic",
                )
            )

        missing = [e for e, text in explanations if len(text) < c.MIN_EXPLANATION_LENGTH]
        if missing:
            issues.append(
                ConsistencyIssue(
                    kind=IssueKind.EXPLANATION,
                    message=(
                        "Missing or insufficient explanations for "
                        f"{', '.join(e.language for e in missing)} examples"
                    ),
                    suggestion="Explain each code example in a sentence or two",
                    offset=missing[0].start,
                )
            )
        return issues

    def _separation(
        self, answer: str, examples: list[CodeExample]
    ) -> tuple[list[ConsistencyIssue], list[str]]:
        issues = []
        transitions = []
        for current, following in zip(examples, examples[1:]):
            between = answer[current.end : following.start]
            if not between.splitlines():
                issues.append(
                    ConsistencyIssue(
                        kind=IssueKind.SEPARATION,
                        message=(
                            f"Insufficient separation between {current.language} "
                            f"and {following.language} examples"
                        ),
                        suggestion="Separate examples with a blank line or a sentence of text",
                        offset=following.start,
                    )
                )
            if current.language != following.language and not self._has_transition(between, following.language):
                transitions.append(
                    f"Consider adding transition text before the {following.language} example "
                    f'(e.g., "In {following.language}:")'
                )
        return issues, transitions

    def _mentions_language(self, text: str, language: str) -> bool:
        lowered = text.lower()
        return any(
            re.search(rf"(?<!\w){re.escape(term)}(?!\w)", lowered) for term in LANGUAGE_TERMS.get(language, ())
        )

    def _has_transition(self, text: str, language: str) -> bool:
        lowered = text.lower()
        phrases = (
            f"in {language}",
            f"{language} equivalent",
            f"{language} version",
            f"using {language}",
            f"{language}:",
            *GENERIC_TRANSITIONS,
        )
        return any(phrase in lowered for phrase in phrases)
