"""Data models for format patterns, validation results and fixes."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum


class Severity(Enum):
    """Severity levels for validation violations."""

    ERROR = "error"  # Blocks acceptance regardless of score
    WARNING = "warning"  # Likely problem (e.g., missing language tag)
    INFO = "info"  # Advisory (e.g., bullet style, failed rule evaluation)

    @property
    def rank(self) -> int:
        """Sort rank, most severe first."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.ERROR: 0, Severity.WARNING: 1, Severity.INFO: 2}


class SectionFormat(Enum):
    """Structural format a pattern section is expected to take."""

    TEXT = "text"
    LIST = "list"
    TABLE = "table"
    CODE = "code"
    DIAGRAM = "diagram"
    PROCESS = "process"
    PROS_CONS = "pros-cons"
    TROUBLESHOOTING = "troubleshooting"


class RuleKind(Enum):
    """Kinds of pattern rules; all but CUSTOM are pure data."""

    REQUIRED_SECTION = "requiredSection"
    REGEX_ABSENT = "regexAbsent"
    REGEX_PRESENT = "regexPresent"
    MIN_LENGTH = "minLength"
    CUSTOM = "customPredicate"


class FixType(Enum):
    """Kinds of mechanical edits."""

    INSERT = "insert"
    REPLACE = "replace"
    DELETE = "delete"
    REFORMAT = "reformat"


@dataclass(frozen=True)
class Constraint:
    """A named constraint on a section (e.g., min-columns=3)."""

    type: str
    value: object = True


@dataclass(frozen=True)
class Section:
    """A section an answer following a pattern is expected to contain."""

    name: str
    format: SectionFormat
    required: bool = False
    constraints: tuple[Constraint, ...] = ()

    def constraint(self, constraint_type: str, default: object = None) -> object:
        """Get the value of a constraint by type.

        Args:
            constraint_type: Constraint type to look up
            default: Value returned when the constraint is absent

        Returns:
            The constraint value or default
        """
        for constraint in self.constraints:
            if constraint.type == constraint_type:
                return constraint.value
        return default


@dataclass(frozen=True)
class Rule:
    """A pattern rule expressed in the small rule language.

    ``value`` carries the heading name, regex or minimum length depending on
    ``kind``; ``predicate`` is only used by CUSTOM rules.
    """

    id: str
    kind: RuleKind
    description: str = ""
    error_message: str = ""
    severity: Severity = Severity.ERROR
    value: str | int | None = None
    predicate: Callable[[str], bool] | None = field(default=None, compare=False)
    replacement: str | None = None


@dataclass(frozen=True)
class FormatPattern:
    """A named structural pattern an answer is expected to follow."""

    id: str
    name: str
    keywords: frozenset[str] = frozenset()
    priority: int = 0
    sections: tuple[Section, ...] = ()
    rules: tuple[Rule, ...] = ()
    template: str = ""
    examples: tuple[str, ...] = ()

    @property
    def required_sections(self) -> tuple[Section, ...]:
        """Sections an answer must contain."""
        return tuple(s for s in self.sections if s.required)


@dataclass(frozen=True)
class Location:
    """1-based position inside an answer."""

    line: int
    column: int


@dataclass(frozen=True)
class Fix:
    """A mechanical edit of ``answer[start:end]``.

    ``target`` is the text expected in that span before the edit; a fix whose
    target no longer matches is not applied.
    """

    type: FixType
    start: int
    end: int
    target: str
    replacement: str
    description: str = ""


@dataclass(frozen=True)
class ValidationViolation:
    """A single rule failure found during validation."""

    rule: str
    severity: Severity
    message: str
    location: Location | None = None
    fix: Fix | None = None
    hint: str | None = None  # Manual advice when no mechanical fix exists


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one answer against one pattern."""

    is_valid: bool
    score: int
    violations: tuple[ValidationViolation, ...] = ()
    suggestions: tuple[str, ...] = ()

    @property
    def has_errors(self) -> bool:
        """Check if result contains any errors."""
        return any(v.severity == Severity.ERROR for v in self.violations)

    @property
    def has_warnings(self) -> bool:
        """Check if result contains any warnings."""
        return any(v.severity == Severity.WARNING for v in self.violations)

    @property
    def is_clean(self) -> bool:
        """Check if result has no violations."""
        return len(self.violations) == 0

    @property
    def auto_fixable(self) -> bool:
        """Check if any violation carries a mechanical fix."""
        return any(v.fix is not None for v in self.violations)


@dataclass(frozen=True)
class FormatSuggestion:
    """A manual fix proposal for a violation the formatter cannot fix."""

    violation: ValidationViolation
    fixes: tuple[Fix, ...]
    priority: int  # error=1, warning=2, info=3
    description: str
