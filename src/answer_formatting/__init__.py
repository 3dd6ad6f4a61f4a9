"""Answer formatting standards: detect, validate, fix and measure answer structure."""

from .errors import (
    DuplicateOverride,
    DuplicatePatternId,
    FormattingError,
    JustificationTooShort,
    MissingQuestionId,
    OverrideNotFound,
    PatternDefinitionError,
    PatternNotFound,
)
from .fixer import AutoFormatter
from .metrics import (
    AutoFixEvent,
    FormatMetrics,
    MetricsCollector,
    PatternDetectionEvent,
    RetentionPolicy,
    ValidationEvent,
)
from .models import (
    Constraint,
    Fix,
    FixType,
    FormatPattern,
    FormatSuggestion,
    Location,
    Rule,
    RuleKind,
    Section,
    SectionFormat,
    Severity,
    ValidationResult,
    ValidationViolation,
)
from .overrides import OverrideRecord, OverrideStore
from .patterns import PatternDetector, PatternLibrary
from .pipeline import FormattingPipeline, PipelineResult
from .rules import ConsistencyResult, LanguageConsistencyChecker
from .scoring import ScoringPolicy
from .validator import FormatValidator

__all__ = [
    "AutoFixEvent",
    "AutoFormatter",
    "ConsistencyResult",
    "Constraint",
    "DuplicateOverride",
    "DuplicatePatternId",
    "Fix",
    "FixType",
    "FormatMetrics",
    "FormatPattern",
    "FormatSuggestion",
    "FormatValidator",
    "FormattingError",
    "FormattingPipeline",
    "JustificationTooShort",
    "LanguageConsistencyChecker",
    "Location",
    "MetricsCollector",
    "MissingQuestionId",
    "OverrideNotFound",
    "OverrideRecord",
    "OverrideStore",
    "PatternDefinitionError",
    "PatternDetectionEvent",
    "PatternDetector",
    "PatternLibrary",
    "PatternNotFound",
    "PipelineResult",
    "RetentionPolicy",
    "Rule",
    "RuleKind",
    "ScoringPolicy",
    "Section",
    "SectionFormat",
    "Severity",
    "ValidationEvent",
    "ValidationResult",
    "ValidationViolation",
]
