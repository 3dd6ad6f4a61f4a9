"""End-to-end processing of one answer: detect, validate, fix, record."""

from dataclasses import dataclass

from common.env import env
from common.logger import get_logger

from .errors import PatternNotFound
from .fixer import AutoFormatter
from .metrics import AutoFixEvent, MetricsCollector, PatternDetectionEvent, ValidationEvent
from .models import FormatPattern, ValidationResult
from .overrides import OverrideStore
from .patterns.detector import PatternDetector
from .patterns.library import PatternLibrary
from .validator import FormatValidator

logger = get_logger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of processing one answer.

    ``accepted`` is the policy decision: the answer passed validation or the
    question carries an override. Scores and violations are never altered by
    an override.
    """

    pattern: FormatPattern | None
    validation_result: ValidationResult
    formatted_answer: str | None = None
    metrics_recorded: bool = False
    overridden: bool = False

    @property
    def accepted(self) -> bool:
        return self.validation_result.is_valid or self.overridden


class FormattingPipeline:
    """Runs the detector, validator, formatter and metrics for content bots."""

    def __init__(
        self,
        library: PatternLibrary,
        detector: PatternDetector | None = None,
        validator: FormatValidator | None = None,
        formatter: AutoFormatter | None = None,
        overrides: OverrideStore | None = None,
        metrics: MetricsCollector | None = None,
        auto_format: bool | None = None,
    ):
        """Initialize the pipeline.

        Args:
            library: Pattern library used for detection and hints
            detector: Pattern detector (default: one over ``library``)
            validator: Format validator (default: scoring from FORMAT_* variables)
            formatter: Auto formatter (default: one sharing ``validator``)
            overrides: Override store consulted before rejecting
            metrics: Metrics collector receiving events (None disables recording)
            auto_format: Run the formatter on failing answers (default: FORMAT_AUTO_FIX)
        """
        self.library = library
        self.detector = detector or PatternDetector(library)
        self.validator = validator or FormatValidator()
        self.formatter = formatter or AutoFormatter(self.validator)
        self.overrides = overrides or OverrideStore()
        self.metrics = metrics
        self.auto_format = env.auto_fix_enabled() if auto_format is None else auto_format

    def process(
        self,
        question_id: str,
        question_text: str,
        answer_text: str,
        channel: str | None = None,
        pattern_id_hint: str | None = None,
    ) -> PipelineResult:
        """Detect the pattern for a question and check its answer.

        Args:
            question_id: Question identifier (override and metrics key)
            question_text: Question used for detection
            answer_text: Candidate answer
            channel: Source channel recorded with validation events
            pattern_id_hint: Pattern id to use instead of detection

        Returns:
            PipelineResult with the final validation and any formatted answer

        Raises:
            PatternNotFound: If the hint or an override names an unknown pattern
        """
        pattern, confidence = self._select_pattern(question_id, question_text, pattern_id_hint)
        overridden = self.overrides.should_bypass(question_id)

        if pattern is None:
            # Nothing to enforce
            return PipelineResult(
                pattern=None,
                validation_result=ValidationResult(is_valid=True, score=100),
                overridden=overridden,
            )

        result = self.validator.validate(answer_text, pattern)
        self._record_validation(question_id, pattern, result, channel)

        formatted = None
        if not result.is_valid and self.auto_format and result.auto_fixable:
            formatted, result = self._auto_fix(question_id, answer_text, pattern, result, channel)

        if not result.is_valid:
            if overridden:
                logger.info(f"Question '{question_id}' failed validation but has an override")
            else:
                logger.info(
                    f"Question '{question_id}' rejected: score [bold]{result.score}[/bold] "
                    f"for pattern '{pattern.id}'"
                )

        if self.metrics is not None:
            self.metrics.record_pattern_detection(
                PatternDetectionEvent(
                    question_id=question_id,
                    detected_pattern=pattern.id,
                    confidence=confidence,
                    applied_pattern=pattern.id,
                )
            )

        return PipelineResult(
            pattern=pattern,
            validation_result=result,
            formatted_answer=formatted,
            metrics_recorded=self.metrics is not None,
            overridden=overridden,
        )

    def _select_pattern(
        self, question_id: str, question_text: str, hint: str | None
    ) -> tuple[FormatPattern | None, float]:
        """Resolve hint, detection and override into the pattern to enforce."""
        if hint is not None:
            pattern = self.library.get_pattern(hint)
            if pattern is None:
                raise PatternNotFound(hint)
            confidence = 1.0
        else:
            pattern = self.detector.detect_pattern(question_text)
            confidence = self.detector.get_confidence()

        effective = self.overrides.effective_pattern(question_id, pattern.id if pattern else None)
        if effective is not None and (pattern is None or effective != pattern.id):
            pattern = self.library.get_pattern(effective)
            if pattern is None:
                raise PatternNotFound(effective)
            confidence = 1.0
        return pattern, confidence

    def _auto_fix(
        self,
        question_id: str,
        answer: str,
        pattern: FormatPattern,
        before: ValidationResult,
        channel: str | None,
    ) -> tuple[str, ValidationResult]:
        formatted = self.formatter.format(answer, pattern)
        after = self.validator.validate(formatted, pattern)

        if self.metrics is not None:
            self.metrics.record_auto_fix(
                AutoFixEvent(
                    question_id=question_id,
                    before_score=before.score,
                    after_score=after.score,
                    success=after.is_valid,
                    violation_type=before.violations[0].rule if before.violations else None,
                )
            )
        self._record_validation(question_id, pattern, after, channel)
        logger.debug(f"Auto-fix for '{question_id}': {before.score} -> {after.score}")
        return formatted, after

    def _record_validation(
        self,
        question_id: str,
        pattern: FormatPattern,
        result: ValidationResult,
        channel: str | None,
    ):
        if self.metrics is None:
            return
        self.metrics.record_validation(
            ValidationEvent(
                question_id=question_id,
                pattern=pattern.id,
                score=result.score,
                passed=result.is_valid,
                violation_count=len(result.violations),
                channel=channel,
                auto_fixable=result.auto_fixable,
            )
        )
