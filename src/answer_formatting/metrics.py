"""Metrics collection for detection, validation and auto-fix outcomes.

Events are appended to per-kind logs. ``FormatMetrics`` is recomputed from
the retained logs by ``compute_metrics`` and cached until an event is
recorded or pruned.
"""

import copy
import threading
from collections import Counter, defaultdict
from collections.abc import Callable, Mapping, Sequence
from dataclasses import asdict, dataclass, field, replace
from datetime import date, datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal

from common.env import env
from common.logger import get_logger

from .overrides import utc_now
from .patterns.library import PatternLibrary

logger = get_logger(__name__)


@dataclass(frozen=True)
class PatternDetectionEvent:
    """A pattern was detected (or hinted) for a question."""

    question_id: str
    detected_pattern: str
    confidence: float
    applied_pattern: str | None = None
    timestamp: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class ValidationEvent:
    """An answer was validated."""

    question_id: str
    pattern: str
    score: int
    passed: bool
    violation_count: int
    channel: str | None = None
    auto_fixable: bool = False
    timestamp: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class AutoFixEvent:
    """The auto formatter was run on a failing answer."""

    question_id: str
    before_score: int
    after_score: int
    success: bool
    violation_type: str | None = None
    timestamp: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class PatternUsage:
    name: str
    detection_count: int
    application_count: int
    success_rate: int
    average_score: float


@dataclass(frozen=True)
class ChannelMetrics:
    channel: str
    total_questions: int
    compliance_rate: int
    average_score: float
    top_patterns: tuple[str, ...]


@dataclass(frozen=True)
class MetricsTrend:
    date: str  # YYYY-MM-DD
    total_questions: int
    compliance_rate: int
    validation_pass_rate: int
    auto_fix_success_rate: int


@dataclass
class FormatMetrics:
    """Aggregate snapshot derived from the event logs.

    Rates are percentages rounded to integers; averages keep two decimals.
    """

    total_questions: int = 0
    total_validations: int = 0
    compliance_rate: int = 0
    average_score: float = 0.0
    validation_pass_rate: int = 0
    auto_fix_attempts: int = 0
    auto_fix_successes: int = 0
    auto_fix_success_rate: int = 0
    average_violations_per_question: float = 0.0
    pattern_usage: dict[str, PatternUsage] = field(default_factory=dict)
    channel_breakdown: list[ChannelMetrics] = field(default_factory=list)
    trends: list[MetricsTrend] = field(default_factory=list)
    last_updated: datetime | None = None


@dataclass(frozen=True)
class RetentionPolicy:
    """How long and how many events are kept per event kind.

    None disables the corresponding bound.
    """

    max_age: timedelta | None = timedelta(days=30)
    max_events: int | None = 10000

    @classmethod
    def from_env(cls) -> "RetentionPolicy":
        """Build a policy from METRICS_* environment variables."""
        days = env.metrics_retention_days()
        max_events = env.metrics_max_events()
        return cls(
            max_age=timedelta(days=days) if days > 0 else None,
            max_events=max_events if max_events > 0 else None,
        )


def _percent(part: int, whole: int) -> int:
    """Percentage rounded half up, e.g. 1 of 8 is 13."""
    if not whole:
        return 0
    return int((Decimal(part) * 100 / Decimal(whole)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _mean(values: Sequence[float]) -> float:
    return round(sum(values) / len(values), 2) if values else 0.0


def _utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _first_attempt_pass_rate(validations: Sequence[ValidationEvent]) -> int:
    """Share of questions whose earliest validation passed."""
    first: dict[str, ValidationEvent] = {}
    for event in sorted(validations, key=lambda e: e.timestamp):
        first.setdefault(event.question_id, event)
    return _percent(sum(1 for e in first.values() if e.passed), len(first))


def compute_metrics(
    detections: Sequence[PatternDetectionEvent],
    validations: Sequence[ValidationEvent],
    autofixes: Sequence[AutoFixEvent],
    pattern_names: Mapping[str, str] | None = None,
) -> FormatMetrics:
    """Aggregate event logs into a metrics snapshot.

    Args:
        detections: Pattern detection events
        validations: Validation events
        autofixes: Auto-fix events
        pattern_names: Display names by pattern id (default: the id)

    Returns:
        FormatMetrics computed only from the given events
    """
    names = pattern_names or {}
    passed = sum(1 for e in validations if e.passed)
    fix_successes = sum(1 for e in autofixes if e.success)

    all_timestamps = [e.timestamp for e in (*detections, *validations, *autofixes)]

    return FormatMetrics(
        total_questions=len({e.question_id for e in validations}),
        total_validations=len(validations),
        compliance_rate=_percent(passed, len(validations)),
        average_score=_mean([e.score for e in validations]),
        validation_pass_rate=_first_attempt_pass_rate(validations),
        auto_fix_attempts=len(autofixes),
        auto_fix_successes=fix_successes,
        auto_fix_success_rate=_percent(fix_successes, len(autofixes)),
        average_violations_per_question=_mean([e.violation_count for e in validations]),
        pattern_usage=_pattern_usage(detections, validations, names),
        channel_breakdown=_channel_breakdown(validations),
        trends=_trends(detections, validations, autofixes),
        last_updated=max(all_timestamps) if all_timestamps else None,
    )


def _pattern_usage(
    detections: Sequence[PatternDetectionEvent],
    validations: Sequence[ValidationEvent],
    names: Mapping[str, str],
) -> dict[str, PatternUsage]:
    detected = Counter(e.detected_pattern for e in detections)
    by_pattern: dict[str, list[ValidationEvent]] = defaultdict(list)
    for event in validations:
        by_pattern[event.pattern].append(event)

    usage = {}
    for pattern_id in sorted(set(detected) | set(by_pattern)):
        applied = by_pattern.get(pattern_id, [])
        passes = sum(1 for e in applied if e.passed)
        # Hinted patterns have validations but no detections
        denominator = detected[pattern_id] or len(applied)
        usage[pattern_id] = PatternUsage(
            name=names.get(pattern_id, pattern_id),
            detection_count=detected[pattern_id],
            application_count=len(applied),
            success_rate=min(100, _percent(passes, denominator)),
            average_score=_mean([e.score for e in applied]),
        )
    return usage


def _channel_breakdown(validations: Sequence[ValidationEvent]) -> list[ChannelMetrics]:
    by_channel: dict[str, list[ValidationEvent]] = defaultdict(list)
    for event in validations:
        if event.channel:
            by_channel[event.channel].append(event)

    breakdown = []
    for channel, events in by_channel.items():
        pattern_counts = Counter(e.pattern for e in events)
        top = sorted(pattern_counts, key=lambda p: (-pattern_counts[p], p))[:3]
        breakdown.append(
            ChannelMetrics(
                channel=channel,
                total_questions=len(events),
                compliance_rate=_percent(sum(1 for e in events if e.passed), len(events)),
                average_score=_mean([e.score for e in events]),
                top_patterns=tuple(top),
            )
        )
    breakdown.sort(key=lambda m: (-m.total_questions, m.channel))
    return breakdown


def _trends(
    detections: Sequence[PatternDetectionEvent],
    validations: Sequence[ValidationEvent],
    autofixes: Sequence[AutoFixEvent],
) -> list[MetricsTrend]:
    def day(event) -> date:
        return _utc(event.timestamp).date()

    days = sorted({day(e) for e in (*detections, *validations, *autofixes)})
    trends = []
    for current in days:
        day_validations = [e for e in validations if day(e) == current]
        day_fixes = [e for e in autofixes if day(e) == current]
        trends.append(
            MetricsTrend(
                date=current.isoformat(),
                total_questions=len(day_validations),
                compliance_rate=_percent(sum(1 for e in day_validations if e.passed), len(day_validations)),
                validation_pass_rate=_first_attempt_pass_rate(day_validations),
                auto_fix_success_rate=_percent(sum(1 for e in day_fixes if e.success), len(day_fixes)),
            )
        )
    return trends


def _json_ready(value):
    """Convert datetimes in nested dicts/lists to ISO strings."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _json_ready(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_ready(v) for v in value]
    return value


class MetricsCollector:
    """Records formatting events and aggregates them into FormatMetrics."""

    def __init__(
        self,
        retention: RetentionPolicy | None = None,
        library: PatternLibrary | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize an empty collector.

        Args:
            retention: Retention bounds (default: from METRICS_* variables)
            library: Pattern library used to resolve pattern display names
            clock: Source of "now" for age-based pruning
        """
        self.retention = retention or RetentionPolicy.from_env()
        self.library = library
        self._clock = clock
        self._lock = threading.Lock()
        self._detections: list[PatternDetectionEvent] = []
        self._validations: list[ValidationEvent] = []
        self._autofixes: list[AutoFixEvent] = []
        self._snapshot: FormatMetrics | None = None

    def record_pattern_detection(self, event: PatternDetectionEvent):
        self._record(self._detections, event)

    def record_validation(self, event: ValidationEvent):
        self._record(self._validations, event)

    def record_auto_fix(self, event: AutoFixEvent):
        self._record(self._autofixes, event)

    def _record(self, log: list, event):
        event = replace(event, timestamp=_utc(event.timestamp))
        with self._lock:
            log.append(event)
            self._prune()
            self._snapshot = None

    def _prune(self) -> bool:
        """Drop events beyond the retention bounds; caller holds the lock.

        Returns:
            True if any event was dropped (the cached snapshot is then stale)
        """
        cutoff = None
        if self.retention.max_age is not None:
            cutoff = _utc(self._clock()) - self.retention.max_age

        pruned = 0
        for log in (self._detections, self._validations, self._autofixes):
            before = len(log)
            if cutoff is not None:
                log[:] = [e for e in log if e.timestamp >= cutoff]
            if self.retention.max_events is not None and len(log) > self.retention.max_events:
                log[:] = log[-self.retention.max_events :]
            pruned += before - len(log)

        if pruned:
            logger.debug(f"Pruned {pruned} metric events")
            self._snapshot = None
        return pruned > 0

    def get_metrics(self) -> FormatMetrics:
        """Get the current snapshot.

        Events that aged out since the last call are pruned first.

        Returns:
            A copy of the cached snapshot, recomputed if events were recorded
            or pruned
        """
        with self._lock:
            return copy.deepcopy(self._current_snapshot())

    def _current_snapshot(self) -> FormatMetrics:
        """Prune, then return the cached snapshot; caller holds the lock."""
        self._prune()
        if self._snapshot is None:
            self._snapshot = compute_metrics(
                self._detections, self._validations, self._autofixes, self._pattern_names()
            )
        return self._snapshot

    def get_metrics_for_range(self, start: datetime, end: datetime) -> FormatMetrics:
        """Compute metrics over events with start <= timestamp <= end."""
        start, end = _utc(start), _utc(end)

        def in_range(events):
            return [e for e in events if start <= e.timestamp <= end]

        with self._lock:
            self._prune()
            return compute_metrics(
                in_range(self._detections),
                in_range(self._validations),
                in_range(self._autofixes),
                self._pattern_names(),
            )

    def export_data(self) -> dict:
        """Dump the snapshot and every retained event as JSON-ready data."""
        with self._lock:
            data = {
                "metrics": asdict(self._current_snapshot()),
                "validation_events": [asdict(e) for e in self._validations],
                "auto_fix_events": [asdict(e) for e in self._autofixes],
                "pattern_detection_events": [asdict(e) for e in self._detections],
            }
        return _json_ready(data)

    def clear_metrics(self):
        """Drop every event."""
        with self._lock:
            self._detections.clear()
            self._validations.clear()
            self._autofixes.clear()
            self._snapshot = None

    def _pattern_names(self) -> dict[str, str]:
        if self.library is None:
            return {}
        return {p.id: p.name for p in self.library.get_all_patterns()}
