"""Human-approved exceptions to pattern enforcement."""

import threading
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from common.logger import get_logger

from .constants import MIN_JUSTIFICATION_LENGTH
from .errors import DuplicateOverride, JustificationTooShort, MissingQuestionId, OverrideNotFound

logger = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OverrideRecord:
    """An approved exception for one question.

    Records are immutable; replacing one means removing and re-adding it.
    """

    question_id: str
    justification: str
    timestamp: datetime
    user_id: str | None = None
    override_pattern: str | None = None
    original_pattern: str | None = None


@dataclass
class OverrideStats:
    """Summary of the stored overrides."""

    total_overrides: int = 0
    by_pattern: dict[str, int] = field(default_factory=dict)
    by_user: dict[str, int] = field(default_factory=dict)
    average_justification_length: float = 0.0


class OverrideStore:
    """Stores at most one active override per question id.

    An override suppresses rejection of a failing answer in the calling
    pipeline; it never changes scores or violations.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        """Initialize an empty store.

        Args:
            clock: Source of record timestamps
        """
        self._clock = clock
        self._lock = threading.Lock()
        self._records: dict[str, OverrideRecord] = {}

    def add_override(
        self,
        question_id: str | None,
        justification: str,
        user_id: str | None = None,
        override_pattern: str | None = None,
        original_pattern: str | None = None,
    ) -> OverrideRecord:
        """Record an override.

        Args:
            question_id: Question the override applies to
            justification: Why the exception is needed (at least 10 characters)
            user_id: Reviewer who approved it
            override_pattern: Pattern to use instead of the detected one
            original_pattern: Pattern that was detected

        Returns:
            The stored record with its assigned timestamp

        Raises:
            MissingQuestionId: If question_id is missing or blank
            JustificationTooShort: If the trimmed justification is too short
            DuplicateOverride: If the question already has an override
        """
        if not question_id or not question_id.strip():
            raise MissingQuestionId()
        length = len((justification or "").strip())
        if length < MIN_JUSTIFICATION_LENGTH:
            raise JustificationTooShort(MIN_JUSTIFICATION_LENGTH, length)

        with self._lock:
            if question_id in self._records:
                raise DuplicateOverride(question_id)
            record = OverrideRecord(
                question_id=question_id,
                justification=justification.strip(),
                timestamp=self._clock(),
                user_id=user_id,
                override_pattern=override_pattern,
                original_pattern=original_pattern,
            )
            self._records[question_id] = record

        logger.info(f"Override added for question '{question_id}'")
        return record

    def remove_override(self, question_id: str) -> OverrideRecord:
        """Delete an override.

        Returns:
            The removed record

        Raises:
            OverrideNotFound: If the question has no override
        """
        with self._lock:
            record = self._records.pop(question_id, None)
        if record is None:
            raise OverrideNotFound(question_id)
        logger.info(f"Override removed for question '{question_id}'")
        return record

    def has_override(self, question_id: str) -> bool:
        return question_id in self._records

    def get_override(self, question_id: str) -> OverrideRecord | None:
        return self._records.get(question_id)

    def get_overrides(self) -> list[OverrideRecord]:
        """Get all overrides, oldest first."""
        with self._lock:
            records = list(self._records.values())
        return sorted(records, key=lambda r: (r.timestamp, r.question_id))

    def should_bypass(self, question_id: str) -> bool:
        """Check whether a failing answer for the question should be accepted."""
        return self.has_override(question_id)

    def effective_pattern(self, question_id: str, detected: str | None) -> str | None:
        """Pick the pattern to validate with: the override's pattern wins.

        Args:
            question_id: Question being processed
            detected: Detected or hinted pattern id

        Returns:
            Pattern id to use
        """
        record = self.get_override(question_id)
        if record is not None and record.override_pattern:
            return record.override_pattern
        return detected

    def override_stats(self) -> OverrideStats:
        """Summarize overrides by pattern and by user."""
        records = self.get_overrides()
        if not records:
            return OverrideStats()
        return OverrideStats(
            total_overrides=len(records),
            by_pattern=dict(Counter(r.override_pattern or "no-pattern" for r in records)),
            by_user=dict(Counter(r.user_id or "unknown" for r in records)),
            average_justification_length=sum(len(r.justification) for r in records) / len(records),
        )

    def __len__(self) -> int:
        return len(self._records)
