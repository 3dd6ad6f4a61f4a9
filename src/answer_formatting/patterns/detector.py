"""Detect which format pattern a question calls for."""

import re

from common.logger import get_logger

from ..models import FormatPattern
from .library import PatternLibrary

logger = get_logger(__name__)

PUNCTUATION = re.compile(r"[^\w\s]")


def normalize(text: str) -> str:
    """Lowercase, replace punctuation with spaces and collapse whitespace."""
    return " ".join(PUNCTUATION.sub(" ", text.lower()).split())


class PatternDetector:
    """Keyword-overlap pattern detection.

    A keyword hits when it appears in the normalized question on word
    boundaries; multi-word keywords must appear as a phrase.
    """

    def __init__(self, library: PatternLibrary):
        """Initialize the detector.

        Args:
            library: Pattern library to detect from
        """
        self.library = library
        self.last_confidence = 0.0
        self.last_question = ""

    def detect_pattern(self, question: str) -> FormatPattern | None:
        """Detect the best-matching pattern for a question.

        Args:
            question: Question text

        Returns:
            Pattern with the most keyword hits (ties: priority, then id),
            or None if no keyword matches
        """
        self.last_question = question
        ranked = self._rank(question)
        if not ranked:
            self.last_confidence = 0.0
            logger.debug("No pattern detected")
            return None

        hits, pattern = ranked[0]
        self.last_confidence = hits / len(pattern.keywords)
        logger.debug(f"Detected pattern '{pattern.id}' (confidence={self.last_confidence:.2f})")
        return pattern

    def get_confidence(self) -> float:
        """Confidence in [0, 1] of the last detection: hits / pattern keywords."""
        return self.last_confidence

    def get_suggested_patterns(self, question: str, limit: int | None = None) -> list[FormatPattern]:
        """Rank candidate patterns for a question.

        Args:
            question: Question text
            limit: Maximum number of patterns to return

        Returns:
            Patterns with at least one keyword hit, best first
        """
        patterns = [pattern for _, pattern in self._rank(question)]
        return patterns[:limit] if limit is not None else patterns

    def reset(self):
        """Forget the last detection."""
        self.last_confidence = 0.0
        self.last_question = ""

    def _rank(self, question: str) -> list[tuple[int, FormatPattern]]:
        text = f" {normalize(question)} "
        ranked = []
        for pattern in self.library.get_all_patterns():
            hits = sum(1 for keyword in pattern.keywords if self._matches(text, keyword))
            if hits > 0:
                ranked.append((hits, pattern))
        ranked.sort(key=lambda item: (-item[0], -item[1].priority, item[1].id))
        return ranked

    @staticmethod
    def _matches(text: str, keyword: str) -> bool:
        phrase = normalize(keyword)
        return bool(phrase) and f" {phrase} " in text
