"""Storage for format patterns."""

import json
import threading
from collections.abc import Iterable
from pathlib import Path
from types import MappingProxyType

from common.logger import get_logger

from ..errors import DuplicatePatternId, PatternNotFound
from ..models import FormatPattern
from .loader import load_default_patterns, load_patterns_file, pattern_to_dict

logger = get_logger(__name__)


def _sort_key(pattern: FormatPattern) -> tuple[int, str]:
    return (-pattern.priority, pattern.id)


class PatternLibrary:
    """Storage for format patterns.

    Writers replace the whole id -> pattern mapping under a lock, so readers
    always see a complete snapshot.
    """

    def __init__(self, patterns: Iterable[FormatPattern] | None = None):
        """Initialize the library.

        Args:
            patterns: Optional initial patterns (see initialize_patterns)
        """
        self._lock = threading.Lock()
        self._patterns: MappingProxyType = MappingProxyType({})
        if patterns is not None:
            self.initialize_patterns(patterns)

    def initialize_patterns(self, patterns: Iterable[FormatPattern]):
        """Replace the library contents.

        Args:
            patterns: Patterns to store

        Raises:
            DuplicatePatternId: If the input repeats an id
        """
        replacement: dict[str, FormatPattern] = {}
        for pattern in patterns:
            if pattern.id in replacement:
                raise DuplicatePatternId(pattern.id)
            replacement[pattern.id] = pattern

        with self._lock:
            self._patterns = MappingProxyType(replacement)
        logger.info(f"Pattern library initialized with [bold]{len(replacement)}[/bold] patterns")

    def get_pattern(self, pattern_id: str) -> FormatPattern | None:
        """Get a pattern by id, or None."""
        return self._patterns.get(pattern_id)

    def get_all_patterns(self) -> list[FormatPattern]:
        """Get all patterns, highest priority first then by id."""
        return sorted(self._patterns.values(), key=_sort_key)

    def search_patterns(self, keywords: Iterable[str]) -> list[FormatPattern]:
        """Find patterns sharing keywords with the query.

        Args:
            keywords: Search keywords (case-insensitive)

        Returns:
            Patterns with at least one shared keyword, most shared first,
            ties broken by priority then id
        """
        query = {k.lower().strip() for k in keywords if k and k.strip()}
        if not query:
            return []

        scored = []
        for pattern in self._patterns.values():
            overlap = len(query & {k.lower() for k in pattern.keywords})
            if overlap > 0:
                scored.append((overlap, pattern))

        scored.sort(key=lambda item: (-item[0], *_sort_key(item[1])))
        return [pattern for _, pattern in scored]

    def add_pattern(self, pattern: FormatPattern):
        """Add a new pattern.

        Raises:
            DuplicatePatternId: If the id is already registered
        """
        with self._lock:
            if pattern.id in self._patterns:
                raise DuplicatePatternId(pattern.id)
            self._patterns = MappingProxyType({**self._patterns, pattern.id: pattern})
        logger.info(f"Added pattern '{pattern.id}'")

    def update_pattern(self, pattern_id: str, pattern: FormatPattern):
        """Replace an existing pattern.

        Raises:
            PatternNotFound: If no pattern has the id
            ValueError: If the new pattern carries a different id
        """
        if pattern.id != pattern_id:
            raise ValueError(f"Pattern id is immutable: '{pattern_id}' != '{pattern.id}'")
        with self._lock:
            if pattern_id not in self._patterns:
                raise PatternNotFound(pattern_id)
            self._patterns = MappingProxyType({**self._patterns, pattern_id: pattern})
        logger.info(f"Updated pattern '{pattern_id}'")

    def clear_patterns(self):
        """Remove all patterns."""
        with self._lock:
            self._patterns = MappingProxyType({})

    @property
    def pattern_count(self) -> int:
        return len(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, pattern_id: object) -> bool:
        return pattern_id in self._patterns

    def save(self, file_path: Path):
        """Save patterns to a JSON file.

        Args:
            file_path: Path where patterns should be saved
        """
        data = {"patterns": [pattern_to_dict(p) for p in self.get_all_patterns()]}
        file_path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    @classmethod
    def load(cls, file_path: Path) -> "PatternLibrary":
        """Load a library from a patterns JSON file.

        Args:
            file_path: Path to patterns JSON file

        Returns:
            PatternLibrary loaded from file
        """
        return cls(load_patterns_file(file_path))

    @classmethod
    def with_defaults(cls) -> "PatternLibrary":
        """Create a library holding the bundled default patterns."""
        return cls(load_default_patterns())
