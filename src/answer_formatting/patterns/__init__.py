"""Pattern storage, loading and detection."""

from .detector import PatternDetector
from .library import PatternLibrary
from .loader import load_default_patterns, load_patterns_file, pattern_from_dict, pattern_to_dict

__all__ = [
    "PatternDetector",
    "PatternLibrary",
    "load_default_patterns",
    "load_patterns_file",
    "pattern_from_dict",
    "pattern_to_dict",
]
