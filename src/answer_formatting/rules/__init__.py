"""Section and pattern rule validators."""

from .code_rules import CodeBlockValidator
from .consistency_rules import ConsistencyResult, LanguageConsistencyChecker
from .content_rules import (
    DiagramValidator,
    ProsConsValidator,
    TextValidator,
    TroubleshootingValidator,
)
from .custom_rules import RuleEvaluator
from .list_rules import ListItemValidator
from .process_rules import ProcessValidator
from .table_rules import TableValidator

__all__ = [
    "CodeBlockValidator",
    "ConsistencyResult",
    "DiagramValidator",
    "LanguageConsistencyChecker",
    "ListItemValidator",
    "ProcessValidator",
    "ProsConsValidator",
    "RuleEvaluator",
    "TableValidator",
    "TextValidator",
    "TroubleshootingValidator",
]
