"""Shared constants for the answer_formatting package."""

import re

# Built-in check names used as violation rule ids
EMPTY_ANSWER = "empty-answer"
TABLE_REQUIRED = "table-required"
TABLE_MIN_COLUMNS = "table-min-columns"
TABLE_INCONSISTENT_ROWS = "table-inconsistent-rows"
TABLE_MIN_DATA_ROWS = "table-min-data-rows"
PROCESS_VAGUE_STEPS = "process-vague-steps"
PROCESS_NUMBERED_STEPS = "process-numbered-steps"
PROCESS_STEP_SEQUENCE = "process-step-sequence"
CODE_BLOCK_REQUIRED = "code-block-required"
CODE_LANGUAGE = "code-language"
CODE_MIN_LINES = "code-min-lines"
CODE_CONSISTENCY = "code-consistency"
CODE_EXPLANATION = "code-explanation"
CODE_SEPARATION = "code-separation"
LIST_REQUIRED = "list-required"
LIST_BULLET_STYLE = "list-bullet-style"
LIST_MAX_ITEMS = "list-max-items"
TEXT_REQUIRED = "text-required"
TEXT_MIN_LENGTH = "text-min-length"
DIAGRAM_REQUIRED = "diagram-required"
DIAGRAM_EXPLANATION = "diagram-explanation"
DIAGRAM_INTRO = "diagram-intro"
DIAGRAM_CONCLUSION = "diagram-conclusion"
PROS_CONS_SECTIONS = "pros-cons-sections"
PROS_CONS_IMBALANCE = "pros-cons-imbalance"
PROS_CONS_EMPTY_SIDE = "pros-cons-empty-side"
PROS_CONS_MIN_ITEMS = "pros-cons-min-items"
TROUBLESHOOTING_SECTIONS = "troubleshooting-sections"
TROUBLESHOOTING_NUMBERED_SOLUTIONS = "troubleshooting-numbered-solutions"
TROUBLESHOOTING_SOLUTION_SEQUENCE = "troubleshooting-solution-sequence"

# Minimum justification length for overrides
MIN_JUSTIFICATION_LENGTH = 10

# One side of a pros/cons answer may have at most this many times the other's items
PROS_CONS_MAX_RATIO = 3

# Shortest text around a code example that counts as an explanation
MIN_EXPLANATION_LENGTH = 20

# Score lost per cross-language consistency issue
CONSISTENCY_PENALTY = 15

# Phrasing that signals a process step without a concrete action
VAGUE_STEP_PATTERN = re.compile(r"should\s+be|need\s+to\s+run|check\s+if", re.IGNORECASE)

# Verbs that open a concrete process step
ACTION_VERBS: frozenset[str] = frozenset(
    {
        "add",
        "apply",
        "build",
        "call",
        "check",
        "clone",
        "configure",
        "connect",
        "copy",
        "create",
        "define",
        "delete",
        "deploy",
        "disable",
        "download",
        "edit",
        "enable",
        "execute",
        "export",
        "import",
        "initialize",
        "install",
        "launch",
        "login",
        "log",
        "merge",
        "migrate",
        "mount",
        "navigate",
        "open",
        "push",
        "pull",
        "register",
        "reload",
        "remove",
        "replace",
        "restart",
        "run",
        "save",
        "select",
        "set",
        "start",
        "stop",
        "test",
        "type",
        "update",
        "upgrade",
        "verify",
        "write",
    }
)

# Default column hints for a table skeleton
DEFAULT_TABLE_COLUMNS: tuple[str, ...] = ("Feature", "Option A", "Option B")

# Language used when a code block's language cannot be inferred
DEFAULT_CODE_LANGUAGE = "text"

# Ordered (language, signal) pairs; first match wins
LANGUAGE_HINTS: tuple[tuple[str, re.Pattern], ...] = (
    ("python", re.compile(r"^\s*(def |class \w+.*:|import \w+|from \w+ import )|print\(", re.M)),
    ("typescript", re.compile(r"^\s*(interface \w+|type \w+ =)|:\s*(string|number|boolean)\b", re.M)),
    ("javascript", re.compile(r"\b(const|let|var) \w+\s*=|console\.log\(|=>|function\s*\w*\(")),
    ("java", re.compile(r"\bpublic (static |final )*(class|void|int|String)\b|System\.out\.")),
    ("go", re.compile(r"^\s*(package \w+|func \w+\(|import \()", re.M)),
    ("sql", re.compile(r"^\s*(SELECT|INSERT INTO|UPDATE \w+ SET|CREATE TABLE|DELETE FROM)\b", re.M | re.I)),
    ("bash", re.compile(r"^\s*(\$ |sudo |apt(-get)? |npm |pip |cd |export \w+=|kubectl |docker |git )", re.M)),
    ("html", re.compile(r"<(html|div|span|body|head|p|a)\b[^>]*>", re.I)),
    ("json", re.compile(r"^\s*[\[{]\s*$|^\s*\"[\w-]+\"\s*:", re.M)),
    ("yaml", re.compile(r"^[\w-]+:\s*(\S.*)?$", re.M)),
)
