"""Usage errors raised by the formatting engine.

Content problems are never raised; they are reported as violations.
"""


class FormattingError(Exception):
    """Base class for API misuse errors."""


class PatternNotFound(FormattingError, KeyError):
    """No pattern with the requested id exists."""

    def __init__(self, pattern_id: str):
        super().__init__(f"Pattern '{pattern_id}' not found")
        self.pattern_id = pattern_id

    def __str__(self) -> str:
        return self.args[0]


class DuplicatePatternId(FormattingError, ValueError):
    """A pattern id is already registered or repeated in the input."""

    def __init__(self, pattern_id: str):
        super().__init__(f"Duplicate pattern id '{pattern_id}'")
        self.pattern_id = pattern_id


class PatternDefinitionError(FormattingError, ValueError):
    """A pattern definition could not be parsed."""


class MissingQuestionId(FormattingError, ValueError):
    """An override was submitted without a question id."""

    def __init__(self):
        super().__init__("Question ID is required")


class JustificationTooShort(FormattingError, ValueError):
    """An override justification is below the minimum length."""

    def __init__(self, minimum: int, actual: int):
        super().__init__(
            f"Justification must be at least {minimum} characters long (got {actual})"
        )
        self.minimum = minimum
        self.actual = actual


class DuplicateOverride(FormattingError, ValueError):
    """An active override already exists for the question."""

    def __init__(self, question_id: str):
        super().__init__(f"Override already exists for question '{question_id}'")
        self.question_id = question_id


class OverrideNotFound(FormattingError, KeyError):
    """No override exists for the question."""

    def __init__(self, question_id: str):
        super().__init__(f"No override found for question '{question_id}'")
        self.question_id = question_id

    def __str__(self) -> str:
        return self.args[0]
