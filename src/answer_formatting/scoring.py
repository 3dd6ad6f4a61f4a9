"""Score computation for validation results."""

from collections.abc import Iterable
from dataclasses import dataclass

from common.env import env

from .models import Severity, ValidationViolation


@dataclass(frozen=True)
class ScoringPolicy:
    """Penalty weights and pass threshold.

    Defaults match the documented design constants; deployments tune them
    through the environment.
    """

    error_penalty: int = 30
    warning_penalty: int = 10
    info_penalty: int = 2
    pass_threshold: int = 70

    @classmethod
    def from_env(cls) -> "ScoringPolicy":
        """Build a policy from FORMAT_* environment variables."""
        return cls(
            error_penalty=env.error_penalty(),
            warning_penalty=env.warning_penalty(),
            info_penalty=env.info_penalty(),
            pass_threshold=env.pass_threshold(),
        )

    def penalty(self, severity: Severity) -> int:
        if severity == Severity.ERROR:
            return self.error_penalty
        if severity == Severity.WARNING:
            return self.warning_penalty
        return self.info_penalty

    def score(self, violations: Iterable[ValidationViolation]) -> int:
        """Compute a score in [0, 100] from violations.

        Args:
            violations: Violations found during validation

        Returns:
            100 minus the summed penalties, clamped to [0, 100]
        """
        total = 100 - sum(self.penalty(v.severity) for v in violations)
        return max(0, min(100, total))

    def is_passing(self, score: int, violations: Iterable[ValidationViolation]) -> bool:
        """Check the pass condition: threshold met and no error violation."""
        return score >= self.pass_threshold and not any(
            v.severity == Severity.ERROR for v in violations
        )
