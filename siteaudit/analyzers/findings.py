"""Shared bookkeeping for the dimension analyzers."""

import math

SEVERITIES = ("success", "info", "warning", "critical")


class Scorecard:
    """Ordered findings plus the penalties attached to them.

    Checks only record what they saw; the score is folded from the recorded
    penalties once, at the end, and clamped into [0, 100].
    """

    def __init__(self, baseline: int = 100):
        self.baseline = baseline
        self.successes = []
        self.issues = []
        self.penalties = []

    def success(self, message: str) -> None:
        self.successes.append({"severity": "success", "message": message})

    def issue(self, severity: str, message: str, pts: int = 0) -> None:
        if severity not in SEVERITIES[1:]:
            raise ValueError(f"Unknown severity: {severity}")
        self.issues.append({"severity": severity, "message": message})
        if pts:
            self.penalties.append(pts)

    @property
    def score(self) -> int:
        return max(0, min(100, self.baseline - sum(self.penalties)))

    def result(self, **metrics) -> dict:
        return {
            "score": self.score,
            "details": self.successes + self.issues,
            "metrics": metrics,
        }


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
