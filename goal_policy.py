"""Goal durations and their day quota / freeze allowance."""

from dataclasses import dataclass
from enum import Enum


class Duration(str, Enum):
    WEEK = "Week"
    MONTH = "Month"
    YEAR = "Year"

    @classmethod
    def parse(cls, text: str) -> "Duration":
        """Look up a duration by its label, ignoring case."""
        for duration in cls:
            if duration.value.lower() == str(text).strip().lower():
                return duration
        raise ValueError(f"unknown duration: {text!r}")


@dataclass(frozen=True)
class GoalPolicy:
    duration: Duration
    required_days: int
    freeze_allowance: int


_POLICIES = {
    Duration.WEEK: GoalPolicy(Duration.WEEK, 7, 2),
    Duration.MONTH: GoalPolicy(Duration.MONTH, 30, 8),
    Duration.YEAR: GoalPolicy(Duration.YEAR, 365, 96),
}


def policy_for(duration: Duration) -> GoalPolicy:
    return _POLICIES[duration]


def required_days(duration: Duration) -> int:
    return _POLICIES[duration].required_days


def freeze_allowance(duration: Duration) -> int:
    return _POLICIES[duration].freeze_allowance
