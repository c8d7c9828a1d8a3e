"""Per-day learning status and goal progress for one session.

One ``ActivityState`` is created at startup and handed to every view.  All
mutations run on the tkinter main thread; views re-render from the
notifications sent after each mutating call.
"""

from datetime import date
from enum import Enum
from typing import Callable

from loguru import logger

from calendar_logic import add_weeks, today as local_today, week_days, week_start
from goal_policy import Duration, freeze_allowance, required_days


class ActivityStatus(str, Enum):
    DEFAULT = "Default"
    LOGGED = "Logged"
    FREEZED = "Freezed"


class OverwritePolicy(str, Enum):
    """How goal counters react when a day is logged more than once."""

    # Every call counts, even for a day that already has a status.
    ACCUMULATE = "accumulate"
    # Counters mirror the statuses of days touched in the current attempt.
    RECONCILE = "reconcile"


Listener = Callable[["ActivityState"], None]


class ActivityState:
    """Week cursor, selected day, daily history and goal counters."""

    def __init__(
        self,
        duration: Duration = Duration.WEEK,
        topic: str = "Swift",
        first_weekday: int = 0,
        overwrite_policy: OverwritePolicy = OverwritePolicy.ACCUMULATE,
        today: date | None = None,
    ) -> None:
        self.first_weekday = first_weekday
        self.overwrite_policy = overwrite_policy
        self.topic = topic
        self.duration = duration

        start = today if today is not None else local_today()
        self._today = today
        self.selected_day: date = start
        self.week_cursor: date = week_start(start, first_weekday)

        self.daily_status: dict[date, ActivityStatus] = {}
        self.goal_logged_count = 0
        self.goal_freeze_count = 0
        # Days written during the current goal attempt (RECONCILE bookkeeping)
        self._attempt_days: dict[date, ActivityStatus] = {}

        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(state)`` after every mutation; returns an unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception(f"Activity listener {listener!r} failed")

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def today(self) -> date:
        return self._today if self._today is not None else local_today()

    def select_day(self, day: date) -> None:
        self.selected_day = day
        self._notify()

    def navigate_week(self, delta: int) -> None:
        self.week_cursor = add_weeks(self.week_cursor, delta)
        self._notify()

    def jump_to_day(self, day: date) -> None:
        self.selected_day = day
        self.week_cursor = week_start(day, self.first_weekday)
        self._notify()

    def go_today(self) -> None:
        self.jump_to_day(self.today())

    def visible_week(self) -> list[date]:
        return week_days(self.week_cursor)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def status_of(self, day: date) -> ActivityStatus:
        return self.daily_status.get(day, ActivityStatus.DEFAULT)

    def current_status(self) -> ActivityStatus:
        return self.status_of(self.selected_day)

    def can_freeze(self) -> bool:
        return (self.goal_freeze_count < freeze_allowance(self.duration)
                and self.current_status() != ActivityStatus.LOGGED)

    def is_goal_complete(self, duration: Duration | None = None) -> bool:
        target = required_days(duration or self.duration)
        return self.days_completed >= target

    @property
    def days_completed(self) -> int:
        return self.goal_logged_count + self.goal_freeze_count

    @property
    def required_days(self) -> int:
        return required_days(self.duration)

    @property
    def freezes_remaining(self) -> int:
        return max(0, freeze_allowance(self.duration) - self.goal_freeze_count)

    def aggregate_logged_count(self) -> int:
        return sum(1 for s in self.daily_status.values() if s == ActivityStatus.LOGGED)

    def aggregate_freezed_count(self) -> int:
        return sum(1 for s in self.daily_status.values() if s == ActivityStatus.FREEZED)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def log_learned(self) -> None:
        self._record(ActivityStatus.LOGGED)

    def log_freezed(self) -> None:
        if not self.can_freeze():
            logger.warning(
                f"Freeze logged for {self.selected_day} although it is not allowed "
                f"({self.goal_freeze_count}/{freeze_allowance(self.duration)} used, "
                f"status {self.current_status().value})"
            )
        self._record(ActivityStatus.FREEZED)

    def _record(self, status: ActivityStatus) -> None:
        day = self.selected_day
        was_complete = self.is_goal_complete()

        if self.overwrite_policy is OverwritePolicy.RECONCILE:
            previous = self._attempt_days.get(day)
            if previous != status:
                if previous is not None:
                    self._bump(previous, -1)
                self._bump(status, 1)
        else:
            self._bump(status, 1)

        self._attempt_days[day] = status
        self.daily_status[day] = status
        logger.debug(
            f"{day} -> {status.value} (logged={self.goal_logged_count}, "
            f"freezed={self.goal_freeze_count})"
        )
        if not was_complete and self.is_goal_complete():
            logger.info(
                f"Goal complete: {self.topic} in a {self.duration.value.lower()} "
                f"({self.days_completed}/{self.required_days} days)"
            )
        self._notify()

    def _bump(self, status: ActivityStatus, step: int) -> None:
        if status == ActivityStatus.LOGGED:
            self.goal_logged_count = max(0, self.goal_logged_count + step)
        elif status == ActivityStatus.FREEZED:
            self.goal_freeze_count = max(0, self.goal_freeze_count + step)

    def reset_for_new_goal(self) -> None:
        """Zero the goal counters; history, cursor and selection stay."""
        self.goal_logged_count = 0
        self.goal_freeze_count = 0
        self._attempt_days.clear()
        self._notify()

    def start_goal(self, topic: str, duration: Duration) -> None:
        topic = topic.strip()
        if not topic:
            raise ValueError("learning topic must not be empty")
        self.topic = topic
        self.duration = duration
        logger.info(f"New goal: learn {topic} in a {duration.value.lower()}")
        self.reset_for_new_goal()
