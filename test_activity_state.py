"""Tests for ActivityState: navigation, logging, freezes and goal progress."""

from datetime import date, timedelta

import pytest
from loguru import logger

from activity_state import ActivityState, ActivityStatus, OverwritePolicy
from goal_policy import Duration

TODAY = date(2026, 10, 21)  # a Wednesday


@pytest.fixture
def state():
    return ActivityState(duration=Duration.WEEK, today=TODAY)


@pytest.fixture
def reconcile_state():
    return ActivityState(duration=Duration.WEEK, today=TODAY,
                         overwrite_policy=OverwritePolicy.RECONCILE)


@pytest.fixture
def log_messages():
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record), level="DEBUG")
    yield messages
    logger.remove(handler_id)


# ----------------------------------------------------------------------
# Creation and navigation
# ----------------------------------------------------------------------
def test_initial_state(state):
    assert state.selected_day == TODAY
    assert state.week_cursor == date(2026, 10, 19)
    assert state.daily_status == {}
    assert state.goal_logged_count == 0
    assert state.goal_freeze_count == 0
    assert state.current_status() is ActivityStatus.DEFAULT


def test_week_cursor_respects_first_weekday():
    s = ActivityState(today=TODAY, first_weekday=6)
    assert s.week_cursor == date(2026, 10, 18)


def test_select_day_has_no_range_restriction(state):
    past = date(1999, 1, 1)
    future = date(2100, 12, 31)
    state.select_day(past)
    assert state.selected_day == past
    state.select_day(future)
    assert state.selected_day == future
    # the visible week does not follow a plain selection
    assert state.week_cursor == date(2026, 10, 19)


def test_navigate_week_round_trip(state):
    start = state.week_cursor
    state.navigate_week(1)
    assert state.week_cursor == start + timedelta(weeks=1)
    state.navigate_week(-1)
    assert state.week_cursor == start


def test_navigate_week_far_and_back(state):
    start = state.week_cursor
    state.navigate_week(-60)
    state.navigate_week(60)
    assert state.week_cursor == start


def test_jump_to_day_moves_selection_and_week(state):
    state.jump_to_day(date(2025, 1, 1))
    assert state.selected_day == date(2025, 1, 1)
    assert state.week_cursor == date(2024, 12, 30)
    state.go_today()
    assert state.selected_day == TODAY
    assert state.week_cursor == date(2026, 10, 19)


def test_visible_week(state):
    days = state.visible_week()
    assert days[0] == date(2026, 10, 19)
    assert days[-1] == date(2026, 10, 25)


# ----------------------------------------------------------------------
# Logging and freezes
# ----------------------------------------------------------------------
def test_log_learned_sets_status_and_counts(state):
    state.log_learned()
    assert state.current_status() is ActivityStatus.LOGGED
    assert state.status_of(TODAY) is ActivityStatus.LOGGED
    assert state.goal_logged_count == 1


def test_unlogged_day_is_default(state):
    state.log_learned()
    assert state.status_of(TODAY + timedelta(days=1)) is ActivityStatus.DEFAULT


def test_week_scenario_two_freezes_then_five_days(state):
    for offset in (0, 1):
        state.select_day(TODAY + timedelta(days=offset))
        state.log_freezed()
    assert state.goal_freeze_count == 2
    state.select_day(TODAY + timedelta(days=2))
    assert state.can_freeze() is False

    for offset in range(2, 7):
        state.select_day(TODAY + timedelta(days=offset))
        state.log_learned()
    assert state.goal_logged_count == 5
    assert state.is_goal_complete(Duration.WEEK) is True
    assert state.is_goal_complete() is True
    assert state.is_goal_complete(Duration.MONTH) is False


def test_can_freeze_false_on_logged_day(state):
    state.log_learned()
    assert state.can_freeze() is False
    state.select_day(TODAY + timedelta(days=1))
    assert state.can_freeze() is True


def test_can_freeze_independent_of_logged_count(state):
    for offset in range(10):
        state.select_day(TODAY + timedelta(days=offset))
        state.log_learned()
    state.select_day(TODAY + timedelta(days=20))
    assert state.can_freeze() is True
    state.log_freezed()
    assert state.can_freeze() is True
    state.log_freezed()
    assert state.goal_freeze_count == 2
    assert state.can_freeze() is False


def test_freeze_allowance_follows_duration():
    s = ActivityState(duration=Duration.MONTH, today=TODAY)
    for offset in range(8):
        s.select_day(TODAY + timedelta(days=offset))
        assert s.can_freeze()
        s.log_freezed()
    assert s.can_freeze() is False
    assert s.freezes_remaining == 0


def test_freeze_beyond_allowance_still_applies_and_warns(state, log_messages):
    state.log_freezed()
    state.log_freezed()
    state.log_freezed()
    assert state.goal_freeze_count == 3
    assert any(r["level"].name == "WARNING" for r in log_messages)


@pytest.mark.parametrize("duration, quota", [
    (Duration.WEEK, 7), (Duration.MONTH, 30), (Duration.YEAR, 365),
])
def test_goal_complete_threshold(duration, quota):
    s = ActivityState(duration=duration, today=TODAY)
    s.goal_logged_count = quota - 1
    assert not s.is_goal_complete(duration)
    s.goal_freeze_count = 1
    assert s.is_goal_complete(duration)


# ----------------------------------------------------------------------
# Goal reset and aggregates
# ----------------------------------------------------------------------
def test_reset_keeps_history_cursor_and_selection(state):
    state.log_learned()
    state.select_day(TODAY + timedelta(days=1))
    state.log_freezed()
    state.navigate_week(2)
    cursor, selected = state.week_cursor, state.selected_day

    state.reset_for_new_goal()
    assert state.goal_logged_count == 0
    assert state.goal_freeze_count == 0
    assert len(state.daily_status) == 2
    assert state.week_cursor == cursor
    assert state.selected_day == selected
    assert state.aggregate_logged_count() == 1
    assert state.aggregate_freezed_count() == 1


def test_start_goal_switches_goal_and_resets(state):
    state.log_learned()
    state.start_goal("  Python ", Duration.MONTH)
    assert state.topic == "Python"
    assert state.duration is Duration.MONTH
    assert state.days_completed == 0
    assert state.required_days == 30
    assert state.status_of(TODAY) is ActivityStatus.LOGGED


def test_start_goal_rejects_blank_topic(state):
    with pytest.raises(ValueError):
        state.start_goal("   ", Duration.YEAR)
    assert state.topic == "Swift"
    assert state.duration is Duration.WEEK


def test_aggregates_count_whole_history(state):
    for offset in range(3):
        state.select_day(TODAY - timedelta(days=offset))
        state.log_learned()
    state.reset_for_new_goal()
    state.select_day(TODAY + timedelta(days=1))
    state.log_learned()
    assert state.goal_logged_count == 1
    assert state.aggregate_logged_count() == 4
    assert state.aggregate_freezed_count() == 0


# ----------------------------------------------------------------------
# Overwriting a day: both counter policies
# ----------------------------------------------------------------------
def test_accumulate_double_counts_repeat_logging(state):
    state.log_learned()
    state.log_learned()
    assert state.goal_logged_count == 2
    assert state.aggregate_logged_count() == 1


def test_accumulate_overwrite_inflates_both_counters(state):
    state.log_learned()
    state.log_freezed()
    assert state.current_status() is ActivityStatus.FREEZED
    assert state.goal_logged_count == 1
    assert state.goal_freeze_count == 1
    assert state.days_completed == 2
    assert len(state.daily_status) == 1


def test_reconcile_ignores_repeat_logging(reconcile_state):
    reconcile_state.log_learned()
    reconcile_state.log_learned()
    assert reconcile_state.goal_logged_count == 1


def test_reconcile_moves_count_on_overwrite(reconcile_state):
    reconcile_state.log_freezed()
    reconcile_state.log_learned()
    assert reconcile_state.current_status() is ActivityStatus.LOGGED
    assert reconcile_state.goal_logged_count == 1
    assert reconcile_state.goal_freeze_count == 0
    assert reconcile_state.days_completed == 1


def test_reconcile_counts_day_from_previous_attempt_again(reconcile_state):
    reconcile_state.log_learned()
    reconcile_state.reset_for_new_goal()
    reconcile_state.log_learned()
    assert reconcile_state.goal_logged_count == 1


# ----------------------------------------------------------------------
# Change notification
# ----------------------------------------------------------------------
def test_every_mutation_notifies(state):
    seen = []
    state.subscribe(lambda s: seen.append((s.goal_logged_count, s.selected_day)))

    state.select_day(TODAY + timedelta(days=1))
    state.navigate_week(1)
    state.jump_to_day(TODAY)
    state.log_learned()
    state.select_day(TODAY + timedelta(days=1))
    state.log_freezed()
    state.reset_for_new_goal()
    state.start_goal("Go", Duration.WEEK)
    assert len(seen) == 8
    # listeners observe the state after the mutation
    assert seen[3] == (1, TODAY)


def test_queries_do_not_notify(state):
    seen = []
    state.subscribe(seen.append)
    state.current_status()
    state.can_freeze()
    state.is_goal_complete()
    state.aggregate_logged_count()
    assert seen == []


def test_unsubscribe(state):
    seen = []
    unsubscribe = state.subscribe(seen.append)
    state.log_learned()
    unsubscribe()
    unsubscribe()
    state.log_learned()
    assert len(seen) == 1


def test_failing_listener_does_not_block_others(state, log_messages):
    seen = []

    def broken(_s):
        raise RuntimeError("boom")

    state.subscribe(broken)
    state.subscribe(seen.append)
    state.log_learned()
    assert seen == [state]
    assert any(r["level"].name == "ERROR" for r in log_messages)
