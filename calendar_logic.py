"""Pure calendar calculations, no UI dependencies.

A calendar-day key is a plain ``datetime.date``.  Weeks start on
``first_weekday`` (0 = Monday … 6 = Sunday, the numbering used by
``date.weekday()`` and the stdlib ``calendar`` module).
"""

import calendar
from datetime import date, datetime, timedelta

DAY_ABBR = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

GRID_ROWS = 6
GRID_COLS = 7
GRID_CELLS = GRID_ROWS * GRID_COLS


def day_key(instant: date | datetime | float) -> date:
    """Truncate an instant to its local calendar day.

    Aware datetimes are converted to local time first, naive ones are taken
    as local wall time and numbers as POSIX timestamps.
    """
    if isinstance(instant, datetime):
        if instant.tzinfo is not None:
            instant = instant.astimezone()
        return instant.date()
    if isinstance(instant, date):
        return instant
    return datetime.fromtimestamp(instant).date()


def today() -> date:
    return day_key(datetime.now())


def week_start(day: date, first_weekday: int = 0) -> date:
    """Return the first day of the week containing ``day``.

    Clamped to ``date.min`` for the first, partial week of the calendar.
    """
    offset = (day.weekday() - first_weekday) % 7
    if (day - date.min).days < offset:
        return date.min
    return day - timedelta(days=offset)


def add_days(day: date, n: int) -> date:
    return day + timedelta(days=n)


def add_weeks(week: date, n: int) -> date:
    return week + timedelta(weeks=n)


def week_days(week: date) -> list[date]:
    """Return the seven consecutive days starting at ``week``."""
    return [add_days(week, i) for i in range(7)]


def day_of_month(day: date) -> int:
    return day.day


def weekday_abbreviation(day: date) -> str:
    """Return e.g. ``"MON"`` for a Monday."""
    return DAY_ABBR[day.weekday()].upper()


def weekday_headers(first_weekday: int = 0) -> list[str]:
    """Column headers for a grid whose weeks start on ``first_weekday``."""
    return [DAY_ABBR[(first_weekday + i) % 7] for i in range(7)]


def month_cells(instant: date | datetime | float,
                first_weekday: int = 0) -> list[date | None]:
    """Return the 42 cells for the month containing ``instant``.

    Leading cells before the 1st and trailing cells after the last day are
    ``None``.  The length never changes so every month renders as 6 rows.
    """
    first = day_key(instant).replace(day=1)
    n_days = calendar.monthrange(first.year, first.month)[1]
    lead = (first.weekday() - first_weekday) % 7

    cells: list[date | None] = [None] * lead
    cells.extend(first + timedelta(days=i) for i in range(n_days))
    while len(cells) % GRID_COLS != 0 or len(cells) < GRID_CELLS:
        cells.append(None)
    return cells


def month_grid(year: int, month: int,
               first_weekday: int = 0) -> list[list[date | None]]:
    """Return ``month_cells`` for the given month as 6 rows of 7."""
    cells = month_cells(date(year, month, 1), first_weekday)
    return [cells[r * GRID_COLS:(r + 1) * GRID_COLS] for r in range(GRID_ROWS)]


def week_numbers(year: int, month: int, first_weekday: int = 0) -> list[str]:
    """Return ISO week numbers for each of the 6 grid rows.

    If a row is entirely empty, returns an empty string for that row.
    """
    weeks: list[str] = []
    for row in month_grid(year, month, first_weekday):
        # Find the first actual day in the row to derive the week number
        day = next((d for d in row if d is not None), None)
        weeks.append("" if day is None else str(day.isocalendar()[1]))
    return weeks


def month_title(year: int, month: int) -> str:
    return f"{calendar.month_name[month]} {year}"


def prev_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month earlier."""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month later."""
    if month == 12:
        return year + 1, 1
    return year, month + 1
