"""Calendar-month periods used to match enrollments to sessions."""

from datetime import date

from tutordesk.utils.datetime import today_local


def period_bounds(year: int, month: int) -> tuple[date, date]:
    """
    Return the half-open date range [first day, first day of next month).

    This is the only rule deciding whether a session belongs to an
    enrollment's month; both creation and approval go through it.

    Raises:
        ValueError: If month is outside 1-12
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")

    start = date(year, month, 1)
    if month == 12:
        end = date(year + 1, 1, 1)
    else:
        end = date(year, month + 1, 1)
    return start, end


def is_past_period(year: int, month: int, today: date | None = None) -> bool:
    """True when (year, month) is strictly before the current month."""
    today = today or today_local()
    return (year, month) < (today.year, today.month)
