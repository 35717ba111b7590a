"""Market-hours check and caller polling cadence.

Deliberately simplified: weekends are closed and the regular session is a
fixed window of local wall-clock hours. Exchange holidays, half days and the
exchange timezone are not modelled.
"""

from __future__ import annotations

from datetime import datetime

DEFAULT_OPEN_HOUR = 9
DEFAULT_CLOSE_HOUR = 16

OPEN_REFRESH_SECONDS = 30
CLOSED_REFRESH_SECONDS = 300


def is_market_open(
    now: datetime | None = None,
    open_hour: int = DEFAULT_OPEN_HOUR,
    close_hour: int = DEFAULT_CLOSE_HOUR,
) -> bool:
    """Check if the market counts as open.

    Args:
        now: Local datetime to check. Defaults to ``datetime.now()``.
        open_hour: First hour of the session (inclusive).
        close_hour: Hour the session ends (exclusive).
    """
    if now is None:
        now = datetime.now()

    if now.weekday() >= 5:  # Saturday, Sunday
        return False
    return open_hour <= now.hour < close_hour


def refresh_interval(
    now: datetime | None = None,
    open_hour: int = DEFAULT_OPEN_HOUR,
    close_hour: int = DEFAULT_CLOSE_HOUR,
) -> int:
    """Seconds a polling caller should wait before asking again."""
    if is_market_open(now, open_hour, close_hour):
        return OPEN_REFRESH_SECONDS
    return CLOSED_REFRESH_SECONDS
