"""Period resolution for dashboard range filters.

Turns a (range mode, range value) pair into the current period and the
immediately preceding period of the same mode. Boundaries are local
midnights in the dashboard time zone, so a month is always a calendar month
and a year a calendar year, never a fixed number of days.

A missing or malformed range value never fails the request: the mode's
current period (according to the injected clock) is substituted and the
window is flagged as defaulted.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from app.core.clock import Clock
from app.core.logging import get_logger
from app.features.dashboard.schemas import Period, PeriodWindow, RangeMode

logger = get_logger(__name__)

DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")
YEAR_PATTERN = re.compile(r"^(\d{4})$")

MIN_YEAR = 1900
MAX_YEAR = 9998


class InvalidRangeValueError(ValueError):
    """Range value is missing, malformed or out of range for its mode."""

    def __init__(self, mode: RangeMode, value: str | None, reason: str) -> None:
        super().__init__(f"Invalid {mode.value} range value {value!r}: {reason}")
        self.mode = mode
        self.value = value
        self.reason = reason


def _check_year(mode: RangeMode, value: str, year: int) -> None:
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidRangeValueError(mode, value, f"year must be {MIN_YEAR}-{MAX_YEAR}")


def parse_anchor(mode: RangeMode, value: str | None) -> date:
    """Parse a range value into the first local day of its period.

    Week values snap back to the Monday of the week they fall in.

    Args:
        mode: Range mode the value belongs to.
        value: Raw range value.

    Returns:
        First calendar day of the period.

    Raises:
        InvalidRangeValueError: If the value is missing or does not parse.
    """
    if value is None or not value.strip():
        raise InvalidRangeValueError(mode, value, "missing")
    text = value.strip()

    if mode in (RangeMode.DAY, RangeMode.WEEK):
        match = DATE_PATTERN.match(text)
        if match is None:
            raise InvalidRangeValueError(mode, value, "expected YYYY-MM-DD")
        year, month, day = (int(part) for part in match.groups())
        _check_year(mode, value, year)
        try:
            anchor = date(year, month, day)
        except ValueError as e:
            raise InvalidRangeValueError(mode, value, str(e)) from e
        if mode == RangeMode.WEEK:
            anchor -= timedelta(days=anchor.weekday())
        return anchor

    if mode == RangeMode.MONTH:
        match = MONTH_PATTERN.match(text)
        if match is None:
            raise InvalidRangeValueError(mode, value, "expected YYYY-MM")
        year, month = (int(part) for part in match.groups())
        _check_year(mode, value, year)
        if not 1 <= month <= 12:
            raise InvalidRangeValueError(mode, value, "month must be 01-12")
        return date(year, month, 1)

    match = YEAR_PATTERN.match(text)
    if match is None:
        raise InvalidRangeValueError(mode, value, "expected YYYY")
    year = int(match.group(1))
    _check_year(mode, value, year)
    return date(year, 1, 1)


def shift_anchor(anchor: date, mode: RangeMode, steps: int) -> date:
    """Move a period anchor by whole periods (negative = backwards)."""
    if mode == RangeMode.DAY:
        return anchor + timedelta(days=steps)
    if mode == RangeMode.WEEK:
        return anchor + timedelta(days=7 * steps)
    if mode == RangeMode.MONTH:
        index = anchor.year * 12 + (anchor.month - 1) + steps
        return date(index // 12, index % 12 + 1, 1)
    return date(anchor.year + steps, 1, 1)


def format_range_value(anchor: date, mode: RangeMode) -> str:
    """Render an anchor back into the mode's range value format."""
    if mode == RangeMode.MONTH:
        return f"{anchor.year:04d}-{anchor.month:02d}"
    if mode == RangeMode.YEAR:
        return f"{anchor.year:04d}"
    return anchor.isoformat()


def current_anchor(mode: RangeMode, now: datetime, zone: ZoneInfo) -> date:
    """First day of the period containing `now` in the given zone."""
    today = now.astimezone(zone).date()
    if mode == RangeMode.DAY:
        return today
    if mode == RangeMode.WEEK:
        return today - timedelta(days=today.weekday())
    if mode == RangeMode.MONTH:
        return today.replace(day=1)
    return date(today.year, 1, 1)


def local_midnight(day: date, zone: ZoneInfo) -> datetime:
    """Aware datetime for 00:00 local time on `day`."""
    return datetime(day.year, day.month, day.day, tzinfo=zone)


class PeriodResolver:
    """Resolve range filters into current/previous period boundaries.

    Attributes:
        time_zone: IANA time zone name used for calendar boundaries.
        clock: Source of "now" for defaulted periods.
    """

    def __init__(self, time_zone: str, clock: Clock) -> None:
        self.time_zone = time_zone
        self.zone = ZoneInfo(time_zone)
        self.clock = clock

    def resolve(self, mode: RangeMode, range_value: str | None) -> PeriodWindow:
        """Resolve a range mode and value into a PeriodWindow.

        Args:
            mode: Range mode.
            range_value: Mode-specific reference value (may be None).

        Returns:
            Current and previous periods with the resolved value.
        """
        defaulted = False
        try:
            anchor = parse_anchor(mode, range_value)
        except InvalidRangeValueError as e:
            defaulted = True
            anchor = current_anchor(mode, self.clock.now(), self.zone)
            if e.reason != "missing":
                logger.warning(
                    "dashboard.range_value_invalid",
                    range_mode=mode.value,
                    range_value=range_value,
                    reason=e.reason,
                    substituted=format_range_value(anchor, mode),
                )

        return PeriodWindow(
            current=self.period_for(anchor, mode),
            previous=self.period_for(shift_anchor(anchor, mode, -1), mode),
            range_value=format_range_value(anchor, mode),
            defaulted=defaulted,
        )

    def current(self, mode: RangeMode) -> PeriodWindow:
        """Window for the period containing the clock's current instant."""
        return self.resolve(mode, None)

    def period_for(self, anchor: date, mode: RangeMode) -> Period:
        """Period starting at `anchor` and spanning one unit of `mode`."""
        return Period(
            start=local_midnight(anchor, self.zone),
            end=local_midnight(shift_anchor(anchor, mode, 1), self.zone),
            mode=mode,
            time_zone=self.time_zone,
        )

    def trailing_days(self, days: int) -> Period:
        """Lookback window of `days` whole local days ending with today.

        Args:
            days: Number of days, including today.

        Returns:
            Period [today - (days - 1), tomorrow) with no mode.
        """
        if days < 1:
            raise ValueError("days must be >= 1")
        today = self.clock.now().astimezone(self.zone).date()
        return Period(
            start=local_midnight(today - timedelta(days=days - 1), self.zone),
            end=local_midnight(today + timedelta(days=1), self.zone),
            mode=None,
            time_zone=self.time_zone,
        )
