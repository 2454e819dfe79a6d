# The MIT License (MIT)
#
# Copyright (c) Arie Bovenberg
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
"""Calendar math and field normalization.

Everything here operates on plain integers. The functions assume their
inputs are already validated unless documented otherwise; validation
lives in the ``check_*`` helpers.
"""
from __future__ import annotations

from ._errors import OutOfRange

MIN_YEAR = 1
MAX_YEAR = 9999
MAX_ORDINAL = 3_652_059  # Date(9999, 12, 31).toordinal()
MAX_DELTA_DAYS = 999_999_999
UNIX_EPOCH_ORDINAL = 719_163  # Date(1970, 1, 1).toordinal()

SECONDS_PER_DAY = 86_400
US_PER_MS = 1_000
US_PER_SECOND = 1_000_000
US_PER_DAY = SECONDS_PER_DAY * US_PER_SECOND

# 1-indexed, valid for non-leap years only
_DAYS_IN_MONTH = (0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
_DAYS_BEFORE_MONTH = (0, 0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)

# days in 4, 100, and 400 year cycles
_DI4Y = 1_461
_DI100Y = 36_524
_DI400Y = 146_097


def is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    return _DAYS_IN_MONTH[month] + (month == 2 and is_leap(year))


def days_before_month(year: int, month: int) -> int:
    """Number of days in the year preceding the first day of the month"""
    return _DAYS_BEFORE_MONTH[month] + (month > 2 and is_leap(year))


def days_before_year(year: int) -> int:
    """Number of days before January 1st of the year.
    ``days_before_year(1) == 0``"""
    y = year - 1
    return y * 365 + y // 4 - y // 100 + y // 400


def day_of_year(year: int, month: int, day: int) -> int:
    return days_before_month(year, month) + day


def ymd_to_ordinal(year: int, month: int, day: int) -> int:
    return days_before_year(year) + days_before_month(year, month) + day


def ordinal_to_ymd(ordinal: int) -> tuple[int, int, int]:
    """Inverse of :func:`ymd_to_ordinal`. Day 1 is 0001-01-01.

    The leap year pattern repeats every 400 years, so we peel off whole
    400, 100, 4 and 1 year cycles from the zero-based day offset.
    """
    n400, n = divmod(ordinal - 1, _DI400Y)
    n100, n = divmod(n, _DI100Y)
    n4, n = divmod(n, _DI4Y)
    n1, n = divmod(n, 365)

    year = n400 * 400 + n100 * 100 + n4 * 4 + n1 + 1
    # Four whole cycles means we landed on Dec 31st of the last
    # (leap) year of a 4 or 400 year cycle.
    if n1 == 4 or n100 == 4:
        assert n == 0
        return year - 1, 12, 31

    # n is now the offset from January 1st. The estimate below is
    # either exact or one month too large.
    leapyear = n1 == 3 and (n4 != 24 or n100 == 3)
    assert leapyear == is_leap(year)
    month = (n + 50) >> 5
    preceding = _DAYS_BEFORE_MONTH[month] + (month > 2 and leapyear)
    if preceding > n:
        month -= 1
        preceding -= days_in_month(year, month)
    n -= preceding
    assert 0 <= n < days_in_month(year, month)
    return year, month, n + 1


def weekday(year: int, month: int, day: int) -> int:
    """Day of the week, where Monday is 0. 0001-01-01 was a Monday."""
    return (ymd_to_ordinal(year, month, day) + 6) % 7


def iso_week1_monday(year: int) -> int:
    """Ordinal of the Monday starting ISO week 1: the first week
    containing a Thursday."""
    first_day = ymd_to_ordinal(year, 1, 1)
    first_weekday = (first_day + 6) % 7
    week1_monday = first_day - first_weekday
    if first_weekday > 3:  # Jan 1st is a Friday, Saturday or Sunday
        week1_monday += 7
    return week1_monday


def has_53_weeks(year: int) -> bool:
    # years starting on Thursday, and leap years starting on Wednesday
    first_weekday = weekday(year, 1, 1)
    return first_weekday == 3 or (first_weekday == 2 and is_leap(year))


def iso_calendar(year: int, month: int, day: int) -> tuple[int, int, int]:
    """The ISO (year, week, weekday) of a valid date"""
    week1_monday = iso_week1_monday(year)
    today = ymd_to_ordinal(year, month, day)
    week, d = divmod(today - week1_monday, 7)
    if week < 0:
        year -= 1
        week, d = divmod(today - iso_week1_monday(year), 7)
    elif week >= 52 and today >= iso_week1_monday(year + 1):
        year += 1
        week = 0
    return year, week + 1, d + 1


def iso_to_ordinal(year: int, week: int, day: int) -> int:
    """Ordinal of an ISO (year, week, weekday), validating its fields"""
    check_int(year, "year")
    check_int(week, "week")
    check_int(day, "day")
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise OutOfRange(f"Year out of range: {year}")
    if not 0 < week < 53 and not (week == 53 and has_53_weeks(year)):
        raise OutOfRange(f"Invalid week: {week}")
    if not 0 < day < 8:
        raise OutOfRange(f"Invalid weekday: {day} (range is [1, 7])")
    return iso_week1_monday(year) + (week - 1) * 7 + day - 1


# ---------------------------------------------------------------------------
# Range checks, in year -> month -> day -> hour -> ... order.
# ---------------------------------------------------------------------------


def check_int(value: object, name: str) -> None:
    if not isinstance(value, int):
        raise TypeError(
            f"{name} must be an integer, got {type(value).__name__}"
        )


def check_date_fields(year: int, month: int, day: int) -> None:
    check_int(year, "year")
    check_int(month, "month")
    check_int(day, "day")
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise OutOfRange(f"year must be in {MIN_YEAR}..{MAX_YEAR}: {year}")
    if not 1 <= month <= 12:
        raise OutOfRange(f"month must be in 1..12: {month}")
    dim = days_in_month(year, month)
    if not 1 <= day <= dim:
        raise OutOfRange(f"day must be in 1..{dim}: {day}")


def check_time_fields(
    hour: int, minute: int, second: int, microsecond: int
) -> None:
    check_int(hour, "hour")
    check_int(minute, "minute")
    check_int(second, "second")
    check_int(microsecond, "microsecond")
    if not 0 <= hour <= 23:
        raise OutOfRange(f"hour must be in 0..23: {hour}")
    if not 0 <= minute <= 59:
        raise OutOfRange(f"minute must be in 0..59: {minute}")
    if not 0 <= second <= 59:
        raise OutOfRange(f"second must be in 0..59: {second}")
    if not 0 <= microsecond <= 999_999:
        raise OutOfRange(f"microsecond must be in 0..999999: {microsecond}")


def check_delta_days(days: int) -> None:
    if not -MAX_DELTA_DAYS <= days <= MAX_DELTA_DAYS:
        raise OutOfRange(
            f"days must be in {-MAX_DELTA_DAYS}..{MAX_DELTA_DAYS}: {days}"
        )


def check_ordinal(ordinal: int) -> None:
    check_int(ordinal, "ordinal")
    if not 1 <= ordinal <= MAX_ORDINAL:
        raise OutOfRange(f"ordinal must be in 1..{MAX_ORDINAL}: {ordinal}")


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize_pair(hi: int, lo: int, factor: int) -> tuple[int, int]:
    """One step of a mixed-radix carry: one ``hi`` unit equals ``factor``
    ``lo`` units. Returns ``(hi, lo)`` with ``0 <= lo < factor``.
    Negative ``lo`` borrows from ``hi`` (floor division)."""
    assert factor > 0
    if lo < 0 or lo >= factor:
        carry, lo = divmod(lo, factor)
        hi += carry
    return hi, lo


def normalize_duration_fields(
    days: int, seconds: int, microseconds: int
) -> tuple[int, int, int]:
    seconds, microseconds = normalize_pair(
        seconds, microseconds, US_PER_SECOND
    )
    days, seconds = normalize_pair(days, seconds, SECONDS_PER_DAY)
    return days, seconds, microseconds


def normalize_date_fields(
    year: int, month: int, day: int
) -> tuple[int, int, int]:
    """Bring an out-of-range day back into its month, carrying into
    month and year. ``month`` must already be in 1..12.

    Raises
    ------
    OutOfRange
        If the resulting date is before year 1 or after year 9999.
    """
    assert 1 <= month <= 12
    dim = days_in_month(year, month)
    if day < 1 or day > dim:
        # off by one day (e.g. a few hours of carry) is the common case
        if day == 0:
            if month > 1:
                month -= 1
                day = days_in_month(year, month)
            else:
                year, month, day = year - 1, 12, 31
        elif day == dim + 1:
            if month < 12:
                month, day = month + 1, 1
            else:
                year, month, day = year + 1, 1, 1
        else:
            ordinal = ymd_to_ordinal(year, month, 1) + day - 1
            if not 1 <= ordinal <= MAX_ORDINAL:
                raise OutOfRange("Date out of range")
            return ordinal_to_ymd(ordinal)
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise OutOfRange("Date out of range")
    return year, month, day


def normalize_datetime_fields(
    year: int,
    month: int,
    day: int,
    hour: int,
    minute: int,
    second: int,
    microsecond: int,
) -> tuple[int, int, int, int, int, int, int]:
    second, microsecond = normalize_pair(second, microsecond, US_PER_SECOND)
    minute, second = normalize_pair(minute, second, 60)
    hour, minute = normalize_pair(hour, minute, 60)
    day, hour = normalize_pair(day, hour, 24)
    year, month, day = normalize_date_fields(year, month, day)
    return year, month, day, hour, minute, second, microsecond


def ordinal_seconds(
    year: int, month: int, day: int, hour: int, minute: int, second: int
) -> int:
    """Seconds since midnight of ordinal day 0 (0000-12-31)"""
    ordinal = ymd_to_ordinal(year, month, day)
    return ((ordinal * 24 + hour) * 60 + minute) * 60 + second
