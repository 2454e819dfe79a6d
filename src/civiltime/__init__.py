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

# Maintainer's notes:
#
# - The value types live together in this file, so they can refer to
#   each other without circular imports. Calendar math, text codecs and
#   the local-offset resolver are in private modules.
# - All types are immutable. Internal code that has already guaranteed
#   canonical fields uses the ``_from_fields_unchecked`` constructors,
#   which only validate when assertions are enabled.
from __future__ import annotations

__version__ = "0.1.0"

from operator import attrgetter
from typing import TYPE_CHECKING, ClassVar, NamedTuple, overload

from . import _format, _math, _system
from ._errors import InvalidFormat, OutOfRange
from ._math import (
    SECONDS_PER_DAY,
    UNIX_EPOCH_ORDINAL,
    US_PER_DAY,
    US_PER_MS,
    US_PER_SECOND,
)
from ._system import (
    FixedOffsetResolver,
    LocalOffsetResolver,
    SystemResolver,
    get_local_resolver,
    set_local_resolver,
)

__all__ = [
    "Date",
    "Time",
    "DateTime",
    "Duration",
    "IsoCalendarDate",
    "OutOfRange",
    "InvalidFormat",
    "LocalOffsetResolver",
    "SystemResolver",
    "FixedOffsetResolver",
    "get_local_resolver",
    "set_local_resolver",
    "MINYEAR",
    "MAXYEAR",
]

MINYEAR = _math.MIN_YEAR
MAXYEAR = _math.MAX_YEAR

MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(1, 8)


class IsoCalendarDate(NamedTuple):
    """A date expressed as ISO year, week number and weekday (1-7)"""

    year: int
    week: int
    weekday: int


class Duration:
    """A signed amount of time with microsecond resolution.

    Stored normalized as ``(days, seconds, microseconds)`` where
    ``0 <= seconds < 86400`` and ``0 <= microseconds < 1_000_000``,
    so the sign lives entirely in ``days``.

    Example
    -------

    >>> d = Duration(hours=1, minutes=30)
    >>> d
    Duration(0, 5400)
    >>> str(d)
    '1:30:00'
    >>> str(-d)
    '-1 day, 22:30:00'

    """

    __slots__ = ("_days", "_seconds", "_microseconds")

    ZERO: ClassVar[Duration]
    """A duration of zero"""
    min: ClassVar[Duration]
    max: ClassVar[Duration]
    resolution: ClassVar[Duration]

    def __init__(
        self,
        days: int = 0,
        seconds: int = 0,
        microseconds: int = 0,
        milliseconds: int = 0,
        minutes: int = 0,
        hours: int = 0,
        weeks: int = 0,
    ) -> None:
        _math.check_int(days, "days")
        _math.check_int(seconds, "seconds")
        _math.check_int(microseconds, "microseconds")
        _math.check_int(milliseconds, "milliseconds")
        _math.check_int(minutes, "minutes")
        _math.check_int(hours, "hours")
        _math.check_int(weeks, "weeks")
        total = (
            (((weeks * 7 + days) * 24 + hours) * 60 + minutes) * 60 + seconds
        ) * US_PER_SECOND + milliseconds * US_PER_MS + microseconds
        self._days, self._seconds, self._microseconds = _split_us(total)

    @classmethod
    def _from_fields(
        cls, days: int, seconds: int, microseconds: int
    ) -> Duration:
        days, seconds, microseconds = _math.normalize_duration_fields(
            days, seconds, microseconds
        )
        _math.check_delta_days(days)
        return cls._from_fields_unchecked(days, seconds, microseconds)

    @classmethod
    def _from_days(cls, days: int) -> Duration:
        # a whole number of days is already normalized
        _math.check_delta_days(days)
        return cls._from_fields_unchecked(days, 0, 0)

    @classmethod
    def _from_microseconds(cls, us: int) -> Duration:
        return cls._from_fields_unchecked(*_split_us(us))

    @classmethod
    def _from_fields_unchecked(
        cls, days: int, seconds: int, microseconds: int
    ) -> Duration:
        assert -_math.MAX_DELTA_DAYS <= days <= _math.MAX_DELTA_DAYS
        assert 0 <= seconds < SECONDS_PER_DAY
        assert 0 <= microseconds < US_PER_SECOND
        self = _object_new(cls)
        self._days = days
        self._seconds = seconds
        self._microseconds = microseconds
        return self

    @property
    def days(self) -> int:
        return self._days

    @property
    def seconds(self) -> int:
        return self._seconds

    @property
    def microseconds(self) -> int:
        return self._microseconds

    def total_microseconds(self) -> int:
        """The total duration in microseconds

        Example
        -------

        >>> Duration(seconds=2, microseconds=50).total_microseconds()
        2000050

        """
        return (
            self._days * SECONDS_PER_DAY + self._seconds
        ) * US_PER_SECOND + self._microseconds

    def total_milliseconds(self) -> int:
        """The total duration in whole milliseconds, rounded down"""
        return self.total_microseconds() // US_PER_MS

    def total_seconds(self) -> int:
        """The total duration in whole seconds, rounded down

        Example
        -------

        >>> Duration(minutes=2, seconds=1, microseconds=5).total_seconds()
        121
        >>> Duration(microseconds=-1).total_seconds()
        -1

        """
        return self.total_microseconds() // US_PER_SECOND

    def _key(self) -> tuple[int, int, int]:
        return (self._days, self._seconds, self._microseconds)

    def __eq__(self, other: object) -> bool:
        """Compare for equality

        Example
        -------

        >>> d = Duration(hours=1, minutes=30)
        >>> d == Duration(minutes=90)
        True
        >>> d == Duration(hours=2)
        False

        """
        if not isinstance(other, Duration):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._key() >= other._key()

    def __bool__(self) -> bool:
        """True if the duration is non-zero

        Example
        -------

        >>> bool(Duration())
        False
        >>> bool(Duration(microseconds=1))
        True

        """
        return bool(self._days or self._seconds or self._microseconds)

    def __add__(self, other: Duration) -> Duration:
        """Add two durations together

        Example
        -------

        >>> Duration(days=1) + Duration(seconds=86_400)
        Duration(2)

        """
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration._from_fields(
            self._days + other._days,
            self._seconds + other._seconds,
            self._microseconds + other._microseconds,
        )

    def __sub__(self, other: Duration) -> Duration:
        """Subtract two durations

        Example
        -------

        >>> Duration(hours=1) - Duration(minutes=30)
        Duration(0, 1800)

        """
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration._from_fields(
            self._days - other._days,
            self._seconds - other._seconds,
            self._microseconds - other._microseconds,
        )

    def __pos__(self) -> Duration:
        return self

    def __neg__(self) -> Duration:
        """Negate the duration

        Example
        -------

        >>> -Duration(seconds=1)
        Duration(-1, 86399)

        """
        return Duration._from_fields(
            -self._days, -self._seconds, -self._microseconds
        )

    def __abs__(self) -> Duration:
        return -self if self._days < 0 else self

    def __mul__(self, other: int) -> Duration:
        """Multiply by an integer

        Example
        -------

        >>> Duration(hours=1, minutes=30) * 2
        Duration(0, 10800)

        """
        if not isinstance(other, int):
            return NotImplemented
        return Duration._from_microseconds(self.total_microseconds() * other)

    __rmul__ = __mul__

    @overload
    def __floordiv__(self, other: int) -> Duration: ...

    @overload
    def __floordiv__(self, other: Duration) -> int: ...

    def __floordiv__(self, other: int | Duration) -> Duration | int:
        """Divide by an integer or another duration, rounding down

        Example
        -------

        >>> Duration(hours=1, minutes=30) // 2
        Duration(0, 2700)
        >>> Duration(hours=1, minutes=30) // Duration(minutes=20)
        4

        """
        if isinstance(other, Duration):
            return self.total_microseconds() // _nonzero_us(other)
        elif isinstance(other, int):
            if other == 0:
                raise ZeroDivisionError("Duration division by zero")
            return Duration._from_microseconds(
                self.total_microseconds() // other
            )
        return NotImplemented

    def __truediv__(self, other: int | Duration) -> Duration:
        """Divide by an integer or another duration. The result is a
        duration, rounded down to the microsecond.

        Example
        -------

        >>> Duration(hours=1, minutes=30) / 2
        Duration(0, 2700)
        >>> Duration(seconds=10) / Duration(seconds=3)
        Duration(0, 0, 3)

        """
        if isinstance(other, Duration):
            return Duration._from_microseconds(
                self.total_microseconds() // _nonzero_us(other)
            )
        elif isinstance(other, int):
            return self // other
        return NotImplemented

    def __mod__(self, other: Duration) -> Duration:
        """The remainder after dividing by another duration.
        It has the same sign as the divisor.

        Example
        -------

        >>> Duration(seconds=10) % Duration(seconds=3)
        Duration(0, 1)

        """
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration._from_microseconds(
            self.total_microseconds() % _nonzero_us(other)
        )

    def __divmod__(self, other: Duration) -> tuple[int, Duration]:
        if not isinstance(other, Duration):
            return NotImplemented
        q, r = divmod(self.total_microseconds(), _nonzero_us(other))
        return q, Duration._from_microseconds(r)

    def __str__(self) -> str:
        """Format as ``[D day[s], ]H:MM:SS[.ffffff]``

        Example
        -------

        >>> str(Duration(days=2, seconds=3_723, microseconds=4))
        '2 days, 1:02:03.000004'

        """
        minutes, seconds = divmod(self._seconds, 60)
        hours, minutes = divmod(minutes, 60)
        text = f"{hours}:{minutes:02}:{seconds:02}"
        if self._microseconds:
            text += f".{self._microseconds:06}"
        if self._days:
            plural = "" if self._days in (1, -1) else "s"
            text = f"{self._days} day{plural}, {text}"
        return text

    def __repr__(self) -> str:
        fields = [self._days, self._seconds, self._microseconds]
        while len(fields) > 1 and not fields[-1]:
            fields.pop()
        return f"Duration({', '.join(map(str, fields))})"

    def __reduce__(self) -> tuple[object, ...]:
        return (Duration, self._key())

    # We don't need to copy, because it's immutable
    def __copy__(self) -> Duration:
        return self

    def __deepcopy__(self, _: object) -> Duration:
        return self


def _split_us(us: int) -> tuple[int, int, int]:
    seconds, us = divmod(us, US_PER_SECOND)
    days, seconds = divmod(seconds, SECONDS_PER_DAY)
    _math.check_delta_days(days)
    return days, seconds, us


def _nonzero_us(d: Duration) -> int:
    us = d.total_microseconds()
    if us == 0:
        raise ZeroDivisionError("Duration division by zero")
    return us


Duration.ZERO = Duration()
Duration.min = Duration(-_math.MAX_DELTA_DAYS)
Duration.max = Duration(_math.MAX_DELTA_DAYS, SECONDS_PER_DAY - 1, 999_999)
Duration.resolution = Duration(microseconds=1)


class Date:
    """A date without a time component

    Example
    -------

    >>> d = Date(2021, 1, 2)
    Date(2021-01-02)

    """

    __slots__ = ("_year", "_month", "_day")

    min: ClassVar[Date]
    max: ClassVar[Date]
    resolution: ClassVar[Duration]

    def __init__(self, year: int, month: int, day: int) -> None:
        _math.check_date_fields(year, month, day)
        self._year = year
        self._month = month
        self._day = day

    @classmethod
    def _from_fields_unchecked(cls, year: int, month: int, day: int) -> Date:
        if __debug__:
            _math.check_date_fields(year, month, day)
        self = _object_new(cls)
        self._year = year
        self._month = month
        self._day = day
        return self

    @property
    def year(self) -> int:
        return self._year

    @property
    def month(self) -> int:
        return self._month

    @property
    def day(self) -> int:
        return self._day

    @classmethod
    def today(cls) -> Date:
        """The current local date"""
        return cls.fromtimestamp(_system.now_us())

    @classmethod
    def fromtimestamp(cls, timestamp: int, /) -> Date:
        """The local date at a Unix timestamp in microseconds.
        Local time is determined by the configured
        :class:`~civiltime.LocalOffsetResolver`.
        """
        year, month, day, *_ = _system.local_fields(
            timestamp // US_PER_SECOND
        )
        return cls(year, month, day)

    @classmethod
    def utcfromtimestamp(cls, timestamp: int, /) -> Date:
        """The UTC date at a Unix timestamp in microseconds

        Example
        -------

        >>> Date.utcfromtimestamp(0)
        Date(1970-01-01)

        """
        return cls.fromordinal(UNIX_EPOCH_ORDINAL + timestamp // US_PER_DAY)

    @classmethod
    def fromordinal(cls, ordinal: int, /) -> Date:
        """Create from a proleptic Gregorian ordinal,
        where January 1st of year 1 is day 1.

        Example
        -------

        >>> Date.fromordinal(738_000)
        Date(2021-07-29)

        """
        _math.check_ordinal(ordinal)
        return cls._from_fields_unchecked(*_math.ordinal_to_ymd(ordinal))

    @classmethod
    def fromisocalendar(cls, year: int, week: int, day: int) -> Date:
        """Create from an ISO year, week number and weekday.
        Inverse of :meth:`isocalendar`.

        Example
        -------

        >>> Date.fromisocalendar(2021, 1, 1)
        Date(2021-01-04)
        >>> Date.fromisocalendar(*Date(2020, 12, 31).isocalendar())
        Date(2020-12-31)

        """
        return cls.fromordinal(_math.iso_to_ordinal(year, week, day))

    @classmethod
    def fromisoformat(cls, s: str, /) -> Date:
        """Parse a date in ``YYYY-MM-DD`` format.
        Inverse of :meth:`isoformat`.

        Raises
        ------
        InvalidFormat
            If the string does not match this exact format.
        OutOfRange
            If the fields don't form a valid date.
        """
        return cls(*_format.parse_isoformat_date(s))

    def replace(self, /, **kwargs: int) -> Date:
        """Construct a new date with the given fields replaced

        Example
        -------

        >>> Date(2020, 2, 29).replace(day=1)
        Date(2020-02-01)

        """
        fields = {"year": self._year, "month": self._month, "day": self._day}
        _check_replace_kwargs(fields, kwargs)
        return Date(**{**fields, **kwargs})

    def weekday(self) -> int:
        """The day of the week, where Monday is 0 and Sunday is 6"""
        return _math.weekday(self._year, self._month, self._day)

    def isoweekday(self) -> int:
        """The day of the week, where Monday is 1 and Sunday is 7

        Example
        -------

        >>> Date(2021, 1, 2).isoweekday() == SATURDAY
        True

        """
        return self.weekday() + 1

    def toordinal(self) -> int:
        """The proleptic Gregorian ordinal; January 1st of year 1 is 1"""
        return _math.ymd_to_ordinal(self._year, self._month, self._day)

    def isocalendar(self) -> IsoCalendarDate:
        """The ISO year, week number and weekday

        Example
        -------

        >>> Date(2021, 1, 1).isocalendar()
        IsoCalendarDate(year=2020, week=53, weekday=5)

        """
        return IsoCalendarDate(
            *_math.iso_calendar(self._year, self._month, self._day)
        )

    def _key(self) -> tuple[int, int, int]:
        return (self._year, self._month, self._day)

    def __eq__(self, other: object) -> bool:
        """Compare for equality

        Example
        -------

        >>> d = Date(2021, 1, 2)
        >>> d == Date(2021, 1, 2)
        True
        >>> d == Date(2021, 1, 3)
        False

        """
        if not isinstance(other, Date):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._key() >= other._key()

    def __add__(self, other: Duration) -> Date:
        """Add the whole days of a duration. The seconds and microseconds
        of the duration are ignored.

        Example
        -------

        >>> Date(2021, 1, 31) + Duration(days=1)
        Date(2021-02-01)

        Raises
        ------
        OutOfRange
            If the result is outside the supported range.

        """
        if not isinstance(other, Duration):
            return NotImplemented
        return Date._from_fields_unchecked(
            *_math.normalize_date_fields(
                self._year, self._month, self._day + other.days
            )
        )

    __radd__ = __add__

    if TYPE_CHECKING:

        @overload
        def __sub__(self, other: Date) -> Duration: ...

        @overload
        def __sub__(self, other: Duration) -> Date: ...

        def __sub__(self, other: Date | Duration) -> Date | Duration: ...

    else:

        def __sub__(self, other):
            """Subtract a duration or another date

            Example
            -------

            >>> Date(2021, 8, 31) - Date(2021, 8, 1)
            Duration(30)
            >>> Date(2021, 3, 1) - Duration(days=1)
            Date(2021-02-28)

            """
            if isinstance(other, Date):
                return Duration._from_days(
                    self.toordinal() - other.toordinal()
                )
            elif isinstance(other, Duration):
                return Date._from_fields_unchecked(
                    *_math.normalize_date_fields(
                        self._year, self._month, self._day - other.days
                    )
                )
            return NotImplemented

    def isoformat(self) -> str:
        """The date in ``YYYY-MM-DD`` format

        Example
        -------

        >>> Date(21, 1, 2).isoformat()
        '0021-01-02'

        """
        return _format.format_date(self._year, self._month, self._day)

    __str__ = isoformat

    def __repr__(self) -> str:
        return f"Date({self})"

    def strftime(self, fmt: str, /) -> str:
        """Format according to ``fmt``. Time directives render as midnight.
        See :meth:`DateTime.strftime`."""
        return _format.strftime(fmt, self._year, self._month, self._day)

    def ctime(self) -> str:
        """Format like ``'Tue Aug 31 00:00:00 2021'``"""
        return _format.format_ctime(
            self._year, self._month, self._day, 0, 0, 0
        )

    def __reduce__(self) -> tuple[object, ...]:
        return (Date, self._key())

    def __copy__(self) -> Date:
        return self

    def __deepcopy__(self, _: object) -> Date:
        return self


Date.min = Date(MINYEAR, 1, 1)
Date.max = Date(MAXYEAR, 12, 31)
Date.resolution = Duration(days=1)


class Time:
    """A time of day without a date or time zone

    Example
    -------

    >>> Time(12, 30)
    Time(12:30:00)

    """

    __slots__ = ("_hour", "_minute", "_second", "_microsecond")

    min: ClassVar[Time]
    max: ClassVar[Time]
    resolution: ClassVar[Duration]

    def __init__(
        self,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        microsecond: int = 0,
    ) -> None:
        _math.check_time_fields(hour, minute, second, microsecond)
        self._hour = hour
        self._minute = minute
        self._second = second
        self._microsecond = microsecond

    @property
    def hour(self) -> int:
        return self._hour

    @property
    def minute(self) -> int:
        return self._minute

    @property
    def second(self) -> int:
        return self._second

    @property
    def microsecond(self) -> int:
        return self._microsecond

    @classmethod
    def fromisoformat(cls, s: str, /) -> Time:
        """Parse ``HH[:MM[:SS]][.fff[fff]]``, optionally followed by a
        UTC offset, which is ignored.

        Example
        -------

        >>> Time.fromisoformat("12:30")
        Time(12:30:00)
        >>> Time.fromisoformat("08:15:00.250+02:00")
        Time(08:15:00.250000)

        Raises
        ------
        InvalidFormat
            If the string does not match this format.
        """
        return cls(*_format.parse_isoformat_time(s))

    def replace(self, /, **kwargs: int) -> Time:
        """Construct a new time with the given fields replaced"""
        fields = {
            "hour": self._hour,
            "minute": self._minute,
            "second": self._second,
            "microsecond": self._microsecond,
        }
        _check_replace_kwargs(fields, kwargs)
        return Time(**{**fields, **kwargs})

    def _key(self) -> tuple[int, int, int, int]:
        return (self._hour, self._minute, self._second, self._microsecond)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._key() >= other._key()

    def isoformat(self) -> str:
        """Format as ``HH:MM:SS``, with ``.ffffff`` appended
        if there are microseconds"""
        return _format.format_time(*self._key())

    __str__ = isoformat

    def __repr__(self) -> str:
        return f"Time({self})"

    def strftime(self, fmt: str, /) -> str:
        """Format according to ``fmt``. Date directives render
        as 1900-01-01. See :meth:`DateTime.strftime`."""
        return _format.strftime(fmt, 1900, 1, 1, *self._key())

    def __reduce__(self) -> tuple[object, ...]:
        return (Time, self._key())

    def __copy__(self) -> Time:
        return self

    def __deepcopy__(self, _: object) -> Time:
        return self


Time.min = Time()
Time.max = Time(23, 59, 59, 999_999)
Time.resolution = Duration(microseconds=1)


class DateTime:
    """A date and time of day, without a time zone

    Example
    -------

    >>> d = DateTime(2021, 8, 31, 15, 59, 55)
    DateTime(2021-08-31T15:59:55)
    >>> d + Duration(seconds=5)
    DateTime(2021-08-31T16:00:00)

    """

    __slots__ = (
        "_year",
        "_month",
        "_day",
        "_hour",
        "_minute",
        "_second",
        "_microsecond",
    )

    min: ClassVar[DateTime]
    max: ClassVar[DateTime]
    resolution: ClassVar[Duration]

    if TYPE_CHECKING:

        @property
        def year(self) -> int: ...

        @property
        def month(self) -> int: ...

        @property
        def day(self) -> int: ...

        @property
        def hour(self) -> int: ...

        @property
        def minute(self) -> int: ...

        @property
        def second(self) -> int: ...

        @property
        def microsecond(self) -> int: ...

    else:
        # Defining properties this way is faster than declaring a `def`,
        # but the type checker doesn't like it.
        year = property(attrgetter("_year"))
        month = property(attrgetter("_month"))
        day = property(attrgetter("_day"))
        hour = property(attrgetter("_hour"))
        minute = property(attrgetter("_minute"))
        second = property(attrgetter("_second"))
        microsecond = property(attrgetter("_microsecond"))

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        microsecond: int = 0,
    ) -> None:
        _math.check_date_fields(year, month, day)
        _math.check_time_fields(hour, minute, second, microsecond)
        self._year = year
        self._month = month
        self._day = day
        self._hour = hour
        self._minute = minute
        self._second = second
        self._microsecond = microsecond

    @classmethod
    def _from_fields_unchecked(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int,
        minute: int,
        second: int,
        microsecond: int,
    ) -> DateTime:
        if __debug__:
            _math.check_date_fields(year, month, day)
            _math.check_time_fields(hour, minute, second, microsecond)
        self = _object_new(cls)
        self._year = year
        self._month = month
        self._day = day
        self._hour = hour
        self._minute = minute
        self._second = second
        self._microsecond = microsecond
        return self

    @classmethod
    def now(cls) -> DateTime:
        """The current local date and time"""
        return cls.fromtimestamp(_system.now_us())

    @classmethod
    def fromtimestamp(cls, timestamp: int, /) -> DateTime:
        """The local date and time at a Unix timestamp in microseconds.
        Local time is determined by the configured
        :class:`~civiltime.LocalOffsetResolver`.

        Note
        ----
        A leap second reported by the platform is clamped to second 59.
        """
        seconds, microsecond = divmod(timestamp, US_PER_SECOND)
        return cls(*_system.local_fields(seconds), microsecond)

    @classmethod
    def utcfromtimestamp(cls, timestamp: int, /) -> DateTime:
        """The UTC date and time at a Unix timestamp in microseconds

        Example
        -------

        >>> DateTime.utcfromtimestamp(1_630_425_595_123_456)
        DateTime(2021-08-31T15:59:55.123456)

        """
        days, us = divmod(timestamp, US_PER_DAY)
        ordinal = UNIX_EPOCH_ORDINAL + days
        _math.check_ordinal(ordinal)
        seconds, microsecond = divmod(us, US_PER_SECOND)
        hour, seconds = divmod(seconds, 3_600)
        minute, second = divmod(seconds, 60)
        return cls._from_fields_unchecked(
            *_math.ordinal_to_ymd(ordinal), hour, minute, second, microsecond
        )

    @classmethod
    def fromordinal(cls, ordinal: int, /) -> DateTime:
        """Midnight at the start of a proleptic Gregorian ordinal day"""
        return cls.combine(Date.fromordinal(ordinal), Time.min)

    @classmethod
    def fromisocalendar(cls, year: int, week: int, day: int) -> DateTime:
        """Midnight at the start of an ISO year, week and weekday"""
        return cls.combine(Date.fromisocalendar(year, week, day), Time.min)

    @classmethod
    def combine(cls, date: Date, time: Time, /) -> DateTime:
        """Combine a date and a time

        Example
        -------

        >>> DateTime.combine(Date(2021, 8, 31), Time(12))
        DateTime(2021-08-31T12:00:00)

        """
        return cls._from_fields_unchecked(*date._key(), *time._key())

    @classmethod
    def strptime(cls, s: str, /, fmt: str) -> DateTime:
        """Parse a string according to a format.

        The supported directives are:

        ====== ================================
        ``%Y`` year, four digits (0001-9999)
        ``%m`` month, two digits (01-12)
        ``%d`` day of the month, two digits
        ``%H`` hour, two digits (00-23)
        ``%M`` minute, two digits (00-59)
        ``%S`` second, two digits (00-59)
        ``%f`` microsecond, six digits
        ``%%`` a literal ``%``
        ====== ================================

        Example
        -------

        >>> DateTime.strptime("2021/08/31 15:59:55.123456",
        ...                   "%Y/%m/%d %H:%M:%S.%f")
        DateTime(2021-08-31T15:59:55.123456)

        Raises
        ------
        InvalidFormat
            If the string doesn't match the format exactly.
        OutOfRange
            If the parsed fields don't form a valid datetime.
            The format must include ``%Y``, ``%m`` and ``%d``.
        """
        return cls(*_format.strptime(s, fmt))

    @classmethod
    def fromisoformat(cls, s: str, /) -> DateTime:
        """Parse ``YYYY-MM-DD`` and a time as accepted by
        :meth:`Time.fromisoformat`, separated by ``T`` or a space.
        A UTC offset is checked but ignored.

        Example
        -------

        >>> DateTime.fromisoformat("2021-08-31T15:59")
        DateTime(2021-08-31T15:59:00)

        """
        return cls(*_format.parse_isoformat_datetime(s))

    def date(self) -> Date:
        """The date part"""
        return Date._from_fields_unchecked(self._year, self._month, self._day)

    def time(self) -> Time:
        """The time part"""
        t = _object_new(Time)
        t._hour = self._hour
        t._minute = self._minute
        t._second = self._second
        t._microsecond = self._microsecond
        return t

    def replace(self, /, **kwargs: int) -> DateTime:
        """Construct a new datetime with the given fields replaced

        Example
        -------

        >>> DateTime(2020, 8, 15, 23, 12).replace(year=2021)
        DateTime(2021-08-15T23:12:00)

        """
        fields = dict(zip(_DATETIME_FIELDS, self._key()))
        _check_replace_kwargs(fields, kwargs)
        return DateTime(**{**fields, **kwargs})

    def weekday(self) -> int:
        """The day of the week, where Monday is 0 and Sunday is 6"""
        return _math.weekday(self._year, self._month, self._day)

    def isoweekday(self) -> int:
        """The day of the week, where Monday is 1 and Sunday is 7"""
        return self.weekday() + 1

    def toordinal(self) -> int:
        """The proleptic Gregorian ordinal of the date part"""
        return _math.ymd_to_ordinal(self._year, self._month, self._day)

    def isocalendar(self) -> IsoCalendarDate:
        """The ISO year, week number and weekday of the date part"""
        return IsoCalendarDate(
            *_math.iso_calendar(self._year, self._month, self._day)
        )

    def timestamp(self, fold: int = 0) -> int:
        """The Unix timestamp in microseconds, interpreting this datetime
        as local time according to the configured resolver.

        Local times can be ambiguous (repeated when clocks are set back)
        or non-existent (skipped when clocks are set forward). In both
        cases there are two candidate instants: ``fold=0`` selects the
        earlier, ``fold=1`` the later.

        Raises
        ------
        OverflowError
            If the resolver can't represent the instant.
        """
        if fold not in (0, 1):
            raise ValueError(f"fold must be 0 or 1, got {fold!r}")
        seconds = _system.local_to_timestamp(
            self._year,
            self._month,
            self._day,
            self._hour,
            self._minute,
            self._second,
            fold,
        )
        return seconds * US_PER_SECOND + self._microsecond

    def _key(self) -> tuple[int, int, int, int, int, int, int]:
        return (
            self._year,
            self._month,
            self._day,
            self._hour,
            self._minute,
            self._second,
            self._microsecond,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._key() >= other._key()

    def __add__(self, other: Duration) -> DateTime:
        """Add a duration to this datetime

        Example
        -------

        >>> DateTime(2020, 12, 31, 23, 59) + Duration(minutes=1)
        DateTime(2021-01-01T00:00:00)

        Raises
        ------
        OutOfRange
            If the result is outside the supported range.
        """
        if not isinstance(other, Duration):
            return NotImplemented
        return DateTime._from_fields_unchecked(
            *_math.normalize_datetime_fields(
                self._year,
                self._month,
                self._day + other.days,
                self._hour,
                self._minute,
                self._second + other.seconds,
                self._microsecond + other.microseconds,
            )
        )

    __radd__ = __add__

    if TYPE_CHECKING:

        @overload
        def __sub__(self, other: DateTime) -> Duration: ...

        @overload
        def __sub__(self, other: Duration) -> DateTime: ...

        def __sub__(
            self, other: DateTime | Duration
        ) -> DateTime | Duration: ...

    else:

        def __sub__(self, other):
            """Subtract another datetime or duration

            Example
            -------

            >>> d = DateTime(2020, 8, 15, hour=23, minute=12)
            >>> d - Duration(hours=24, seconds=5)
            DateTime(2020-08-14T23:11:55)
            >>> d - DateTime(2020, 8, 14)
            Duration(1, 83520)

            """
            if isinstance(other, DateTime):
                return Duration._from_fields(
                    self.toordinal() - other.toordinal(),
                    (self._hour - other._hour) * 3_600
                    + (self._minute - other._minute) * 60
                    + (self._second - other._second),
                    self._microsecond - other._microsecond,
                )
            elif isinstance(other, Duration):
                return DateTime._from_fields_unchecked(
                    *_math.normalize_datetime_fields(
                        self._year,
                        self._month,
                        self._day - other.days,
                        self._hour,
                        self._minute,
                        self._second - other.seconds,
                        self._microsecond - other.microseconds,
                    )
                )
            return NotImplemented

    def isoformat(self, sep: str = "T") -> str:
        """Format as ``YYYY-MM-DDTHH:MM:SS[.ffffff]``

        Example
        -------

        >>> DateTime(1, 1, 1).isoformat()
        '0001-01-01T00:00:00'
        >>> DateTime(2021, 8, 31, 12, microsecond=5).isoformat(" ")
        '2021-08-31 12:00:00.000005'

        """
        return (
            _format.format_date(self._year, self._month, self._day)
            + sep
            + _format.format_time(
                self._hour, self._minute, self._second, self._microsecond
            )
        )

    def __str__(self) -> str:
        return self.isoformat()

    def __repr__(self) -> str:
        return f"DateTime({self})"

    def strftime(self, fmt: str, /) -> str:
        """Format according to ``fmt``.

        The supported directives are:

        ====== ==================================================
        ``%a`` abbreviated weekday name (``Mon``)
        ``%A`` full weekday name (``Monday``)
        ``%w`` weekday as a number, Sunday is 0
        ``%d`` day of the month (``01``-``31``)
        ``%b`` abbreviated month name (``Jan``)
        ``%B`` full month name (``January``)
        ``%m`` month (``01``-``12``)
        ``%y`` year without century (``00``-``99``)
        ``%Y`` year with century (``0001``-``9999``)
        ``%H`` hour, 24-hour clock (``00``-``23``)
        ``%I`` hour, 12-hour clock (``01``-``12``)
        ``%p`` ``AM`` or ``PM``
        ``%M`` minute (``00``-``59``)
        ``%S`` second (``00``-``59``)
        ``%f`` microsecond (``000000``-``999999``)
        ``%z`` UTC offset: always empty
        ``%Z`` time zone name: always empty
        ``%j`` day of the year (``001``-``366``)
        ``%U`` week of the year, weeks starting on Sunday
        ``%W`` week of the year, weeks starting on Monday
        ``%c`` like :meth:`ctime`
        ``%x`` ``MM/DD/YY``
        ``%X`` ``HH:MM:SS``
        ``%%`` a literal ``%``
        ====== ==================================================

        Days before the first Sunday (``%U``) or Monday (``%W``) of the
        year are in week ``00``.

        Example
        -------

        >>> DateTime(2021, 8, 31, 15, 59).strftime("%a %d %B %Y, %I:%M %p")
        'Tue 31 August 2021, 03:59 PM'

        Raises
        ------
        InvalidFormat
            On any other directive.
        """
        return _format.strftime(fmt, *self._key())

    def ctime(self) -> str:
        """Format like ``'Tue Aug 31 15:59:55 2021'``"""
        return _format.format_ctime(*self._key()[:6])

    def __reduce__(self) -> tuple[object, ...]:
        return (DateTime, self._key())

    def __copy__(self) -> DateTime:
        return self

    def __deepcopy__(self, _: object) -> DateTime:
        return self


DateTime.min = DateTime(MINYEAR, 1, 1)
DateTime.max = DateTime(MAXYEAR, 12, 31, 23, 59, 59, 999_999)
DateTime.resolution = Duration(microseconds=1)

_DATETIME_FIELDS = (
    "year",
    "month",
    "day",
    "hour",
    "minute",
    "second",
    "microsecond",
)
_object_new = object.__new__


def _check_replace_kwargs(
    fields: dict[str, int], kwargs: dict[str, int]
) -> None:
    if unknown := kwargs.keys() - fields.keys():
        raise TypeError(f"Unknown field(s): {', '.join(sorted(unknown))}")
