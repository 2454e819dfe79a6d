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
"""Text formatting and parsing of calendar fields.

These functions work on plain field tuples. Parsers only check the
shape of the text; range validation is left to the value types.
"""
from __future__ import annotations

import re
from functools import lru_cache
from typing import Callable, NamedTuple

from ._errors import InvalidFormat
from ._math import day_of_year, weekday

DAY_ABBRS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
DAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
MONTH_ABBRS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


# ---------------------------------------------------------------------------
# ISO 8601
# ---------------------------------------------------------------------------


def parse_digits(s: str, pos: int, width: int) -> int:
    """Parse exactly ``width`` ASCII digits starting at ``pos``"""
    chunk = s[pos : pos + width]  # noqa
    if len(chunk) != width or not all("0" <= c <= "9" for c in chunk):
        raise InvalidFormat(
            f"Expected {width} digits at position {pos}: {s!r}"
        )
    return int(chunk)


def _expect(s: str, pos: int, char: str) -> None:
    if s[pos : pos + 1] != char:  # noqa
        raise InvalidFormat(f"Expected {char!r} at position {pos}: {s!r}")


def format_date(year: int, month: int, day: int) -> str:
    return f"{year:04}-{month:02}-{day:02}"


def format_time(hour: int, minute: int, second: int, microsecond: int) -> str:
    return f"{hour:02}:{minute:02}:{second:02}" + (
        f".{microsecond:06}" if microsecond else ""
    )


def parse_isoformat_date(s: str) -> tuple[int, int, int]:
    """Parse ``YYYY-MM-DD``

    Raises
    ------
    InvalidFormat
        If the string is not exactly in this format.
    """
    if len(s) != 10:
        raise InvalidFormat(f"Invalid isoformat date string: {s!r}")
    year = parse_digits(s, 0, 4)
    _expect(s, 4, "-")
    month = parse_digits(s, 5, 2)
    _expect(s, 7, "-")
    day = parse_digits(s, 8, 2)
    return year, month, day


def _parse_hh_mm_ss_ff(s: str) -> tuple[int, int, int, int]:
    # HH[:MM[:SS]][.fff|.ffffff]
    fields = [0, 0, 0]
    pos = 0
    for i in range(3):
        fields[i] = parse_digits(s, pos, 2)
        pos += 2
        if pos == len(s):
            return fields[0], fields[1], fields[2], 0
        sep = s[pos]
        pos += 1
        if sep == ".":
            break
        if sep != ":" or i == 2:
            raise InvalidFormat(f"Malformed time separator: {s!r}")
    fraction = s[pos:]
    if len(fraction) not in (3, 6):
        raise InvalidFormat(f"Fraction must have 3 or 6 digits: {s!r}")
    microsecond = parse_digits(s, pos, len(fraction))
    if len(fraction) == 3:
        microsecond *= 1_000
    return fields[0], fields[1], fields[2], microsecond


def parse_isoformat_time(s: str) -> tuple[int, int, int, int]:
    """Parse ``HH[:MM[:SS]][.fff|.ffffff]`` with an optional UTC offset
    ``±HH:MM[:SS[.ffffff]]``. The offset is checked, then discarded.

    Raises
    ------
    InvalidFormat
        If the string doesn't match this format.
    """
    tz_pos = next(
        (i for i, c in enumerate(s) if c in "+-"),
        len(s),
    )
    hour, minute, second, microsecond = _parse_hh_mm_ss_ff(s[:tz_pos])
    offset = s[tz_pos + 1 :]  # noqa
    if tz_pos < len(s):
        # +HH:MM, +HH:MM:SS or +HH:MM:SS.ffffff
        if len(offset) not in (5, 8, 15) or offset[2] != ":":
            raise InvalidFormat(f"Malformed UTC offset: {s!r}")
        _parse_hh_mm_ss_ff(offset)
    return hour, minute, second, microsecond


def parse_isoformat_datetime(
    s: str,
) -> tuple[int, int, int, int, int, int, int]:
    """Parse ``YYYY-MM-DD`` followed by ``T`` or a space and a time
    accepted by :func:`parse_isoformat_time`"""
    if len(s) < 13 or s[10] not in "T ":
        raise InvalidFormat(f"Invalid isoformat datetime string: {s!r}")
    return parse_isoformat_date(s[:10]) + parse_isoformat_time(s[11:])


def format_ctime(
    year: int, month: int, day: int, hour: int, minute: int, second: int
) -> str:
    return (
        f"{DAY_ABBRS[weekday(year, month, day)]} {MONTH_ABBRS[month - 1]} "
        f"{day:>2} {hour:02}:{minute:02}:{second:02} {year:04}"
    )


# ---------------------------------------------------------------------------
# strptime
# ---------------------------------------------------------------------------

# directive -> (field index, digits)
_STRPTIME_FIELDS = {
    "Y": (0, 4),
    "m": (1, 2),
    "d": (2, 2),
    "H": (3, 2),
    "M": (4, 2),
    "S": (5, 2),
    "f": (6, 6),
}


@lru_cache(maxsize=64)
def _compile_strptime(fmt: str) -> tuple[re.Pattern[str], tuple[int, ...]]:
    pattern = []
    targets = []
    literal = False
    for chunk in re.split(r"(%.?)", fmt, flags=re.DOTALL):
        literal = not literal
        if literal:
            pattern.append(re.escape(chunk))
        elif chunk == "%%":
            pattern.append("%")
        elif chunk[1:] in _STRPTIME_FIELDS:
            index, width = _STRPTIME_FIELDS[chunk[1:]]
            pattern.append(f"([0-9]{{{width}}})")
            targets.append(index)
        else:
            raise InvalidFormat(f"Unsupported directive {chunk!r} in {fmt!r}")
    return re.compile("".join(pattern), re.DOTALL), tuple(targets)


def strptime(s: str, fmt: str) -> tuple[int, int, int, int, int, int, int]:
    """Parse ``s`` according to ``fmt``, returning the seven datetime
    fields. Fields absent from the format are 0.

    Only ``%Y %m %d %H %M %S %f %%`` are supported. All fields are fixed
    width: four digits for ``%Y``, six for ``%f``, two for the rest.

    Raises
    ------
    InvalidFormat
        If ``s`` doesn't match the format exactly,
        or the format contains an unsupported directive.
    """
    regex, targets = _compile_strptime(fmt)
    match = regex.fullmatch(s)
    if match is None:
        raise InvalidFormat(f"{s!r} does not match format {fmt!r}")
    fields = [0] * 7
    for index, value in zip(targets, match.groups()):
        fields[index] = int(value)
    return tuple(fields)  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# strftime
# ---------------------------------------------------------------------------


class _Fields(NamedTuple):
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    microsecond: int

    @property
    def weekday(self) -> int:
        return weekday(self.year, self.month, self.day)

    @property
    def day_of_year(self) -> int:
        return day_of_year(self.year, self.month, self.day)


def _week_of_year(f: _Fields, first_weekday_of_week: int) -> str:
    # day of year of the first Sunday (6) or Monday (0)
    first = 1 + (first_weekday_of_week - weekday(f.year, 1, 1)) % 7
    if f.day_of_year < first:
        return "00"
    return f"{1 + (f.day_of_year - first) // 7:02}"


def _hour12(f: _Fields) -> str:
    return f"{f.hour % 12 or 12:02}"


_STRFTIME: dict[str, Callable[[_Fields], str]] = {
    "a": lambda f: DAY_ABBRS[f.weekday],
    "A": lambda f: DAY_NAMES[f.weekday],
    "w": lambda f: str((f.weekday + 1) % 7),
    "d": lambda f: f"{f.day:02}",
    "b": lambda f: MONTH_ABBRS[f.month - 1],
    "B": lambda f: MONTH_NAMES[f.month - 1],
    "m": lambda f: f"{f.month:02}",
    "y": lambda f: f"{f.year % 100:02}",
    "Y": lambda f: f"{f.year:04}",
    "H": lambda f: f"{f.hour:02}",
    "I": _hour12,
    "p": lambda f: "AM" if f.hour < 12 else "PM",
    "M": lambda f: f"{f.minute:02}",
    "S": lambda f: f"{f.second:02}",
    "f": lambda f: f"{f.microsecond:06}",
    # naive values: no offset or zone name
    "z": lambda f: "",
    "Z": lambda f: "",
    "j": lambda f: f"{f.day_of_year:03}",
    "U": lambda f: _week_of_year(f, 6),
    "W": lambda f: _week_of_year(f, 0),
    "c": lambda f: format_ctime(*f[:6]),
    "x": lambda f: f"{f.month:02}/{f.day:02}/{f.year % 100:02}",
    "X": lambda f: f"{f.hour:02}:{f.minute:02}:{f.second:02}",
    "%": lambda f: "%",
}

_tokenize_strftime = re.compile(r"[^%]+|%(.?)", re.DOTALL).finditer


def strftime(
    fmt: str,
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    microsecond: int = 0,
) -> str:
    """Format the fields according to ``fmt``. See :meth:`DateTime.strftime`
    for the supported directives.

    Raises
    ------
    InvalidFormat
        On an unsupported directive or a trailing ``%``.
    """
    fields = _Fields(year, month, day, hour, minute, second, microsecond)
    out = []
    for token in _tokenize_strftime(fmt):
        directive = token.group(1)
        if directive is None:
            out.append(token.group())
            continue
        try:
            render = _STRFTIME[directive]
        except KeyError:
            raise InvalidFormat(
                f"Unsupported directive %{directive} in {fmt!r}"
            ) from None
        out.append(render(fields))
    return "".join(out)
