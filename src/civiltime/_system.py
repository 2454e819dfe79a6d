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
"""The local-offset resolver and wall-clock source.

The library never consults a time zone database itself. Local time is
whatever the configured resolver says it is for a given UTC instant;
by default that is the platform's ``localtime()``, which follows the
``TZ`` environment variable (after :func:`time.tzset`).
"""
from __future__ import annotations

import logging
import time
from typing import Protocol, Tuple

from ._math import (
    MAX_ORDINAL,
    SECONDS_PER_DAY,
    UNIX_EPOCH_ORDINAL,
    ordinal_seconds,
    ordinal_to_ymd,
)

__all__ = [
    "LocalOffsetResolver",
    "SystemResolver",
    "FixedOffsetResolver",
    "get_local_resolver",
    "set_local_resolver",
]

logger = logging.getLogger(__name__)

# (year, month, day, hour, minute, second)
WallFields = Tuple[int, int, int, int, int, int]

_EPOCH_SECONDS = UNIX_EPOCH_ORDINAL * SECONDS_PER_DAY
# The largest fold in the IANA database is 23 hours
# (1969-09-30 in Kwajalein); one day is enough to look past it.
_MAX_FOLD_SECONDS = SECONDS_PER_DAY


class LocalOffsetResolver(Protocol):
    """Anything that can render a UTC instant as local wall clock fields"""

    def localtime(self, timestamp: int, /) -> WallFields:
        """Local (year, month, day, hour, minute, second) at the given
        number of seconds since the Unix epoch.

        Raises
        ------
        OverflowError
            If the instant can't be represented.
        """


class SystemResolver:
    """Local time as reported by the platform"""

    __slots__ = ()

    def localtime(self, timestamp: int, /) -> WallFields:
        try:
            tm = time.localtime(timestamp)
        except (OverflowError, OSError, ValueError) as e:
            raise OverflowError(
                f"Timestamp out of range for platform localtime: {timestamp}"
            ) from e
        return (
            tm.tm_year,
            tm.tm_mon,
            tm.tm_mday,
            tm.tm_hour,
            tm.tm_min,
            tm.tm_sec,
        )

    def __repr__(self) -> str:
        return "SystemResolver()"


class FixedOffsetResolver:
    """Local time at a constant offset from UTC

    Example
    -------

    >>> FixedOffsetResolver(3_600).localtime(0)
    (1970, 1, 1, 1, 0, 0)

    """

    __slots__ = ("_offset",)

    def __init__(self, offset: int) -> None:
        if not isinstance(offset, int):
            raise TypeError("offset must be an integer number of seconds")
        if not -SECONDS_PER_DAY < offset < SECONDS_PER_DAY:
            raise ValueError(f"offset must be less than a day: {offset}")
        self._offset = offset

    @property
    def offset(self) -> int:
        return self._offset

    def localtime(self, timestamp: int, /) -> WallFields:
        days, secs = divmod(
            timestamp + self._offset + _EPOCH_SECONDS, SECONDS_PER_DAY
        )
        if not 1 <= days <= MAX_ORDINAL:
            raise OverflowError(f"Timestamp out of range: {timestamp}")
        hour, secs = divmod(secs, 3_600)
        minute, second = divmod(secs, 60)
        return (*ordinal_to_ymd(days), hour, minute, second)

    def __repr__(self) -> str:
        return f"FixedOffsetResolver({self._offset})"


_resolver: LocalOffsetResolver = SystemResolver()


def get_local_resolver() -> LocalOffsetResolver:
    """The resolver currently used for local time conversions"""
    return _resolver


def set_local_resolver(resolver: LocalOffsetResolver) -> LocalOffsetResolver:
    """Replace the process-wide local-offset resolver.

    Returns the previous resolver, so it can be restored later.

    Example
    -------

    >>> previous = set_local_resolver(FixedOffsetResolver(-18_000))
    >>> DateTime.fromtimestamp(0)
    DateTime(1969-12-31T19:00:00)
    >>> _ = set_local_resolver(previous)

    """
    global _resolver
    if not callable(getattr(resolver, "localtime", None)):
        raise TypeError(f"Not a local-offset resolver: {resolver!r}")
    previous, _resolver = _resolver, resolver
    logger.debug("Local resolver changed from %r to %r", previous, resolver)
    return previous


def now_us() -> int:
    """Microseconds since the Unix epoch, according to the system clock"""
    return time.time_ns() // 1_000


def local_fields(timestamp: int) -> WallFields:
    """Local wall clock fields at a Unix timestamp in seconds.
    A leap second reported by the platform is clamped to :59."""
    year, month, day, hour, minute, second = _resolver.localtime(timestamp)
    if second > 59:
        logger.debug("Clamping leap second at timestamp %d", timestamp)
        second = 59
    return year, month, day, hour, minute, second


def _local(resolver: LocalOffsetResolver, u: int) -> int:
    return ordinal_seconds(*resolver.localtime(u - _EPOCH_SECONDS))


def _offset(resolver: LocalOffsetResolver, u: int) -> int | None:
    """UTC offset at ``u``, or None if the resolver can't represent it"""
    try:
        return _local(resolver, u) - u
    except OverflowError:
        return None


def local_to_timestamp(
    year: int,
    month: int,
    day: int,
    hour: int,
    minute: int,
    second: int,
    fold: int = 0,
) -> int:
    """Find the Unix timestamp (seconds) whose local rendering is the
    given wall clock time.

    Wall times that occur twice (a fold) and wall times that are skipped
    (a gap) both have two candidate instants. ``fold=0`` selects the
    earlier one, ``fold=1`` the later one.

    Raises
    ------
    OverflowError
        If the resolver can't represent the resulting instant.
    """
    resolver = _resolver
    t = ordinal_seconds(year, month, day, hour, minute, second)
    # Solve t == _local(u) for u, trying the offset in effect at t first.
    a = _offset(resolver, t)
    if a is None:
        # Near the ends of the range, t read as UTC may not be
        # representable. Any offset is less than a day, so a day closer
        # to the epoch is.
        step = _MAX_FOLD_SECONDS if t > _EPOCH_SECONDS else -_MAX_FOLD_SECONDS
        probe = t - step
        a = _local(resolver, probe) - probe
    u1 = t - a
    t1 = _local(resolver, u1)
    if t1 == t:
        # One solution found. Check whether the offset a day earlier
        # (or later) gives another one. Past the end of the range
        # there is nothing to find.
        step = _MAX_FOLD_SECONDS if fold else -_MAX_FOLD_SECONDS
        b = _offset(resolver, u1 + step)
        if b is None or a == b:
            return u1 - _EPOCH_SECONDS
    else:
        b = t1 - u1
        assert a != b
    u2 = t - b
    try:
        t2: int | None = _local(resolver, u2)
    except OverflowError:
        t2 = None
    if t2 == t:
        if t1 == t:
            logger.debug("Ambiguous local time, picked fold=%d", fold)
        return u2 - _EPOCH_SECONDS
    if t1 == t:
        return u1 - _EPOCH_SECONDS
    # Neither t - a nor t - b renders as t: t is in a gap.
    logger.debug("Non-existent local time, picked fold=%d", fold)
    return (max(u1, u2) if fold else min(u1, u2)) - _EPOCH_SECONDS
