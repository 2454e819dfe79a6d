import copy
import pickle

import pytest

from civiltime import Duration, OutOfRange

from .common import AlwaysEqual, AlwaysLarger, AlwaysSmaller, NeverEqual


class TestInit:

    def test_basics(self):
        d = Duration(days=1, hours=1, minutes=2, seconds=3, microseconds=4)
        assert d.days == 1
        assert d.seconds == 3_723
        assert d.microseconds == 4
        # only the normalized fields are exposed
        assert not hasattr(d, "hours")

    def test_defaults(self):
        d = Duration()
        assert d.days == d.seconds == d.microseconds == 0

    @pytest.mark.parametrize("kwarg", ["days", "hours", "microseconds"])
    def test_rejects_floats(self, kwarg):
        with pytest.raises(TypeError, match=kwarg):
            Duration(**{kwarg: 1.5})

    def test_out_of_range(self):
        Duration(days=999_999_999)
        Duration(days=-999_999_999)
        with pytest.raises(OutOfRange):
            Duration(days=1_000_000_000)
        with pytest.raises(OutOfRange):
            Duration(days=-999_999_999, microseconds=-1)


@pytest.mark.parametrize(
    "kwargs, expected",
    [
        (dict(), (0, 0, 0)),
        (dict(weeks=1), (7, 0, 0)),
        (dict(hours=1), (0, 3_600, 0)),
        (dict(minutes=1), (0, 60, 0)),
        (dict(milliseconds=1), (0, 0, 1_000)),
        (dict(seconds=86_400), (1, 0, 0)),
        (dict(microseconds=-1), (-1, 86_399, 999_999)),
        (dict(seconds=-1), (-1, 86_399, 0)),
        (dict(days=1, seconds=-1), (0, 86_399, 0)),
        (dict(minutes=90, microseconds=-3_600_000_000), (0, 1_800, 0)),
        (dict(microseconds=2_000_001), (0, 2, 1)),
    ],
)
def test_normalization(kwargs, expected):
    d = Duration(**kwargs)
    assert (d.days, d.seconds, d.microseconds) == expected


def test_class_attributes():
    assert Duration.ZERO == Duration()
    assert Duration.min == Duration(days=-999_999_999)
    assert Duration.max == Duration(
        days=999_999_999, seconds=86_399, microseconds=999_999
    )
    assert Duration.resolution == Duration(microseconds=1)
    assert Duration.min < Duration.ZERO < Duration.max


def test_boolean():
    assert not Duration()
    assert not Duration(hours=1, minutes=-60)
    assert Duration(microseconds=1)
    assert Duration(microseconds=-1)


def test_totals():
    d = Duration(hours=1, minutes=2, seconds=3, microseconds=4_500)
    assert d.total_microseconds() == 3_723_004_500
    assert d.total_milliseconds() == 3_723_004
    assert d.total_seconds() == 3_723
    # floored, not truncated
    assert Duration(microseconds=-1).total_seconds() == -1
    assert Duration(microseconds=-1).total_milliseconds() == -1


def test_equality():
    d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
    same = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
    same_total = Duration(hours=0, minutes=62, seconds=3, microseconds=4)
    different = Duration(hours=1, minutes=2, seconds=3, microseconds=5)
    assert d == same
    assert d == same_total
    assert not d == different
    assert not d == NeverEqual()
    assert d == AlwaysEqual()
    assert not d != same
    assert not d != same_total
    assert d != different
    assert d != NeverEqual()
    assert not d != AlwaysEqual()
    assert d != 3_723_000_004

    assert hash(d) == hash(same)
    assert hash(d) == hash(same_total)
    assert hash(d) != hash(different)


def test_comparison():
    d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
    same = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
    same_total = Duration(hours=0, minutes=62, seconds=3, microseconds=4)
    bigger = Duration(hours=1, minutes=2, seconds=3, microseconds=5)
    smaller = Duration(hours=1, minutes=2, seconds=3, microseconds=3)

    assert d <= same
    assert d <= same_total
    assert d <= bigger
    assert not d <= smaller
    assert d <= AlwaysLarger()
    assert not d <= AlwaysSmaller()

    assert not d < same
    assert not d < same_total
    assert d < bigger
    assert not d < smaller
    assert d < AlwaysLarger()
    assert not d < AlwaysSmaller()

    assert d >= same
    assert d >= same_total
    assert not d >= bigger
    assert d >= smaller
    assert not d >= AlwaysLarger()
    assert d >= AlwaysSmaller()

    assert not d > same
    assert not d > same_total
    assert not d > bigger
    assert d > smaller
    assert not d > AlwaysLarger()
    assert d > AlwaysSmaller()

    assert Duration(microseconds=-1) < Duration()

    with pytest.raises(TypeError):
        d < 3  # type: ignore[operator]


@pytest.mark.parametrize(
    "d, expected",
    [
        (Duration(), "0:00:00"),
        (
            Duration(hours=1, minutes=2, seconds=3, microseconds=4),
            "1:02:03.000004",
        ),
        (Duration(hours=5), "5:00:00"),
        (Duration(days=1), "1 day, 0:00:00"),
        (Duration(days=2, hours=23, minutes=59), "2 days, 23:59:00"),
        (Duration(minutes=-4), "-1 day, 23:56:00"),
        (Duration(days=-2), "-2 days, 0:00:00"),
        (Duration(microseconds=-1), "-1 day, 23:59:59.999999"),
    ],
)
def test_str(d, expected):
    assert str(d) == expected


@pytest.mark.parametrize(
    "d, expected",
    [
        (Duration(), "Duration(0)"),
        (Duration(days=3), "Duration(3)"),
        (Duration(seconds=5), "Duration(0, 5)"),
        (Duration(microseconds=7), "Duration(0, 0, 7)"),
        (Duration(days=-1, seconds=1), "Duration(-1, 1)"),
    ],
)
def test_repr(d, expected):
    assert repr(d) == expected


def test_addition():
    d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
    assert d + Duration() == d
    assert d + Duration(hours=1) == Duration(
        hours=2, minutes=2, seconds=3, microseconds=4
    )
    assert d + Duration(minutes=-1) == Duration(
        hours=1, minutes=1, seconds=3, microseconds=4
    )
    assert Duration(hours=23) + Duration(hours=2) == Duration(days=1, hours=1)

    with pytest.raises(OutOfRange):
        Duration.max + Duration.resolution

    with pytest.raises(TypeError, match="unsupported operand"):
        d + Ellipsis  # type: ignore[operator]


def test_subtraction():
    d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
    assert d - Duration() == d
    assert d - Duration(hours=1) == Duration(
        hours=0, minutes=2, seconds=3, microseconds=4
    )
    assert d - Duration(minutes=-1) == Duration(
        hours=1, minutes=3, seconds=3, microseconds=4
    )
    assert d - d == Duration.ZERO

    with pytest.raises(OutOfRange):
        Duration.min - Duration.resolution

    with pytest.raises(TypeError, match="unsupported operand"):
        d - Ellipsis  # type: ignore[operator]


def test_multiply():
    d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
    assert d * 2 == Duration(hours=2, minutes=4, seconds=6, microseconds=8)
    assert 2 * d == d * 2
    assert d * 0 == Duration.ZERO
    assert d * -1 == -d

    with pytest.raises(OutOfRange):
        Duration.max * 2

    with pytest.raises(TypeError, match="unsupported operand"):
        d * Ellipsis  # type: ignore[operator]

    with pytest.raises(TypeError, match="unsupported operand"):
        d * 0.5  # type: ignore[operator]


class TestDivision:

    def test_by_int(self):
        d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
        assert d / 2 == Duration(
            hours=0, minutes=31, seconds=1, microseconds=500_002
        )
        assert d // 2 == d / 2
        # rounds down to the microsecond
        assert Duration(microseconds=5) / 2 == Duration(microseconds=2)
        assert Duration(microseconds=-5) / 2 == Duration(microseconds=-3)

    def test_by_duration(self):
        d = Duration(hours=1, minutes=30)
        assert d // Duration(minutes=20) == 4
        assert d / Duration(minutes=20) == Duration(microseconds=4)
        assert d // Duration(minutes=-20) == -5
        assert isinstance(d // Duration(hours=1), int)

    def test_modulo(self):
        d = Duration(hours=1, minutes=30)
        assert d % Duration(minutes=20) == Duration(minutes=10)
        # the remainder has the sign of the divisor
        assert d % Duration(minutes=-20) == Duration(minutes=-10)
        assert -d % Duration(minutes=20) == Duration(minutes=10)

    def test_true_division_by_duration_keeps_type(self):
        q = Duration(seconds=10) / Duration(seconds=3)
        assert isinstance(q, Duration)
        assert q == Duration(microseconds=3)
        assert Duration(seconds=-10) / Duration(seconds=3) == Duration(
            microseconds=-4
        )

    def test_inplace_true_division_stays_a_duration(self):
        d = Duration(hours=1)
        d /= Duration(minutes=20)
        assert d == Duration(microseconds=3)
        d /= 2
        assert d == Duration(microseconds=1)

    def test_divmod(self):
        d = Duration(hours=1, minutes=30)
        q, r = divmod(d, Duration(minutes=20))
        assert (q, r) == (4, Duration(minutes=10))
        assert Duration(minutes=20) * q + r == d

    def test_divide_by_zero(self):
        d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
        with pytest.raises(ZeroDivisionError):
            d / Duration()

        with pytest.raises(ZeroDivisionError):
            d / 0

        with pytest.raises(ZeroDivisionError):
            d // 0

        with pytest.raises(ZeroDivisionError):
            d % Duration()

        with pytest.raises(ZeroDivisionError):
            divmod(d, Duration())

    def test_invalid(self):
        d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
        with pytest.raises(TypeError):
            d / "invalid"  # type: ignore[operator]

        with pytest.raises(TypeError):
            d % 3  # type: ignore[operator]


def test_negate():
    assert Duration.ZERO == -Duration.ZERO
    assert Duration(
        hours=-1, minutes=2, seconds=-3, microseconds=4
    ) == -Duration(hours=1, minutes=-2, seconds=3, microseconds=-4)
    assert -Duration(seconds=1) == Duration(days=-1, seconds=86_399)
    assert -Duration.min == Duration(days=999_999_999)
    # the normalized form of -max would need one more negative day
    with pytest.raises(OutOfRange):
        -Duration.max
    assert +Duration(seconds=1) == Duration(seconds=1)


def test_abs():
    assert abs(Duration()) == Duration()
    assert abs(
        Duration(hours=-1, minutes=-2, seconds=-3, microseconds=-4)
    ) == Duration(hours=1, minutes=2, seconds=3, microseconds=4)
    assert abs(Duration(hours=1)) == Duration(hours=1)


def test_inplace_operators_rebind():
    d = original = Duration(hours=1)
    d += Duration(minutes=1)
    d *= 2
    assert d == Duration(hours=2, minutes=2)
    assert original == Duration(hours=1)


def test_copy():
    d = Duration(days=1, seconds=2, microseconds=3)
    assert copy.copy(d) is d
    assert copy.deepcopy(d) is d


def test_pickle():
    d = Duration(days=-1, seconds=2, microseconds=3)
    assert pickle.loads(pickle.dumps(d)) == d


def test_order_matches_total_microseconds():
    durations = [
        Duration(days=-1),
        Duration(days=-1, microseconds=1),
        Duration(seconds=-1),
        Duration(),
        Duration(microseconds=1),
        Duration(hours=23, minutes=59, seconds=59, microseconds=999_999),
        Duration(days=1),
    ]
    assert sorted(durations) == durations
    assert sorted(durations, key=Duration.total_microseconds) == durations
    for a, b in zip(durations, durations[1:]):
        assert a < b
        assert a.total_microseconds() < b.total_microseconds()
