import pytest

from civiltime import OutOfRange
from civiltime._math import (
    MAX_ORDINAL,
    UNIX_EPOCH_ORDINAL,
    check_date_fields,
    check_time_fields,
    day_of_year,
    days_before_year,
    days_in_month,
    has_53_weeks,
    is_leap,
    iso_calendar,
    iso_to_ordinal,
    iso_week1_monday,
    normalize_date_fields,
    normalize_datetime_fields,
    normalize_duration_fields,
    normalize_pair,
    ordinal_to_ymd,
    weekday,
    ymd_to_ordinal,
)


@pytest.mark.parametrize(
    "year, expected",
    [
        (1, False),
        (4, True),
        (100, False),
        (400, True),
        (1900, False),
        (2000, True),
        (2023, False),
        (2024, True),
        (9996, True),
    ],
)
def test_is_leap(year, expected):
    assert is_leap(year) is expected
    assert (days_in_month(year, 2) == 29) is expected


def test_days_in_month():
    assert [days_in_month(2021, m) for m in range(1, 13)] == [
        31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31,
    ]  # fmt: skip


def test_known_ordinals():
    assert ymd_to_ordinal(1, 1, 1) == 1
    assert ymd_to_ordinal(1970, 1, 1) == UNIX_EPOCH_ORDINAL
    assert ymd_to_ordinal(9999, 12, 31) == MAX_ORDINAL
    assert days_before_year(1) == 0
    assert days_before_year(2) == 365


def test_ordinal_bijection_over_full_range():
    expected = 1
    for year in range(1, 10_000):
        for month in range(1, 13):
            for day in range(1, days_in_month(year, month) + 1):
                assert ymd_to_ordinal(year, month, day) == expected
                assert ordinal_to_ymd(expected) == (year, month, day)
                expected += 1
    assert expected == MAX_ORDINAL + 1


@pytest.mark.parametrize(
    "ordinal, expected",
    [
        # last days of 4, 100 and 400 year cycles
        (1_461, (4, 12, 31)),
        (36_524, (100, 12, 31)),
        (146_097, (400, 12, 31)),
        (146_098, (401, 1, 1)),
        (730_485, (2000, 12, 31)),
        (730_486, (2001, 1, 1)),
    ],
)
def test_ordinal_cycle_boundaries(ordinal, expected):
    assert ordinal_to_ymd(ordinal) == expected


def test_weekday():
    assert weekday(1, 1, 1) == 0
    assert weekday(1970, 1, 1) == 3
    assert weekday(2021, 8, 31) == 1
    assert weekday(9999, 12, 31) == 4


def test_day_of_year():
    assert day_of_year(2021, 1, 1) == 1
    assert day_of_year(2021, 12, 31) == 365
    assert day_of_year(2020, 12, 31) == 366
    assert day_of_year(2020, 3, 1) == 61


class TestIsoCalendar:

    @pytest.mark.parametrize(
        "ymd, expected",
        [
            ((2021, 1, 1), (2020, 53, 5)),
            ((2021, 1, 4), (2021, 1, 1)),
            ((2019, 12, 30), (2020, 1, 1)),
            ((2008, 12, 29), (2009, 1, 1)),
            ((2010, 1, 3), (2009, 53, 7)),
            ((2026, 10, 19), (2026, 43, 1)),
            ((1, 1, 1), (1, 1, 1)),
            ((9999, 12, 31), (9999, 52, 5)),
        ],
    )
    def test_known(self, ymd, expected):
        assert iso_calendar(*ymd) == expected

    def test_week1_monday_is_a_monday(self):
        for year in range(1, 10_000, 7):
            monday = iso_week1_monday(year)
            assert (monday + 6) % 7 == 0
            # week 1 contains January 4th
            jan4 = ymd_to_ordinal(year, 1, 4)
            assert monday <= jan4 < monday + 7

    def test_53_weeks(self):
        assert has_53_weeks(2020)  # leap year starting on Wednesday
        assert has_53_weeks(2015)  # starting on Thursday
        assert not has_53_weeks(2021)
        assert not has_53_weeks(2019)

    def test_round_trip(self):
        for ordinal in range(1, MAX_ORDINAL + 1):
            iso = iso_calendar(*ordinal_to_ymd(ordinal))
            assert iso_to_ordinal(*iso) == ordinal

    @pytest.mark.parametrize(
        "iso",
        [
            (0, 1, 1),
            (10_000, 1, 1),
            (2021, 0, 1),
            (2021, 53, 1),
            (2021, 1, 0),
            (2021, 1, 8),
        ],
    )
    def test_invalid(self, iso):
        with pytest.raises(OutOfRange):
            iso_to_ordinal(*iso)

    @pytest.mark.parametrize(
        "iso, match",
        [
            ((2021.0, 1, 1), "year"),
            ((2021, 1.0, 1), "week"),
            ((2021, 1, "1"), "day"),
        ],
    )
    def test_types(self, iso, match):
        with pytest.raises(TypeError, match=match):
            iso_to_ordinal(*iso)


class TestChecks:

    @pytest.mark.parametrize(
        "fields, match",
        [
            ((0, 1, 1), "year"),
            ((10_000, 1, 1), "year"),
            ((2021, 13, 1), "month"),
            ((2021, 0, 1), "month"),
            ((2021, 2, 29), "day"),
            ((2021, 4, 31), "day"),
            ((2021, 1, 0), "day"),
            # year is reported before month
            ((0, 13, 1), "year"),
        ],
    )
    def test_date(self, fields, match):
        with pytest.raises(OutOfRange, match=match):
            check_date_fields(*fields)

    def test_leap_day(self):
        check_date_fields(2020, 2, 29)
        check_date_fields(2000, 2, 29)
        with pytest.raises(OutOfRange):
            check_date_fields(1900, 2, 29)

    @pytest.mark.parametrize(
        "fields, match",
        [
            ((24, 0, 0, 0), "hour"),
            ((-1, 0, 0, 0), "hour"),
            ((0, 60, 0, 0), "minute"),
            ((0, 0, 60, 0), "second"),
            ((0, 0, 0, 1_000_000), "microsecond"),
            ((0, 0, 0, -1), "microsecond"),
            ((24, 60, 0, 0), "hour"),
        ],
    )
    def test_time(self, fields, match):
        with pytest.raises(OutOfRange, match=match):
            check_time_fields(*fields)

    def test_types(self):
        with pytest.raises(TypeError, match="month"):
            check_date_fields(2021, 1.0, 1)  # type: ignore[arg-type]
        with pytest.raises(TypeError, match="second"):
            check_time_fields(0, 0, "0", 0)  # type: ignore[arg-type]


class TestNormalize:

    @pytest.mark.parametrize(
        "hi, lo, factor, expected",
        [
            (0, 0, 60, (0, 0)),
            (1, 59, 60, (1, 59)),
            (1, 60, 60, (2, 0)),
            (1, -1, 60, (0, 59)),
            (0, -61, 60, (-2, 59)),
            (5, 125, 60, (7, 5)),
        ],
    )
    def test_pair(self, hi, lo, factor, expected):
        assert normalize_pair(hi, lo, factor) == expected

    def test_pair_with_huge_values(self):
        hi, lo = normalize_pair(2**70, 2**70, 1_000_000)
        assert hi * 1_000_000 + lo == 2**70 * 1_000_001
        assert 0 <= lo < 1_000_000

    def test_duration(self):
        assert normalize_duration_fields(0, 0, -1) == (-1, 86_399, 999_999)
        assert normalize_duration_fields(0, 86_400, 1_000_000) == (1, 1, 0)
        assert normalize_duration_fields(1, -86_400, 0) == (0, 0, 0)

    @pytest.mark.parametrize(
        "fields",
        [(0, 0, 0), (-1, 86_399, 999_999), (999_999_999, 0, 1), (3, 7, 0)],
    )
    def test_duration_idempotent(self, fields):
        assert normalize_duration_fields(*fields) == fields

    @pytest.mark.parametrize(
        "fields, expected",
        [
            ((2021, 1, 0), (2020, 12, 31)),
            ((2021, 3, 0), (2021, 2, 28)),
            ((2020, 3, 0), (2020, 2, 29)),
            ((2021, 12, 32), (2022, 1, 1)),
            ((2021, 1, 32), (2021, 2, 1)),
            ((2021, 1, 366), (2022, 1, 1)),
            ((2021, 1, -364), (2020, 1, 2)),
            ((2021, 8, 15), (2021, 8, 15)),
        ],
    )
    def test_date(self, fields, expected):
        assert normalize_date_fields(*fields) == expected

    @pytest.mark.parametrize(
        "fields",
        [(1, 1, 0), (9999, 12, 32), (9999, 1, 400), (1, 1, -1_000)],
    )
    def test_date_out_of_range(self, fields):
        with pytest.raises(OutOfRange):
            normalize_date_fields(*fields)

    @pytest.mark.parametrize(
        "fields, expected",
        [
            (
                (2021, 12, 31, 23, 59, 59, 1_000_000),
                (2022, 1, 1, 0, 0, 0, 0),
            ),
            (
                (2021, 1, 1, 0, 0, 0, -1),
                (2020, 12, 31, 23, 59, 59, 999_999),
            ),
            (
                (2021, 1, 1, 0, 0, -86_400, 0),
                (2020, 12, 31, 0, 0, 0, 0),
            ),
            (
                (2021, 2, 28, 12, 0, 0, 43_200_000_000),
                (2021, 3, 1, 0, 0, 0, 0),
            ),
        ],
    )
    def test_datetime(self, fields, expected):
        assert normalize_datetime_fields(*fields) == expected
