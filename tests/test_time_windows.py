from datetime import date, datetime, time

import pytest

from clinic_analytics.errors import InvalidParameterError
from clinic_analytics.services.time_windows import (
    TimeWindow,
    day_bounds,
    month_bounds,
    month_label,
    previous_month,
    shift_months,
    week_bounds,
    week_bounds_offset,
    week_label,
)

# Wednesday
NOW = datetime(2025, 10, 15, 10, 30)


class TestDayAndWeekBounds:
    def test_day_bounds_cover_whole_day(self):
        window = day_bounds(NOW)
        assert window.start == datetime(2025, 10, 15, 0, 0)
        assert window.end == datetime.combine(date(2025, 10, 15), datetime.max.time())

    def test_week_starts_on_monday(self):
        window = week_bounds(NOW)
        assert window.start == datetime(2025, 10, 13)
        assert window.end.date() == date(2025, 10, 19)
        assert window.end.time() == time.max

    def test_week_bounds_on_sunday_stays_in_same_week(self):
        window = week_bounds(datetime(2025, 10, 19, 23, 59))
        assert window.start.date() == date(2025, 10, 13)

    def test_week_bounds_on_monday_midnight(self):
        window = week_bounds(datetime(2025, 10, 13, 0, 0))
        assert window.start == datetime(2025, 10, 13)

    def test_week_offset_zero_is_current_week(self):
        assert week_bounds_offset(NOW, 0) == week_bounds(NOW)

    def test_week_offset_moves_back_whole_weeks(self):
        window = week_bounds_offset(NOW, 3)
        assert window.start.date() == date(2025, 9, 22)
        assert window.end.date() == date(2025, 9, 28)
        assert window.start.weekday() == 0

    def test_week_offset_rejects_negative(self):
        with pytest.raises(ValueError):
            week_bounds_offset(NOW, -1)

    def test_window_contains_both_ends(self):
        window = day_bounds(NOW)
        assert window.contains(window.start)
        assert window.contains(window.end)
        assert not window.contains(datetime(2025, 10, 16))


class TestMonthBounds:
    def test_thirty_one_day_month(self):
        window = month_bounds(2025, 10)
        assert window.start == datetime(2025, 10, 1)
        assert window.end.date() == date(2025, 10, 31)

    def test_leap_february(self):
        assert month_bounds(2024, 2).end.date() == date(2024, 2, 29)

    def test_common_february(self):
        assert month_bounds(2025, 2).end.date() == date(2025, 2, 28)

    def test_month_out_of_range(self):
        with pytest.raises(InvalidParameterError) as exc:
            month_bounds(2025, 13)
        assert exc.value.parameter == "month"

    def test_month_zero(self):
        with pytest.raises(InvalidParameterError):
            month_bounds(2025, 0)

    def test_previous_month_wraps_year(self):
        assert previous_month(2025, 1) == (2024, 12)
        assert previous_month(2025, 10) == (2025, 9)


class TestShiftMonths:
    def test_shift_back_across_year(self):
        assert shift_months(datetime(2025, 2, 10, 8, 0), -6) == datetime(2024, 8, 10, 8, 0)

    def test_shift_clamps_day(self):
        assert shift_months(datetime(2025, 3, 31), -1) == datetime(2025, 2, 28)

    def test_shift_forward(self):
        assert shift_months(datetime(2025, 11, 30), 3) == datetime(2026, 2, 28)


class TestLabels:
    def test_month_label(self):
        assert month_label(2025, 10) == "October 2025"

    def test_week_label(self):
        window = TimeWindow(datetime(2025, 9, 29), datetime(2025, 10, 5, 23, 59))
        assert week_label(window) == "29/09 - 05/10"
