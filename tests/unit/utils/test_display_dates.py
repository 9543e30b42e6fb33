"""Unit tests for display date formatting."""

from datetime import date, datetime, timezone

import pytest

from quickflex_admin.utils.dates import format_display_date, parse_input_date, to_date


@pytest.mark.parametrize(
    "value",
    [
        date(2024, 3, 2),
        datetime(2024, 3, 2, 23, 59, 59),
        datetime(2024, 3, 2, 8, 0, tzinfo=timezone.utc),
        "2024-03-02",
        "2024-03-02T10:15:00Z",
        "2024-03-02 10:15:00",
        "03-02-2024",
        "03/02/2024",
    ],
)
def test_renders_month_day_year(value):
    assert format_display_date(value) == "03-02-2024"


def test_missing_values_render_as_none():
    assert format_display_date(None) is None
    assert format_display_date("") is None


def test_small_years_are_zero_padded():
    assert format_display_date(date(999, 1, 5)) == "01-05-0999"


def test_unrecognized_text_is_rejected():
    with pytest.raises(ValueError):
        to_date("next tuesday")


def test_parse_input_date_passes_through_dates():
    day = date(2024, 1, 1)
    assert parse_input_date(day) is day
    assert parse_input_date("12-31-2023") == date(2023, 12, 31)
