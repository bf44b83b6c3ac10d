from datetime import date, datetime

import pytest

from core.errors import InvalidArgument
from utils.date_utils import add_months, month_index, months_between, parse_iso_date


class TestParseIsoDate:
    """Streng ISO-dato"""

    def test_string(self):
        assert parse_iso_date("2024-02-29") == date(2024, 2, 29)

    def test_date_and_datetime(self):
        assert parse_iso_date(date(2024, 1, 1)) == date(2024, 1, 1)
        assert parse_iso_date(datetime(2024, 1, 1, 12, 30)) == date(2024, 1, 1)

    @pytest.mark.parametrize("value", ["2024-02-30", "2024-1-5", "15.01.2024", "", None, 20240101])
    def test_invalid(self, value):
        with pytest.raises(InvalidArgument):
            parse_iso_date(value)


class TestMonths:
    """Månedsregning"""

    def test_month_index(self):
        assert month_index(date(2024, 1, 31)) == 2024 * 12

    def test_add_months_clamps_day(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_add_negative(self):
        assert add_months(date(2026, 10, 18), -3) == date(2026, 7, 18)

    def test_months_between_ignores_day(self):
        assert months_between(date(2024, 1, 31), date(2024, 2, 1)) == 1
        assert months_between(date(2024, 5, 1), date(2024, 3, 31)) == -2
