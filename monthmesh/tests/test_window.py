"""
Unit Tests: Hot Window

Tests:
    - Window bounds for mid-year, January and December
    - Inclusion at both edges
    - Custom window lengths
"""

from datetime import date

import pytest

from monthmesh.partition.keys import key_of
from monthmesh.partition.window import hot_window


class TestHotWindow:
    """Tests for window bounds and membership."""

    def test_reference_window(self):
        window = hot_window(date(2024, 6, 1))
        assert window.start == date(2023, 6, 1)
        assert window.end == date(2024, 6, 30)

    def test_mid_month_today(self):
        window = hot_window(date(2024, 6, 17))
        assert window.start == date(2023, 6, 1)
        assert window.end == date(2024, 6, 30)

    def test_year_boundaries(self):
        assert hot_window(date(2024, 1, 31)).start == date(2023, 1, 1)
        assert hot_window(date(2024, 1, 31)).end == date(2024, 1, 31)
        assert hot_window(date(2024, 12, 5)).end == date(2024, 12, 31)
        assert hot_window(date(2024, 2, 10)).end == date(2024, 2, 29)

    def test_membership(self):
        window = hot_window(date(2024, 6, 1))
        assert window.contains(key_of(date(2024, 1, 10)))
        assert window.contains(key_of(date(2023, 6, 30)))
        assert window.contains(key_of(date(2024, 6, 30)))
        assert not window.contains(key_of(date(2023, 5, 31)))
        assert not window.contains(key_of(date(2024, 7, 1)))
        assert not window.contains(key_of(date(2022, 1, 10)))

    def test_custom_length(self):
        window = hot_window(date(2024, 6, 15), months=0)
        assert window.start == date(2024, 6, 1)
        assert window.end == date(2024, 6, 30)

        window = hot_window(date(2024, 6, 15), months=3)
        assert window.start == date(2024, 3, 1)

    def test_negative_length_rejected(self):
        with pytest.raises(ValueError):
            hot_window(date(2024, 6, 15), months=-1)

    def test_window_advances_with_today(self):
        key = key_of(date(2023, 6, 10))
        assert hot_window(date(2024, 6, 1)).contains(key)
        assert not hot_window(date(2024, 7, 1)).contains(key)
