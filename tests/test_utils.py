"""Unit tests for utility functions."""
import pytest
from gymtracker.utils import clean_str, to_int, to_number


class TestUtils:
    """Test cases for utility functions."""

    def test_to_number_valid(self):
        """Test to_number with valid input."""
        assert to_number("10") == 10
        assert to_number(" 42.5 ") == 42.5
        assert to_number(7) == 7.0
        assert to_number("-5") == -5

    @pytest.mark.parametrize("value", ["abc", "", None, False, float("nan"), "inf", [1]])
    def test_to_number_invalid(self, value):
        """Anything that does not read as a finite number is 0."""
        assert to_number(value) == 0

    def test_to_number_bool(self):
        """Checkbox-style cells read as 1 and 0."""
        assert to_number(True) == 1
        assert to_int(True) == 1

    def test_to_int_truncates(self):
        assert to_int("12") == 12
        assert to_int(8.9) == 8
        assert to_int("ten") == 0

    def test_clean_str(self):
        assert clean_str("  ") is None
        assert clean_str(None) is None
        assert clean_str("Squat ") == "Squat "
        assert clean_str(3) == "3"
