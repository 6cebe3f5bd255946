"""Tests for shared validation utilities."""
import pytest
from shared.validation import parse_coordinates, ValidationError


class TestParseCoordinates:
    """Test conversion of submitted coordinates."""

    def test_strings_and_numbers(self):
        assert parse_coordinates('40.7128', '-74.0060') == (40.7128, -74.006)
        assert parse_coordinates(' 1 ', 2) == (1.0, 2.0)

    def test_missing_values(self):
        with pytest.raises(ValidationError, match="Latitude is required"):
            parse_coordinates('', '2')
        with pytest.raises(ValidationError, match="Longitude is required"):
            parse_coordinates('1', None)

    def test_non_numeric(self):
        with pytest.raises(ValidationError, match="Latitude must be a valid number"):
            parse_coordinates('north', '2')
        with pytest.raises(ValidationError, match="Longitude must be a valid number"):
            parse_coordinates('1', 'nan')

    def test_out_of_range(self):
        with pytest.raises(ValidationError, match="Latitude must be between -90 and 90"):
            parse_coordinates('91', '0')
        with pytest.raises(ValidationError, match="Longitude must be between -180 and 180"):
            parse_coordinates('0', '-180.5')
