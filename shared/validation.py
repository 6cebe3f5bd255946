"""Coordinate parsing for submitted form values."""


class ValidationError(Exception):
    """Raised when a submitted value cannot be used."""
    pass


def _parse_coordinate(value, field_name, limit):
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required")
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except ValueError:
        raise ValidationError(f"{field_name} must be a valid number")
    except TypeError:
        raise ValidationError(f"{field_name} must be a number or numeric string")

    if number != number:  # NaN
        raise ValidationError(f"{field_name} must be a valid number")
    if not (-limit <= number <= limit):
        raise ValidationError(f"{field_name} must be between -{limit} and {limit}")
    return number


def parse_coordinates(lat, lng):
    """Convert submitted latitude/longitude form values to floats.

    The browser fills these fields from the geolocation API, so an empty value
    means the device location was not obtained.

    Returns:
        tuple: (latitude, longitude) as floats

    Raises:
        ValidationError: If either value is missing, not numeric or out of range
    """
    return _parse_coordinate(lat, 'Latitude', 90), _parse_coordinate(lng, 'Longitude', 180)

