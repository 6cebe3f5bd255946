"""Shared utility functions for the Snap-to-Report application."""

import logging
from datetime import datetime, timezone

from shared.models import APP_TIMEZONE

logger = logging.getLogger(__name__)

# Month labels are fixed English abbreviations so they do not depend on the host locale
MONTH_ABBREVIATIONS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
                       'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')


def parse_timestamp(value):
    """Parse a stored timestamp into an aware datetime in the application timezone.

    Accepts datetime objects and ISO 8601 strings (a trailing ``Z`` is accepted).
    Naive values are taken to be UTC, which is what the storage backend writes.

    Returns:
        datetime or None: None when the value is empty or not a valid timestamp
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.debug(f"Unparseable timestamp: {value!r}")
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(APP_TIMEZONE)


def month_label(moment):
    """Return the ``'Mon YYYY'`` label used by the dashboard timeline."""
    return f"{MONTH_ABBREVIATIONS[moment.month - 1]} {moment.year}"
