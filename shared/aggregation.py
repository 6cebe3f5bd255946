"""Dashboard statistics over an already-loaded list of locations."""
import logging

from shared.schemas import DashboardStats, CategoryCount, MonthCount
from shared.utils import parse_timestamp, month_label

logger = logging.getLogger(__name__)

UNCATEGORIZED = 'Uncategorized'
DEFAULT_ZOOM = 10
WORLD_ZOOM = 2


def _field(location, name):
    """Read a field from an ORM object, a pydantic model or a plain dict."""
    if isinstance(location, dict):
        return location.get(name)
    return getattr(location, name, None)


def has_coordinates(location):
    return _field(location, 'latitude') is not None and _field(location, 'longitude') is not None


def plottable(locations):
    """Locations that can be placed on the map."""
    return [loc for loc in locations if has_coordinates(loc)]


def compute_dashboard_stats(locations):
    """Compute the dashboard statistics in a single pass.

    Args:
        locations: Sequence of Location rows, LocationRecord models or dicts

    Returns:
        DashboardStats
    """
    total = 0
    lat_sum = 0.0
    lng_sum = 0.0
    with_coordinates = 0
    center = None
    missing_address = 0
    missing_report = 0
    per_category = {}
    per_month = {}
    month_keys = {}

    for loc in locations:
        total += 1

        category = _field(loc, 'category') or UNCATEGORIZED
        per_category[category] = per_category.get(category, 0) + 1

        if has_coordinates(loc):
            lat = float(_field(loc, 'latitude'))
            lng = float(_field(loc, 'longitude'))
            lat_sum += lat
            lng_sum += lng
            with_coordinates += 1
            if center is None:
                center = (lat, lng)

        if not _field(loc, 'address'):
            missing_address += 1
        if not _field(loc, 'report'):
            missing_report += 1

        raw_timestamp = _field(loc, 'timestamp')
        if raw_timestamp:
            moment = parse_timestamp(raw_timestamp)
            if moment is None:
                logger.warning(f"Invalid timestamp encountered: {raw_timestamp!r}")
            else:
                label = month_label(moment)
                per_month[label] = per_month.get(label, 0) + 1
                month_keys[label] = (moment.year, moment.month)

    avg_lat = lat_sum / with_coordinates if with_coordinates else 0.0
    avg_lng = lng_sum / with_coordinates if with_coordinates else 0.0

    # sorted() is stable, so equal counts keep first-seen order
    categories = sorted(per_category.items(), key=lambda item: item[1], reverse=True)
    months = sorted(per_month.items(), key=lambda item: month_keys[item[0]])

    stats = DashboardStats(
        total_locations=total,
        unique_categories=len(per_category),
        avg_latitude=f"{avg_lat:.4f}",
        avg_longitude=f"{avg_lng:.4f}",
        categories=[CategoryCount(category=c, count=n) for c, n in categories],
        months=[MonthCount(month=m, count=n) for m, n in months],
        missing_address=missing_address,
        missing_report=missing_report,
        center=center or (0.0, 0.0),
        zoom=DEFAULT_ZOOM if center else WORLD_ZOOM,
    )
    logger.debug(f"Computed dashboard stats for {total} locations")
    return stats
