"""Tile map rendering for the dashboard using folium."""
import logging
import folium
from markupsafe import escape

from shared.aggregation import plottable

logger = logging.getLogger(__name__)

TILES = 'OpenStreetMap'


def popup_html(location):
    name = escape(location.name or '')
    category = escape(location.category or 'Uncategorized')
    address = escape(location.address or 'N/A')
    report = escape(location.report or 'No report')
    return (
        f"<div class=\"popup-content\">"
        f"<strong>{name}</strong><br>"
        f"<span>Category: {category}</span><br>"
        f"<span>Address: {address}</span><br>"
        f"<span>Report: {report}</span><br>"
        f"<span>Coordinates: {location.latitude}, {location.longitude}</span>"
        f"</div>"
    )


def build_map(locations, stats):
    """Build the dashboard map with one marker per plottable location.

    Args:
        locations: Loaded Location rows
        stats: DashboardStats providing the center and zoom

    Returns:
        folium.Map
    """
    fmap = folium.Map(
        location=list(stats.center),
        zoom_start=stats.zoom,
        tiles=TILES,
    )
    markers = plottable(locations)
    for location in markers:
        folium.Marker(
            location=[location.latitude, location.longitude],
            popup=folium.Popup(popup_html(location), max_width=320),
            tooltip=escape(location.name or ''),
        ).add_to(fmap)
    logger.debug(f"Built map with {len(markers)} markers")
    return fmap


def render_map(locations, stats):
    """HTML fragment embedding the dashboard map."""
    return build_map(locations, stats)._repr_html_()
