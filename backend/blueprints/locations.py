"""Locations blueprint: read-only JSON views of submitted reports."""
from flask import Blueprint, jsonify
import logging
from sqlalchemy.exc import SQLAlchemyError
from shared.aggregation import compute_dashboard_stats
from shared.schemas import LocationRecord
from ..models import load_locations
from ..utils import handle_api_exception

logger = logging.getLogger(__name__)

bp = Blueprint('locations', __name__, url_prefix='/api')


@bp.route('/locations', methods=['GET'])
def get_locations():
    """Get all locations."""
    try:
        locations = load_locations()
    except SQLAlchemyError as e:
        return handle_api_exception(e, "load locations")
    return jsonify([LocationRecord.model_validate(loc).model_dump(mode='json') for loc in locations])


@bp.route('/stats', methods=['GET'])
def get_stats():
    """Get the dashboard statistics."""
    try:
        locations = load_locations()
    except SQLAlchemyError as e:
        return handle_api_exception(e, "load locations")
    return jsonify(compute_dashboard_stats(locations).model_dump(mode='json'))
