"""Pages blueprint: the upload form and the dashboard."""
from flask import Blueprint, render_template, request, current_app
import logging
from sqlalchemy.exc import SQLAlchemyError
from shared.aggregation import compute_dashboard_stats
from shared.enums import DashboardTab
from ..models import load_locations
from ..services.map_view import render_map
from ..services.report_flow import ReportFlow, ReportFlowError
from .uploads import requested_file

logger = logging.getLogger(__name__)

bp = Blueprint('pages', __name__)


@bp.route('/', methods=['GET'])
def upload_form():
    return render_template('upload.html')


@bp.route('/', methods=['POST'])
def generate_report():
    """Store the photo, request a report and show the result or a plain error message."""
    storage = requested_file(request)
    if storage is None:
        return render_template('upload.html', error="Please choose a photo first."), 400

    data = storage.read()
    flow = ReportFlow.from_config(current_app.config)
    try:
        upload, outcome = flow.generate(
            data,
            storage.filename,
            storage.mimetype,
            request.form.get('latitude'),
            request.form.get('longitude'),
        )
    except ReportFlowError as e:
        logger.warning(f"Report flow failed: {e}")
        return render_template('upload.html', error=str(e)), 502

    logger.info(f"Report flow finished with outcome '{outcome.kind}'")
    return render_template('upload.html', outcome=outcome, upload=upload)


@bp.route('/dashboard', methods=['GET'])
def dashboard():
    """Map of submitted reports with aggregate statistics."""
    tab = request.args.get('tab', DashboardTab.OVERVIEW.value)
    if tab not in {t.value for t in DashboardTab}:
        tab = DashboardTab.OVERVIEW.value

    try:
        locations = load_locations()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching locations: {e}", exc_info=True)
        return render_template('dashboard.html', error=str(e), tabs=list(DashboardTab), active_tab=tab), 500

    stats = compute_dashboard_stats(locations)
    return render_template(
        'dashboard.html',
        stats=stats,
        map_html=render_map(locations, stats),
        tabs=list(DashboardTab),
        active_tab=tab,
    )
