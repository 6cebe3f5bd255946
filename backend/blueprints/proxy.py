"""Proxy blueprint: relays multipart forms to the external backends."""
from flask import Blueprint, jsonify, request, current_app
import logging
from ..services.report_backend import (
    ReportBackendClient, BackendNotConfiguredError, BackendUnavailableError, BackendResponseError
)
from ..utils import api_error, form_fields, form_files

logger = logging.getLogger(__name__)

bp = Blueprint('proxy', __name__, url_prefix='/api')


def _relay(client, path):
    """Forward the current request's form and return the upstream status and JSON unchanged."""
    try:
        status, body = client.forward(path, fields=form_fields(request), files=form_files(request))
    except BackendNotConfiguredError as e:
        return api_error(str(e), 500, 'error', details={'path': path})
    except BackendUnavailableError as e:
        return api_error(str(e), 502, 'error', details={'path': path})
    except BackendResponseError as e:
        return api_error(str(e), 502, 'error', details={'path': path, 'upstream_status': e.status_code})
    return jsonify(body), status


@bp.route('/generate-report', methods=['POST'])
def generate_report():
    """Forward to the report backend with the API key."""
    client = ReportBackendClient.from_config(current_app.config, 'BACKEND_BASE_URL', with_api_key=True)
    return _relay(client, '/generate-report')


@bp.route('/draft', methods=['POST'])
def draft():
    """Forward to the 311 backend draft endpoint."""
    client = ReportBackendClient.from_config(current_app.config, 'SUBMIT_BACKEND_URL', with_api_key=False)
    return _relay(client, '/draft')


@bp.route('/submit', methods=['POST'])
def submit():
    """Forward to the 311 backend submit endpoint."""
    client = ReportBackendClient.from_config(current_app.config, 'SUBMIT_BACKEND_URL', with_api_key=False)
    return _relay(client, '/submit')
