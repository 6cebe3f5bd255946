"""Uploads blueprint: stores report photos in object storage."""
from flask import Blueprint, jsonify, request
import logging
from shared.schemas import UploadResponse
from ..services.cloud_storage import get_cloud_storage, StorageError
from ..utils import api_error, handle_api_exception

logger = logging.getLogger(__name__)

bp = Blueprint('uploads', __name__, url_prefix='/api')

# Field names used by the different upload forms
FILE_FIELDS = ('file', 'image')


def requested_file(req):
    for field in FILE_FIELDS:
        storage = req.files.get(field)
        if storage and storage.filename:
            return storage
    return None


@bp.route('/upload', methods=['POST'])
def upload_photo():
    """Store a photo and return its public URL."""
    storage = requested_file(request)
    if storage is None:
        return api_error('No file provided', 400)

    try:
        cloud_storage = get_cloud_storage()
    except ValueError as e:
        return handle_api_exception(e, "initialize cloud storage")
    except StorageError as e:
        return api_error(str(e), 502, 'error')

    try:
        result = cloud_storage.upload_file(storage.stream, storage.filename, storage.mimetype)
    except StorageError as e:
        return api_error(str(e), 502, 'error', details={'filename': storage.filename})

    response = UploadResponse(**result)
    logger.info(f"Stored upload {response.object_name}", extra={'extra_fields': {
        'object_name': response.object_name, 'size_bytes': response.size_bytes}})
    return jsonify(response.model_dump(mode='json')), 201
