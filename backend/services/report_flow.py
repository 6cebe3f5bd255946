"""Photo-to-report flow: storage upload followed by the report backend call."""
import io
import json
import logging

from shared.report_parser import interpret_response
from shared.schemas import UploadResponse
from shared.validation import ValidationError, parse_coordinates
from .cloud_storage import StorageError, get_cloud_storage
from .report_backend import BackendError, ReportBackendClient


logger = logging.getLogger(__name__)


class ReportFlowError(Exception):
    """A step of the flow failed; the message is shown to the user as-is."""
    pass


def _failure_detail(body):
    if isinstance(body, dict):
        detail = body.get('error') or body.get('detail') or body.get('message')
        if detail:
            return f": {detail}"
    return ""


class ReportFlow:
    """Runs the sequential steps behind the upload page and the CLI.

    Every step is awaited before the next one starts; the first failure ends
    the flow with a ReportFlowError.
    """

    def __init__(self, report_client, submit_client, storage_factory=None):
        self.report_client = report_client
        self.submit_client = submit_client
        self.storage_factory = storage_factory

    @classmethod
    def from_config(cls, config):
        return cls(
            ReportBackendClient.from_config(config, 'BACKEND_BASE_URL', with_api_key=True),
            ReportBackendClient.from_config(config, 'SUBMIT_BACKEND_URL', with_api_key=False),
        )

    def _coordinates(self, latitude, longitude):
        try:
            return parse_coordinates(latitude, longitude)
        except ValidationError as e:
            raise ReportFlowError(f"Location unavailable: {e}") from e

    def upload(self, data, filename, content_type=None):
        """Store the photo and return its UploadResponse."""
        try:
            storage = (self.storage_factory or get_cloud_storage)()
            result = storage.upload_file(io.BytesIO(data), filename, content_type)
        except (StorageError, ValueError) as e:
            logger.error(f"Photo upload failed: {e}", extra={'extra_fields': {'step': 'upload', 'filename': filename}})
            raise ReportFlowError(f"Upload failed: {e}") from e
        return UploadResponse(**result)

    def _call(self, client, path, fields, files, failure_label):
        try:
            status, body = client.forward(path, fields=fields, files=files)
        except BackendError as e:
            raise ReportFlowError(f"{failure_label}: {e}") from e
        if status < 200 or status >= 300:
            raise ReportFlowError(f"{failure_label} ({status}){_failure_detail(body)}")
        return interpret_response(body)

    def generate(self, data, filename, content_type, latitude, longitude):
        """Upload the photo, then ask the report backend for a generated report.

        Returns:
            tuple: (UploadResponse, ReportOutcome)
        """
        lat, lon = self._coordinates(latitude, longitude)
        upload = self.upload(data, filename, content_type)
        logger.info(
            f"Requesting report for {upload.object_name}",
            extra={'extra_fields': {'step': 'generate', 'object_name': upload.object_name,
                                   'latitude': lat, 'longitude': lon}},
        )

        fields = [
            ('latitude', str(lat)),
            ('longitude', str(lon)),
            ('image_url', upload.image_url),
        ]
        files = [('file', (filename, data, content_type or 'application/octet-stream'))]
        outcome = self._call(self.report_client, '/generate-report', fields, files,
                             "Report generation failed")
        return upload, outcome

    def _311_form(self, data, filename, content_type, latitude, longitude):
        lat, lon = self._coordinates(latitude, longitude)
        fields = [('lat', str(lat)), ('lon', str(lon))]
        files = [('image', (filename, data, content_type or 'application/octet-stream'))]
        return fields, files

    def draft(self, data, filename, content_type, latitude, longitude):
        """Ask the 311 backend for a draft complaint."""
        fields, files = self._311_form(data, filename, content_type, latitude, longitude)
        return self._call(self.submit_client, '/draft', fields, files, "Draft failed")

    def submit(self, data, filename, content_type, latitude, longitude, draft):
        """Submit a drafted complaint; the reply carries the service request id."""
        fields, files = self._311_form(data, filename, content_type, latitude, longitude)
        fields.append(('draft', json.dumps(draft.model_dump())))
        return self._call(self.submit_client, '/submit', fields, files, "Submit failed")
