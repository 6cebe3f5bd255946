"""Tests for the photo-to-report flow."""
import json
import pytest
from unittest.mock import Mock
from backend.services.cloud_storage import StorageError
from backend.services.report_backend import BackendUnavailableError
from backend.services.report_flow import ReportFlow, ReportFlowError
from shared.schemas import DraftResponse

UPLOAD_RESULT = {
    'image_url': 'https://cdn.example.com/reports/abc.jpg',
    'object_name': 'reports/abc.jpg',
    'sha256': 'b' * 64,
    'size_bytes': 5,
    'content_type': 'image/jpeg',
}


@pytest.fixture
def storage():
    storage = Mock()
    storage.upload_file.return_value = UPLOAD_RESULT
    return storage


@pytest.fixture
def report_client():
    return Mock()


@pytest.fixture
def submit_client():
    return Mock()


@pytest.fixture
def flow(report_client, submit_client, storage):
    return ReportFlow(report_client, submit_client, storage_factory=lambda: storage)


def test_generate_uploads_then_requests_report(flow, storage, report_client):
    report = {'title': 'Pothole', 'category': 'Roads', 'location': 'Main St',
              'description': 'Deep hole', 'impact': 'Tyre damage'}
    report_client.forward.return_value = (200, {'report': json.dumps(report)})

    upload, outcome = flow.generate(b'bytes', 'photo.jpg', 'image/jpeg', '40.5', '-73.25')

    assert upload.image_url == UPLOAD_RESULT['image_url']
    storage.upload_file.assert_called_once()
    path = report_client.forward.call_args[0][0]
    kwargs = report_client.forward.call_args[1]
    assert path == '/generate-report'
    assert ('latitude', '40.5') in kwargs['fields']
    assert ('longitude', '-73.25') in kwargs['fields']
    assert ('image_url', UPLOAD_RESULT['image_url']) in kwargs['fields']
    assert kwargs['files'][0][0] == 'file'
    assert kwargs['files'][0][1][1] == b'bytes'

    assert outcome.kind == 'report'
    assert outcome.report.title == 'Pothole'
    assert outcome.report.impact == 'Tyre damage'


def test_generate_without_location(flow, storage, report_client):
    with pytest.raises(ReportFlowError, match="Location unavailable: Latitude is required"):
        flow.generate(b'bytes', 'photo.jpg', 'image/jpeg', '', '')

    storage.upload_file.assert_not_called()
    report_client.forward.assert_not_called()


def test_generate_upload_failure(flow, storage, report_client):
    storage.upload_file.side_effect = StorageError('Upload failed: bucket unavailable')

    with pytest.raises(ReportFlowError, match="Upload failed"):
        flow.generate(b'bytes', 'photo.jpg', 'image/jpeg', '1', '2')

    report_client.forward.assert_not_called()


def test_generate_non_ok_status(flow, report_client):
    report_client.forward.return_value = (500, {'error': 'model overloaded'})

    with pytest.raises(ReportFlowError) as excinfo:
        flow.generate(b'bytes', 'photo.jpg', 'image/jpeg', '1', '2')

    assert str(excinfo.value) == "Report generation failed (500): model overloaded"


def test_generate_backend_unreachable(flow, report_client):
    report_client.forward.side_effect = BackendUnavailableError('Backend unreachable: timeout')

    with pytest.raises(ReportFlowError, match="Report generation failed: Backend unreachable"):
        flow.generate(b'bytes', 'photo.jpg', 'image/jpeg', '1', '2')


def test_generate_acknowledgement(flow, report_client):
    report_client.forward.return_value = (200, {'acknowledgement': 'Thanks, we received your report.'})

    _, outcome = flow.generate(b'bytes', 'photo.jpg', None, '1', '2')

    assert outcome.kind == 'acknowledgement'
    assert outcome.message == 'Thanks, we received your report.'


def test_draft_and_submit(flow, submit_client, storage):
    submit_client.forward.side_effect = [
        (200, {'label': 'pothole', 'complaint_type': 'Street Condition', 'address': '1 Main St',
               'duplications_today': 2, 'confidence': 0.8}),
        (200, {'service_request_id': 311555}),
    ]

    drafted = flow.draft(b'bytes', 'photo.jpg', 'image/jpeg', '1', '2')
    assert drafted.kind == 'draft'
    assert drafted.draft.complaint_type == 'Street Condition'
    assert drafted.warnings == ['Heads-up: another report in this spot today.']

    submitted = flow.submit(b'bytes', 'photo.jpg', 'image/jpeg', '1', '2', drafted.draft)
    assert submitted.kind == 'service_request'
    assert submitted.message == 'Success! 311 SR #: 311555'

    first_path = submit_client.forward.call_args_list[0][0][0]
    second_path = submit_client.forward.call_args_list[1][0][0]
    assert (first_path, second_path) == ('/draft', '/submit')

    submit_fields = dict(submit_client.forward.call_args_list[1][1]['fields'])
    assert submit_fields['lat'] == '1.0'
    assert json.loads(submit_fields['draft'])['complaint_type'] == 'Street Condition'
    storage.upload_file.assert_not_called()


def test_submit_failure(flow, submit_client):
    submit_client.forward.return_value = (400, {'detail': 'draft missing'})

    with pytest.raises(ReportFlowError, match=r"Submit failed \(400\): draft missing"):
        flow.submit(b'bytes', 'photo.jpg', 'image/jpeg', '1', '2', DraftResponse(complaint_type='Noise'))
