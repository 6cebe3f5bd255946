"""Pytest configuration and fixtures for Snap-to-Report tests."""
import pytest
import tempfile
import os
from unittest.mock import Mock
from datetime import datetime
from backend.app import create_app
from backend.models import db, Location


@pytest.fixture
def app(tmp_path, monkeypatch):
    """Create and configure a test app instance."""
    monkeypatch.setenv('LOG_DIR', str(tmp_path / 'logs'))

    # Create temporary database for testing
    db_fd, db_path = tempfile.mkstemp()

    test_config = {
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f'sqlite:///{db_path}',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'BACKEND_BASE_URL': 'http://report-backend.test',
        'BACKEND_API_KEY': 'test-api-key',
        'SUBMIT_BACKEND_URL': 'http://311-backend.test',
        'PROXY_TIMEOUT': 5.0,
    }

    app = create_app(test_config)

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.engine.dispose()

    # Cleanup
    os.close(db_fd)
    os.unlink(db_path)


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """A test runner for the app's Click commands."""
    return app.test_cli_runner()


@pytest.fixture
def sample_locations():
    """Unsaved Location rows covering categories, months and missing fields."""
    return [
        Location(id='loc-1', name='Pothole on Main St', category='Roads',
                 latitude=40.7128, longitude=-74.0060, address='1 Main St',
                 report='Deep pothole in the right lane',
                 timestamp=datetime(2024, 6, 3, 12, 0)),
        Location(id='loc-2', name='Broken streetlight', category='Lighting',
                 latitude=40.7306, longitude=-73.9352, address=None,
                 report='Light out for a week',
                 timestamp=datetime(2024, 5, 20, 8, 30)),
        Location(id='loc-3', name='Cracked sidewalk', category='Roads',
                 latitude=40.6782, longitude=-73.9442, address='9 Elm Ave',
                 report=None,
                 timestamp=datetime(2024, 6, 15, 17, 45)),
    ]


@pytest.fixture
def seeded(app, sample_locations):
    """Store the sample locations in the test database."""
    with app.app_context():
        db.session.add_all(sample_locations)
        db.session.commit()
    return sample_locations


@pytest.fixture
def unreachable_storage(monkeypatch):
    """Configured S3 storage whose bucket lookup fails with bad credentials."""
    from libcloud.common.types import InvalidCredsError
    from backend.services import cloud_storage

    monkeypatch.setenv('CLOUD_STORAGE_PROVIDER', 's3')
    monkeypatch.setenv('CLOUD_STORAGE_ACCESS_KEY', 'bad_key')
    monkeypatch.setenv('CLOUD_STORAGE_SECRET_KEY', 'bad_secret')
    monkeypatch.setenv('CLOUD_STORAGE_BUCKET', 'reports')
    monkeypatch.setattr(cloud_storage, '_cloud_storage', None)

    driver = Mock()
    driver.get_container.side_effect = InvalidCredsError('bad key')
    driver.create_container.side_effect = InvalidCredsError('bad key')
    monkeypatch.setattr(cloud_storage, 'get_driver', Mock(return_value=Mock(return_value=driver)))
    return driver


@pytest.fixture
def unparseable_timestamp(app, seeded):
    """A row whose timestamp text the writing service stored incorrectly."""
    from sqlalchemy import text
    with app.app_context():
        db.session.execute(text(
            "INSERT INTO items (id, name, category, latitude, longitude, timestamp) "
            "VALUES ('bad-ts', 'Bench', 'Parks', 40.7, -74.0, 'not a date')"
        ))
        db.session.commit()
