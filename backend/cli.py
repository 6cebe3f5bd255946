import click
import json
import logging
import mimetypes
import os
from flask import current_app
from flask.cli import with_appcontext
from shared.aggregation import compute_dashboard_stats
from shared.enums import OutcomeKind
from .models import db, load_locations
from .services.report_flow import ReportFlow, ReportFlowError

logger = logging.getLogger(__name__)


def _read_photo(photo):
    with open(photo, 'rb') as f:
        data = f.read()
    content_type = mimetypes.guess_type(photo)[0] or 'application/octet-stream'
    return data, os.path.basename(photo), content_type


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create the locations table for local development."""
    logger.info("Creating database tables")
    db.create_all()
    logger.info("Database tables created successfully")
    click.echo('Initialized the database.')


@click.command('report')
@click.argument('photo', type=click.Path(exists=True, dir_okay=False))
@click.option('--lat', 'latitude', required=True, help='Latitude where the photo was taken')
@click.option('--lon', 'longitude', required=True, help='Longitude where the photo was taken')
@with_appcontext
def report_command(photo, latitude, longitude):
    """Upload PHOTO and print the generated report."""
    data, filename, content_type = _read_photo(photo)
    flow = ReportFlow.from_config(current_app.config)
    try:
        upload, outcome = flow.generate(data, filename, content_type, latitude, longitude)
    except ReportFlowError as e:
        raise click.ClickException(str(e))

    click.echo(f"Uploaded: {upload.image_url}")
    if outcome.kind == OutcomeKind.REPORT.value:
        click.echo(json.dumps(outcome.report.model_dump(), indent=2))
    else:
        click.echo(outcome.message)


@click.command('file-311')
@click.argument('photo', type=click.Path(exists=True, dir_okay=False))
@click.option('--lat', 'latitude', required=True, help='Latitude where the photo was taken')
@click.option('--lon', 'longitude', required=True, help='Longitude where the photo was taken')
@click.option('--yes', is_flag=True, help='Submit the draft without asking')
@with_appcontext
def file_311_command(photo, latitude, longitude, yes):
    """Draft a 311 complaint for PHOTO, then submit it."""
    data, filename, content_type = _read_photo(photo)
    flow = ReportFlow.from_config(current_app.config)
    try:
        drafted = flow.draft(data, filename, content_type, latitude, longitude)
    except ReportFlowError as e:
        raise click.ClickException(str(e))

    if drafted.kind != OutcomeKind.DRAFT.value:
        raise click.ClickException(f"Draft failed: {drafted.message}")

    click.echo(f"{drafted.draft.complaint_type}: {drafted.draft.address}")
    for warning in drafted.warnings:
        click.echo(warning)

    if not yes and not click.confirm('Submit to 311?', default=True):
        click.echo('Not submitted.')
        return

    try:
        submitted = flow.submit(data, filename, content_type, latitude, longitude, drafted.draft)
    except ReportFlowError as e:
        raise click.ClickException(str(e))
    click.echo(submitted.message)


@click.command('dashboard-stats')
@with_appcontext
def dashboard_stats_command():
    """Print the dashboard statistics as JSON."""
    stats = compute_dashboard_stats(load_locations())
    click.echo(json.dumps(stats.model_dump(mode='json'), indent=2))
