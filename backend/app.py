"""Flask application factory for the Snap-to-Report backend."""
from flask import Flask, request
import logging
from pathlib import Path
from werkzeug.exceptions import RequestEntityTooLarge
from .models import db
from .settings import Settings
from .blueprints import pages, proxy, uploads, locations
from .cli import init_db_command, report_command, file_311_command, dashboard_stats_command
from .logging_config import setup_logging
from .utils import api_error

logger = logging.getLogger(__name__)


def create_app(test_config=None):
    """Flask application factory for the Snap-to-Report backend.

    Creates and configures a Flask application instance with:
    - Settings from the environment
    - SQLAlchemy database integration
    - Blueprint registration for pages and API endpoints
    - CLI command registration
    - Logging configuration

    Args:
        test_config (dict, optional): Configuration overrides for testing

    Returns:
        Flask: Configured Flask application instance
    """
    setup_logging()
    logger.info("Starting Flask application initialization")

    app = Flask(__name__, instance_relative_config=True)
    logger.debug(f"Flask app created with instance path: {app.instance_path}")

    app.config.from_mapping(Settings().to_flask_config())
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    if test_config is None:
        # Load the instance config, if it exists, when not testing
        config_loaded = app.config.from_pyfile('config.py', silent=True)
        if config_loaded:
            logger.info("Loaded configuration from instance/config.py")
        else:
            logger.debug("No instance config file found, using environment settings")
    else:
        app.config.from_mapping(test_config)
        logger.info("Loaded test configuration")

    try:
        Path(app.instance_path).mkdir(parents=True, exist_ok=True)
    except OSError:
        logger.debug(f"Instance directory not created: {app.instance_path}")

    if not app.config.get('BACKEND_BASE_URL'):
        logger.warning("BACKEND_BASE_URL is not set; report generation will fail")

    logger.info(f"Using database URI: {app.config['SQLALCHEMY_DATABASE_URI']}")
    db.init_app(app)

    logger.info("Registering blueprints")
    app.register_blueprint(pages.bp)
    app.register_blueprint(proxy.bp)
    app.register_blueprint(uploads.bp)
    app.register_blueprint(locations.bp)

    @app.errorhandler(RequestEntityTooLarge)
    def upload_too_large(e):
        if request.path.startswith('/api/'):
            return api_error('Upload too large', 413)
        return e

    app.cli.add_command(init_db_command)
    app.cli.add_command(report_command)
    app.cli.add_command(file_311_command)
    app.cli.add_command(dashboard_stats_command)
    logger.info("CLI commands registered: init-db, report, file-311, dashboard-stats")

    logger.info("Flask application initialization completed successfully")
    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True)
