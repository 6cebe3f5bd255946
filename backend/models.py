from flask_sqlalchemy import SQLAlchemy
import logging
from shared.models import Base, Location

logger = logging.getLogger(__name__)
db = SQLAlchemy(model_class=Base)

__all__ = ['db', 'Location', 'load_locations']


def load_locations():
    """Fetch every row of the locations table into memory."""
    locations = db.session.execute(db.select(Location)).scalars().all()
    logger.debug(f"Loaded {len(locations)} locations")
    return locations
