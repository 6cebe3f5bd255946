import os
import uuid
from datetime import datetime
from zoneinfo import ZoneInfo
from sqlalchemy import Column, Integer, String, Float, Text, CheckConstraint
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

Base = declarative_base()

# Application timezone used for month labels and log timestamps.
# Uses zoneinfo for proper DST handling
APP_TIMEZONE = ZoneInfo(os.getenv('APP_TIMEZONE', 'UTC'))


def now():
    """Return current datetime in application timezone (timezone-aware)."""
    return datetime.now(APP_TIMEZONE)


def new_location_id():
    return str(uuid.uuid4())


class TimestampText(TypeDecorator):
    """Timestamp kept as the text the writing service stored.

    Rows come from an external service, so values are returned unparsed and
    read with ``shared.utils.parse_timestamp``. Datetimes are written as ISO 8601.
    """
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if isinstance(value, datetime):
            return value.isoformat()
        return value


class Location(Base):
    """A submitted report pinned to a location.

    Rows are written by the external report-generation backend; this
    application only reads them (``init-db`` creates the table for local
    development).
    """
    __tablename__ = 'items'
    id = Column(String(36), primary_key=True, default=new_location_id)
    name = Column(String(200), nullable=False, server_default="")
    category = Column(String(100))
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(Text)
    report = Column(Text)
    timestamp = Column(TimestampText)
    image_url = Column(Text)
    annotated_image_url = Column(Text)
    mainid = Column(Integer)

    __table_args__ = (
        CheckConstraint('latitude >= -90.0 AND latitude <= 90.0', name='chk_item_latitude_range'),
        CheckConstraint('longitude >= -180.0 AND longitude <= 180.0', name='chk_item_longitude_range'),
    )

    def __repr__(self):
        return f"<Location {self.id} {self.name!r} ({self.latitude}, {self.longitude})>"
