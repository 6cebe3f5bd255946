"""Pydantic schemas for validation and serialization."""
from datetime import datetime
from typing import Optional, List, Dict, Any, Tuple, Union
from pydantic import BaseModel, Field, field_validator, ConfigDict
from shared.enums import OutcomeKind
from shared.utils import parse_timestamp


# Location Schemas
class LocationRecord(BaseModel):
    id: str
    name: str = ""
    category: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    report: Optional[str] = None
    timestamp: Optional[Union[datetime, str]] = None
    image_url: Optional[str] = None
    annotated_image_url: Optional[str] = None
    mainid: Optional[int] = None

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v):
        return str(v) if v is not None else v

    @field_validator('timestamp', mode='before')
    @classmethod
    def parse_stored_timestamp(cls, v):
        # Unparseable text is passed through as stored
        parsed = parse_timestamp(v)
        return parsed if parsed is not None else v

    model_config = ConfigDict(from_attributes=True)


# Report backend replies
class GeneratedReport(BaseModel):
    title: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    impact: Optional[str] = None

    @field_validator('title', 'category', 'location', 'description', 'impact', mode='before')
    @classmethod
    def stringify(cls, v):
        if v is None or isinstance(v, str):
            return v
        return str(v)

    def is_empty(self):
        return not any(self.model_dump().values())


class DraftResponse(BaseModel):
    label: str = ""
    complaint_type: str = ""
    address: str = ""
    duplications_today: int = 0
    confidence: float = 0.0

    @property
    def has_duplicates(self):
        return self.duplications_today > 0


class ReportOutcome(BaseModel):
    kind: OutcomeKind
    message: str
    report: Optional[GeneratedReport] = None
    acknowledgement: Optional[str] = None
    draft: Optional[DraftResponse] = None
    service_request_id: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)
    raw: Optional[Any] = None

    @field_validator('service_request_id', mode='before')
    @classmethod
    def coerce_request_id(cls, v):
        return str(v) if v is not None else v

    model_config = ConfigDict(use_enum_values=True)


# Storage
class UploadResponse(BaseModel):
    image_url: str
    object_name: str
    sha256: str = Field(..., min_length=64, max_length=64)
    size_bytes: int = Field(..., ge=0)
    content_type: Optional[str] = None


# Dashboard statistics
class CategoryCount(BaseModel):
    category: str
    count: int


class MonthCount(BaseModel):
    month: str
    count: int


class DashboardStats(BaseModel):
    total_locations: int = 0
    unique_categories: int = 0
    avg_latitude: str = "0.0000"
    avg_longitude: str = "0.0000"
    categories: List[CategoryCount] = Field(default_factory=list)
    months: List[MonthCount] = Field(default_factory=list)
    missing_address: int = 0
    missing_report: int = 0
    center: Tuple[float, float] = (0.0, 0.0)
    zoom: int = 2

    def category_counts(self) -> Dict[str, int]:
        return {c.category: c.count for c in self.categories}

    def month_counts(self) -> Dict[str, int]:
        return {m.month: m.count for m in self.months}
