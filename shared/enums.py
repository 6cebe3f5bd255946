import enum


class OutcomeKind(str, enum.Enum):
    """Kinds of reply the external report backends produce.

    Used by the report parser to classify a backend JSON body.
    """
    ACKNOWLEDGEMENT = "acknowledgement"
    DRAFT = "draft"
    EMPTY = "empty"
    REPORT = "report"
    SERVICE_REQUEST = "service_request"


class StorageProvider(str, enum.Enum):
    """Object storage providers supported through Apache Libcloud."""
    AZURE = "azure"
    GCS = "gcs"
    LOCAL = "local"
    MINIO = "minio"
    S3 = "s3"


class DashboardTab(str, enum.Enum):
    """Side panel tabs on the dashboard page."""
    CATEGORIES = "categories"
    OVERVIEW = "overview"
    TIMELINE = "timeline"
