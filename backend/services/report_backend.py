"""HTTP client for the external report and 311 backends."""
import logging
import requests


logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Base class for failures talking to an external backend."""
    pass


class BackendNotConfiguredError(BackendError):
    """Raised when the backend base URL is not set."""
    pass


class BackendUnavailableError(BackendError):
    """Raised when the backend cannot be reached."""
    pass


class BackendResponseError(BackendError):
    """Raised when the backend reply is not JSON."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class ReportBackendClient:
    """Forwards multipart forms to an external backend and returns its reply.

    One request per call; failures are reported, never retried.
    """

    def __init__(self, base_url, api_key=None, timeout=30.0):
        self.base_url = (base_url or '').rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.logger = logging.getLogger(self.__class__.__name__)

    @classmethod
    def from_config(cls, config, base_url_key='BACKEND_BASE_URL', with_api_key=True):
        """Build a client from a Flask config mapping."""
        return cls(
            config.get(base_url_key),
            api_key=config.get('BACKEND_API_KEY') if with_api_key else None,
            timeout=config.get('PROXY_TIMEOUT', 30.0),
        )

    def _headers(self):
        headers = {}
        if self.api_key is not None:
            headers['X-API-Key'] = self.api_key
            headers['accept'] = 'application/json'
        return headers

    def forward(self, path, fields=None, files=None):
        """POST a multipart form to ``<base_url><path>``.

        Args:
            path: Endpoint path, e.g. '/generate-report'
            fields: List of (name, value) pairs
            files: List of (name, (filename, stream, content_type)) pairs

        Returns:
            tuple: (status_code, decoded JSON body)

        Raises:
            BackendNotConfiguredError: If no base URL is configured
            BackendUnavailableError: If the request fails before a reply arrives
            BackendResponseError: If the reply body is not JSON
        """
        if not self.base_url:
            raise BackendNotConfiguredError("Backend URL is not configured")

        url = f"{self.base_url}{path}"
        data = list(fields or [])
        files = list(files or [])
        self.logger.info(
            f"Forwarding form to {url}",
            extra={'extra_fields': {'upstream_url': url, 'fields': len(data), 'files': len(files)}},
        )

        if not files:
            # requests only builds a multipart body when files are present
            files = [(name, (None, value)) for name, value in data]
            data = []

        try:
            response = requests.post(
                url,
                data=data,
                files=files or None,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Request to {url} failed: {e}")
            raise BackendUnavailableError(f"Backend unreachable: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            self.logger.error(f"Non-JSON reply from {url} (status {response.status_code})")
            raise BackendResponseError("Backend returned an invalid response", response.status_code) from e

        reply_fields = {'extra_fields': {'upstream_url': url, 'upstream_status': response.status_code}}
        if response.status_code >= 400:
            self.logger.warning(f"Backend {url} replied {response.status_code}", extra=reply_fields)
        else:
            self.logger.debug(f"Backend {url} replied {response.status_code}", extra=reply_fields)
        return response.status_code, body
