"""Error taxonomy for template resolution and retrieval.

Every failure surfaced by the fetch pipeline derives from
:class:`TemplateFetchError` so callers can catch one type and render it.
"""

from __future__ import annotations


class TemplateFetchError(Exception):
    """Base class for all template retrieval errors."""


class InvalidReference(TemplateFetchError):
    """Raised when a reference lacks an owner and a repository segment."""

    def __init__(self, reference: str, reason: str = "expected 'owner/repo'") -> None:
        self.reference = reference
        super().__init__(f"Invalid template reference '{reference}': {reason}")


class HttpStatus(TemplateFetchError):
    """Raised for any non-success HTTP status that is not a handled redirect."""

    def __init__(self, status_code: int, url: str, message: str | None = None) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message or f"HTTP {status_code} from {url}")


class NotFound(HttpStatus):
    """Raised when a single file does not exist at the requested ref."""

    def __init__(self, url: str) -> None:
        super().__init__(404, url, f"File not found: {url}")


class MissingRedirectLocation(TemplateFetchError):
    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"Redirect without Location header: HTTP {status_code} from {url}")


class TooManyRedirects(TemplateFetchError):
    def __init__(self, url: str, limit: int) -> None:
        self.url = url
        self.limit = limit
        super().__init__(f"Too many redirects (more than {limit}) starting at {url}")


class NetworkError(TemplateFetchError):
    """Raised when the transport fails while connecting or streaming."""

    def __init__(self, url: str, cause: Exception) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"Network error fetching {url}: {cause}")


class ExtractionFailure(TemplateFetchError):
    """Raised for gzip, tar-format or unsafe-entry errors during extraction."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Archive extraction failed: {reason}")


class DestinationError(TemplateFetchError):
    """Raised when the destination cannot be created or written."""

    def __init__(self, path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot write to {path}: {cause.strerror or cause}")


class PrimaryMechanismFailure(TemplateFetchError):
    """Wraps whatever the primary clone collaborator raised."""

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(str(cause) or type(cause).__name__)


class FallbackExhausted(TemplateFetchError):
    """Both the primary clone and the archive fallback failed."""

    def __init__(self, primary: BaseException, fallback: BaseException) -> None:
        self.primary = primary
        self.fallback = fallback
        super().__init__(f"{primary} (fallback also failed: {fallback})")
