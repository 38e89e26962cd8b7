"""Error taxonomy for the upload client.

Every failure that aborts a session is one of these, so callers can
`except MaquetteError` once and still branch on the concrete kind.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from maquette.upload.types import Variant


class MaquetteError(Exception):
    """Base class for all upload client failures."""


class ConfigurationError(MaquetteError):
    """Raised when the client is constructed with an unusable base URL."""


class BodyConstructionError(MaquetteError):
    """Raised when the multipart request body cannot be assembled."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(f"Unable to create multipart form body: {message}")


class TransportError(MaquetteError):
    """Raised on network-level failure (DNS, refused connection, timeout).

    Carries the variant being requested and the underlying httpx error.
    """

    def __init__(self, variant: "Variant", cause: Exception):
        self.variant = variant
        self.cause = cause
        super().__init__(
            f"Request for variant '{variant.label}' failed: "
            f"{type(cause).__name__}: {cause}"
        )


class BadResponseError(MaquetteError):
    """Raised when the server answers a variant request with a non-200 status."""

    def __init__(self, variant: "Variant", status_code: int):
        self.variant = variant
        self.status_code = status_code
        super().__init__(
            f"Server responded with an unexpected status code "
            f"{status_code} for variant '{variant.label}'."
        )


class StorageError(MaquetteError):
    """Raised when an artifact cannot be written to or removed from storage."""

    def __init__(self, key: str, message: str, cause: Optional[Exception] = None):
        self.key = key
        self.cause = cause
        super().__init__(f"Storage failure for '{key}': {message}")


class SessionStateError(MaquetteError):
    """Raised when an upload session object is run more than once."""
