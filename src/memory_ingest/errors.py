"""Error taxonomy for the ingestion pipeline.

Every error raised by this package derives from :class:`IngestError`, so
callers (CLI, HTTP API) can map the whole family in one place.  The
message of each error names the stage that failed; the underlying cause
is chained with ``raise ... from exc``.
"""

from __future__ import annotations


class IngestError(Exception):
    """Base class for all ingestion failures."""


class ConfigurationError(IngestError):
    """A required configuration value is missing or blank."""


class AgentError(IngestError):
    """The transport/identity handle could not be built."""


class ValidationError(IngestError):
    """A caller-supplied store identifier is not a well-formed principal."""

    def __init__(self, message: str, *, value: str) -> None:
        super().__init__(f"{message}: {value!r}")
        self.value = value


class TransportError(IngestError):
    """Connection-level failure (DNS, TLS, refused, timeout) on an outbound call."""


class RemoteError(IngestError):
    """The late chunking service answered with a non-success status."""

    def __init__(self, status_code: int, body: str = "") -> None:
        detail = f": {body}" if body else ""
        super().__init__(f"Late chunking endpoint returned HTTP {status_code}{detail}")
        self.status_code = status_code
        self.body = body


class DecodeError(IngestError):
    """A response body did not match the expected structure."""


class InsertError(IngestError):
    """The memory store rejected or failed an individual insert.

    Attributes
    ----------
    inserted_count:
        Number of chunks stored before this failure (no rollback happens).
    chunk_index:
        Position of the failing chunk, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        inserted_count: int = 0,
        chunk_index: int | None = None,
    ) -> None:
        super().__init__(message)
        self.inserted_count = inserted_count
        self.chunk_index = chunk_index
