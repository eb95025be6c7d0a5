"""Client for the external late chunking service.

The service splits a document into sentences and returns one
context-aware embedding per sentence::

    POST {base_url}/late-chunking
    {"markdown": "<document>"}

    200 OK
    {"chunks": [{"embedding": [0.1, ...], "sentence": "..."}, ...]}
"""

from __future__ import annotations

import logging
from typing import Protocol

import requests
from pydantic import ValidationError as PydanticValidationError

from memory_ingest.config import Settings, settings
from memory_ingest.errors import ConfigurationError, DecodeError, RemoteError, TransportError
from memory_ingest.ingestion.models import Chunk, LateChunkingResponse

logger = logging.getLogger(__name__)

ENDPOINT_PATH = "/late-chunking"


class Chunker(Protocol):
    """Anything that turns a document into an ordered list of chunks."""

    def chunk(self, document: str) -> list[Chunk]: ...


def _read_body(response: requests.Response) -> str:
    """Best-effort body text; a failed read must not hide the status error."""
    try:
        return response.text
    except (requests.RequestException, ValueError, LookupError):
        logger.debug("Could not read late chunking error body", exc_info=True)
        return ""


class LateChunkingClient:
    """HTTP client for the late chunking service.

    Parameters
    ----------
    base_url:
        Service base address, without the ``/late-chunking`` suffix.
    timeout:
        Per-request timeout in seconds; ``None`` waits indefinitely.
    session:
        Optional ``requests.Session`` to reuse (a new one is created
        otherwise).
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if not base_url or not base_url.strip():
            raise ConfigurationError(
                "Late chunking base URL is empty; set LATE_CHUNKING_URL to the service address"
            )
        self.base_url = base_url.strip().rstrip("/")
        self.timeout = timeout
        self._session = session if session is not None else requests.Session()

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> LateChunkingClient:
        """Build a client from configuration, failing before any network call."""
        config = config or settings
        if not config.late_chunking_url.strip():
            raise ConfigurationError(
                "LATE_CHUNKING_URL is not set; export it with the late chunking service base URL"
            )
        return cls(config.late_chunking_url, timeout=config.late_chunking_timeout)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{ENDPOINT_PATH}"

    def chunk(self, document: str) -> list[Chunk]:
        """Send *document* to the service and return its chunks in order.

        Raises
        ------
        TransportError
            The request never produced a response.
        RemoteError
            The service answered with a non-2xx status.
        DecodeError
            The body is not a valid chunking response.
        """
        try:
            response = self._session.post(
                self.endpoint,
                json={"markdown": document},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Failed to call late chunking endpoint {self.endpoint}") from exc

        if not 200 <= response.status_code < 300:
            raise RemoteError(response.status_code, _read_body(response))

        try:
            parsed = LateChunkingResponse.model_validate_json(response.content)
        except PydanticValidationError as exc:
            raise DecodeError("Failed to parse late chunking response") from exc

        logger.debug("Late chunking returned %d chunks for %d chars", len(parsed.chunks), len(document))
        return parsed.chunks

    def close(self) -> None:
        self._session.close()
