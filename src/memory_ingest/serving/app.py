"""FastAPI application exposing memory ingestion as a REST API."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from memory_ingest.errors import ConfigurationError, IngestError, InsertError, ValidationError
from memory_ingest.ingestion.models import IngestionResult
from memory_ingest.ingestion.orchestrator import ingest

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Memory Ingest API",
    version="0.1.0",
    description="REST interface to late-chunking ingestion into memory canisters.",
)


# ── Request / Response schemas ────────────────────────────────────────
class InsertRequest(BaseModel):
    """Text to chunk and store."""

    memory_id: str
    text: str
    tag: str


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/health")
def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@app.post("/insert", response_model=IngestionResult)
def insert(request: InsertRequest) -> IngestionResult:
    """Chunk the text and insert every chunk into the memory canister."""
    try:
        return ingest(request.memory_id, request.tag, request.text)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ConfigurationError as exc:
        logger.error("Ingestion is misconfigured: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except InsertError as exc:
        logger.warning("Insert aborted after %d chunks: %s", exc.inserted_count, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except IngestError as exc:
        logger.warning("Ingestion failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
