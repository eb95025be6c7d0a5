"""Domain models flowing through the ingestion pipeline."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Chunk(BaseModel):
    """One sentence-level unit returned by the late chunking service.

    Attributes
    ----------
    sentence:
        The sentence text exactly as the service returned it.
    embedding:
        Context-aware embedding for the sentence (float32 on the wire).
    """

    sentence: str
    embedding: list[float]


class LateChunkingResponse(BaseModel):
    """Body of a successful ``POST /late-chunking`` response."""

    chunks: list[Chunk]


class ChunkPayload(BaseModel):
    """Record persisted next to each embedding in the memory store.

    Instances are immutable once built.
    """

    model_config = ConfigDict(frozen=True)

    tag: str
    sentence: str


class IngestionResult(BaseModel):
    """Acknowledgement of a completed ingestion call."""

    store_id: str
    tag: str
    chunk_count: int = Field(ge=0)
    inserted_count: int = Field(ge=0)
