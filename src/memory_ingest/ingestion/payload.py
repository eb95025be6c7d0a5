"""Record payload formatting."""

from __future__ import annotations

from memory_ingest.ingestion.models import ChunkPayload


def format_chunk_payload(tag: str, sentence: str) -> str:
    """Serialize *tag* and *sentence* into the stored record format.

    The result is compact JSON with exactly the keys ``tag`` and
    ``sentence``; non-ASCII text is kept verbatim.

    >>> format_chunk_payload("note", "Hello world.")
    '{"tag":"note","sentence":"Hello world."}'
    """
    return ChunkPayload(tag=tag, sentence=sentence).model_dump_json()
