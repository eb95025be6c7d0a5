"""Ingestion orchestrator — chunk, embed, tag, insert.

Usage::

    from memory_ingest.ingestion.orchestrator import ingest

    result = ingest("ryjl3-tyaaa-aaaaa-aaaba-cai", "note", "Hello world. Goodbye world.")
    print(result.chunk_count, result.inserted_count)

One call runs strictly in sequence: build the agent, parse the canister
id, bind the store, chunk the whole document, then insert every chunk in
the order the chunking service returned them.  The first failing insert
stops the run; chunks already stored stay stored.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from memory_ingest.config import Settings
from memory_ingest.errors import InsertError, ValidationError
from memory_ingest.ingestion.chunking import Chunker, LateChunkingClient
from memory_ingest.ingestion.models import IngestionResult
from memory_ingest.ingestion.payload import format_chunk_payload
from memory_ingest.memory.base import AgentFactory, MemoryStoreBase
from memory_ingest.memory.principal import Principal

logger = logging.getLogger(__name__)

StoreFactory = Callable[[Any, Principal], MemoryStoreBase]


class MemoryIngestor:
    """Runs text-to-memory ingestion against injectable collaborators.

    Parameters
    ----------
    agent_factory:
        Produces the transport/identity handle for each call.
    chunker:
        Splits and embeds documents (normally a :class:`LateChunkingClient`).
    store_factory:
        Binds a memory store client to ``(agent, canister_id)``.  When
        *None*, :class:`~memory_ingest.memory.canister.CanisterMemoryStore`
        is used.
    """

    def __init__(
        self,
        agent_factory: AgentFactory,
        chunker: Chunker,
        *,
        store_factory: StoreFactory | None = None,
    ) -> None:
        if store_factory is None:
            from memory_ingest.memory.canister import CanisterMemoryStore

            store_factory = CanisterMemoryStore
        self._agent_factory = agent_factory
        self._chunker = chunker
        self._store_factory = store_factory

    def ingest(self, store_id: str, tag: str, document: str) -> IngestionResult:
        """Chunk *document* and insert every chunk, tagged with *tag*, into *store_id*.

        Raises
        ------
        AgentError
            The agent could not be built (propagated unchanged).
        ValidationError
            *store_id* is not a well-formed principal.
        ConfigurationError, TransportError, RemoteError, DecodeError
            Chunking failed; nothing was inserted.
        InsertError
            An insert failed; ``inserted_count`` tells how many chunks
            were stored before it.
        """
        store = self._bind_store(store_id)
        chunks = self._chunker.chunk(document)

        logger.info(
            "Prepared %d chunk embeddings for canister %s (tag=%r)",
            len(chunks),
            store.canister_id,
            tag,
            extra={"canister_id": str(store.canister_id), "chunk_count": len(chunks), "tag": tag},
        )

        # TODO: add a chunk_index field to the payload once the memory canister schema has one.
        for index, chunk in enumerate(chunks):
            payload = format_chunk_payload(tag, chunk.sentence)
            try:
                store.insert(chunk.embedding, payload)
            except InsertError as exc:
                raise InsertError(
                    f"Failed to insert chunk {index + 1}/{len(chunks)} into canister "
                    f"{store.canister_id}: {exc}",
                    inserted_count=index,
                    chunk_index=index,
                ) from exc

        return IngestionResult(
            store_id=str(store.canister_id),
            tag=tag,
            chunk_count=len(chunks),
            inserted_count=len(chunks),
        )

    def _bind_store(self, store_id: str) -> MemoryStoreBase:
        agent = self._agent_factory.build()
        try:
            canister_id = Principal.from_text(store_id)
        except ValidationError as exc:
            raise ValidationError(
                "Failed to parse canister id for insert command", value=store_id
            ) from exc
        return self._store_factory(agent, canister_id)


def ingest(
    store_id: str,
    tag: str,
    document: str,
    *,
    config: Settings | None = None,
) -> IngestionResult:
    """Ingest *document* using collaborators built from configuration.

    Configuration is checked before any network call: a missing
    ``LATE_CHUNKING_URL`` raises
    :class:`~memory_ingest.errors.ConfigurationError` straight away.
    """
    chunker = LateChunkingClient.from_settings(config)

    from memory_ingest.memory.agent import IcAgentFactory

    try:
        return MemoryIngestor(IcAgentFactory.from_settings(config), chunker).ingest(
            store_id, tag, document
        )
    finally:
        chunker.close()
