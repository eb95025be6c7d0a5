"""Unit tests for the ingestion orchestrator."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import requests

from memory_ingest.config import Settings
from memory_ingest.errors import (
    AgentError,
    ConfigurationError,
    InsertError,
    RemoteError,
    TransportError,
    ValidationError,
)
from memory_ingest.ingestion.chunking import LateChunkingClient
from memory_ingest.ingestion.models import Chunk, IngestionResult
from memory_ingest.ingestion.orchestrator import MemoryIngestor, ingest
from memory_ingest.memory.base import AgentFactory, MemoryStoreBase
from memory_ingest.memory.principal import Principal

STORE_ID = "ryjl3-tyaaa-aaaaa-aaaba-cai"


# ── Fakes for deterministic testing ─────────────────────────────────────


class FakeAgentFactory(AgentFactory):
    def __init__(self, events: list[tuple], error: Exception | None = None) -> None:
        self.events = events
        self.error = error
        self.agent = object()

    def build(self) -> Any:
        self.events.append(("build",))
        if self.error is not None:
            raise self.error
        return self.agent


class FakeChunker:
    def __init__(self, events: list[tuple], chunks: list[Chunk], error: Exception | None = None) -> None:
        self.events = events
        self.chunks = chunks
        self.error = error

    def chunk(self, document: str) -> list[Chunk]:
        self.events.append(("chunk", document))
        if self.error is not None:
            raise self.error
        return self.chunks


class FakeMemoryStore(MemoryStoreBase):
    """Records inserts; fails on the insert numbered *fail_on* (0-based)."""

    def __init__(
        self,
        agent: Any,
        canister_id: Principal,
        events: list[tuple],
        fail_on: int | None = None,
    ) -> None:
        super().__init__(canister_id)
        self.agent = agent
        self.events = events
        self.fail_on = fail_on
        self.calls = 0

    def insert(self, embedding: Sequence[float], payload: str) -> None:
        index = self.calls
        self.calls += 1
        self.events.append(("insert", list(embedding), payload))
        if index == self.fail_on:
            raise InsertError("canister rejected the call")


def _chunks(n: int) -> list[Chunk]:
    return [Chunk(sentence=f"Sentence {i}.", embedding=[float(i), float(i) + 0.5]) for i in range(n)]


@pytest.fixture()
def events() -> list[tuple]:
    return []


def _ingestor(
    events: list[tuple],
    chunks: list[Chunk],
    *,
    fail_on: int | None = None,
    agent_error: Exception | None = None,
    chunk_error: Exception | None = None,
) -> tuple[MemoryIngestor, list[FakeMemoryStore]]:
    stores: list[FakeMemoryStore] = []

    def store_factory(agent: Any, canister_id: Principal) -> FakeMemoryStore:
        events.append(("bind", str(canister_id)))
        store = FakeMemoryStore(agent, canister_id, events, fail_on=fail_on)
        stores.append(store)
        return store

    ingestor = MemoryIngestor(
        FakeAgentFactory(events, agent_error),
        FakeChunker(events, chunks, chunk_error),
        store_factory=store_factory,
    )
    return ingestor, stores


# ── Happy paths ─────────────────────────────────────────────────────────


class TestIngestSuccess:
    def test_hello_goodbye_scenario(self, events: list[tuple]) -> None:
        chunks = [
            Chunk(sentence="Hello world.", embedding=[0.1, 0.2]),
            Chunk(sentence="Goodbye world.", embedding=[0.3, 0.4]),
        ]
        ingestor, _ = _ingestor(events, chunks)

        result = ingestor.ingest(STORE_ID, "note", "Hello world. Goodbye world.")

        inserts = [e for e in events if e[0] == "insert"]
        assert inserts == [
            ("insert", [0.1, 0.2], '{"tag":"note","sentence":"Hello world."}'),
            ("insert", [0.3, 0.4], '{"tag":"note","sentence":"Goodbye world."}'),
        ]
        assert result == IngestionResult(store_id=STORE_ID, tag="note", chunk_count=2, inserted_count=2)

    def test_stage_order(self, events: list[tuple]) -> None:
        ingestor, _ = _ingestor(events, _chunks(2))
        ingestor.ingest(STORE_ID, "t", "doc")

        assert [e[0] for e in events] == ["build", "bind", "chunk", "insert", "insert"]
        assert events[1] == ("bind", STORE_ID)
        assert events[2] == ("chunk", "doc")

    @pytest.mark.parametrize("n", [1, 3, 10])
    def test_one_chunk_call_and_n_inserts_in_order(self, events: list[tuple], n: int) -> None:
        chunks = _chunks(n)
        ingestor, _ = _ingestor(events, chunks)
        ingestor.ingest(STORE_ID, "tag", "doc")

        assert sum(1 for e in events if e[0] == "chunk") == 1
        inserts = [e for e in events if e[0] == "insert"]
        assert [e[1] for e in inserts] == [c.embedding for c in chunks]
        assert [json.loads(e[2])["sentence"] for e in inserts] == [c.sentence for c in chunks]

    def test_every_chunk_carries_the_same_tag(self, events: list[tuple]) -> None:
        ingestor, _ = _ingestor(events, _chunks(4))
        ingestor.ingest(STORE_ID, "journal", "doc")

        tags = {json.loads(e[2])["tag"] for e in events if e[0] == "insert"}
        assert tags == {"journal"}

    def test_zero_chunks_succeeds_without_inserts(self, events: list[tuple]) -> None:
        ingestor, _ = _ingestor(events, [])
        result = ingestor.ingest(STORE_ID, "note", "")

        assert not [e for e in events if e[0] == "insert"]
        assert result.chunk_count == 0
        assert result.inserted_count == 0

    def test_store_bound_to_agent_and_canister(self, events: list[tuple]) -> None:
        ingestor, stores = _ingestor(events, _chunks(1))
        ingestor.ingest(STORE_ID, "t", "doc")

        assert len(stores) == 1
        assert stores[0].canister_id == Principal.from_text(STORE_ID)
        assert stores[0].agent is ingestor._agent_factory.agent  # type: ignore[attr-defined]

    def test_each_call_binds_a_fresh_store(self, events: list[tuple]) -> None:
        ingestor, stores = _ingestor(events, _chunks(1))
        ingestor.ingest(STORE_ID, "t", "a")
        ingestor.ingest(STORE_ID, "t", "b")
        assert len(stores) == 2
        assert stores[0] is not stores[1]

    def test_logs_prepared_event(self, events: list[tuple], caplog: pytest.LogCaptureFixture) -> None:
        ingestor, _ = _ingestor(events, _chunks(3))
        with caplog.at_level(logging.INFO, logger="memory_ingest.ingestion.orchestrator"):
            ingestor.ingest(STORE_ID, "note", "doc")

        record = next(r for r in caplog.records if "Prepared" in r.getMessage())
        assert record.canister_id == STORE_ID  # type: ignore[attr-defined]
        assert record.chunk_count == 3  # type: ignore[attr-defined]
        assert record.tag == "note"  # type: ignore[attr-defined]


# ── Failure paths ───────────────────────────────────────────────────────


class TestIngestFailures:
    def test_invalid_store_id_fails_before_http(self) -> None:
        session = MagicMock(spec=requests.Session)
        chunker = LateChunkingClient("http://chunker.local", session=session)
        store_factory = MagicMock()
        ingestor = MemoryIngestor(FakeAgentFactory([]), chunker, store_factory=store_factory)

        with pytest.raises(ValidationError, match="Failed to parse canister id for insert command") as exc_info:
            ingestor.ingest("not-a-principal", "note", "Hello world.")

        assert "not-a-principal" in str(exc_info.value)
        session.post.assert_not_called()
        store_factory.assert_not_called()

    def test_agent_error_propagates_unchanged(self, events: list[tuple]) -> None:
        error = AgentError("no identity")
        ingestor, stores = _ingestor(events, _chunks(2), agent_error=error)

        with pytest.raises(AgentError) as exc_info:
            ingestor.ingest(STORE_ID, "t", "doc")

        assert exc_info.value is error
        assert stores == []
        assert [e[0] for e in events] == ["build"]

    @pytest.mark.parametrize(
        "error",
        [RemoteError(500, "boom"), TransportError("Failed to call late chunking endpoint")],
    )
    def test_chunking_failure_means_zero_inserts(self, events: list[tuple], error: Exception) -> None:
        ingestor, _ = _ingestor(events, _chunks(2), chunk_error=error)

        with pytest.raises(type(error)) as exc_info:
            ingestor.ingest(STORE_ID, "t", "doc")

        assert exc_info.value is error
        assert not [e for e in events if e[0] == "insert"]

    def test_http_error_status_never_reaches_store(self) -> None:
        resp = MagicMock(spec=requests.Response)
        resp.status_code = 503
        resp.text = "unavailable"
        session = MagicMock(spec=requests.Session)
        session.post.return_value = resp
        store_factory = MagicMock()
        ingestor = MemoryIngestor(
            FakeAgentFactory([]),
            LateChunkingClient("http://chunker.local", session=session),
            store_factory=store_factory,
        )

        with pytest.raises(RemoteError):
            ingestor.ingest(STORE_ID, "t", "doc")

        store_factory.return_value.insert.assert_not_called()

    @pytest.mark.parametrize(("n", "fail_on"), [(5, 0), (5, 2), (5, 4), (1, 0)])
    def test_first_insert_failure_aborts_the_rest(
        self, events: list[tuple], n: int, fail_on: int
    ) -> None:
        chunks = _chunks(n)
        ingestor, stores = _ingestor(events, chunks, fail_on=fail_on)

        with pytest.raises(InsertError) as exc_info:
            ingestor.ingest(STORE_ID, "t", "doc")

        # Calls before the failing one completed, none after it was attempted.
        assert stores[0].calls == fail_on + 1
        inserts = [e for e in events if e[0] == "insert"]
        assert [e[1] for e in inserts] == [c.embedding for c in chunks[: fail_on + 1]]
        assert exc_info.value.inserted_count == fail_on
        assert exc_info.value.chunk_index == fail_on
        assert f"chunk {fail_on + 1}/{n}" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, InsertError)


# ── Settings-driven entry point ─────────────────────────────────────────


class TestIngestFromSettings:
    def test_missing_config_makes_no_network_call(self) -> None:
        with patch("requests.Session.post") as post:
            with pytest.raises(ConfigurationError, match="LATE_CHUNKING_URL"):
                ingest(STORE_ID, "note", "text", config=Settings(_env_file=None, late_chunking_url=""))
        post.assert_not_called()
