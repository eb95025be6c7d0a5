"""Memory store backed by an Internet Computer canister (via ``ic-py``)."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from ic.candid import Types, encode

from memory_ingest.errors import InsertError
from memory_ingest.memory.base import MemoryStoreBase
from memory_ingest.memory.principal import Principal

logger = logging.getLogger(__name__)

INSERT_METHOD = "insert"


class CanisterMemoryStore(MemoryStoreBase):
    """Calls ``insert : (vec float32, text) -> ()`` on a memory canister.

    Parameters
    ----------
    agent:
        An ``ic.agent.Agent`` (see :class:`~memory_ingest.memory.agent.IcAgentFactory`).
    canister_id:
        The memory canister to write to.
    """

    def __init__(self, agent: Any, canister_id: Principal) -> None:
        super().__init__(canister_id)
        self._agent = agent

    def insert(self, embedding: Sequence[float], payload: str) -> None:
        arg = encode(
            [
                {"type": Types.Vec(Types.Float32), "value": list(embedding)},
                {"type": Types.Text, "value": payload},
            ]
        )
        try:
            self._agent.update_raw(self.canister_id.to_text(), INSERT_METHOD, arg)
        except Exception as exc:
            # ic-py surfaces rejects and transport failures as plain exceptions.
            raise InsertError(f"Insert into canister {self.canister_id} failed: {exc}") from exc
        logger.debug("Inserted %d-dim embedding into %s", len(embedding), self.canister_id)
