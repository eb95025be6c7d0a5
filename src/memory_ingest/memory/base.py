"""Abstract seams for the remote memory store.

Adding a new store transport only requires subclassing
:class:`MemoryStoreBase`; the orchestrator never touches the transport
directly.  :class:`AgentFactory` produces the transport/identity handle
a store is bound to, so tests can run without network or credentials.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from memory_ingest.memory.principal import Principal


class MemoryStoreBase(ABC):
    """Client bound to one memory canister.

    Parameters
    ----------
    canister_id:
        Validated identifier of the destination store.
    """

    def __init__(self, canister_id: Principal) -> None:
        self.canister_id = canister_id

    @abstractmethod
    def insert(self, embedding: Sequence[float], payload: str) -> None:
        """Store one ``(embedding, payload)`` pair.

        No local checks are made on the vector length or payload size;
        the remote store is the authority.  Failures raise
        :class:`~memory_ingest.errors.InsertError`.
        """
        ...


class AgentFactory(ABC):
    """Builds the transport/identity handle used to reach the store."""

    @abstractmethod
    def build(self) -> Any:
        """Return a ready-to-use agent.

        Raises :class:`~memory_ingest.errors.AgentError` when the identity
        or transport cannot be set up.
        """
        ...
