"""
Memory — store identifiers and clients for the remote memory canister.

Public surface
--------------
- :class:`Principal` — validated store identifier.
- :class:`MemoryStoreBase` / :class:`AgentFactory` — abstract seams.
- :class:`CanisterMemoryStore` / :class:`IcAgentFactory` — ``ic-py`` backed
  implementations (imported lazily).
"""

from memory_ingest.memory.base import AgentFactory, MemoryStoreBase
from memory_ingest.memory.principal import Principal

__all__ = [
    "AgentFactory",
    "CanisterMemoryStore",
    "IcAgentFactory",
    "MemoryStoreBase",
    "Principal",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import the ic-py backed classes to avoid pulling in ``ic`` at import time."""
    if name == "CanisterMemoryStore":
        from memory_ingest.memory.canister import CanisterMemoryStore

        return CanisterMemoryStore
    if name == "IcAgentFactory":
        from memory_ingest.memory.agent import IcAgentFactory

        return IcAgentFactory
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
