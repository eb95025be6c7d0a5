"""Agent construction for talking to memory canisters."""

from __future__ import annotations

import logging
from pathlib import Path

from ic.agent import Agent
from ic.client import Client
from ic.identity import Identity

from memory_ingest.config import Settings, settings
from memory_ingest.errors import AgentError
from memory_ingest.memory.base import AgentFactory

logger = logging.getLogger(__name__)


class IcAgentFactory(AgentFactory):
    """Builds an ``ic.agent.Agent`` for *ic_url* signed by a PEM identity.

    When *identity_pem_path* is empty an ephemeral key is generated, which
    is enough for canisters that accept any caller.
    """

    def __init__(self, ic_url: str, identity_pem_path: str | Path | None = None) -> None:
        self.ic_url = ic_url
        self.identity_pem_path = Path(identity_pem_path) if identity_pem_path else None

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> IcAgentFactory:
        config = config or settings
        return cls(config.ic_url, config.identity_pem_path or None)

    def build(self) -> Agent:
        try:
            identity = self._load_identity()
            client = Client(url=self.ic_url)
            agent = Agent(identity, client)
        except AgentError:
            raise
        except Exception as exc:
            raise AgentError(f"Failed to build agent for {self.ic_url}: {exc}") from exc
        logger.info("Built agent for %s as %s", self.ic_url, identity.sender().to_str())
        return agent

    def _load_identity(self) -> Identity:
        if self.identity_pem_path is None:
            logger.warning("No identity PEM configured; using an ephemeral identity")
            return Identity()
        try:
            pem = self.identity_pem_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise AgentError(f"Failed to read identity PEM {self.identity_pem_path}") from exc
        return Identity.from_pem(pem)
