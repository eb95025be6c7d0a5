"""Command-line entry point: ``memory-ingest insert``."""

from __future__ import annotations

import argparse
import logging
import sys

from memory_ingest.errors import IngestError, InsertError
from memory_ingest.ingestion.orchestrator import ingest

logger = logging.getLogger("memory_ingest.cli")


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="memory-ingest",
        description="Chunk text with the late chunking service and store it in a memory canister.",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    insert = sub.add_parser("insert", help="Insert text into a memory canister")
    insert.add_argument("memory_id", help="Canister id of the memory store")
    insert.add_argument("text", help="Text to ingest, or '-' to read it from stdin")
    insert.add_argument("--tag", required=True, help="Tag attached to every stored chunk")
    return parser


def _read_text(value: str) -> str:
    return sys.stdin.read() if value == "-" else value


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    if args.command == "insert":
        try:
            result = ingest(args.memory_id, args.tag, _read_text(args.text))
        except InsertError as exc:
            logger.error("%s (%d chunks were stored before the failure)", exc, exc.inserted_count)
            return 1
        except IngestError as exc:
            logger.error("%s", exc)
            return 1
        logger.info(
            "Inserted %d/%d chunks into %s with tag %r",
            result.inserted_count,
            result.chunk_count,
            result.store_id,
            result.tag,
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
