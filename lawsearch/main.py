"""
Worker entry point.

Usage:
    python -m lawsearch.main worker
    python -m lawsearch.main reindex
    python -m lawsearch.main update-model models/gemini-embedding-001
    python -m lawsearch.main health

Dependencies: lawsearch.dependencies, lawsearch.observability
System role: Process lifecycle for the ingestion worker and maintenance commands
"""

import asyncio
import logging
import signal
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator

from lawsearch.dependencies import Container, build_container
from lawsearch.observability.logger import configure_logging

logger = logging.getLogger(__name__)

USAGE = "Usage: python -m lawsearch.main COMMAND\nCommands: worker, reindex, update-model [NAME], health"


@asynccontextmanager
async def lifespan(create_schema: bool = True, restore_keyword_index: bool = True) -> AsyncIterator[Container]:
    """
    Container lifespan context manager.

    Handles startup and shutdown of shared resources.
    """
    configure_logging()
    container = build_container()
    await container.start(create_schema=create_schema, restore_keyword_index=restore_keyword_index)
    logger.info("Application startup: container ready")
    try:
        yield container
    finally:
        await container.stop()
        logger.info("Application shutdown complete")


async def run_worker() -> None:
    """Run the processing queue until SIGINT or SIGTERM."""
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    async with lifespan():
        await stop.wait()


async def run_reindex(model_name: str | None = None) -> int:
    async with lifespan() as container:
        if model_name:
            result = await container.indexing_service.update_embedding_model(model_name)
        else:
            result = await container.indexing_service.reindex_all()
    logger.info(f"Reindex finished: {result.success} succeeded, {result.failed} failed")
    return 0 if result.failed == 0 else 1


async def run_health() -> int:
    async with lifespan(create_schema=False, restore_keyword_index=False) as container:
        report = await container.health_service().check_all()
    logger.info(report.model_dump_json(indent=2))
    return 0 if report.status == "healthy" else 1


def main() -> None:
    """CLI entry point."""
    if len(sys.argv) < 2:
        print(USAGE)
        sys.exit(1)

    command = sys.argv[1]

    if command == "worker":
        asyncio.run(run_worker())
    elif command == "reindex":
        sys.exit(asyncio.run(run_reindex()))
    elif command == "update-model":
        model_name = sys.argv[2] if len(sys.argv) > 2 else None
        sys.exit(asyncio.run(run_reindex(model_name)))
    elif command == "health":
        sys.exit(asyncio.run(run_health()))
    else:
        logger.error(f"Unknown command: {command}")
        print(USAGE)
        sys.exit(1)


if __name__ == "__main__":
    main()
