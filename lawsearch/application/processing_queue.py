"""
Background document processing queue.

Uploads enqueue document IDs without blocking; a single consumer task
processes them in FIFO order. A failing document is logged and the
consumer moves on. Stopping lets an in-flight document finish.

Dependencies: asyncio, lawsearch.application.indexing_service
System role: Hand-off between document upload and ingestion
"""

import asyncio
import logging
import uuid
from typing import Awaitable, Callable

from lawsearch.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

DocumentProcessor = Callable[[uuid.UUID], Awaitable[object]]


class ProcessingQueue:
    """Single-consumer, multi-producer queue of document IDs."""

    def __init__(self, processor: DocumentProcessor) -> None:
        """
        Initialize an empty queue.

        Args:
            processor: Coroutine function ingesting one document
                (typically IndexingService.process_document)
        """
        self._processor = processor
        self._queue: asyncio.Queue[uuid.UUID] = asyncio.Queue()
        self._stop_event = asyncio.Event()
        self._consumer: asyncio.Task | None = None
        # Dequeued when a stop arrived; processed first on the next run
        self._carried: uuid.UUID | None = None
        self.processed = 0
        self.failed = 0

    def enqueue(self, document_id: uuid.UUID) -> None:
        """Queue a document for processing. Never blocks."""
        self._queue.put_nowait(document_id)
        logger.info(f"{__name__}:enqueue - Queued document {document_id} (pending={self._queue.qsize()})")

    def pending(self) -> int:
        return self._queue.qsize() + (1 if self._carried is not None else 0)

    @property
    def running(self) -> bool:
        return self._consumer is not None and not self._consumer.done()

    async def run(self, stop_event: asyncio.Event | None = None) -> None:
        """
        Consume document IDs until stop_event is set.

        Args:
            stop_event: Cooperative stop token (the queue's own when None)
        """
        stop_event = stop_event or self._stop_event
        logger.info(f"{__name__}:run - Processing queue started")

        if self._carried is not None and not stop_event.is_set():
            document_id, self._carried = self._carried, None
            await self._process_one(document_id)

        while not stop_event.is_set():
            get_task = asyncio.ensure_future(self._queue.get())
            stop_task = asyncio.ensure_future(stop_event.wait())
            try:
                await asyncio.wait({get_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                stop_task.cancel()
                if not get_task.done():
                    get_task.cancel()

            if get_task.cancelled() or not get_task.done():
                break

            document_id = get_task.result()
            if stop_event.is_set():
                # Stays unfinished for join() until a later run processes it
                self._carried = document_id
                break

            await self._process_one(document_id)

        logger.info(f"{__name__}:run - Processing queue stopped (pending={self.pending()})")

    def start(self) -> asyncio.Task:
        """Start the consumer task on the running loop."""
        if self.running:
            return self._consumer
        self._stop_event.clear()
        self._consumer = asyncio.create_task(self.run(self._stop_event))
        return self._consumer

    async def stop(self) -> None:
        """Signal the consumer and wait for the in-flight document to finish."""
        self._stop_event.set()
        if self._consumer is not None:
            await self._consumer
            self._consumer = None

    async def join(self) -> None:
        """Wait until every queued document has been handled."""
        await self._queue.join()

    async def _process_one(self, document_id: uuid.UUID) -> None:
        try:
            await self._processor(document_id)
            self.processed += 1
            logger.info(f"{__name__}:_process_one - Processed document {document_id}")
        except Exception as e:
            self.failed += 1
            log_exception_with_context(
                logger,
                f"{__name__}:_process_one - Document processing failed",
                e,
                document_id=document_id,
            )
        finally:
            self._queue.task_done()
