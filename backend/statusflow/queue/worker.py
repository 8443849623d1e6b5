"""QueueWorker: pulls messages off a work queue and hands them to a processor."""

import asyncio
from typing import Protocol

import structlog

from statusflow.queue.schemas import QueueMessage
from statusflow.queue.work_queue import WorkQueue

logger = structlog.get_logger(__name__)


class MessageProcessor(Protocol):
    async def process(self, message: QueueMessage) -> None: ...


async def process_next_message(work_queue: WorkQueue, queue_name: str, processor: MessageProcessor) -> bool:
    """Dequeue one message and process it.

    Returns:
        True if a message was processed, False if the queue was empty
    """
    message = await work_queue.dequeue(queue_name)
    if message is None:
        return False

    try:
        await processor.process(message)
    except Exception as exc:
        logger.error(
            "queue_message_failed",
            queue=queue_name,
            message_id=message.id,
            name=message.name,
            error=str(exc),
            error_type=type(exc).__name__,
            exc_info=True,
        )
    return True


class QueueWorker:
    """Polls one queue until stopped, sleeping poll_interval seconds when it is empty."""

    def __init__(
        self,
        work_queue: WorkQueue,
        queue_name: str,
        processor: MessageProcessor,
        poll_interval: float,
    ) -> None:
        self.work_queue = work_queue
        self.queue_name = queue_name
        self.processor = processor
        self.poll_interval = poll_interval
        self.stop_event = asyncio.Event()
        self._log = logger.bind(queue=queue_name)

    async def run(self) -> None:
        self._log.info("queue_worker_started")

        while not self.stop_event.is_set():
            try:
                processed = await process_next_message(self.work_queue, self.queue_name, self.processor)
            except Exception as exc:
                self._log.warning("queue_worker_poll_failed", error=str(exc))
                processed = False

            if processed:
                continue

            try:
                await asyncio.wait_for(self.stop_event.wait(), timeout=self.poll_interval)
            except TimeoutError:
                pass

        self._log.info("queue_worker_stopped")

    def stop(self) -> None:
        self.stop_event.set()
