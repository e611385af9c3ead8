"""SQS gateway for metric recalculation triggers.

Publishes trigger messages, receives them with long polling and hands each
one to the recalculation notifier before deleting it.  All network calls
run on a thread pool; callers get ``Future`` objects back and never wait on
the queue themselves.

The queue URL is resolved once (``GetQueueUrl``, falling back to
``CreateQueue`` when the queue does not exist) and memoized as a future that
every send/receive composes on.  A failed resolution stays failed until
``retry_resolution()`` is called.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings
from app.core.constants import (
    QUEUE_MAX_MESSAGES,
    QUEUE_NOT_FOUND_ERROR_CODES,
    QUEUE_WAIT_SECONDS,
)
from app.core.exceptions import TransientInfrastructureError
from app.db.sqs import get_sqs_client
from app.models.events import QueueMessage, RecalculateSignal
from app.services.notifier import RecalculationNotifier, notifier

logger = logging.getLogger(__name__)

_AWS_ERRORS = (BotoCoreError, ClientError)


class QueueGateway:
    """Send/receive/delete against one SQS queue."""

    def __init__(
        self,
        client: Any,
        queue_name: str,
        event_notifier: RecalculationNotifier,
        max_workers: int = 4,
    ) -> None:
        self._client = client
        self._queue_name = queue_name
        self._notifier = event_notifier
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="queue-gateway",
        )
        self._queue_url_future: Future[str] | None = None
        self._resolution_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Queue URL resolution
    # ------------------------------------------------------------------

    def queue_url(self) -> Future[str]:
        """Return the memoized queue URL future, starting resolution once.

        Resolution is submitted before any work that depends on it, so the
        executor's FIFO queue always runs it ahead of its waiters.
        """
        with self._resolution_lock:
            if self._queue_url_future is None:
                self._queue_url_future = self._executor.submit(self._resolve_queue_url)
            return self._queue_url_future

    def retry_resolution(self) -> Future[str]:
        """Discard a failed resolution and start a new one.

        A pending or successful resolution is returned unchanged.
        """
        with self._resolution_lock:
            current = self._queue_url_future
            if current is not None and current.done() and (
                current.cancelled() or current.exception() is not None
            ):
                logger.info("queue_url_resolution_retry", extra={"queue_name": self._queue_name})
                self._queue_url_future = None
        return self.queue_url()

    def resolution_status(self) -> str:
        """One of ``unresolved``, ``pending``, ``ready`` or ``failed``."""
        with self._resolution_lock:
            current = self._queue_url_future
        if current is None:
            return "unresolved"
        if not current.done():
            return "pending"
        if current.cancelled() or current.exception() is not None:
            return "failed"
        return "ready"

    def _resolve_queue_url(self) -> str:
        try:
            response = self._client.get_queue_url(QueueName=self._queue_name)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            if code not in QUEUE_NOT_FOUND_ERROR_CODES:
                logger.error(
                    "queue_url_lookup_failed",
                    extra={"queue_name": self._queue_name, "error_code": code},
                )
                raise TransientInfrastructureError("Error getting queue URL") from exc
            logger.info("queue_not_found_creating", extra={"queue_name": self._queue_name})
            response = self._create_queue()
        except BotoCoreError as exc:
            logger.error(
                "queue_url_lookup_failed",
                extra={"queue_name": self._queue_name, "error_message": str(exc)},
            )
            raise TransientInfrastructureError("Error getting queue URL") from exc

        queue_url: str = response["QueueUrl"]
        logger.info("queue_url_resolved", extra={"queue_url": queue_url})
        return queue_url

    def _create_queue(self) -> dict[str, Any]:
        try:
            return self._client.create_queue(QueueName=self._queue_name)
        except _AWS_ERRORS as exc:
            logger.error(
                "queue_create_failed",
                extra={"queue_name": self._queue_name, "error_message": str(exc)},
            )
            raise TransientInfrastructureError("Error creating queue") from exc

    # ------------------------------------------------------------------
    # Publish
    # ------------------------------------------------------------------

    def publish(self, payload: str) -> Future[str | None]:
        """Send *payload* and then run one poll cycle.

        The returned future resolves to the SQS message id, or ``None`` when
        the send failed.  Send failures are logged and not retried.
        """
        url_future = self.queue_url()
        return self._executor.submit(self._send_and_poll, url_future, payload)

    def _send_and_poll(self, url_future: Future[str], payload: str) -> str | None:
        try:
            queue_url = url_future.result()
            response = self._client.send_message(QueueUrl=queue_url, MessageBody=payload)
        except (TransientInfrastructureError, *_AWS_ERRORS) as exc:
            logger.error(
                "queue_send_failed",
                extra={"payload": payload, "error_message": str(exc)},
            )
            return None

        message_id: str | None = response.get("MessageId")
        logger.info("queue_message_sent", extra={"message_id": message_id})

        # Fast path: consume the trigger now instead of at the next scheduled poll
        self._poll_cycle(queue_url)
        return message_id

    # ------------------------------------------------------------------
    # Poll
    # ------------------------------------------------------------------

    def poll_once(self) -> Future[int]:
        """Run one receive cycle; the future resolves to messages deleted."""
        url_future = self.queue_url()
        return self._executor.submit(self._poll_after_resolution, url_future)

    def _poll_after_resolution(self, url_future: Future[str]) -> int:
        try:
            queue_url = url_future.result()
        except Exception as exc:
            # A cancelled resolution raises CancelledError with an empty message
            logger.error(
                "queue_poll_skipped",
                extra={"error_message": str(exc) or type(exc).__name__},
            )
            return 0
        return self._poll_cycle(queue_url)

    def _poll_cycle(self, queue_url: str) -> int:
        try:
            response = self._client.receive_message(
                QueueUrl=queue_url,
                MaxNumberOfMessages=QUEUE_MAX_MESSAGES,
                WaitTimeSeconds=QUEUE_WAIT_SECONDS,
            )
        except _AWS_ERRORS as exc:
            logger.error("queue_receive_failed", extra={"error_message": str(exc)})
            return 0

        raw_messages: list[dict[str, Any]] = response.get("Messages", [])
        deleted = 0
        for raw in raw_messages:
            try:
                if self.process_message(QueueMessage.from_sqs(raw), queue_url):
                    deleted += 1
            except Exception:
                # One bad message must not block the rest of the batch
                logger.exception(
                    "queue_message_processing_failed",
                    extra={"message_id": raw.get("MessageId")},
                )

        if raw_messages:
            logger.info(
                "queue_poll_completed",
                extra={"received": len(raw_messages), "deleted": deleted},
            )
        return deleted

    def process_message(self, message: QueueMessage, queue_url: str) -> bool:
        """Hand *message* to the notifier, then delete it.

        Returns True when the delete succeeded.  A failed delete leaves the
        message to be redelivered after its visibility timeout.
        """
        logger.info(
            "queue_message_processing",
            extra={"message_id": message.message_id, "body": message.body},
        )
        self._notifier.publish(RecalculateSignal(candidate_id=message.body))

        try:
            self._client.delete_message(
                QueueUrl=queue_url,
                ReceiptHandle=message.receipt_handle,
            )
        except _AWS_ERRORS as exc:
            logger.error(
                "queue_message_delete_failed",
                extra={"message_id": message.message_id, "error_message": str(exc)},
            )
            return False

        logger.info("queue_message_deleted", extra={"message_id": message.message_id})
        return True

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


# ---------------------------------------------------------------------------
# Process-wide gateway
# ---------------------------------------------------------------------------

_gateway: QueueGateway | None = None
_gateway_stopped = False
_gateway_lock = threading.Lock()


def get_queue_gateway() -> QueueGateway:
    """Return the singleton gateway, creating it on first call.

    Raises ``TransientInfrastructureError`` once ``shutdown_queue_gateway``
    has run, so late callers during teardown do not start a new pool.
    """
    global _gateway
    with _gateway_lock:
        if _gateway_stopped:
            raise TransientInfrastructureError("Queue gateway is shut down")
        if _gateway is None:
            _gateway = QueueGateway(
                client=get_sqs_client(),
                queue_name=settings.SQS_QUEUE_NAME,
                event_notifier=notifier,
                max_workers=settings.QUEUE_WORKERS,
            )
        return _gateway


def open_queue_gateway() -> None:
    """Allow ``get_queue_gateway`` to build the gateway again after a shutdown."""
    global _gateway_stopped
    with _gateway_lock:
        _gateway_stopped = False


def shutdown_queue_gateway() -> None:
    """Stop the singleton gateway's workers and refuse new ones."""
    global _gateway, _gateway_stopped
    with _gateway_lock:
        gateway, _gateway = _gateway, None
        _gateway_stopped = True
    if gateway is not None:
        gateway.shutdown(wait=False)
        logger.info("queue_gateway_stopped")


def queue_gateway_status() -> str:
    """Resolution status of the singleton gateway without creating it."""
    with _gateway_lock:
        gateway, stopped = _gateway, _gateway_stopped
    if gateway is None:
        return "stopped" if stopped else "idle"
    return gateway.resolution_status()
