"""Recalculation trigger types.

``QueueMessage`` is the slice of an SQS message this service uses;
``RecalculateSignal`` is the in-process event published for each one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RecalculateSignal:
    """Request to recompute the cached metrics.

    ``candidate_id`` identifies the creation that caused the trigger and is
    used for logging only; recalculation always covers the whole data set.
    """

    candidate_id: str


@dataclass(frozen=True)
class QueueMessage:
    """A message received from the recalculation queue."""

    message_id: str
    receipt_handle: str
    body: str

    @classmethod
    def from_sqs(cls, raw: dict[str, Any]) -> QueueMessage:
        """Build from one entry of a ``ReceiveMessage`` response."""
        return cls(
            message_id=raw.get("MessageId", ""),
            receipt_handle=raw["ReceiptHandle"],
            body=raw.get("Body", ""),
        )
