"""Shared test fixtures.

Provides a ``test_client`` for FastAPI, mock Supabase client fixtures and
in-memory fakes for Redis and SQS used across all test modules.
"""

import itertools
import os
import threading
from collections.abc import Generator
from datetime import datetime, timezone
from typing import Any
from unittest.mock import MagicMock, patch

# Settings are instantiated at import time and require Supabase credentials
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-key")
os.environ.setdefault("BASIC_AUTH_USERNAME", "admin")
os.environ.setdefault("BASIC_AUTH_PASSWORD", "admin")

import pytest
from fastapi.testclient import TestClient

from app.core.exceptions import DuplicateError
from app.models.candidate import Candidate, CandidateCreate


class FakeRedis:
    """Dict-backed stand-in for the subset of redis-py the cache uses."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}

    def get(self, key: str) -> str | None:
        return self.store.get(key)

    def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self.store[key] = value
        self.ttls[key] = ex
        return True

    def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    def ping(self) -> bool:
        return True


class FakeSqsClient:
    """In-memory queue with SQS receive/delete visibility semantics.

    Received messages stay in flight until deleted; ``expire_visibility``
    makes undeleted messages visible again, as a visibility timeout would.
    """

    def __init__(self, queue_url: str = "https://sqs.local/000000000000/candidates") -> None:
        self.queue_url = queue_url
        self.visible: list[dict[str, str]] = []
        self.in_flight: dict[str, dict[str, str]] = {}
        self.deleted: list[str] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def get_queue_url(self, QueueName: str) -> dict[str, str]:
        return {"QueueUrl": self.queue_url}

    def create_queue(self, QueueName: str) -> dict[str, str]:
        return {"QueueUrl": self.queue_url}

    def send_message(self, QueueUrl: str, MessageBody: str) -> dict[str, str]:
        with self._lock:
            message_id = f"msg-{next(self._ids)}"
            self.visible.append({"MessageId": message_id, "Body": MessageBody})
        return {"MessageId": message_id}

    def receive_message(
        self, QueueUrl: str, MaxNumberOfMessages: int, WaitTimeSeconds: int
    ) -> dict[str, Any]:
        with self._lock:
            batch = self.visible[:MaxNumberOfMessages]
            del self.visible[:MaxNumberOfMessages]
            messages = []
            for message in batch:
                handle = f"rh-{next(self._ids)}"
                self.in_flight[handle] = message
                messages.append({**message, "ReceiptHandle": handle})
        return {"Messages": messages} if messages else {}

    def delete_message(self, QueueUrl: str, ReceiptHandle: str) -> dict[str, Any]:
        with self._lock:
            message = self.in_flight.pop(ReceiptHandle)
            self.deleted.append(message["MessageId"])
        return {}

    def expire_visibility(self) -> None:
        with self._lock:
            self.visible.extend(self.in_flight.values())
            self.in_flight.clear()


class InMemoryStore:
    """List-backed record store with a unique email constraint."""

    def __init__(self) -> None:
        self.rows: list[Candidate] = []

    def save(self, payload: CandidateCreate) -> Candidate:
        if any(row.email == payload.email for row in self.rows):
            raise DuplicateError("Candidate already exists.")
        candidate = Candidate(
            id=len(self.rows) + 1,
            created_at=datetime.now(timezone.utc),
            **payload.model_dump(),
        )
        self.rows.append(candidate)
        return candidate

    def find_all(self) -> list[Candidate]:
        return list(self.rows)


@pytest.fixture()
def store() -> Generator[InMemoryStore, None, None]:
    """Patch the candidate service's record store with an in-memory list."""
    memory = InMemoryStore()
    with patch("app.services.candidates.save_candidate", side_effect=memory.save), \
            patch("app.services.candidates.find_all_candidates", side_effect=memory.find_all):
        yield memory


@pytest.fixture()
def fake_redis() -> Generator[FakeRedis, None, None]:
    """Patch the cache's Redis client with an in-memory fake."""
    fake = FakeRedis()
    with patch("app.services.metrics_cache.get_redis", return_value=fake):
        yield fake


@pytest.fixture()
def fake_sqs() -> FakeSqsClient:
    return FakeSqsClient()


@pytest.fixture()
def mock_supabase_module() -> Generator[MagicMock, None, None]:
    """Patch the Supabase client at module level in the health router."""
    mock_client = MagicMock()
    # Mock the select -> limit -> execute chain
    mock_table = MagicMock()
    mock_select = MagicMock()
    mock_limit = MagicMock()

    mock_client.table.return_value = mock_table
    mock_table.select.return_value = mock_select
    mock_select.limit.return_value = mock_limit
    mock_limit.execute.return_value = MagicMock()  # non-None result

    with patch("app.routers.health.get_supabase", return_value=mock_client):
        yield mock_client


@pytest.fixture()
def mock_supabase_disconnected() -> Generator[MagicMock, None, None]:
    """Patch ``get_supabase`` to simulate a disconnected database."""
    with patch(
        "app.routers.health.get_supabase",
        side_effect=Exception("Connection refused"),
    ):
        yield MagicMock()


@pytest.fixture()
def test_client() -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient."""
    from app.main import app

    with TestClient(app) as client:
        yield client
