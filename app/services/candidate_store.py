"""Candidate persistence on the Supabase ``candidates`` table.

The table carries a unique constraint on ``email``; duplicates are detected
by the database on insert, never by a pre-check, so two concurrent identical
submissions are resolved by the store.
"""

from __future__ import annotations

import logging
from typing import Any

from postgrest.exceptions import APIError

from app.core.constants import UNIQUE_VIOLATION_CODE
from app.core.exceptions import DuplicateError
from app.db.supabase import CANDIDATES_TABLE, get_supabase
from app.models.candidate import Candidate, CandidateCreate

logger = logging.getLogger(__name__)


def save_candidate(payload: CandidateCreate) -> Candidate:
    """Insert a candidate and return the stored row.

    Raises ``DuplicateError`` when the insert violates a unique constraint.
    """
    client = get_supabase()
    row: dict[str, Any] = payload.model_dump(mode="json")

    try:
        result = client.table(CANDIDATES_TABLE).insert(row).execute()
    except APIError as exc:
        if exc.code == UNIQUE_VIOLATION_CODE:
            logger.info(
                "candidate_duplicate_rejected",
                extra={"email": payload.email, "db_message": exc.message},
            )
            raise DuplicateError("Candidate already exists.") from exc
        raise

    if not result.data:
        raise RuntimeError("Insert into candidates returned no row")
    return Candidate(**result.data[0])


def find_all_candidates() -> list[Candidate]:
    """Return every stored candidate ordered by id."""
    client = get_supabase()
    result = (
        client.table(CANDIDATES_TABLE)
        .select("*")
        .order("id")
        .execute()
    )
    return [Candidate(**row) for row in result.data or []]
