"""Candidate endpoints.

POST /            -- create a candidate (201)
GET  /            -- list candidates with life expectancy date
GET  /metrics     -- average age and standard deviation (cached)

All endpoints require HTTP Basic credentials.  The service layer is
synchronous (Supabase / Redis clients), so handlers are plain ``def`` and
run in FastAPI's threadpool.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.exceptions import DuplicateError, NotFoundError, ValidationError
from app.core.security import require_basic_auth
from app.models.candidate import CandidateCreate, CandidateResponse
from app.models.metrics import MetricsSnapshot
from app.services.candidates import create_candidate, get_candidates, get_metrics

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_basic_auth)])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CandidateResponse)
def create_candidate_endpoint(request: CandidateCreate) -> CandidateResponse:
    """Register a new candidate.

    400 when the declared age does not match the birth date, 409 when the
    email is already registered.
    """
    try:
        candidate = create_candidate(request)
    except ValidationError as exc:
        logger.warning("candidate_rejected", extra={"reason": "validation", "error_message": str(exc)})
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except DuplicateError as exc:
        logger.warning("candidate_rejected", extra={"reason": "duplicate", "email": request.email})
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return CandidateResponse.from_candidate(candidate)


@router.get("", response_model=list[CandidateResponse])
def list_candidates_endpoint() -> list[CandidateResponse]:
    """Return all registered candidates."""
    return get_candidates()


@router.get("/metrics", response_model=MetricsSnapshot)
def candidate_metrics_endpoint() -> MetricsSnapshot:
    """Return average age and age standard deviation; 404 with no candidates."""
    try:
        return get_metrics()
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
