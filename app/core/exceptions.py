"""Domain and infrastructure exceptions.

User-correctable failures (``ValidationError``, ``DuplicateError``) reach the
HTTP caller.  ``NotFoundError`` describes the state of the data set.
``TransientInfrastructureError`` wraps queue and cache failures; it is logged
by the asynchronous recalculation path and never surfaced to HTTP callers.
"""

from __future__ import annotations


class CandidateServiceError(Exception):
    """Base class for all errors raised by the candidate services."""


class ValidationError(CandidateServiceError):
    """Declared age does not match the birth date."""


class DuplicateError(CandidateServiceError):
    """The record store rejected the write on a uniqueness constraint."""


class NotFoundError(CandidateServiceError):
    """Metrics were requested over an empty candidate set."""


class TransientInfrastructureError(CandidateServiceError):
    """A queue or cache operation failed."""
