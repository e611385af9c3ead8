"""Response model for the candidate metrics snapshot.

The snapshot is derived from the full candidate set and is only persisted
as a cached JSON document.
"""

from pydantic import BaseModel


class MetricsSnapshot(BaseModel):
    """Aggregate age statistics over every stored candidate."""
    average_age: float
    age_standard_deviation: float
