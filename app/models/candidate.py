"""Pydantic models for the ``candidates`` table.

``id`` and ``created_at`` are assigned by the database and are therefore
absent from the create payload.  ``CandidateResponse`` is the API-layer
shape and carries the derived life expectancy date.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.core.constants import LIFE_EXPECTANCY_YEARS


def add_years(start: date, years: int) -> date:
    """Return *start* shifted by *years*, mapping 29 February to 28 February."""
    try:
        return start.replace(year=start.year + years)
    except ValueError:
        return start.replace(year=start.year + years, day=28)


class CandidateCreate(BaseModel):
    """Payload for creating a candidate (insert)."""
    firstname: str = Field(min_length=1, max_length=100)
    lastname: str = Field(min_length=1, max_length=100)
    email: EmailStr
    age: int = Field(ge=0)
    birth_date: date

    @field_validator("email")
    @classmethod
    def email_fits_column(cls, value: str) -> str:
        if len(value) > 100:
            raise ValueError("email must be at most 100 characters")
        return value

    @field_validator("birth_date")
    @classmethod
    def birth_date_not_in_future(cls, value: date) -> date:
        if value > date.today():
            raise ValueError("birth_date must not be in the future")
        return value


class Candidate(BaseModel):
    """Full candidate record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    firstname: str
    lastname: str
    email: str
    age: int
    birth_date: date
    created_at: datetime | None = None  # DEFAULT now() -- read-only

    @property
    def trigger_id(self) -> str:
        """Recalculation trigger body: ``candidate-<id>-<email>``."""
        return f"candidate-{self.id}-{self.email}"

    def life_expectancy_date(self) -> date:
        return add_years(self.birth_date, LIFE_EXPECTANCY_YEARS)


class CandidateResponse(BaseModel):
    """Candidate as returned by GET /api/v1/candidates."""
    firstname: str
    lastname: str
    email: str
    age: int
    birth_date: date
    life_expectancy_date: date

    @classmethod
    def from_candidate(cls, candidate: Candidate) -> "CandidateResponse":
        return cls(
            firstname=candidate.firstname,
            lastname=candidate.lastname,
            email=candidate.email,
            age=candidate.age,
            birth_date=candidate.birth_date,
            life_expectancy_date=candidate.life_expectancy_date(),
        )
