"""Pydantic models for request/response validation."""

from typing import Annotated, List

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def ensure_encodable(value: str) -> str:
    """Reject text that cannot be written as UTF-8, such as lone surrogates."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValueError(f"name is not valid UTF-8 text: {e.reason}") from e
    return value


PersonName = Annotated[str, AfterValidator(ensure_encodable)]


class SalaryEntry(BaseModel):
    """One salary record. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    name: PersonName = Field(..., description="Person the salary belongs to")
    salary: float = Field(..., allow_inf_nan=False, description="Amount in the service currency")
    year: int = Field(..., description="Year the salary applies to")


class NameCreate(BaseModel):
    """Request model for registering a name."""

    name: PersonName


class DataSnapshot(BaseModel):
    """Response model for the full data snapshot."""

    names: List[str]
    entries: List[SalaryEntry]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str
    names: int
    entries: int
