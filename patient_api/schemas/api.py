"""Pydantic models for API request/response serialization."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, StrictBool


# ---------------------------------------------------------------------------
# Patient resource
# ---------------------------------------------------------------------------

class HumanName(BaseModel):
    model_config = ConfigDict(extra="ignore")

    family: str | None = None
    given: list[str] | None = None


class ContactPoint(BaseModel):
    model_config = ConfigDict(extra="ignore")

    system: Literal["phone", "email"] | None = None
    value: str | None = None


class PatientResource(BaseModel):
    """
    Whitelisted shape of a Patient resource. Fields outside this model
    (including a client-supplied ``id``) are dropped on parse.
    """

    model_config = ConfigDict(extra="ignore")

    resourceType: Literal["Patient"] = "Patient"
    active: StrictBool = True
    name: list[HumanName]
    gender: Literal["male", "female", "other", "unknown"] | None = None
    birthDate: str | None = None
    telecom: list[ContactPoint] | None = None

    def to_document(self) -> dict[str, Any]:
        """Document form stored in the database (unset optionals omitted)."""
        return self.model_dump(exclude_none=True)


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------

class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
