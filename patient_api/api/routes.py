"""
FastAPI routes for the FHIR Patient surface.

The service is resolved per request from ``app.state.store`` so handlers
never reach for a module-level database connection.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, Response

from patient_api.schemas.api import ErrorResponse, HealthResponse
from patient_api.services.patient_service import PatientService

router = APIRouter()

_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_patient_service(request: Request) -> PatientService:
    """FastAPI dependency wiring the injected store into a service."""
    return PatientService(request.app.state.store)


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@router.get("/health", response_model=HealthResponse)
def health_check():
    return HealthResponse(status="ok")


# ---------------------------------------------------------------------------
# Patient
# ---------------------------------------------------------------------------

@router.post("/fhir/Patient", status_code=201, responses=_ERRORS)
def create_patient(
    response: Response,
    payload: dict[str, Any] = Body(...),
    service: PatientService = Depends(get_patient_service),
) -> dict[str, Any]:
    """Validate and store a Patient, returning it with its assigned id."""
    resource = service.create(payload)
    response.headers["Location"] = f"/fhir/Patient/{resource['id']}"
    return resource


@router.get("/fhir/Patient/{patient_id}", responses=_ERRORS)
def read_patient(
    patient_id: str,
    service: PatientService = Depends(get_patient_service),
) -> dict[str, Any]:
    return service.read(patient_id)
