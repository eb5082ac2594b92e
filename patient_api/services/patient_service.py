"""
Patient resource service: create and read.

Create runs the ordered validation rules, narrows the payload to the
whitelisted ``PatientResource`` shape and persists it. Read looks a document
up by id and reshapes it into a FHIR resource. Failures surface as
``PatientAPIError`` subclasses; nothing is retried.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pydantic
from sqlalchemy.exc import SQLAlchemyError

from patient_api.schemas.api import PatientResource
from patient_api.services.errors import InternalError, NotFoundError, ValidationError
from patient_api.services.validation import validate_patient

if TYPE_CHECKING:
    from patient_api.models.store import DocumentStore

logger = logging.getLogger(__name__)

RESOURCE_TYPE = "Patient"


def _field_path(loc: tuple) -> str:
    """Render a pydantic location as ``name[0].given[1]``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def _describe(exc: pydantic.ValidationError) -> str:
    """First pydantic error as ``field.path: message``."""
    first = exc.errors()[0]
    path = _field_path(first["loc"])
    return f"{path}: {first['msg']}" if path else first["msg"]


def to_fhir(doc_id: Any, document: dict[str, Any]) -> dict[str, Any]:
    """Shape a stored document as a FHIR resource with its textual id."""
    body = {k: v for k, v in document.items() if k not in ("resourceType", "id")}
    return {"resourceType": RESOURCE_TYPE, "id": str(doc_id), **body}


class PatientService:
    def __init__(self, store: DocumentStore):
        self.store = store

    def create(self, payload: Any) -> dict[str, Any]:
        error = validate_patient(payload)
        if error:
            logger.info("Rejected Patient payload: %s", error)
            raise ValidationError(error)

        try:
            patient = PatientResource.model_validate(payload)
        except pydantic.ValidationError as exc:
            message = _describe(exc)
            logger.info("Rejected Patient payload: %s", message)
            raise ValidationError(message) from exc

        document = patient.to_document()
        try:
            stored = self.store.insert_one(document)
        except SQLAlchemyError as exc:
            logger.exception("Failed to persist Patient")
            raise InternalError() from exc

        logger.info("Created Patient/%s", stored.id)
        return to_fhir(stored.id, document)

    def read(self, raw_id: str) -> dict[str, Any]:
        doc_id = self.store.parse_id(raw_id)
        try:
            document = self.store.find_by_id(doc_id)
        except SQLAlchemyError as exc:
            logger.exception("Failed to load Patient/%s", raw_id)
            raise InternalError() from exc

        if document is None:
            raise NotFoundError()
        return to_fhir(doc_id, document)
