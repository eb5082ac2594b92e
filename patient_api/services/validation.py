"""
Patient validation.

``validate_patient`` walks the ordered Patient rules and stops at the first
failure.
"""

from typing import Any

import jsonschema

from patient_api.schemas.fhir import PATIENT_RULES

_PATIENT_VALIDATORS = [
    (message, jsonschema.Draft7Validator(schema)) for message, schema in PATIENT_RULES
]


def validate_patient(payload: Any) -> str | None:
    """Return the first rule violated by ``payload``, or None if it is valid."""
    for message, validator in _PATIENT_VALIDATORS:
        if not validator.is_valid(payload):
            return message
    return None
