"""
FHIR Patient validation rules.

Each rule is a small Draft-7 JSON schema paired with the message reported
when it fails. Rules are evaluated in order and the first failure wins, so
a client only ever sees one error at a time.

Only the first HumanName entry is inspected for ``family`` and ``given``.
"""

GENDER_CODES: tuple[str, ...] = ("male", "female", "other", "unknown")

BIRTH_DATE_PATTERN = "^\\d{4}-\\d{2}-\\d{2}$"

PATIENT_RULES: list[tuple[str, dict]] = [
    (
        "resourceType must be 'Patient'",
        {
            "type": "object",
            "required": ["resourceType"],
            "properties": {"resourceType": {"const": "Patient"}},
        },
    ),
    (
        "name must be a non-empty array",
        {
            "required": ["name"],
            "properties": {"name": {"type": "array", "minItems": 1}},
        },
    ),
    (
        "name[0].family is required",
        {
            "properties": {
                "name": {
                    # Tuple form: only index 0 is constrained.
                    "items": [
                        {
                            "type": "object",
                            "required": ["family"],
                            "properties": {"family": {"type": "string", "minLength": 1}},
                        }
                    ]
                }
            }
        },
    ),
    (
        "name[0].given must be a non-empty array",
        {
            "properties": {
                "name": {
                    "items": [
                        {
                            "required": ["given"],
                            "properties": {"given": {"type": "array", "minItems": 1}},
                        }
                    ]
                }
            }
        },
    ),
    (
        "gender must be one of " + ", ".join(GENDER_CODES),
        {"properties": {"gender": {"enum": list(GENDER_CODES)}}},
    ),
    (
        "birthDate must be in YYYY-MM-DD format",
        {
            "properties": {
                "birthDate": {"type": "string", "pattern": BIRTH_DATE_PATTERN}
            }
        },
    ),
]
