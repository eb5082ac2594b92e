"""Error taxonomy for the Patient API. Every error maps to one HTTP status."""


class PatientAPIError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PatientAPIError):
    """The payload breaks a Patient rule; the message names the rule."""

    status_code = 400
    default_message = "Invalid Patient resource"


class MalformedIdentifierError(PatientAPIError):
    status_code = 400
    default_message = "Invalid id"


class NotFoundError(PatientAPIError):
    status_code = 404
    default_message = "Patient not found"


class InternalError(PatientAPIError):
    """Unexpected persistence failure. The message is deliberately generic."""

    status_code = 500
    default_message = "Internal server error"
