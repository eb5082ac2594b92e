"""
Document table for Patient resources.

The resource itself is kept as a single JSON document; the remaining columns
are storage metadata and never leave the persistence layer.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Integer, Uuid
from sqlalchemy.dialects.postgresql import JSONB

from patient_api.models.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PatientDocument(Base):
    __tablename__ = "patient_documents"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    resource = Column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        comment="Whitelisted FHIR Patient payload",
    )
    # Revision marker, bumped by the ORM on every flush of a changed row
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    __mapper_args__ = {"version_id_col": version}
