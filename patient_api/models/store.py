"""
Document store for Patient resources.

A thin insert/find-by-id contract over SQLAlchemy. The store is constructed
explicitly and handed to the service layer; nothing here is module-global.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker

from patient_api.models.database import Base, build_engine
from patient_api.models.patient import PatientDocument
from patient_api.services.errors import MalformedIdentifierError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InsertResult:
    id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class DocumentStore:
    def __init__(self, engine: Engine):
        self.engine = engine
        self._sessions = sessionmaker(
            bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    @classmethod
    def from_url(cls, url: str, **engine_kwargs) -> DocumentStore:
        return cls(build_engine(url, **engine_kwargs))

    def create_all(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    @staticmethod
    def parse_id(raw_id: str) -> uuid.UUID:
        """Parse a path identifier, rejecting anything that is not a UUID."""
        try:
            return uuid.UUID(raw_id)
        except (TypeError, ValueError) as exc:
            raise MalformedIdentifierError() from exc

    def insert_one(self, document: dict[str, Any]) -> InsertResult:
        """Persist ``document`` as a new row and return its generated identity."""
        with self._sessions() as db:
            row = PatientDocument(resource=document)
            db.add(row)
            db.commit()
            logger.debug("Inserted patient document %s", row.id)
            return InsertResult(
                id=row.id, created_at=row.created_at, updated_at=row.updated_at
            )

    def find_by_id(self, doc_id: uuid.UUID | str) -> dict[str, Any] | None:
        """Return the stored resource for ``doc_id``, or None if there is none."""
        if not isinstance(doc_id, uuid.UUID):
            doc_id = self.parse_id(doc_id)
        with self._sessions() as db:
            row = db.get(PatientDocument, doc_id)
            if row is None:
                return None
            return dict(row.resource)
