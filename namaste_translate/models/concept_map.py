"""ConceptMapRecord model: FHIR ConceptMap with its group tree as JSONB."""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from namaste_translate.models.base import Base
from namaste_translate.schemas import ConceptMapDocument


class ConceptMapRecord(Base):
    """Stored ConceptMap document."""

    __tablename__ = "concept_maps"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    resource_type: Mapped[str] = mapped_column(
        String(30), nullable=False, insert_default="ConceptMap",
    )
    url: Mapped[str] = mapped_column(String(512), nullable=False, insert_default="")
    name: Mapped[str] = mapped_column(String(200), nullable=False, insert_default="", index=True)
    title: Mapped[str] = mapped_column(String(512), nullable=False, insert_default="")
    version: Mapped[str | None] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(String(30), nullable=False, insert_default="")
    source_uri: Mapped[str] = mapped_column(String(512), nullable=False, insert_default="")
    target_uri: Mapped[str] = mapped_column(String(512), nullable=False, insert_default="")
    group: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def to_document(self) -> ConceptMapDocument:
        return ConceptMapDocument(
            resource_type=self.resource_type or "ConceptMap",
            id=str(self.id) if self.id else None,
            url=self.url or "",
            name=self.name or "",
            title=self.title or "",
            version=self.version,
            status=self.status or "",
            source_uri=self.source_uri or "",
            target_uri=self.target_uri or "",
            group=self.group or [],
        )

    @classmethod
    def from_document(cls, document: ConceptMapDocument) -> "ConceptMapRecord":
        return cls(
            resource_type=document.resource_type,
            url=document.url,
            name=document.name,
            title=document.title,
            version=document.version,
            status=document.status,
            source_uri=document.source_uri,
            target_uri=document.target_uri,
            group=[g.model_dump(exclude_none=True) for g in document.group],
        )
