"""Flat NAMASTE specialty tables (Ayurveda, Siddha).

Column names are the spreadsheet headers of the NAMASTE code lists.
``store_fields`` maps each header to its ORM attribute.
"""

from typing import Any

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from namaste_translate.models.base import Base


class _SpecialtyRow:
    """Helpers shared by the specialty tables."""

    store_fields = {}

    @classmethod
    def column_for(cls, field: str):
        """ORM attribute for a NAMASTE header; KeyError if unknown."""
        return getattr(cls, cls.store_fields[field])

    def to_record(self) -> dict[str, Any]:
        record = {}
        for field, attr in self.store_fields.items():
            value = getattr(self, attr)
            if value is not None:
                record[field] = value
        return record


class AyurvedaMapping(_SpecialtyRow, Base):
    __tablename__ = "ayurveda_mappings"

    store_fields = {
        "NAMC_ID": "namc_id",
        "NAMC_CODE": "namc_code",
        "NAMC_term": "namc_term",
        "NAMC_term_diacritical": "namc_term_diacritical",
        "NAMC_term_DEVANAGARI": "namc_term_devanagari",
        "Name English": "name_english",
        "Short_definition": "short_definition",
        "Long_definition": "long_definition",
    }

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    namc_id: Mapped[str | None] = mapped_column("NAMC_ID", String(50))
    namc_code: Mapped[str] = mapped_column("NAMC_CODE", String(50), nullable=False, index=True)
    namc_term: Mapped[str | None] = mapped_column("NAMC_term", String(255))
    namc_term_diacritical: Mapped[str | None] = mapped_column("NAMC_term_diacritical", String(255))
    namc_term_devanagari: Mapped[str | None] = mapped_column("NAMC_term_DEVANAGARI", String(255))
    name_english: Mapped[str | None] = mapped_column("Name English", String(255))
    short_definition: Mapped[str | None] = mapped_column("Short_definition", Text)
    long_definition: Mapped[str | None] = mapped_column("Long_definition", Text)


class SiddhaMapping(_SpecialtyRow, Base):
    __tablename__ = "siddha_mappings"

    store_fields = {
        "NAMC_ID": "namc_id",
        "NAMC_CODE": "namc_code",
        "NAMC_TERM": "namc_term",
        "Tamil_term": "tamil_term",
        "Short_definition": "short_definition",
        "Long_definition": "long_definition",
        "Reference": "reference",
    }

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    namc_id: Mapped[str | None] = mapped_column("NAMC_ID", String(50))
    namc_code: Mapped[str] = mapped_column("NAMC_CODE", String(50), nullable=False, index=True)
    namc_term: Mapped[str | None] = mapped_column("NAMC_TERM", String(255))
    tamil_term: Mapped[str | None] = mapped_column("Tamil_term", String(255))
    short_definition: Mapped[str | None] = mapped_column("Short_definition", Text)
    long_definition: Mapped[str | None] = mapped_column("Long_definition", Text)
    reference: Mapped[str | None] = mapped_column("Reference", Text)


SPECIALTY_MODELS = {
    AyurvedaMapping.__tablename__: AyurvedaMapping,
    SiddhaMapping.__tablename__: SiddhaMapping,
}
