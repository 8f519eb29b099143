"""SQLAlchemy ORM models."""

from namaste_translate.models.base import Base
from namaste_translate.models.concept_map import ConceptMapRecord
from namaste_translate.models.specialty_mappings import AyurvedaMapping, SiddhaMapping

__all__ = ["Base", "ConceptMapRecord", "AyurvedaMapping", "SiddhaMapping"]
