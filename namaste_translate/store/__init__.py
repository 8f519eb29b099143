"""Read-only mapping store backends."""

from namaste_translate.store.base import (
    AYURVEDA,
    SIDDHA,
    SPECIALTY_COLLECTIONS,
    GroupedQuery,
    MappingStore,
    SpecialtyCollection,
)
from namaste_translate.store.matching import LiteralPattern

__all__ = [
    "AYURVEDA",
    "SIDDHA",
    "SPECIALTY_COLLECTIONS",
    "GroupedQuery",
    "LiteralPattern",
    "MappingStore",
    "SpecialtyCollection",
]
