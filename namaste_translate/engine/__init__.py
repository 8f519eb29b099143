"""Terminology translation engine."""

from namaste_translate.engine.orchestrator import TranslationOrchestrator
from namaste_translate.engine.resolver import FlatHit, MatchResolver

__all__ = ["FlatHit", "MatchResolver", "TranslationOrchestrator"]
