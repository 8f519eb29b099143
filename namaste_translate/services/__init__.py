"""Outbound services: LLM client and drug-information enrichment."""
