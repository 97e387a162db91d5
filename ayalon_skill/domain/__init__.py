"""Enrichment domain logic (no I/O).

Public entrypoints:
- aggregate_enrichment(response, text, resolve_age, ...)
- format_concept(entity, text, source)
- extract_span(text, start, end)
"""

from .aggregation import aggregate_enrichment
from .concepts import format_concept, select_concept
from .spans import extract_span
from .models import (
    EnrichmentResult,
    ErrorDetail,
    ExtractedEntity,
    ExtractedRelation,
    ExtractionResponse,
    InputRecord,
    LinkedConcept,
    RecordResult,
)

__all__ = [
    "aggregate_enrichment",
    "format_concept",
    "select_concept",
    "extract_span",
    "EnrichmentResult",
    "ErrorDetail",
    "ExtractedEntity",
    "ExtractedRelation",
    "ExtractionResponse",
    "InputRecord",
    "LinkedConcept",
    "RecordResult",
]
