# ayalon_skill/domain/concepts.py
from __future__ import annotations

from typing import Optional

from .models import ExtractedEntity, LinkedConcept
from .spans import extract_span

DEFAULT_CONCEPT_SOURCE = "UMLS"


def select_concept(entity: ExtractedEntity, source: str = DEFAULT_CONCEPT_SOURCE) -> Optional[LinkedConcept]:
    """First linked concept from ``source`` that carries an id (list order, not score)."""
    for concept in entity.linked_concepts:
        if concept.source == source and concept.concept_id:
            return concept
    return None


def format_concept(
    entity: ExtractedEntity,
    text: str,
    source: str = DEFAULT_CONCEPT_SOURCE,
) -> Optional[str]:
    """Format the entity's concept as ``"<SOURCE> <id> (<span text>)"``.

    e.g. ``UMLS C0011849 (diabetes)``

    Returns None when the entity has no concept from ``source``.
    """
    concept = select_concept(entity, source)
    if concept is None:
        return None

    span_text = extract_span(text, entity.start_offset, entity.end_offset)
    return f"{source} {concept.concept_id} ({span_text})"
