# ayalon_skill/domain/aggregation.py
from __future__ import annotations

import logging
from typing import Awaitable, Callable, List

from .concepts import DEFAULT_CONCEPT_SOURCE, format_concept
from .models import EnrichmentResult, ExtractionResponse
from .spans import extract_span

logger = logging.getLogger(__name__)

DEFAULT_AGE_ENTITY_TYPE = "AGE"

# Dependency types
ResolveAge = Callable[[str], Awaitable[int]]


async def aggregate_enrichment(
    response: ExtractionResponse,
    text: str,
    resolve_age: ResolveAge,
    *,
    concept_source: str = DEFAULT_CONCEPT_SOURCE,
    age_entity_type: str = DEFAULT_AGE_ENTITY_TYPE,
) -> EnrichmentResult:
    """Reduce one extractor response to an EnrichmentResult.

    Rules
    -----
    - every entity type is kept, in order, duplicates included
    - each AGE entity triggers one age lookup on its span text; the last
      lookup overwrites earlier ones
    - an entity contributes at most one concept (see format_concept)
    - relations without a type are dropped

    InvalidSpanError from an out-of-bounds entity propagates to the caller.
    """
    entity_types: List[str] = []
    concepts: List[str] = []
    relations: List[str] = []
    age = 0

    for entity in response.entities:
        entity_types.append(entity.entity_type)

        if entity.entity_type == age_entity_type:
            age_text = extract_span(text, entity.start_offset, entity.end_offset)
            age = await resolve_age(age_text)

        if entity.linked_concepts:
            concept = format_concept(entity, text, concept_source)
            if concept is not None:
                concepts.append(concept)

    for relation in response.relations:
        if relation.relation_type is not None:
            relations.append(relation.relation_type)

    logger.debug(
        "Aggregated %d entities, %d concepts, %d relations (age=%d)",
        len(entity_types),
        len(concepts),
        len(relations),
        age,
    )

    return EnrichmentResult(
        entity_types=entity_types,
        concepts=concepts,
        relations=relations,
        age=age,
    )
