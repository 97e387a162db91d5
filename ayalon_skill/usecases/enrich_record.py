from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from ayalon_skill.domain.aggregation import (
    DEFAULT_AGE_ENTITY_TYPE,
    ResolveAge,
    aggregate_enrichment,
)
from ayalon_skill.domain.concepts import DEFAULT_CONCEPT_SOURCE
from ayalon_skill.domain.models import EnrichmentResult, ExtractionResponse, InputRecord, RecordResult
from ayalon_skill.exceptions import RecordDataError

logger = logging.getLogger(__name__)

# Dependency types
ExtractDocument = Callable[[str, str], Awaitable[Optional[ExtractionResponse]]]


def _validate_input(record: InputRecord) -> str:
    if record.document is None:
        raise RecordDataError("Record has no document text.")
    return record.document


async def run_enrich_record_usecase(
    record: InputRecord,
    extract: ExtractDocument,
    resolve_age: ResolveAge,
    *,
    concept_source: str = DEFAULT_CONCEPT_SOURCE,
    age_entity_type: str = DEFAULT_AGE_ENTITY_TYPE,
) -> RecordResult:
    """
    Enrich a single record.

    Pipeline:
    1) extract(record_id, text) on the entity extractor
       - None (extractor answered null) -> empty enrichment
    2) aggregate_enrichment(...) -> EnrichmentResult

    Every failure (missing text, extractor error, bad span, anything
    unexpected) is returned as a failed RecordResult carrying the
    exception message. Cancellation is not caught.
    """
    try:
        text = _validate_input(record)

        response = await extract(record.record_id, text)
        if response is None:
            logger.info("Extractor returned no response for record %s; emitting empty enrichment", record.record_id)
            return RecordResult.success(record.record_id, EnrichmentResult())

        data = await aggregate_enrichment(
            response,
            text,
            resolve_age,
            concept_source=concept_source,
            age_entity_type=age_entity_type,
        )
        return RecordResult.success(record.record_id, data)

    except Exception as e:
        logger.warning("Record %s failed: %s: %s", record.record_id, type(e).__name__, e)
        return RecordResult.failure(record.record_id, str(e) or type(e).__name__)
