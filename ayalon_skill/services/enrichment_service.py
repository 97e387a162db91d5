from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional

import aiohttp

from ayalon_skill.core.config import SkillSettings
from ayalon_skill.domain.aggregation import DEFAULT_AGE_ENTITY_TYPE, ResolveAge
from ayalon_skill.domain.concepts import DEFAULT_CONCEPT_SOURCE
from ayalon_skill.domain.models import InputRecord, RecordResult
from ayalon_skill.exceptions import MalformedBatchError
from ayalon_skill.infra.age_client import AgeResolver
from ayalon_skill.infra.extractor_client import EntityExtractorClient
from ayalon_skill.usecases.enrich_record import ExtractDocument, run_enrich_record_usecase

logger = logging.getLogger(__name__)

SCHEMA_MISMATCH = "The request schema does not match expected schema."
NO_VALUES_ARRAY = "The request schema does not match expected schema. Could not find values array."


def _get_ci(mapping: Mapping[str, Any], key: str) -> Any:
    """Case-insensitive key lookup (``recordId`` / ``RecordId`` both accepted)."""
    if key in mapping:
        return mapping[key]
    lowered = key.lower()
    for k, v in mapping.items():
        if isinstance(k, str) and k.lower() == lowered:
            return v
    return None


def parse_batch(body: Any) -> List[InputRecord]:
    """
    Turn the skill request body into InputRecords.

    - body is not an object          -> MalformedBatchError
    - no ``values`` array            -> MalformedBatchError
    - null record / null ``recordId`` -> silently skipped
    - missing ``data.document``      -> kept, fails later as a record error
    """
    if not isinstance(body, Mapping):
        raise MalformedBatchError(SCHEMA_MISMATCH)

    values = _get_ci(body, "values")
    if not isinstance(values, list):
        raise MalformedBatchError(NO_VALUES_ARRAY)

    records: List[InputRecord] = []
    for value in values:
        if not isinstance(value, Mapping):
            logger.debug("Skipping empty record entry")
            continue

        record_id = _get_ci(value, "recordId")
        if record_id is None:
            logger.debug("Skipping record without recordId")
            continue

        data = _get_ci(value, "data")
        document = _get_ci(data, "document") if isinstance(data, Mapping) else None

        records.append(
            InputRecord(
                record_id=str(record_id),
                document=document if isinstance(document, str) else None,
            )
        )
    return records


async def process_batch(
    records: List[InputRecord],
    extract: ExtractDocument,
    resolve_age: ResolveAge,
    *,
    max_concurrency: int = 1,
    concept_source: str = DEFAULT_CONCEPT_SOURCE,
    age_entity_type: str = DEFAULT_AGE_ENTITY_TYPE,
) -> List[RecordResult]:
    """
    Enrich every record, at most ``max_concurrency`` at a time.

    One RecordResult per input record, in input order, regardless of
    completion order. A failing record never affects the others.
    """
    sem = asyncio.Semaphore(max(1, max_concurrency))

    async def _process_one(record: InputRecord) -> RecordResult:
        async with sem:
            return await run_enrich_record_usecase(
                record,
                extract,
                resolve_age,
                concept_source=concept_source,
                age_entity_type=age_entity_type,
            )

    results = await asyncio.gather(*(_process_one(r) for r in records))

    failed = sum(1 for r in results if not r.ok)
    logger.info("Batch processed: records=%d, failed=%d", len(results), failed)
    return list(results)


def build_response(results: List[RecordResult]) -> Dict[str, Any]:
    return {"values": [r.to_output() for r in results]}


async def enrich_batch(
    body: Any,
    settings: SkillSettings,
    *,
    extract: Optional[ExtractDocument] = None,
    resolve_age: Optional[ResolveAge] = None,
) -> Dict[str, Any]:
    """
    Skill entry point: request body -> response body.

    Collaborators not passed in are built from ``settings`` on a single
    aiohttp session that lives for this batch only.
    MalformedBatchError propagates; record failures never do.
    """
    records = parse_batch(body)
    logger.info("Batch received: records=%d", len(records))

    if extract is not None and resolve_age is not None:
        results = await _process_with_settings(records, extract, resolve_age, settings)
        return build_response(results)

    async with aiohttp.ClientSession() as session:
        if extract is None:
            extract = EntityExtractorClient(
                session,
                settings.ayalon_endpoint,
                timeout=settings.request_timeout,
            )
        if resolve_age is None:
            resolve_age = AgeResolver(
                session,
                settings.text_to_age_endpoint,
                key=settings.text_to_age_key,
                timeout=settings.request_timeout,
            )
        results = await _process_with_settings(records, extract, resolve_age, settings)

    return build_response(results)


async def _process_with_settings(
    records: List[InputRecord],
    extract: ExtractDocument,
    resolve_age: ResolveAge,
    settings: SkillSettings,
) -> List[RecordResult]:
    return await process_batch(
        records,
        extract,
        resolve_age,
        max_concurrency=settings.max_concurrency,
        concept_source=settings.concept_source,
        age_entity_type=settings.age_entity_type,
    )
