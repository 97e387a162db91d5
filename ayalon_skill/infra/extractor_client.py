# ayalon_skill/infra/extractor_client.py

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional, Union

import aiohttp
from pydantic import ValidationError

from ayalon_skill.domain.models import ExtractionResponse
from ayalon_skill.exceptions import ExtractionError

logger = logging.getLogger(__name__)


def parse_extraction_payload(body: Union[str, bytes]) -> Optional[ExtractionResponse]:
    """
    Parse the extractor's JSON body.

    The extractor answers with one array element per submitted document.
    Only one document is sent per call, so only element 0 is used.

    - JSON ``null``  -> None (caller emits an empty enrichment)
    - empty array    -> ExtractionError
    - anything else that does not validate -> ExtractionError
    """
    try:
        payload: Any = json.loads(body) if body and body.strip() else None
    except ValueError as e:
        raise ExtractionError(f"Entity extraction returned an unparseable payload: {e}") from e

    if payload is None:
        return None

    if not isinstance(payload, list):
        raise ExtractionError(
            f"Entity extraction returned an unparseable payload: expected an array, got {type(payload).__name__}."
        )

    if not payload:
        raise ExtractionError("Entity extraction returned no documents.")

    try:
        return ExtractionResponse.model_validate(payload[0])
    except ValidationError as e:
        raise ExtractionError(f"Entity extraction returned an unparseable payload: {e}") from e


class EntityExtractorClient:
    """
    Client for the Ayalon entity extraction service.

    POST {base_url}/query  with  {"documents": [{"id": ..., "text": ...}]}
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str,
        timeout: float = 30.0,
    ) -> None:
        self._session = session
        self._url = base_url.rstrip("/") + "/query"
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def extract(self, record_id: str, text: str) -> Optional[ExtractionResponse]:
        payload = {"documents": [{"id": record_id, "text": text}]}

        try:
            async with self._session.post(self._url, json=payload, timeout=self._timeout) as resp:
                if not 200 <= resp.status < 300:
                    raise ExtractionError(f"Entity extraction failed: status={resp.status}")
                body = await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning("Entity extraction call to %s failed for record %s: %r", self._url, record_id, e)
            raise ExtractionError(f"Entity extraction call failed: {e!r}") from e

        return parse_extraction_payload(body)

    async def __call__(self, record_id: str, text: str) -> Optional[ExtractionResponse]:
        return await self.extract(record_id, text)
