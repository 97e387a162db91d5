# ayalon_skill/app/routes_enrichment.py
from __future__ import annotations
import json
import logging
from typing import Any, List, Literal, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ayalon_skill.exceptions import MalformedBatchError
from ayalon_skill.services.enrichment_service import enrich_batch

logger = logging.getLogger(__name__)
router = APIRouter()

# ---------------------------
# Response schemas (documentation only; the route returns the
# service dict so null parts stay null on the wire)
# ---------------------------

class EnrichmentData(BaseModel):
    entityTypes: List[str] = Field(default_factory=list)
    concepts: List[str] = Field(default_factory=list)
    relations: List[str] = Field(default_factory=list)
    age: int = 0


class RecordMessage(BaseModel):
    message: str


class OutputRecord(BaseModel):
    recordId: str
    data: Optional[EnrichmentData] = None
    errors: Optional[List[RecordMessage]] = None
    warnings: Optional[List[RecordMessage]] = None


class EntitySearchResponse(BaseModel):
    values: List[OutputRecord]


class EntitySearchErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    error_type: str
    message: str


# ---------------------------
# Routes
# ---------------------------

@router.post(
    "/api/EntitySearch",
    responses={200: {"model": EntitySearchResponse}, 400: {"model": EntitySearchErrorResponse}},
)
@router.post(
    "/enrich",
    responses={200: {"model": EntitySearchResponse}, 400: {"model": EntitySearchErrorResponse}},
)
async def entity_search_route(request: Request):
    """
    Custom skill endpoint.

    - input : {"values": [{"recordId": ..., "data": {"document": ...}}]}
    - output: {"values": [{"recordId", "data", "errors", "warnings"}]}

    Only a malformed batch fails the request (400); record failures are
    reported in that record's ``errors``.
    """
    body: Any
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        body = None

    state = request.app.state
    try:
        return await enrich_batch(
            body,
            state.settings,
            extract=state.extract,
            resolve_age=state.resolve_age,
        )
    except MalformedBatchError as e:
        logger.warning("Malformed batch: %s", e)
        return JSONResponse(
            status_code=400,
            content=EntitySearchErrorResponse(
                error_type="malformed_batch",
                message=str(e),
            ).model_dump(),
        )
