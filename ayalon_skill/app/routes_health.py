# ayalon_skill/app/routes_health.py

from __future__ import annotations
from fastapi import APIRouter

router = APIRouter()

@router.get("/health")
async def health():
    """
    Simple liveness check.

    - only reports that the process is up
    - does not call the extractor or the age lookup
    """
    return {
        "status": "ok",
        "service": "ayalon-entity-search",
    }
