# ayalon_skill/app/main.py
from __future__ import annotations
import logging
from typing import Optional

from fastapi import FastAPI

from ayalon_skill import __version__
from ayalon_skill.core.config import SkillSettings, load_settings
from ayalon_skill.domain.aggregation import ResolveAge
from ayalon_skill.usecases.enrich_record import ExtractDocument
from ayalon_skill.app.routes_enrichment import router as enrichment_router
from ayalon_skill.app.routes_health import router as health_router

_SETTINGS = load_settings()

logging.basicConfig(
    level=getattr(logging, _SETTINGS.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
)

logger = logging.getLogger(__name__)

def create_app(
    settings: Optional[SkillSettings] = None,
    *,
    extract: Optional[ExtractDocument] = None,
    resolve_age: Optional[ResolveAge] = None,
) -> FastAPI:
    """
    Build the app.

    ``extract`` / ``resolve_age`` replace the HTTP clients when given;
    otherwise each batch opens its own session against the configured
    endpoints.
    """
    settings = settings or _SETTINGS

    app = FastAPI(
        title="Ayalon Entity Search Skill",
        version=__version__,
    )

    app.state.settings = settings
    app.state.extract = extract
    app.state.resolve_age = resolve_age

    app.include_router(enrichment_router)
    app.include_router(health_router)

    logger.info(
        "FastAPI app initialized (extractor=%s, age_lookup=%s, max_concurrency=%d)",
        settings.ayalon_endpoint,
        "on" if settings.text_to_age_endpoint else "off",
        settings.max_concurrency,
    )
    return app

app = create_app()
