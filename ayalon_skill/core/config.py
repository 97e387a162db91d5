# ayalon_skill/core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ayalon_skill.exceptions import ConfigError
from ayalon_skill.infra.yaml_io import load_yaml

# project root (the directory holding pyproject.toml)
BASE_DIR = Path(__file__).resolve().parents[2]

# .env loading
ENV_PATH = BASE_DIR / ".env"
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)


@dataclass(frozen=True)
class SkillSettings:
    """Runtime settings for the skill.

    - ayalon_endpoint: base URL of the entity extractor (POST {base}/query)
    - text_to_age_endpoint: age lookup URL; empty disables the lookup
    - text_to_age_key: function key sent as the ``code`` query parameter
    - request_timeout: per-call timeout in seconds for both services
    - max_concurrency: records enriched at once within one batch
    - concept_source: linking source whose concepts are reported
    - age_entity_type: entity type that triggers the age lookup
    - log_level: root logging level
    """

    ayalon_endpoint: str = "http://localhost:5000"
    text_to_age_endpoint: str = ""
    text_to_age_key: Optional[str] = None
    request_timeout: float = 30.0
    max_concurrency: int = 4
    concept_source: str = "UMLS"
    age_entity_type: str = "AGE"
    log_level: str = "INFO"


def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return float(v)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _yaml_overrides(path: str) -> Dict[str, Any]:
    """Read the YAML override file and keep only known setting names."""
    try:
        data = load_yaml(Path(path))
    except (OSError, ValueError) as e:
        raise ConfigError(f"Could not read config YAML {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config YAML {path} must contain a mapping, got {type(data).__name__}.")

    known = {f.name for f in fields(SkillSettings)}
    return {k: _coerce(path, k, v) for k, v in data.items() if k in known}


_NUMERIC_FIELDS = {"request_timeout": float, "max_concurrency": int}
_OPTIONAL_FIELDS = {"text_to_age_key"}


def _coerce(path: str, name: str, value: Any) -> Any:
    """Convert one YAML value to the type of its setting."""
    if value is None:
        if name in _OPTIONAL_FIELDS:
            return None
        raise ConfigError(f"Config YAML {path}: {name} must not be null.")

    cast = _NUMERIC_FIELDS.get(name)
    if cast is None:
        return str(value)

    # bool is an int subclass
    if isinstance(value, bool):
        raise ConfigError(f"Config YAML {path}: {name} must be a number, got {value!r}.")
    try:
        return cast(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Config YAML {path}: {name} must be a number, got {value!r}.") from e


def load_settings(config_yaml: Optional[str] = None) -> SkillSettings:
    """
    Build settings from the environment, then apply YAML overrides.

    Environment
    - AYALON_ENDPOINT (default: http://localhost:5000)
    - TEXT_TO_AGE_ENDPOINT (default: empty, lookup disabled)
    - TEXT_TO_AGE_KEY (default: none)
    - AYALON_TIMEOUT_SECONDS (default: 30)
    - ENRICH_MAX_CONCURRENCY (default: 4)
    - CONCEPT_SOURCE (default: UMLS)
    - AGE_ENTITY_TYPE (default: AGE)
    - LOG_LEVEL (default: INFO)
    - ENRICH_CONFIG_YAML (optional YAML file, same keys as SkillSettings)
    """
    settings = SkillSettings(
        ayalon_endpoint=os.getenv("AYALON_ENDPOINT", SkillSettings.ayalon_endpoint),
        text_to_age_endpoint=os.getenv("TEXT_TO_AGE_ENDPOINT", ""),
        text_to_age_key=os.getenv("TEXT_TO_AGE_KEY") or None,
        request_timeout=_env_float("AYALON_TIMEOUT_SECONDS", SkillSettings.request_timeout),
        max_concurrency=_env_int("ENRICH_MAX_CONCURRENCY", SkillSettings.max_concurrency),
        concept_source=os.getenv("CONCEPT_SOURCE", SkillSettings.concept_source),
        age_entity_type=os.getenv("AGE_ENTITY_TYPE", SkillSettings.age_entity_type),
        log_level=os.getenv("LOG_LEVEL", SkillSettings.log_level),
    )

    yaml_path = config_yaml or os.getenv("ENRICH_CONFIG_YAML")
    if yaml_path:
        settings = replace(settings, **_yaml_overrides(yaml_path))

    if settings.max_concurrency < 1:
        settings = replace(settings, max_concurrency=1)

    return settings
