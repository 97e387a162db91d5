"""Pytest configuration and shared fixtures."""
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import pytest

from ayalon_skill.core.config import SkillSettings
from ayalon_skill.domain.models import ExtractionResponse


class FakeResponse:
    """Minimal stand-in for an aiohttp response used as an async context manager."""

    def __init__(self, status: int = 200, body: Union[str, bytes] = "") -> None:
        self.status = status
        self._body = body.encode("utf-8") if isinstance(body, str) else body

    async def read(self) -> bytes:
        return self._body

    async def text(self) -> str:
        return self._body.decode("utf-8")

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc: Any) -> bool:
        return False


class FakeSession:
    """Records requests and replays a canned response (or raises)."""

    def __init__(self, response: Optional[FakeResponse] = None, exc: Optional[BaseException] = None) -> None:
        self.response = response or FakeResponse()
        self.exc = exc
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []

    def _request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.response

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._request("POST", url, **kwargs)

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._request("GET", url, **kwargs)


class FakeExtractor:
    """Extractor double: maps record ids to raw payload dicts, None, or an exception."""

    def __init__(self, outcomes: Dict[str, Any]) -> None:
        self.outcomes = outcomes
        self.calls: List[Tuple[str, str]] = []

    async def __call__(self, record_id: str, text: str) -> Optional[ExtractionResponse]:
        self.calls.append((record_id, text))
        outcome = self.outcomes.get(record_id, {})
        if isinstance(outcome, BaseException):
            raise outcome
        if outcome is None:
            return None
        return ExtractionResponse.model_validate(outcome)


class FakeAgeResolver:
    """Age lookup double backed by a dict; unknown text resolves to 0."""

    def __init__(self, ages: Optional[Dict[str, int]] = None) -> None:
        self.ages = ages or {}
        self.calls: List[str] = []

    async def __call__(self, age_text: str) -> int:
        self.calls.append(age_text)
        return self.ages.get(age_text, 0)


@pytest.fixture
def settings() -> SkillSettings:
    """Provide settings pointing at unreachable endpoints."""
    return SkillSettings(
        ayalon_endpoint="http://extractor.test",
        text_to_age_endpoint="http://age.test/api/TextToAge",
        text_to_age_key="test-key",
        max_concurrency=4,
    )


@pytest.fixture
def fake_extractor_factory() -> Callable[[Dict[str, Any]], FakeExtractor]:
    """Build a FakeExtractor from a record id -> outcome mapping."""
    return FakeExtractor


@pytest.fixture
def fake_age_resolver() -> FakeAgeResolver:
    """Provide an age resolver that knows a couple of phrases."""
    return FakeAgeResolver({"5 years": 5, "10 years": 10, "42-year-old": 42})


@pytest.fixture
def diabetes_payload() -> Dict[str, Any]:
    """Extractor payload for the text 'A 42-year-old with diabetes.'"""
    return {
        "id": "1",
        "text": "A 42-year-old with diabetes.",
        "entities": [
            {
                "startPosition": 2,
                "endPosition": 13,
                "entityType": "AGE",
                "score": 0.99,
                "linking": None,
            },
            {
                "startPosition": 19,
                "endPosition": 27,
                "entityType": "DIAGNOSIS",
                "score": 0.95,
                "linking": [
                    {"concept_id": "C0011847", "source": "MSH"},
                    {"concept_id": "C0011849", "source": "UMLS"},
                ],
            },
        ],
        "relations": [{"relationType": "AGE_OF_PATIENT"}, {"relationType": None}],
    }


@pytest.fixture
def make_session() -> Callable[..., FakeSession]:
    """Build a FakeSession answering with ``status``/``body`` or raising ``exc``."""
    def _make(status: int = 200, body: Union[str, bytes] = "", exc: Optional[BaseException] = None) -> FakeSession:
        return FakeSession(FakeResponse(status, body), exc=exc)
    return _make
