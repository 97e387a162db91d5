"""Tests for the age lookup client."""
import asyncio

import aiohttp
import pytest

from ayalon_skill.exceptions import AgeResolutionError
from ayalon_skill.infra.age_client import AgeResolver, parse_age_payload


@pytest.mark.unit
class TestParseAgePayload:
    """Tests for parse_age_payload function."""

    def test_int(self):
        assert parse_age_payload('{"age": 42}') == 42

    def test_capitalized_key(self):
        assert parse_age_payload('{"Age": 7}') == 7

    def test_numeric_string(self):
        assert parse_age_payload('{"age": " 12 "}') == 12

    def test_integral_float(self):
        assert parse_age_payload('{"age": 3.0}') == 3

    @pytest.mark.parametrize(
        "body",
        ['{"age": "old"}', '{"age": null}', '{"years": 4}', '{"age": true}', '[42]', 'not json', '{"age": 2.5}'],
    )
    def test_unusable(self, body):
        with pytest.raises(AgeResolutionError):
            parse_age_payload(body)

    def test_bytes_body(self):
        assert parse_age_payload(b'{"age": 9}') == 9

    def test_undecodable_bytes(self):
        with pytest.raises(AgeResolutionError, match="unparseable"):
            parse_age_payload(b'{"age": 4\xff}')


class TestAgeResolver:
    """Tests for AgeResolver.resolve."""

    @pytest.mark.asyncio
    async def test_success_sends_query_and_key(self, make_session):
        session = make_session(200, '{"age": 42}')
        resolver = AgeResolver(session, "http://age.test/api/TextToAge", key="secret", timeout=3)

        assert await resolver.resolve("42-year-old") == 42

        method, url, kwargs = session.calls[0]
        assert method == "GET"
        assert url == "http://age.test/api/TextToAge"
        assert kwargs["params"] == {"age": "42-year-old", "code": "secret"}

    @pytest.mark.asyncio
    async def test_no_key(self, make_session):
        session = make_session(200, '{"age": 1}')
        resolver = AgeResolver(session, "http://age.test")

        await resolver("a year")

        assert session.calls[0][2]["params"] == {"age": "a year"}

    @pytest.mark.asyncio
    async def test_non_200_degrades_to_zero(self, make_session):
        resolver = AgeResolver(make_session(404, '{"age": 42}'), "http://age.test")

        assert await resolver.resolve("42") == 0

    @pytest.mark.asyncio
    async def test_malformed_payload_degrades_to_zero(self, make_session):
        resolver = AgeResolver(make_session(200, "<html/>"), "http://age.test")

        assert await resolver.resolve("42") == 0

    @pytest.mark.asyncio
    async def test_undecodable_body_degrades_to_zero(self, make_session):
        resolver = AgeResolver(make_session(200, b'{"age": 4\xff}'), "http://age.test")

        assert await resolver.resolve("four") == 0

    @pytest.mark.asyncio
    async def test_transport_failure_degrades_to_zero(self, make_session):
        resolver = AgeResolver(make_session(exc=aiohttp.ClientConnectionError("down")), "http://age.test")

        assert await resolver.resolve("42") == 0

    @pytest.mark.asyncio
    async def test_timeout_degrades_to_zero(self, make_session):
        resolver = AgeResolver(make_session(exc=asyncio.TimeoutError()), "http://age.test")

        assert await resolver.resolve("42") == 0

    @pytest.mark.asyncio
    async def test_disabled_without_endpoint(self, make_session):
        session = make_session(200, '{"age": 42}')
        resolver = AgeResolver(session, "")

        assert resolver.enabled is False
        assert await resolver.resolve("42") == 0
        assert session.calls == []
