# ayalon_skill/infra/age_client.py

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional, Union

import aiohttp

from ayalon_skill.exceptions import AgeResolutionError

logger = logging.getLogger(__name__)

NO_AGE = 0


def parse_age_payload(body: Union[str, bytes]) -> int:
    """Read ``{"age": <int>}`` from the lookup response (key is case-insensitive).

    Raw bytes are decoded here, so an undecodable body is a bad payload too.
    """
    try:
        payload: Any = json.loads(body)
    except (ValueError, TypeError) as e:
        raise AgeResolutionError(f"unparseable age payload: {e}") from e

    if not isinstance(payload, dict):
        raise AgeResolutionError("age payload is not an object")

    value = next((v for k, v in payload.items() if k.lower() == "age"), None)

    # bool is an int subclass
    if isinstance(value, bool) or value is None:
        raise AgeResolutionError(f"age payload has no usable age: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as e:
            raise AgeResolutionError(f"age value is not an integer: {value!r}") from e
    if isinstance(value, float) and value.is_integer():
        return int(value)

    raise AgeResolutionError(f"age value is not an integer: {value!r}")


class AgeResolver:
    """
    Best-effort text-to-age lookup.

    GET {endpoint}?age=<text>[&code=<key>]  ->  {"age": 42}

    resolve() never raises for lookup problems: any failure is logged and
    reported as age 0. With no endpoint configured every lookup is 0.
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession],
        endpoint: str,
        key: Optional[str] = None,
        timeout: float = 30.0,
    ) -> None:
        self._session = session
        self._endpoint = endpoint
        self._key = key
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def enabled(self) -> bool:
        return bool(self._endpoint) and self._session is not None

    async def resolve(self, age_text: str) -> int:
        if not self.enabled:
            return NO_AGE

        try:
            return await self._lookup(age_text)
        except AgeResolutionError as e:
            logger.warning("Age lookup degraded to %d: %s", NO_AGE, e)
            return NO_AGE

    async def __call__(self, age_text: str) -> int:
        return await self.resolve(age_text)

    async def _lookup(self, age_text: str) -> int:
        params: Dict[str, str] = {"age": age_text}
        if self._key:
            params["code"] = self._key

        try:
            async with self._session.get(self._endpoint, params=params, timeout=self._timeout) as resp:
                if resp.status != 200:
                    raise AgeResolutionError(f"age lookup returned status={resp.status}")
                body = await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise AgeResolutionError(f"age lookup call failed: {e!r}") from e

        return parse_age_payload(body)
