"""
Pet state storage for the Pudgy Pet service.

This module provides the persistence gateway used by the request orchestrator:
an in-memory store for development and tests, and a durable store speaking the
Redis REST protocol (as offered by Upstash / Vercel KV). Both hold exactly one
snapshot per identity.
"""

import asyncio
import json
import logging
from typing import Any, Protocol

import httpx
from pydantic import ValidationError as PydanticValidationError

from .config import DEFAULT_KEY_PREFIX, Settings
from .errors import StoreError
from .models import StatSnapshot

logger = logging.getLogger(__name__)


class StatStore(Protocol):
    """Load and save one snapshot per identity."""

    async def get(self, identity: str) -> StatSnapshot | None: ...

    async def set(self, identity: str, snapshot: StatSnapshot) -> None: ...

    async def aclose(self) -> None: ...


class MemoryStatStore:
    """
    Process-scoped, non-durable snapshot storage.

    Snapshots are immutable, so handing out the stored instance is safe.
    """

    def __init__(self) -> None:
        self._snapshots: dict[str, StatSnapshot] = {}
        self._lock = asyncio.Lock()

    async def get(self, identity: str) -> StatSnapshot | None:
        async with self._lock:
            return self._snapshots.get(identity)

    async def set(self, identity: str, snapshot: StatSnapshot) -> None:
        async with self._lock:
            self._snapshots[identity] = snapshot

    async def aclose(self) -> None:
        return None


class RedisRestStatStore:
    """
    Durable snapshot storage over a Redis REST endpoint.

    Each command is sent as a JSON array (``["GET", key]``) in a POST body,
    authenticated with a bearer token; the reply carries ``result`` or
    ``error``. Snapshots are stored as JSON strings.
    """

    def __init__(
        self,
        url: str,
        token: str,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        client: httpx.AsyncClient | None = None,
        timeout: float = 5.0,
    ) -> None:
        self._url = url.rstrip("/")
        self._key_prefix = key_prefix
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._headers = {"Authorization": f"Bearer {token}"}

    def key_for(self, identity: str) -> str:
        return f"{self._key_prefix}{identity}"

    async def get(self, identity: str) -> StatSnapshot | None:
        result = await self._command("GET", self.key_for(identity))
        if result is None:
            return None

        try:
            raw = json.loads(result) if isinstance(result, str) else result
            return StatSnapshot.model_validate(raw)
        except (json.JSONDecodeError, PydanticValidationError) as e:
            raise StoreError(f"Stored snapshot for {identity!r} is corrupt: {e}") from e

    async def set(self, identity: str, snapshot: StatSnapshot) -> None:
        value = snapshot.model_dump_json(by_alias=True)
        result = await self._command("SET", self.key_for(identity), value)
        if result != "OK":
            raise StoreError(f"Unexpected SET reply for {identity!r}: {result!r}")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _command(self, *args: str) -> Any:
        try:
            response = await self._client.post(
                self._url, json=list(args), headers=self._headers
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise StoreError(
                f"Redis REST {args[0]} failed with HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise StoreError(f"Redis REST {args[0]} failed: {e}") from e
        except ValueError as e:
            raise StoreError(f"Redis REST {args[0]} returned invalid JSON") from e

        if not isinstance(payload, dict):
            raise StoreError(f"Redis REST {args[0]} returned {payload!r}")
        if "error" in payload:
            raise StoreError(f"Redis REST {args[0]} error: {payload['error']}")
        return payload.get("result")


def build_store(settings: Settings) -> StatStore:
    """Pick the durable store when configured, the in-memory one otherwise."""
    url, token = settings.kv_rest_url, settings.kv_rest_token
    if url and token:
        logger.info("Using Redis REST store at %s", url)
        return RedisRestStatStore(
            url,
            token,
            key_prefix=settings.key_prefix,
        )

    logger.warning("KV_REST_API_URL/KV_REST_API_TOKEN not set, using in-memory store")
    return MemoryStatStore()
