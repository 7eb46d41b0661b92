"""Vault HTTP adapter for the ``SecretStore`` port."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from vaulttx.adapters.http_resilience import ResilientClient
from vaulttx.domain.errors import PermissionDeniedError, RemoteTransportError

from .schema import VaultErrorResponse, VaultReadResponse, VaultWriteRequest

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from vaulttx.config.http_resilience import ResilienceConfig
    from vaulttx.config.vault import VaultConfig

log = getLogger(__name__)


def _relative(path: str) -> str:
    return path.strip().lstrip("/")


def _error_detail(response: httpx.Response) -> str:
    try:
        detail = VaultErrorResponse.model_validate(response.json()).message()
    except (ValueError, ValidationError):
        detail = None
    return detail or response.reason_phrase or f"HTTP {response.status_code}"


class VaultSecretStore:
    """Single-key reads, writes and deletes against a Vault KV mount.

    Paths are passed through as given (for KV v2 that is ``<mount>/data/<key>``).
    Each call opens its own client, so the store can be shared between callers.
    """

    def __init__(
        self,
        *,
        config: VaultConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def read(self, path: str) -> Mapping[str, object] | None:
        return asyncio.run(self._read_async(path))

    def write(self, path: str, payload: Mapping[str, object]) -> None:
        asyncio.run(self._write_async(path, payload))

    def delete(self, path: str) -> None:
        asyncio.run(self._delete_async(path))

    async def _read_async(self, path: str) -> Mapping[str, object] | None:
        async with self._client_factory(self._resilience) as client:
            response = await self._perform_request(client, "GET", path, action="read")
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        self._raise_for_status(response, path, action="read")
        try:
            return VaultReadResponse.model_validate(response.json()).secret_data()
        except (ValueError, ValidationError) as exc:
            raise RemoteTransportError(
                f"Unexpected Vault response reading '{path}'", path=path
            ) from exc

    async def _write_async(self, path: str, payload: Mapping[str, object]) -> None:
        body = VaultWriteRequest(data=dict(payload)).model_dump()
        async with self._client_factory(self._resilience) as client:
            response = await self._perform_request(client, "POST", path, action="write", json=body)
        self._raise_for_status(response, path, action="write")
        log.debug("Wrote secret at %s", path)

    async def _delete_async(self, path: str) -> None:
        async with self._client_factory(self._resilience) as client:
            response = await self._perform_request(client, "DELETE", path, action="delete")
        self._raise_for_status(response, path, action="delete")
        log.debug("Deleted secret at %s", path)

    async def _perform_request(
        self,
        client: ResilientClient,
        method: str,
        path: str,
        *,
        action: str,
        json: object | None = None,
    ) -> httpx.Response:
        relative = _relative(path)
        if not relative:
            raise RemoteTransportError(f"Failed to {action} secret: empty path", path=path)
        try:
            return await client.request(method, relative, json=json)
        except httpx.HTTPError as exc:
            raise RemoteTransportError(
                f"Failed to {action} secret at '{path}': {exc}", path=path
            ) from exc

    def _raise_for_status(self, response: httpx.Response, path: str, *, action: str) -> None:
        if response.is_success:
            return
        detail = _error_detail(response)
        log.error("Vault %s of %s failed (%s): %s", action, path, response.status_code, detail)
        if response.status_code == httpx.codes.FORBIDDEN:
            raise PermissionDeniedError(
                f"Vault denied {action} access to '{path}': {detail}", path=path
            )
        raise RemoteTransportError(
            f"Failed to {action} secret at '{path}': {detail}",
            path=path,
            status_code=response.status_code,
        )


def build_vault_store(config: VaultConfig) -> VaultSecretStore:
    return VaultSecretStore(config=config)
