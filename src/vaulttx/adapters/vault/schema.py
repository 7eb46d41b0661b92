"""Pydantic models describing the Vault HTTP API payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class VaultBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class VaultReadResponse(VaultBaseModel):
    """Envelope of ``GET /v1/<path>`` for KV v1 and KV v2 mounts."""

    data: dict[str, Any] | None = None

    def secret_data(self) -> dict[str, Any] | None:
        """Return the secret itself, or ``None`` for a soft-deleted KV v2 version.

        Writes always send ``{"data": payload}``. KV v2 answers with the payload
        under ``data.data`` next to ``data.metadata``; a KV v1 mount stores the
        body as sent, so the payload is again under ``data.data``. Secrets
        without that nesting are returned from ``data`` as they are.
        """

        envelope = self.data or {}
        inner = envelope.get("data")
        if isinstance(inner, dict):
            return dict(inner)
        if "metadata" in envelope:
            return None
        return dict(envelope)


class VaultWriteRequest(VaultBaseModel):
    data: dict[str, Any]


class VaultErrorResponse(VaultBaseModel):
    errors: list[str] = Field(default_factory=list)

    def message(self) -> str | None:
        return "; ".join(self.errors) if self.errors else None
