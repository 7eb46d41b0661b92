"""Public interface for the Vault adapter."""

from __future__ import annotations

from .client import VaultSecretStore, build_vault_store
from .schema import VaultErrorResponse, VaultReadResponse, VaultWriteRequest

__all__ = [
    "VaultErrorResponse",
    "VaultReadResponse",
    "VaultSecretStore",
    "VaultWriteRequest",
    "build_vault_store",
]
