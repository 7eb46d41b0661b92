"""Domain port definitions for adapters."""

from __future__ import annotations

from .secret_store import SecretStore

__all__ = ["SecretStore"]
