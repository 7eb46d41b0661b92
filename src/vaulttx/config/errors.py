"""Errors raised while reading vaulttx settings from the environment.

The ``VAULT_ALLOW_READ`` and ``VAULT_ALLOW_WRITE`` access flags never raise:
only a literal ``false`` turns reads off and only a literal ``true`` turns
writes on, anything else keeps the default.
"""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A vaulttx setting is present but unusable.

    For example a ``VAULT_ADDR`` that is not an http(s) URL, a non-numeric or
    non-positive ``VAULT_TIMEOUT_SECONDS``, or an unknown ``LOG_LEVEL``.
    """


class MissingConfigurationError(ConfigurationError):
    """A required vaulttx setting, such as ``VAULT_TOKEN``, is unset or blank."""
