"""Environment lookups shared by the config loaders. Blank values count as unset."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence


def optional_env_var(name: str) -> str | None:
    raw = os.getenv(name, "").strip()
    return raw or None


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Look up every name; report all unset ones together rather than the first."""
    found = {name: optional_env_var(name) for name in names}
    absent = [name for name, value in found.items() if value is None]
    if absent:
        raise MissingConfigurationError(absent)
    return {name: value for name, value in found.items() if value is not None}


def optional_float_env_var(name: str) -> float | None:
    text = optional_env_var(name)
    if text is None:
        return None
    try:
        number = float(text)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {text!r}") from exc
    if number < 0:
        raise ConfigurationError(f"{name} must be non-negative, got {text!r}")
    return number
