"""Exception markers for callsnip."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping


class NeverRaise(RuntimeError):
    """Sentinel exception for paths that must be unreachable.

    The snippet core never raises on engine data; this is reserved for
    invalid boundary input and for dispatch arms outside a closed union.
    """

    def __init__(self, message: str, *, env: Mapping[str, object] | None = None):
        super().__init__(message)
        self.reason = message
        self.env = MappingProxyType(dict(env or {}))

    @property
    def env_dict(self) -> dict[str, str]:
        return {str(key): str(value) for key, value in self.env.items()}


class NeverThrown(NeverRaise):
    """Alias for NeverRaise used by the explicit never() marker."""
