"""Invariant markers for callsnip."""

from __future__ import annotations

from typing import NoReturn

from callsnip.exceptions import NeverThrown


def never(reason: str = "", **env: object) -> NoReturn:
    """Mark a code path as intentionally unreachable.

    The env payload is diagnostic metadata attached to the raised exception.
    """
    raise NeverThrown(reason or "never() marker reached", env=env)

