"""Shared type aliases."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeAlias


RandomSource: TypeAlias = Callable[[], float]
"""Zero-argument callable returning a float in [0, 1)."""


__all__ = ["RandomSource"]
