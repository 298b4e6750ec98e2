"""Bounded resource pools, hit points and death saves."""

from __future__ import annotations

from pydantic import Field

from hollow_gear.models.base import EngineModel


class ResourcePool(EngineModel):
    """A bounded numeric pool with a temporary-points overlay.

    Temporary points never stack: granting more keeps the larger of the
    old and new values. Damage and spending drain temporary points first.

    Attributes:
        current: Points available, 0 to ``maximum``.
        maximum: Pool capacity.
        temporary: Overlay points consumed before ``current``.

    Example:
        >>> pool = ResourcePool(current=8, maximum=10, temporary=3)
        >>> pool.effective
        11
    """

    current: int = Field(description="Points currently available")
    maximum: int = Field(description="Pool capacity")
    temporary: int = Field(default=0, description="Temporary overlay points")

    @property
    def effective(self) -> int:
        """Current plus temporary points."""
        return max(0, self.current) + max(0, self.temporary)

    @property
    def is_empty(self) -> bool:
        """Whether no points remain, temporary included."""
        return self.effective == 0


class HitPoints(ResourcePool):
    """Hit points for a character."""

    @property
    def is_at_zero(self) -> bool:
        """Whether the character has dropped to 0 hit points."""
        return self.current <= 0


class DeathSaves(EngineModel):
    """Death-save counters, each clamped to the range 0-3.

    Attributes:
        successes: Successful death saves.
        failures: Failed death saves.
    """

    successes: int = Field(default=0, description="Death save successes (0-3)")
    failures: int = Field(default=0, description="Death save failures (0-3)")


__all__ = ["ResourcePool", "HitPoints", "DeathSaves"]
