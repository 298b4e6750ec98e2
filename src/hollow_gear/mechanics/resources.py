"""Resource pool primitive.

Every bounded pool in the engine (hit points, Aether Flux, Resonance
Charges) goes through these functions. They never mutate their input
and always keep ``0 <= current <= maximum``.

Example:
    >>> pool = create_pool(10)
    >>> pool = add_temporary(pool, 4)
    >>> apply_damage(pool, 6).current
    8
"""

from __future__ import annotations

from typing import TypeVar

from hollow_gear.models.pools import ResourcePool
from hollow_gear.models.results import ValidationIssue, ValidationResult


PoolT = TypeVar("PoolT", bound=ResourcePool)


def create_pool(maximum: int, current: int | None = None, temporary: int = 0) -> ResourcePool:
    """Create a pool, full unless ``current`` is given.

    Args:
        maximum: Pool capacity.
        current: Starting points; defaults to ``maximum``.
        temporary: Starting temporary points.

    Returns:
        A new ResourcePool with ``current`` clamped into range.
    """
    start = maximum if current is None else current
    return ResourcePool(
        current=max(0, min(start, maximum)),
        maximum=maximum,
        temporary=max(0, temporary),
    )


def apply_damage(pool: PoolT, amount: int) -> PoolT:
    """Apply damage, draining temporary points first.

    Args:
        pool: The pool to damage.
        amount: Damage dealt; negative values count as zero.

    Returns:
        A new pool with ``current`` floored at 0.
    """
    amount = max(0, amount)
    absorbed = min(amount, pool.temporary)
    remaining = amount - absorbed
    return pool.model_copy(
        update={
            "temporary": pool.temporary - absorbed,
            "current": max(0, pool.current - remaining),
        }
    )


def apply_healing(pool: PoolT, amount: int) -> PoolT:
    """Restore points up to the maximum. Temporary points are untouched."""
    amount = max(0, amount)
    return pool.model_copy(update={"current": min(pool.maximum, pool.current + amount)})


def add_temporary(pool: PoolT, amount: int) -> PoolT:
    """Grant temporary points, keeping the larger of old and new.

    Args:
        pool: The pool receiving temporary points.
        amount: Temporary points granted.

    Returns:
        A new pool. Temporary points never stack.
    """
    return pool.model_copy(update={"temporary": max(pool.temporary, amount)})


def has_resources(pool: ResourcePool, cost: int) -> bool:
    """Check whether the pool can pay ``cost`` from current and temporary points."""
    return pool.effective >= cost


def spend_resources(pool: PoolT, amount: int) -> PoolT:
    """Spend points, temporary first, flooring ``current`` at 0."""
    return apply_damage(pool, amount)


def restore_pool(pool: PoolT, *, clear_temporary: bool = False) -> PoolT:
    """Refill the pool to maximum.

    Args:
        pool: The pool to refill.
        clear_temporary: Also drop temporary points.

    Returns:
        A new full pool.
    """
    update: dict[str, int] = {"current": pool.maximum}
    if clear_temporary:
        update["temporary"] = 0
    return pool.model_copy(update=update)


def resource_percentage(pool: ResourcePool) -> float:
    """Get ``current`` as a percentage of ``maximum``, rounded to 2 places."""
    if pool.maximum <= 0:
        return 0.0
    return round(max(0, pool.current) / pool.maximum * 100, 2)


def validate_resource_pool(pool: ResourcePool, context: str = "") -> ValidationResult[ResourcePool]:
    """Validate pool bounds, reporting every violation.

    Args:
        pool: Pool to check.
        context: Field prefix for reported issues (e.g., 'aetherFluxPoints').

    Returns:
        ValidationResult carrying the pool or its issues.
    """
    prefix = f"{context}." if context else ""
    issues: list[ValidationIssue] = []

    if pool.current < 0:
        issues.append(
            ValidationIssue(
                f"{prefix}current",
                "Current value must be a non-negative integer",
                "INVALID_CURRENT",
                {"current": pool.current},
            )
        )
    if pool.maximum < 0:
        issues.append(
            ValidationIssue(
                f"{prefix}maximum",
                "Maximum value must be a non-negative integer",
                "INVALID_MAXIMUM",
                {"maximum": pool.maximum},
            )
        )
    if pool.temporary < 0:
        issues.append(
            ValidationIssue(
                f"{prefix}temporary",
                "Temporary value must be a non-negative integer",
                "INVALID_TEMPORARY",
                {"temporary": pool.temporary},
            )
        )
    if pool.current > pool.maximum:
        issues.append(
            ValidationIssue(
                f"{prefix}current",
                "Current value cannot exceed maximum",
                "CURRENT_EXCEEDS_MAXIMUM",
                {"current": pool.current, "maximum": pool.maximum},
            )
        )

    return ValidationResult.from_issues(pool, issues)


__all__ = [
    "create_pool",
    "apply_damage",
    "apply_healing",
    "add_temporary",
    "has_resources",
    "spend_resources",
    "restore_pool",
    "resource_percentage",
    "validate_resource_pool",
]
