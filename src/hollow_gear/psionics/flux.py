"""Aether Flux pool, overload risk and the feedback table.

A psionic character spends Aether Flux Points (AFP) to manifest powers.
Spending more AFP in one manifestation than the character level risks
overload, resisted with a Constitution save against ``12 + excess``.
"""

from __future__ import annotations

from datetime import datetime

from hollow_gear.core.constants import OVERLOAD_BASE_DC
from hollow_gear.core.exceptions import DiceRollError
from hollow_gear.mechanics.resources import add_temporary, create_pool, has_resources, restore_pool
from hollow_gear.models.enums import FeedbackType, RestType
from hollow_gear.models.pools import ResourcePool
from hollow_gear.models.psionics import (
    AreaEffect,
    FeedbackDamage,
    FeedbackEffect,
    PsionicOverloadState,
)


PSIONIC_FEEDBACK_TABLE: dict[int, FeedbackEffect] = {
    1: FeedbackEffect(
        type=FeedbackType.MINOR_HEADACHE,
        description="Minor headache: disadvantage on next roll",
        conditions=("disadvantage_next_roll",),
    ),
    2: FeedbackEffect(
        type=FeedbackType.STATIC_ECHO,
        description="Static echo: random nearby device malfunctions",
        conditions=("device_malfunction",),
    ),
    3: FeedbackEffect(
        type=FeedbackType.NEURAL_SPARK,
        description="Neural spark: take 1d6 psychic damage",
        damage=FeedbackDamage(dice="1d6", type="psychic"),
    ),
    4: FeedbackEffect(
        type=FeedbackType.AETHER_FLARE,
        description="Aether flare: emit 10-ft light, all in area take 1d4 fire",
        damage=FeedbackDamage(dice="1d4", type="fire"),
        area_effect=AreaEffect(radius=10, effect="bright light and fire damage"),
    ),
    5: FeedbackEffect(
        type=FeedbackType.MINDFRACTURE,
        description="Mindfracture: lose concentration, drop active powers",
        conditions=("lose_concentration", "drop_active_powers"),
    ),
    6: FeedbackEffect(
        type=FeedbackType.COLLAPSE,
        description="Collapse: stunned until end of next turn",
        conditions=("stunned",),
        duration="end of next turn",
    ),
}


def calculate_maximum_afp(class_level: int, ability_modifier: int) -> int:
    """Maximum AFP: class level plus ability modifier, minimum 2."""
    return max(2, class_level + ability_modifier)


def create_afp_pool(class_level: int, ability_modifier: int) -> ResourcePool:
    """Create a full AFP pool for a psionic character."""
    return create_pool(calculate_maximum_afp(class_level, ability_modifier))


def get_safe_afp_limit(character_level: int) -> int:
    """AFP that can be spent on one manifestation without overload risk."""
    return character_level


def can_afford_power(pool: ResourcePool, afp_cost: int) -> bool:
    """Check whether current plus temporary AFP covers the cost."""
    return has_resources(pool, afp_cost)


def spend_afp(pool: ResourcePool, amount: int) -> tuple[ResourcePool, bool]:
    """Spend AFP, temporary points first.

    Args:
        pool: AFP pool.
        amount: AFP to spend.

    Returns:
        Tuple of the new pool and whether the spend succeeded. An
        unaffordable spend returns the pool unchanged.
    """
    if not can_afford_power(pool, amount):
        return pool, False
    from_temporary = min(amount, pool.temporary)
    return (
        pool.evolve(
            temporary=pool.temporary - from_temporary,
            current=pool.current - (amount - from_temporary),
        ),
        True,
    )


def restore_afp(pool: ResourcePool, rest_type: RestType) -> ResourcePool:
    """Refill AFP on any rest; a long rest also clears temporary AFP."""
    return restore_pool(pool, clear_temporary=rest_type == RestType.LONG)


def add_temporary_afp(pool: ResourcePool, amount: int) -> ResourcePool:
    """Grant temporary AFP; like all temporary points it does not stack."""
    return add_temporary(pool, amount)


def check_overload_risk(
    afp_to_spend: int,
    character_level: int,
    *,
    at: datetime | None = None,
) -> PsionicOverloadState:
    """Assess whether spending ``afp_to_spend`` overloads the character.

    Args:
        afp_to_spend: AFP committed to one manifestation.
        character_level: Character level (the safe limit).
        at: Time of the manifestation, recorded if it overloads.

    Returns:
        Overload state describing the risk.

    Example:
        >>> risk = check_overload_risk(7, 5)
        >>> risk.excess_afp, risk.save_dc
        (2, 14)
    """
    excess = max(0, afp_to_spend - get_safe_afp_limit(character_level))
    overloaded = excess > 0
    return PsionicOverloadState(
        is_overloaded=overloaded,
        excess_afp=excess,
        save_dc=OVERLOAD_BASE_DC + excess,
        feedback_risk=overloaded,
        last_overload_time=at if overloaded else None,
    )


def roll_psionic_feedback(roll: int) -> FeedbackEffect:
    """Look up a d6 roll on the feedback table.

    Raises:
        DiceRollError: If ``roll`` is not between 1 and 6.
    """
    try:
        return PSIONIC_FEEDBACK_TABLE[roll]
    except KeyError as exc:
        raise DiceRollError(
            "Psionic feedback roll must be between 1 and 6",
            expression="1d6",
            details={"roll": roll},
        ) from exc


__all__ = [
    "PSIONIC_FEEDBACK_TABLE",
    "calculate_maximum_afp",
    "create_afp_pool",
    "get_safe_afp_limit",
    "can_afford_power",
    "spend_afp",
    "restore_afp",
    "add_temporary_afp",
    "check_overload_risk",
    "roll_psionic_feedback",
]
