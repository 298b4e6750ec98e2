"""Core rules mechanics for Hollow Gear characters.

Submodules:
    resources: Generic current/maximum/temporary pools
    death: Hit points, death saves and massive damage
    abilities: Ability modifiers, proficiency and initiative
    heat: Heat stress levels, steam vent harnesses and coolant
"""

from __future__ import annotations

from hollow_gear.mechanics.abilities import (
    calculate_initiative,
    calculate_modifier,
    calculate_proficiency_bonus,
    validate_ability_score,
    validate_ability_scores,
    validate_level,
    validate_proficiency_bonus,
)
from hollow_gear.mechanics.death import (
    DamageOutcome,
    DeathSaveOutcome,
    determine_life_state,
    heal_character,
    is_dead,
    is_stable,
    resolve_death_save,
    revive,
    stabilize,
    take_damage,
    validate_death_saves,
    validate_hit_points,
)
from hollow_gear.mechanics.heat import (
    HARNESS_SPECS,
    SteamVentResult,
    add_heat_points,
    calculate_heat_stress_level,
    create_heat_stress_state,
    create_steam_vent_harness,
    get_heat_stress_effects,
    reduce_heat,
    use_coolant_flask,
    use_steam_vent,
    validate_heat_stress,
)
from hollow_gear.mechanics.resources import (
    add_temporary,
    apply_damage,
    apply_healing,
    create_pool,
    has_resources,
    resource_percentage,
    restore_pool,
    spend_resources,
    validate_resource_pool,
)


__all__ = [
    # Resources
    "create_pool",
    "apply_damage",
    "apply_healing",
    "add_temporary",
    "has_resources",
    "spend_resources",
    "restore_pool",
    "resource_percentage",
    "validate_resource_pool",
    # Death
    "DamageOutcome",
    "DeathSaveOutcome",
    "take_damage",
    "resolve_death_save",
    "heal_character",
    "revive",
    "stabilize",
    "is_stable",
    "is_dead",
    "determine_life_state",
    "validate_hit_points",
    "validate_death_saves",
    # Abilities
    "calculate_modifier",
    "calculate_proficiency_bonus",
    "calculate_initiative",
    "validate_ability_score",
    "validate_ability_scores",
    "validate_level",
    "validate_proficiency_bonus",
    # Heat
    "HARNESS_SPECS",
    "SteamVentResult",
    "calculate_heat_stress_level",
    "get_heat_stress_effects",
    "create_heat_stress_state",
    "add_heat_points",
    "reduce_heat",
    "create_steam_vent_harness",
    "use_steam_vent",
    "use_coolant_flask",
    "validate_heat_stress",
]
