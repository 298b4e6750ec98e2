"""Spellcasting archetypes.

Arcanists spend Aether Flux on formulae and overclock them at the cost
of heat. Templars spend Resonance Charges on miracles, overchannel them
and build harmony from consecutive casts of one resonance type. Heat
near the cap feeds back into both.
"""

from __future__ import annotations

from hollow_gear.spellcasting.arcanist import cast_formula, create_arcanist_state
from hollow_gear.spellcasting.shared import (
    CastingResult,
    FeedbackEffects,
    RiskPenalties,
    calculate_feedback_effects,
    calculate_risk_penalties,
    make_concentration_save,
)
from hollow_gear.spellcasting.templar import cast_miracle, create_templar_state


__all__ = [
    "CastingResult",
    "RiskPenalties",
    "FeedbackEffects",
    "calculate_risk_penalties",
    "calculate_feedback_effects",
    "make_concentration_save",
    "create_arcanist_state",
    "cast_formula",
    "create_templar_state",
    "cast_miracle",
]
