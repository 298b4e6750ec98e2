"""Rules constants for the Hollow Gear engine.

Numeric limits shared across mechanics, psionics, spellcasting and
serialization. Tables that map a level or roll to a record live with the
module that interprets them.
"""

from __future__ import annotations

# =============================================================================
# Ability & Level Bounds
# =============================================================================

MIN_ABILITY_SCORE = 1
"""Minimum ability score."""

MAX_ABILITY_SCORE = 30
"""Maximum ability score."""

MIN_LEVEL = 1
"""Minimum character level."""

MAX_LEVEL = 20
"""Maximum character level."""

MIN_PROFICIENCY_BONUS = 2
"""Proficiency bonus at level 1."""

MAX_PROFICIENCY_BONUS = 6
"""Proficiency bonus at level 17 and above."""

# =============================================================================
# Hit Points & Death
# =============================================================================

MAX_DEATH_SAVES = 3
"""Successes or failures that end the death-save sequence."""

DEATH_SAVE_DC = 10
"""Roll needed for a death-save success."""

MIN_CONCENTRATION_DC = 10
"""Floor for concentration saving throws after damage."""

# =============================================================================
# Heat Stress
# =============================================================================

HEAT_LEVEL_THRESHOLDS = (0, 5, 10, 15)
"""Minimum heat points for heat-stress levels 0 through 3."""

MAX_HEAT_STRESS_LEVEL = 3
"""Highest heat-stress level (Overheated)."""

HEAT_HISTORY_LIMIT = 10
"""Heat accumulation events retained, newest first."""

COOLANT_FLASK_HEAT_REDUCTION = 2
"""Heat removed by one coolant flask."""

SHORT_REST_HEAT_REDUCTION = 2
"""Heat shed over a short rest; a long rest clears all heat."""

# =============================================================================
# Psionics
# =============================================================================

BACKLASH_DAMAGE = "1d4"
"""Psychic backlash when a focus power is broken involuntarily."""

OVERLOAD_MINUTES_PER_EXCESS_AFP = 10
"""Overload recovery minutes per point of excess Aether Flux."""

OVERLOAD_BASE_DC = 12
"""Base save DC to resist overload, before excess AFP is added."""

FEEDBACK_EXPIRY_MINUTES = 10
"""Minutes after which non-persistent feedback effects lapse."""

SIGNATURE_BASE_RANGE_FEET = 30
"""Default range at which a psionic signature can be sensed."""

SIGNATURE_LINGER_MINUTES_PER_UNIT = 10
"""Linger minutes per (power tier x power level)."""

# =============================================================================
# Spellcasting
# =============================================================================

RECENT_CAST_HISTORY_LIMIT = 5
"""Recent casts kept for harmony and history bonuses."""

MAX_RESONANCE_HARMONY = 20
"""Cap on Templar resonance harmony."""

HARMONY_FAILURE_PENALTY = 2
"""Harmony lost on a failed miracle."""

BASE_FAITH_FEEDBACK = 10
"""Faith feedback cap before level and Wisdom are added."""

HEAT_FEEDBACK_THRESHOLD_PERCENT = 60
"""Percent of the heat cap above which spellcasting heat feedback builds."""

HEAT_FEEDBACK_FAILURE_CHANCE = 10
"""Percent chance a spell fails at extreme heat feedback."""

# =============================================================================
# Serialization
# =============================================================================

CURRENT_SCHEMA_VERSION = "1.0.0"
"""Snapshot schema version produced by ``serialize``."""
