"""Psionic subsystem: Aether Flux, focus, overload and signatures.

Submodules:
    flux: AFP pools, safe limits and the feedback table
    focus: Maintained powers and concentration
    overload: Overload recovery, feedback accumulation and the surge
    signature: Emotional signatures and their detectability
"""

from __future__ import annotations

from hollow_gear.psionics.flux import (
    PSIONIC_FEEDBACK_TABLE,
    can_afford_power,
    check_overload_risk,
    create_afp_pool,
    get_safe_afp_limit,
    restore_afp,
    roll_psionic_feedback,
    spend_afp,
)
from hollow_gear.psionics.focus import (
    FocusBreakResult,
    add_maintained_power,
    break_all_maintained_powers,
    check_concentration,
    create_focus_state,
    remove_maintained_power,
    update_maintained_powers,
)
from hollow_gear.psionics.overload import (
    activate_psionic_surge,
    apply_feedback,
    enter_overload,
    update_overload_state,
)
from hollow_gear.psionics.signature import (
    create_psionic_signature,
    is_signature_detectable,
    update_signature_after_power_use,
)


__all__ = [
    # Flux
    "PSIONIC_FEEDBACK_TABLE",
    "create_afp_pool",
    "get_safe_afp_limit",
    "can_afford_power",
    "spend_afp",
    "restore_afp",
    "check_overload_risk",
    "roll_psionic_feedback",
    # Focus
    "FocusBreakResult",
    "create_focus_state",
    "add_maintained_power",
    "remove_maintained_power",
    "break_all_maintained_powers",
    "update_maintained_powers",
    "check_concentration",
    # Overload
    "enter_overload",
    "update_overload_state",
    "apply_feedback",
    "activate_psionic_surge",
    # Signature
    "create_psionic_signature",
    "update_signature_after_power_use",
    "is_signature_detectable",
]
