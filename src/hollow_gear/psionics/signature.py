"""Psionic signatures.

Every psionic character leaves a sensory trace shaped by their
emotional baseline. It lingers for ``tier * power_level * 10`` minutes
after a power is used.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from hollow_gear.core.constants import SIGNATURE_BASE_RANGE_FEET, SIGNATURE_LINGER_MINUTES_PER_UNIT
from hollow_gear.models.enums import EmotionalState, SignatureIntensity
from hollow_gear.models.psionics import PsionicSignature, SignatureManifestation


SIGNATURE_MANIFESTATIONS: dict[EmotionalState, SignatureManifestation] = {
    EmotionalState.RAGE: SignatureManifestation(
        visual="Red flickers of heat and vibration",
        auditory="Low rumbling and crackling sounds",
        emotional="Waves of anger and aggression",
        intensity=SignatureIntensity.STRONG,
    ),
    EmotionalState.CALM: SignatureManifestation(
        visual="Cool, blue-hued resonance",
        auditory="Gentle humming and soft chimes",
        emotional="Peaceful, centering presence",
        intensity=SignatureIntensity.MODERATE,
    ),
    EmotionalState.CURIOSITY: SignatureManifestation(
        visual="Rapid, flickering pulses of yellow-white light",
        auditory="Metallic chimes and quick tonal shifts",
        emotional="Inquisitive, probing sensation",
        intensity=SignatureIntensity.MODERATE,
    ),
    EmotionalState.DESPAIR: SignatureManifestation(
        visual="Distorted shadows and faint afterimages",
        auditory="Hollow echoes and mournful tones",
        emotional="Heavy sadness and hopelessness",
        intensity=SignatureIntensity.STRONG,
    ),
    EmotionalState.JOY: SignatureManifestation(
        visual="Bright golden sparkles and warm glows",
        auditory="Musical harmonies and uplifting tones",
        emotional="Infectious happiness and energy",
        intensity=SignatureIntensity.MODERATE,
    ),
    EmotionalState.FEAR: SignatureManifestation(
        visual="Erratic purple flashes and trembling edges",
        auditory="Sharp discordant notes and whispers",
        emotional="Anxiety and unease",
        intensity=SignatureIntensity.STRONG,
    ),
    EmotionalState.DETERMINATION: SignatureManifestation(
        visual="Steady silver-white radiance",
        auditory="Rhythmic pulses and resolute tones",
        emotional="Unwavering resolve and focus",
        intensity=SignatureIntensity.STRONG,
    ),
    EmotionalState.CONFUSION: SignatureManifestation(
        visual="Swirling multicolored patterns",
        auditory="Overlapping tones and static",
        emotional="Disorientation and uncertainty",
        intensity=SignatureIntensity.FAINT,
    ),
}


def create_psionic_signature(
    character_id: str,
    base_emotion: EmotionalState,
    power_level: int = 1,
) -> PsionicSignature:
    """Create a signature from the emotion table."""
    return PsionicSignature(
        character_id=character_id,
        base_emotion=base_emotion,
        manifestation=SIGNATURE_MANIFESTATIONS[base_emotion],
        detectability_range=SIGNATURE_BASE_RANGE_FEET,
        power_level=power_level,
    )


def calculate_signature_intensity(power_tier: int, power_level: int) -> SignatureIntensity:
    """Bucket ``tier + level // 3`` into an intensity band.

    Example:
        >>> calculate_signature_intensity(1, 3)
        <SignatureIntensity.FAINT: 'faint'>
        >>> calculate_signature_intensity(5, 6)
        <SignatureIntensity.OVERWHELMING: 'overwhelming'>
    """
    intensity = power_tier + power_level // 3
    if intensity >= 7:
        return SignatureIntensity.OVERWHELMING
    if intensity >= 5:
        return SignatureIntensity.STRONG
    if intensity >= 3:
        return SignatureIntensity.MODERATE
    return SignatureIntensity.FAINT


def calculate_signature_linger_duration(power_tier: int, power_level: int) -> int:
    """Minutes a signature stays detectable after use."""
    return power_tier * power_level * SIGNATURE_LINGER_MINUTES_PER_UNIT


def update_signature_after_power_use(
    signature: PsionicSignature,
    power_tier: int,
    *,
    used_at: datetime,
    current_emotion: EmotionalState | None = None,
) -> PsionicSignature:
    """Refresh a signature after a power is used.

    A current emotion different from the baseline temporarily takes over
    the manifestation. Intensity always follows the power used.

    Args:
        signature: Existing signature.
        power_tier: Tier of the power just used.
        used_at: When the power was used.
        current_emotion: Emotion at the moment of use, if known.

    Returns:
        Updated signature.
    """
    intensity = calculate_signature_intensity(power_tier, signature.power_level)
    if current_emotion is not None and current_emotion != signature.base_emotion:
        manifestation = SIGNATURE_MANIFESTATIONS[current_emotion].evolve(intensity=intensity)
    else:
        manifestation = signature.manifestation.evolve(intensity=intensity)
    return signature.evolve(
        manifestation=manifestation,
        last_used=used_at,
        last_power_tier=power_tier,
    )


def is_signature_detectable(
    signature: PsionicSignature,
    now: datetime,
    power_tier: int | None = None,
) -> bool:
    """Check whether the trace of the last power is still detectable.

    Args:
        signature: Signature to check.
        now: Current game time.
        power_tier: Tier to use; defaults to the last power's tier.

    Returns:
        True while ``now - last_used`` is under the linger duration.
    """
    if signature.last_used is None:
        return False
    tier = power_tier if power_tier is not None else signature.last_power_tier
    if tier is None:
        return False
    linger = timedelta(minutes=calculate_signature_linger_duration(tier, signature.power_level))
    return now - signature.last_used < linger


__all__ = [
    "SIGNATURE_MANIFESTATIONS",
    "create_psionic_signature",
    "calculate_signature_intensity",
    "calculate_signature_linger_duration",
    "update_signature_after_power_use",
    "is_signature_detectable",
]
