"""AQI severity classification and health guidance."""

from __future__ import annotations

from airaware_cli.core.constants import GUIDANCE_TABLE, TIER_BANDS
from airaware_cli.core.models import Guidance, SeverityTier


def classify(aqi: int) -> SeverityTier:
    """Map a US AQI value to its severity tier (band upper bounds are inclusive)."""
    for upper, tier_key in TIER_BANDS:
        if aqi <= upper:
            return SeverityTier(tier_key)
    return SeverityTier.SEVERE


def guidance(tier: SeverityTier) -> Guidance:
    """Return the recommended and avoided actions for a tier."""
    entry = GUIDANCE_TABLE[SeverityTier(tier).value]
    return Guidance(recommended=tuple(entry["recommended"]), avoid=tuple(entry["avoid"]))
