"""Formatting helpers used by console output."""

from __future__ import annotations

from typing import Optional

from airaware_cli.core.models import SeverityTier


def format_pollutant(value: Optional[float]) -> str:
    """Format a particulate concentration in µg/m³."""
    if value is None:
        return "N/A"
    return f"{float(value):.1f} µg/m³"


def format_progress_bar(fraction: float, width: int = 20) -> str:
    """Render a fixed-width text progress bar for a fraction in [0, 1]."""
    clamped = min(max(fraction, 0.0), 1.0)
    filled = int(round(clamped * width))
    return "█" * filled + "░" * (width - filled)


def tier_markup(tier: SeverityTier, text: Optional[str] = None) -> str:
    """Wrap text (the tier label by default) in the tier's Rich colour."""
    return f"[bold {tier.color}]{text if text is not None else tier.label}[/]"
