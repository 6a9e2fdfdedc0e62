"""Output formatters for CLI commands.

Provides plain-text and JSON renderings of captured fares, failures and
the target-app catalog.
"""

import json
from typing import Any

from ..base_exceptions import FareprobeException
from ..config.target_apps import TargetApp
from ..model.price import PriceCandidate, PriceResult
from ..model.session import FailureReason


def _dump(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


def format_price(result: PriceResult, as_json: bool = False) -> str:
    """Format a captured fare.

    Args:
        result: Captured result
        as_json: Emit the listener payload as JSON instead of text

    Returns:
        Formatted string output
    """
    if as_json:
        return _dump(result.to_payload())

    lines = [f"{result.app_name}: {result.price:g} {result.currency}"]
    if result.service_type:
        lines.append(f"  Service:    {result.service_type}")
    if result.eta_minutes is not None:
        lines.append(f"  ETA:        {result.eta_minutes} min")
    lines.append(f"  Policy:     {result.policy.value}")
    lines.append(f"  Strategy:   {result.strategy}")
    if result.candidates:
        values = ", ".join(f"{value:g}" for value in result.all_prices)
        lines.append(f"  Candidates: {values}")
    return "\n".join(lines)


def format_failure(app_id: str, failure: FailureReason, as_json: bool = False) -> str:
    """Format a failed session or an abandoned wait."""
    if as_json:
        return _dump({"appId": app_id, **failure.to_payload()})

    text = f"{app_id}: no price ({failure.reason} in {failure.state.value}"
    text += f", {failure.retry_count} retries)"
    if failure.message:
        text += f"\n  {failure.message}"
    return text


def format_error(error: FareprobeException, as_json: bool = False) -> str:
    """Format an error raised while talking to the device."""
    if as_json:
        return _dump(error.to_payload())
    return f"Runtime error: {error}"


def format_candidates(candidates: list[PriceCandidate]) -> str:
    if not candidates:
        return "No fare candidates"
    return "\n".join(
        f"  {candidate.value:>8g}  {candidate.strategy:<16} {candidate.source_text!r}"
        for candidate in candidates
    )


def format_catalog(apps: list[TargetApp], verbose: bool = False) -> str:
    """Format the target-app catalog as a table."""
    lines = []
    for app in apps:
        band = app.fare_band
        lines.append(
            f"{app.app_id:<28} {app.display_name:<10} {app.currency} "
            f"[{band.minimum:g}-{band.maximum:g}]"
        )
        if verbose:
            lines.append(f"    aliases:       {', '.join(app.currency_aliases)}")
            steps = ", ".join(step.value for step in app.actuation_order)
            lines.append(f"    actuation:     {steps}")
            names = ", ".join(spec.name for spec in app.interstitials) or "-"
            lines.append(f"    interstitials: {names}")
    return "\n".join(lines)
