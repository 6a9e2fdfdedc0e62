"""Arrival time, service tier and low-cost-class detection from visible text."""

from __future__ import annotations

import re
from collections.abc import Iterable

from ..config.target_apps import TargetApp

ETA_PATTERNS = (
    re.compile(r"(\d+)\s*د(?:قيقة|قائق)?", re.IGNORECASE),
    re.compile(r"(\d+)\s*min(?:ute)?s?", re.IGNORECASE),
    re.compile(r"في\s*(\d+)\s*د"),
    re.compile(r"arrives?\s*in\s*(\d+)", re.IGNORECASE),
)

MIN_ETA_MINUTES = 1
MAX_ETA_MINUTES = 60


def extract_eta(texts: Iterable[str]) -> int | None:
    """Find the pickup ETA in minutes.

    Args:
        texts: Visible strings

    Returns:
        Minutes in 1..60, or None when no plausible ETA is shown
    """
    combined = " ".join(texts)
    for pattern in ETA_PATTERNS:
        for match in pattern.finditer(combined):
            minutes = int(match.group(1))
            if MIN_ETA_MINUTES <= minutes <= MAX_ETA_MINUTES:
                return minutes
    return None


def has_low_cost_class(texts: Iterable[str], markers: Iterable[str]) -> bool:
    """Check whether any visible string mentions a low-cost vehicle class."""
    lowered = [text.lower() for text in texts]
    markers = [marker.lower() for marker in markers if marker]
    return any(marker in text for text in lowered for marker in markers)


def classify_service_type(
    texts: Iterable[str],
    app: TargetApp,
    anchor: str | None = None,
    boundaries: Iterable[str] = (),
) -> str:
    """Classify the service tier with the app's ordered rules.

    With an ``anchor`` (the string the selected fare was read from), the
    strings between the previous ``boundaries`` entry and the anchor are
    tried first, so the label printed above a fare wins over labels of
    other tiers on the same screen. Falls back to the whole screen.

    Args:
        texts: Visible strings, in tree order
        app: Target app supplying the service rules
        anchor: Source string of the selected fare
        boundaries: Source strings of the other fares

    Returns:
        Service label, or the app's default label
    """
    texts = list(texts)
    if anchor is not None and anchor in texts:
        end = texts.index(anchor)
        stops = set(boundaries) - {anchor}
        start = end
        while start > 0 and texts[start - 1] not in stops:
            start -= 1
        label = app.match_service(texts[start : end + 1])
        if label is not None:
            return label
    return app.classify_service(texts)
