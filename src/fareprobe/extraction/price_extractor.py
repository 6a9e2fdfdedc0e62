"""Fare extraction and selection.

Turns noisy on-screen text into fare candidates and picks one of them
according to the caller's selection policy. Extraction is pure: the same
strings always produce the same candidates in the same order.

Example usage:
    extractor = PriceExtractor(catalog.get("com.ubercab"))
    candidates = extractor.extract(["EGP 65", "EGP 95", "65-75"])
    result = extractor.select(candidates, SelectionPolicy.LOWEST, texts)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..config.target_apps import PlausibilityBand, TargetApp
from ..model.enums import SelectionPolicy
from ..model.price import PriceCandidate, PriceResult
from ..tree.node import UiNode
from ..tree.traversal import collect_texts, walk
from .patterns import build_patterns, match_price
from .trip_details import classify_service_type, extract_eta, has_low_cost_class

logger = logging.getLogger(__name__)

DEFAULT_IDENTIFIER_MARKERS: tuple[str, ...] = (":id/", "_id/", "://")


def is_identifier(text: str, markers: Iterable[str] = DEFAULT_IDENTIFIER_MARKERS) -> bool:
    """Whether a string looks like an internal identifier (resource id, URI)."""
    return any(marker in text for marker in markers)


def _dedupe(candidates: Iterable[PriceCandidate]) -> list[PriceCandidate]:
    seen: set[float] = set()
    unique = []
    for candidate in candidates:
        if candidate.value not in seen:
            seen.add(candidate.value)
            unique.append(candidate)
    return unique


def extract_candidates(
    texts: Iterable[str],
    app: TargetApp,
    identifier_markers: Iterable[str] = DEFAULT_IDENTIFIER_MARKERS,
) -> list[PriceCandidate]:
    """Extract in-band fare candidates from visible strings.

    Args:
        texts: Visible strings, in tree order
        app: Target app supplying aliases, labels and plausibility band
        identifier_markers: Substrings marking a string as an identifier

    Returns:
        Candidates deduplicated by value, first occurrence kept
    """
    markers = tuple(identifier_markers)
    patterns = build_patterns(app.currency_aliases, app.fare_labels)
    candidates = []
    for text in texts:
        if not text or is_identifier(text, markers):
            continue
        match = match_price(text, patterns)
        if match is None:
            continue
        value, strategy = match
        if app.fare_band.contains(value):
            candidates.append(PriceCandidate(value=value, source_text=text, strategy=strategy))
    return _dedupe(candidates)


def select_price(
    candidates: Sequence[PriceCandidate],
    policy: SelectionPolicy,
    *,
    exclude_low_cost_class: bool = False,
    band: PlausibilityBand | None = None,
) -> PriceCandidate | None:
    """Pick one candidate according to ``policy``.

    ``LOWEST`` and ``FASTEST_ARRIVAL`` pick the minimum (economy tiers have
    the most drivers), ``HIGHEST_TIER`` the maximum; ties go to the
    candidate seen first. When a low-cost vehicle class is visible and
    there is more than one candidate, the single lowest one is dropped
    first. With a ``band``, out-of-band candidates are ignored as long as
    any in-band candidate exists.

    Returns:
        Selected candidate, or None for no candidates
    """
    pool = list(candidates)
    if band is not None:
        in_band = [candidate for candidate in pool if band.contains(candidate.value)]
        pool = in_band or pool
    if not pool:
        return None

    if exclude_low_cost_class and len(pool) > 1:
        lowest = min(pool, key=lambda candidate: candidate.value)
        pool = [candidate for candidate in pool if candidate is not lowest]
        logger.debug(f"Dropped low-cost class fare {lowest.value}")

    if policy is SelectionPolicy.HIGHEST_TIER:
        return max(pool, key=lambda candidate: candidate.value)
    return min(pool, key=lambda candidate: candidate.value)


class PriceExtractor:
    """Extraction, scanning and selection bound to one target app."""

    def __init__(
        self,
        app: TargetApp,
        identifier_markers: Iterable[str] = DEFAULT_IDENTIFIER_MARKERS,
    ) -> None:
        self.app = app
        self.identifier_markers = tuple(identifier_markers)

    def extract(self, texts: Iterable[str]) -> list[PriceCandidate]:
        return extract_candidates(texts, self.app, self.identifier_markers)

    def select(
        self,
        candidates: Sequence[PriceCandidate],
        policy: SelectionPolicy,
        visible_texts: Sequence[str] = (),
        strategy: str = "text_scan",
    ) -> PriceResult | None:
        """Select a fare and build the complete result.

        Args:
            candidates: Extracted candidates
            policy: Selection policy
            visible_texts: All visible strings in tree order, read for the low-cost marker,
                service type (nearest the selected fare first) and ETA
            strategy: Capture strategy recorded on the result

        Returns:
            PriceResult, or None when there is nothing to select
        """
        low_cost = has_low_cost_class(visible_texts, self.app.low_cost_markers)
        selected = select_price(
            candidates, policy, exclude_low_cost_class=low_cost, band=self.app.fare_band
        )
        if selected is None:
            return None

        return PriceResult(
            app_id=self.app.app_id,
            app_name=self.app.display_name,
            price=selected.value,
            currency=self.app.currency,
            candidates=tuple(candidates),
            service_type=classify_service_type(
                visible_texts,
                self.app,
                anchor=selected.source_text,
                boundaries=[candidate.source_text for candidate in candidates],
            ),
            eta_minutes=extract_eta(visible_texts),
            strategy=strategy,
            policy=policy,
        )

    def scan(self, root: UiNode) -> list[PriceCandidate]:
        """Collect candidates from resource ids, descriptions and all text.

        Args:
            root: Root of the current snapshot

        Returns:
            Candidates deduplicated by value, first occurrence kept
        """
        patterns = build_patterns(self.app.currency_aliases, self.app.fare_labels)
        resource_ids = set(self.app.price_resource_ids)
        keywords = [keyword.lower() for keyword in self.app.price_description_keywords]
        by_id: list[PriceCandidate] = []
        by_description: list[PriceCandidate] = []

        for node in walk(root):
            if resource_ids and node.resource_id in resource_ids:
                text = (node.text or node.description or "").strip()
                self._add_match(by_id, text, patterns, "resource_id")
            description = (node.description or "").strip()
            if description and any(keyword in description.lower() for keyword in keywords):
                self._add_match(by_description, description, patterns, "content_description")

        by_text = self.extract(collect_texts(root))
        candidates = _dedupe([*by_id, *by_description, *by_text])
        logger.debug(
            f"Scan of {self.app.app_id}: {len(by_id)} by id, {len(by_description)} by "
            f"description, {len(by_text)} by text, {len(candidates)} unique"
        )
        return candidates

    def capture(self, root: UiNode, policy: SelectionPolicy) -> PriceResult | None:
        """Scan the tree and select a fare in one step."""
        candidates = self.scan(root)
        if not candidates:
            return None
        return self.select(candidates, policy, collect_texts(root), strategy="combined_scan")

    def _add_match(self, bucket: list[PriceCandidate], text, patterns, strategy: str) -> None:
        if not text or is_identifier(text, self.identifier_markers):
            return
        match = match_price(text, patterns)
        if match is not None and self.app.fare_band.contains(match[0]):
            bucket.append(PriceCandidate(value=match[0], source_text=text, strategy=strategy))
