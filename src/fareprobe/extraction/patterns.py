"""Fare patterns built from an app's currency aliases and fare labels.

Patterns are tried in a fixed order and the first one producing a
positive value wins:

1. prefix_currency  ``EGP 65``, ``ج.م 65``
2. suffix_currency  ``65 EGP``, ``65 جنيه``
3. labeled          ``Fare: 65``, ``السعر 65``
4. range            ``65-75`` (low end)
5. bare_decimal     ``65.50``
6. bare_integer     ``65``
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

# 1,250 / 12,500.50 (thousands) or 65 / 65.5 / 65,50 (decimal)
NUMBER = r"(\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?(?!\d)|\d+(?:[.,]\d+)?)"

_THOUSANDS_RE = re.compile(r"\d{1,3}(?:,\d{3})+(?:\.\d+)?")

# A number that is the high end of a range is not a suffix-currency match
_NOT_RANGE_END = r"(?<![-–\d.,])(?<![-–]\s)"

# "20-25 min" is an arrival estimate, not a fare range
_NOT_MINUTES = r"(?!\s*(?:min|د))"

# A range has exactly two ends; "25-12-2024" or "2024/06/25" is a date
_NOT_DATE_START = r"(?<![\d.,/\-–])"
_NOT_DATE_END = r"(?![-–/]\d)"


@dataclass(frozen=True)
class FarePattern:
    """One named fare pattern."""

    name: str
    regex: re.Pattern[str]


def parse_number(raw: str) -> float | None:
    """Parse a matched number, understanding thousands and decimal commas.

    Args:
        raw: Matched digits such as ``"1,250"`` or ``"65,50"``

    Returns:
        Parsed value, or None if it is not a number
    """
    raw = raw.replace(" ", "")
    if _THOUSANDS_RE.fullmatch(raw):
        raw = raw.replace(",", "")
    else:
        raw = raw.replace(",", ".")
    try:
        return float(raw)
    except ValueError:
        return None


def _alias_alternation(aliases: tuple[str, ...]) -> str:
    parts = []
    # Longest first so "E£" is not shadowed by a shorter alias
    for alias in sorted({a.strip() for a in aliases if a.strip()}, key=len, reverse=True):
        # "ج.م" is also written "جم" and "ج.م."
        parts.append(re.escape(alias).replace(r"\.", r"\.?") + (r"\.?" if "." in alias else ""))
    return "|".join(parts)


@lru_cache(maxsize=64)
def build_patterns(
    currency_aliases: tuple[str, ...], fare_labels: tuple[str, ...]
) -> tuple[FarePattern, ...]:
    """Compile the ordered fare patterns for one alias/label configuration.

    Args:
        currency_aliases: Currency spellings, e.g. ``("EGP", "ج.م")``
        fare_labels: Fare label words, e.g. ``("fare", "السعر")``

    Returns:
        Patterns in matching order
    """
    patterns: list[FarePattern] = []
    aliases = _alias_alternation(currency_aliases)
    flags = re.IGNORECASE

    if aliases:
        patterns.append(
            FarePattern(
                "prefix_currency",
                re.compile(rf"(?<![A-Za-z])(?:{aliases})\s*{NUMBER}", flags),
            )
        )
        patterns.append(
            FarePattern(
                "suffix_currency",
                re.compile(rf"{_NOT_RANGE_END}{NUMBER}\s*(?:{aliases})(?![A-Za-z])", flags),
            )
        )

    labels = "|".join(re.escape(label) for label in fare_labels if label.strip())
    if labels:
        patterns.append(FarePattern("labeled", re.compile(rf"(?:{labels})[:\s]*{NUMBER}", flags)))

    patterns.extend(
        [
            FarePattern(
                "range",
                re.compile(
                    rf"{_NOT_DATE_START}(\d+(?:[.,]\d+)?)\s*[-–]\s*\d+(?:[.,]\d+)?"
                    rf"(?![\d.,]){_NOT_DATE_END}{_NOT_MINUTES}",
                    flags,
                ),
            ),
            FarePattern("bare_decimal", re.compile(r"^\s*(\d{2,3}[.,]\d{1,2})\s*$")),
            FarePattern("bare_integer", re.compile(r"^\s*(\d{2,3})\s*$")),
        ]
    )
    return tuple(patterns)


def match_price(text: str, patterns: tuple[FarePattern, ...]) -> tuple[float, str] | None:
    """Match one string against the patterns in order.

    Returns:
        (value, pattern name) for the first pattern producing a positive value
    """
    text = text.strip()
    if not text:
        return None
    for pattern in patterns:
        match = pattern.regex.search(text)
        if not match:
            continue
        value = parse_number(match.group(1))
        if value is not None and value > 0:
            return value, pattern.name
    return None
