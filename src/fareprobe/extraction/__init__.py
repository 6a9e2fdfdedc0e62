"""Fare extraction from on-screen text."""

from .patterns import FarePattern, build_patterns, match_price, parse_number
from .price_extractor import (
    DEFAULT_IDENTIFIER_MARKERS,
    PriceExtractor,
    extract_candidates,
    is_identifier,
    select_price,
)
from .trip_details import classify_service_type, extract_eta, has_low_cost_class

__all__ = [
    "FarePattern",
    "build_patterns",
    "match_price",
    "parse_number",
    "DEFAULT_IDENTIFIER_MARKERS",
    "PriceExtractor",
    "extract_candidates",
    "is_identifier",
    "select_price",
    "classify_service_type",
    "extract_eta",
    "has_low_cost_class",
]
