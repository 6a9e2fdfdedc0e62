"""Tests for CLI output formatters."""

import json

from fareprobe.cli.formatters import (
    format_candidates,
    format_catalog,
    format_failure,
    format_price,
)
from fareprobe.model import (
    RETRY_EXHAUSTED,
    AutomationState,
    FailureReason,
    PriceCandidate,
    PriceResult,
    SelectionPolicy,
)


def make_result(**overrides):
    values = {
        "app_id": "com.ubercab",
        "app_name": "Uber",
        "price": 65.0,
        "currency": "EGP",
        "candidates": (
            PriceCandidate(65.0, "EGP 65", "prefix_currency"),
            PriceCandidate(95.5, "EGP 95.50", "prefix_currency"),
        ),
        "service_type": "UberX",
        "eta_minutes": 3,
    }
    values.update(overrides)
    return PriceResult(**values)


class TestFormatPrice:
    """Test format_price."""

    def test_text(self):
        text = format_price(make_result())

        assert text.splitlines()[0] == "Uber: 65 EGP"
        assert "  Service:    UberX" in text
        assert "  ETA:        3 min" in text
        assert "  Policy:     lowest" in text
        assert "  Candidates: 65, 95.5" in text

    def test_optional_lines_omitted(self):
        text = format_price(make_result(service_type="", eta_minutes=None, candidates=()))

        assert "Service" not in text
        assert "ETA" not in text
        assert "Candidates" not in text

    def test_json_is_listener_payload(self):
        result = make_result(policy=SelectionPolicy.HIGHEST_TIER)
        payload = json.loads(format_price(result, as_json=True))

        assert payload == json.loads(json.dumps(result.to_payload()))
        assert payload["policy"] == "highest-tier"

    def test_json_keeps_arabic(self):
        text = format_price(make_result(service_type="اقتصادي"), as_json=True)
        assert "اقتصادي" in text


class TestFormatFailure:
    """Test format_failure."""

    def test_text(self):
        failure = FailureReason(RETRY_EXHAUSTED, AutomationState.LOCATING_FIELD, 11, "not found")

        text = format_failure("com.ubercab", failure)

        assert text == (
            "com.ubercab: no price (retry-exhausted in locating_field, 11 retries)\n  not found"
        )

    def test_json(self):
        failure = FailureReason(RETRY_EXHAUSTED, AutomationState.LOCATING_FIELD, 11)

        payload = json.loads(format_failure("com.ubercab", failure, as_json=True))

        assert payload == {
            "appId": "com.ubercab",
            "reason": "retry-exhausted",
            "state": "locating_field",
            "retryCount": 11,
            "message": "",
        }


class TestFormatCandidatesAndCatalog:
    """Test format_candidates and format_catalog."""

    def test_no_candidates(self):
        assert format_candidates([]) == "No fare candidates"

    def test_candidates(self):
        text = format_candidates([PriceCandidate(65.0, "EGP 65", "prefix_currency")])
        assert "65" in text
        assert "prefix_currency" in text
        assert "'EGP 65'" in text

    def test_catalog(self, catalog):
        lines = format_catalog(list(catalog)).splitlines()

        assert len(lines) == 5
        assert lines[0].startswith("com.ubercab")
        assert "[15-1000]" in lines[0]

    def test_catalog_verbose(self, uber):
        text = format_catalog([uber], verbose=True)

        assert "actuation:     node, parent, grandparent" in text
        assert "interstitials: surge_pricing" in text
