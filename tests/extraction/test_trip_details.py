"""Tests for ETA, service-type and low-cost-class detection."""

import pytest

from fareprobe.extraction import classify_service_type, extract_eta, has_low_cost_class


class TestExtractEta:
    """Test extract_eta."""

    @pytest.mark.parametrize(
        "texts, expected",
        [
            (["UberX", "3 min"], 3),
            (["EGP 65", "4 mins"], 4),
            (["5 دقائق"], 5),
            (["Arrives in 7"], 7),
        ],
    )
    def test_found(self, texts, expected):
        assert extract_eta(texts) == expected

    @pytest.mark.parametrize("texts", [[], ["EGP 65"], ["90 min"], ["0 min"]])
    def test_absent_or_implausible(self, texts):
        assert extract_eta(texts) is None


class TestLowCostClass:
    """Test has_low_cost_class."""

    def test_marker_visible(self):
        assert has_low_cost_class(["Scooter", "EGP 25"], ["scooter"])

    def test_case_insensitive(self):
        assert has_low_cost_class(["MOTORCYCLE"], ["motorcycle"])

    def test_no_marker(self):
        assert not has_low_cost_class(["Comfort", "EGP 95"], ["scooter", "moto"])

    def test_empty_markers(self):
        assert not has_low_cost_class(["Scooter"], [])


class TestClassifyServiceType:
    """Test classify_service_type with catalog rules."""

    def test_first_matching_rule_wins(self, catalog):
        careem = catalog.get("com.careem.acma")
        assert classify_service_type(["Careem Plus", "Business"], careem) == "Business"
        assert classify_service_type(["Careem Plus"], careem) == "Plus"

    def test_default_label(self, catalog):
        careem = catalog.get("com.careem.acma")
        assert classify_service_type(["EGP 65"], careem) == "Go"

    def test_all_of_rule(self, catalog):
        bolt = catalog.get("ee.mtakso.client")
        assert classify_service_type(["Bolt", "XL"], bolt) == "Bolt XL"
        assert classify_service_type(["Bolt", "Comfort"], bolt) == "Comfort"
        assert classify_service_type(["Bolt"], bolt) == "Bolt"

    def test_label_nearest_the_fare(self, uber):
        texts = ["UberX", "EGP 65", "Black", "EGP 180"]
        fares = ["EGP 65", "EGP 180"]

        assert classify_service_type(texts, uber, anchor="EGP 180", boundaries=fares) == "Black"
        assert classify_service_type(texts, uber, anchor="EGP 65", boundaries=fares) == "UberX"

    def test_unlabelled_fare_falls_back_to_screen(self, uber):
        texts = ["Comfort", "EGP 95", "EGP 120"]

        label = classify_service_type(texts, uber, anchor="EGP 120", boundaries=["EGP 95"])

        assert label == "Comfort"

    def test_anchor_not_visible(self, uber):
        assert classify_service_type(["Black"], uber, anchor="Trip fare EGP 85") == "Black"
