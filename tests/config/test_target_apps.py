"""Tests for the target-app catalog."""

import pytest
from pydantic import ValidationError

from fareprobe.config import (
    InterstitialSpec,
    PlausibilityBand,
    ServiceTypeRule,
    TargetApp,
    TargetAppCatalog,
    load_catalog,
)
from fareprobe.config_exceptions import InvalidConfigurationError, UnknownTargetAppError
from fareprobe.model import ActuationStep, AutomationState, LocatorIntent


class TestBundledCatalog:
    """Test the catalog shipped with the package."""

    def test_five_apps(self, catalog):
        assert catalog.ids == [
            "com.ubercab",
            "com.careem.acma",
            "sinet.startup.inDriver",
            "com.didiglobal.passenger",
            "ee.mtakso.client",
        ]
        assert len(catalog) == 5
        assert "com.ubercab" in catalog

    def test_defaults_merged(self, catalog):
        for app in catalog:
            assert app.currency == "EGP"
            assert app.fare_band.minimum == 15
            assert app.fare_band.maximum == 1000
            assert "LE" in app.currency_aliases

    def test_unknown_app(self, catalog):
        with pytest.raises(UnknownTargetAppError) as exc_info:
            catalog.get("com.example.taxi")
        assert exc_info.value.app_id == "com.example.taxi"

    def test_indriver_confirmation_taps_by_position(self, indriver):
        [confirmation] = [s for s in indriver.interstitials if s.name == "map_confirmation"]

        assert confirmation.always_handled
        assert confirmation.actuation[0] is ActuationStep.GESTURE
        assert AutomationState.WAITING_FOR_SUGGESTIONS in indriver.interstitial_states

    def test_actuation_order_per_intent(self, uber):
        assert uber.actuation_for(LocatorIntent.DESTINATION_FIELD) == (
            ActuationStep.NODE,
            ActuationStep.PARENT,
            ActuationStep.GRANDPARENT,
        )

    def test_unconfigured_intent_is_empty(self, indriver):
        locator = indriver.locator_for(LocatorIntent.CONFIRM_BUTTON)
        assert locator.phrases == ()
        assert locator.strategies[0] == "exact_phrase"


class TestFromDict:
    """Test TargetAppCatalog.from_dict."""

    def test_minimal_app(self):
        catalog = TargetAppCatalog.from_dict(
            {"apps": [{"app_id": "com.example.taxi", "display_name": "Taxi"}]}
        )
        app = catalog.get("com.example.taxi")

        assert app.currency == "EGP"
        assert app.interstitial_states == (AutomationState.WAITING_FOR_PRICE,)

    def test_app_keys_win_over_defaults(self):
        catalog = TargetAppCatalog.from_dict(
            {
                "defaults": {"currency": "EGP", "default_service_type": "Economy"},
                "apps": [
                    {"app_id": "a", "display_name": "A", "currency": "SAR"},
                    {"app_id": "b", "display_name": "B"},
                ],
            }
        )

        assert catalog.get("a").currency == "SAR"
        assert catalog.get("b").currency == "EGP"
        assert catalog.get("a").default_service_type == "Economy"

    def test_missing_apps_list(self):
        with pytest.raises(InvalidConfigurationError):
            TargetAppCatalog.from_dict({"defaults": {}})

    def test_invalid_entry_names_the_app(self):
        data = {"apps": [{"app_id": "com.example.taxi", "fare_band": {"minimum": 5}}]}

        with pytest.raises(InvalidConfigurationError) as exc_info:
            TargetAppCatalog.from_dict(data, source="apps.yaml")

        assert exc_info.value.context["config_key"] == "com.example.taxi"
        assert exc_info.value.context["source"] == "apps.yaml"

    def test_duplicate_ids(self):
        entry = {"app_id": "com.example.taxi", "display_name": "Taxi"}
        with pytest.raises(InvalidConfigurationError, match="duplicate"):
            TargetAppCatalog.from_dict({"apps": [entry, dict(entry)]})

    def test_interstitial_without_detectors(self):
        data = {
            "apps": [
                {
                    "app_id": "com.example.taxi",
                    "display_name": "Taxi",
                    "interstitials": [{"name": "popup", "respond": ["OK"]}],
                }
            ]
        }
        with pytest.raises(InvalidConfigurationError, match="no detector phrases"):
            TargetAppCatalog.from_dict(data)


class TestFromYaml:
    """Test loading catalogs from files."""

    def test_load_file(self, tmp_path):
        path = tmp_path / "apps.yaml"
        path.write_text(
            "apps:\n"
            "  - app_id: com.example.taxi\n"
            "    display_name: Taxi\n"
            "    fare_band: {minimum: 20, maximum: 500}\n",
            encoding="utf-8",
        )

        catalog = load_catalog(path)

        assert catalog.get("com.example.taxi").fare_band.maximum == 500

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidConfigurationError):
            TargetAppCatalog.from_yaml(tmp_path / "missing.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "apps.yaml"
        path.write_text("apps: [unclosed\n", encoding="utf-8")

        with pytest.raises(InvalidConfigurationError):
            TargetAppCatalog.from_yaml(path)


class TestModels:
    """Test individual configuration models."""

    def test_band_contains_inclusive(self):
        band = PlausibilityBand(minimum=15, maximum=1000)
        assert band.contains(15)
        assert band.contains(1000)
        assert not band.contains(14.99)

    def test_band_order(self):
        with pytest.raises(ValidationError):
            PlausibilityBand(minimum=100, maximum=50)

    def test_models_are_frozen(self, uber):
        with pytest.raises(ValidationError):
            uber.currency = "USD"

    def test_service_rule_all_of_and_any_of(self):
        rule = ServiceTypeRule(label="XL", all_of=("bolt",), any_of=("xl", "van"))
        assert rule.matches("bolt xl 5 min")
        assert not rule.matches("bolt comfort")
        assert not rule.matches("xl only")

    def test_empty_rule_never_matches(self):
        assert not ServiceTypeRule(label="Any").matches("anything")

    def test_classify_falls_back_to_default(self):
        app = TargetApp(app_id="a", display_name="A", default_service_type="Economy")
        assert app.classify_service(["EGP 65"]) == "Economy"

    def test_interstitial_exact_only(self):
        spec = InterstitialSpec(name="ok_dialog", detect_exact=("ok",))
        assert spec.detect_any == ()
