"""Target-app catalog - configuration models using Pydantic.

Everything that differs between target apps (localized locator phrases,
fare plausibility bounds, resource-id tables, interstitial phrase sets,
actuation fallback order, budgets) lives here as data, so one generic
automation algorithm can drive every app. Adding a target app is a YAML
change.

Example usage:
    catalog = TargetAppCatalog.from_yaml(Path("apps.yaml"))
    uber = catalog.get("com.ubercab")
    uber.fare_band.contains(65.0)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..config_exceptions import InvalidConfigurationError, UnknownTargetAppError
from ..model.enums import ActuationStep, AutomationState, LocatorIntent

DEFAULT_STRATEGIES: tuple[str, ...] = (
    "exact_phrase",
    "keyword",
    "structural_input",
    "first_clickable_text",
)

DEFAULT_ACTUATION: tuple[ActuationStep, ...] = (
    ActuationStep.NODE,
    ActuationStep.PARENT,
    ActuationStep.GRANDPARENT,
)

BUNDLED_CATALOG = "target_apps.yaml"


class PlausibilityBand(BaseModel):
    """Numeric range within which an extracted value is accepted as a fare."""

    model_config = ConfigDict(frozen=True)

    minimum: float = Field(15.0, ge=0.0, description="Lowest plausible fare")
    maximum: float = Field(1000.0, gt=0.0, description="Highest plausible fare")

    @model_validator(mode="after")
    def _check_order(self) -> PlausibilityBand:
        if self.minimum >= self.maximum:
            raise ValueError(f"minimum ({self.minimum}) must be below maximum ({self.maximum})")
        return self

    def contains(self, value: float) -> bool:
        """Check whether a value lies inside the band (inclusive)."""
        return self.minimum <= value <= self.maximum


class IntentLocator(BaseModel):
    """Phrase tables and strategy order for one locator intent."""

    model_config = ConfigDict(frozen=True)

    phrases: tuple[str, ...] = Field((), description="Localized phrases matched exactly")
    keywords: tuple[str, ...] = Field((), description="Keywords matched as substrings")
    exclude: tuple[str, ...] = Field(
        (), description="Phrases marking a node as a label rather than a target"
    )
    strategies: tuple[str, ...] = Field(DEFAULT_STRATEGIES, description="Strategy names, in order")
    actuation: tuple[ActuationStep, ...] | None = Field(
        None, description="Overrides the app's actuation order for this intent"
    )


class ServiceTypeRule(BaseModel):
    """Maps visible keywords to a service-type label."""

    model_config = ConfigDict(frozen=True)

    label: str
    any_of: tuple[str, ...] = ()
    all_of: tuple[str, ...] = ()

    def matches(self, combined_text: str) -> bool:
        """Check the rule against lower-cased, space-joined visible text."""
        if not self.any_of and not self.all_of:
            return False
        if self.all_of and not all(word.lower() in combined_text for word in self.all_of):
            return False
        if self.any_of and not any(word.lower() in combined_text for word in self.any_of):
            return False
        return True


class InterstitialSpec(BaseModel):
    """Detector phrases and responder phrases for one unplanned screen."""

    model_config = ConfigDict(frozen=True)

    name: str
    detect_any: tuple[str, ...] = Field(
        (), description="Detected when any visible string contains one of these"
    )
    detect_exact: tuple[str, ...] = Field(
        (), description="Detected when any visible string equals one of these"
    )
    respond: tuple[str, ...] = Field((), description="Phrases of the dismiss/confirm control")
    always_handled: bool = Field(
        False, description="Report handled even when actuation reports failure"
    )
    manual_prompt: str | None = Field(
        None, description="Message asking the user to complete the step by hand"
    )
    actuation: tuple[ActuationStep, ...] | None = None

    @model_validator(mode="after")
    def _check_detectors(self) -> InterstitialSpec:
        if not self.detect_any and not self.detect_exact:
            raise ValueError(f"interstitial '{self.name}' has no detector phrases")
        return self


class ScreenRegion(BaseModel):
    """Last-known screen position, as fractions of the screen size."""

    model_config = ConfigDict(frozen=True)

    x_ratio: float = Field(0.5, ge=0.0, le=1.0)
    y_ratio: float = Field(0.85, ge=0.0, le=1.0)


class AutomationBudgets(BaseModel):
    """Per-app overrides of the settings' budgets. Unset values inherit."""

    model_config = ConfigDict(frozen=True)

    locate_retry_bound: int | None = Field(None, ge=0)
    entry_retry_bound: int | None = Field(None, ge=0)
    selection_retry_bound: int | None = Field(None, ge=0)
    suggestion_settle_ticks: int | None = Field(None, ge=0)
    price_wait_ticks: int | None = Field(None, ge=0)
    session_timeout: float | None = Field(None, gt=0.0)


class TargetApp(BaseModel):
    """Immutable configuration of one target application."""

    model_config = ConfigDict(frozen=True)

    app_id: str = Field(description="Package name of the target app")
    display_name: str
    currency: str = "EGP"
    currency_aliases: tuple[str, ...] = ("EGP",)
    fare_labels: tuple[str, ...] = ("fare", "price")
    fare_band: PlausibilityBand = Field(default_factory=PlausibilityBand)
    locators: dict[LocatorIntent, IntentLocator] = Field(default_factory=dict)
    price_resource_ids: tuple[str, ...] = ()
    price_description_keywords: tuple[str, ...] = ("price", "fare")
    low_cost_markers: tuple[str, ...] = ()
    service_types: tuple[ServiceTypeRule, ...] = ()
    default_service_type: str = ""
    interstitials: tuple[InterstitialSpec, ...] = ()
    interstitial_states: tuple[AutomationState, ...] = (AutomationState.WAITING_FOR_PRICE,)
    actuation_order: tuple[ActuationStep, ...] = DEFAULT_ACTUATION
    fallback_region: ScreenRegion = Field(default_factory=ScreenRegion)
    budgets: AutomationBudgets = Field(default_factory=AutomationBudgets)

    def locator_for(self, intent: LocatorIntent) -> IntentLocator:
        """Get the phrase tables for an intent (empty tables if unconfigured)."""
        return self.locators.get(intent, IntentLocator())

    def actuation_for(self, intent: LocatorIntent) -> tuple[ActuationStep, ...]:
        """Get the actuation fallback order for an intent."""
        return self.locator_for(intent).actuation or self.actuation_order

    def match_service(self, texts: Iterable[str]) -> str | None:
        """Label of the first service rule matching ``texts``, or None."""
        combined = " ".join(texts).lower()
        for rule in self.service_types:
            if rule.matches(combined):
                return rule.label
        return None

    def classify_service(self, texts: Iterable[str]) -> str:
        """Classify the visible service tier using the ordered rules.

        Args:
            texts: Visible strings

        Returns:
            Label of the first matching rule, or the default label
        """
        return self.match_service(texts) or self.default_service_type


class TargetAppCatalog:
    """The set of configured target apps, keyed by app id."""

    def __init__(self, apps: Iterable[TargetApp]) -> None:
        self._apps: dict[str, TargetApp] = {}
        for app in apps:
            if app.app_id in self._apps:
                raise InvalidConfigurationError(app.app_id, "duplicate app id")
            self._apps[app.app_id] = app

    def get(self, app_id: str) -> TargetApp:
        """Get an app by id.

        Raises:
            UnknownTargetAppError: If the id is not configured
        """
        try:
            return self._apps[app_id]
        except KeyError:
            raise UnknownTargetAppError(app_id) from None

    @property
    def ids(self) -> list[str]:
        return list(self._apps)

    def __contains__(self, app_id: object) -> bool:
        return app_id in self._apps

    def __iter__(self) -> Iterator[TargetApp]:
        return iter(self._apps.values())

    def __len__(self) -> int:
        return len(self._apps)

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str = "<dict>") -> TargetAppCatalog:
        """Build a catalog from parsed YAML.

        The optional ``defaults`` mapping is merged under every entry of
        ``apps`` (keys set on the app win).

        Args:
            data: Mapping with ``apps`` and optional ``defaults``
            source: Where the data came from, for error messages

        Returns:
            TargetAppCatalog instance

        Raises:
            InvalidConfigurationError: If the data does not validate
        """
        if not isinstance(data, dict) or not isinstance(data.get("apps"), list):
            raise InvalidConfigurationError(source, "expected a mapping with an 'apps' list")

        defaults = data.get("defaults") or {}
        apps = []
        for index, entry in enumerate(data["apps"]):
            merged = {**defaults, **(entry or {})}
            try:
                apps.append(TargetApp.model_validate(merged))
            except ValidationError as e:
                key = merged.get("app_id", f"apps[{index}]")
                raise InvalidConfigurationError(str(key), str(e), source=source) from e
        return cls(apps)

    @classmethod
    def from_yaml(cls, path: Path) -> TargetAppCatalog:
        """Load a catalog from a YAML file.

        Args:
            path: Path to YAML file

        Returns:
            TargetAppCatalog instance
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise InvalidConfigurationError(str(path), str(e)) from e
        return cls.from_dict(data, source=str(path))

    @classmethod
    def bundled(cls) -> TargetAppCatalog:
        """Load the catalog shipped with the package."""
        text = resources.files("fareprobe.config").joinpath("data", BUNDLED_CATALOG).read_text(
            encoding="utf-8"
        )
        return cls.from_dict(yaml.safe_load(text), source=BUNDLED_CATALOG)


def load_catalog(path: Path | None = None) -> TargetAppCatalog:
    """Load the catalog from ``path``, or the bundled one when no path is given."""
    if path is None:
        return TargetAppCatalog.bundled()
    return TargetAppCatalog.from_yaml(path)
