"""Configuration package.

Runtime settings come from pydantic-settings (environment variables with the
``FAREPROBE_`` prefix and ``.env`` files). Per-app behaviour comes from the
YAML target-app catalog.

Usage:
    from fareprobe.config import get_settings, load_catalog

    settings = get_settings()
    catalog = load_catalog(settings.target_apps_path)
    uber = catalog.get("com.ubercab")
"""

from .settings import (
    DevelopmentSettings,
    FareprobeSettings,
    TestSettings,
    get_settings,
    reset_settings,
)
from .target_apps import (
    AutomationBudgets,
    InterstitialSpec,
    IntentLocator,
    PlausibilityBand,
    ScreenRegion,
    ServiceTypeRule,
    TargetApp,
    TargetAppCatalog,
    load_catalog,
)

__all__ = [
    "FareprobeSettings",
    "DevelopmentSettings",
    "TestSettings",
    "get_settings",
    "reset_settings",
    "AutomationBudgets",
    "InterstitialSpec",
    "IntentLocator",
    "PlausibilityBand",
    "ScreenRegion",
    "ServiceTypeRule",
    "TargetApp",
    "TargetAppCatalog",
    "load_catalog",
]
