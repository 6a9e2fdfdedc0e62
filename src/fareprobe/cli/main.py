"""fareprobe CLI - Main entry point.

Provides commands for inspecting the target-app catalog, extracting
fares from text offline, and quoting or scanning a connected device.

Exit codes:
    0: Success
    1: No price obtained
    2: Configuration error
    3: Runtime error
"""

import sys
from pathlib import Path
from typing import NoReturn

import click
from pydantic import ValidationError

from .. import __version__
from ..base_exceptions import FareprobeException
from ..config.settings import FareprobeSettings, get_settings
from ..config.target_apps import TargetAppCatalog, load_catalog
from ..config_exceptions import ConfigurationError
from ..extraction.price_extractor import PriceExtractor
from ..hal.implementations.adb_uiautomator import (
    AdbBridge,
    AdbDeviceController,
    AdbSnapshotProvider,
)
from ..hal.interfaces.device_controller import IDeviceController
from ..hal.interfaces.snapshot_provider import ISnapshotProvider
from ..locators.element_locator import ElementLocator
from ..logging import setup_logging
from ..model.enums import SelectionPolicy
from ..model.price import PriceResult
from ..monitor.price_monitor import PriceMonitor
from ..orchestration.orchestrator import AutomationOrchestrator
from .formatters import (
    format_candidates,
    format_catalog,
    format_error,
    format_failure,
    format_price,
)

# Exit codes
EXIT_SUCCESS = 0
EXIT_NO_PRICE = 1
EXIT_CONFIG_ERROR = 2
EXIT_RUNTIME_ERROR = 3


def _parse_policy(ctx: click.Context, param: click.Parameter, value: str | None):
    if value is None:
        return None
    try:
        return SelectionPolicy.parse(value)
    except ValueError as e:
        raise click.BadParameter(f"unknown selection policy '{value}'") from e


def _load_catalog(config_path: Path | None, settings: FareprobeSettings) -> TargetAppCatalog:
    return load_catalog(config_path or settings.target_apps_path)


def _adb_backend(serial: str | None) -> tuple[ISnapshotProvider, IDeviceController]:
    """Build the snapshot provider and device controller for a device."""
    bridge = AdbBridge(serial=serial)
    return AdbSnapshotProvider(bridge), AdbDeviceController(bridge)


def _config_error(error: Exception) -> NoReturn:
    click.echo(f"Configuration error: {error}", err=True)
    sys.exit(EXIT_CONFIG_ERROR)


def _runtime_error(error: FareprobeException, as_json: bool = False) -> NoReturn:
    click.echo(format_error(error, as_json=as_json), err=True)
    sys.exit(EXIT_RUNTIME_ERROR)


config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Target-app catalog YAML (default: bundled catalog)",
)


@click.group()
@click.version_option(version=__version__, prog_name="fareprobe")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), help="Log file")
@click.pass_context
def main(ctx: click.Context, verbose: bool, log_file: Path | None) -> None:
    """fareprobe - ride-hailing fare quotes from on-screen UI trees.

    List target apps, extract fares from text, and quote or scan a
    connected Android device.
    """
    ctx.ensure_object(dict)
    setup_logging(
        level="DEBUG" if verbose else "WARNING",
        log_file=log_file,
        structured=False,
        colorize=False,
    )


@main.command()
@config_option
@click.option("--verbose", "-v", is_flag=True, help="Show aliases, actuation and interstitials")
def apps(config_path: Path | None, verbose: bool) -> None:
    """List the configured target apps."""
    try:
        catalog = _load_catalog(config_path, get_settings())
    except (ConfigurationError, ValidationError) as e:
        _config_error(e)

    click.echo(format_catalog(list(catalog), verbose=verbose))
    sys.exit(EXIT_SUCCESS)


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--verbose", "-v", is_flag=True, help="Show the validated apps")
def validate(path: Path, verbose: bool) -> None:
    """Validate a target-app catalog file.

    PATH: Path to the catalog YAML
    """
    try:
        catalog = TargetAppCatalog.from_yaml(path)
    except ConfigurationError as e:
        click.echo(f"Validation error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    locator = ElementLocator()
    problems = []
    for app in catalog:
        unknown = locator.unknown_strategies(app)
        if unknown:
            problems.append(f"{app.app_id}: unknown locator strategies {', '.join(unknown)}")

    if problems:
        for problem in problems:
            click.echo(f"Validation error: {problem}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    click.echo(f"Catalog is valid: {path} ({len(catalog)} apps)")
    if verbose:
        click.echo(format_catalog(list(catalog), verbose=True))
    sys.exit(EXIT_SUCCESS)


@main.command()
@click.option("--app", "app_id", required=True, help="Target app id")
@click.option("--policy", callback=_parse_policy, help="Selection policy")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@config_option
@click.argument("texts", nargs=-1)
def extract(
    app_id: str,
    policy: SelectionPolicy | None,
    as_json: bool,
    config_path: Path | None,
    texts: tuple[str, ...],
) -> None:
    """Extract a fare from visible strings.

    TEXTS: Strings as shown on screen (read from stdin, one per line, if omitted)
    """
    try:
        settings = get_settings()
        app = _load_catalog(config_path, settings).get(app_id)
    except (ConfigurationError, ValidationError) as e:
        _config_error(e)

    if not texts:
        texts = tuple(line.rstrip("\n") for line in sys.stdin if line.strip())

    extractor = PriceExtractor(app, settings.identifier_markers)
    candidates = extractor.extract(texts)
    result = extractor.select(candidates, policy or settings.selection_policy, texts)

    if result is None:
        click.echo(f"No fare found in {len(texts)} strings", err=True)
        sys.exit(EXIT_NO_PRICE)

    click.echo(format_price(result, as_json=as_json))
    if not as_json:
        click.echo(format_candidates(candidates))
    sys.exit(EXIT_SUCCESS)


@main.command()
@click.option("--app", "app_id", required=True, help="Target app id")
@click.option("--destination", "-d", required=True, help="Destination to type")
@click.option("--serial", "-s", help="adb device serial")
@click.option("--policy", callback=_parse_policy, help="Selection policy")
@click.option("--timeout", default=90.0, type=float, help="Seconds to wait for a price")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@config_option
def quote(
    app_id: str,
    destination: str,
    serial: str | None,
    policy: SelectionPolicy | None,
    timeout: float,
    as_json: bool,
    config_path: Path | None,
) -> None:
    """Drive a target app on a device and capture its fare."""
    try:
        settings = get_settings()
        catalog = _load_catalog(config_path, settings)
        catalog.get(app_id)
    except (ConfigurationError, ValidationError) as e:
        _config_error(e)

    try:
        provider, device = _adb_backend(serial)
        orchestrator = AutomationOrchestrator(provider, device, catalog, settings)
        if policy is not None:
            orchestrator.set_selection_preference(policy)
        try:
            session_id = orchestrator.start_session(app_id, destination)
            outcome = orchestrator.await_result(session_id, int(timeout * 1000))
        finally:
            orchestrator.shutdown()
    except FareprobeException as e:
        _runtime_error(e, as_json)

    if isinstance(outcome, PriceResult):
        click.echo(format_price(outcome, as_json=as_json))
        sys.exit(EXIT_SUCCESS)

    click.echo(format_failure(app_id, outcome, as_json=as_json))
    sys.exit(EXIT_NO_PRICE)


@main.command()
@click.option("--app", "app_id", required=True, help="Target app id")
@click.option("--serial", "-s", help="adb device serial")
@click.option("--policy", callback=_parse_policy, help="Selection policy")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@config_option
def scan(
    app_id: str,
    serial: str | None,
    policy: SelectionPolicy | None,
    as_json: bool,
    config_path: Path | None,
) -> None:
    """Read the fare currently shown by a foreground app, without touching it."""
    try:
        settings = get_settings()
        catalog = _load_catalog(config_path, settings)
        catalog.get(app_id)
    except (ConfigurationError, ValidationError) as e:
        _config_error(e)

    selected = policy or settings.selection_policy
    try:
        provider, _ = _adb_backend(serial)
        monitor = PriceMonitor(provider, catalog, settings, policy=lambda: selected)
        result = monitor.scan_current_app(app_id)
    except FareprobeException as e:
        _runtime_error(e, as_json)

    if result is None:
        click.echo(f"No fare visible in {app_id}", err=True)
        sys.exit(EXIT_NO_PRICE)

    click.echo(format_price(result, as_json=as_json))
    sys.exit(EXIT_SUCCESS)


if __name__ == "__main__":
    main()
