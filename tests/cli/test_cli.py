"""Tests for the fareprobe CLI."""

import importlib
import json

import pytest
from click.testing import CliRunner

from fareprobe import __version__
from fareprobe.cli import main
from fareprobe.exceptions import DeviceCommandError
from fareprobe.mock import FakeDeviceController, ScriptedSnapshotProvider, texts_screen

cli_module = importlib.import_module("fareprobe.cli.main")

VALID_CATALOG = """\
apps:
  - app_id: com.example.taxi
    display_name: Taxi
"""

UNKNOWN_STRATEGY_CATALOG = """\
apps:
  - app_id: com.example.taxi
    display_name: Taxi
    locators:
      destination_field:
        phrases: ["Where to?"]
        strategies: [exact_phrase, telepathy]
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def fake_device(monkeypatch):
    """Replace the adb backend with a scripted provider."""

    def install(*screens):
        provider = ScriptedSnapshotProvider(screens)
        device = FakeDeviceController()
        monkeypatch.setattr(cli_module, "_adb_backend", lambda serial: (provider, device))
        return provider, device

    return install


class TestMainGroup:
    """Test the command group."""

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(main, ["--help"])
        for command in ("apps", "validate", "extract", "quote", "scan"):
            assert command in result.output


class TestAppsCommand:
    """Test 'fareprobe apps'."""

    def test_lists_bundled_apps(self, runner):
        result = runner.invoke(main, ["apps"])

        assert result.exit_code == 0
        assert "com.ubercab" in result.output
        assert "ee.mtakso.client" in result.output
        assert len(result.output.strip().splitlines()) == 5

    def test_verbose(self, runner):
        result = runner.invoke(main, ["apps", "-v"])
        assert "surge_pricing" in result.output
        assert "map_confirmation" in result.output

    def test_custom_catalog(self, runner, tmp_path):
        path = tmp_path / "apps.yaml"
        path.write_text(VALID_CATALOG, encoding="utf-8")

        result = runner.invoke(main, ["apps", "--config", str(path)])

        assert result.exit_code == 0
        assert result.output.startswith("com.example.taxi")


class TestValidateCommand:
    """Test 'fareprobe validate'."""

    def test_valid(self, runner, tmp_path):
        path = tmp_path / "apps.yaml"
        path.write_text(VALID_CATALOG, encoding="utf-8")

        result = runner.invoke(main, ["validate", str(path)])

        assert result.exit_code == 0
        assert "Catalog is valid" in result.output
        assert "(1 apps)" in result.output

    def test_invalid(self, runner, tmp_path):
        path = tmp_path / "apps.yaml"
        path.write_text("apps:\n  - app_id: com.example.taxi\n", encoding="utf-8")

        result = runner.invoke(main, ["validate", str(path)])

        assert result.exit_code == 2
        assert "Validation error" in result.output

    def test_unknown_strategy(self, runner, tmp_path):
        path = tmp_path / "apps.yaml"
        path.write_text(UNKNOWN_STRATEGY_CATALOG, encoding="utf-8")

        result = runner.invoke(main, ["validate", str(path)])

        assert result.exit_code == 2
        assert "telepathy" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, ["validate", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 2


class TestExtractCommand:
    """Test 'fareprobe extract'."""

    def test_text_output(self, runner):
        result = runner.invoke(
            main, ["extract", "--app", "com.ubercab", "UberX", "EGP 65", "EGP 95", "3 min"]
        )

        assert result.exit_code == 0
        assert result.output.startswith("Uber: 65 EGP")
        assert "Service:    UberX" in result.output
        assert "ETA:        3 min" in result.output

    def test_json_output_with_policy(self, runner):
        args = ["--policy", "best_service", "--json", "EGP 65", "EGP 95"]
        result = runner.invoke(main, ["extract", "--app", "com.ubercab", *args])

        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["price"] == 95.0
        assert payload["policy"] == "highest-tier"
        assert payload["allCandidates"] == [65.0, 95.0]

    def test_reads_stdin(self, runner):
        result = runner.invoke(
            main, ["extract", "--app", "sinet.startup.inDriver"], input="Economy\n120 ج.م\n"
        )

        assert result.exit_code == 0
        assert result.output.startswith("InDriver: 120 EGP")

    def test_no_fare(self, runner):
        result = runner.invoke(main, ["extract", "--app", "com.ubercab", "UberX", "3 min"])

        assert result.exit_code == 1
        assert "No fare found in 2 strings" in result.output

    def test_unknown_app(self, runner):
        result = runner.invoke(main, ["extract", "--app", "com.example.taxi", "EGP 65"])

        assert result.exit_code == 2
        assert "Configuration error" in result.output

    def test_bad_policy(self, runner):
        result = runner.invoke(main, ["extract", "--app", "com.ubercab", "--policy", "x", "EGP 65"])
        assert result.exit_code == 2


class TestQuoteCommand:
    """Test 'fareprobe quote' against a scripted device."""

    def test_captured(self, runner, fake_device, make_quote_screen):
        _, device = fake_device(make_quote_screen())

        result = runner.invoke(main, ["quote", "--app", "com.ubercab", "-d", "City Stars"])

        assert result.exit_code == 0
        assert result.output.startswith("Uber: 65 EGP")
        assert device.launched == ["com.ubercab"]

    def test_json(self, runner, fake_device, make_quote_screen):
        fake_device(make_quote_screen())

        result = runner.invoke(
            main, ["quote", "--app", "com.ubercab", "-d", "City Stars", "--json"]
        )

        assert json.loads(result.output)["appId"] == "com.ubercab"

    def test_wait_budget_elapsed(self, runner, fake_device, make_quote_screen):
        fake_device(make_quote_screen())

        result = runner.invoke(
            main, ["quote", "--app", "com.ubercab", "-d", "City Stars", "--timeout", "0"]
        )

        assert result.exit_code == 1
        assert "await-timeout" in result.output

    def test_unknown_app(self, runner, fake_device):
        fake_device()
        result = runner.invoke(main, ["quote", "--app", "com.example.taxi", "-d", "Maadi"])
        assert result.exit_code == 2


class TestScanCommand:
    """Test 'fareprobe scan'."""

    def test_fare_visible(self, runner, fake_device):
        fake_device(texts_screen("com.careem.acma", ["Go", "EGP 80", "EGP 110"]))

        result = runner.invoke(main, ["scan", "--app", "com.careem.acma"])

        assert result.exit_code == 0
        assert result.output.startswith("Careem: 80 EGP")

    def test_other_app_in_foreground(self, runner, fake_device):
        fake_device(texts_screen("com.ubercab", ["EGP 65"]))

        result = runner.invoke(main, ["scan", "--app", "com.careem.acma"])

        assert result.exit_code == 1
        assert "No fare visible in com.careem.acma" in result.output

    def test_device_error_as_json(self, runner, monkeypatch):
        def no_device(serial):
            raise DeviceCommandError(["adb", "-s", serial, "shell"], 1, "device offline")

        monkeypatch.setattr(cli_module, "_adb_backend", no_device)

        result = runner.invoke(main, ["scan", "--app", "com.ubercab", "-s", "R58M", "--json"])

        assert result.exit_code == 3
        payload = json.loads(result.output)
        assert payload["error"] == "DEVICE_COMMAND_FAILED"
        assert payload["context"]["stderr"] == "device offline"

    def test_device_error_as_text(self, runner, monkeypatch):
        def no_device(serial):
            raise DeviceCommandError(["adb", "devices"], 1)

        monkeypatch.setattr(cli_module, "_adb_backend", no_device)

        result = runner.invoke(main, ["scan", "--app", "com.ubercab"])

        assert result.exit_code == 3
        assert "Runtime error: [DEVICE_COMMAND_FAILED]" in result.output
