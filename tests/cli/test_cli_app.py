"""Tests for CLI app factory and context wiring."""

import json

import pytest
import typer

from ddq import __version__
from ddq.cli.state import CLIState
from ddq.config.settings import LogLevel, OutputFormat


@pytest.fixture
def capture_state():
    """Register a command on an app that records the CLIState it receives."""

    def _register(app: typer.Typer) -> dict:
        captured: dict = {}

        @app.command()
        def test_cmd(ctx: typer.Context):
            captured["state"] = ctx.obj

        return captured

    return _register


class TestCLIAppFactory:
    """Test create_cli_app factory."""

    def test_returns_typer_app(self, default_app):
        """create_cli_app returns a Typer instance."""
        assert isinstance(default_app, typer.Typer)
        assert default_app.info.name == "ddq"

    def test_registers_subcommands(self, cli_runner, default_app):
        result = cli_runner.invoke(default_app, ["--help"])

        assert result.exit_code == 0
        for command in ("logs", "metrics", "events", "raw"):
            assert command in result.stdout

    def test_version(self, cli_runner, default_app):
        result = cli_runner.invoke(default_app, ["--version"])

        assert result.exit_code == 0
        assert result.stdout.strip() == f"ddq {__version__}"


class TestContextInjection:
    """Test our context injection and state wiring."""

    def test_commands_receive_cli_state(
        self, cli_runner, default_app: typer.Typer, capture_state
    ):
        """Commands receive CLIState via context."""
        captured = capture_state(default_app)

        result = cli_runner.invoke(default_app, ["test-cmd"])

        assert result.exit_code == 0
        assert isinstance(captured["state"], CLIState)

    def test_injected_settings_available_in_context(
        self, cli_runner, test_app, test_settings, capture_state
    ):
        """Injected settings are accessible in command context."""
        captured = capture_state(test_app)

        result = cli_runner.invoke(test_app, ["test-cmd"])

        assert result.exit_code == 0
        assert captured["state"].settings is test_settings


class TestGlobalOptions:
    """Test global CLI flag handling."""

    def test_verbose_flag_enables_debug_logging(
        self, cli_runner, default_app, capture_state
    ):
        """--verbose flag sets DEBUG log level."""
        captured = capture_state(default_app)

        result = cli_runner.invoke(default_app, ["--verbose", "test-cmd"])

        assert result.exit_code == 0
        assert captured["state"].settings.log_level == LogLevel.DEBUG

    def test_flags_override_defaults(self, cli_runner, default_app, capture_state):
        captured = capture_state(default_app)

        result = cli_runner.invoke(
            default_app,
            [
                "--site",
                "datadoghq.eu",
                "--api-key",
                "k1",
                "--app-key",
                "k2",
                "--retries",
                "0",
                "--retry-backoff-ms",
                "50",
                "--retry-max-backoff-ms",
                "60",
                "--no-retry-rate-limit",
                "--timeout-seconds",
                "2.5",
                "--output",
                "PRETTY",
                "test-cmd",
            ],
        )

        assert result.exit_code == 0
        settings = captured["state"].settings
        assert settings.base_url == "https://api.datadoghq.eu"
        assert settings.api_key.get_secret_value() == "k1"
        assert settings.app_key.get_secret_value() == "k2"
        assert settings.retries == 0
        assert settings.retry_backoff_ms == 50
        assert settings.retry_max_backoff_ms == 60
        assert settings.retry_rate_limit is False
        assert settings.timeout_seconds == 2.5
        assert settings.output is OutputFormat.PRETTY

    def test_flags_beat_environment(
        self, cli_runner, default_app, capture_state, monkeypatch
    ):
        monkeypatch.setenv("DD_SITE", "datadoghq.eu")
        monkeypatch.setenv("DD_API_KEY", "from-env")
        captured = capture_state(default_app)

        result = cli_runner.invoke(
            default_app, ["--site", "us5.datadoghq.com", "test-cmd"]
        )

        assert result.exit_code == 0
        settings = captured["state"].settings
        assert settings.base_url == "https://api.us5.datadoghq.com"
        assert settings.api_key.get_secret_value() == "from-env"

    def test_unset_compact_keeps_environment_value(
        self, cli_runner, default_app, capture_state, monkeypatch
    ):
        monkeypatch.setenv("DDQ_COMPACT", "true")
        captured = capture_state(default_app)

        result = cli_runner.invoke(default_app, ["test-cmd"])

        assert result.exit_code == 0
        assert captured["state"].settings.compact is True

    def test_injected_settings_bypass_cli_flags(
        self, cli_runner, test_app, test_settings, capture_state
    ):
        """Injected settings override CLI flags (for testing)."""
        captured = capture_state(test_app)

        result = cli_runner.invoke(test_app, ["--retries", "99", "test-cmd"])

        assert result.exit_code == 0
        assert captured["state"].settings.retries == test_settings.retries

    def test_invalid_configuration_is_usage_error(self, cli_runner, default_app):
        """Out-of-range flags produce a usage envelope on stderr."""
        result = cli_runner.invoke(
            default_app,
            ["--retry-backoff-ms", "500", "--retry-max-backoff-ms", "100", "logs", "*"],
        )

        assert result.exit_code == 2
        assert result.stdout == ""
        error = json.loads(result.stderr)["error"]
        assert error["category"] == "usage"
        assert error["message"].startswith("Invalid configuration")

    def test_negative_retries_is_usage_error(self, cli_runner, default_app):
        result = cli_runner.invoke(default_app, ["--retries", "-1", "logs", "*"])

        assert result.exit_code == 2
        assert json.loads(result.stderr)["error"]["exit_code"] == 2

    def test_unknown_output_format_is_rejected(self, cli_runner, default_app):
        result = cli_runner.invoke(default_app, ["--output", "yaml", "logs", "*"])

        assert result.exit_code == 2
