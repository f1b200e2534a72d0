"""
Unit tests for settings and logging setup.
"""

import logging

import pytest
import structlog
from pydantic import ValidationError

from merkle_tree.core import logging as logging_module
from merkle_tree.core.config import Settings, get_settings, settings
from merkle_tree.core.logging import (
    PACKAGE_LOGGER,
    PackageHandler,
    resolve_log_level,
    setup_logging,
)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default values."""
        monkeypatch.delenv("HASH_ALGORITHM", raising=False)
        monkeypatch.delenv("METRICS_ENABLED", raising=False)
        config = Settings(_env_file=None)

        assert config.HASH_ALGORITHM == "keccak256"
        assert config.METRICS_ENABLED is True

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test environment variables override defaults."""
        monkeypatch.setenv("HASH_ALGORITHM", "SHA256")
        monkeypatch.setenv("METRICS_ENABLED", "false")
        config = Settings(_env_file=None)

        assert config.HASH_ALGORITHM == "sha256"
        assert config.METRICS_ENABLED is False

    def test_unsupported_algorithm(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test unknown algorithms are rejected."""
        monkeypatch.setenv("HASH_ALGORITHM", "md5")

        with pytest.raises(ValidationError, match="HASH_ALGORITHM"):
            Settings(_env_file=None)

    def test_get_settings_cached(self) -> None:
        """Test get_settings returns one instance."""
        assert get_settings() is get_settings()


class TestLogging:
    """Tests for setup_logging."""

    @pytest.fixture(autouse=True)
    def restore_logging(self):
        """Reset structlog and the package logger after each test."""
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        handlers = list(package_logger.handlers)
        level = package_logger.level
        propagate = package_logger.propagate
        yield
        structlog.reset_defaults()
        package_logger.handlers = handlers
        package_logger.setLevel(level)
        package_logger.propagate = propagate

    def test_configured_on_import(self) -> None:
        """Test importing the package installs its handler."""
        import merkle_tree  # noqa: F401

        if settings.CONFIGURE_LOGGING:
            handlers = logging.getLogger(PACKAGE_LOGGER).handlers
            assert any(isinstance(h, PackageHandler) for h in handlers)

    def test_console_renderer(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test development uses the console renderer."""
        monkeypatch.setattr(logging_module.settings, "ENV", "development")
        setup_logging(force=True)

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_json_renderer(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test production uses the JSON renderer."""
        monkeypatch.setattr(logging_module.settings, "ENV", "production")
        setup_logging(force=True)

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert isinstance(structlog.get_config()["logger_factory"], structlog.stdlib.LoggerFactory)

    def test_keeps_existing_structlog_config(self) -> None:
        """Test a host application's structlog setup is not replaced."""
        renderer = structlog.processors.KeyValueRenderer()
        structlog.configure(processors=[renderer])

        setup_logging()

        assert structlog.get_config()["processors"] == [renderer]

    def test_level_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the package logger level follows LOG_LEVEL."""
        monkeypatch.setattr(logging_module.settings, "DEBUG", False)
        monkeypatch.setattr(logging_module.settings, "LOG_LEVEL", "warning")

        assert setup_logging().level == logging.WARNING

    def test_debug_flag_forces_debug(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test DEBUG overrides LOG_LEVEL."""
        monkeypatch.setattr(logging_module.settings, "DEBUG", True)
        monkeypatch.setattr(logging_module.settings, "LOG_LEVEL", "ERROR")

        assert setup_logging().level == logging.DEBUG

    def test_explicit_level_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test an explicit level overrides settings."""
        monkeypatch.setattr(logging_module.settings, "DEBUG", True)

        assert setup_logging("error").level == logging.ERROR

    def test_unknown_level(self) -> None:
        """Test an unknown level name raises."""
        with pytest.raises(ValueError, match="verbose"):
            resolve_log_level("verbose")

    def test_root_logger_untouched(self) -> None:
        """Test the handler goes on the package logger only."""
        root = logging.getLogger()
        before = list(root.handlers)

        setup_logging()
        setup_logging()

        assert root.handlers == before
        handlers = logging.getLogger(PACKAGE_LOGGER).handlers
        assert sum(isinstance(h, PackageHandler) for h in handlers) == 1
