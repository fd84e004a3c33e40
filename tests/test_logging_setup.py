"""Tests for fintrack.logging_setup."""

import io
import logging
from collections.abc import Iterator

import pytest

import fintrack.logging_setup
from fintrack.logging_setup import (
    LOG_LEVEL_ENV,
    configure_logging,
    get_logger,
    level_from_name,
    resolve_level,
)


@pytest.fixture
def pkg_logger(monkeypatch: pytest.MonkeyPatch) -> Iterator[logging.Logger]:
    logger = logging.getLogger("fintrack")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    monkeypatch.setattr(fintrack.logging_setup, "_configured", False)
    yield logger
    logger.handlers, logger.level, logger.propagate = saved


class TestLevelFromName:
    """Tests for level_from_name."""

    def test_known_names(self) -> None:
        """Should accept standard names in any case."""
        assert level_from_name("DEBUG") == logging.DEBUG
        assert level_from_name(" warning ") == logging.WARNING

    def test_unknown_or_empty(self) -> None:
        """Should return None for names it does not know."""
        assert level_from_name("chatty") is None
        assert level_from_name("") is None
        assert level_from_name(None) is None


class TestResolveLevel:
    """Tests for resolve_level."""

    def test_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should fall back to WARNING."""
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)

        assert resolve_level() == logging.WARNING

    def test_configured_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should use the configured level when no override is set."""
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)

        assert resolve_level("ERROR") == logging.ERROR

    def test_environment_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should prefer the environment over the configured level."""
        monkeypatch.setenv(LOG_LEVEL_ENV, "debug")

        assert resolve_level("ERROR") == logging.DEBUG

    def test_bad_environment_value_is_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should skip an unknown environment value."""
        monkeypatch.setenv(LOG_LEVEL_ENV, "loud")

        assert resolve_level("INFO") == logging.INFO


class TestConfigureLogging:
    """Tests for configure_logging and get_logger."""

    def test_writes_to_stream(self, pkg_logger: logging.Logger) -> None:
        """Should emit package messages at or above the level."""
        stream = io.StringIO()
        configure_logging(logging.INFO, stream=stream)

        get_logger("fintrack.store.sqlite").info("saved %d rows", 3)
        get_logger("fintrack.store.sqlite").debug("hidden")

        output = stream.getvalue()
        assert "fintrack.store.sqlite INFO saved 3 rows" in output
        assert "hidden" not in output
        assert pkg_logger.propagate is False

    def test_only_first_call_applies(self, pkg_logger: logging.Logger) -> None:
        """Should ignore later calls."""
        configure_logging(logging.ERROR, stream=io.StringIO())
        configure_logging(logging.DEBUG, stream=io.StringIO())

        assert pkg_logger.level == logging.ERROR
        assert len([h for h in pkg_logger.handlers if isinstance(h, logging.StreamHandler)]) == 1
