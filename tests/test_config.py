"""Tests for settings loading and logging setup."""

import logging
from pathlib import Path

import pytest

from diaryx_site._logging import LOG_LEVEL_ENV, PACKAGE_LOGGER, configure_logging
from diaryx_site.config import (
    CONFIG_FILENAME,
    DEFAULT_ASSET_EXTENSIONS,
    DEFAULT_OUTPUT_DIR,
    OUTPUT_DIR_ENV,
    ConfigurationError,
    load_settings,
)
from diaryx_site.publisher import PublishConfig


class TestLoadSettings:
    def test_defaults_without_file(self, source_dir: Path):
        settings = load_settings(source_dir)

        assert settings.output_dir == DEFAULT_OUTPUT_DIR
        assert settings.template is None
        assert settings.mode == "viewer"
        assert settings.asset_extensions == list(DEFAULT_ASSET_EXTENSIONS)
        assert settings.redirect_index is True

    def test_empty_file_uses_defaults(self, source_dir: Path):
        (source_dir / CONFIG_FILENAME).write_text("# only comments\n")

        assert load_settings(source_dir).mode == "viewer"

    def test_file_values(self, source_dir: Path):
        (source_dir / CONFIG_FILENAME).write_text(
            "output_dir: site\ntemplate: viewer.html\nmode: static\n"
            "asset_extensions: ['.PNG', svg]\nclean: true\n"
        )

        settings = load_settings(source_dir)

        assert settings.output_dir == str(source_dir / "site")
        assert settings.template == str(source_dir / "viewer.html")
        assert settings.mode == "static"
        assert settings.asset_extensions == ["png", "svg"]
        assert settings.clean is True

    def test_absolute_paths_kept(self, source_dir: Path, tmp_path: Path):
        target = tmp_path / "out"
        (source_dir / CONFIG_FILENAME).write_text(f"output_dir: {target}\n")

        assert load_settings(source_dir).output_dir == str(target)

    def test_env_overrides_output_dir(self, source_dir: Path, monkeypatch: pytest.MonkeyPatch):
        (source_dir / CONFIG_FILENAME).write_text("output_dir: site\n")
        monkeypatch.setenv(OUTPUT_DIR_ENV, "/tmp/elsewhere")

        assert load_settings(source_dir).output_dir == "/tmp/elsewhere"

    def test_invalid_yaml(self, source_dir: Path):
        (source_dir / CONFIG_FILENAME).write_text("mode: [broken\n")

        with pytest.raises(ConfigurationError, match="could not load settings"):
            load_settings(source_dir)

    def test_not_a_mapping(self, source_dir: Path):
        (source_dir / CONFIG_FILENAME).write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_settings(source_dir)

    def test_invalid_value(self, source_dir: Path):
        (source_dir / CONFIG_FILENAME).write_text("mode: fancy\n")

        with pytest.raises(ConfigurationError, match="mode"):
            load_settings(source_dir)

    def test_unknown_key_rejected(self, source_dir: Path):
        """A misspelled setting is reported instead of silently ignored."""
        (source_dir / CONFIG_FILENAME).write_text("outputdir: site\n")

        with pytest.raises(ConfigurationError, match="outputdir"):
            load_settings(source_dir)

    def test_publish_config_from_settings(self, source_dir: Path):
        (source_dir / CONFIG_FILENAME).write_text("template: viewer.html\nredirect_index: false\n")

        config = PublishConfig.from_settings(load_settings(source_dir))

        assert config.output_dir == Path(DEFAULT_OUTPUT_DIR)
        assert config.template_path == source_dir / "viewer.html"
        assert config.redirect_index is False


class TestConfigureLogging:
    def test_single_handler(self, monkeypatch: pytest.MonkeyPatch):
        """Repeated calls don't stack handlers."""
        monkeypatch.setenv(LOG_LEVEL_ENV, "debug")

        configure_logging()
        configure_logging()

        logger = logging.getLogger(PACKAGE_LOGGER)
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_explicit_level_wins_over_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "error")

        logger = configure_logging("DEBUG")

        assert logger is logging.getLogger(PACKAGE_LOGGER)
        assert logger.level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "chatty")

        assert configure_logging().level == logging.INFO
