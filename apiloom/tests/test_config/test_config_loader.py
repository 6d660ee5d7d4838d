"""Unit tests for configuration loading."""

import pytest

from apiloom.core.config import config_loader
from apiloom.core.config.config_loader import (
    ConfigError,
    DiagramSettings,
    Settings,
    apply_env_overrides,
    get_settings,
    load_config_file,
    load_settings,
    reload_configs,
)

_ENV_VARS = (
    "APILOOM_CONFIG_DIR",
    "APILOOM_OUTPUT_DIR",
    "APILOOM_PACKAGE_DIAGRAM",
    "APILOOM_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reload_configs()
    yield
    reload_configs()


def _write_config(directory, text: str):
    (directory / "apiloom.yaml").write_text(text, encoding="utf-8")
    return directory


# ── Tests: File Loading ───────────────────────────────────────────────────


class TestLoadConfigFile:

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config_file(tmp_path) == {}
        settings = load_settings(tmp_path)
        assert settings.diagrams.package_diagram is True
        assert settings.diagrams.output_dir == "apiviz-out"
        assert settings.diagrams.coupling == "static"
        assert settings.categories == []
        assert settings.logging.level == "INFO"

    def test_yaml_values(self, tmp_path):
        _write_config(tmp_path, (
            "diagrams:\n"
            "  package_diagram: false\n"
            "  output_dir: build/dot\n"
            "  validate: true\n"
            "  coupling: graph\n"
            "categories:\n"
            "  - core:red\n"
            "  - [spi, khaki1, navy]\n"
            "logging:\n"
            "  level: debug\n"
        ))
        settings = load_settings(tmp_path)
        assert settings.diagrams.package_diagram is False
        assert settings.diagrams.output_dir == "build/dot"
        assert settings.diagrams.validate_output is True
        assert settings.diagrams.coupling == "graph"
        assert settings.categories == ["core:red", ["spi", "khaki1", "navy"]]
        assert settings.logging.level == "DEBUG"

    def test_empty_file(self, tmp_path):
        _write_config(tmp_path, "")
        assert load_config_file(tmp_path) == {}

    def test_null_categories(self, tmp_path):
        _write_config(tmp_path, "categories:\n")
        assert load_settings(tmp_path).categories == []

    def test_malformed_yaml(self, tmp_path):
        _write_config(tmp_path, "diagrams: [unclosed\n")
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config_file(tmp_path)

    def test_top_level_must_be_mapping(self, tmp_path):
        _write_config(tmp_path, "- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config_file(tmp_path)

    def test_config_dir_from_env(self, tmp_path, monkeypatch):
        _write_config(tmp_path, "diagrams:\n  output_dir: from-env-dir\n")
        monkeypatch.setenv("APILOOM_CONFIG_DIR", str(tmp_path))
        assert load_settings().diagrams.output_dir == "from-env-dir"


# ── Tests: Validation ─────────────────────────────────────────────────────


class TestValidation:

    def test_unknown_coupling_rejected(self, tmp_path):
        _write_config(tmp_path, "diagrams:\n  coupling: bytecode\n")
        with pytest.raises(ConfigError, match="coupling"):
            load_settings(tmp_path)

    def test_unknown_log_level_rejected(self, tmp_path):
        _write_config(tmp_path, "logging:\n  level: chatty\n")
        with pytest.raises(ConfigError):
            load_settings(tmp_path)

    def test_validate_alias_and_field_name(self):
        assert DiagramSettings(validate=True).validate_output is True
        assert DiagramSettings(validate_output=True).validate_output is True


# ── Tests: Environment Overrides ──────────────────────────────────────────


class TestEnvOverrides:

    def test_overrides_applied(self, tmp_path, monkeypatch):
        _write_config(tmp_path, "diagrams:\n  output_dir: from-file\n")
        monkeypatch.setenv("APILOOM_OUTPUT_DIR", "from-env")
        monkeypatch.setenv("APILOOM_PACKAGE_DIAGRAM", "no")
        monkeypatch.setenv("APILOOM_LOG_LEVEL", "warning")

        settings = load_settings(tmp_path)
        assert settings.diagrams.output_dir == "from-env"
        assert settings.diagrams.package_diagram is False
        assert settings.logging.level == "WARNING"

    def test_blank_boolean_ignored(self, monkeypatch):
        monkeypatch.setenv("APILOOM_PACKAGE_DIAGRAM", " ")
        assert "package_diagram" not in apply_env_overrides({})["diagrams"]

    def test_bad_boolean_rejected(self, monkeypatch):
        monkeypatch.setenv("APILOOM_PACKAGE_DIAGRAM", "maybe")
        with pytest.raises(ConfigError, match="APILOOM_PACKAGE_DIAGRAM"):
            apply_env_overrides({})

    def test_input_not_mutated(self, monkeypatch):
        monkeypatch.setenv("APILOOM_OUTPUT_DIR", "x")
        config = {"diagrams": {"output_dir": "y"}}
        apply_env_overrides(config)
        assert config == {"diagrams": {"output_dir": "y"}}


# ── Tests: Caching ────────────────────────────────────────────────────────


class TestSettingsCache:

    def test_cached_until_reload(self, tmp_path, monkeypatch):
        monkeypatch.setenv("APILOOM_CONFIG_DIR", str(tmp_path))
        _write_config(tmp_path, "diagrams:\n  output_dir: first\n")
        first = get_settings()
        _write_config(tmp_path, "diagrams:\n  output_dir: second\n")

        assert get_settings() is first
        reload_configs()
        assert get_settings().diagrams.output_dir == "second"

    def test_reload_clears_global(self, tmp_path, monkeypatch):
        monkeypatch.setenv("APILOOM_CONFIG_DIR", str(tmp_path))
        get_settings()
        reload_configs()
        assert config_loader._settings is None

    def test_settings_defaults_without_file(self):
        assert Settings().diagrams == DiagramSettings()
