"""
Unit tests for parse option loading and settings.

Tests defaults, config files, environment overrides and validation.
"""

import json

import pytest

from config.defaults import DEFAULT_OPTIONS, ENV_VAR_MAPPING
from config.loader import ConfigurationError, ConfigurationLoader
from godecl.models.config import GodeclSettings, ParseOptions


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep GODECL_ variables of the outer environment out of the tests"""
    for env_var in list(ENV_VAR_MAPPING) + ["GODECL_LOG_LEVEL", "GODECL_MAX_WORKERS", "GODECL_PACKAGE_PATH"]:
        monkeypatch.delenv(env_var, raising=False)


class TestParseOptions:
    """Option model"""

    def test_defaults_match_default_options(self):
        assert ParseOptions().model_dump() == DEFAULT_OPTIONS

    def test_camel_case_names(self):
        options = ParseOptions(**{"ignoreComments": True, "allowAnyImportAlias": True})

        assert options.ignore_comments
        assert options.allow_any_import_alias
        assert options.to_dict()["ignoreComments"] is True

    def test_unknown_option(self):
        with pytest.raises(ValueError):
            ParseOptions(ignore_everything=True)

    def test_with_overrides(self):
        options = ParseOptions(ignore_types=True).with_overrides(ignore_structs=True, ignore_types=None)

        assert options.ignore_structs
        assert options.ignore_types


class TestConfigurationLoader:
    """Test ConfigurationLoader functionality"""

    def test_defaults(self, tmp_path):
        options = ConfigurationLoader(tmp_path).load_options()
        assert options == ParseOptions()

    def test_explicit_config_file(self, tmp_path):
        config_file = tmp_path / "options.json"
        config_file.write_text(json.dumps({"ignoreComments": True, "ignore_methods": True}))

        options = ConfigurationLoader(tmp_path).load_options(config_file)

        assert options.ignore_comments
        assert options.ignore_methods
        assert not options.ignore_structs

    def test_working_directory_config_file(self, tmp_path):
        (tmp_path / ".godecl.json").write_text(json.dumps({"ignoreStructs": True}))

        options = ConfigurationLoader(tmp_path).load_options()
        assert options.ignore_structs

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        (tmp_path / ".godecl.json").write_text(json.dumps({"ignoreStructs": True}))
        monkeypatch.setenv("GODECL_IGNORE_STRUCTS", "false")
        monkeypatch.setenv("GODECL_ALLOW_ANY_IMPORT_ALIAS", "yes")

        options = ConfigurationLoader(tmp_path).load_options()

        assert not options.ignore_structs
        assert options.allow_any_import_alias

    def test_missing_config_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigurationLoader(tmp_path).load_options(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path):
        config_file = tmp_path / "options.json"
        config_file.write_text("{not json")

        with pytest.raises(ConfigurationError, match="Failed to load config"):
            ConfigurationLoader(tmp_path).load_options(config_file)

    def test_non_object_json(self, tmp_path):
        config_file = tmp_path / "options.json"
        config_file.write_text("[1, 2]")

        with pytest.raises(ConfigurationError, match="JSON object"):
            ConfigurationLoader(tmp_path).load_options(config_file)

    def test_unknown_option_in_file(self, tmp_path):
        config_file = tmp_path / "options.json"
        config_file.write_text(json.dumps({"ignoreEverything": True}))

        with pytest.raises(ConfigurationError, match="Invalid parse options"):
            ConfigurationLoader(tmp_path).load_options(config_file)

    def test_invalid_env_value(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GODECL_IGNORE_TYPES", "sometimes")

        with pytest.raises(ConfigurationError):
            ConfigurationLoader(tmp_path).load_options()

    @pytest.mark.parametrize("value,expected", [
        ("true", True), ("On", True), ("1", True),
        ("false", False), ("no", False), ("0", False),
        ("other", "other"),
    ])
    def test_convert_env_value(self, value, expected):
        assert ConfigurationLoader()._convert_env_value(value) == expected


class TestGodeclSettings:
    """Process settings from the environment"""

    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        settings = GodeclSettings()

        assert settings.log_level == "WARNING"
        assert settings.max_workers == 4
        assert settings.package_path == ""

    def test_environment(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("GODECL_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("GODECL_MAX_WORKERS", "8")

        settings = GodeclSettings()

        assert settings.log_level == "DEBUG"
        assert settings.max_workers == 8

    def test_invalid_log_level(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("GODECL_LOG_LEVEL", "LOUD")

        with pytest.raises(ValueError):
            GodeclSettings()
