"""Tests for export settings loading"""
import pytest

from bookmark_export.config.settings import EXPORT_SETTINGS, ExportSettings, load_settings
from bookmark_export.core.exceptions import ValidationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "DEFAULT_FILE_NAME",
        "FALLBACK_FILE_NAME",
        "FILE_EXTENSION",
        "OUTPUT_SUFFIX",
        "MAX_FILENAME_LENGTH",
        "MAX_CONCURRENCY",
        "API_KEY",
    ):
        monkeypatch.delenv(f"BOOKMARK_EXPORT_{name}", raising=False)


class TestExportSettings:
    """Test settings defaults and validation"""

    def test_defaults(self):
        settings = ExportSettings()

        assert settings.default_file_name == "ScienceReading_Book"
        assert settings.fallback_file_name == "exported_book"
        assert settings.file_extension == ".pdf"
        assert settings.output_suffix == "_with_bookmarks"
        assert settings.max_filename_length == 100
        assert settings.max_concurrency is None
        assert settings.api_key == "bookmark-export-dev-key"

    def test_api_key_not_in_repr(self):
        assert "hidden-key" not in repr(ExportSettings(api_key="hidden-key"))

    @pytest.mark.parametrize("kwargs", [
        {"max_filename_length": 0},
        {"max_concurrency": 0},
        {"file_extension": "pdf"},
        {"api_key": "  "},
        {"api_key": 12345},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValidationError):
            ExportSettings(**kwargs)


class TestLoadSettings:
    """Test YAML and environment layering"""

    def test_no_overrides_returns_global_defaults(self):
        assert load_settings() is EXPORT_SETTINGS

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("output_suffix: _copy\nmax_concurrency: 4\n")

        settings = load_settings(path)

        assert settings.output_suffix == "_copy"
        assert settings.max_concurrency == 4
        assert settings.file_extension == ".pdf"

    def test_empty_yaml_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("")

        assert load_settings(path) == EXPORT_SETTINGS

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.yaml"
        path.write_text("output_suffix: _copy\n")
        monkeypatch.setenv("BOOKMARK_EXPORT_OUTPUT_SUFFIX", "_env")
        monkeypatch.setenv("BOOKMARK_EXPORT_MAX_FILENAME_LENGTH", "40")

        settings = load_settings(path)

        assert settings.output_suffix == "_env"
        assert settings.max_filename_length == 40

    def test_env_max_concurrency_none(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.yaml"
        path.write_text("max_concurrency: 2\n")
        monkeypatch.setenv("BOOKMARK_EXPORT_MAX_CONCURRENCY", "none")

        assert load_settings(path).max_concurrency is None

    def test_api_key_from_yaml_and_env(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.yaml"
        path.write_text("api_key: yaml-key\n")

        assert load_settings(path).api_key == "yaml-key"

        monkeypatch.setenv("BOOKMARK_EXPORT_API_KEY", "env-key")
        assert load_settings(path).api_key == "env-key"

    def test_env_non_integer(self, monkeypatch):
        monkeypatch.setenv("BOOKMARK_EXPORT_MAX_CONCURRENCY", "many")

        with pytest.raises(ValidationError):
            load_settings()

    def test_unknown_keys_rejected(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("output_suffix: _copy\nretries: 3\n")

        with pytest.raises(ValidationError, match="retries"):
            load_settings(path)

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValidationError):
            load_settings(path)

    def test_invalid_yaml_rejected(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("output_suffix: [unclosed\n")

        with pytest.raises(ValidationError):
            load_settings(path)

    def test_missing_file_rejected(self, tmp_path):
        with pytest.raises(ValidationError):
            load_settings(tmp_path / "missing.yaml")

    def test_invalid_value_from_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("max_concurrency: 0\n")

        with pytest.raises(ValidationError):
            load_settings(path)
