"""
Tests for settingsgen.config.loader module.

Tests generator configuration loading and merging including:
- Built-in defaults
- Project file discovery (settingsgen.yaml upward from the document)
- Explicit --config files layered on top
- Error handling for unreadable or malformed files
- Applying the configuration to a built document
"""

from __future__ import annotations

import pytest

from settingsgen.config import load_generator_config
from settingsgen.config.loader import DEFAULT_CONFIG, _deep_merge_dicts
from settingsgen.core import build_settings
from settingsgen.exceptions import ConfigError


class TestConfigLoading:
    """Tests for basic configuration loading."""

    def test_builtin_defaults(self):
        """Test that no document and no file gives the built-in defaults."""
        config = load_generator_config()

        assert config == DEFAULT_CONFIG
        assert config is not DEFAULT_CONFIG

    def test_project_file_found_upward(self, write_document, create_yaml_file):
        """Test that settingsgen.yaml is found in a parent directory."""
        create_yaml_file("settingsgen.yaml", {"defaults": {"prefix": "APP_EXPORT"}})
        document = write_document("settings/nested/app.xml", "<Settings/>")

        config = load_generator_config(document)

        assert config["defaults"]["prefix"] == "APP_EXPORT"
        assert config["defaults"]["backend"] is None

    def test_nearest_project_file_wins(self, write_document, create_yaml_file):
        """Test that the closest settingsgen.yaml is used."""
        create_yaml_file("settingsgen.yaml", {"defaults": {"prefix": "OUTER"}})
        create_yaml_file("settings/settingsgen.yaml", {"defaults": {"prefix": "INNER"}})
        document = write_document("settings/app.xml", "<Settings/>")

        config = load_generator_config(document)

        assert config["defaults"]["prefix"] == "INNER"

    def test_explicit_file_overrides_project(self, write_document, create_yaml_file):
        """Test that an explicit config file is merged over the project file."""
        create_yaml_file(
            "settingsgen.yaml",
            {"defaults": {"prefix": "PROJECT"}, "type_mappings": {"a": "int"}},
        )
        explicit = create_yaml_file("ci/override.yaml", {"type_mappings": {"b": "long"}})
        document = write_document("app.xml", "<Settings/>")

        config = load_generator_config(document, config_path=explicit)

        assert config["defaults"]["prefix"] == "PROJECT"
        assert config["type_mappings"] == {"a": "int", "b": "long"}

    def test_empty_file_is_empty_mapping(self, tmp_path):
        """Test that an empty settingsgen.yaml changes nothing."""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        config = load_generator_config(config_path=path)

        assert config == DEFAULT_CONFIG

    def test_logs_loaded_files(self, create_yaml_file, recording_logger):
        """Test that each loaded layer is reported at verbose level."""
        path = create_yaml_file("cfg.yaml", {"defaults": {"prefix": "X"}})

        load_generator_config(config_path=path, logger=recording_logger)

        assert ("CONFIG", f"Loading: {path}") in recording_logger.messages


class TestConfigMerging:
    """Tests for configuration merging behavior."""

    def test_dict_deep_merge(self):
        """Test that nested dicts are merged key by key."""
        base = {"defaults": {"prefix": "A", "backend": None}}
        overlay = {"defaults": {"backend": {"class": "X"}}}

        merged = _deep_merge_dicts(base, overlay)

        assert merged == {"defaults": {"prefix": "A", "backend": {"class": "X"}}}

    def test_list_replaced(self):
        """Test that lists are replaced, not concatenated."""
        base = {"params": [1, 2]}
        overlay = {"params": [3]}

        assert _deep_merge_dicts(base, overlay) == {"params": [3]}

    def test_inputs_not_mutated(self):
        """Test that merging leaves both inputs untouched."""
        base = {"defaults": {"prefix": "A"}}
        overlay = {"defaults": {"prefix": "B"}}

        _deep_merge_dicts(base, overlay)

        assert base == {"defaults": {"prefix": "A"}}
        assert overlay == {"defaults": {"prefix": "B"}}


class TestConfigErrors:
    """Tests for configuration error handling."""

    def test_missing_explicit_file_raises(self, tmp_path):
        """Test that an explicit config file must exist."""
        with pytest.raises(ConfigError, match="config file not found"):
            load_generator_config(config_path=tmp_path / "missing.yaml")

    def test_invalid_yaml_raises(self, tmp_path):
        """Test that YAML syntax errors raise ConfigError."""
        path = tmp_path / "bad.yaml"
        path.write_text("defaults: [unclosed\n")

        with pytest.raises(ConfigError, match="error parsing YAML"):
            load_generator_config(config_path=path)

    def test_non_mapping_raises(self, tmp_path):
        """Test that a top-level list is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="must be a mapping"):
            load_generator_config(config_path=path)

    @pytest.mark.parametrize(
        "data, message",
        [
            ({"defaults": "nope"}, "'defaults' must be a mapping"),
            ({"type_mappings": ["a"]}, "'type_mappings' must be a mapping"),
            ({"defaults": {"backend": {"params": []}}}, "needs a 'class'"),
            (
                {"defaults": {"backend": {"class": "X", "params": "p"}}},
                "must be a list",
            ),
            (
                {"defaults": {"backend": {"class": "X", "params": ["oops"]}}},
                r"params\[0\]' must be a mapping with a 'type'",
            ),
            (
                {
                    "defaults": {
                        "backend": {
                            "class": "X",
                            "params": [{"type": "int"}, {"value": "1"}],
                        }
                    }
                },
                r"params\[1\]' must be a mapping with a 'type'",
            ),
        ],
    )
    def test_bad_shape_raises(self, create_yaml_file, data, message):
        """Test that recognized keys of the wrong kind are rejected."""
        path = create_yaml_file("cfg.yaml", data)

        with pytest.raises(ConfigError, match=message):
            load_generator_config(config_path=path)


class TestApplyConfig:
    """Tests for applying configuration defaults during a build."""

    CONFIG = {
        "defaults": {
            "prefix": "CFG_EXPORT",
            "backend": {
                "class": "Cfg::Accessor",
                "params": [{"type": "QString", "value": "cfg.ini", "as_str": True}],
            },
        },
        "type_mappings": {"url": "CfgUrl", "size": "QSize"},
    }

    def test_defaults_fill_silent_document(self, write_document):
        """Test that a document without metadata takes the config values."""
        path = write_document("app.xml", '<Settings><Entry key="k" type="size"/></Settings>')

        document = build_settings(path, config=self.CONFIG)

        assert document.prefix == "CFG_EXPORT"
        assert document.backend.class_name == "Cfg::Accessor"
        assert document.backend.params[0].value == "cfg.ini"
        assert document.backend.params[0].as_str is True
        assert document.resolve_type("size") == "QSize"

    def test_document_values_win(self, write_document, sample_settings_xml):
        """Test that the document's own metadata is never overridden."""
        path = write_document("app.xml", sample_settings_xml)

        document = build_settings(path, config=self.CONFIG)

        assert document.prefix == "APP_EXPORT"
        assert document.backend.class_name == "Demo::IniAccessor"
        assert document.type_mappings["url"] == "QUrl"
        assert list(document.type_mappings) == ["url", "range", "size"]

    def test_project_file_used_by_build(self, write_document, create_yaml_file):
        """Test that build_settings loads settingsgen.yaml when no config is given."""
        create_yaml_file("settingsgen.yaml", {"defaults": {"prefix": "FROM_FILE"}})
        path = write_document("app.xml", "<Settings/>")

        document = build_settings(path)

        assert document.prefix == "FROM_FILE"
