"""Tests for collider.json loading and option validation."""

import json

import pytest

from collider.config import ProjectConfig, ScriptOptions, StyleOptions, load_config
from collider.errors import ConfigError


def write_config(root, data):
    (root / "collider.json").write_text(json.dumps(data))


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path):
        config = load_config(tmp_path)

        assert config == ProjectConfig(root=tmp_path.resolve())
        assert config.source == "project"
        assert config.build == "distribute"
        assert config.templates.minify is True
        assert config.styles.output_style == "compressed"
        assert config.scripts.output == "js/bundle.js"
        assert config.server.port == 8000

    def test_sections_override_defaults(self, tmp_path):
        write_config(
            tmp_path,
            {
                "build": "public",
                "packages": ["ui-matter"],
                "styles": {"output_style": "expanded", "source_map": False},
                "scripts": {"minify": True, "aliases": {"jquery": "vendor/jquery.js"}},
                "server": {"port": 3000},
            },
        )

        config = load_config(tmp_path)

        assert config.build_dir == (tmp_path / "public").resolve()
        assert config.packages == ("ui-matter",)
        assert config.styles == StyleOptions(output_style="expanded", source_map=False)
        assert config.scripts.aliases == {"jquery": "vendor/jquery.js"}
        assert config.server.port == 3000

    def test_unknown_top_level_key(self, tmp_path):
        write_config(tmp_path, {"plugins": []})

        with pytest.raises(ConfigError, match="plugins"):
            load_config(tmp_path)

    def test_unknown_section_option(self, tmp_path):
        write_config(tmp_path, {"styles": {"outputStyle": "compact"}})

        with pytest.raises(ConfigError, match="outputStyle"):
            load_config(tmp_path)

    def test_wrong_type(self, tmp_path):
        write_config(tmp_path, {"templates": {"minify": "yes"}})

        with pytest.raises(ConfigError, match="templates.minify"):
            load_config(tmp_path)

    def test_invalid_json(self, tmp_path):
        (tmp_path / "collider.json").write_text("{not json")

        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(tmp_path)

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path, tmp_path / "other.json")


class TestOptionValidation:
    def test_style_output_style_is_closed(self):
        with pytest.raises(ConfigError, match="output_style"):
            StyleOptions(output_style="compact")

    def test_script_format_is_closed(self):
        with pytest.raises(ConfigError, match="format"):
            ScriptOptions(format="umd")

    def test_roots_require_existing_packages(self, tmp_path):
        (tmp_path / "project").mkdir()
        config = ProjectConfig(root=tmp_path, packages=("ui-matter",))

        with pytest.raises(ConfigError):
            config.roots()


def test_shared_roots_are_parsed_and_resolved(tmp_path):
    (tmp_path / "collider").mkdir()
    write_config(tmp_path, {"shared": ["collider"]})

    config = load_config(tmp_path)

    assert config.shared == ("collider",)
    assert config.shared_roots() == ((tmp_path / "collider").resolve(),)
