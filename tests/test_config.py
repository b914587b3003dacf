"""Tests for YAML configuration loading."""

import os

import yaml

from inscribe.config import PipelineConfig, load_config, save_default_config


class TestLoadConfig:
    """Tests for configuration defaults and merging."""

    def test_defaults(self):
        """Test the default values of every section."""
        config = load_config()

        assert config.curve.prepare is True
        assert config.curve.target_count == 150
        assert config.surface.resolution == 52
        assert config.detection.tolerance is None
        assert config.detection.max_rectangles == 320
        assert config.detection.max_rectangles_all == 2400
        assert config.tracing.enabled is False

    def test_missing_file_uses_defaults(self, temp_dir):
        """Test that a nonexistent path falls back to defaults."""
        config = load_config(os.path.join(temp_dir, "absent.yaml"))

        assert config == PipelineConfig()

    def test_partial_yaml_merge(self, temp_dir):
        """Test that YAML values override only the keys they name."""
        path = os.path.join(temp_dir, "config.yaml")
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump({
                "curve": {"target_count": 90, "unknown_key": 1},
                "detection": {"tolerance": 0.05},
                "max_curve_points": 250,
            }, f)

        config = load_config(path)

        assert config.curve.target_count == 90
        assert not hasattr(config.curve, "unknown_key")
        assert config.curve.smooth_alpha == 0.18
        assert config.detection.tolerance == 0.05
        assert config.detection.max_rectangles == 320
        assert config.max_curve_points == 250

    def test_empty_yaml(self, temp_dir):
        """Test that an empty file gives defaults."""
        path = os.path.join(temp_dir, "empty.yaml")
        open(path, "w").close()

        assert load_config(path) == PipelineConfig()


class TestSaveDefaultConfig:
    """Tests for writing the default configuration."""

    def test_saved_defaults_load_back(self, temp_dir):
        """Test that the written file loads to the default config."""
        path = os.path.join(temp_dir, "defaults.yaml")

        save_default_config(path)

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        assert set(data) == {"curve", "surface", "detection", "tracing", "max_curve_points"}
        assert load_config(path) == PipelineConfig()
