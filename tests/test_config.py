"""Tests for config.py - Configuration loading."""

import json

from super_calc.config import CalcConfig, load_config, resolve_home


class TestLoadConfig:
    """Tests for load_config()."""

    def test_defaults_without_file(self, tmp_path):
        """Test defaults when config.json is missing."""
        config = load_config(tmp_path)
        assert config == CalcConfig()
        assert config.history_limit == 100

    def test_reads_values(self, tmp_path):
        """Test every setting is read from config.json."""
        (tmp_path / "config.json").write_text(json.dumps({
            "history_limit": 20,
            "default_tip_percentage": 18,
            "default_split_count": 2,
            "default_theme": "dark",
            "log_level": "debug",
        }))
        config = load_config(tmp_path)
        assert config.history_limit == 20
        assert config.default_tip_percentage == 18
        assert config.default_split_count == 2
        assert config.default_theme == "dark"
        assert config.log_level == "DEBUG"

    def test_invalid_values_fall_back(self, tmp_path):
        """Test invalid settings fall back to their defaults."""
        (tmp_path / "config.json").write_text(json.dumps({
            "history_limit": 0,
            "default_tip_percentage": 45,
            "default_split_count": "two",
            "default_theme": "blue",
            "log_level": "chatty",
        }))
        assert load_config(tmp_path) == CalcConfig()

    def test_corrupt_file(self, tmp_path):
        """Test an unparsable config.json gives the defaults."""
        (tmp_path / "config.json").write_text("{")
        assert load_config(tmp_path) == CalcConfig()

    def test_to_dict(self):
        """Test to_dict() exposes the settings."""
        assert CalcConfig().to_dict()["default_theme"] == "light"


class TestResolveHome:
    """Tests for resolve_home()."""

    def test_explicit(self, tmp_path):
        """Test an explicit home wins."""
        assert resolve_home(str(tmp_path)) == tmp_path.resolve()

    def test_env_var(self, tmp_path, monkeypatch):
        """Test SUPER_CALC_HOME is used when no home is given."""
        monkeypatch.setenv("SUPER_CALC_HOME", str(tmp_path))
        assert resolve_home() == tmp_path.resolve()

    def test_default(self, monkeypatch, tmp_path):
        """Test the default ~/.super-calc directory."""
        monkeypatch.delenv("SUPER_CALC_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert resolve_home() == (tmp_path / ".super-calc").resolve()
