from __future__ import annotations

"""
Unit tests for core.config module (isolated via tmp_path)
"""

import pytest
import json
import uuid
from unittest.mock import patch

from core.config import Config, get_config_dir

pytestmark = pytest.mark.unit


# -------------------------
# Helper
# -------------------------

def get_unique_config_path(tmp_path):
    """Generate a unique config file path to prevent test interference"""
    return tmp_path / f"config_{uuid.uuid4().hex}.json"


# -------------------------
# Initialization Tests
# -------------------------

class TestConfigInitialization:
    def test_creates_config_file(self, tmp_path):
        config_file = get_unique_config_path(tmp_path)
        config = Config(config_file)
        config.save()

        assert config_file.exists()

    def test_loads_defaults_for_new_config(self, temp_config):
        assert temp_config.api_base_url == "https://gotchicloset.xyz"
        assert temp_config.best_sets_limit == 10
        assert temp_config.catalog_path is None
        assert temp_config.catalog_strict_ids is True
        assert temp_config.age_brs_enabled is False
        assert temp_config.debug_logging is False

    def test_creates_default_path_if_none(self, tmp_path):
        with patch('core.config.Path.home', return_value=tmp_path):
            cfg = Config()
        expected = tmp_path / '.gotchi_closet' / 'config.json'
        assert cfg.config_file == expected

    def test_loads_existing_config(self, tmp_path):
        config_file = get_unique_config_path(tmp_path)

        cfg1 = Config(config_file)
        cfg1.best_sets_limit = 25
        cfg1.api_base_url = "http://localhost:3000"

        cfg2 = Config(config_file)
        assert cfg2.best_sets_limit == 25
        assert cfg2.api_base_url == "http://localhost:3000"

    def test_merges_with_defaults_on_load(self, tmp_path):
        config_file = get_unique_config_path(tmp_path)

        partial = {"api": {"base_url": "http://example.test"}}
        with open(config_file, "w") as f:
            json.dump(partial, f)

        cfg = Config(config_file)

        assert cfg.api_base_url == "http://example.test"
        assert cfg.get_api_timeouts() == (10, 10)
        assert cfg.best_sets_limit == 10

    def test_corrupt_file_falls_back_to_defaults(self, tmp_path):
        config_file = get_unique_config_path(tmp_path)
        config_file.write_text("{not json", encoding="utf-8")

        cfg = Config(config_file)

        assert cfg.data == Config.DEFAULT_CONFIG

    def test_non_object_file_falls_back_to_defaults(self, tmp_path):
        config_file = get_unique_config_path(tmp_path)
        config_file.write_text("[1, 2, 3]", encoding="utf-8")

        cfg = Config(config_file)

        assert cfg.best_sets_limit == 10

    def test_defaults_are_not_shared_between_instances(self, tmp_path):
        cfg1 = Config(get_unique_config_path(tmp_path))
        cfg1.data["rankings"]["default_limit"] = 3

        cfg2 = Config(get_unique_config_path(tmp_path))
        assert cfg2.best_sets_limit == 10
        assert Config.DEFAULT_CONFIG["rankings"]["default_limit"] == 10


# -------------------------
# Guardrail Tests
# -------------------------

class TestConfigGuardrails:
    @pytest.mark.parametrize("value,expected", [
        (0, 1), (-5, 1), (50, 50), (1000, 100), ("abc", 10), (None, 10),
    ])
    def test_best_sets_limit_is_clamped(self, temp_config, value, expected):
        temp_config.data["rankings"]["default_limit"] = value
        assert temp_config.best_sets_limit == expected

    def test_api_timeouts_are_clamped(self, temp_config):
        temp_config.set_api_timeouts(0, 500)
        assert temp_config.get_api_timeouts() == (1, 120)

    def test_api_timeouts_invalid_values_use_default(self, temp_config):
        temp_config.data["api"]["timeouts"] = {"connect": "slow", "read": None}
        assert temp_config.get_api_timeouts() == (10, 10)

    def test_api_timeouts_persist(self, tmp_path):
        config_file = get_unique_config_path(tmp_path)
        Config(config_file).set_api_timeouts(3, 30)

        assert Config(config_file).get_api_timeouts() == (3, 30)


# -------------------------
# Accessor Tests
# -------------------------

class TestConfigAccessors:
    def test_catalog_path_roundtrip(self, tmp_path):
        config_file = get_unique_config_path(tmp_path)
        catalog = tmp_path / "sets.json"

        Config(config_file).catalog_path = catalog
        assert Config(config_file).catalog_path == catalog

    def test_catalog_path_cleared(self, temp_config, tmp_path):
        temp_config.catalog_path = tmp_path / "sets.json"
        temp_config.catalog_path = None

        assert temp_config.catalog_path is None
        assert temp_config.data["catalog"]["path"] == ""

    def test_wearables_path_roundtrip(self, tmp_path):
        config_file = get_unique_config_path(tmp_path)
        wearables = tmp_path / "wearables.json"

        assert Config(config_file).wearables_path is None
        Config(config_file).wearables_path = wearables
        assert Config(config_file).wearables_path == wearables

    def test_age_brs_enabled_roundtrip(self, tmp_path):
        config_file = get_unique_config_path(tmp_path)
        Config(config_file).age_brs_enabled = True

        assert Config(config_file).age_brs_enabled is True

    def test_user_agent_default(self, temp_config):
        assert temp_config.api_user_agent.startswith("Gotchi-Closet/")

    def test_blank_base_url_uses_default(self, temp_config):
        temp_config.data["api"]["base_url"] = ""
        assert temp_config.api_base_url == "https://gotchicloset.xyz"

    def test_reset_to_defaults(self, tmp_path):
        config_file = get_unique_config_path(tmp_path)
        cfg = Config(config_file)
        cfg.best_sets_limit = 42
        cfg.age_brs_enabled = True

        cfg.reset_to_defaults()

        assert cfg.best_sets_limit == 10
        assert Config(config_file).age_brs_enabled is False

    def test_repr(self, temp_config):
        assert "gotchicloset.xyz" in repr(temp_config)


class TestGetConfigDir:
    def test_creates_directory_under_home(self, tmp_path):
        with patch('core.config.Path.home', return_value=tmp_path):
            config_dir = get_config_dir()

        assert config_dir == tmp_path / ".gotchi_closet"
        assert config_dir.is_dir()
