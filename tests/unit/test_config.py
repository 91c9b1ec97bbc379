"""Unit tests for configuration loading."""

import pytest
import yaml

from locha.config import API_ENDPOINT, DEFAULT_API_BASE_URL, LoChaConfig
from locha.core.exceptions import ConfigError


class TestLoChaConfig:
    @pytest.fixture
    def config_path(self, tmp_path):
        return tmp_path / "config.yaml"

    def test_defaults_without_file(self, config_path):
        config = LoChaConfig.load(config_path, environ={})
        assert config.api_base_url == DEFAULT_API_BASE_URL
        assert config.strict_links is True
        assert config.max_date_range_days == 31
        assert config.api_url == DEFAULT_API_BASE_URL + API_ENDPOINT

    def test_values_from_file(self, config_path):
        config_path.write_text(yaml.dump({
            "api": {"base_url": "http://localhost:5173/", "timeout": 5},
            "links": {"strict": False},
            "query": {"max_date_range_days": 7},
        }))
        config = LoChaConfig.load(config_path, environ={})

        assert config.api_url == "http://localhost:5173" + API_ENDPOINT
        assert config.timeout == 5.0
        assert config.strict_links is False
        assert config.max_date_range_days == 7

    def test_environment_overrides_file(self, config_path):
        config_path.write_text(yaml.dump({"api": {"base_url": "http://file"}}))
        config = LoChaConfig.load(config_path, environ={
            "LOCHA_API_URL": "http://env",
            "LOCHA_TIMEOUT": "2.5",
            "LOCHA_STRICT_LINKS": "no",
        })
        assert config.api_base_url == "http://env"
        assert config.timeout == 2.5
        assert config.strict_links is False

    def test_invalid_yaml(self, config_path):
        config_path.write_text("api: [unclosed")
        with pytest.raises(ConfigError):
            LoChaConfig.load(config_path, environ={})

    def test_non_mapping_file(self, config_path):
        config_path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError):
            LoChaConfig.load(config_path, environ={})

    def test_invalid_values(self):
        with pytest.raises(ConfigError):
            LoChaConfig.from_dict({"api": {"timeout": "soon"}})
        with pytest.raises(ConfigError):
            LoChaConfig.from_dict({"api": {"timeout": 0}})
        with pytest.raises(ConfigError):
            LoChaConfig.from_dict({"links": {"strict": "maybe"}})

    def test_invalid_env_timeout(self, config_path):
        with pytest.raises(ConfigError):
            LoChaConfig.load(config_path, environ={"LOCHA_TIMEOUT": "fast"})
