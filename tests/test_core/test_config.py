"""
Тесты загрузки и валидации config.yml.
"""

import pytest

from mikrotik_exporter.config import ENV_CONFIG, find_config_file, load_config
from mikrotik_exporter.core.config_schema import validate_config
from mikrotik_exporter.core.exceptions import ConfigError


CONFIG_YAML = """
devices:
  - name: core-rtr
    address: 10.0.0.1
    user: prometheus
    password: changeme
  - name: edge
    address: 10.0.0.2
    port: 8729
features:
  bgp: true
  resource: false
connection:
  timeout: 3
  enable_tls: false
modules:
  default:
    username: prometheus
    password: secret
    timeout: 10
    features:
      health: true
logging:
  level: DEBUG
  json_format: true
"""


@pytest.mark.unit
class TestValidateConfig:
    """Тесты pydantic схемы."""

    def test_defaults(self):
        config = validate_config({})
        assert config.devices == []
        assert config.modules == {}
        assert config.connection.timeout == 5
        assert config.server.port == 9436
        assert config.features.interface is True
        assert config.features.resource is True
        assert config.features.bgp is False

    def test_unknown_feature(self):
        with pytest.raises(ConfigError) as exc_info:
            validate_config({"features": {"bogus": True}})
        assert exc_info.value.key == "features.bogus"

    def test_empty_address(self):
        with pytest.raises(ConfigError):
            validate_config({"devices": [{"name": "r1", "address": " "}]})

    def test_duplicate_device(self):
        devices = [
            {"name": "r1", "address": "10.0.0.1"},
            {"name": "r1", "address": "10.0.0.2"},
        ]
        with pytest.raises(ConfigError):
            validate_config({"devices": devices})

    def test_negative_timeout(self):
        with pytest.raises(ConfigError):
            validate_config({"connection": {"timeout": 0}})

    def test_password_and_file(self):
        module = {"password": "x", "password_file": "/run/secrets/pw"}
        with pytest.raises(ConfigError):
            validate_config({"modules": {"default": module}})


@pytest.mark.unit
class TestLoadConfig:
    """Тесты YAML загрузчика."""

    def test_load(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text(CONFIG_YAML, encoding="utf-8")

        config = load_config(str(path))

        assert [d.name for d in config.devices] == ["core-rtr", "edge"]
        assert config.devices[1].port == 8729
        assert config.features.bgp is True
        assert config.features.resource is False
        assert config.connection.timeout == 3
        assert config.modules["default"].timeout == 10
        assert config.modules["default"].features.health is True
        assert config.logging.json_format is True

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(str(tmp_path / "missing.yml"))

    def test_env_path(self, tmp_path, monkeypatch):
        path = tmp_path / "exporter.yml"
        path.write_text("features: {netwatch: true}\n", encoding="utf-8")
        monkeypatch.setenv(ENV_CONFIG, str(path))
        assert find_config_file() == path
        assert load_config().features.netwatch is True

    def test_no_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv(ENV_CONFIG, raising=False)
        monkeypatch.chdir(tmp_path)
        assert find_config_file() is None
        assert load_config().devices == []

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("devices: [\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_root_not_mapping(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(str(path))
