"""
Тесты режима /probe: выбор модуля и разбор target.
"""

import pytest

from mikrotik_exporter.core.config_schema import validate_config
from mikrotik_exporter.core.credentials import CredentialsManager
from mikrotik_exporter.core.exceptions import ConfigError, RequestConfigurationError
from mikrotik_exporter.prober import DEFAULT_MODULE, Prober
from mikrotik_exporter.scraper import SCRAPE_SUCCESS

from fakes import FakeClientFactory, reply


CONFIG = {
    "modules": {
        "default": {"username": "prometheus", "password": "secret"},
        "tls": {
            "username": "prometheus",
            "password": "secret",
            "enable_tls": True,
            "insecure_tls": True,
            "timeout": 2,
            "features": {"interface": False, "resource": True, "netwatch": True},
        },
    },
}


@pytest.fixture
def factory():
    return FakeClientFactory({
        "/login": reply(),
        "/system/resource/print": reply({"board-name": "hEX", "version": "7.12", "cpu-load": "9"}),
    })


@pytest.fixture
def prober(factory):
    return Prober.from_config(validate_config(CONFIG), client_factory=factory)


@pytest.mark.unit
class TestResolve:
    """Тесты проверки параметров запроса."""

    def test_default_module(self, prober):
        module, device = prober.resolve("10.0.0.1")
        assert module.name == DEFAULT_MODULE
        assert (device.address, device.port) == ("10.0.0.1", 8728)
        assert device.name == "10.0.0.1"

    def test_tls_module_port(self, prober):
        module, device = prober.resolve("10.0.0.1", "tls")
        assert module.name == "tls"
        assert device.port == 8729
        assert device.tls.enabled

    def test_explicit_port(self, prober):
        _, device = prober.resolve("[fe80::1]:18729", "tls")
        assert (device.address, device.port) == ("fe80::1", 18729)

    @pytest.mark.parametrize("target, module, message", [
        (None, None, "no target"),
        ("", "default", "no target"),
        ("10.0.0.1", "missing", "invalid module"),
        ("10.0.0.1:abc", "default", "invalid target"),
    ])
    def test_errors(self, prober, factory, target, module, message):
        with pytest.raises(RequestConfigurationError) as exc_info:
            prober.resolve(target, module)
        assert exc_info.value.message == message
        assert factory.dials == []

    def test_module_features(self, prober):
        assert [c.name for c in prober.modules["tls"].scraper.collectors] == ["resource", "netwatch"]
        assert prober.modules["tls"].scraper.timeout == 2

    def test_module_default_features(self, prober):
        names = [c.name for c in prober.modules["default"].scraper.collectors]
        assert names == ["interface", "resource"]


@pytest.mark.unit
class TestProbe:
    """Тесты скрейпа по запросу."""

    def test_probe(self, prober, factory):
        sink = prober.probe("10.0.0.5:8728")

        assert factory.dials[0][:2] == ("10.0.0.5", 8728)
        assert factory.clients["10.0.0.5"].calls[0] == (
            "/login", "=name=prometheus", "=password=secret",
        )
        success = [obs.value for obs in sink.observations() if obs.descriptor == SCRAPE_SUCCESS]
        assert success == [1.0]

    def test_probe_failure_is_not_exception(self):
        factory = FakeClientFactory(dial_errors={"10.0.0.9": OSError("timeout")})
        prober = Prober.from_config(validate_config(CONFIG), client_factory=factory)

        sink = prober.probe("10.0.0.9")

        success = [obs.value for obs in sink.observations() if obs.descriptor == SCRAPE_SUCCESS]
        assert success == [0.0]


@pytest.mark.unit
class TestFromConfig:
    """Тесты построения модулей."""

    def test_no_modules_section(self):
        prober = Prober.from_config(
            validate_config({}),
            credentials_manager=CredentialsManager(username="env", password="env-pw"),
        )
        assert list(prober.modules) == [DEFAULT_MODULE]
        assert prober.modules[DEFAULT_MODULE].credentials.resolve() == ("env", "env-pw")

    def test_bad_ca_cert(self, tmp_path):
        config = validate_config({
            "modules": {"secure": {"enable_tls": True, "ca_cert": str(tmp_path / "missing.pem")}},
        })
        with pytest.raises(ConfigError) as exc_info:
            Prober.from_config(config)
        assert exc_info.value.key == "modules.secure.ca_cert"
