"""
Tests for configuration loading
"""

from pathlib import Path

import pytest

from config import AuthSettings, ConfigLoader, load_auth_settings
from oauth.errors import ConfigurationError

ENV_VARS = [
    "UIPATH_AUTH_DOMAIN",
    "UIPATH_AUTH_PORT",
    "UIPATH_AUTH_TIMEOUT",
    "UIPATH_CLIENT_ID",
    "UIPATH_AUTH_SCOPE",
    "UIPATH_AUTH_DIR",
    "UIPATH_ENV_FILE",
]


@pytest.fixture
def loader(tmp_path, monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return ConfigLoader(env_path=str(tmp_path / "missing.env"))


class TestConfigLoader:
    def test_type_follows_default(self, loader, monkeypatch):
        monkeypatch.setenv("UIPATH_AUTH_PORT", "9000")
        monkeypatch.setenv("UIPATH_AUTH_TIMEOUT", "12.5")
        assert loader.get("UIPATH_AUTH_PORT", 8104) == 9000
        assert loader.get("UIPATH_AUTH_TIMEOUT", 300.0) == 12.5

    def test_bad_number_uses_default(self, loader, monkeypatch):
        monkeypatch.setenv("UIPATH_AUTH_PORT", "eighty")
        assert loader.get("UIPATH_AUTH_PORT", 8104) == 8104

    def test_unset_value_returns_default_verbatim(self, loader):
        assert loader.get("UIPATH_AUTH_DIR", "~/.uipath") == "~/.uipath"
        assert loader.get("UIPATH_AUTH_DOMAIN", "cloud") == "cloud"

    def test_reads_dotenv_file(self, tmp_path, monkeypatch):
        # Recorded as unset so load_dotenv's write is undone after the test
        monkeypatch.setenv("UIPATH_AUTH_DOMAIN", "cloud")
        monkeypatch.delenv("UIPATH_AUTH_DOMAIN")
        env_file = tmp_path / "settings.env"
        env_file.write_text("UIPATH_AUTH_DOMAIN=staging\n")

        loader = ConfigLoader(env_path=str(env_file))

        assert loader.get("UIPATH_AUTH_DOMAIN", "cloud") == "staging"


class TestLoadAuthSettings:
    def test_defaults(self, loader):
        settings = load_auth_settings(loader)

        assert settings == AuthSettings()
        assert settings.base_url == "https://cloud.uipath.com"
        assert settings.auth_file == Path(".uipath") / ".auth.json"
        assert settings.timeout == 300.0

    def test_environment_values(self, loader, monkeypatch):
        monkeypatch.setenv("UIPATH_AUTH_DOMAIN", "alpha")
        monkeypatch.setenv("UIPATH_AUTH_PORT", "42042")
        monkeypatch.setenv("UIPATH_AUTH_DIR", "/tmp/uipath-auth")

        settings = load_auth_settings(loader)

        assert settings.domain == "alpha"
        assert settings.port == 42042
        assert settings.auth_file == Path("/tmp/uipath-auth/.auth.json")

    def test_overrides_beat_environment(self, loader, monkeypatch):
        monkeypatch.setenv("UIPATH_AUTH_DOMAIN", "alpha")
        settings = load_auth_settings(loader, domain="staging", port=None)
        assert settings.domain == "staging"
        assert settings.port == 8104

    @pytest.mark.parametrize("overrides", [
        {"domain": "moon"},
        {"port": 0},
        {"port": 70000},
        {"timeout": 0},
        {"client_id": ""},
    ])
    def test_invalid_values_raise(self, loader, overrides):
        with pytest.raises(ConfigurationError):
            load_auth_settings(loader, **overrides)

    def test_with_port_validates(self):
        assert AuthSettings().with_port(8055).port == 8055
        with pytest.raises(ConfigurationError):
            AuthSettings().with_domain("moon")
