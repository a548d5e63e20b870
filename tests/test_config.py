"""Tests for configuration loading."""

import tomllib
from pathlib import Path

import pytest
from pydantic import ValidationError

from servicebox.config import ServiceBoxConfig, load_config
from servicebox.config import paths as config_paths
from servicebox.host import DEFAULT_MAX_BODY_BYTES


@pytest.fixture
def servicebox_home(tmp_path, monkeypatch) -> Path:
    """Point SERVICEBOX_HOME at a temp dir and run from an empty cwd."""
    home = tmp_path / "home"
    workdir = tmp_path / "work"
    home.mkdir()
    workdir.mkdir()
    monkeypatch.setenv("SERVICEBOX_HOME", str(home))
    monkeypatch.delenv("SERVICEBOX_LOG_LEVEL", raising=False)
    monkeypatch.chdir(workdir)
    config_paths.get_servicebox_home.cache_clear()
    yield home
    config_paths.get_servicebox_home.cache_clear()


class TestDefaults:
    def test_defaults(self):
        config = ServiceBoxConfig()
        assert config.server.host == "127.0.0.1"
        assert config.server.port == 8080
        assert config.server.path == "/"
        assert config.protocol.max_body_bytes == DEFAULT_MAX_BODY_BYTES
        assert config.schema_.extension_keywords == ["kind", "modifier"]
        assert config.logging.level == "INFO"

    def test_no_file_uses_defaults(self, servicebox_home):
        assert load_config() == ServiceBoxConfig()


class TestLoadConfig:
    def test_explicit_path(self, config_file):
        config = load_config(config_file)
        assert config.server.host == "0.0.0.0"
        assert config.server.port == 9000
        assert config.server.path == "/rpc"
        assert config.protocol.max_body_bytes == 2048
        assert config.schema_.extension_keywords == ["kind", "modifier", "description_ref"]
        assert config.logging.level == "DEBUG"

    def test_missing_explicit_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.toml")

    def test_home_config(self, servicebox_home, config_toml_content):
        (servicebox_home / "config.toml").write_text(config_toml_content)
        assert load_config().server.port == 9000

    def test_local_file_wins(self, servicebox_home, config_toml_content):
        (servicebox_home / "config.toml").write_text(config_toml_content)
        Path("servicebox.toml").write_text("[server]\nport = 7000\n")
        assert load_config().server.port == 7000

    def test_env_log_level(self, servicebox_home, monkeypatch, config_file):
        monkeypatch.setenv("SERVICEBOX_LOG_LEVEL", "warning")
        assert load_config(config_file).logging.level == "WARNING"

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[server\n")
        with pytest.raises(tomllib.TOMLDecodeError):
            load_config(path)


class TestValidation:
    def test_path_must_be_absolute(self):
        with pytest.raises(ValidationError):
            ServiceBoxConfig.model_validate({"server": {"path": "rpc"}})

    def test_port_range(self):
        with pytest.raises(ValidationError):
            ServiceBoxConfig.model_validate({"server": {"port": 70000}})

    def test_body_limit_positive(self):
        with pytest.raises(ValidationError):
            ServiceBoxConfig.model_validate({"protocol": {"max_body_bytes": 0}})

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            ServiceBoxConfig.model_validate({"logging": {"level": "TRACE"}})


class TestPaths:
    def test_home_from_env(self, servicebox_home):
        assert config_paths.get_servicebox_home() == servicebox_home.resolve()
        assert config_paths.get_config_path().name == "config.toml"
        assert config_paths.get_logs_path() == servicebox_home.resolve() / "logs"
