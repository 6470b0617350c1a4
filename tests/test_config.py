"""Tests for configuration loading."""

import logging
import tempfile
from pathlib import Path

import pytest

from blockmark.config import load_config
from blockmark.errors import ConfigError


def test_load_config_defaults(tmp_path, monkeypatch):
    """Test loading config with defaults when no file exists."""
    monkeypatch.chdir(tmp_path)
    config = load_config()

    assert config.ids.prefix == "mv"
    assert config.api.host == "127.0.0.1"
    assert config.api.port == 8765
    assert config.api.cors is False
    assert config.logging.level == "WARNING"
    assert config.path is None


def test_load_config_from_file():
    """Test loading config from a file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "custom.toml"
        config_path.write_text("""
[ids]
prefix = "blk"

[api]
host = "0.0.0.0"
port = 9000
cors = true

[logging]
level = "debug"
""")

        config = load_config(config_path=config_path)

        assert config.ids.prefix == "blk"
        assert config.api.host == "0.0.0.0"
        assert config.api.port == 9000
        assert config.api.cors is True
        assert config.logging.level == "DEBUG"
        assert config.logging.numeric_level() == logging.DEBUG
        assert config.path == config_path


def test_load_config_search_cwd(tmp_path, monkeypatch):
    """Test config search in current working directory."""
    (tmp_path / "blockmark.toml").write_text('[ids]\nprefix = "n"\n')
    monkeypatch.chdir(tmp_path)

    config = load_config()

    assert config.ids.prefix == "n"
    assert config.path == tmp_path / "blockmark.toml"


def test_load_config_missing_explicit_path(tmp_path):
    """Test an explicit path that does not exist is an error."""
    with pytest.raises(ConfigError, match="not found"):
        load_config(config_path=tmp_path / "nope.toml")


@pytest.mark.parametrize(
    "content,message",
    [
        ("[ids\nprefix = 1", "Invalid TOML"),
        ('[ids]\nprefix = ""', "ids.prefix"),
        ('[ids]\nprefix = "a:b"', "ids.prefix"),
        ("[ids]\nprefix = 3", "ids.prefix"),
        ("[api]\nport = 0", "api.port"),
        ('[api]\nport = "80"', "api.port"),
        ('[logging]\nlevel = "loud"', "logging.level"),
    ],
)
def test_load_config_invalid_values(tmp_path, content, message):
    """Test invalid files and values raise ConfigError."""
    path = tmp_path / "blockmark.toml"
    path.write_text(content)
    with pytest.raises(ConfigError, match=message):
        load_config(config_path=path)
