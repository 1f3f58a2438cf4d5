"""Tests for YAML configuration loading."""
import textwrap

import pytest

from charityboard.config import Config
from charityboard.errors import ConfigError


def test_defaults():
    cfg = Config()
    assert cfg.admin_username == "admin"
    assert cfg.admin_password == "123"
    assert cfg.strict_workflow is False
    assert cfg.seed_data is True


def test_missing_default_file_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert Config.load() == Config()


def test_load_yaml(tmp_path):
    path = tmp_path / "board.yaml"
    path.write_text(textwrap.dedent("""
        admin_password: "s3cret"
        strict_workflow: true
        ai_timeout_secs: 2.5
        unknown_key: ignored
    """))
    cfg = Config.load(str(path))
    assert cfg.admin_password == "s3cret"
    assert cfg.strict_workflow is True
    assert cfg.ai_timeout_secs == 2.5
    assert cfg.admin_username == "admin"


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert Config.load(str(path)) == Config()


def test_env_var_path(tmp_path, monkeypatch):
    path = tmp_path / "env.yaml"
    path.write_text("seed_data: false\n")
    monkeypatch.setenv("CHARITYBOARD_CONFIG", str(path))
    assert Config.load().seed_data is False


def test_explicit_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        Config.load(str(tmp_path / "nope.yaml"))


def test_malformed_yaml_raises(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("admin_password: [unclosed\n")
    with pytest.raises(ConfigError):
        Config.load(str(path))


def test_non_mapping_raises(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigError, match="mapping"):
        Config.load(str(path))


def test_api_key_from_env(monkeypatch):
    cfg = Config()
    assert cfg.ai_api_key == ""
    monkeypatch.setenv("API_KEY", "xyz")
    assert cfg.ai_api_key == "xyz"
