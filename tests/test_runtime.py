"""Tests for client and deployment configuration."""
import pytest

from fbaservices.runtime import bootstrap, current_workspace, load_deploy_config
from fbaservices.server.dispatch import build_loggers


def test_workspace_from_config_file(tmp_path, monkeypatch):
    config = tmp_path / "fbaservices.yaml"
    config.write_text("workspace: chenry:models\n", encoding="utf-8")
    monkeypatch.setenv("FBA_CONFIG", str(config))
    assert current_workspace() == "chenry:models"
    monkeypatch.setenv("FBA_WORKSPACE", "override")
    assert current_workspace() == "override"


def test_missing_config_is_empty():
    assert bootstrap().config.raw == {}
    assert bootstrap().config.url == "http://fba.test/rpc"


def test_deploy_config_section(tmp_path, monkeypatch):
    deploy = tmp_path / "deploy.yaml"
    log_file = tmp_path / "logs" / "fba.log"
    deploy.write_text(
        f"fbaModelServices:\n  log_level: 7\n  log_file: {log_file}\nother:\n  log_level: 3\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("KB_DEPLOYMENT_CONFIG", str(deploy))
    assert load_deploy_config()["log_level"] == 7
    monkeypatch.setenv("KB_SERVICE_NAME", "other")
    assert load_deploy_config() == {"log_level": 3}

    monkeypatch.delenv("KB_SERVICE_NAME")
    loggers = build_loggers("fbaModelServices")
    assert loggers["userlog"].get_log_level() == 7
    assert loggers["serverlog"].get_log_level() == 6
    assert loggers["serverlog"].log_file == str(log_file)
    loggers["serverlog"].log_message(6, "hello", module="fbaModelServices", method="version")
    assert "hello" in log_file.read_text(encoding="utf-8")


def test_deploy_config_must_be_mapping(tmp_path, monkeypatch):
    deploy = tmp_path / "deploy.yaml"
    deploy.write_text("- a\n- b\n", encoding="utf-8")
    monkeypatch.setenv("KB_DEPLOYMENT_CONFIG", str(deploy))
    with pytest.raises(ValueError):
        load_deploy_config()
