import base64
import json
import pytest
from summary_server.core.config import (
    InvalidServerConfig,
    ServerConfig,
    Settings,
    resolve_server_config,
)


def _encode(payload) -> str:
    return base64.urlsafe_b64encode(json.dumps(payload).encode()).decode().rstrip("=")


def test_server_config_defaults():
    config = ServerConfig()
    assert config.output_directory is None
    assert config.include_git_history is True
    assert config.debug is False


def test_server_config_accepts_aliases_and_ignores_unknown_keys():
    config = ServerConfig.model_validate({"outputDirectory": "./docs", "debug": True, "colour": "blue"})
    assert config.output_directory == "./docs"
    assert config.debug is True


def test_settings_default_server_config(monkeypatch):
    monkeypatch.setenv("OUTPUT_DIRECTORY", "./from-env")
    monkeypatch.setenv("INCLUDE_GIT_HISTORY", "false")

    config = Settings(_env_file=None).default_server_config()
    assert config.output_directory == "./from-env"
    assert config.include_git_history is False
    assert config.debug is False


def test_settings_rejects_unknown_log_level():
    with pytest.raises(ValueError):
        Settings(_env_file=None, LOG_LEVEL="chatty")


def test_settings_normalizes_log_level():
    assert Settings(_env_file=None, LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"


def test_resolve_flat_query_params():
    config = resolve_server_config(
        {"outputDirectory": "./cfg", "includeGitHistory": "false", "debug": "true"},
        ServerConfig(),
    )
    assert config.output_directory == "./cfg"
    assert config.include_git_history is False
    assert config.debug is True


def test_resolve_keeps_defaults_when_absent():
    defaults = ServerConfig(outputDirectory="./default")
    assert resolve_server_config({}, defaults) == defaults


def test_resolve_encoded_config_param():
    config = resolve_server_config({"config": _encode({"outputDirectory": "./encoded"})}, ServerConfig())
    assert config.output_directory == "./encoded"


def test_flat_params_override_encoded_config():
    params = {"config": _encode({"outputDirectory": "./encoded"}), "outputDirectory": "./flat"}
    assert resolve_server_config(params, ServerConfig()).output_directory == "./flat"


@pytest.mark.parametrize(
    "params",
    [
        {"config": "not base64 at all!!"},
        {"config": _encode(["a", "list"])},
        {"debug": "maybe"},
    ],
)
def test_resolve_rejects_bad_config(params):
    with pytest.raises(InvalidServerConfig):
        resolve_server_config(params, ServerConfig())


def test_resolve_encoded_config_with_plus_decoded_as_space():
    # {"outputDirectory": "x?>"} encodes with a "+" that query parsing turns into a space
    encoded = base64.b64encode(json.dumps({"outputDirectory": "x?>"}).encode()).decode()
    assert "+" in encoded

    config = resolve_server_config({"config": encoded.replace("+", " ")}, ServerConfig())
    assert config.output_directory == "x?>"


def test_resolve_encoded_config_snake_case_keys():
    params = {"config": _encode({"output_directory": "./snake", "include_git_history": False})}
    config = resolve_server_config(params, ServerConfig(outputDirectory="./default"))

    assert config.output_directory == "./snake"
    assert config.include_git_history is False


def test_resolve_encoded_config_camel_case_wins_over_snake_case():
    params = {"config": _encode({"output_directory": "./snake", "outputDirectory": "./camel"})}
    assert resolve_server_config(params, ServerConfig()).output_directory == "./camel"
