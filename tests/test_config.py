import json

import pytest

from lunchmoney_skill.config import DEFAULT_BASE_URL, ConfigError, load_config


def test_defaults_without_file(tmp_path):
    config = load_config(env={}, path=tmp_path / "missing.json")
    assert config.token == ""
    assert config.base_url == DEFAULT_BASE_URL
    assert config.timeout == 60.0
    with pytest.raises(ConfigError):
        config.require_token()


def test_file_values_and_env_override(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"token": "file-token", "base_url": "https://example.test/v2/",
                                "timeout": 5, "log_level": "debug"}))

    config = load_config(env={}, path=path)
    assert config.require_token() == "file-token"
    assert config.base_url == "https://example.test/v2"
    assert config.timeout == 5.0
    assert config.log_level == "DEBUG"

    config = load_config(env={"LUNCHMONEY_TOKEN": "env-token", "LUNCHMONEY_TIMEOUT": "12.5"}, path=path)
    assert config.token == "env-token"
    assert config.timeout == 12.5


def test_config_path_from_env(tmp_path):
    path = tmp_path / "other.json"
    path.write_text(json.dumps({"token": "abc"}))
    assert load_config(env={"LUNCHMONEY_CONFIG": str(path)}).token == "abc"


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_invalid_file_is_config_error(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content)
    with pytest.raises(ConfigError):
        load_config(env={}, path=path)


def test_invalid_timeout(tmp_path):
    with pytest.raises(ConfigError):
        load_config(env={"LUNCHMONEY_TIMEOUT": "soon"}, path=tmp_path / "none.json")
