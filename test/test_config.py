# Copyright 2016-2022, Pulumi Corporation.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
import json

import pytest

from pulumi_sentry import Config, ConfigMissingError, ConfigTypeError, RunError
from pulumi_sentry.config import vars as config_vars
from pulumi_sentry.runtime import config as runtime_config


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    for key in ("PULUMI_CONFIG", "PULUMI_CONFIG_SECRET_KEYS"):
        monkeypatch.delenv(key, raising=False)
    runtime_config.set_all_config({}, [])
    yield
    runtime_config.set_all_config({}, [])


@pytest.mark.parametrize(
    "key,default",
    [
        ("string", None),
        ("bar", "baz"),
        ("doesnt-exist", None),
    ],
)
@pytest.mark.asyncio
async def test_config_with_defaults(key, default, mock_config, config_settings):
    expected = config_settings.get(f"test-config:{key}", default)

    assert mock_config.get(key, default) == expected

    result = mock_config.get_secret(key, default)
    if result is None:
        assert result == expected
    else:
        assert await result.is_secret()
        assert await result.future() == expected


def test_typed_getters(mock_config):
    assert mock_config.get_int("int") == 1
    assert mock_config.get_bool("bool") is False
    assert mock_config.get_float("float") == pytest.approx(3.14159)
    assert mock_config.get_object("object") == {"banana": "sundae"}
    assert mock_config.get_int("missing", 7) == 7


def test_type_errors(mock_config):
    with pytest.raises(ConfigTypeError) as exc_info:
        mock_config.get_int("string")
    assert exc_info.value.key == "test-config:string"
    assert exc_info.value.expect_type == "int"
    assert isinstance(exc_info.value, RunError)

    with pytest.raises(ConfigTypeError):
        mock_config.get_bool("string")

    with pytest.raises(ConfigTypeError):
        mock_config.get_object("string")


def test_require(mock_config):
    assert mock_config.require("string") == "bar"
    assert mock_config.require_int("int") == 1

    with pytest.raises(ConfigMissingError) as exc_info:
        mock_config.require("missing")
    assert exc_info.value.key == "test-config:missing"
    assert not exc_info.value.secret
    assert "pulumi config set test-config:missing" in str(exc_info.value)

    with pytest.raises(ConfigMissingError) as exc_info:
        mock_config.require_secret("missing")
    assert exc_info.value.secret


@pytest.mark.asyncio
async def test_require_secret(mock_config):
    value = mock_config.require_secret_object("object")
    assert await value.is_secret()
    assert await value.future() == {"banana": "sundae"}


def test_full_key():
    assert Config("sentry").full_key("token") == "sentry:token"


def test_name_defaults_to_project():
    assert Config().name == "project"


def test_environment_sources(monkeypatch):
    monkeypatch.setenv("PULUMI_CONFIG", json.dumps({"sentry:token": "from-bag"}))
    assert config_vars.token() == "from-bag"

    monkeypatch.setenv("PULUMI_CONFIG_SENTRY_TOKEN", "from-key")
    assert config_vars.token() == "from-key"

    runtime_config.set_config("sentry:token", "explicit")
    assert config_vars.token() == "explicit"


def test_env_key_scrubbing():
    assert runtime_config.get_config_env_key("sentry:apiURL") == "PULUMI_CONFIG_SENTRY_APIURL"


def test_secret_keys(monkeypatch):
    runtime_config.set_all_config({"sentry:token": "t"}, ["sentry:token"])
    assert runtime_config.is_config_secret("sentry:token")
    assert not runtime_config.is_config_secret("sentry:apiURL")

    monkeypatch.setenv("PULUMI_CONFIG_SECRET_KEYS", json.dumps(["sentry:apiURL"]))
    assert runtime_config.is_config_secret("sentry:apiURL")


def test_unset_vars_are_none(monkeypatch):
    monkeypatch.delenv("PULUMI_CONFIG_SENTRY_TOKEN", raising=False)
    monkeypatch.delenv("PULUMI_CONFIG_SENTRY_APIURL", raising=False)
    assert config_vars.token() is None
    assert config_vars.api_url() is None


def test_load_stack_config_yaml(tmp_path):
    (tmp_path / "Pulumi.dev.yaml").write_text(
        "config:\n"
        "  sentry:token: abc\n"
        "  sentry:apiURL: https://sentry.example.com/api/\n"
        "  retries: 3\n"
        "  teams:\n"
        "    - frontend\n"
        "  sentry:password:\n"
        "    secure: AAABAMcGtHU=\n",
        encoding="utf-8",
    )

    loaded = runtime_config.load_stack_config(str(tmp_path), "acme/web/dev", project="web")

    assert loaded == {
        "sentry:token": "abc",
        "sentry:apiURL": "https://sentry.example.com/api/",
        "web:retries": "3",
        "web:teams": '["frontend"]',
    }
    assert config_vars.token() == "abc"
    assert Config("web").get_int("retries") == 3
    assert Config("web").get_object("teams") == ["frontend"]


def test_load_stack_config_json(tmp_path):
    (tmp_path / "Pulumi.prod.json").write_text(
        json.dumps({"config": {"sentry:apiURL": "https://sentry.io/api/"}}), encoding="utf-8"
    )

    runtime_config.load_stack_config(str(tmp_path), "prod")
    assert config_vars.api_url() == "https://sentry.io/api/"


def test_load_stack_config_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        runtime_config.load_stack_config(str(tmp_path), "missing")

    (tmp_path / "Pulumi.dev.yml").write_text("config:\n  retries: 3\n", encoding="utf-8")
    with pytest.raises(ValueError, match="no namespace"):
        runtime_config.load_stack_config(str(tmp_path), "dev")
