# Copyright 2016-2018, Pulumi Corporation.
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

"""
Runtime support for the configuration system. Please use pulumi_sentry.Config instead.
"""
import json
import os
from typing import Any, Dict, List, Optional, Set

import yaml

from .. import log

# default to an empty map for config.
CONFIG: Dict[str, Any] = {}

# default to an empty set for config secret keys.
_SECRET_KEYS: Set[str] = set()

_setting_extensions = [".yaml", ".yml", ".json"]


def set_config(k: str, v: Any):
    """
    Sets a configuration variable. Meant for internal use only.
    """
    CONFIG[k] = v


def set_all_config(
    config: Dict[str, str], secret_keys: Optional[List[str]] = None
) -> None:
    """
    Overwrites the config map and optional list of secret keys.
    """
    global CONFIG
    CONFIG = dict(config)

    if secret_keys is not None:
        global _SECRET_KEYS
        _SECRET_KEYS = set(secret_keys)


def get_config_env() -> Dict[str, Any]:
    """
    Returns the environment map that will be used for config checking when variables aren't set.
    """
    if "PULUMI_CONFIG" in os.environ:
        env_config = os.environ["PULUMI_CONFIG"]
        return json.loads(env_config)
    return {}


def get_config_env_key(k: str) -> str:
    """
    Returns a scrubbed environment variable key, PULUMI_CONFIG_<k>, that can be used for
    setting explicit variables. This is unlike PULUMI_CONFIG which is just a JSON-serialized bag.
    """
    env_key = ""
    for c in k:
        if c == "_" or "A" <= c <= "Z" or "0" <= c <= "9":
            env_key += c
        elif "a" <= c <= "z":
            env_key += c.upper()
        else:
            env_key += "_"
    return f"PULUMI_CONFIG_{env_key}"


def get_config_secret_keys_env() -> List[str]:
    """
    Returns the list of config keys that contain secrets.
    """
    if "PULUMI_CONFIG_SECRET_KEYS" in os.environ:
        keys = os.environ["PULUMI_CONFIG_SECRET_KEYS"]
        return json.loads(keys)
    return []


def get_config(k: str) -> Any:
    """
    Returns a configuration variable's value or None if it is unset.
    """
    # If the config has been set explicitly, use it.
    if k in CONFIG:
        return CONFIG[k]

    # If there is a specific PULUMI_CONFIG_<k> environment variable, use it.
    env_key = get_config_env_key(k)
    if env_key in os.environ:
        return os.environ[env_key]

    # If the config hasn't been set, but there is a process-wide PULUMI_CONFIG environment variable, use it.
    env_dict = get_config_env()
    if env_dict is not None and k in env_dict:
        return env_dict[k]

    return None


def is_config_secret(k: str) -> bool:
    """
    Returns True if the configuration variable is a secret.
    """
    return k in _SECRET_KEYS or k in get_config_secret_keys_env()


def load_stack_config(
    work_dir: str, stack: str, project: Optional[str] = None
) -> Dict[str, str]:
    """
    Reads the `config:` section of the `Pulumi.<stack>.yaml` (or `.yml`, `.json`) file in
    `work_dir` and installs it as the current configuration.

    Keys without a namespace are placed under `project`. Values that are not strings are stored as
    their JSON text, the form `Config.get_object` and friends parse. Encrypted (`secure:`) values
    cannot be decrypted here and are skipped with a warning.

    :param work_dir: The directory holding the stack settings file.
    :param stack: The stack name; an `org/project/stack` name uses its last component.
    :param project: The namespace for keys that do not name one.
    :return: The loaded configuration map.
    """
    stack_settings_name = stack.split("/")[-1]
    for ext in _setting_extensions:
        path = os.path.join(work_dir, f"Pulumi.{stack_settings_name}{ext}")
        if not os.path.exists(path):
            continue
        with open(path, "r", encoding="utf-8") as file:
            settings = json.load(file) if ext == ".json" else yaml.safe_load(file)
        break
    else:
        raise FileNotFoundError(
            f"failed to find stack settings file in workdir: {work_dir}"
        )

    config: Dict[str, str] = {}
    for key, value in ((settings or {}).get("config") or {}).items():
        if ":" not in key:
            if project is None:
                raise ValueError(
                    f"config key {key!r} has no namespace and no project was given"
                )
            key = f"{project}:{key}"

        if isinstance(value, dict) and "secure" in value:
            log.warn(f"skipping encrypted config value {key!r}")
            continue

        config[key] = value if isinstance(value, str) else json.dumps(value)

    set_all_config(config)
    return config
