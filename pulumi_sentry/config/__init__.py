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
The config module contains all configuration management functionality.
"""
import json
from typing import Any, Callable, Dict, Optional

from .. import errors, log
from ..deferred import Deferred
from ..runtime.config import get_config, is_config_secret
from ..runtime.settings import get_project


def _parse_bool(v: str) -> bool:
    if v in ["true", "True"]:
        return True
    if v in ["false", "False"]:
        return False
    raise ValueError(v)


# Maps a type name, as reported in ConfigTypeError, to the function that parses it.
_PARSERS: Dict[str, Callable[[str], Any]] = {
    "string": str,
    "bool": _parse_bool,
    "int": int,
    "float": float,
    "JSON object": json.loads,
}


class Config:
    """
    Config is a bag of related configuration state. Each bag contains any number of configuration
    variables, indexed by simple keys, and each has a name that uniquely identifies it; two bags with
    different names do not share values for variables that otherwise share the same key. For
    example, the bag named `sentry` holds `sentry:token` and `sentry:apiURL`.
    """

    name: str
    """
    The configuration bag's logical name that uniquely identifies it. The default is the name of the
    current project.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        """
        :param str name: The configuration bag's logical name that uniquely identifies it. If not
               provided, the name of the current project is used.
        """
        if not name:
            name = get_project()
        if not isinstance(name, str):
            raise TypeError("Expected name to be a string")
        self.name = name

    def _get(self, key: str, expect_type: str, secret_getter: Optional[str]) -> Any:
        full_key = self.full_key(key)
        v = get_config(full_key)
        if v is None:
            return None
        if secret_getter is not None and is_config_secret(full_key):
            log.warn(
                f"Configuration '{full_key}' value is a secret; "
                + f"use `{secret_getter}` to keep it secret"
            )
        try:
            return _PARSERS[expect_type](v)
        except (ValueError, TypeError) as e:
            raise ConfigTypeError(full_key, v, expect_type) from e

    def _require(self, key: str, expect_type: str, secret: bool) -> Any:
        v = self._get(key, expect_type, None if secret else "require_secret")
        if v is None:
            raise ConfigMissingError(self.full_key(key), secret)
        return v

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Returns an optional configuration value by its key, a default value if that key is unset and
        a default is provided, or None if it doesn't exist.

        :param str key: The requested configuration key.
        :param Optional[str] default: An optional fallback value to use if the given configuration key is not set.
        :return: The configuration key's value, or None if one does not exist.
        """
        v = self._get(key, "string", "get_secret")
        return v if v is not None else default

    def get_bool(self, key: str, default: Optional[bool] = None) -> Optional[bool]:
        """
        Returns an optional configuration value, as a bool, by its key.

        :raises ConfigTypeError: The configuration value existed but couldn't be coerced to bool.
        """
        v = self._get(key, "bool", "get_secret_bool")
        return v if v is not None else default

    def get_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        """
        Returns an optional configuration value, as an int, by its key.

        :raises ConfigTypeError: The configuration value existed but couldn't be coerced to int.
        """
        v = self._get(key, "int", "get_secret_int")
        return v if v is not None else default

    def get_float(self, key: str, default: Optional[float] = None) -> Optional[float]:
        """
        Returns an optional configuration value, as a float, by its key.

        :raises ConfigTypeError: The configuration value existed but couldn't be coerced to float.
        """
        v = self._get(key, "float", "get_secret_float")
        return v if v is not None else default

    def get_object(self, key: str, default: Optional[Any] = None) -> Optional[Any]:
        """
        Returns an optional configuration value, as an object, by its key. This routine simply JSON
        parses and doesn't validate the shape of the contents.

        :raises ConfigTypeError: The configuration value existed but wasn't valid JSON.
        """
        v = self._get(key, "JSON object", "get_secret_object")
        return v if v is not None else default

    def _get_secret(
        self, key: str, expect_type: str, default: Optional[Any]
    ) -> Optional[Deferred[Any]]:
        v = self._get(key, expect_type, None)
        v = v if v is not None else default
        if v is None:
            return None
        return Deferred.secret(v)

    def get_secret(
        self, key: str, default: Optional[str] = None
    ) -> Optional[Deferred[str]]:
        """
        Returns an optional configuration value by its key, marked as a secret, or None if it
        doesn't exist and no default is given.
        """
        return self._get_secret(key, "string", default)

    def get_secret_bool(
        self, key: str, default: Optional[bool] = None
    ) -> Optional[Deferred[bool]]:
        return self._get_secret(key, "bool", default)

    def get_secret_int(
        self, key: str, default: Optional[int] = None
    ) -> Optional[Deferred[int]]:
        return self._get_secret(key, "int", default)

    def get_secret_float(
        self, key: str, default: Optional[float] = None
    ) -> Optional[Deferred[float]]:
        return self._get_secret(key, "float", default)

    def get_secret_object(
        self, key: str, default: Optional[Any] = None
    ) -> Optional[Deferred[Any]]:
        return self._get_secret(key, "JSON object", default)

    def require(self, key: str) -> str:
        """
        Returns a configuration value by its given key. If it doesn't exist, an error is thrown.

        :param str key: The requested configuration key.
        :return: The configuration key's value.
        :raises ConfigMissingError: The configuration value did not exist.
        """
        return self._require(key, "string", False)

    def require_bool(self, key: str) -> bool:
        return self._require(key, "bool", False)

    def require_int(self, key: str) -> int:
        return self._require(key, "int", False)

    def require_float(self, key: str) -> float:
        return self._require(key, "float", False)

    def require_object(self, key: str) -> Any:
        return self._require(key, "JSON object", False)

    def require_secret(self, key: str) -> Deferred[str]:
        """
        Returns a configuration value, marked as a secret, by its given key. If it doesn't exist, an
        error is thrown.

        :raises ConfigMissingError: The configuration value did not exist.
        """
        return Deferred.secret(self._require(key, "string", True))

    def require_secret_bool(self, key: str) -> Deferred[bool]:
        return Deferred.secret(self._require(key, "bool", True))

    def require_secret_int(self, key: str) -> Deferred[int]:
        return Deferred.secret(self._require(key, "int", True))

    def require_secret_float(self, key: str) -> Deferred[float]:
        return Deferred.secret(self._require(key, "float", True))

    def require_secret_object(self, key: str) -> Deferred[Any]:
        return Deferred.secret(self._require(key, "JSON object", True))

    def full_key(self, key: str) -> str:
        """
        Turns a simple configuration key into a fully resolved one, by prepending the bag's name.

        :param str key: The name of the configuration key.
        :return: The name of the configuration key, prefixed with the bag's name.
        """
        return f"{self.name}:{key}"


class ConfigTypeError(errors.RunError):
    """
    Indicates a configuration value is of the wrong type.
    """

    key: str
    """
    The name of the key whose value was ill-typed.
    """

    value: str
    """
    The ill-typed value.
    """

    expect_type: str
    """
    The expected type of this value.
    """

    def __init__(self, key: str, value: str, expect_type: str) -> None:
        self.key = key
        self.value = value
        self.expect_type = expect_type
        super().__init__(
            f"Configuration '{key}' value '{value}' is not a valid '{expect_type}'"
        )


class ConfigMissingError(errors.RunError):
    """
    Indicates a configuration value is missing.
    """

    key: str
    """
    The name of the missing configuration key.
    """

    secret: bool
    """
    If this is a secret configuration key.
    """

    def __init__(self, key: str, secret: bool) -> None:
        self.key = key
        self.secret = secret
        super().__init__(
            f"Missing required configuration variable '{key}'\n"
            + f"\tplease set a value using the command `pulumi config set{' --secret ' if secret else ' '}{key} <value>`"
        )
