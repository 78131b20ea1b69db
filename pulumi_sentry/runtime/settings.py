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
Runtime settings: the engine client a program registers its resources with.
"""
from __future__ import annotations

from contextvars import ContextVar
from typing import TYPE_CHECKING, Optional

import grpc
from semver import VersionInfo

from ..errors import RunError
from .rpc_manager import RPCManager

if TYPE_CHECKING:
    from .monitor import Engine, Monitor


# excessive_debug_output enables, well, pretty excessive debug output pertaining to resources and properties.
excessive_debug_output = False


class Settings:
    """
    A bag of properties describing the engine client: where resources are registered, where logs go,
    which project and stack are targeted, and which SDK version is stamped onto every registration
    that does not pin one through `ResourceOptions.version`.
    """

    def __init__(
        self,
        project: Optional[str],
        stack: Optional[str],
        monitor: Optional["Monitor"] = None,
        engine: Optional["Engine"] = None,
        dry_run: Optional[bool] = None,
        sdk_version: Optional[str] = None,
    ):
        self.rpc_manager = RPCManager()
        self.project = project
        self.stack = stack
        self.monitor = monitor
        self.engine = engine
        self.dry_run = dry_run

        if sdk_version is None:
            from .._utilities import get_version  # pylint: disable=import-outside-toplevel

            sdk_version = get_version()
        # The engine expects a semver string; reject anything else up front.
        VersionInfo.parse(sdk_version)
        self.sdk_version = sdk_version

    def __repr__(self):
        return (
            f"<class Settings[engine={self.engine!r} monitor={self.monitor!r} "
            + f"project={self.project!r} stack={self.stack!r} sdk_version={self.sdk_version!r}]>"
        )


_SETTINGS: ContextVar[Optional[Settings]] = ContextVar("settings", default=None)


def configure(settings: Settings) -> None:
    """
    Configure sets the settings bag for the current context to the one given.
    """
    if not settings or not isinstance(settings, Settings):
        raise TypeError("Settings is expected to be non-None and of type Settings")
    _SETTINGS.set(settings)


def get_settings() -> Settings:
    """
    Returns the settings bag for the current context, creating an empty one on first use.
    """
    settings = _SETTINGS.get()
    if settings is None:
        settings = Settings(project="project", stack="stack")
        _SETTINGS.set(settings)
    return settings


def is_dry_run() -> bool:
    """
    Returns whether or not we are currently doing a preview.
    """
    return bool(get_settings().dry_run)


def get_project() -> Optional[str]:
    return get_settings().project


def get_stack() -> Optional[str]:
    return get_settings().stack


def get_monitor() -> Optional["Monitor"]:
    """
    Returns the current resource monitor client.
    """
    return get_settings().monitor


def get_engine() -> Optional["Engine"]:
    """
    Returns the current engine client.
    """
    return get_settings().engine


def _get_rpc_manager() -> RPCManager:
    return get_settings().rpc_manager


def grpc_error_to_exception(exn: grpc.RpcError) -> Exception:
    # grpc.RpcError is also a grpc.Call at runtime, which is where code() and details() come from.
    # pylint: disable=no-member
    if exn.code() == grpc.StatusCode.UNAVAILABLE:
        # If the monitor is unavailable, it is in the process of
        # shutting down or has already shut down.
        return RunError("Resource monitor has terminated, shutting down")

    details = exn.details()
    return Exception(details)


def handle_grpc_error(exn: grpc.RpcError) -> None:
    raise grpc_error_to_exception(exn)
