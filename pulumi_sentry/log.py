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
Utility functions for logging messages to the engine's diagnostic stream.
"""
import asyncio
import sys
from typing import TYPE_CHECKING, Any, Optional

from .runtime.monitor import LogRequest, LogSeverity

if TYPE_CHECKING:
    from .runtime.resource import RegisteredResource


def debug(
    msg: str,
    resource: Optional["RegisteredResource"] = None,
    stream_id: Optional[int] = None,
    ephemeral: Optional[bool] = None,
) -> None:
    """
    Logs a message to the engine's debug channel, associating it with a resource
    and stream_id if provided.

    :param str msg: The message to send to the engine.
    :param resource: If provided, associate this message with the given resource.
    :param Optional[int] stream_id: If provided, associate this message with a stream of other messages.
    """
    _emit(LogSeverity.DEBUG, "debug", msg, resource, stream_id, ephemeral)


def info(
    msg: str,
    resource: Optional["RegisteredResource"] = None,
    stream_id: Optional[int] = None,
    ephemeral: Optional[bool] = None,
) -> None:
    """
    Logs a message to the engine's info channel, associating it with a resource
    and stream_id if provided.
    """
    _emit(LogSeverity.INFO, "info", msg, resource, stream_id, ephemeral)


def warn(
    msg: str,
    resource: Optional["RegisteredResource"] = None,
    stream_id: Optional[int] = None,
    ephemeral: Optional[bool] = None,
) -> None:
    """
    Logs a message to the engine's warning channel, associating it with a resource
    and stream_id if provided.
    """
    _emit(LogSeverity.WARNING, "warning", msg, resource, stream_id, ephemeral)


def error(
    msg: str,
    resource: Optional["RegisteredResource"] = None,
    stream_id: Optional[int] = None,
    ephemeral: Optional[bool] = None,
) -> None:
    """
    Logs a message to the engine's error channel, associating it with a resource
    and stream_id if provided.
    """
    _emit(LogSeverity.ERROR, "error", msg, resource, stream_id, ephemeral)


def _emit(severity: LogSeverity, prefix: str, msg: str, resource, stream_id, ephemeral):
    from .runtime.settings import get_engine  # pylint: disable=import-outside-toplevel

    engine = get_engine()
    if engine is not None:
        _log(engine, severity, msg, resource, stream_id, ephemeral)
    else:
        print(f"{prefix}: {msg}", file=sys.stderr)


def _log(engine: Any, severity, message, resource, stream_id, ephemeral):
    if stream_id is None:
        stream_id = 0

    # Without a resource the message can go out right away. With one, the URN has to resolve first.
    async def do_log():
        resolved_urn = await resource.urn.future()
        engine.Log(
            LogRequest(
                severity=severity,
                message=message,
                urn=resolved_urn or "",
                streamId=stream_id,
                ephemeral=ephemeral,
            )
        )

    if resource is not None:
        asyncio.ensure_future(do_log())
    else:
        engine.Log(
            LogRequest(
                severity=severity,
                message=message,
                urn="",
                streamId=stream_id,
                ephemeral=ephemeral,
            )
        )
