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
import asyncio
from typing import Awaitable, TypeVar

T = TypeVar("T")


def _sync_await(awaitable: Awaitable[T]) -> T:
    """
    _sync_await drives this thread's event loop until the given awaitable completes. It cannot be
    used while that loop is already running; code on a running loop awaits the value instead.
    """

    loop = _ensure_event_loop()
    if loop.is_running():
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        raise RuntimeError(
            "cannot wait synchronously while the event loop is running; await the value instead"
        )

    return loop.run_until_complete(asyncio.ensure_future(awaitable, loop=loop))


def _ensure_event_loop() -> asyncio.AbstractEventLoop:
    """Ensures an asyncio event loop exists for the current thread."""
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        pass
    try:
        loop = asyncio.get_event_loop_policy().get_event_loop()
    except RuntimeError:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
    if loop.is_closed():
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
    return loop
