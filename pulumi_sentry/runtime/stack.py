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
Running a program to completion.
"""

import asyncio
from typing import Any, Callable

from .. import log
from ..deferred import Deferred
from . import settings
from .settings import _get_rpc_manager


async def run_program(func: Callable[[], Any]) -> Any:
    """
    Runs `func`, which declares and looks up resources, and waits until every registration it
    started has finished. If `func` returns an Input, its value is awaited as well and returned.
    """
    try:
        return await Deferred.from_input(func()).future()
    finally:
        await wait_for_rpcs()

        # By now, all tasks have exited and we're good to go.
        log.debug("run_program completed")


async def wait_for_rpcs() -> None:
    log.debug("Waiting for outstanding RPCs to complete")

    rpc_manager = _get_rpc_manager()
    while True:
        # Pump the event loop, giving all of the RPCs that we just queued up time to fully execute.
        # The asyncio scheduler does not expose a "yield" primitive, so this will have to do.
        #
        # We await each RPC in turn so that this loop will actually block rather than busy-wait.
        while len(rpc_manager.rpcs) > 0:
            await asyncio.sleep(0)
            if settings.excessive_debug_output:
                log.debug(
                    f"waiting for quiescence; {len(rpc_manager.rpcs)} RPCs outstanding"
                )
            await rpc_manager.rpcs.pop()

        if rpc_manager.unhandled_exception is not None:
            raise rpc_manager.unhandled_exception.with_traceback(
                rpc_manager.exception_traceback
            )

        log.debug("RPCs successfully completed")

        # Resolving outputs may run applies that declare more resources. Give them a turn and repeat
        # the cycle if any did.
        await asyncio.sleep(0)
        if len(rpc_manager.rpcs) == 0:
            break
