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
import sys
import traceback
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from .. import log
from .sync_await import _ensure_event_loop


class RPCManager:
    """
    RPCManager keeps track of the registrations and reads dispatched to the resource monitor during a
    program run. It remembers the first failure so that the run can end with it, and knows whether
    any RPCs are still outstanding.
    """

    rpcs: List[Awaitable]
    """
    The active RPCs.
    """

    unhandled_exception: Optional[Exception]
    """
    The first unhandled exception encountered during an RPC, if any occurs.
    """

    exception_traceback: Optional[Any]
    """
    The traceback associated with unhandled_exception, if any.
    """

    def __init__(self):
        self.rpcs = []
        self.unhandled_exception = None
        self.exception_traceback = None

    def do_rpc(
        self, name: str, rpc_function: Callable[..., Awaitable[Any]]
    ) -> Callable[..., "asyncio.Future[Tuple[Any, Optional[Exception]]]"]:
        """
        Wraps an RPC coroutine function so that calling the wrapper schedules it right away, records
        it as outstanding for wait_for_rpcs, and turns its failure into a recorded result instead of
        losing it.

        :param name: The name of this RPC, to be used for logging
        :param rpc_function: The function implementing the RPC
        :return: A function returning a future of a (result, exception) pair
        """

        async def run(*args, **kwargs) -> Tuple[Any, Optional[Exception]]:
            try:
                result = await rpc_function(*args, **kwargs)
                exception = None
            except Exception as exn:
                log.debug(f"RPC {name} failed with exception:")
                log.debug(traceback.format_exc())
                if self.unhandled_exception is None:
                    self.unhandled_exception = exn
                    self.exception_traceback = sys.exc_info()[2]
                result = None
                exception = exn

            return result, exception

        def rpc_wrapper(*args, **kwargs):
            log.debug(f"beginning rpc {name}")
            rpc = asyncio.ensure_future(run(*args, **kwargs), loop=_ensure_event_loop())
            self.rpcs.append(rpc)
            return rpc

        return rpc_wrapper

    def clear(self) -> None:
        self.rpcs = []
        self.unhandled_exception = None
        self.exception_traceback = None
