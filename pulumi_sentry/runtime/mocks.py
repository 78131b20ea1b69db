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
Mocks for testing.
"""
import functools
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, NamedTuple, Optional, Tuple

from . import rpc
from .monitor import (
    LogRequest,
    LogSeverity,
    ReadResourceRequest,
    ReadResourceResponse,
    RegisterResourceRequest,
    RegisterResourceResponse,
)
from .settings import Settings, configure
from .stack import run_program
from .sync_await import _ensure_event_loop, _sync_await


def test(fn):
    """
    Runs the decorated function as a program: every registration it starts, and any Deferred it
    returns, must finish before the call returns. A failed registration is raised from the call.
    """

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        _sync_await(run_program(lambda: fn(*args, **kwargs)))

    return wrapper


class MockResourceArgs:
    """
    MockResourceArgs is used to construct a new_resource Mock
    """

    typ: str
    name: str
    inputs: dict
    provider: str
    resource_id: str
    custom: bool

    def __init__(
        self,
        typ: str,
        name: str,
        inputs: dict,
        provider: str,
        resource_id: str,
        custom: bool,
    ) -> None:
        """
        :param str typ: The token that indicates which resource type is being constructed. This token is of the form "package:module:type".
        :param str name: The logical name of the resource instance.
        :param dict inputs: The inputs for the resource, keyed by wire name.
        :param str provider: The reference of the provider instance being used to manage this resource.
        :param str resource_id: The physical identifier of an existing resource to read or import.
        :param bool custom: Specifies whether or not the resource is managed by a resource provider.
        """
        self.typ = typ
        self.name = name
        self.inputs = inputs
        self.provider = provider
        self.resource_id = resource_id
        self.custom = custom


class Mocks(ABC):
    """
    Mocks is an abstract class that allows subclasses to replace the resource monitor with their own
    implementation. This can be used during testing to ensure that resource constructors and lookups
    return predictable values.
    """

    @abstractmethod
    def new_resource(self, args: MockResourceArgs) -> Tuple[Optional[str], dict]:
        """
        new_resource mocks resource construction and lookup calls. This function should return the
        physical identifier and the output properties (keyed by wire name) for the resource.

        :param MockResourceArgs args.
        """
        return "", {}


class MockMonitor:
    class ResourceRegistration(NamedTuple):
        urn: str
        id: Optional[str]
        state: dict

    mocks: Mocks
    project: str
    stack: str
    resources: Dict[str, ResourceRegistration]
    requests: List[object]

    def __init__(self, mocks: Mocks, project: str, stack: str):
        self.mocks = mocks
        # Requests arrive on executor threads, which do not see the caller's settings context.
        self.project = project
        self.stack = stack
        self.resources = {}
        self.requests = []

    def make_urn(self, parent: str, type_: str, name: str) -> str:
        if parent != "":
            qualifiedType = parent.split("::")[2]
            parentType = qualifiedType.split("$").pop()
            type_ = parentType + "$" + type_

        return "urn:pulumi:" + "::".join([self.stack, self.project, type_, name])

    def ReadResource(self, request: ReadResourceRequest) -> ReadResourceResponse:
        # Ensure we have an event loop on this thread because it's needed when serializing state.
        _ensure_event_loop()
        self.requests.append(request)

        state = rpc.deserialize_properties(request.properties)

        resource_args = MockResourceArgs(
            typ=request.type,
            name=request.name,
            inputs=state,
            provider=request.provider,
            resource_id=request.id,
            custom=True,
        )
        id_, state = self.mocks.new_resource(resource_args)

        props_proto = _sync_await(rpc.serialize_properties(state, {}))

        urn = self.make_urn(request.parent, request.type, request.name)

        self.resources[urn] = MockMonitor.ResourceRegistration(urn, id_, state)

        return ReadResourceResponse(urn=urn, properties=props_proto)

    def RegisterResource(
        self, request: RegisterResourceRequest
    ) -> RegisterResourceResponse:
        urn = self.make_urn(request.parent, request.type, request.name)

        # Ensure we have an event loop on this thread because it's needed when serializing state.
        _ensure_event_loop()
        self.requests.append(request)

        inputs = rpc.deserialize_properties(request.object)

        resource_args = MockResourceArgs(
            typ=request.type,
            name=request.name,
            inputs=inputs,
            provider=request.provider,
            resource_id=request.importId,
            custom=request.custom or False,
        )
        id_, state = self.mocks.new_resource(resource_args)

        obj_proto = _sync_await(rpc.serialize_properties(state, {}))

        self.resources[urn] = MockMonitor.ResourceRegistration(urn, id_, state)

        return RegisterResourceResponse(urn=urn, id=id_, object=obj_proto)


class MockEngine:
    logger: logging.Logger

    def __init__(self, logger: Optional[logging.Logger]):
        self.logger = logger if logger is not None else logging.getLogger()

    def Log(self, request: LogRequest) -> None:
        if request.severity == LogSeverity.DEBUG:
            self.logger.debug(request.message)
        elif request.severity == LogSeverity.INFO:
            self.logger.info(request.message)
        elif request.severity == LogSeverity.WARNING:
            self.logger.warning(request.message)
        elif request.severity == LogSeverity.ERROR:
            self.logger.error(request.message)


def set_mocks(
    mocks: Mocks,
    project: Optional[str] = None,
    stack: Optional[str] = None,
    preview: Optional[bool] = None,
    logger: Optional[logging.Logger] = None,
    sdk_version: Optional[str] = None,
) -> Settings:
    """
    set_mocks configures the runtime to use the given mocks for testing, and returns the settings it
    installed.
    """
    project = project if project is not None else "project"
    stack = stack if stack is not None else "stack"
    settings = Settings(
        monitor=MockMonitor(mocks, project, stack),
        engine=MockEngine(logger),
        project=project,
        stack=stack,
        dry_run=preview,
        sdk_version=sdk_version,
    )
    configure(settings)
    return settings
