# Copyright 2016-2024, Pulumi Corporation.
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
The narrow client surface this SDK needs from the engine: a resource monitor that registers and reads
resources, and an engine that accepts log messages. Any object with these methods can be plugged into
`Settings`, whether it forwards over gRPC or answers in process like the mocks do.
"""
from enum import IntEnum
from typing import Dict, List, Optional, Protocol

from google.protobuf import struct_pb2


class LogSeverity(IntEnum):
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


class LogRequest:
    severity: LogSeverity
    message: str
    urn: str
    streamId: int
    ephemeral: bool

    def __init__(
        self,
        severity: LogSeverity,
        message: str,
        urn: str = "",
        streamId: int = 0,
        ephemeral: Optional[bool] = None,
    ):
        self.severity = severity
        self.message = message
        self.urn = urn
        self.streamId = streamId
        self.ephemeral = bool(ephemeral)


class PropertyDependencies:
    urns: List[str]

    def __init__(self, urns: List[str]):
        self.urns = urns


class CustomTimeouts:
    create: str
    update: str
    delete: str

    def __init__(self, create: str = "", update: str = "", delete: str = ""):
        self.create = create
        self.update = update
        self.delete = delete


class RegisterResourceRequest:
    """
    A request to register a resource's desired state. Field names match the engine's wire names.
    """

    def __init__(
        self,
        type: str,
        name: str,
        parent: str = "",
        custom: bool = True,
        object: Optional[struct_pb2.Struct] = None,
        protect: Optional[bool] = None,
        provider: str = "",
        dependencies: Optional[List[str]] = None,
        propertyDependencies: Optional[Dict[str, PropertyDependencies]] = None,
        deleteBeforeReplace: bool = False,
        deleteBeforeReplaceDefined: bool = False,
        ignoreChanges: Optional[List[str]] = None,
        version: str = "",
        acceptSecrets: bool = True,
        additionalSecretOutputs: Optional[List[str]] = None,
        importId: str = "",
        customTimeouts: Optional[CustomTimeouts] = None,
        aliasURNs: Optional[List[str]] = None,
        replaceOnChanges: Optional[List[str]] = None,
        retainOnDelete: Optional[bool] = None,
        deletedWith: str = "",
    ):
        self.type = type
        self.name = name
        self.parent = parent
        self.custom = custom
        self.object = object if object is not None else struct_pb2.Struct()
        self.protect = protect
        self.provider = provider
        self.dependencies = dependencies or []
        self.propertyDependencies = propertyDependencies or {}
        self.deleteBeforeReplace = deleteBeforeReplace
        self.deleteBeforeReplaceDefined = deleteBeforeReplaceDefined
        self.ignoreChanges = ignoreChanges or []
        self.version = version
        self.acceptSecrets = acceptSecrets
        self.additionalSecretOutputs = additionalSecretOutputs or []
        self.importId = importId
        self.customTimeouts = customTimeouts
        self.aliasURNs = aliasURNs or []
        self.replaceOnChanges = replaceOnChanges or []
        self.retainOnDelete = retainOnDelete
        self.deletedWith = deletedWith


class RegisterResourceResponse:
    urn: str
    id: Optional[str]
    object: struct_pb2.Struct
    propertyDependencies: Dict[str, PropertyDependencies]

    def __init__(
        self,
        urn: str,
        id: Optional[str] = None,
        object: Optional[struct_pb2.Struct] = None,
        propertyDependencies: Optional[Dict[str, PropertyDependencies]] = None,
    ):
        self.urn = urn
        self.id = id
        self.object = object if object is not None else struct_pb2.Struct()
        self.propertyDependencies = propertyDependencies or {}


class ReadResourceRequest:
    """
    A request to read the current state of an existing resource by its provider ID.
    """

    def __init__(
        self,
        type: str,
        name: str,
        id: str,
        parent: str = "",
        provider: str = "",
        properties: Optional[struct_pb2.Struct] = None,
        dependencies: Optional[List[str]] = None,
        version: str = "",
        acceptSecrets: bool = True,
        additionalSecretOutputs: Optional[List[str]] = None,
    ):
        self.type = type
        self.name = name
        self.id = id
        self.parent = parent
        self.provider = provider
        self.properties = properties if properties is not None else struct_pb2.Struct()
        self.dependencies = dependencies or []
        self.version = version
        self.acceptSecrets = acceptSecrets
        self.additionalSecretOutputs = additionalSecretOutputs or []


class ReadResourceResponse:
    urn: str
    properties: struct_pb2.Struct

    def __init__(self, urn: str, properties: Optional[struct_pb2.Struct] = None):
        self.urn = urn
        self.properties = properties if properties is not None else struct_pb2.Struct()


class Monitor(Protocol):
    def RegisterResource(
        self, request: RegisterResourceRequest
    ) -> RegisterResourceResponse: ...

    def ReadResource(self, request: ReadResourceRequest) -> ReadResourceResponse: ...


class Engine(Protocol):
    def Log(self, request: LogRequest) -> None: ...
