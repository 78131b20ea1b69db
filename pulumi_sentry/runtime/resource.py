# Copyright 2016-2021, Pulumi Corporation.
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
import traceback
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    List,
    NamedTuple,
    Optional,
    Set,
    Tuple,
    Union,
)

import grpc
from google.protobuf import struct_pb2

from .. import log
from ..deferred import Deferred, Inputs
from ..errors import InputPropertyError, ResourceRegistrationError
from ..options import CustomTimeouts, ResourceOptions
from . import rpc
from .monitor import (
    CustomTimeouts as WireCustomTimeouts,
    PropertyDependencies,
    ReadResourceRequest,
    RegisterResourceRequest,
    RegisterResourceResponse,
)
from .settings import Settings, get_settings, handle_grpc_error

if TYPE_CHECKING:
    from ..provider import Provider


class ResourceRegistration(NamedTuple):
    """
    Everything needed to register (or read) one resource: its type token, its logical name, its
    input properties keyed by wire name, and its options. Resource wrappers such as `Project` build
    one of these and hand it to `register_resource` or `read_resource`.
    """

    type_: str
    name: str
    props: Inputs
    opts: Optional[ResourceOptions] = None
    custom: bool = True


class RegisteredResource:
    """
    The result of registering or reading a resource: deferred `urn`, `id`, and one deferred output
    per property, keyed by wire name. All of them are pending until the engine answers and then
    resolve (or fail) together.
    """

    registration: ResourceRegistration
    urn: Deferred[str]
    id: Deferred[str]
    outputs: Dict[str, Deferred[Any]]

    def __init__(self, registration: ResourceRegistration) -> None:
        self.registration = registration
        self.outputs = {}

    @property
    def type_(self) -> str:
        return self.registration.type_

    @property
    def name(self) -> str:
        return self.registration.name

    def __repr__(self) -> str:
        return f"RegisteredResource({self.type_!r}, {self.name!r})"


class ResourceResolverOperations(NamedTuple):
    """
    The set of properties resulting from a successful call to prepare_resource.
    """

    parent_urn: Optional[str]
    """
    This resource's parent URN.
    """

    serialized_props: struct_pb2.Struct
    """
    This resource's input properties, serialized into protobuf structures.
    """

    dependencies: Set[str]
    """
    The set of URNs, corresponding to the resources that this resource depends on.
    """

    provider_ref: Optional[str]
    """
    An optional reference to a provider that should be used for this resource's CRUD operations.
    """

    property_dependencies: Dict[str, List[str]]
    """
    A map from property name to the URNs of the resources the property depends on.
    """

    aliases: List[str]
    """
    A list of alias URNs applied to this resource.
    """

    deleted_with_urn: Optional[str]
    """
    If set, the provider's Delete method will not be called for this resource
    if specified resource is being deleted as well.
    """


async def _create_provider_ref(provider: "Provider") -> str:
    # A provider reference is a well-known string (two ::-separated values) that the engine interprets.
    urn = await provider.urn.future()
    pid = await provider.id.future() or rpc.UNKNOWN
    return f"{urn}::{pid}"


async def _resolve_urns(resources: List[Any]) -> Set[str]:
    urns = set()
    for res in resources:
        urn = await res.urn.future()
        if urn:
            urns.add(urn)
    return urns


async def prepare_resource(
    res: RegisteredResource,
    props: Inputs,
    opts: ResourceOptions,
) -> ResourceResolverOperations:
    # Before we can proceed, all our dependencies must be finished.
    explicit_urn_dependencies = await _resolve_urns(opts._depends_on_list())

    # Serialize out all our props to their final values, collecting the resources each one
    # depends on along the way.
    property_dependencies_resources: Dict[str, List[RegisteredResource]] = {}
    serialized_props = await rpc.serialize_properties(
        props, property_dependencies_resources
    )

    parent_urn: Optional[str] = None
    if opts.parent is not None:
        parent_urn = await opts.parent.urn.future()

    provider_ref: Optional[str] = None
    if opts.provider is not None:
        provider_ref = await _create_provider_ref(opts.provider)

    dependencies: Set[str] = set(explicit_urn_dependencies)
    property_dependencies: Dict[str, List[str]] = {}
    for key, deps in property_dependencies_resources.items():
        # A resource never depends on itself.
        urns = await _resolve_urns([d for d in deps if d is not res])
        dependencies |= urns
        property_dependencies[key] = sorted(urns)

    aliases: List[str] = []
    for alias in opts.aliases or []:
        alias_urn = await Deferred.from_input(alias).future()
        if alias_urn is not None and alias_urn not in aliases:
            aliases.append(alias_urn)

    deleted_with_urn: Optional[str] = None
    if opts.deleted_with is not None:
        deleted_with_urn = await opts.deleted_with.urn.future()

    return ResourceResolverOperations(
        parent_urn,
        serialized_props,
        dependencies,
        provider_ref,
        property_dependencies,
        aliases,
        deleted_with_urn,
    )


def create_urn(
    name: str,
    type_: str,
    parent_urn: Optional[str],
    settings: Settings,
) -> str:
    """
    create_urn computes a URN from the combination of a resource name, resource type, optional
    parent URN and the project and stack of the given settings.
    """
    if parent_urn:
        parent_prefix = parent_urn[0 : parent_urn.rfind("::")] + "$"
    else:
        parent_prefix = f"urn:pulumi:{settings.stack}::{settings.project}::"
    return parent_prefix + type_ + "::" + name


def parse_urn(urn: str) -> Tuple[str, str]:
    """
    Returns the (qualified type, name) pair a URN was built from.
    """
    parts = urn.split("::")
    if len(parts) < 4 or not parts[0].startswith("urn:pulumi:"):
        raise ValueError(f"invalid URN: {urn}")
    return parts[2], "::".join(parts[3:])


def resource_output(
    res: RegisteredResource,
) -> Tuple[Callable[[Any, bool, bool, Optional[Exception]], None], Deferred[Any]]:
    resolve, output = rpc.deferred_output(res)

    def resolve_output(value: Any, known: bool, secret: bool, exn: Optional[Exception]):
        resolve(value, known, secret, None, exn)

    return resolve_output, output


def _create_custom_timeouts(
    custom_timeouts: Union[CustomTimeouts, Dict[str, str]],
) -> WireCustomTimeouts:
    result = WireCustomTimeouts()
    if isinstance(custom_timeouts, CustomTimeouts):
        result.create = custom_timeouts.create or ""
        result.update = custom_timeouts.update or ""
        result.delete = custom_timeouts.delete or ""
    # Or, it could be a plain dict.
    elif isinstance(custom_timeouts, dict):
        result.create = custom_timeouts.get("create", "")
        result.update = custom_timeouts.get("update", "")
        result.delete = custom_timeouts.get("delete", "")
    else:
        raise TypeError("Expected custom_timeouts to be a CustomTimeouts object")
    return result


def register_resource(
    registration: ResourceRegistration, settings: Optional[Settings] = None
) -> RegisteredResource:
    """
    Registers a new resource's desired state with the resource monitor of `settings` (the current
    settings when omitted). Returns immediately; the URN, ID, and every property of the returned
    `RegisteredResource` resolve once the monitor answers. If registration fails, all of them fail
    with the same exception.

    The provider version sent is `opts.version` when set, otherwise `settings.sdk_version`.
    """
    settings = settings if settings is not None else get_settings()
    ty, name, props, opts, custom = registration
    opts = opts if opts is not None else ResourceOptions()
    log.debug(f"registering resource: ty={ty}, name={name}, custom={custom}")
    monitor = settings.monitor

    res = RegisteredResource(registration)

    # The URN always gets a value, so it can always run applies.
    (resolve_urn, res.urn) = resource_output(res)
    (resolve_id, res.id) = resource_output(res)

    # Hand out pending outputs for every property now; they resolve when the RPC returns.
    resolvers = rpc.transfer_properties(res, props)

    async def do_register() -> None:
        try:
            try:
                resolver = await prepare_resource(res, props, opts)
            except (ValueError, TypeError, InputPropertyError) as e:
                raise ResourceRegistrationError(name, ty, e) from e
            log.debug(f"resource registration prepared: ty={ty}, name={name}")

            property_dependencies = {
                key: PropertyDependencies(urns=urns)
                for key, urns in resolver.property_dependencies.items()
            }

            custom_timeouts = None
            if opts.custom_timeouts is not None:
                custom_timeouts = _create_custom_timeouts(opts.custom_timeouts)

            req = RegisterResourceRequest(
                type=ty,
                name=name,
                parent=resolver.parent_urn or "",
                custom=custom,
                object=resolver.serialized_props,
                protect=opts.protect,
                provider=resolver.provider_ref or "",
                dependencies=sorted(resolver.dependencies),
                propertyDependencies=property_dependencies,
                deleteBeforeReplace=opts.delete_before_replace or False,
                deleteBeforeReplaceDefined=opts.delete_before_replace is not None,
                ignoreChanges=opts.ignore_changes,
                version=opts.version or settings.sdk_version,
                acceptSecrets=True,
                additionalSecretOutputs=opts.additional_secret_outputs,
                importId=opts.import_ or "",
                customTimeouts=custom_timeouts,
                aliasURNs=resolver.aliases,
                replaceOnChanges=opts.replace_on_changes,
                retainOnDelete=opts.retain_on_delete,
                deletedWith=resolver.deleted_with_urn or "",
            )

            mock_urn = create_urn(name, ty, resolver.parent_urn, settings)

            def do_rpc_call() -> Optional[RegisterResourceResponse]:
                if monitor is None:
                    # If no monitor is available, we'll need to fake up a response, for testing.
                    return RegisterResourceResponse(
                        mock_urn, None, resolver.serialized_props
                    )

                try:
                    return monitor.RegisterResource(req)
                except grpc.RpcError as exn:
                    handle_grpc_error(exn)
                    return None

            resp = await asyncio.get_running_loop().run_in_executor(None, do_rpc_call)
        except Exception as exn:
            log.debug(
                f"exception when preparing or executing rpc: {traceback.format_exc()}"
            )
            rpc.resolve_outputs_due_to_exception(resolvers, exn)
            resolve_urn(None, True, False, exn)
            resolve_id(None, True, False, exn)
            raise

        if resp is None:
            return

        try:
            log.debug(f"resource registration successful: ty={ty}, urn={resp.urn}")
            resolve_urn(resp.urn, True, False, None)

            # The ID is known if (and only if) it is a non-empty string. Providers send the empty
            # string as an ID during previews.
            resolve_id(resp.id, bool(resp.id), False, None)

            property_deps: Dict[str, Set[RegisteredResource]] = {}
            rpc.resolve_outputs(
                resolver.serialized_props,
                resp.object,
                property_deps,
                resolvers,
                bool(settings.dry_run),
            )
        except Exception as exn:
            log.debug(f"exception after executing rpc: {traceback.format_exc()}")
            rpc.resolve_outputs_due_to_exception(resolvers, exn)
            resolve_urn(None, True, False, exn)
            resolve_id(None, True, False, exn)
            raise

    settings.rpc_manager.do_rpc("register resource", do_register)()
    return res


def read_resource(
    registration: ResourceRegistration, settings: Optional[Settings] = None
) -> RegisteredResource:
    """
    Reads the current state of an existing resource, identified by `opts.id`, through the resource
    monitor. Properties in `registration.props` that are not None are sent along to qualify the
    lookup. The returned `RegisteredResource` has the same shape as one from `register_resource`.
    """
    settings = settings if settings is not None else get_settings()
    ty, name, props, opts, _ = registration
    if opts is None or opts.id is None:
        raise ValueError("Cannot read resource whose options are lacking an ID value")

    log.debug(f"reading resource: ty={ty}, name={name}")
    monitor = settings.monitor

    res = RegisteredResource(registration)
    (resolve_urn, res.urn) = resource_output(res)
    (resolve_id, res.id) = resource_output(res)
    resolvers = rpc.transfer_properties(res, props)

    async def do_read() -> None:
        try:
            try:
                resolver = await prepare_resource(res, props, opts)
            except (ValueError, TypeError, InputPropertyError) as e:
                raise ResourceRegistrationError(name, ty, e) from e

            # A read resource already exists, so the ID carries no dependencies.
            resolved_id = await rpc.serialize_property(opts.id, [], "id")
            if resolved_id == rpc.UNKNOWN:
                raise ValueError(f"cannot read resource {name!r}: its ID is not known")
            log.debug(f"read prepared: ty={ty}, name={name}, id={resolved_id}")

            req = ReadResourceRequest(
                type=ty,
                name=name,
                id=resolved_id,
                parent=resolver.parent_urn or "",
                provider=resolver.provider_ref or "",
                properties=resolver.serialized_props,
                dependencies=sorted(resolver.dependencies),
                version=opts.version or settings.sdk_version,
                acceptSecrets=True,
                additionalSecretOutputs=opts.additional_secret_outputs,
            )

            mock_urn = create_urn(name, ty, resolver.parent_urn, settings)

            def do_rpc_call():
                if monitor is None:
                    # If no monitor is available, we'll need to fake up a response, for testing.
                    return RegisterResourceResponse(
                        mock_urn, None, resolver.serialized_props
                    )

                try:
                    return monitor.ReadResource(req)
                except grpc.RpcError as exn:
                    handle_grpc_error(exn)
                    return None

            resp = await asyncio.get_running_loop().run_in_executor(None, do_rpc_call)
        except Exception as exn:
            log.debug(
                f"exception when preparing or executing rpc: {traceback.format_exc()}"
            )
            rpc.resolve_outputs_due_to_exception(resolvers, exn)
            resolve_urn(None, True, False, exn)
            resolve_id(None, True, False, exn)
            raise

        if resp is None:
            return

        try:
            log.debug(f"resource read successful: ty={ty}, urn={resp.urn}")
            resolve_urn(resp.urn, True, False, None)
            resolve_id(resolved_id, True, False, None)  # Read IDs are always known.
            properties = getattr(resp, "properties", None)
            if properties is None:
                properties = resp.object
            rpc.resolve_outputs(
                resolver.serialized_props,
                properties,
                {},
                resolvers,
                bool(settings.dry_run),
            )
        except Exception as exn:
            log.debug(f"exception after executing rpc: {traceback.format_exc()}")
            rpc.resolve_outputs_due_to_exception(resolvers, exn)
            resolve_urn(None, True, False, exn)
            resolve_id(None, True, False, exn)
            raise

    settings.rpc_manager.do_rpc("read resource", do_read)()
    return res

