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

"""
Support for serializing and deserializing properties going into or flowing
out of RPC calls.
"""
import asyncio
from collections import abc
from inspect import isawaitable
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Set, Tuple

from google.protobuf import struct_pb2

from .. import log
from ..deferred import Deferred, DeferredData, Inputs, Unknown, UNKNOWN as UNKNOWN_VALUE
from ..errors import InputPropertyError
from . import settings
from .sync_await import _ensure_event_loop

if TYPE_CHECKING:
    from .resource import RegisteredResource

UNKNOWN = "04da6b54-80e4-46f7-96ec-b56ff0331ba9"
"""If a value is unknown, we serialize it as UNKNOWN, which tells the engine that it may be computed later."""

_special_sig_key = "4dabf18193072939515e22adb298388d"
"""
_special_sig_key is used to encode type identity inside of a map.
"""

_special_secret_sig = "1b47061264138c4ac30d75fd1eb44270"
"""
_special_secret_sig is a randomly assigned hash used to identify secrets in maps.
"""

_LEGAL_SCALARS = (bool, str, int, float)


def is_legal_protobuf_value(value: Any) -> bool:
    return value is None or isinstance(value, _LEGAL_SCALARS + (dict, list))


async def serialize_properties(
    inputs: Inputs,
    property_deps: Dict[str, List["RegisteredResource"]],
) -> struct_pb2.Struct:
    """
    Serializes an arbitrary Input bag into a Protobuf structure, keeping track of the resources each
    property depends on in `property_deps`. Serializing properties is inherently async because it
    awaits any deferred values that are contained transitively within the input bag.

    Keys are sent as given; callers pass wire (camelCase) names.
    """
    struct = struct_pb2.Struct()
    for k in inputs:
        deps: List["RegisteredResource"] = []
        result = await serialize_property(inputs[k], deps, k)
        # We treat properties that serialize to None as if they don't exist.
        if result is not None:
            struct[k] = result
            property_deps[k] = deps

    return struct


async def serialize_property(
    value: Any, deps: List["RegisteredResource"], property_key: Optional[str] = None
) -> Any:
    """
    Serializes a single Input into a form suitable for remoting to the engine, awaiting any
    deferred values required to do so.
    """
    if isinstance(value, abc.Sequence) and not isinstance(
        value, (str, range, memoryview, bytes, bytearray)
    ):
        return [await serialize_property(elem, deps, property_key) for elem in value]

    if isinstance(value, Unknown):
        return UNKNOWN

    if isinstance(value, Deferred):
        data: DeferredData = await value._data
        deps.extend(data.resources)

        if isinstance(data.value, Unknown):
            return UNKNOWN

        serialized = await serialize_property(data.value, deps, property_key)
        if data.secret:
            return wrap_rpc_secret(serialized)
        return serialized

    if isawaitable(value):
        # Coroutines and futures get awaited and their results serialized.
        return await serialize_property(await value, deps, property_key)

    if isinstance(value, abc.Mapping):
        obj = {}
        for k in value:
            if settings.excessive_debug_output:
                log.debug(f"serializing nested property: {property_key}.{k}")
            obj[k] = await serialize_property(value[k], deps, k)
        return obj

    if not is_legal_protobuf_value(value):
        raise InputPropertyError(
            property_key or "<value>",
            f"unexpected input of type {type(value).__name__}",
        )

    return value


def deserialize_properties(
    props_struct: struct_pb2.Struct, keep_unknowns: Optional[bool] = None
) -> Any:
    """
    Deserializes a protobuf `struct_pb2.Struct` into a Python dictionary containing normal
    Python types.
    """
    if _special_sig_key in props_struct:
        if props_struct[_special_sig_key] == _special_secret_sig:
            return wrap_rpc_secret(
                deserialize_property(props_struct["value"], keep_unknowns)
            )
        raise AssertionError(
            "Unrecognized signature when unmarshalling resource property"
        )

    output = {}
    for k, v in list(props_struct.items()):
        # Engine-internal properties do not contribute to the shape of the object.
        if k.startswith("__"):
            continue

        value = deserialize_property(v, keep_unknowns)
        # We treat values that deserialize to "None" as if they don't exist.
        if value is not None:
            output[k] = value

    return output


def deserialize_property(value: Any, keep_unknowns: Optional[bool] = None) -> Any:
    """
    Deserializes a single protobuf value (either `Struct` or `ListValue`) into idiomatic
    Python values.
    """
    if value == UNKNOWN:
        return UNKNOWN_VALUE if keep_unknowns else None

    # ListValues are projected to lists
    if isinstance(value, struct_pb2.ListValue):
        # values has no __iter__ defined but this works.
        values = [deserialize_property(v, keep_unknowns) for v in value]  # type: ignore
        # Secretness of any element is pushed "up" to the list.
        if any(is_rpc_secret(v) for v in values):
            return wrap_rpc_secret([unwrap_rpc_secret(v) for v in values])
        return values

    # Structs are projected to dictionaries
    if isinstance(value, struct_pb2.Struct):
        props = deserialize_properties(value, keep_unknowns)
        if isinstance(props, dict) and any(is_rpc_secret(v) for v in props.values()):
            return wrap_rpc_secret({k: unwrap_rpc_secret(v) for k, v in props.items()})
        return props

    # Everything else is identity projected.
    return value


def is_rpc_secret(value: Any) -> bool:
    """
    Returns if a given python value is actually a wrapped secret.
    """
    return (
        isinstance(value, dict)
        and _special_sig_key in value
        and value[_special_sig_key] == _special_secret_sig
    )


def wrap_rpc_secret(value: Any) -> Any:
    """
    Given a value, wrap it as a secret value if it isn't already a secret, otherwise return the value unmodified.
    """
    if is_rpc_secret(value):
        return value

    return {
        _special_sig_key: _special_secret_sig,
        "value": value,
    }


def unwrap_rpc_secret(value: Any) -> Any:
    """
    Given a value, if it is a wrapped secret value, return the underlying, otherwise return the value unmodified.
    """
    if is_rpc_secret(value):
        return value["value"]

    return value


Resolver = Callable[
    [Any, bool, bool, Optional[Set["RegisteredResource"]], Optional[Exception]], None
]
"""
A Resolver completes one output property of a resource. It takes:
    1. the value reported by the engine,
    2. whether that value is known (it may not be during a preview),
    3. whether the value is secret,
    4. any additional resources the value depends on, and
    5. an exception, which (if provided) fails the output instead.
"""


def deferred_output(
    res: "RegisteredResource",
) -> Tuple[Resolver, Deferred[Any]]:
    """
    Creates a pending Deferred owned by `res` together with the resolver that completes it.
    """
    fut: "asyncio.Future[DeferredData[Any]]" = _ensure_event_loop().create_future()

    def resolve(
        value: Any,
        is_known: bool,
        is_secret: bool,
        deps: Optional[Set["RegisteredResource"]],
        failed: Optional[Exception],
    ) -> None:
        if fut.done():
            return
        if failed is not None:
            fut.set_exception(failed)
            return
        resources = set(deps) if deps else set()
        resources.add(res)
        fut.set_result(
            DeferredData(resources, value if is_known else UNKNOWN_VALUE, is_secret)
        )

    return resolve, Deferred(fut)


def transfer_properties(
    res: "RegisteredResource", props: Inputs
) -> Dict[str, Resolver]:
    """
    Creates a pending output on `res` for every property in `props` and returns the resolvers for
    them, keyed by property name.
    """
    resolvers: Dict[str, Resolver] = {}

    for name in props:
        if name in ("urn", "id"):
            # these properties are handled specially elsewhere.
            continue

        resolve, output = deferred_output(res)
        resolvers[name] = resolve
        res.outputs[name] = output

    return resolvers


def resolve_outputs(
    serialized_props: struct_pb2.Struct,
    outputs: struct_pb2.Struct,
    deps: Mapping[str, Set["RegisteredResource"]],
    resolvers: Dict[str, Resolver],
    dry_run: bool,
):
    # Produce a combined set of property states, starting with inputs and then applying
    # outputs. If the same property exists in the inputs and outputs states, the output wins.
    all_properties: Dict[str, Any] = {}
    for key, value in deserialize_properties(outputs, keep_unknowns=dry_run).items():
        all_properties[key] = value

    if not dry_run:
        for key, value in list(serialized_props.items()):
            if key not in all_properties:
                # An input the engine didn't report a final value for; use what the caller passed.
                all_properties[key] = deserialize_property(value)

    resolve_properties(resolvers, all_properties, deps, dry_run)


def resolve_properties(
    resolvers: Dict[str, Resolver],
    all_properties: Dict[str, Any],
    deps: Mapping[str, Set["RegisteredResource"]],
    dry_run: bool,
):
    for key, value in all_properties.items():
        if key in ("urn", "id"):
            continue

        resolve = resolvers.get(key)
        if resolve is None:
            # The engine returned a property this resource does not expose.
            if settings.excessive_debug_output:
                log.debug(f"ignoring unexpected output property {key}")
            continue

        is_secret = is_rpc_secret(value)
        value = unwrap_rpc_secret(value)

        if not dry_run:
            resolve(value, True, is_secret, deps.get(key), None)
        else:
            # During a preview a missing or unknown value is not final.
            known = value is not None and not isinstance(value, Unknown)
            resolve(value, known, is_secret, deps.get(key), None)

    # Optional outputs may be absent altogether. Those resolve to None, known unless previewing.
    for key, resolve in resolvers.items():
        if key not in all_properties:
            resolve(None, not dry_run, False, deps.get(key), None)


def resolve_outputs_due_to_exception(resolvers: Dict[str, Resolver], exn: Exception):
    """
    Fails every output with the given exception.

    :param resolvers: Resolvers associated with a resource's outputs.
    :param exn: The exception that occurred when trying (and failing) to register this resource.
    """
    for key, resolve in resolvers.items():
        if settings.excessive_debug_output:
            log.debug(f"sending exception to resolver for {key}")
        resolve(None, False, False, None, exn)

