# Copyright 2016-2022, Pulumi Corporation.
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
from enum import Enum
from functools import reduce
from inspect import isawaitable
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    Generic,
    List,
    Mapping,
    Optional,
    Set,
    TypeVar,
    Union,
    cast,
    overload,
)

from .runtime.sync_await import _ensure_event_loop

if TYPE_CHECKING:
    from .runtime.resource import RegisteredResource

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)
U = TypeVar("U")

Input = Union[T, Awaitable[T], "Deferred[T]"]
Inputs = Mapping[str, Input[Any]]


class Unknown:
    """
    Unknown represents a value that is unknown.
    """


UNKNOWN = Unknown()
"""
UNKNOWN is the singleton unknown value.
"""


class DeferredState(Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    FAILED = "failed"


class DeferredData(Generic[T]):
    """
    The resolved contents of a Deferred.
    """

    resources: Set["RegisteredResource"]
    """
    The resources that the value depends on.
    """
    value: Union[T, Unknown]
    """
    The concrete value if known; else UNKNOWN.

    During a preview a value may not be known yet. Chained functions are not run on unknown values;
    the result of the chain is simply unknown too.
    """
    secret: bool
    """
    Whether the value should be treated as secret data. Secrets are tagged when they cross to the
    resource monitor so that they are encrypted at rest.
    """

    def __init__(
        self,
        resources: Set["RegisteredResource"],
        value: Union[T, Unknown],
        secret: Optional[bool] = None,
    ) -> None:
        self.resources = resources
        self.value = value
        self.secret = False if secret is None else secret


class Deferred(Generic[T_co]):
    """
    Deferred is a value that becomes available at some point after it is created, typically once the
    engine finishes registering the resource that produces it. A Deferred remembers which resources
    its value came from, so that passing it as an input to another resource also records a
    dependency on those resources.

    A Deferred is pending until its data arrives, then either resolved or failed. A failure is carried
    to every Deferred derived from it through `apply`, `all`, and friends.
    """

    _data: "asyncio.Future[DeferredData[T_co]]"

    def __init__(self, data: Awaitable[DeferredData[T_co]]) -> None:
        self._data = asyncio.ensure_future(data, loop=_ensure_event_loop())

    @property
    def state(self) -> DeferredState:
        """
        Where this Deferred is in its lifecycle. Observing a failed state does not consume the failure;
        awaiting the value still raises it.
        """
        if not self._data.done():
            return DeferredState.PENDING
        if self._data.cancelled() or self._data.exception() is not None:
            return DeferredState.FAILED
        return DeferredState.RESOLVED

    async def resources(self) -> Set["RegisteredResource"]:
        data = await self._data
        return data.resources

    @overload
    async def future(self) -> Optional[T_co]: ...

    @overload
    async def future(self, with_unknowns: bool) -> Union[Optional[T_co], Unknown]: ...

    async def future(
        self, with_unknowns: Optional[bool] = None
    ) -> Union[Optional[T_co], Unknown]:
        data = await self._data
        if isinstance(data.value, Unknown):
            # Unknowns are reported as None unless the caller explicitly asks to see them.
            return UNKNOWN if with_unknowns else None
        return data.value

    async def is_known(self) -> bool:
        data = await self._data
        return not isinstance(data.value, Unknown)

    async def is_secret(self) -> bool:
        data = await self._data
        return data.secret

    def apply(self, func: Callable[[T_co], Input[U]]) -> "Deferred[U]":
        """
        Transforms the value of this Deferred with `func`. The result is another Deferred that keeps
        this one's resources and secretness.

        `func` may return a plain value, an awaitable, or another Deferred. It is not called when the
        value is unknown, nor when this Deferred failed; in the latter case the returned Deferred
        fails with the same exception.

        :param func: A function from this Deferred's value to an Input of some kind.
        :return: A Deferred of the transformed value.
        """

        async def run() -> DeferredData[U]:
            data = await self._data

            if isinstance(data.value, Unknown):
                return DeferredData(data.resources, UNKNOWN, data.secret)

            transformed = func(cast(T_co, data.value))

            if isinstance(transformed, Deferred):
                transformed_data = await transformed._data
                return DeferredData(
                    data.resources | transformed_data.resources,
                    cast(U, transformed_data.value),
                    data.secret or transformed_data.secret,
                )

            if isawaitable(transformed):
                transformed_value = cast(U, await transformed)
                return DeferredData(data.resources, transformed_value, data.secret)

            return DeferredData(data.resources, cast(U, transformed), data.secret)

        return Deferred(run())

    map = apply

    def __getattr__(self, item: str) -> "Deferred[Any]":  # type: ignore
        """
        Syntax sugar for retrieving attributes off of the eventual value.
        """
        if item.startswith("__"):
            raise AttributeError(item)
        return self.apply(lambda v: getattr(v, item))

    def __getitem__(self, key: Any) -> "Deferred[Any]":
        """
        Syntax sugar for indexing into the eventual value.
        """
        return self.apply(lambda v: v[key])

    def __iter__(self) -> Any:
        """
        Deferred values are not iterable, but since they implement __getitem__ we need to explicitly
        prevent iteration.
        """
        raise TypeError(
            "'Deferred' object is not iterable, consider iterating the underlying value inside an 'apply'"
        )

    @staticmethod
    def from_input(val: Input[T]) -> "Deferred[T]":
        """
        Takes an Input value and produces a Deferred from it, deeply unwrapping nested Input values
        through nested lists and dicts.

        :param Input[T] val: An Input to be converted to a Deferred.
        :return: A deeply-unwrapped Deferred that is guaranteed to not contain any Input values.
        """

        if isinstance(val, Deferred):
            return val.apply(Deferred.from_input)

        if val and isinstance(val, dict):
            # The keys themselves might be deferred, so we can't just pass `**val` to all.
            keys = list(val.keys())
            values = list(val.values())

            def lift_values(resolved_keys: List[Any]):
                return Deferred.all(
                    **{resolved_keys[i]: values[i] for i in range(len(resolved_keys))}
                )

            return cast("Deferred[T]", Deferred.all(*keys).apply(lift_values))

        if val and isinstance(val, list):
            return cast("Deferred[T]", Deferred.all(*val))

        if isawaitable(val):

            async def get_data(awaitable: Awaitable[T]) -> DeferredData[T]:
                inner: Deferred[T] = Deferred.from_input(await awaitable)
                return await inner._data

            return Deferred(get_data(cast(Awaitable[T], val)))

        return Deferred.resolved(cast(T, val))

    @staticmethod
    def resolved(
        value: T,
        resources: Optional[Set["RegisteredResource"]] = None,
        secret: bool = False,
    ) -> "Deferred[T]":
        """
        Returns an already resolved Deferred holding `value`.
        """
        fut: "asyncio.Future[DeferredData[T]]" = _ensure_event_loop().create_future()
        fut.set_result(DeferredData(resources or set(), value, secret))
        return Deferred(fut)

    @staticmethod
    def failed(exn: Exception) -> "Deferred[Any]":
        """
        Returns an already failed Deferred carrying `exn`.
        """
        fut: "asyncio.Future[DeferredData[Any]]" = _ensure_event_loop().create_future()
        fut.set_exception(exn)
        return Deferred(fut)

    @staticmethod
    def unsecret(val: "Deferred[T]") -> "Deferred[T]":
        """
        Returns a Deferred with the same value as `val` that is not marked secret.
        """

        async def get_data() -> DeferredData[T]:
            data = await val._data
            return DeferredData(data.resources, data.value, False)

        return Deferred(get_data())

    @staticmethod
    def secret(val: Input[T]) -> "Deferred[T]":
        """
        Takes an Input value and produces a Deferred from it that is marked secret, so its contents
        are persisted in an encrypted form in state files.
        """

        async def get_data() -> DeferredData[T]:
            data = await Deferred.from_input(val)._data
            return DeferredData(data.resources, data.value, True)

        return Deferred(get_data())

    @overload
    @staticmethod
    def all(*args: Input[T]) -> "Deferred[List[T]]": ...  # type: ignore

    @overload
    @staticmethod
    def all(**kwargs: Input[T]) -> "Deferred[Dict[str, T]]": ...

    @staticmethod
    def all(*args: Input[T], **kwargs: Input[T]):
        """
        Combines several Inputs into a single Deferred of a list (positional arguments) or a dict
        (keyword arguments). Resources and secretness of every input carry over. If any input fails
        the result fails.

        Examples::

            Deferred.all(foo, bar) -> Deferred[[foo, bar]]
            Deferred.all(foo=foo, bar=bar) -> Deferred[{"foo": foo, "bar": bar}]
        """

        async def gather(deferreds: List["Deferred[T]"]) -> List[DeferredData[T]]:
            return list(await asyncio.gather(*[d._data for d in deferreds]))

        def combine(data_list: List[DeferredData[T]], value_of) -> DeferredData:
            resources: Set["RegisteredResource"] = reduce(
                lambda acc, d: acc.union(d.resources), data_list, set()
            )
            secret = any(data.secret for data in data_list)
            known = all(not isinstance(data.value, Unknown) for data in data_list)
            return DeferredData(resources, value_of() if known else UNKNOWN, secret)

        async def gather_dict(deferreds: Dict[str, "Deferred[T]"]) -> DeferredData:
            data_list = await gather(list(deferreds.values()))
            return combine(
                data_list,
                lambda: {k: d.value for k, d in zip(deferreds.keys(), data_list)},
            )

        async def gather_list(deferreds: List["Deferred[T]"]) -> DeferredData:
            data_list = await gather(deferreds)
            return combine(data_list, lambda: [d.value for d in data_list])

        if args and kwargs:
            raise ValueError(
                "Deferred.all() was supplied a mix of named and unnamed inputs"
            )

        if kwargs:
            return Deferred(
                gather_dict({k: Deferred.from_input(v) for k, v in kwargs.items()})
            )
        return Deferred(gather_list([Deferred.from_input(x) for x in args]))

    @staticmethod
    def concat(*args: Input[str]) -> "Deferred[str]":
        """
        Concatenates a collection of Input[str] into a single Deferred[str].

            url = Deferred.concat("https://sentry.io/", project.organization_slug, "/", project.slug)
        """
        return Deferred.all(*args).apply("".join)  # type: ignore

    @staticmethod
    def format(
        format_string: Input[str], *args: Input[object], **kwargs: Input[object]
    ) -> "Deferred[str]":
        """
        Perform a string formatting operation with the same semantics as `str.format`, accepting
        Inputs for the format string and all of its arguments.
        """
        return Deferred.all(
            format_string, Deferred.all(*args), Deferred.all(**kwargs)
        ).apply(lambda parts: parts[0].format(*parts[1], **(parts[2] or {})))

    def __str__(self) -> str:
        return """Calling __str__ on a Deferred[T] is not supported.

To get the value of a Deferred[T] as a Deferred[str] consider:
1. d.apply(lambda v: f"prefix{v}suffix")
2. Deferred.format("prefix{0}suffix", d)"""


def contains_unknowns(val: Any) -> bool:
    def impl(val: Any, stack: List[Any]) -> bool:
        if isinstance(val, Unknown):
            return True

        if not any(x is val for x in stack):
            stack.append(val)
            if isinstance(val, dict):
                return any(impl(val[k], stack) for k in val)
            if isinstance(val, list):
                return any(impl(x, stack) for x in val)
        return False

    return impl(val, [])
