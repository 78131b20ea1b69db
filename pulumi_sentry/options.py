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
import copy
from typing import TYPE_CHECKING, Any, List, Optional, Sequence

from .deferred import Deferred

if TYPE_CHECKING:
    from .deferred import Input
    from .provider import Provider


class CustomTimeouts:
    create: Optional[str]
    """
    create is the optional create timout represented as a string e.g. 5m, 40s, 1d.
    """

    update: Optional[str]
    """
    update is the optional update timout represented as a string e.g. 5m, 40s, 1d.
    """

    delete: Optional[str]
    """
    delete is the optional delete timout represented as a string e.g. 5m, 40s, 1d.
    """

    def __init__(
        self,
        create: Optional[str] = None,
        update: Optional[str] = None,
        delete: Optional[str] = None,
    ) -> None:
        self.create = create
        self.update = update
        self.delete = delete


class ResourceOptions:
    """
    ResourceOptions is a bag of optional settings that control a resource's behavior.

    Anything that has a `urn` Deferred (a `Project`, a `Provider`, or a `RegisteredResource`) can be
    used where a resource is expected.
    """

    parent: Optional[Any]
    """
    If provided, the currently-constructing resource should be the child of the provided parent
    resource.
    """

    depends_on: Optional[Sequence[Any]]
    """
    If provided, declares that the currently-constructing resource depends on the given resources.
    """

    protect: Optional[bool]
    """
    If provided and True, this resource is not allowed to be deleted.
    """

    provider: Optional["Provider"]
    """
    An explicit Sentry provider to use for this resource's CRUD operations. If none is supplied,
    the engine uses the default provider configured from `sentry:*` config.
    """

    delete_before_replace: Optional[bool]
    """
    If provided and True, this resource must be deleted before it is replaced.
    """

    ignore_changes: Optional[List[str]]
    """
    If provided, ignore changes to any of the specified properties.
    """

    version: Optional[str]
    """
    An optional provider version. When unset, the version of the engine client's settings is used.
    """

    aliases: Optional[Sequence["Input[str]"]]
    """
    An optional list of URNs this resource was previously known by.
    """

    additional_secret_outputs: Optional[List[str]]
    """
    The names of outputs for this resource that should be treated as secrets.
    """

    id: Optional["Input[str]"]
    """
    An optional existing ID to load, rather than create.
    """

    import_: Optional[str]
    """
    When provided with a resource ID, import indicates that this resource's provider should import
    its state from the cloud resource with the given ID.
    """

    custom_timeouts: Optional[CustomTimeouts]
    """
    An optional customTimeouts config block.
    """

    replace_on_changes: Optional[List[str]]
    """
    Changes to any of these property paths will force a replacement.
    """

    retain_on_delete: Optional[bool]
    """
    If set to True, the provider's Delete method will not be called for this resource.
    """

    deleted_with: Optional[Any]
    """
    If set, the provider's Delete method will not be called for this resource if the specified
    resource is being deleted as well.
    """

    # pylint: disable=redefined-builtin
    def __init__(
        self,
        parent: Optional[Any] = None,
        depends_on: Optional[Sequence[Any]] = None,
        protect: Optional[bool] = None,
        provider: Optional["Provider"] = None,
        delete_before_replace: Optional[bool] = None,
        ignore_changes: Optional[List[str]] = None,
        version: Optional[str] = None,
        aliases: Optional[Sequence["Input[str]"]] = None,
        additional_secret_outputs: Optional[List[str]] = None,
        id: Optional["Input[str]"] = None,
        import_: Optional[str] = None,
        custom_timeouts: Optional[CustomTimeouts] = None,
        replace_on_changes: Optional[List[str]] = None,
        retain_on_delete: Optional[bool] = None,
        deleted_with: Optional[Any] = None,
    ) -> None:
        self.parent = parent
        self.depends_on = depends_on
        self.protect = protect
        self.provider = provider
        self.delete_before_replace = delete_before_replace
        self.ignore_changes = ignore_changes
        self.version = version
        self.aliases = aliases
        self.additional_secret_outputs = additional_secret_outputs
        self.id = id
        self.import_ = import_
        self.custom_timeouts = custom_timeouts
        self.replace_on_changes = replace_on_changes
        self.retain_on_delete = retain_on_delete
        self.deleted_with = deleted_with

        if depends_on is not None:
            for dep in self._depends_on_list():
                if isinstance(dep, Deferred) or not hasattr(dep, "urn"):
                    raise TypeError(
                        f"'depends_on' was passed a value {dep!r} that was not a resource."
                    )

    def _depends_on_list(self) -> List[Any]:
        if self.depends_on is None:
            return []
        if isinstance(self.depends_on, Sequence):
            return list(self.depends_on)
        return [self.depends_on]

    @staticmethod
    def merge(
        opts1: Optional["ResourceOptions"], opts2: Optional["ResourceOptions"]
    ) -> "ResourceOptions":
        """
        merge produces a new ResourceOptions object with the respective attributes of the `opts1`
        instance in it with the attributes of `opts2` merged over them.

        Both the `opts1` instance and the `opts2` instance will be unchanged. Both of `opts1` and
        `opts2` can be `None`, in which case its attributes are ignored.

        Conceptually attributes merging follows these basic rules:

        1. If the attributes is a collection, the final value will be a collection containing the
           values from each options object.

        2. Simple scalar values from `opts2` (i.e. strings, numbers, bools) will replace the values
           from `opts1`.

        3. For the purposes of merging `depends_on` is always treated as a collection, even if only
           a single value was provided.

        4. Attributes with value 'None' will not be copied over.
        """

        opts1 = ResourceOptions() if opts1 is None else opts1
        opts2 = ResourceOptions() if opts2 is None else opts2

        if not isinstance(opts1, ResourceOptions):
            raise TypeError("Expected opts1 to be a ResourceOptions instance")

        if not isinstance(opts2, ResourceOptions):
            raise TypeError("Expected opts2 to be a ResourceOptions instance")

        dest = copy.copy(opts1)
        source = opts2

        dest.depends_on = _merge_lists(
            opts1._depends_on_list() or None, source._depends_on_list() or None
        )
        dest.ignore_changes = _merge_lists(dest.ignore_changes, source.ignore_changes)
        dest.replace_on_changes = _merge_lists(
            dest.replace_on_changes, source.replace_on_changes
        )
        dest.aliases = _merge_lists(
            None if dest.aliases is None else list(dest.aliases),
            None if source.aliases is None else list(source.aliases),
        )
        dest.additional_secret_outputs = _merge_lists(
            dest.additional_secret_outputs, source.additional_secret_outputs
        )

        for attr in _SCALAR_ATTRIBUTES:
            value = getattr(source, attr)
            if value is not None:
                setattr(dest, attr, value)

        return dest


_SCALAR_ATTRIBUTES = (
    "parent",
    "protect",
    "provider",
    "delete_before_replace",
    "version",
    "id",
    "import_",
    "custom_timeouts",
    "retain_on_delete",
    "deleted_with",
)


def _merge_lists(dest, source):
    if dest is None:
        return source

    if source is None:
        return dest

    return dest + source
