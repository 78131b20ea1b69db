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
from typing import Any, Dict, Optional, Tuple

from .deferred import Deferred, Input
from .errors import MissingRequiredPropertyError
from .options import ResourceOptions
from .runtime.resource import (
    RegisteredResource,
    ResourceRegistration,
    read_resource,
    register_resource,
)
from .runtime.settings import Settings

# Python attribute name to wire name, for every property a caller may supply.
_INPUT_NAMES: Tuple[Tuple[str, str], ...] = (
    ("name", "name"),
    ("organization_slug", "organizationSlug"),
    ("slug", "slug"),
    ("team_slug", "teamSlug"),
    ("default_environment", "defaultEnvironment"),
    ("subject_prefix", "subjectPrefix"),
    ("subject_template", "subjectTemplate"),
)

# Checked in this order; the first one missing is reported.
_REQUIRED = ("name", "organizationSlug", "slug", "teamSlug")

_OUTPUT_ONLY = ("defaultClientKeyDSNPublic",)


class ProjectArgs:
    """
    The set of arguments for constructing a Project resource.
    """

    name: Optional[Input[str]]
    """
    The human-readable name of the project.
    """

    organization_slug: Optional[Input[str]]
    """
    The slug of the organization the project belongs to.
    """

    slug: Optional[Input[str]]
    """
    The unique URL slug for the project. Sentry may normalize it.
    """

    team_slug: Optional[Input[str]]
    """
    The slug of the team that owns the project.
    """

    default_environment: Optional[Input[str]]
    subject_prefix: Optional[Input[str]]
    subject_template: Optional[Input[str]]

    def __init__(
        self,
        *,
        name: Optional[Input[str]] = None,
        organization_slug: Optional[Input[str]] = None,
        slug: Optional[Input[str]] = None,
        team_slug: Optional[Input[str]] = None,
        default_environment: Optional[Input[str]] = None,
        subject_prefix: Optional[Input[str]] = None,
        subject_template: Optional[Input[str]] = None,
    ) -> None:
        self.name = name
        self.organization_slug = organization_slug
        self.slug = slug
        self.team_slug = team_slug
        self.default_environment = default_environment
        self.subject_prefix = subject_prefix
        self.subject_template = subject_template


class Project:
    """
    A Sentry project.

    Declaring a Project validates its required arguments right away and then registers the desired
    state with the engine. Every property is a `Deferred` that resolves once the engine answers. Use
    `Project.get` to manage a project that already exists instead.

    ## Example Usage

        project = Project("web",
            name="Web",
            organization_slug="acme",
            slug="web",
            team_slug="frontend")
    """

    TYPE = "sentry:index:Project"

    _resource: RegisteredResource

    def __init__(
        self,
        resource_name: str,
        args: Optional[ProjectArgs] = None,
        opts: Optional[ResourceOptions] = None,
        *,
        name: Optional[Input[str]] = None,
        organization_slug: Optional[Input[str]] = None,
        slug: Optional[Input[str]] = None,
        team_slug: Optional[Input[str]] = None,
        default_environment: Optional[Input[str]] = None,
        subject_prefix: Optional[Input[str]] = None,
        subject_template: Optional[Input[str]] = None,
        settings: Optional[Settings] = None,
        __props__: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Create a Project resource with the given unique name, arguments, and options.

        The arguments may be given either as a `ProjectArgs` or as keyword arguments, not both.

        :param str resource_name: The name of the resource.
        :param ProjectArgs args: The arguments to use to populate this resource's properties.
        :param ResourceOptions opts: Options for the resource. When `opts.id` is set the project is
               looked up rather than declared. No arguments are required, and any
               that are given are sent as lookup filters.
        :param Settings settings: The engine client to register with. Defaults to the current one.
        :raises MissingRequiredPropertyError: A required argument is missing. Nothing is registered.
        """
        if opts is None:
            opts = ResourceOptions()
        if not isinstance(opts, ResourceOptions):
            raise TypeError("Expected resource options to be a ResourceOptions instance")

        kwargs = {
            "name": name,
            "organization_slug": organization_slug,
            "slug": slug,
            "team_slug": team_slug,
            "default_environment": default_environment,
            "subject_prefix": subject_prefix,
            "subject_template": subject_template,
        }
        if args is None:
            args = ProjectArgs(**kwargs)
        elif not isinstance(args, ProjectArgs):
            raise TypeError("Expected args to be a ProjectArgs instance")
        elif any(v is not None for v in kwargs.values()):
            raise TypeError("Project arguments must be passed either as args or as keywords")

        props: Dict[str, Any] = {}
        if opts.id is None:
            for py_name, wire_name in _INPUT_NAMES:
                props[wire_name] = getattr(args, py_name)
            for wire_name in _REQUIRED:
                if props[wire_name] is None:
                    raise MissingRequiredPropertyError(wire_name)
        else:
            # A lookup sends only the state filters it was given; the rest comes from the read.
            if __props__ is None:
                __props__ = {wire: getattr(args, py) for py, wire in _INPUT_NAMES}
            for _, wire_name in _INPUT_NAMES:
                props[wire_name] = __props__.get(wire_name)
        for wire_name in _OUTPUT_ONLY:
            props[wire_name] = None

        registration = ResourceRegistration(Project.TYPE, resource_name, props, opts)
        if opts.id is None:
            self._resource = register_resource(registration, settings)
        else:
            self._resource = read_resource(registration, settings)

    @staticmethod
    def get(
        resource_name: str,
        id: Input[str],
        opts: Optional[ResourceOptions] = None,
        name: Optional[Input[str]] = None,
        organization_slug: Optional[Input[str]] = None,
        slug: Optional[Input[str]] = None,
        team_slug: Optional[Input[str]] = None,
        default_environment: Optional[Input[str]] = None,
        subject_prefix: Optional[Input[str]] = None,
        subject_template: Optional[Input[str]] = None,
        settings: Optional[Settings] = None,
    ) -> "Project":
        """
        Get an existing Project resource's state with the given name, id, and optional extra
        properties used to qualify the lookup.

        :param str resource_name: The unique name of the resulting resource.
        :param Input[str] id: The unique provider ID of the resource to lookup, `<org>/<slug>`.
        :param ResourceOptions opts: Options for the resource.
        """
        # pylint: disable=redefined-builtin
        opts = ResourceOptions.merge(opts, ResourceOptions(id=id))

        state = {
            "name": name,
            "organizationSlug": organization_slug,
            "slug": slug,
            "teamSlug": team_slug,
            "defaultEnvironment": default_environment,
            "subjectPrefix": subject_prefix,
            "subjectTemplate": subject_template,
        }
        return Project(resource_name, opts=opts, settings=settings, __props__=state)

    @staticmethod
    def is_instance(obj: Any) -> bool:
        """
        Returns true if the given object is a Project, even one from another copy of this package.
        """
        return getattr(type(obj), "TYPE", None) == Project.TYPE

    @property
    def resource(self) -> RegisteredResource:
        return self._resource

    @property
    def urn(self) -> Deferred[str]:
        return self._resource.urn

    @property
    def id(self) -> Deferred[str]:
        """
        The provider ID of the project, `<organizationSlug>/<slug>`.
        """
        return self._resource.id

    @property
    def name(self) -> Deferred[str]:
        return self._resource.outputs["name"]

    @property
    def organization_slug(self) -> Deferred[str]:
        return self._resource.outputs["organizationSlug"]

    @property
    def slug(self) -> Deferred[Optional[str]]:
        """
        The project's slug as reported by Sentry. It may be absent after a read.
        """
        return self._resource.outputs["slug"]

    @property
    def team_slug(self) -> Deferred[str]:
        return self._resource.outputs["teamSlug"]

    @property
    def default_environment(self) -> Deferred[Optional[str]]:
        return self._resource.outputs["defaultEnvironment"]

    @property
    def subject_prefix(self) -> Deferred[Optional[str]]:
        return self._resource.outputs["subjectPrefix"]

    @property
    def subject_template(self) -> Deferred[Optional[str]]:
        return self._resource.outputs["subjectTemplate"]

    @property
    def default_client_key_dsn_public(self) -> Deferred[Optional[str]]:
        """
        The public DSN of the project's default client key. Set by Sentry; never an input.
        """
        return self._resource.outputs["defaultClientKeyDSNPublic"]

    def __repr__(self) -> str:
        return f"Project({self._resource.name!r})"


def project_id(organization_slug: str, slug: str) -> str:
    """
    Builds the provider ID of a project, `<organization_slug>/<slug>`.
    """
    return f"{organization_slug}/{slug}"


def parse_project_id(id_: str) -> Tuple[str, str]:
    """
    Splits a project's provider ID into its organization slug and project slug.

    :raises ValueError: The ID does not have exactly two `/`-separated parts.
    """
    parts = id_.split("/")
    if len(parts) != 2:
        raise ValueError(f"invalid ID: {id_}")
    return parts[0], parts[1]
