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
from typing import Optional

from .config import vars as config_vars
from .deferred import Deferred, Input
from .options import ResourceOptions
from .runtime.resource import RegisteredResource, ResourceRegistration, register_resource
from .runtime.settings import Settings


class ProviderArgs:
    """
    The set of arguments for constructing a Provider resource.
    """

    token: Optional[Input[str]]
    """
    The authentication token for Sentry. Defaults to the `sentry:token` config value.
    """

    api_url: Optional[Input[str]]
    """
    The target Sentry API base URL. Defaults to the `sentry:apiURL` config value.
    """

    def __init__(
        self,
        *,
        token: Optional[Input[str]] = None,
        api_url: Optional[Input[str]] = None,
    ) -> None:
        self.token = token
        self.api_url = api_url


class Provider:
    """
    An explicitly configured Sentry provider. Pass it as `ResourceOptions(provider=...)` to manage
    projects with credentials other than the default provider's.
    """

    TYPE = "pulumi:providers:sentry"

    _resource: RegisteredResource

    def __init__(
        self,
        resource_name: str,
        args: Optional[ProviderArgs] = None,
        opts: Optional[ResourceOptions] = None,
        token: Optional[Input[str]] = None,
        api_url: Optional[Input[str]] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        if opts is None:
            opts = ResourceOptions()
        if not isinstance(opts, ResourceOptions):
            raise TypeError("Expected resource options to be a ResourceOptions instance")
        if args is None:
            args = ProviderArgs(token=token, api_url=api_url)
        elif not isinstance(args, ProviderArgs):
            raise TypeError("Expected args to be a ProviderArgs instance")

        token = args.token if args.token is not None else config_vars.token()
        api_url = args.api_url if args.api_url is not None else config_vars.api_url()

        props = {
            "token": None if token is None else Deferred.secret(token),
            "apiURL": api_url,
        }
        self._resource = register_resource(
            ResourceRegistration(Provider.TYPE, resource_name, props, opts), settings
        )

    @property
    def urn(self) -> Deferred[str]:
        return self._resource.urn

    @property
    def id(self) -> Deferred[str]:
        return self._resource.id

    @property
    def api_url(self) -> Deferred[Optional[str]]:
        return self._resource.outputs["apiURL"]

    def __repr__(self) -> str:
        return f"Provider({self._resource.name!r})"
