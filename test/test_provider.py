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
import pytest

from pulumi_sentry import Deferred, Project, ProjectArgs, Provider, ResourceOptions, runtime
from pulumi_sentry.runtime.config import set_all_config
from pulumi_sentry.runtime.rpc import _special_secret_sig, _special_sig_key


@pytest.fixture
def sentry_config():
    set_all_config({"sentry:token": "config-token", "sentry:apiURL": "https://sentry.example.com/api/"})
    try:
        yield
    finally:
        set_all_config({}, [])


@runtime.test
async def test_provider_reference(sentry_mocks):
    provider = Provider("acme", token="t0ken")
    proj = Project(
        "proj1",
        ProjectArgs(name="p1", organization_slug="org1", slug="p1-slug", team_slug="team1"),
        ResourceOptions(provider=provider),
    )
    await proj.urn.future()

    provider_urn = await provider.urn.future()
    assert provider_urn == "urn:pulumi:stack::project::pulumi:providers:sentry::acme"
    assert await provider.id.future() == "provider-id"

    project_request = sentry_mocks.monitor.requests[-1]
    assert project_request.provider == f"{provider_urn}::provider-id"


@runtime.test
async def test_token_is_sent_as_secret(sentry_mocks):
    Provider("acme", token="t0ken", api_url="https://sentry.example.com/api/")
    await runtime.wait_for_rpcs()

    (args,) = sentry_mocks.calls
    assert args.typ == "pulumi:providers:sentry"
    assert args.inputs["token"] == {_special_sig_key: _special_secret_sig, "value": "t0ken"}
    assert args.inputs["apiURL"] == "https://sentry.example.com/api/"


@runtime.test
async def test_provider_defaults_from_config(sentry_mocks, sentry_config):
    provider = Provider("default")
    await runtime.wait_for_rpcs()

    (args,) = sentry_mocks.calls
    assert args.inputs["token"]["value"] == "config-token"
    assert await provider.api_url.future() == "https://sentry.example.com/api/"


@runtime.test
async def test_provider_without_config(sentry_mocks):
    Provider("bare", api_url=Deferred.resolved("https://sentry.io/api/"))
    await runtime.wait_for_rpcs()

    (args,) = sentry_mocks.calls
    assert "token" not in args.inputs
    assert args.inputs["apiURL"] == "https://sentry.io/api/"


def test_provider_rejects_bad_options(sentry_mocks):
    with pytest.raises(TypeError):
        Provider("bad", opts="not options")  # type: ignore
