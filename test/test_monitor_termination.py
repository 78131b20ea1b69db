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
from typing import Any

import grpc
import pytest

from pulumi_sentry import Project, ProjectArgs, RunError, runtime

from .helpers import raises


# Verify that when the monitor becomes unavailable (via
# unavailable_mocks), programs fail with a `RunError` and do not hang.
@raises(RunError)
@pytest.mark.timeout(10)
@runtime.test
def test_resource_registration_does_not_hang_when_monitor_unavailable(
    unavailable_mocks,
):
    Project(
        "proj1",
        ProjectArgs(name="p1", organization_slug="org1", slug="p1-slug", team_slug="team1"),
    )


@raises(RunError)
@pytest.mark.timeout(10)
@runtime.test
def test_lookup_does_not_hang_when_monitor_unavailable(unavailable_mocks):
    Project.get("proj3", "org1/p1-slug")


class Unavailable(grpc.RpcError):
    def code(self):
        return grpc.StatusCode.UNAVAILABLE


class UnavailableMocks(runtime.Mocks):
    def new_resource(self, args: runtime.MockResourceArgs) -> Any:
        raise Unavailable()


@pytest.fixture
def unavailable_mocks():
    try:
        mocks = UnavailableMocks()
        runtime.set_mocks(mocks)
        yield mocks
    finally:
        runtime.configure(runtime.Settings("project", "stack"))
