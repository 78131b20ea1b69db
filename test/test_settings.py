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
import grpc
import pytest
from semver import VersionInfo

from pulumi_sentry import RunError
from pulumi_sentry._utilities import get_version, pep440_to_semver
from pulumi_sentry.runtime import settings


class FailedCall(grpc.RpcError):
    def __init__(self, code, details):
        super().__init__()
        self._code = code
        self._details = details

    def code(self):
        return self._code

    def details(self):
        return self._details


@pytest.mark.parametrize(
    "pep440,semver",
    [
        ("1.2.3", "1.2.3"),
        ("1.2", "1.2.0"),
        ("1.2.0a3", "1.2.0-alpha.3"),
        ("1.2.0b1", "1.2.0-beta.1"),
        ("1.2.0rc2", "1.2.0-rc.2"),
        ("1.2.0.dev4", "1.2.0-dev.4"),
        ("1.2.0+local.7", "1.2.0+local.7"),
        ("1.2.0a3.dev1", "1.2.0-alpha.3.dev.1"),
        ("1.0.0.post1.dev2", "1.0.0-dev.2+post.1"),
        ("1!2.0", "2.0.0+epoch.1"),
    ],
)
def test_pep440_to_semver(pep440, semver):
    assert pep440_to_semver(pep440) == semver


def test_pep440_to_semver_rejects_garbage():
    with pytest.raises(ValueError):
        pep440_to_semver("not-a-version")


def test_get_version_is_semver():
    VersionInfo.parse(get_version())


def test_settings_default_version():
    s = settings.Settings("project", "stack")
    assert s.sdk_version == get_version()
    assert "sdk_version" in repr(s)


def test_settings_rejects_bad_version():
    with pytest.raises(ValueError):
        settings.Settings("project", "stack", sdk_version="v1")


def test_configure_is_scoped_to_settings_object():
    first = settings.Settings("first", "dev", sdk_version="1.0.0")
    second = settings.Settings("second", "prod", sdk_version="2.0.0", dry_run=True)
    try:
        settings.configure(first)
        assert settings.get_project() == "first"
        assert not settings.is_dry_run()

        settings.configure(second)
        assert settings.get_settings() is second
        assert settings.get_stack() == "prod"
        assert settings.is_dry_run()
        assert settings.get_monitor() is None
        assert settings.get_engine() is None
    finally:
        settings.configure(settings.Settings("project", "stack"))


def test_configure_rejects_non_settings():
    with pytest.raises(TypeError):
        settings.configure({"project": "p"})  # type: ignore


def test_unavailable_monitor_is_a_run_error():
    exn = settings.grpc_error_to_exception(FailedCall(grpc.StatusCode.UNAVAILABLE, "gone"))
    assert isinstance(exn, RunError)
    assert str(exn) == "Resource monitor has terminated, shutting down"


def test_other_grpc_errors_keep_details():
    with pytest.raises(Exception, match="project slug already taken"):
        settings.handle_grpc_error(
            FailedCall(grpc.StatusCode.INVALID_ARGUMENT, "project slug already taken")
        )
