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

import importlib.metadata

from packaging.version import Version
from semver import VersionInfo

_PRERELEASE_TAGS = {"a": "alpha", "b": "beta", "rc": "rc"}


def pep440_to_semver(pep440_version: str) -> str:
    """
    Converts a PEP 440 version string into the semver string the engine expects, e.g. `1.2.0a3`
    becomes `1.2.0-alpha.3` and `1.2.0.dev4` becomes `1.2.0-dev.4`. Post-releases, epochs and local
    labels have no semver counterpart and are carried as build metadata.

    :raises packaging.version.InvalidVersion: The string is not a valid PEP 440 version. This is a
            `ValueError`.
    """
    version = Version(pep440_version)

    release = list(version.release) + [0, 0]
    major, minor, patch = release[:3]

    prerelease = []
    if version.pre is not None:
        tag, number = version.pre
        prerelease += [_PRERELEASE_TAGS[tag], str(number)]
    if version.dev is not None:
        prerelease += ["dev", str(version.dev)]

    build = []
    if version.epoch:
        build += ["epoch", str(version.epoch)]
    if version.post is not None:
        build += ["post", str(version.post)]
    if version.local is not None:
        build.append(version.local)

    return str(
        VersionInfo(
            major=major,
            minor=minor,
            patch=patch,
            prerelease=".".join(prerelease) or None,
            build=".".join(build) or None,
        )
    )


def get_version() -> str:
    """
    Returns the installed version of this package as semver.
    """
    # __name__ is "<root package>._utilities"; the root package is the distribution we report on.
    root_package = __name__.split(".")[0]
    try:
        pep440_version = importlib.metadata.version(root_package)
    except importlib.metadata.PackageNotFoundError:
        # Running from a source checkout that was never installed.
        return "0.0.0"
    return pep440_to_semver(pep440_version)
