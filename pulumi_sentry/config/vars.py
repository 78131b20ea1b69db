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

"""
The Sentry provider's own configuration, read by the default provider when it is configured.
"""
from typing import Optional

from . import Config

__config__ = Config("sentry")


def token() -> Optional[str]:
    """
    The authentication token for Sentry (`sentry:token`).
    """
    return __config__.get("token")


def api_url() -> Optional[str]:
    """
    The target Sentry API base URL (`sentry:apiURL`), e.g. `https://sentry.io/api/`.
    """
    return __config__.get("apiURL")
