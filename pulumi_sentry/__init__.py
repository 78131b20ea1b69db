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
A Python SDK for managing Sentry projects as infrastructure-as-code resources.
"""

# Make all module members inside of this package available as package members.
from .errors import (
    RunError,
    InputPropertyError,
    MissingRequiredPropertyError,
    ResourceRegistrationError,
)

from . import log

from .deferred import (
    Deferred,
    DeferredState,
    Input,
    Inputs,
    UNKNOWN,
    contains_unknowns,
)

from .options import (
    CustomTimeouts,
    ResourceOptions,
)

from .config import (
    Config,
    ConfigMissingError,
    ConfigTypeError,
)

from .project import (
    Project,
    ProjectArgs,
    parse_project_id,
    project_id,
)

from .provider import (
    Provider,
    ProviderArgs,
)

from . import config, runtime
