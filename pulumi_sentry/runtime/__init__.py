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
The runtime implementation of the Sentry SDK: engine settings, registration, and test doubles.
"""

from .settings import (
    Settings,
    configure,
    get_settings,
    is_dry_run,
    get_project,
    get_stack,
)

from .config import (
    set_config,
    set_all_config,
    get_config,
    get_config_env,
    get_config_env_key,
    get_config_secret_keys_env,
    is_config_secret,
    load_stack_config,
)

from .resource import (
    ResourceRegistration,
    RegisteredResource,
    register_resource,
    read_resource,
    create_urn,
)

from .mocks import (
    Mocks,
    MockResourceArgs,
    set_mocks,
    test,
)

from .stack import (
    run_program,
    wait_for_rpcs,
)
