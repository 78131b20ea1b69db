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
import json

import pytest

from pulumi_sentry import Config
from pulumi_sentry.runtime import settings
from pulumi_sentry.runtime.config import set_all_config

from .helpers import SentryMocks


@pytest.fixture
def config_settings():
    stack_name = "test-config"
    return {
        f"{stack_name}:string": "bar",
        f"{stack_name}:int": "1",
        f"{stack_name}:bool": "False",
        f"{stack_name}:object": json.dumps({"banana": "sundae"}),
        f"{stack_name}:float": "3.14159",
    }


@pytest.fixture
def mock_config(config_settings):
    set_all_config(config_settings)
    try:
        yield Config("test-config")
    finally:
        set_all_config({}, [])


@pytest.fixture
def sentry_mocks():
    """
    Installs SentryMocks for the duration of a test and yields them; the monitor they were installed
    with is available as `sentry_mocks.monitor`.
    """
    mocks = SentryMocks()
    try:
        mocks.install(sdk_version="1.2.3")
        yield mocks
    finally:
        settings.configure(settings.Settings("project", "stack"))
