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
import functools
import logging
from typing import List, Optional

import pytest

from pulumi_sentry import Project, Provider, parse_project_id, project_id, runtime
from pulumi_sentry.runtime import settings
from pulumi_sentry.runtime.mocks import MockMonitor, MockResourceArgs


def supress_unobserved_task_logging():
    """Suppresses logs about faulted unobserved tasks.

    Failed registrations fail every output of a resource, and tests usually
    observe only a few of them. The rest are reported by asyncio when they are
    collected, which happens after the test that caused them has finished.
    """
    logging.getLogger("asyncio").setLevel(logging.CRITICAL)


# If calling code imports this module to use `raises`, it probably needs this.
supress_unobserved_task_logging()


def raises(exception_type, match=None):
    """Decorates a test by wrapping its body in `pytest.raises`."""

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            with pytest.raises(exception_type, match=match):
                return fn(*args, **kwargs)

        return wrapper

    return decorator


def sentry_test(coro):
    """
    Runs an async test method as a program against fresh settings with no monitor attached.
    """
    wrapped = runtime.test(coro)

    @functools.wraps(coro)
    def wrapper(*args, **kwargs):
        settings.configure(settings.Settings("project", "stack", sdk_version="0.0.1"))
        wrapped(*args, **kwargs)

    return wrapper


DSN = "https://public@o1.ingest.sentry.io/42"


class SentryMocks(runtime.Mocks):
    """
    Answers like the Sentry provider would: a declared project echoes its inputs and gains a DSN and
    an `<org>/<slug>` ID; a looked-up project reports the (normalized) state of the ID it was read by.
    """

    calls: List[MockResourceArgs]
    monitor: Optional[MockMonitor]

    def __init__(self, fail_with: Optional[Exception] = None, resource_id: Optional[str] = None):
        self.fail_with = fail_with
        self.resource_id = resource_id
        self.calls = []
        self.monitor = None
        self.settings = None

    def install(self, **kwargs) -> settings.Settings:
        self.settings = runtime.set_mocks(self, **kwargs)
        self.monitor = self.settings.monitor
        return self.settings

    def new_resource(self, args: MockResourceArgs):
        self.calls.append(args)
        if self.fail_with is not None:
            raise self.fail_with

        if args.typ == Project.TYPE:
            if args.resource_id:
                org, slug = parse_project_id(args.resource_id)
                return args.resource_id, {
                    "name": "Existing",
                    "organizationSlug": org,
                    "slug": slug.lower().replace("_", "-"),
                    "teamSlug": "owners",
                    "defaultClientKeyDSNPublic": DSN,
                }
            state = dict(args.inputs)
            state["defaultClientKeyDSNPublic"] = DSN
            resource_id = self.resource_id
            if resource_id is None:
                # An unknown slug during a preview leaves the ID unknown too.
                resource_id = (
                    project_id(state["organizationSlug"], state["slug"]) if "slug" in state else ""
                )
            return resource_id, state

        if args.typ == Provider.TYPE:
            return "provider-id", dict(args.inputs)

        return f"{args.name}_id", dict(args.inputs)
