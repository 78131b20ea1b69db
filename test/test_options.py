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
import unittest

from pulumi_sentry import CustomTimeouts, Deferred, ResourceOptions
from pulumi_sentry.runtime.resource import RegisteredResource, ResourceRegistration


def fake_resource(name: str) -> RegisteredResource:
    res = RegisteredResource(ResourceRegistration("test:index:Thing", name, {}))
    res.urn = Deferred.resolved(f"urn:pulumi:stack::project::test:index:Thing::{name}")
    return res


class ResourceOptionsMergeTests(unittest.TestCase):
    def test_merge_none(self):
        merged = ResourceOptions.merge(None, None)
        self.assertIsInstance(merged, ResourceOptions)
        self.assertIsNone(merged.version)

    def test_scalars_override(self):
        timeouts = CustomTimeouts(create="1m")
        opts1 = ResourceOptions(protect=True, version="1.0.0", id="org/a")
        opts2 = ResourceOptions(version="2.0.0", custom_timeouts=timeouts)

        merged = ResourceOptions.merge(opts1, opts2)

        self.assertTrue(merged.protect)
        self.assertEqual(merged.version, "2.0.0")
        self.assertEqual(merged.id, "org/a")
        self.assertIs(merged.custom_timeouts, timeouts)

    def test_lists_concatenate(self):
        opts1 = ResourceOptions(ignore_changes=["name"], additional_secret_outputs=["dsn"])
        opts2 = ResourceOptions(
            ignore_changes=["slug"], replace_on_changes=["teamSlug"], aliases=["urn:old"]
        )

        merged = ResourceOptions.merge(opts1, opts2)

        self.assertEqual(merged.ignore_changes, ["name", "slug"])
        self.assertEqual(merged.replace_on_changes, ["teamSlug"])
        self.assertEqual(merged.additional_secret_outputs, ["dsn"])
        self.assertEqual(merged.aliases, ["urn:old"])

    def test_depends_on_is_a_collection(self):
        a, b = fake_resource("a"), fake_resource("b")

        merged = ResourceOptions.merge(ResourceOptions(depends_on=a), ResourceOptions(depends_on=[b]))

        self.assertEqual(merged.depends_on, [a, b])

    def test_inputs_are_unchanged(self):
        opts1 = ResourceOptions(ignore_changes=["name"])
        opts2 = ResourceOptions(ignore_changes=["slug"], protect=True)

        ResourceOptions.merge(opts1, opts2)

        self.assertEqual(opts1.ignore_changes, ["name"])
        self.assertIsNone(opts1.protect)
        self.assertEqual(opts2.ignore_changes, ["slug"])

    def test_merge_rejects_other_types(self):
        with self.assertRaises(TypeError):
            ResourceOptions.merge({"protect": True}, None)  # type: ignore


class ResourceOptionsValidationTests(unittest.TestCase):
    def test_depends_on_must_be_resources(self):
        with self.assertRaises(TypeError):
            ResourceOptions(depends_on=["urn:not-a-resource"])

    def test_depends_on_rejects_deferred(self):
        with self.assertRaises(TypeError):
            ResourceOptions(depends_on=[Deferred.resolved("x")])
