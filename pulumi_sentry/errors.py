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


class RunError(Exception):
    """
    Can be used for terminating a program abruptly, but resulting in a clean exit rather than the usual
    verbose unhandled error logic which emits the source program text and complete stack trace.
    """


class InputPropertyError(Exception):
    def __init__(self, property_path: str, reason: str):
        """
        Can be used to indicate that the client has made a request with a bad input property.
        """
        super().__init__(f"{property_path}: {reason}")
        self.property_path = property_path
        self.reason = reason


class MissingRequiredPropertyError(TypeError):
    """
    Raised synchronously by a resource constructor when a required argument is absent. Nothing is
    registered with the engine when this is raised.
    """

    property_name: str
    """
    The wire name of the missing property, e.g. `organizationSlug`.
    """

    def __init__(self, property_name: str):
        super().__init__(f"Missing required property '{property_name}'")
        self.property_name = property_name


class ResourceRegistrationError(RunError):
    """
    Wraps a failure that happened while preparing a resource's registration request.
    """

    def __init__(self, name: str, type_: str, cause: Exception):
        super().__init__(
            f"While processing resource: {name!r}, type: {type_!r}\n"
            + f"{type(cause).__name__} has risen: {cause}"
        )
        self.name = name
        self.type_ = type_
