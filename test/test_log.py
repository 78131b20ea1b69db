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
import logging
from typing import List

import pytest

from pulumi_sentry import Project, ProjectArgs, log, runtime
from pulumi_sentry.runtime import settings
from pulumi_sentry.runtime.monitor import LogRequest, LogSeverity

from .helpers import SentryMocks


class RecordingEngine:
    requests: List[LogRequest]

    def __init__(self):
        self.requests = []

    def Log(self, request: LogRequest) -> None:
        self.requests.append(request)


@pytest.fixture
def engine():
    engine = RecordingEngine()
    settings.configure(
        settings.Settings("project", "stack", engine=engine, sdk_version="1.0.0")
    )
    try:
        yield engine
    finally:
        settings.configure(settings.Settings("project", "stack"))


def test_severities(engine):
    log.debug("d")
    log.info("i", stream_id=7)
    log.warn("w", ephemeral=True)
    log.error("e")

    assert [(r.severity, r.message) for r in engine.requests] == [
        (LogSeverity.DEBUG, "d"),
        (LogSeverity.INFO, "i"),
        (LogSeverity.WARNING, "w"),
        (LogSeverity.ERROR, "e"),
    ]
    assert engine.requests[1].streamId == 7
    assert engine.requests[2].ephemeral
    assert all(r.urn == "" for r in engine.requests)


@runtime.test
async def test_message_waits_for_resource_urn(sentry_mocks):
    recording = RecordingEngine()
    sentry_mocks.settings.engine = recording

    proj = Project(
        "proj1",
        ProjectArgs(name="p1", organization_slug="org1", slug="p1-slug", team_slug="team1"),
    )
    log.info("created", resource=proj)

    urn = await proj.urn.future()
    await runtime.wait_for_rpcs()
    (created,) = [r for r in recording.requests if r.message == "created"]
    assert created.urn == urn


def test_without_engine_goes_to_stderr(capsys):
    settings.configure(settings.Settings("project", "stack", sdk_version="1.0.0"))
    log.warn("careful")
    log.error("broken")

    err = capsys.readouterr().err
    assert "warning: careful" in err
    assert "error: broken" in err


def test_mock_engine_uses_logger(caplog):
    logger = logging.getLogger("sentry-mocks")
    SentryMocks().install(logger=logger)
    try:
        with caplog.at_level(logging.DEBUG, logger="sentry-mocks"):
            log.info("to the logger")
            log.error("also to the logger")
    finally:
        settings.configure(settings.Settings("project", "stack"))

    messages = [(r.levelno, r.getMessage()) for r in caplog.records if r.name == "sentry-mocks"]
    assert (logging.INFO, "to the logger") in messages
    assert (logging.ERROR, "also to the logger") in messages
