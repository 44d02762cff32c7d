from __future__ import annotations

import itertools

import pytest
import requests
from kubernetes.client.exceptions import ApiException

from core.enums import JobStatus, ScenarioState
from cascade.config import SequencerConfig
from cascade.orchestrator import ScenarioOrchestrator
from cascade.webhook import WebhookNotifier

from tests.fakes import (
    FAILED,
    PENDING,
    RUNNING,
    SUCCEEDED,
    FakeBatchApi,
    FakeSession,
    make_stage,
)


CONFIG = SequencerConfig(
    namespace="jobs",
    scenario_name="demo",
    poll_interval=0.001,
    stage_timeout=0,
)


def _scenario():
    return [
        make_stage("ingest", {"s3path": "pkg.tgz"}),
        make_stage("transform"),
        make_stage("export"),
    ]


def _orchestrator(api, session=None, stages=None, config=CONFIG, **kwargs):
    notifier = WebhookNotifier("127.0.0.1:8000", session=session or FakeSession())
    stages = _scenario() if stages is None else stages
    return ScenarioOrchestrator(stages, api, notifier, config=config, **kwargs)


def _env(api: FakeBatchApi, name: str) -> dict[str, str]:
    container = api.created[name]["spec"]["template"]["spec"]["containers"][0]
    return {item["name"]: item["value"] for item in container["env"]}


def test_successful_scenario_runs_stages_in_order() -> None:
    api = FakeBatchApi(
        {
            "ingest": [PENDING, RUNNING, RUNNING, SUCCEEDED],
            "transform": [RUNNING, SUCCEEDED],
            "export": [SUCCEEDED],
        }
    )
    session = FakeSession()

    result = _orchestrator(api, session).run()

    assert result.state is ScenarioState.COMPLETED
    assert result.exit_code == 0
    assert result.completed_stages == ["ingest", "transform", "export"]
    assert result.final_path == "pkg-final.tgz"
    assert api.created_names() == ["ingest", "transform", "export"]

    # each job is created, polled to completion and deleted before the next one
    assert api.calls == [
        ("create", "ingest"),
        ("read", "ingest"),
        ("read", "ingest"),
        ("read", "ingest"),
        ("read", "ingest"),
        ("delete", "ingest"),
        ("create", "transform"),
        ("read", "transform"),
        ("read", "transform"),
        ("delete", "transform"),
        ("create", "export"),
        ("read", "export"),
        ("delete", "export"),
    ]
    assert api.deleted == [
        ("ingest", "jobs", "Background"),
        ("transform", "jobs", "Background"),
        ("export", "jobs", "Background"),
    ]
    assert session.messages() == [
        "Module ingest in scenario demo finished successfully",
        "Module transform in scenario demo finished successfully",
        "Module export in scenario demo finished successfully",
        "Scenario demo completed successfully. Package address - pkg-final.tgz",
    ]


def test_artifact_paths_flow_between_stages() -> None:
    api = FakeBatchApi()

    _orchestrator(api).run()

    assert _env(api, "ingest") == {"s3path": "pkg.tgz"}
    assert _env(api, "transform") == {"s3path": "pkg-stage-1.tgz"}
    assert _env(api, "export") == {"s3path": "pkg-stage-2.tgz", "finalstage": "true"}


def test_failed_stage_aborts_scenario() -> None:
    api = FakeBatchApi({"transform": [RUNNING, FAILED]})
    session = FakeSession()

    result = _orchestrator(api, session).run()

    assert result.state is ScenarioState.ABORTED
    assert result.exit_code == 1
    assert result.failed_stage == "transform"
    assert result.completed_stages == ["ingest"]
    assert result.final_path is None
    assert api.created_names() == ["ingest", "transform"]
    # the failed job is left in place for inspection
    assert [name for name, _, _ in api.deleted] == ["ingest"]
    assert session.messages() == [
        "Module ingest in scenario demo finished successfully",
        "Module transform in scenario demo failed",
    ]


def test_failure_on_first_stage_submits_nothing_else() -> None:
    api = FakeBatchApi({"ingest": [FAILED]})

    result = _orchestrator(api).run()

    assert result.exit_code == 1
    assert api.created_names() == ["ingest"]
    assert api.deleted == []


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(status_code=500),
        FakeSession(error=requests.exceptions.ConnectionError("refused")),
    ],
)
def test_webhook_failures_do_not_change_progression(session, log_messages) -> None:
    api = FakeBatchApi()

    result = _orchestrator(api, session).run()

    assert result.exit_code == 0
    assert api.created_names() == ["ingest", "transform", "export"]
    assert len(session.posts) == 4
    assert any(message.startswith("Webhook") for message in log_messages)


def test_webhook_failure_does_not_hide_stage_failure() -> None:
    api = FakeBatchApi({"export": [FAILED]})

    result = _orchestrator(api, FakeSession(status_code=404)).run()

    assert result.exit_code == 1
    assert result.failed_stage == "export"


def test_status_query_errors_are_retried(log_messages) -> None:
    api = FakeBatchApi(
        {"ingest": [ApiException(status=503, reason="Unavailable"), RUNNING, SUCCEEDED]}
    )

    result = _orchestrator(api, stages=[make_stage("ingest", {"s3path": "pkg.tgz"})]).run()

    assert result.exit_code == 0
    assert api.calls.count(("read", "ingest")) == 3
    assert any("Get job status failed" in message for message in log_messages)


def test_started_is_logged_once(log_messages) -> None:
    api = FakeBatchApi({"ingest": [PENDING, RUNNING, RUNNING, RUNNING, SUCCEEDED]})

    _orchestrator(api, stages=[make_stage("ingest")]).run()

    assert log_messages.count("Job ingest started") == 1


def test_delete_failure_is_not_fatal(log_messages) -> None:
    api = FakeBatchApi()
    api.delete_errors["ingest"] = ApiException(status=404, reason="Not Found")

    result = _orchestrator(api).run()

    assert result.exit_code == 0
    assert api.created_names() == ["ingest", "transform", "export"]
    assert any("Failed to delete successful job ingest" in m for m in log_messages)


def test_submission_failure_aborts_without_webhook() -> None:
    api = FakeBatchApi()
    api.create_errors["transform"] = ApiException(status=409, reason="AlreadyExists")
    session = FakeSession()

    result = _orchestrator(api, session).run()

    assert result.state is ScenarioState.ABORTED
    assert result.exit_code == 1
    assert result.failed_stage == "transform"
    assert "409" in result.reason
    assert api.created_names() == ["ingest", "transform"]
    assert ("read", "transform") not in api.calls
    assert session.messages() == ["Module ingest in scenario demo finished successfully"]


def test_stage_timeout_aborts_scenario() -> None:
    api = FakeBatchApi({"ingest": [RUNNING]})
    session = FakeSession()
    clock = itertools.count(step=10).__next__
    config = SequencerConfig(scenario_name="demo", poll_interval=0.001, stage_timeout=25)

    result = _orchestrator(api, session, config=config, clock=clock).run()

    assert result.exit_code == 1
    assert result.failed_stage == "ingest"
    assert api.created_names() == ["ingest"]
    assert api.deleted == []
    assert session.messages() == [
        "Module ingest in scenario demo failed: no result after 0:00:25"
    ]


def test_stage_timeout_waits_for_active_deadline() -> None:
    api = FakeBatchApi({"ingest": [RUNNING] * 30 + [SUCCEEDED]})
    session = FakeSession()
    clock = itertools.count(step=3600).__next__
    config = SequencerConfig(scenario_name="demo", poll_interval=0.001, stage_timeout=86400)
    stages = [make_stage("ingest", {"s3path": "pkg.tgz"}, activeDeadlineSeconds=172800)]

    result = _orchestrator(api, session, stages=stages, config=config, clock=clock).run()

    assert result.state is ScenarioState.COMPLETED
    assert result.exit_code == 0
    assert api.calls.count(("read", "ingest")) == 31
    assert session.messages()[0] == "Module ingest in scenario demo finished successfully"


def test_stage_timeout_adds_grace_after_active_deadline() -> None:
    api = FakeBatchApi({"ingest": [RUNNING]})
    session = FakeSession()
    clock = itertools.count(step=10).__next__
    config = SequencerConfig(
        scenario_name="demo", poll_interval=0.001, stage_timeout=25, deadline_grace=10
    )
    stages = [make_stage("ingest", {"s3path": "pkg.tgz"}, activeDeadlineSeconds=50)]

    result = _orchestrator(api, session, stages=stages, config=config, clock=clock).run()

    assert result.exit_code == 1
    assert result.failed_stage == "ingest"
    assert session.messages() == [
        "Module ingest in scenario demo failed: no result after 0:01:00"
    ]


def test_default_config_never_abandons_a_running_stage() -> None:
    api = FakeBatchApi({"ingest": [RUNNING] * 50 + [SUCCEEDED]})
    clock = itertools.count(step=86400).__next__
    config = SequencerConfig(scenario_name="demo", poll_interval=0.001)

    result = _orchestrator(
        api, stages=[make_stage("ingest", {"s3path": "pkg.tgz"})], config=config, clock=clock
    ).run()

    assert result.exit_code == 0
    assert result.final_path == "pkg-final.tgz"


class StoppingPoller:
    def __init__(self) -> None:
        self.orchestrator = None
        self.polls = 0

    def poll(self, job_name: str) -> JobStatus:
        self.polls += 1
        self.orchestrator.stop()
        return JobStatus.RUNNING


def test_stop_interrupts_polling_and_skips_remaining_stages() -> None:
    api = FakeBatchApi()
    session = FakeSession()
    poller = StoppingPoller()
    orchestrator = _orchestrator(api, session, poller=poller)
    poller.orchestrator = orchestrator

    result = orchestrator.run()

    assert result.state is ScenarioState.ABORTED
    assert result.exit_code == 1
    assert poller.polls == 1
    assert api.created_names() == ["ingest"]
    assert session.messages() == ["Scenario demo stopped during module ingest"]


def test_stop_before_run_submits_nothing() -> None:
    api = FakeBatchApi()
    orchestrator = _orchestrator(api)
    orchestrator.stop()

    result = orchestrator.run()

    assert result.exit_code == 1
    assert api.calls == []


def test_empty_scenario_is_rejected() -> None:
    with pytest.raises(ValueError):
        _orchestrator(FakeBatchApi(), stages=[])
