import json

import pytest
import respx
from httpx import Response

from codefresh_sync.client import CodefreshClient, CodefreshHTTPError
from codefresh_sync.models import SpecTemplate, Trigger
from codefresh_sync.resources.pipeline import (
    DEFAULT_BRANCH_REGEX,
    PipelineResource,
    pipeline_from_api,
    pipeline_to_api,
)

BASE = "https://cf.test/api"


def _tree(**spec):
    return {"name": "demo/build", "project_id": "p1", "tags": ["ci"], "spec": spec}


@pytest.fixture
def resource():
    with CodefreshClient(BASE, "tok") as client:
        yield PipelineResource(client)


def test_trigger_defaults_when_not_declared():
    pipeline = pipeline_to_api(_tree(trigger=[{"name": "push"}]))
    trigger = pipeline.spec.triggers[0]

    assert trigger.type == "git"
    assert trigger.branch_regex == DEFAULT_BRANCH_REGEX == "/.*/gi"
    assert trigger.provider == "github"
    assert trigger.context == "github"
    assert trigger.modified_files_glob == ""
    assert trigger.disabled is False


def test_trigger_defaults_survive_the_round_trip():
    state = pipeline_from_api(pipeline_to_api(_tree(trigger=[{"name": "push"}])))
    trigger = state["spec"]["trigger"][0]

    assert trigger["type"] == "git"
    assert trigger["branch_regex"] == "/.*/gi"


def test_null_fields_take_defaults():
    pipeline = pipeline_to_api(_tree(trigger=[{"name": "push", "type": None}]))
    assert pipeline.spec.triggers[0].type == "git"


def test_each_trigger_is_read_independently():
    pipeline = pipeline_to_api(
        _tree(
            trigger=[
                {"name": "push", "branch_regex": "/main/"},
                {"name": "pr", "type": "cron", "events": ["pullrequest.opened"]},
            ]
        )
    )
    first, second = pipeline.spec.triggers

    assert (first.type, first.branch_regex) == ("git", "/main/")
    assert (second.type, second.branch_regex) == ("cron", "/.*/gi")
    assert second.events == ["pullrequest.opened"]


def test_spec_template_defaults_and_wire_shape():
    pipeline = pipeline_to_api(
        _tree(
            spec_template={"repo": "org/repo", "path": "./codefresh.yml", "revision": "main"},
            variables={"ENV": "prod"},
            priority=5,
        )
    )
    body = pipeline.model_dump(by_alias=True, exclude_none=True)

    assert body["metadata"]["projectId"] == "p1"
    assert body["metadata"]["labels"] == {"tags": ["ci"]}
    assert body["spec"]["specTemplate"]["location"] == "git"
    assert body["spec"]["specTemplate"]["context"] == "github"
    assert body["spec"]["variables"] == [{"key": "ENV", "value": "prod"}]
    assert body["spec"]["priority"] == 5


def test_full_round_trip():
    tree = {
        "id": "abc",
        "name": "demo/build",
        "project_id": "p1",
        "tags": ["ci"],
        "spec": {
            "priority": 1,
            "concurrency": 2,
            "variables": {"ENV": "prod"},
            "spec_template": {
                "location": "git",
                "repo": "org/repo",
                "path": "./codefresh.yml",
                "revision": "main",
                "context": "github",
            },
            "trigger": [
                {
                    "name": "push",
                    "description": "on push",
                    "type": "git",
                    "repo": "org/repo",
                    "branch_regex": "/main/",
                    "modified_files_glob": "src/**",
                    "events": ["push.heads"],
                    "provider": "github",
                    "disabled": True,
                    "context": "gh-ctx",
                    "variables": {"X": "1"},
                }
            ],
        },
    }

    assert pipeline_from_api(pipeline_to_api(tree)) == tree


def test_empty_template_is_not_reported():
    pipeline = pipeline_to_api(_tree())
    pipeline.spec.spec_template = SpecTemplate()

    state = pipeline_from_api(pipeline)

    assert "spec_template" not in state["spec"]
    assert state["spec"]["trigger"] == []


def test_from_api_converts_trigger_variables():
    pipeline = pipeline_to_api(_tree())
    pipeline.spec.triggers = [Trigger(name="t", variables=[{"key": "K", "value": "V"}])]

    state = pipeline_from_api(pipeline)

    assert state["spec"]["trigger"][0]["variables"] == {"K": "V"}


@respx.mock
def test_create_then_update_by_id(resource):
    returned = {
        "metadata": {"id": "abc", "name": "demo/build", "projectId": "p1"},
        "spec": {"triggers": [{"name": "push", "type": "git"}]},
    }
    respx.post(f"{BASE}/pipelines").mock(return_value=Response(200, json=returned))
    put = respx.put(f"{BASE}/pipelines/abc").mock(
        return_value=Response(200, json=returned)
    )

    state = resource.create(_tree(trigger=[{"name": "push"}]))
    assert state["id"] == "abc"

    resource.update(state, _tree(trigger=[{"name": "push", "disabled": True}]))

    sent = json.loads(put.calls[0].request.content)
    assert sent["metadata"]["id"] == "abc"
    assert sent["spec"]["triggers"][0]["disabled"] is True


@respx.mock
def test_read_propagates_http_error(resource):
    respx.get(f"{BASE}/pipelines/abc").mock(
        return_value=Response(404, json={"message": "not found"})
    )

    with pytest.raises(CodefreshHTTPError):
        resource.read({"id": "abc"})
