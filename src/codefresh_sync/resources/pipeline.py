"""Pipeline mapping: declarative spec, spec template and triggers."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from codefresh_sync.api import pipelines as api
from codefresh_sync.models import (
    Labels,
    Pipeline,
    PipelineMetadata,
    PipelineSpec,
    SpecTemplate,
    Trigger,
)
from codefresh_sync.resources._tree import variables_to_list, variables_to_map
from codefresh_sync.resources.base import ConfigModel, Resource

DEFAULT_TRIGGER_TYPE = "git"
DEFAULT_BRANCH_REGEX = "/.*/gi"
DEFAULT_GIT_PROVIDER = "github"
DEFAULT_GIT_CONTEXT = "github"
DEFAULT_TEMPLATE_LOCATION = "git"


class SpecTemplateConfig(ConfigModel):
    location: str = DEFAULT_TEMPLATE_LOCATION
    repo: str
    path: str
    revision: str
    context: str = DEFAULT_GIT_CONTEXT


class TriggerConfig(ConfigModel):
    name: str = ""
    description: str = ""
    type: str = DEFAULT_TRIGGER_TYPE
    repo: str = ""
    branch_regex: str = DEFAULT_BRANCH_REGEX
    modified_files_glob: str = ""
    events: List[str] = Field(default_factory=list)
    provider: str = DEFAULT_GIT_PROVIDER
    disabled: bool = False
    context: str = DEFAULT_GIT_CONTEXT
    variables: Dict[str, str] = Field(default_factory=dict)


class PipelineSpecConfig(ConfigModel):
    priority: int = 0
    concurrency: int = 0  # 0 is unlimited
    spec_template: Optional[SpecTemplateConfig] = None
    variables: Dict[str, str] = Field(default_factory=dict)
    trigger: List[TriggerConfig] = Field(default_factory=list)


class PipelineConfig(ConfigModel):
    id: Optional[str] = None
    name: str
    project_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    spec: PipelineSpecConfig


def _trigger_to_api(cfg: TriggerConfig) -> Trigger:
    return Trigger(
        name=cfg.name,
        description=cfg.description,
        type=cfg.type,
        repo=cfg.repo,
        branch_regex=cfg.branch_regex,
        modified_files_glob=cfg.modified_files_glob,
        events=list(cfg.events),
        provider=cfg.provider,
        disabled=cfg.disabled,
        context=cfg.context,
        variables=variables_to_list(cfg.variables),
    )


def pipeline_to_api(tree: Dict[str, Any]) -> Pipeline:
    cfg = PipelineConfig.model_validate(tree)
    spec = cfg.spec

    template = None
    if spec.spec_template is not None:
        template = SpecTemplate(**spec.spec_template.model_dump())

    return Pipeline(
        metadata=PipelineMetadata(
            id=cfg.id,
            name=cfg.name,
            project_id=cfg.project_id,
            labels=Labels(tags=list(cfg.tags)),
        ),
        spec=PipelineSpec(
            triggers=[_trigger_to_api(t) for t in spec.trigger],
            variables=variables_to_list(spec.variables),
            spec_template=template,
            priority=spec.priority,
            concurrency=spec.concurrency,
        ),
    )


def _trigger_from_api(trigger: Trigger) -> Dict[str, Any]:
    return {
        "name": trigger.name,
        "description": trigger.description,
        "type": trigger.type,
        "repo": trigger.repo,
        "branch_regex": trigger.branch_regex,
        "modified_files_glob": trigger.modified_files_glob,
        "events": list(trigger.events),
        "provider": trigger.provider,
        "disabled": trigger.disabled,
        "context": trigger.context,
        "variables": variables_to_map(trigger.variables),
    }


def pipeline_from_api(pipeline: Pipeline) -> Dict[str, Any]:
    spec = pipeline.spec
    spec_tree: Dict[str, Any] = {
        "priority": spec.priority,
        "concurrency": spec.concurrency,
        "variables": variables_to_map(spec.variables),
        "trigger": [_trigger_from_api(t) for t in spec.triggers],
    }
    # An all-empty template is what the service returns when none was set.
    if spec.spec_template is not None and spec.spec_template != SpecTemplate():
        spec_tree["spec_template"] = spec.spec_template.model_dump()

    meta = pipeline.metadata
    return {
        "id": meta.id,
        "name": meta.name,
        "project_id": meta.project_id,
        "tags": list(meta.labels.tags),
        "spec": spec_tree,
    }


class PipelineResource(Resource):
    kind = "pipeline"

    def create(self, tree: Dict[str, Any]) -> Dict[str, Any]:
        created = api.create_pipeline(self.client, pipeline_to_api(tree))
        self._event("create", created.metadata.id)
        return pipeline_from_api(created)

    def read(self, tree: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        pipeline_id = self._identity(tree)
        if pipeline_id is None:
            return None
        return pipeline_from_api(api.get_pipeline(self.client, pipeline_id))

    def update(self, prior: Dict[str, Any], desired: Dict[str, Any]) -> Dict[str, Any]:
        pipeline = pipeline_to_api(desired)
        pipeline.metadata.id = self._identity(prior)
        updated = api.update_pipeline(self.client, pipeline)
        self._event("update", updated.metadata.id)
        return pipeline_from_api(updated)

    def delete(self, tree: Dict[str, Any]) -> None:
        pipeline_id = self._identity(tree)
        if pipeline_id is None:
            raise ValueError("pipeline has no id")
        api.delete_pipeline(self.client, pipeline_id)
        self._event("delete", pipeline_id)


__all__ = [
    "DEFAULT_TRIGGER_TYPE",
    "DEFAULT_BRANCH_REGEX",
    "PipelineConfig",
    "PipelineSpecConfig",
    "SpecTemplateConfig",
    "TriggerConfig",
    "pipeline_to_api",
    "pipeline_from_api",
    "PipelineResource",
]
