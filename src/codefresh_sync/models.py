from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class APIModel(BaseModel):
    """
    Base for Codefresh payloads.
    Wire names are camelCase; Python attributes are snake_case and
    either form is accepted on input. Unknown keys are ignored because
    the service returns far more than we manage. An explicit ``null`` for
    a field with a default means the default.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _nulls_to_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        for name, field in cls.model_fields.items():
            if field.is_required():
                continue
            for key in (name, field.alias):
                if key in cleaned and cleaned[key] is None:
                    del cleaned[key]
        return cleaned


class Variable(APIModel):
    key: str
    value: str = ""


# --- Projects ---


class Project(APIModel):
    id: Optional[str] = None
    project_name: str = Field(alias="projectName")
    tags: List[str] = Field(default_factory=list)
    variables: List[Variable] = Field(default_factory=list)


# --- Pipelines ---


class Labels(APIModel):
    tags: List[str] = Field(default_factory=list)


class PipelineMetadata(APIModel):
    id: Optional[str] = None
    name: str
    project_id: Optional[str] = Field(default=None, alias="projectId")
    labels: Labels = Field(default_factory=Labels)


class SpecTemplate(APIModel):
    location: str = ""
    repo: str = ""
    path: str = ""
    revision: str = ""
    context: str = ""


class Trigger(APIModel):
    name: str = ""
    description: str = ""
    type: str = ""
    repo: str = ""
    branch_regex: str = Field(default="", alias="branchRegex")
    modified_files_glob: str = Field(default="", alias="modifiedFilesGlob")
    events: List[str] = Field(default_factory=list)
    provider: str = ""
    disabled: bool = False
    context: str = ""
    variables: List[Variable] = Field(default_factory=list)


class PipelineSpec(APIModel):
    triggers: List[Trigger] = Field(default_factory=list)
    variables: List[Variable] = Field(default_factory=list)
    spec_template: Optional[SpecTemplate] = Field(default=None, alias="specTemplate")
    priority: int = 0
    concurrency: int = 0


class Pipeline(APIModel):
    metadata: PipelineMetadata
    spec: PipelineSpec = Field(default_factory=PipelineSpec)


# --- Contexts ---


class ContextMetadata(APIModel):
    name: str


class ContextSpec(APIModel):
    type: str = ""
    data: Dict[str, Any] = Field(default_factory=dict)


class Context(APIModel):
    api_version: str = Field(default="v1", alias="apiVersion")
    kind: str = "context"
    metadata: ContextMetadata
    spec: ContextSpec = Field(default_factory=ContextSpec)


# --- Permissions ---


class Permission(APIModel):
    id: Optional[str] = Field(default=None, alias="_id")
    team: str
    resource: str
    related_resource: Optional[str] = Field(default=None, alias="relatedResource")
    action: str
    rule_type: Optional[str] = Field(default=None, alias="ruleType")
    tags: List[str] = Field(default_factory=list)


__all__ = [
    "APIModel",
    "Variable",
    "Project",
    "Labels",
    "PipelineMetadata",
    "SpecTemplate",
    "Trigger",
    "PipelineSpec",
    "Pipeline",
    "ContextMetadata",
    "ContextSpec",
    "Context",
    "Permission",
]
