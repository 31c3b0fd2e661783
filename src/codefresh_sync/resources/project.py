from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from codefresh_sync.api import projects as api
from codefresh_sync.models import Project
from codefresh_sync.resources._tree import variables_to_list, variables_to_map
from codefresh_sync.resources.base import ConfigModel, Resource


class ProjectConfig(ConfigModel):
    id: Optional[str] = None
    name: str
    tags: List[str] = Field(default_factory=list)
    variables: Dict[str, str] = Field(default_factory=dict)


def project_to_api(tree: Dict[str, Any]) -> Project:
    cfg = ProjectConfig.model_validate(tree)
    return Project(
        id=cfg.id,
        project_name=cfg.name,
        tags=list(cfg.tags),
        variables=variables_to_list(cfg.variables),
    )


def project_from_api(project: Project) -> Dict[str, Any]:
    return {
        "id": project.id,
        "name": project.project_name,
        "tags": list(project.tags),
        "variables": variables_to_map(project.variables),
    }


class ProjectResource(Resource):
    kind = "project"

    def create(self, tree: Dict[str, Any]) -> Dict[str, Any]:
        created = api.create_project(self.client, project_to_api(tree))
        self._event("create", created.id)
        return project_from_api(created)

    def read(self, tree: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        project_id = self._identity(tree)
        if project_id is None:
            return None
        return project_from_api(api.get_project(self.client, project_id))

    def update(self, prior: Dict[str, Any], desired: Dict[str, Any]) -> Dict[str, Any]:
        project = project_to_api(desired)
        project.id = self._identity(prior)
        api.update_project(self.client, project)
        self._event("update", project.id)
        return project_from_api(project)

    def delete(self, tree: Dict[str, Any]) -> None:
        project_id = self._identity(tree)
        if project_id is None:
            raise ValueError("project has no id")
        api.delete_project(self.client, project_id)
        self._event("delete", project_id)


__all__ = ["ProjectConfig", "project_to_api", "project_from_api", "ProjectResource"]
