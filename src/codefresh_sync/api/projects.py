from __future__ import annotations

from codefresh_sync.client import CodefreshClient
from codefresh_sync.models import Project


def create_project(client: CodefreshClient, project: Project) -> Project:
    return client.request_model(Project, "POST", "/projects", payload=project)


def get_project(client: CodefreshClient, project_id: str) -> Project:
    return client.request_model(Project, "GET", f"/projects/{project_id}")


def update_project(client: CodefreshClient, project: Project) -> None:
    """PATCH the project in place; the service answers with an empty body."""
    if not project.id:
        raise ValueError("project.id is required for update")
    client.request_json("PATCH", f"/projects/{project.id}", payload=project)


def delete_project(client: CodefreshClient, project_id: str) -> None:
    client.request_json("DELETE", f"/projects/{project_id}")


__all__ = ["create_project", "get_project", "update_project", "delete_project"]
