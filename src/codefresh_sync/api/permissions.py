from __future__ import annotations

from codefresh_sync.client import CodefreshClient
from codefresh_sync.models import Permission


def create_permission(client: CodefreshClient, permission: Permission) -> Permission:
    body = permission.model_copy(update={"id": None})
    return client.request_model(Permission, "POST", "/abac", payload=body)


def get_permission(client: CodefreshClient, permission_id: str) -> Permission:
    return client.request_model(Permission, "GET", f"/abac/{permission_id}")


def update_permission_tags(client: CodefreshClient, permission: Permission) -> None:
    """Replace the tag list of an existing rule; nothing else is updatable."""
    if not permission.id:
        raise ValueError("permission.id is required for update")
    client.request_json(
        "POST", f"/abac/tags/rule/{permission.id}", payload=list(permission.tags)
    )


def delete_permission(client: CodefreshClient, permission_id: str) -> None:
    client.request_json("DELETE", f"/abac/{permission_id}")


__all__ = [
    "create_permission",
    "get_permission",
    "update_permission_tags",
    "delete_permission",
]
