"""
Permissions (ABAC rules) binding a team to an action on tagged resources.

The service can only update a rule's tags. Any other change is applied by
deleting the rule and creating a new one under a new id.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from codefresh_sync.api import permissions as api
from codefresh_sync.client import CodefreshClientError
from codefresh_sync.models import Permission
from codefresh_sync.resources.base import ConfigModel, Resource

DEFAULT_TAGS = ("*", "untagged")
PIPELINE_ONLY_ACTIONS = ("run", "approve", "debug")
# Changing any of these requires a new rule.
KEY_FIELDS = ("team", "action", "related_resource", "resource", "rule_type")


class PermissionValidationError(ValueError):
    """Raised before any API call when a permission is inconsistent."""


class PermissionConfig(ConfigModel):
    id: Optional[str] = None
    team: str
    resource: Literal["pipeline", "cluster", "project"]
    related_resource: Optional[Literal["project"]] = None
    action: Literal["create", "read", "update", "delete", "run", "approve", "debug"]
    rule_type: Optional[Literal["all", "any"]] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("related_resource", "rule_type", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: Any) -> Any:
        return None if value == "" else value


def validate_permission(
    desired: Dict[str, Any], prior: Optional[Dict[str, Any]] = None
) -> PermissionConfig:
    """
    Check cross-field rules on ``desired``.
    On update (``prior`` given) a rule is only evaluated when one of the
    fields it involves changed.
    """
    cfg = PermissionConfig.model_validate(desired)
    old = PermissionConfig.model_validate(prior) if prior is not None else None

    def changed(*fields: str) -> bool:
        return old is None or any(getattr(cfg, f) != getattr(old, f) for f in fields)

    if changed("resource", "related_resource"):
        if cfg.related_resource and cfg.resource != "pipeline":
            raise PermissionValidationError(
                "related_resource is only valid when resource is 'pipeline' "
                f"(resource={cfg.resource!r}, related_resource={cfg.related_resource!r})"
            )
    if changed("resource", "action"):
        if cfg.action in PIPELINE_ONLY_ACTIONS and cfg.resource != "pipeline":
            raise PermissionValidationError(
                f"action {cfg.action} is only valid when resource is 'pipeline' "
                f"(resource={cfg.resource!r})"
            )
    return cfg


def permission_to_api(tree: Dict[str, Any]) -> Permission:
    cfg = PermissionConfig.model_validate(tree)
    return Permission(
        id=cfg.id,
        team=cfg.team,
        resource=cfg.resource,
        related_resource=cfg.related_resource,
        action=cfg.action,
        rule_type=cfg.rule_type,
        tags=list(cfg.tags) if cfg.tags else list(DEFAULT_TAGS),
    )


def permission_from_api(permission: Permission) -> Dict[str, Any]:
    return {
        "id": permission.id,
        "team": permission.team,
        "resource": permission.resource,
        "related_resource": permission.related_resource or None,
        "action": permission.action,
        "rule_type": permission.rule_type or None,
        "tags": list(permission.tags),
    }


def changed_fields(prior: Permission, desired: Permission) -> set[str]:
    changed = {f for f in KEY_FIELDS if getattr(prior, f) != getattr(desired, f)}
    if set(prior.tags) != set(desired.tags):
        changed.add("tags")
    return changed


class PermissionResource(Resource):
    kind = "permission"

    def create(self, tree: Dict[str, Any]) -> Dict[str, Any]:
        validate_permission(tree)
        created = api.create_permission(self.client, permission_to_api(tree))
        self._event("create", created.id)
        return permission_from_api(created)

    def read(self, tree: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        permission_id = self._identity(tree)
        if permission_id is None:
            return None
        return permission_from_api(api.get_permission(self.client, permission_id))

    def update(self, prior: Dict[str, Any], desired: Dict[str, Any]) -> Dict[str, Any]:
        validate_permission(desired, prior)

        old_id = self._identity(prior)
        if old_id is None:
            raise ValueError("permission has no id")

        permission = permission_to_api(desired)
        permission.id = old_id
        changed = changed_fields(permission_to_api(prior), permission)

        if changed & set(KEY_FIELDS):
            try:
                api.delete_permission(self.client, old_id)
            except CodefreshClientError as exc:
                # The replacement is still created; a stale rule may remain.
                self._event(
                    "delete_failed",
                    old_id,
                    level=logging.WARNING,
                    error=str(exc),
                )
            created = api.create_permission(self.client, permission)
            self._event("replace", created.id, replaced=old_id)
            return permission_from_api(created)

        if "tags" in changed:
            api.update_permission_tags(self.client, permission)
            self._event("update", old_id)

        return permission_from_api(permission)

    def delete(self, tree: Dict[str, Any]) -> None:
        permission_id = self._identity(tree)
        if permission_id is None:
            raise ValueError("permission has no id")
        api.delete_permission(self.client, permission_id)
        self._event("delete", permission_id)


__all__ = [
    "DEFAULT_TAGS",
    "KEY_FIELDS",
    "PermissionConfig",
    "PermissionValidationError",
    "validate_permission",
    "permission_to_api",
    "permission_from_api",
    "changed_fields",
    "PermissionResource",
]
