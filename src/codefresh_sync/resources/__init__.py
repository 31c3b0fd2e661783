"""Declarative tree <-> API object mappers and per-resource reconcilers."""

from .context import (
    ContextResource,
    ContextType,
    context_from_api,
    context_to_api,
    detect_context_type,
    normalize_yaml,
)
from .permission import (
    PermissionResource,
    PermissionValidationError,
    permission_from_api,
    permission_to_api,
    validate_permission,
)
from .pipeline import PipelineResource, pipeline_from_api, pipeline_to_api
from .project import ProjectResource, project_from_api, project_to_api

__all__ = [
    "ContextResource",
    "ContextType",
    "context_from_api",
    "context_to_api",
    "detect_context_type",
    "normalize_yaml",
    "PermissionResource",
    "PermissionValidationError",
    "permission_from_api",
    "permission_to_api",
    "validate_permission",
    "PipelineResource",
    "pipeline_from_api",
    "pipeline_to_api",
    "ProjectResource",
    "project_from_api",
    "project_to_api",
]
