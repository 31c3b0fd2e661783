"""Typed Codefresh endpoints; one HTTP round trip per function."""

from . import contexts, permissions, pipelines, projects

__all__ = ["contexts", "permissions", "pipelines", "projects"]
