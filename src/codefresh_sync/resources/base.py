from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from codefresh_sync.client import CodefreshClient
from codefresh_sync.observability import log_event


class ConfigModel(BaseModel):
    """
    Boundary model for a declarative tree.
    Unknown keys are rejected; keys explicitly set to None count as absent
    so documented defaults apply.
    """

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Resource:
    """Shared plumbing for reconcilers: a client handle and event logging."""

    kind = "resource"

    def __init__(self, client: CodefreshClient, *, logger: Optional[logging.Logger] = None):
        self.client = client
        self.log = logger or logging.getLogger(f"codefresh_sync.resources.{self.kind}")

    def _event(self, op: str, resource_id: Optional[str], **fields: Any) -> None:
        log_event(
            f"resource.{self.kind}.{op}",
            self.log,
            resource=self.kind,
            resource_id=resource_id,
            **fields,
        )

    @staticmethod
    def _identity(tree: Optional[Dict[str, Any]], key: str = "id") -> Optional[str]:
        if not tree:
            return None
        value = tree.get(key)
        return str(value) if value else None


__all__ = ["ConfigModel", "Resource"]
