from __future__ import annotations

from urllib.parse import quote

from codefresh_sync.client import CodefreshClient
from codefresh_sync.models import Pipeline


def _pipeline_path(pipeline_id: str) -> str:
    # Pipeline names look like "project/name"; the slash must be escaped.
    return f"/pipelines/{quote(pipeline_id, safe='')}"


def create_pipeline(client: CodefreshClient, pipeline: Pipeline) -> Pipeline:
    return client.request_model(Pipeline, "POST", "/pipelines", payload=pipeline)


def get_pipeline(client: CodefreshClient, pipeline_id: str) -> Pipeline:
    return client.request_model(Pipeline, "GET", _pipeline_path(pipeline_id))


def update_pipeline(client: CodefreshClient, pipeline: Pipeline) -> Pipeline:
    if not pipeline.metadata.id:
        raise ValueError("pipeline.metadata.id is required for update")
    return client.request_model(
        Pipeline, "PUT", _pipeline_path(pipeline.metadata.id), payload=pipeline
    )


def delete_pipeline(client: CodefreshClient, pipeline_id: str) -> None:
    client.request_json("DELETE", _pipeline_path(pipeline_id))


__all__ = ["create_pipeline", "get_pipeline", "update_pipeline", "delete_pipeline"]
