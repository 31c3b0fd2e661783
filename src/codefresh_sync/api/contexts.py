from __future__ import annotations

from codefresh_sync.client import CodefreshClient
from codefresh_sync.models import Context


def create_context(client: CodefreshClient, context: Context) -> Context:
    return client.request_model(Context, "POST", "/contexts", payload=context)


def get_context(client: CodefreshClient, name: str, *, decrypt: bool = False) -> Context:
    """
    Fetch a context by name.
    Encrypted kinds come back masked unless ``decrypt`` is set, and the
    account may forbid decryption altogether.
    """
    qs = {"decrypt": "true"} if decrypt else None
    return client.request_model(Context, "GET", f"/contexts/{name}", qs=qs)


def update_context(client: CodefreshClient, context: Context) -> Context:
    name = context.metadata.name
    return client.request_model(Context, "PUT", f"/contexts/{name}", payload=context)


def delete_context(client: CodefreshClient, name: str) -> None:
    client.request_json("DELETE", f"/contexts/{name}")


__all__ = ["create_context", "get_context", "update_context", "delete_context"]
