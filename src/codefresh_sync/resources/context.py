"""
Context mapping.

A context carries exactly one of seven variants. In a declarative tree the
variant is the single populated block under ``spec``::

    {"name": "my-ctx", "decrypt_spec": True,
     "spec": {"secret_yaml": {"data": "key: value\\n"}}}

Encrypted variants are returned masked by the service unless decryption is
requested, so reads only overwrite the stored spec when that is allowed.
"""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import field_validator, model_validator

from codefresh_sync.api import contexts as api
from codefresh_sync.models import Context, ContextMetadata, ContextSpec
from codefresh_sync.resources.base import ConfigModel, Resource
from codefresh_sync.resources.storage import (
    AzureStorageData,
    JsonStorageData,
    azure_storage_from_api,
    azure_storage_to_api,
    json_storage_from_api,
    json_storage_to_api,
)


class ContextType(str, Enum):
    CONFIG = "config"
    SECRET = "secret"
    YAML = "yaml"
    SECRET_YAML = "secret-yaml"
    STORAGE_GC = "storage.gc"
    STORAGE_S3 = "storage.s3"
    STORAGE_AZURE = "storage.azuref"
    UNKNOWN = ""

    @property
    def field_name(self) -> str:
        """Key used in declarative trees ("storage.gc" -> "storage_gc")."""
        return self.value.replace(".", "_").replace("-", "_")

    @property
    def encrypted(self) -> bool:
        return self in ENCRYPTED_CONTEXT_TYPES


# Order decides which variant wins when more than one block is populated.
CONTEXT_TYPE_PRECEDENCE = (
    ContextType.CONFIG,
    ContextType.SECRET,
    ContextType.YAML,
    ContextType.SECRET_YAML,
    ContextType.STORAGE_GC,
    ContextType.STORAGE_S3,
    ContextType.STORAGE_AZURE,
)

ENCRYPTED_CONTEXT_TYPES = frozenset(
    {
        ContextType.SECRET,
        ContextType.SECRET_YAML,
        ContextType.STORAGE_S3,
        ContextType.STORAGE_AZURE,
    }
)


def normalize_yaml(text: str) -> str:
    """Canonical YAML rendering used for both directions of the mapping."""
    return render_yaml(yaml.safe_load(text) or {})


def render_yaml(data: Dict[str, Any]) -> str:
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=True)


def yaml_equivalent(left: str, right: str) -> bool:
    """True when both documents load to the same data; formatting is ignored."""
    try:
        return (yaml.safe_load(left) or {}) == (yaml.safe_load(right) or {})
    except yaml.YAMLError:
        return False


# --- Boundary models: one class per variant payload ---


class MapVariant(ConfigModel):
    data: Dict[str, str]


class YamlVariant(ConfigModel):
    data: str

    @field_validator("data")
    @classmethod
    def _must_be_mapping(cls, value: str) -> str:
        try:
            parsed = yaml.safe_load(value)
        except yaml.YAMLError as exc:
            raise ValueError(f"data is not valid YAML: {exc}") from exc
        if parsed is not None and not isinstance(parsed, dict):
            raise ValueError("data must be a YAML mapping")
        return value

    def parsed(self) -> Dict[str, Any]:
        return yaml.safe_load(self.data) or {}


class JsonStorageVariant(ConfigModel):
    data: JsonStorageData


class AzureStorageVariant(ConfigModel):
    data: AzureStorageData


Variant = Union[MapVariant, YamlVariant, JsonStorageVariant, AzureStorageVariant]


class ContextSpecConfig(ConfigModel):
    config: Optional[MapVariant] = None
    secret: Optional[MapVariant] = None
    yaml: Optional[YamlVariant] = None
    secret_yaml: Optional[YamlVariant] = None
    storage_gc: Optional[JsonStorageVariant] = None
    storage_s3: Optional[JsonStorageVariant] = None
    storage_azuref: Optional[AzureStorageVariant] = None

    def _populated(self) -> list[tuple[ContextType, Variant]]:
        found = []
        for ctype in CONTEXT_TYPE_PRECEDENCE:
            block = getattr(self, ctype.field_name)
            if block is not None and block.data:
                found.append((ctype, block))
        return found

    @model_validator(mode="after")
    def _variants_are_exclusive(self) -> "ContextSpecConfig":
        populated = [ctype.field_name for ctype, _ in self._populated()]
        if len(populated) > 1:
            raise ValueError(
                "context variants are mutually exclusive, got: " + ", ".join(populated)
            )
        return self

    @property
    def variant(self) -> tuple[ContextType, Optional[Variant]]:
        populated = self._populated()
        if not populated:
            return ContextType.UNKNOWN, None
        return populated[0]


class ContextConfig(ConfigModel):
    name: str
    decrypt_spec: bool = True
    spec: ContextSpecConfig


def detect_context_type(tree: Optional[Dict[str, Any]]) -> ContextType:
    """
    Return the variant of the first non-empty ``spec.<variant>.data`` block,
    scanning in CONTEXT_TYPE_PRECEDENCE order; UNKNOWN if none is set.
    """
    spec = (tree or {}).get("spec") or {}
    for ctype in CONTEXT_TYPE_PRECEDENCE:
        block = spec.get(ctype.field_name)
        if isinstance(block, dict) and block.get("data"):
            return ctype
    return ContextType.UNKNOWN


def should_decrypt(tree: Optional[Dict[str, Any]]) -> bool:
    """Ask the service for cleartext only for encrypted variants that opt in."""
    tree = tree or {}
    return detect_context_type(tree).encrypted and bool(tree.get("decrypt_spec", True))


def _variant_to_data(ctype: ContextType, block: Optional[Variant]) -> Dict[str, Any]:
    if block is None:
        return {}
    if isinstance(block, MapVariant):
        return dict(block.data)
    if isinstance(block, YamlVariant):
        return block.parsed()
    if isinstance(block, JsonStorageVariant):
        return json_storage_to_api(block.data)
    if isinstance(block, AzureStorageVariant):
        return azure_storage_to_api(block.data)
    raise TypeError(f"unsupported variant for {ctype.value!r}")


def context_to_api(tree: Dict[str, Any]) -> Context:
    cfg = ContextConfig.model_validate(tree)
    ctype, block = cfg.spec.variant
    return Context(
        metadata=ContextMetadata(name=cfg.name),
        spec=ContextSpec(type=ctype.value, data=_variant_to_data(ctype, block)),
    )


def flatten_context_spec(spec: ContextSpec) -> Dict[str, Any]:
    try:
        ctype = ContextType(spec.type)
    except ValueError:
        return {}

    if ctype in (ContextType.CONFIG, ContextType.SECRET):
        data: Any = dict(spec.data)
    elif ctype in (ContextType.YAML, ContextType.SECRET_YAML):
        data = render_yaml(spec.data)
    elif ctype in (ContextType.STORAGE_GC, ContextType.STORAGE_S3):
        data = json_storage_from_api(spec.data)
    elif ctype is ContextType.STORAGE_AZURE:
        data = azure_storage_from_api(spec.data)
    else:
        return {}
    return {ctype.field_name: {"data": data}}


def _keep_stored_yaml(
    spec: Dict[str, Any], stored: Optional[Dict[str, Any]]
) -> Dict[str, Any]:
    # The service only returns the parsed mapping, so stored text that loads to
    # the same data is kept as written.
    for ctype in (ContextType.YAML, ContextType.SECRET_YAML):
        fetched = spec.get(ctype.field_name)
        block = (stored or {}).get(ctype.field_name)
        if not fetched or not isinstance(block, dict):
            continue
        text = block.get("data")
        if isinstance(text, str) and yaml_equivalent(text, fetched["data"]):
            fetched["data"] = text
    return spec


def context_from_api(
    context: Context, prior: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Merge a fetched context into a copy of the stored tree.
    The name always comes from the service. The spec is replaced only when
    ``decrypt_spec`` is on or the stored variant is not encrypted; otherwise
    the stored spec is returned untouched. Stored YAML text survives when it
    loads to the same data the service returned.
    """
    tree = copy.deepcopy(prior) if prior else {}
    tree["name"] = context.metadata.name

    current = detect_context_type(tree)
    if tree.get("decrypt_spec", True) or not current.encrypted:
        tree["spec"] = _keep_stored_yaml(
            flatten_context_spec(context.spec), tree.get("spec")
        )
    return tree


class ContextResource(Resource):
    kind = "context"

    def create(self, tree: Dict[str, Any]) -> Dict[str, Any]:
        created = api.create_context(self.client, context_to_api(tree))
        self._event("create", created.metadata.name)
        return context_from_api(created, tree)

    def read(self, tree: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        name = self._identity(tree, "name")
        if name is None:
            return None
        fetched = api.get_context(self.client, name, decrypt=should_decrypt(tree))
        return context_from_api(fetched, tree)

    def update(self, prior: Dict[str, Any], desired: Dict[str, Any]) -> Dict[str, Any]:
        context = context_to_api(desired)
        name = self._identity(prior, "name")
        if name != context.metadata.name:
            raise ValueError(
                f"context name cannot change in place ({name!r} -> "
                f"{context.metadata.name!r}); delete and recreate it"
            )
        updated = api.update_context(self.client, context)
        self._event("update", name)
        return context_from_api(updated, desired)

    def delete(self, tree: Dict[str, Any]) -> None:
        name = self._identity(tree, "name")
        if name is None:
            raise ValueError("context has no name")
        api.delete_context(self.client, name)
        self._event("delete", name)


__all__ = [
    "ContextType",
    "CONTEXT_TYPE_PRECEDENCE",
    "ENCRYPTED_CONTEXT_TYPES",
    "ContextConfig",
    "ContextSpecConfig",
    "detect_context_type",
    "should_decrypt",
    "normalize_yaml",
    "yaml_equivalent",
    "context_to_api",
    "context_from_api",
    "flatten_context_spec",
    "ContextResource",
]
