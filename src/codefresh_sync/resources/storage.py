"""Storage-backed contexts (Google Cloud Storage, S3, Azure Files)."""

from __future__ import annotations

from typing import Any, Dict

from codefresh_sync.resources.base import ConfigModel


class JsonStorageAuth(ConfigModel):
    type: str
    json_config: Dict[str, Any]


class JsonStorageData(ConfigModel):
    auth: JsonStorageAuth


class AzureStorageAuth(ConfigModel):
    type: str
    account_name: str
    account_key: str


class AzureStorageData(ConfigModel):
    auth: AzureStorageAuth


def json_storage_to_api(data: JsonStorageData) -> Dict[str, Any]:
    return {
        "auth": {
            "type": data.auth.type,
            "jsonConfig": dict(data.auth.json_config),
        }
    }


def json_storage_from_api(data: Dict[str, Any]) -> Dict[str, Any]:
    auth = data.get("auth") or {}
    return {
        "auth": {
            "type": auth.get("type", ""),
            "json_config": dict(auth.get("jsonConfig") or {}),
        }
    }


def azure_storage_to_api(data: AzureStorageData) -> Dict[str, Any]:
    return {
        "auth": {
            "type": data.auth.type,
            "accountName": data.auth.account_name,
            "accountKey": data.auth.account_key,
        }
    }


def azure_storage_from_api(data: Dict[str, Any]) -> Dict[str, Any]:
    auth = data.get("auth") or {}
    return {
        "auth": {
            "type": auth.get("type", ""),
            "account_name": auth.get("accountName", ""),
            "account_key": auth.get("accountKey", ""),
        }
    }


__all__ = [
    "JsonStorageAuth",
    "JsonStorageData",
    "AzureStorageAuth",
    "AzureStorageData",
    "json_storage_to_api",
    "json_storage_from_api",
    "azure_storage_to_api",
    "azure_storage_from_api",
]
