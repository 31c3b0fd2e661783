"""codefresh_sync package exports."""

from .client import (
    CodefreshClient,
    CodefreshClientError,
    CodefreshEncodeError,
    CodefreshHTTPError,
    CodefreshModelValidationError,
    CodefreshNetworkError,
    CodefreshParseError,
    RequestOptions,
    decode_response_into,
    encode_to_json,
    to_qs,
)
from .config import ClientConfig, create_client_from_env, load_env_config
from .logging import setup_logging
from .resources import (
    ContextResource,
    ContextType,
    PermissionResource,
    PermissionValidationError,
    PipelineResource,
    ProjectResource,
    detect_context_type,
)

__all__ = [
    # Client
    "CodefreshClient",
    "RequestOptions",
    "to_qs",
    "encode_to_json",
    "decode_response_into",
    # Exceptions
    "CodefreshClientError",
    "CodefreshNetworkError",
    "CodefreshHTTPError",
    "CodefreshEncodeError",
    "CodefreshParseError",
    "CodefreshModelValidationError",
    "PermissionValidationError",
    # Config
    "ClientConfig",
    "load_env_config",
    "create_client_from_env",
    "setup_logging",
    # Resources
    "ProjectResource",
    "PipelineResource",
    "ContextResource",
    "PermissionResource",
    "ContextType",
    "detect_context_type",
]
