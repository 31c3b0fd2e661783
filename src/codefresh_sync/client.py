import json
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Type, TypeVar, get_origin

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

if TYPE_CHECKING:
    from .config import ClientConfig

T = TypeVar("T")

CONTENT_TYPE = "application/json; charset=utf-8"


class CodefreshClientError(Exception):
    """Base error for client failures."""


class CodefreshNetworkError(CodefreshClientError):
    pass


class CodefreshHTTPError(CodefreshClientError):
    def __init__(
        self,
        *,
        status_code: int,
        status_line: str,
        method: str,
        url: str,
        body: str,
    ):
        # Body is kept verbatim; no attempt is made to parse error payloads.
        super().__init__(f"{status_line}, {body}")
        self.status_code = status_code
        self.status_line = status_line
        self.method = method
        self.url = url
        self.body = body


class CodefreshEncodeError(CodefreshClientError):
    pass


class CodefreshParseError(CodefreshClientError):
    pass


class CodefreshModelValidationError(CodefreshClientError):
    pass


@dataclass(frozen=True)
class RequestOptions:
    path: str
    method: str = "GET"
    body: bytes = b""
    qs: Optional[Dict[str, str]] = None


def to_qs(qs: Dict[str, str]) -> str:
    """Render query parameters as ``?k=v&k2=v2``. Values are not encoded."""
    return "?" + "&".join(f"{k}={v}" for k, v in qs.items())


def encode_to_json(obj: Any) -> bytes:
    try:
        if isinstance(obj, BaseModel):
            return obj.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
        return json.dumps(obj).encode("utf-8")
    except (TypeError, ValueError, PydanticSerializationError) as exc:
        raise CodefreshEncodeError(
            f"Cannot encode {type(obj).__name__} to JSON: {exc}"
        ) from exc


def decode_response_into(body: bytes, target: Type[T]) -> T:
    """
    Decode a JSON body into ``target``.
    - ``target`` is a pydantic model class or any type pydantic can validate
    - Raises CodefreshParseError on malformed JSON
    - Raises CodefreshModelValidationError when the payload doesn't fit
    """
    try:
        data = json.loads(body)
    except ValueError as exc:
        snippet = body[:500].decode("utf-8", errors="replace")
        raise CodefreshParseError(
            f"Expected JSON body, got: {snippet!r}"
        ) from exc

    name = getattr(target, "__name__", repr(target))
    try:
        if (
            get_origin(target) is None
            and isinstance(target, type)
            and issubclass(target, BaseModel)
        ):
            return target.model_validate(data)
        return TypeAdapter(target).validate_python(data)
    except ValidationError as exc:
        raise CodefreshModelValidationError(
            f"Response did not match model {name}: {exc}"
        ) from exc


class CodefreshClient:
    """
    Synchronous HTTP client for the Codefresh REST API.
    - Sends the raw token as the Authorization header
    - One blocking round trip per call; no retries, no caching
    - Returns buffered response bytes; typed helpers decode into models
    """

    def __init__(
        self,
        host: str,
        token: str,
        *,
        http: Optional[httpx.Client] = None,
        logger: Optional[logging.Logger] = None,
    ):
        host = (host or "").rstrip("/")
        token = token or ""

        if not host:
            raise ValueError("host must be provided.")
        if not token:
            raise ValueError("token must be provided.")

        self._host = host
        self._token = token
        self.log = logger or logging.getLogger("codefresh_sync.client")

        self._owns_http = http is None
        self._http = http or httpx.Client()

    @property
    def host(self) -> str:
        return self._host

    @classmethod
    def from_config(cls, config: "ClientConfig", **kwargs) -> "CodefreshClient":
        return cls(config.api_url, config.token, **kwargs)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "CodefreshClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def execute(self, options: RequestOptions) -> bytes:
        """
        Perform one request and return the raw body.
        - Raises CodefreshNetworkError on transport failures
        - Raises CodefreshHTTPError on any status other than 200
        """
        method = options.method.upper()
        url = f"{self._host}{options.path}"
        if options.qs is not None:
            url += to_qs(options.qs)

        headers = {
            "Authorization": self._token,
            "Content-Type": CONTENT_TYPE,
        }

        start = time.perf_counter()
        try:
            resp = self._http.request(
                method, url, content=options.body or None, headers=headers
            )
        except httpx.HTTPError as exc:
            raise CodefreshNetworkError(
                f"Network error calling {method} {url}: {exc}"
            ) from exc

        duration_ms = int((time.perf_counter() - start) * 1000)
        self.log.debug(
            "op.request",
            extra={
                "method": method,
                "path": options.path,
                "status": resp.status_code,
                "duration_ms": duration_ms,
            },
        )

        if resp.status_code != 200:
            raise CodefreshHTTPError(
                status_code=resp.status_code,
                status_line=f"{resp.status_code} {resp.reason_phrase}".strip(),
                method=method,
                url=url,
                body=resp.text,
            )

        return resp.content

    def request_json(
        self,
        method: str,
        path: str,
        *,
        payload: Any = None,
        qs: Optional[Dict[str, str]] = None,
    ) -> bytes:
        body = encode_to_json(payload) if payload is not None else b""
        return self.execute(RequestOptions(path=path, method=method, body=body, qs=qs))

    def request_model(
        self,
        model: Type[T],
        method: str,
        path: str,
        **kwargs: Any,
    ) -> T:
        body = self.request_json(method, path, **kwargs)
        return decode_response_into(body, model)
