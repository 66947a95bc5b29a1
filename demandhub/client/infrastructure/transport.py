"""Infrastructure layer: HTTP transport to the demand backend.

Wraps a requests.Session, attaches the bearer token and turns transport and
HTTP failures into the client's typed errors. Nothing here retries.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar

import requests
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from demandhub.common.exceptions import HttpError, MalformedResponse, TransportError

logger = logging.getLogger(__name__)

TokenSupplier = Callable[[], Optional[str]]
ModelT = TypeVar("ModelT", bound=BaseModel)

MESSAGE_FIELDS = ("message", "errors", "error", "description")


def extract_message(response: requests.Response) -> str | None:
    """Best-effort human message from an error response body."""
    try:
        body = response.json()
    except ValueError:
        text = (response.text or "").strip()
        return text or None
    if isinstance(body, dict):
        for key in MESSAGE_FIELDS:
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
            if isinstance(value, list) and value:
                return "; ".join(str(item) for item in value)
        return None
    if isinstance(body, str) and body.strip():
        return body.strip()
    return None


class Transport:
    """Sends requests relative to the API base URL."""

    def __init__(
        self,
        base_url: str,
        token_supplier: TokenSupplier | None = None,
        timeout: float = 10,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_supplier = token_supplier
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {"Accept": "application/json", "Cache-Control": "no-cache"}
        )

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def auth_headers(self, token: str | None = None) -> dict[str, str]:
        if token is None and self.token_supplier is not None:
            token = self.token_supplier()
        return {"Authorization": f"Bearer {token}"} if token else {}

    def send(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        authenticated: bool = True,
        **kwargs: Any,
    ) -> requests.Response:
        """Send a request and return the 2xx response.

        Raises:
            TransportError: connection failures and timeouts
            HttpError: any non-2xx status
        """
        headers = dict(kwargs.pop("headers", None) or {})
        if authenticated:
            headers.update(self.auth_headers(token))
        try:
            response = self.session.request(
                method,
                self.url(path),
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.Timeout as err:
            msg = f"Request to {path} timed out after {self.timeout}s"
            raise TransportError(msg) from err
        except requests.ConnectionError as err:
            msg = f"Unable to connect to server at {self.base_url}"
            raise TransportError(msg) from err
        except requests.RequestException as err:
            msg = f"Request to {path} failed: {err}"
            raise TransportError(msg) from err

        logger.debug("%s %s -> %s", method, path, response.status_code)
        if not response.ok:
            backend_message = extract_message(response)
            message = backend_message or f"HTTP error! status: {response.status_code}"
            raise HttpError(response.status_code, message, backend_message)
        return response

    @staticmethod
    def decode(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as err:
            msg = f"Response from {response.url} is not valid JSON"
            raise MalformedResponse(msg) from err

    def decode_as(self, response: requests.Response, model: type[ModelT]) -> ModelT:
        """Decode the body and validate it against a pydantic model."""
        data = self.decode(response)
        try:
            return model.model_validate(data)
        except PydanticValidationError as err:
            msg = f"Unexpected {model.__name__} payload from {response.url}: {err}"
            raise MalformedResponse(msg) from err

    def decode_list_as(
        self, response: requests.Response, model: type[ModelT]
    ) -> list[ModelT]:
        data = self.decode(response)
        # Paged endpoints wrap the records in a "content" list
        if isinstance(data, dict) and isinstance(data.get("content"), list):
            data = data["content"]
        try:
            return TypeAdapter(list[model]).validate_python(data)  # type: ignore[valid-type]
        except PydanticValidationError as err:
            msg = f"Unexpected {model.__name__} list from {response.url}: {err}"
            raise MalformedResponse(msg) from err
