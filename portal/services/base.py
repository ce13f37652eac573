"""
HTTP client for the ATS REST backend.

All backend traffic goes through ApiClient so the base URL, bearer token,
timeout and TLS settings live in one place. Failures surface as one of
three ApiError subclasses:

- ApiTransportError: the request never produced a response (timeout,
  connection refused, DNS)
- ApiHTTPError: the backend answered with a non-2xx status
- ApiResponseError: a 2xx answer whose body is not the expected shape
"""

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

REQUEST_TIMEOUT = 30  # seconds


class ApiError(Exception):
    """Base class for every backend failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ApiTransportError(ApiError):
    """Network-level failure: no HTTP response was received."""


class ApiHTTPError(ApiError):
    """Backend answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int, payload: Any = None):
        super().__init__(message, status_code)
        self.payload = payload

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


class ApiResponseError(ApiError):
    """Backend answered 2xx but the body could not be understood."""


def _error_message(response: requests.Response, payload: Any) -> str:
    """Pull the human-readable message out of an error body."""
    if isinstance(payload, dict):
        for key in ("message", "error", "title", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return f"Request failed with status {response.status_code}"


class ApiClient:
    """
    Thin wrapper over `requests` bound to one backend and one bearer token.

    One client is built per request from the signed-in session; it holds no
    connection state between calls.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: int = REQUEST_TIMEOUT,
        verify_ssl: bool = True,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.verify_ssl = verify_ssl

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def get_headers(self, json_body: bool = True) -> Dict[str, str]:
        """Get headers for backend requests including Bearer token."""
        headers = {"Accept": "application/json"}
        if json_body:
            headers["Content-Type"] = "application/json"
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        raw: bool = False,
    ) -> Any:
        """
        Send one request and decode the JSON answer.

        Returns:
            Decoded JSON body, None for an empty body, or the raw
            `requests.Response` when raw=True.

        Raises:
            ApiTransportError, ApiHTTPError, ApiResponseError
        """
        url = self.url(path)
        try:
            response = requests.request(
                method,
                url,
                json=json,
                params=params,
                files=files,
                data=data,
                # requests sets the multipart boundary itself
                headers=self.get_headers(json_body=files is None),
                timeout=self.timeout,
                verify=self.verify_ssl,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(f"{method} {path} timed out after {self.timeout}s")
            raise ApiTransportError("Backend service timeout") from e
        except requests.exceptions.ConnectionError as e:
            logger.warning(f"{method} {path} connection failed: {e}")
            raise ApiTransportError("Cannot connect to backend service") from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise ApiTransportError(str(e)) from e

        payload = self._decode(response)

        if not response.ok:
            message = _error_message(response, payload)
            logger.info(f"{method} {path} -> {response.status_code}: {message}")
            raise ApiHTTPError(message, response.status_code, payload)

        if raw:
            return response
        if payload is _UNDECODABLE:
            raise ApiResponseError(
                f"{method} {path} returned a non-JSON body", response.status_code
            )
        return payload

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return _UNDECODABLE

    def get(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        return self.request("GET", path, params=params, **kwargs)

    def post(self, path: str, json: Any = None, **kwargs) -> Any:
        return self.request("POST", path, json=json, **kwargs)

    def put(self, path: str, json: Any = None, **kwargs) -> Any:
        return self.request("PUT", path, json=json, **kwargs)

    def patch(self, path: str, json: Any = None, **kwargs) -> Any:
        return self.request("PATCH", path, json=json, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        return self.request("DELETE", path, **kwargs)


class _Undecodable:
    def __repr__(self) -> str:
        return "<undecodable body>"


_UNDECODABLE = _Undecodable()


def unwrap(payload: Any, key: str = "data") -> Any:
    """Return payload[key] for endpoints that wrap results in an envelope."""
    if not isinstance(payload, dict) or key not in payload:
        raise ApiResponseError(f"Response is missing the '{key}' field")
    return payload[key]


def parse_model(model: Type[M], payload: Any) -> M:
    """Validate one payload into a model, mapping failures to ApiResponseError."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ApiResponseError(f"Unexpected {model.__name__} payload: {e.error_count()} error(s)") from e


def parse_list(model: Type[M], payload: Any) -> List[M]:
    """Validate a JSON array into a list of models."""
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ApiResponseError(f"Expected a list of {model.__name__}")
    return [parse_model(model, item) for item in payload]


class BaseService:
    """Common constructor for resource services."""

    def __init__(self, client: ApiClient):
        self.client = client
