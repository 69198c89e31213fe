"""Shared plumbing for the API client services."""

from typing import Any, Dict, Optional

import httpx


class ApiError(Exception):
    """The API answered with a failure envelope or a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _error_message(body: Any, fallback: str) -> str:
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        for key in ("message", "detail"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return fallback


def unwrap(response: httpx.Response) -> Any:
    """
    Payload of an API response.

    Understands the ``{ok, value}`` envelope as well as the older
    ``{success, data}`` shape and bare records or lists. Failures raise
    ApiError with the server's message.
    """
    try:
        body = response.json() if response.content else None
    except ValueError:
        body = None

    if not response.is_success:
        raise ApiError(response.status_code, _error_message(body, response.text or response.reason_phrase))

    if isinstance(body, dict):
        if "ok" in body:
            if body["ok"] is not True:
                error = body.get("error")
                code = error.get("code") if isinstance(error, dict) else None
                raise ApiError(code or response.status_code, _error_message(body, "Request failed"))
            return body.get("value")

        if "success" in body:
            if not body["success"]:
                raise ApiError(response.status_code, _error_message(body, "Request failed"))
            if "data" in body:
                return body["data"]
            return {k: v for k, v in body.items() if k != "success"}

    return body


def drop_none(params: Dict[str, Any]) -> Dict[str, Any]:
    """Query parameters without the unset ones."""
    return {k: v for k, v in params.items() if v is not None}


class BaseService:
    """One resource of the API, sharing the owning client's connection."""

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    async def _request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        response = await self._http.request(method, path, params=drop_none(params or {}), **kwargs)
        return unwrap(response)
