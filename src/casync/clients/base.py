from __future__ import annotations

from typing import Any

import httpx
import structlog

logger = structlog.get_logger()


class HTTPRequestError(Exception):
    """HTTP request failed, either in transport or with a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        method: str | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.method = method
        self.url = url

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"HTTP {self.status_code}: {self.message}"
        return self.message


def error_detail(response: httpx.Response) -> str:
    """Extract a readable message from an error response body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        error = body.get("error")
        # Graph: {"error": {"code": ..., "message": ...}}
        if isinstance(error, dict):
            code = error.get("code")
            message = error.get("message") or response.reason_phrase
            return f"{code}: {message}" if code else message
        # OAuth2: {"error": "invalid_client", "error_description": ...}
        if isinstance(error, str):
            description = body.get("error_description")
            return f"{error}: {description}" if description else error
    return response.text or response.reason_phrase


class BaseHTTPClient:
    """Base synchronous HTTP client. Requests are issued once, never retried."""

    error_class: type[HTTPRequestError] = HTTPRequestError

    def __init__(self, base_url: str, *, timeout: float = 30.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        """Override to provide custom headers."""
        return {"Content-Type": "application/json"}

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self._base_url}{path}"

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        content: str | bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Execute an HTTP request and return the successful response."""
        url = self._url(path)
        req_headers = self._headers()
        if headers:
            req_headers.update(headers)

        try:
            with httpx.Client(timeout=self._timeout) as client:
                response = client.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    data=data,
                    content=content,
                    headers=req_headers,
                )
        except httpx.HTTPError as exc:
            logger.warning("http_network_error", method=method, url=url, error=str(exc))
            raise self.error_class(str(exc), method=method, url=url) from exc

        if response.is_error:
            detail = error_detail(response)
            logger.error(
                "http_error",
                status=response.status_code,
                method=method,
                url=url,
                error=detail,
            )
            raise self.error_class(
                detail, status_code=response.status_code, method=method, url=url
            )
        return response

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Execute an HTTP request and decode its JSON body (empty dict when none)."""
        response = self._send(method, path, **kwargs)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            url = self._url(path)
            logger.error("http_invalid_body", status=response.status_code, method=method, url=url)
            raise self.error_class(
                f"Response body is not JSON: {exc}",
                status_code=response.status_code,
                method=method,
                url=url,
            ) from exc

    def get(self, path: str, *, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute GET request."""
        return self._request("GET", path, params=params)

    def post(self, path: str, *, json: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute POST request."""
        return self._request("POST", path, json=json)

    def patch(self, path: str, *, json: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute PATCH request."""
        return self._request("PATCH", path, json=json)

    def delete(self, path: str) -> dict[str, Any]:
        """Execute DELETE request."""
        return self._request("DELETE", path)
