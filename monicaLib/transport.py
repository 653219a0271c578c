from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .config import DEFAULT_BASE_URL, DEFAULT_CONNECT_TIMEOUT, DEFAULT_TIMEOUT
from .errors import MonicaApiError

__all__ = ["HttpTransport", "USER_AGENT", "HTTP_STATUS_MESSAGES"]

logger = logging.getLogger(__name__)

USER_AGENT = "monicaLib/1.0.0"

HTTP_STATUS_MESSAGES = {
    401: "Unauthorized: Invalid API key",
    403: "Forbidden: Access denied",
    404: "Not Found: Endpoint does not exist",
    429: "Rate limit exceeded",
    500: "Internal server error",
    502: "Bad gateway",
    503: "Service unavailable",
    504: "Gateway timeout",
}


class HttpTransport:
    """JSON-over-HTTP access to the Monica API.

    `post` returns the decoded body or raises MonicaApiError; `get` is for
    plain downloads and returns None instead of raising.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self.session = session or requests.Session()

    def post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        url = self._url(path)
        logger.debug("POST %s model=%s", url, body.get("model"))
        try:
            resp = self.session.post(
                url,
                headers=self._headers(),
                json=body,
                timeout=(self.connect_timeout, self.timeout),
            )
        except requests.RequestException as e:
            raise MonicaApiError(f"Network error: {e}") from e
        try:
            return self._handle_response(resp)
        finally:
            resp.close()

    def get(self, url: str, timeout: Optional[float] = None) -> Optional[bytes]:
        eff_timeout = timeout if timeout is not None else self.timeout
        try:
            resp = self.session.get(url, headers={"User-Agent": USER_AGENT}, timeout=eff_timeout)
        except requests.RequestException as e:
            logger.warning("Download of %s failed: %s", url, e)
            return None
        try:
            if not (200 <= resp.status_code < 300):
                logger.warning("Download of %s failed: HTTP %s", url, resp.status_code)
                return None
            return resp.content
        finally:
            resp.close()

    # ----- helpers -----
    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }

    def _handle_response(self, resp: requests.Response) -> Dict[str, Any]:
        status = resp.status_code
        if not (200 <= status < 300):
            raise self._status_error(resp)
        try:
            data = resp.json()
        except ValueError as e:
            raise MonicaApiError(f"Invalid JSON response: {e}", status_code=status) from e
        if not isinstance(data, dict):
            raise MonicaApiError("Invalid JSON response: expected an object", status_code=status)
        if data.get("error"):
            raise self._api_error(data, status)
        return data

    def _status_error(self, resp: requests.Response) -> MonicaApiError:
        status = resp.status_code
        try:
            data = resp.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("error"):
            return self._api_error(data, status)
        message = HTTP_STATUS_MESSAGES.get(status, f"HTTP error {status}")
        return MonicaApiError(message, status_code=status)

    @staticmethod
    def _api_error(data: Dict[str, Any], status: int) -> MonicaApiError:
        error = data["error"]
        if isinstance(error, dict):
            message = error.get("message") or "Unknown API error"
            code = str(error.get("code") or "unknown_error")
        else:
            message = str(error)
            code = "unknown_error"
        return MonicaApiError(
            f"Monica API error [{code}]: {message}",
            status_code=status,
            api_error_code=code,
            response_data=data,
        )
