# =============================================================================
# core/http.py  —  JSON-over-HTTP helper shared by the upstream clients
# =============================================================================
#
# Every upstream service we talk to (chucknorris.io, icanhazdadjoke, USPS)
# speaks JSON.  This module wraps urllib so the clients only deal with
# parsed dicts/lists and a single exception type, UpstreamError.
# =============================================================================

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class UpstreamError(Exception):
    """An upstream HTTP call failed: transport, status code, or bad JSON."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


def fetch_json(
    url: str,
    *,
    method: str = "GET",
    params: Optional[dict[str, str]] = None,
    form: Optional[dict[str, str]] = None,
    headers: Optional[dict[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Any:
    """Make an HTTP request and return the decoded JSON body.

    Args:
        url: Absolute URL, without query string.
        method: HTTP verb.
        params: Query parameters, URL-encoded onto `url`.
        form: Body sent as application/x-www-form-urlencoded.
        headers: Extra request headers.
        timeout: Seconds before the call is abandoned.

    Raises:
        UpstreamError: On any transport error, non-2xx status, or a body
            that isn't valid JSON.
    """
    if params:
        url = f"{url}?{urllib.parse.urlencode(params)}"

    data = None
    request_headers = {"Accept": "application/json", **(headers or {})}
    if form is not None:
        data = urllib.parse.urlencode(form).encode()
        request_headers["Content-Type"] = "application/x-www-form-urlencoded"

    req = urllib.request.Request(url, data=data, headers=request_headers, method=method)

    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            body = response.read()
    except urllib.error.HTTPError as e:
        detail = _error_detail(_read_error_body(e))
        logger.warning("%s %s returned HTTP %s", method, url.split("?")[0], e.code)
        raise UpstreamError(detail or f"Request failed with status {e.code}", status=e.code) from e
    except (urllib.error.URLError, OSError, http.client.HTTPException) as e:
        logger.warning("%s %s failed: %s", method, url.split("?")[0], e)
        raise UpstreamError(f"Request failed: {e}") from e

    try:
        return json.loads(body)
    except ValueError as e:
        raise UpstreamError("Upstream returned a non-JSON response") from e


def _error_detail(body: str) -> Optional[str]:
    """Pull a human-readable message out of an error response body.

    Understands the shapes USPS uses:
        {"error": {"message": "..."}}
        {"error": {"errors": [{"text": "..."}]}}
        {"errors": [{"text": "..."}]}
        {"error_description": "..."}   (OAuth)
    """
    try:
        payload = json.loads(body)
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None

    error = payload.get("error")
    if isinstance(error, dict):
        if error.get("message"):
            return str(error["message"])
        text = first_error_text(error.get("errors"))
        if text:
            return text

    text = first_error_text(payload.get("errors"))
    if text:
        return text
    if payload.get("error_description"):
        return str(payload["error_description"])
    if isinstance(error, str) and error:
        return error
    return None


def first_error_text(errors: Any) -> Optional[str]:
    """Return errors[0].text (or .message) if `errors` is a non-empty list."""
    if not isinstance(errors, list) or not errors:
        return None
    first = errors[0]
    if not isinstance(first, dict):
        return None
    text = first.get("text") or first.get("message")
    return str(text) if text else None


def _read_error_body(error: urllib.error.HTTPError) -> str:
    try:
        return error.read().decode(errors="replace")
    except (OSError, http.client.HTTPException):
        return ""
