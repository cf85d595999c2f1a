"""
Relay service for executing described HTTP requests.

This service sends the outbound request using httpx, measures how long
it took and how large the body was, and folds every transport failure
into a regular response envelope instead of raising.
"""

import json
import logging
import math
import time
from typing import Any
from urllib.parse import urlencode

import httpx

from ..schemas.proxy import ProxyRequest, ProxyResponse


logger = logging.getLogger(__name__)

# Status reported when the upstream server never answered
FAILURE_STATUS = 500
FAILURE_STATUS_TEXT = "Error"


def build_url(url: str, params: dict[str, str] | None) -> str:
    """
    Append query parameters to a URL.

    Args:
        url: Target URL, possibly already carrying a query string
        params: Query parameters to append

    Returns:
        The URL with the encoded parameters joined by ``&`` or ``?``
    """
    if not params:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode(params)}"


def normalize_headers(headers: httpx.Headers) -> dict[str, Any]:
    """
    Convert response headers to a plain dict.

    Headers that occur more than once (e.g. ``set-cookie``) are reported
    as a list of their values, in the order they were received.
    """
    normalized: dict[str, Any] = {}
    for key, value in headers.multi_items():
        if key not in normalized:
            normalized[key] = value
        elif isinstance(normalized[key], list):
            normalized[key].append(value)
        else:
            normalized[key] = [normalized[key], value]
    return normalized


def _reject_constant(token: str) -> Any:
    raise ValueError(f"non-standard JSON constant {token}")


def _parse_finite_float(token: str) -> float:
    value = float(token)
    if not math.isfinite(value):
        raise ValueError(f"number out of range {token}")
    return value


def parse_body(text: str) -> Any:
    """
    Return the response body as JSON data when it decodes, else as raw text.

    Bodies using NaN, Infinity or numbers that overflow a float are kept as
    text, since they have no standard JSON form to send back.
    """
    if not text:
        return text
    try:
        return json.loads(
            text,
            parse_constant=_reject_constant,
            parse_float=_parse_finite_float
        )
    except (json.JSONDecodeError, ValueError):
        return text


def measure_size(data: Any) -> int:
    """
    Byte length of a body in its canonical textual form.

    Strings are measured as-is; anything else is measured as compact JSON.
    """
    if isinstance(data, str):
        serialized = data
    else:
        serialized = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
    return len(serialized.encode("utf-8"))


def _elapsed_ms(start_time: float) -> int:
    return int((time.perf_counter() - start_time) * 1000)


def _error_response(
    error: str,
    error_type: str,
    exc: Exception,
    response_time: int
) -> ProxyResponse:
    """Build the envelope returned when the request could not be completed."""
    # httpx.HTTPStatusError and similar errors carry the upstream response
    upstream = getattr(exc, "response", None)
    if not isinstance(upstream, httpx.Response):
        upstream = None
    message = f"{error}: {exc}" if str(exc) else error

    if upstream is not None:
        return ProxyResponse(
            status=upstream.status_code,
            status_text=upstream.reason_phrase or FAILURE_STATUS_TEXT,
            headers=normalize_headers(upstream.headers),
            data={
                "error": message,
                "error_type": error_type,
                "details": parse_body(upstream.text),
            },
            response_time=response_time,
            size=0
        )

    return ProxyResponse(
        status=FAILURE_STATUS,
        status_text=FAILURE_STATUS_TEXT,
        headers={},
        data={"error": message, "error_type": error_type, "details": None},
        response_time=response_time,
        size=0
    )


async def execute(request: ProxyRequest) -> ProxyResponse:
    """
    Execute a described HTTP request and return the response envelope.

    Every upstream status code counts as a successful relay. Only failures
    that prevent the call from completing produce an error envelope, and
    those are returned rather than raised.

    Args:
        request: The request description to execute

    Returns:
        ProxyResponse describing the upstream response or the failure
    """
    start_time = time.perf_counter()
    url = build_url(request.url, request.params)
    headers = dict(request.headers or {})

    # Prepare body: text is sent verbatim, structured data as JSON
    content: str | None = None
    json_body: Any | None = None
    if isinstance(request.body, str):
        content = request.body
    elif request.body is not None:
        json_body = request.body

    logger.debug("Relaying %s %s", request.method, url)

    try:
        async with httpx.AsyncClient(timeout=None, follow_redirects=True) as client:
            response = await client.request(
                method=request.method,
                url=url,
                headers=headers,
                content=content,
                json=json_body
            )

        response_time = _elapsed_ms(start_time)
        data = parse_body(response.text)

        return ProxyResponse(
            status=response.status_code,
            status_text=response.reason_phrase or "",
            headers=normalize_headers(response.headers),
            data=data,
            response_time=response_time,
            size=measure_size(data)
        )

    except httpx.TimeoutException as e:
        logger.warning("Relay to %s timed out: %s", url, e)
        return _error_response("Request timed out", "timeout", e, _elapsed_ms(start_time))
    except httpx.ConnectError as e:
        logger.warning("Relay to %s could not connect: %s", url, e)
        return _error_response(
            "Failed to connect to server", "network_error", e, _elapsed_ms(start_time)
        )
    except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
        logger.warning("Relay rejected URL %s: %s", url, e)
        return _error_response("Invalid URL", "invalid_url", e, _elapsed_ms(start_time))
    except httpx.HTTPError as e:
        logger.warning("Relay to %s failed: %s", url, e)
        return _error_response(
            "HTTP error occurred", "network_error", e, _elapsed_ms(start_time)
        )
    except Exception as e:
        logger.exception("Unexpected error relaying %s %s", request.method, url)
        return _error_response(
            "An unexpected error occurred", "unknown", e, _elapsed_ms(start_time)
        )
