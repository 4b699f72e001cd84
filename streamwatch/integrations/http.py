"""
Shared HTTP helpers for platform integrations.

All platform clients go through these helpers so that transport failures,
HTTP errors and undecodable bodies surface uniformly as ProbeError
subclasses.
"""

import asyncio
import json
from typing import Any, Dict, Optional, Tuple

import aiohttp

from streamwatch.core.interfaces import ProbeConnectionError, ProbeParseError

BROWSER_HEADERS = {"User-Agent": "Mozilla/5.0"}


def create_session(timeout_seconds: float = 30.0) -> aiohttp.ClientSession:
    """
    Create the shared client session.

    Args:
        timeout_seconds: Total timeout applied to every request

    Returns:
        aiohttp.ClientSession (caller closes it)
    """
    return aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout_seconds))


async def request_text(
    session: aiohttp.ClientSession,
    method: str,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Tuple[int, str, str]:
    """
    Perform a request and read the body as text.

    Returns:
        (status, final_url, body) - redirects are followed

    Raises:
        ProbeConnectionError: On transport failure or timeout
    """
    try:
        async with session.request(method, url, params=params, headers=headers,
                                   allow_redirects=True) as resp:
            body = await resp.text()
            return resp.status, str(resp.url), body
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise ProbeConnectionError(f"{method} {url} failed: {e!r}") from e


async def fetch_json(
    session: aiohttp.ClientSession,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    method: str = "GET",
) -> Any:
    """
    Perform a request and decode a JSON response.

    Raises:
        ProbeConnectionError: On transport failure or a non-2xx status
            (the response body is kept on the exception)
        ProbeParseError: If the body is not valid JSON
    """
    status, _, body = await request_text(session, method, url, params=params, headers=headers)
    if status < 200 or status >= 300:
        raise ProbeConnectionError(f"{method} {url} returned HTTP {status}", status=status, body=body)
    try:
        return json.loads(body)
    except ValueError as e:
        raise ProbeParseError(f"Invalid JSON from {url}: {e}") from e


async def fetch_page(
    session: aiohttp.ClientSession,
    url: str,
    headers: Optional[Dict[str, str]] = None,
) -> Tuple[str, str]:
    """
    Fetch an HTML page, following redirects.

    Returns:
        (final_url, html)

    Raises:
        ProbeConnectionError: On transport failure or a non-2xx status
    """
    status, final_url, body = await request_text(
        session, "GET", url, headers=headers or BROWSER_HEADERS
    )
    if status < 200 or status >= 300:
        raise ProbeConnectionError(f"GET {url} returned HTTP {status}", status=status)
    return final_url, body
