"""Shared aiohttp helpers that map transport failures onto the error taxonomy"""

import asyncio
import json
from typing import Any, Dict, Optional

import aiohttp

from ..config import HTTP_TIMEOUT_SECONDS, USER_AGENT
from ..exceptions import AuthError, NotFound, RateLimited, UpstreamUnavailable
from .logging import get_logger

logger = get_logger(__name__)


def create_session(timeout: float = HTTP_TIMEOUT_SECONDS, headers: Optional[Dict[str, str]] = None) -> aiohttp.ClientSession:
    """Create a request-scoped aiohttp session with a bounded timeout"""
    default_headers = {'User-Agent': USER_AGENT}
    if headers:
        default_headers.update(headers)
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=timeout),
        headers=default_headers
    )


def raise_for_status(status: int, service: str, body: str = "", not_found_message: Optional[str] = None,
                     credentialed: bool = False):
    """Translate a non-success HTTP status from ``service`` into a typed error.

    401/403 only mean a bad key when a key was sent. Public services (feeds, the iTunes
    catalog, oEmbed, YouTube) answer 403 to bots, which is an upstream failure.
    """
    if 200 <= status < 300:
        return
    if credentialed and status in (401, 403):
        raise AuthError(f"{service} rejected the credential ({status}).", body)
    if status == 429:
        raise RateLimited(f"{service} rate limit reached. Try again later.", body)
    if status == 404 and not_found_message:
        raise NotFound(not_found_message, body)
    raise UpstreamUnavailable(f"{service} returned {status}", body)


async def request_body(session: aiohttp.ClientSession, method: str, url: str, service: str,
                       as_text: bool = True, **kwargs):
    """Perform a request and return the body of a 2xx response as text or raw bytes.

    ``not_found_message`` turns a 404 into ``NotFound``; ``credentialed=True`` marks
    requests that carry an API key so 401/403 surface as ``AuthError``.
    """
    not_found_message = kwargs.pop('not_found_message', None)
    credentialed = kwargs.pop('credentialed', False)
    try:
        async with session.request(method, url, **kwargs) as response:
            raw = await response.read()
            if not 200 <= response.status < 300:
                raise_for_status(response.status, service, raw.decode('utf-8', errors='replace'),
                                 not_found_message, credentialed)
            if not as_text:
                return raw
            return await response.text()
    except asyncio.TimeoutError:
        logger.warning(f"⏱️ {service} timed out: {url[:80]}")
        raise UpstreamUnavailable(f"{service} timed out.")
    except aiohttp.ClientError as e:
        logger.warning(f"❌ {service} request failed: {e}")
        raise UpstreamUnavailable(f"{service} is unreachable.", str(e))


async def fetch_bytes(session: aiohttp.ClientSession, url: str, service: str, **kwargs) -> bytes:
    """GET ``url`` and return the undecoded body, leaving charset detection to the caller"""
    return await request_body(session, 'GET', url, service, as_text=False, **kwargs)


async def fetch_json(session: aiohttp.ClientSession, url: str, service: str, method: str = 'GET', **kwargs) -> Any:
    """Request ``url`` and decode a JSON body, treating garbage as an upstream failure"""
    body = await request_body(session, method, url, service, **kwargs)
    try:
        return json.loads(body)
    except ValueError:
        raise UpstreamUnavailable(f"{service} returned a malformed response.", body)
