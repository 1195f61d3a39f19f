# client.py
"""
HTTP plumbing shared by every AnimeUnity operation.

The helpers here turn httpx responses into parsed documents or JSON values and
translate transport problems into ``TransportFailure`` so the parsers and the
public functions only ever deal with the ``ScraperError`` hierarchy.
"""
import json
import logging
from typing import Any, Optional

from bs4 import BeautifulSoup
from httpx import AsyncClient, AsyncHTTPTransport, HTTPStatusError, RequestError, Response

from config import settings
from session import session_state

logger = logging.getLogger(__name__)

ARCHIVE_PATH = "/archivio"
ARCHIVE_QUERY_PATH = "/archivio/get-animes"


class ScraperError(Exception):
    """Base class for everything the scraping core may raise internally."""


class TransportFailure(ScraperError):
    """Network or HTTP-level failure."""


class ParseFailure(ScraperError):
    """An expected element, attribute or JSON shape is missing or malformed."""


class NotFound(ScraperError):
    """A well-formed response that does not contain the requested entity."""


# Dependency to provide HTTP client
async def get_http_client():
    # No retries: a failed fetch turns into an empty result for that call
    transport = AsyncHTTPTransport(retries=0)
    client = AsyncClient(
        transport=transport,
        base_url=settings.base_url,
        headers={"User-Agent": settings.user_agent},
        timeout=settings.request_timeout,
        follow_redirects=True,
    )
    try:
        yield client
    finally:
        await client.aclose()


async def _send(client: AsyncClient, method: str, path: str, **kwargs) -> Response:
    write_request = kwargs.pop("write_request", False)
    try:
        request = client.build_request(method, path, **kwargs)
        if write_request:
            session_state.attach_to_write_request(request)
        else:
            # Reads never carry the session cookie, even if the client jar holds one
            request.headers.pop("Cookie", None)
        response = await client.send(request)
        response.raise_for_status()
        return response
    except HTTPStatusError as e:
        logger.warning(f"HTTP error {e.response.status_code} for {method} {path}")
        raise TransportFailure(f"{method} {path} returned {e.response.status_code}") from e
    except RequestError as e:
        logger.warning(f"Network error for {method} {path}: {e}")
        raise TransportFailure(f"{method} {path} failed: {e}") from e


async def fetch_document(client: AsyncClient, path: str) -> BeautifulSoup:
    response = await _send(client, "GET", path)
    return BeautifulSoup(response.text, 'html.parser')


async def fetch_text(client: AsyncClient, path: str) -> str:
    """Fetch a plain-text body, markup stripped and whitespace trimmed."""
    document = await fetch_document(client, path)
    return document.get_text().strip()


async def fetch_json(
    client: AsyncClient,
    path: str,
    method: str = "GET",
    body: Optional[dict] = None,
    params: Optional[dict] = None,
) -> Any:
    """
    Fetch a JSON value. Anything other than a GET is treated as a write request
    and carries the session cookie and CSRF token.
    """
    kwargs = {}
    if body is not None:
        kwargs["json"] = body
    if params is not None:
        kwargs["params"] = params
    response = await _send(client, method, path, write_request=method.upper() != "GET", **kwargs)
    try:
        return json.loads(response.text)
    except json.JSONDecodeError as e:
        raise ParseFailure(f"{method} {path} did not return JSON: {e}") from e


async def bootstrap_session(client: AsyncClient) -> BeautifulSoup:
    """Fetch the archive page and refresh the shared session state from it."""
    response = await _send(client, "GET", ARCHIVE_PATH)
    soup = session_state.record_from_bootstrap_response(response.headers, response.text)
    # The session lives in session_state only, not in the httpx cookie jar
    client.cookies.clear()
    return soup


async def query_archive(client: AsyncClient, **filters) -> list:
    """
    POST an archive query and return its ``records`` array. Filters that are not
    given are sent as ``false``, which the site reads as "no filter".
    """
    payload = {
        "title": False,
        "type": False,
        "year": False,
        "order": False,
        "status": False,
        "genres": False,
        "offset": 0,
        "dubbed": False,
        "season": False,
    }
    payload.update(filters)
    data = await fetch_json(client, ARCHIVE_QUERY_PATH, method="POST", body=payload)
    records = data.get("records") if isinstance(data, dict) else None
    if not isinstance(records, list):
        raise ParseFailure("Archive response has no 'records' array")
    return records
