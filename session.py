# session.py
"""
Anti-forgery state scraped from the archive page.

The archive endpoint only answers write requests that replay the cookies and
the CSRF token handed out by the last ``GET /archivio``. The state lives at
module level and is shared by every caller in the process.

Known race: there is no lock. A bootstrap fetch that lands while another
call is building its write request can pair a fresh cookie with a stale
token (or the reverse). The archive queries are idempotent reads, so a bad
pair only costs that one call an empty result.
"""
import logging
from typing import Iterable

from bs4 import BeautifulSoup
from httpx import Headers, Request

logger = logging.getLogger(__name__)

CSRF_HEADER = "X-CSRF-TOKEN"


class SessionState:
    def __init__(self) -> None:
        self.cookie_header = ""
        self.csrf_token = ""

    def record_from_bootstrap_response(self, headers: Headers, body: str) -> BeautifulSoup:
        """
        Replace the stored cookie header and CSRF token with the ones carried by
        a bootstrap response. Returns the parsed document so callers don't have
        to parse the body twice.
        """
        self.cookie_header = join_set_cookie_headers(headers.get_list("set-cookie"))

        soup = BeautifulSoup(body, 'html.parser')
        csrf_meta = soup.find('meta', attrs={'name': 'csrf-token'})
        self.csrf_token = (csrf_meta.get('content') or "") if csrf_meta else ""

        if not self.csrf_token:
            logger.warning("Bootstrap response carried no csrf-token meta tag")
        logger.debug(f"Session refreshed: {len(self.cookie_header)} cookie chars, token present: {bool(self.csrf_token)}")
        return soup

    def attach_to_write_request(self, request: Request) -> Request:
        request.headers["Cookie"] = self.cookie_header
        request.headers[CSRF_HEADER] = self.csrf_token
        return request


def join_set_cookie_headers(set_cookies: Iterable[str]) -> str:
    # Keep only "name=value", attributes like Path or HttpOnly are dropped
    pairs = [cookie.split(';', 1)[0].strip() for cookie in set_cookies]
    return "; ".join(pair for pair in pairs if pair)


session_state = SessionState()
