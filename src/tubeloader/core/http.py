"""Shared HTTP session setup."""

from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_TIMEOUT = 30  # seconds


def build_session(user_agent: Optional[str] = DEFAULT_USER_AGENT) -> requests.Session:
    """Create a session that makes exactly one attempt per request."""
    session = requests.Session()
    no_retries = Retry(total=0, read=False)
    session.mount("https://", HTTPAdapter(max_retries=no_retries))
    session.mount("http://", HTTPAdapter(max_retries=no_retries))
    if user_agent:
        session.headers.update({"User-Agent": user_agent})
    return session


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300
