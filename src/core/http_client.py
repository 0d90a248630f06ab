#!/usr/bin/env python3
"""
HTTP client with bounded retries and exponential backoff.

Every source adapter goes through this client. Transport failures never
escape as exceptions: after the last attempt the caller gets None.
"""

import time
import logging
from typing import Any, Callable, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "DailyLessons/1.0"


class RetryingHttpClient:
    """requests.Session wrapper that retries non-2xx and transport errors."""

    def __init__(self,
                 retries: int = 3,
                 base_delay_ms: int = 1000,
                 timeout: int = 15,
                 user_agent: str = DEFAULT_USER_AGENT,
                 session: Optional[requests.Session] = None,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initialize HTTP client.

        Args:
            retries: Total attempts per request (not extra attempts)
            base_delay_ms: Backoff unit; attempt n waits base_delay_ms * 2**n
            timeout: Per-attempt request timeout in seconds
            user_agent: User-Agent header sent with every request
            session: Optional pre-built session (tests pass a fake)
            sleep: Sleep function taking seconds

        Raises:
            ValueError: If retries or base_delay_ms are out of range
        """
        if retries < 1:
            raise ValueError(f"retries must be at least 1, got {retries}")
        if base_delay_ms < 0:
            raise ValueError(f"base_delay_ms must not be negative, got {base_delay_ms}")

        self.retries = retries
        self.base_delay_ms = base_delay_ms
        self.timeout = timeout
        self._sleep = sleep

        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept": "application/json, application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8",
        })

    def backoff_seconds(self, attempt: int) -> float:
        """Delay after the given 0-based attempt, in seconds."""
        return self.base_delay_ms * (2 ** attempt) / 1000.0

    def request(self, method: str, url: str, **kwargs: Any) -> Optional[requests.Response]:
        """
        Perform a request, retrying on failure.

        Args:
            method: HTTP method
            url: Target URL
            **kwargs: Passed through to requests (params, json, verify, ...)

        Returns:
            The first response with a 2xx status, or None once all
            attempts are exhausted
        """
        kwargs.setdefault('timeout', self.timeout)

        for attempt in range(self.retries):
            try:
                response = self.session.request(method, url, **kwargs)
                if 200 <= response.status_code < 300:
                    if attempt > 0:
                        logger.info(f"{method} {url} succeeded on attempt {attempt + 1}/{self.retries}")
                    return response
                cause = f"HTTP {response.status_code}"
            except requests.exceptions.RequestException as e:
                cause = f"{e.__class__.__name__}: {e}"

            logger.warning(f"{method} {url} failed (attempt {attempt + 1}/{self.retries}): {cause}")

            if attempt < self.retries - 1:
                delay = self.backoff_seconds(attempt)
                logger.debug(f"Backing off {delay:.2f}s before retrying {url}")
                self._sleep(delay)

        logger.error(f"Giving up on {method} {url} after {self.retries} attempts")
        return None

    def get(self, url: str, **kwargs: Any) -> Optional[requests.Response]:
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> Optional[requests.Response]:
        return self.request("POST", url, **kwargs)

    def close(self) -> None:
        self.session.close()
