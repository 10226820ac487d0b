"""A small page fetcher with proxy rotation, politeness delays and revisit checks."""

from __future__ import annotations

import random
import threading
import time
from dataclasses import dataclass
from typing import Iterable, Mapping
from urllib.parse import urlsplit

import requests

from proxytoxy.proxy import DEFAULT_TIMEOUT

# Responses with this status or above count as failures.
_ERROR_STATUS = 203


@dataclass(frozen=True)
class Page:
    """A fetched page: its final URL and its decoded text."""

    url: str
    text: str


def _checked_proxy_url(proxy_url: str) -> str:
    parts = urlsplit(proxy_url)
    if not parts.scheme or not parts.hostname:
        raise ValueError(f"invalid proxy URL: {proxy_url!r}")
    return proxy_url


class _RoundRobin:
    """Hands out proxy URLs in turn; safe to share between threads."""

    def __init__(self, proxy_urls: tuple[str, ...]) -> None:
        self._urls = proxy_urls
        self._position = 0
        self._lock = threading.Lock()

    def next(self) -> str | None:
        if not self._urls:
            return None
        with self._lock:
            url = self._urls[self._position % len(self._urls)]
            self._position += 1
        return url


class Collector:
    """Fetches pages once each, optionally through rotating proxies."""

    def __init__(
        self,
        proxies: Iterable[str] | None = None,
        parallelism: int = 2,
        delay: float = 1.0,
        random_delay: float = 2.0,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if parallelism < 1:
            raise ValueError("parallelism must be at least 1")
        if delay < 0 or random_delay < 0:
            raise ValueError("delays must not be negative")
        self.proxies = tuple(_checked_proxy_url(p) for p in proxies or ())
        self.parallelism = parallelism
        self.delay = delay
        self.random_delay = random_delay
        self.timeout = timeout
        self._rotation = _RoundRobin(self.proxies)
        self._slots = threading.BoundedSemaphore(parallelism)
        self._session = requests.Session()
        self._visited: set[str] = set()
        self._visited_lock = threading.Lock()

    def clone(self) -> Collector:
        """A collector with the same settings, proxy rotation and request slots,
        but its own record of visited pages."""
        twin = Collector(
            self.proxies, self.parallelism, self.delay, self.random_delay, self.timeout
        )
        twin._rotation = self._rotation
        twin._slots = self._slots
        return twin

    def get(self, url: str) -> Page | None:
        """Fetch a page; None when it was visited before or the request failed."""
        with self._visited_lock:
            if url in self._visited:
                return None
            self._visited.add(url)
        return self._fetch("GET", url)

    def post(self, url: str, data: Mapping[str, str]) -> Page | None:
        """Submit form data; None when the request failed."""
        return self._fetch("POST", url, dict(data))

    def _pause(self) -> None:
        pause = self.delay
        if self.random_delay:
            pause += random.uniform(0, self.random_delay)
        if pause > 0:
            time.sleep(pause)

    def _fetch(self, method: str, url: str, data: dict[str, str] | None = None) -> Page | None:
        print("Visiting", url)
        self._pause()
        proxy_url = self._rotation.next()
        proxies = {"http": proxy_url, "https": proxy_url} if proxy_url else None
        status = None
        try:
            with self._slots:
                response = self._session.request(
                    method, url, data=data, proxies=proxies, timeout=self.timeout
                )
            status = response.status_code
            if status >= _ERROR_STATUS:
                raise requests.HTTPError(f"{status} status for {url}")
        except requests.RequestException as exc:
            print("Request URL:", url, "failed with response:", status, "\nError:", exc)
            return None
        return Page(response.url, response.text)