"""Scraper for the my-proxy socks5 lists."""

from __future__ import annotations

import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from proxytoxy.collector import Collector
from proxytoxy.parsing import UNKNOWN_COUNTRY, parse_country
from proxytoxy.proxy import Proxy, Range

_PROXY_ENTRY = re.compile(r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}:\d{1,5}#[A-Z]{2}", re.ASCII)
_IP = re.compile(r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}", re.ASCII)
_PORT = re.compile(r":\d{2,5}", re.ASCII)
_COUNTRY = re.compile(r"[A-Z]{2}")

_PAGE_MARKER = "free-proxy-list-"


def extract_proxy_strings(text: str) -> list[str]:
    """All ``ip:port#CC`` entries found in the text."""
    return _PROXY_ENTRY.findall(text)


def _first(pattern: re.Pattern[str], text: str) -> str:
    match = pattern.search(text)
    return match.group(0) if match else ""


def extract_ip(proxy_string: str) -> str:
    return _first(_IP, proxy_string)


def extract_port(proxy_string: str) -> str:
    return _first(_PORT, proxy_string).removeprefix(":")


def extract_country(proxy_string: str) -> str:
    return _first(_COUNTRY, proxy_string)


def parse_list(text: str) -> list[Proxy]:
    """Elite socks5 proxies from a list's text, skipping unknown countries."""
    proxies = []
    for entry in extract_proxy_strings(text):
        country = parse_country(extract_country(entry))
        if country != UNKNOWN_COUNTRY:
            proxies.append(
                Proxy(extract_ip(entry), extract_port(entry), country, "socks5", Range.ELITE)
            )
    return proxies


def page_links(html: str, base_url: str) -> list[str]:
    """Absolute URLs of the further list pages."""
    soup = BeautifulSoup(html, "html.parser")
    return [
        urljoin(base_url, anchor["href"])
        for anchor in soup.select(".list-group a[href]")
        if _PAGE_MARKER in anchor["href"]
    ]


def _parse_page(html: str) -> list[Proxy]:
    soup = BeautifulSoup(html, "html.parser")
    return [proxy for block in soup.select(".list") for proxy in parse_list(block.get_text())]


def scrape(url: str, collector: Collector) -> list[Proxy]:
    """Collect proxies from the start page and every list page it links to."""
    proxies: list[Proxy] = []

    def visit(target: str) -> None:
        page = collector.get(target)
        if page is None:
            return
        proxies.extend(_parse_page(page.text))
        for link in page_links(page.text, page.url):
            visit(link)

    visit(url)
    return proxies