"""Scraper for the proxylistplus tables."""

from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup

from proxytoxy.collector import Collector
from proxytoxy.parsing import UNKNOWN_COUNTRY, parse_country
from proxytoxy.proxy import Proxy, Range

SECOND_PAGE = "https://list.proxylistplus.com/Socks-List-2"

_SOCKS_TITLE = "Socks Proxy List - Verified"
_HTTP_TITLE = "Free  Proxy List - verified"
_PAGE_MARKER = "Fresh-HTTP-Proxy-List-"


def page_type(html: str) -> str:
    """The proxy type the page's headings announce, or an empty string."""
    found = ""
    for heading in BeautifulSoup(html, "html.parser").find_all("h3"):
        text = heading.get_text()
        if _SOCKS_TITLE in text:
            found = "socks5"
        if _HTTP_TITLE in text:
            found = "http"
    return found


def parse_page(html: str, proxy_type: str) -> list[Proxy]:
    """Anonymous proxies of the given type from the page's tables."""
    soup = BeautifulSoup(html, "html.parser")
    proxies = []
    for table in soup.select(".bg"):
        for row in table.select(".cells"):
            fields = [cell.get_text() for cell in row.find_all("td")]
            if len(fields) < 5:
                continue
            port = fields[2]
            if "\n" in port:
                parts = port.split("\n")
                port = parts[2] if len(parts) > 2 else port
            country = parse_country(fields[4])
            if country != UNKNOWN_COUNTRY:
                proxies.append(Proxy(fields[1], port, country, proxy_type, Range.ANONYMOUS))
    return proxies


def page_links(html: str, base_url: str) -> list[str]:
    """Absolute URLs of the further http list pages."""
    soup = BeautifulSoup(html, "html.parser")
    return [
        urljoin(base_url, anchor["href"])
        for anchor in soup.select(".cells a[href]")
        if _PAGE_MARKER in anchor["href"]
    ]


def scrape(url: str, collector: Collector) -> list[Proxy]:
    """Collect proxies from the start page, its linked pages and the second socks page."""
    proxies: list[Proxy] = []
    current_type = ""

    def visit(target: str) -> None:
        nonlocal current_type
        page = collector.get(target)
        if page is None:
            return
        current_type = page_type(page.text) or current_type
        proxies.extend(parse_page(page.text, current_type))
        for link in page_links(page.text, page.url):
            visit(link)

    visit(url)
    visit(SECOND_PAGE)
    return proxies