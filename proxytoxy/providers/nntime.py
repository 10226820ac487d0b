"""Scraper for the nntime proxy list, whose ports are hidden behind a script."""

from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from proxytoxy.collector import Collector
from proxytoxy.parsing import UNKNOWN_COUNTRY, decode_port, parse_country
from proxytoxy.proxy import Proxy, Range


def _script_text(tag: Tag) -> str:
    return (tag.string or "").strip()


def _scripts(tag: Tag) -> str:
    return "".join(_script_text(script) for script in tag.find_all("script"))


def parse_page(html: str) -> list[Proxy]:
    """Anonymous http proxies from the page's odd rows, then its even rows."""
    soup = BeautifulSoup(html, "html.parser")
    head_scripts = soup.head.find_all("script") if soup.head else []
    digits = _script_text(head_scripts[1]) if len(head_scripts) > 1 else ""

    proxies = []
    for row in (*soup.select(".odd"), *soup.select(".even")):
        fields = [cell.get_text().strip() for cell in row.find_all("td")]
        if len(fields) < 5:
            continue
        port = decode_port(digits, _scripts(row))
        ip = fields[1].split("d")[0]
        country = parse_country(fields[4].split(" ")[0])
        if country != UNKNOWN_COUNTRY:
            proxies.append(Proxy(ip, port, country, "http", Range.ANONYMOUS))
    return proxies


def page_links(html: str, base_url: str) -> list[str]:
    """Absolute URLs of every link in the page navigation."""
    soup = BeautifulSoup(html, "html.parser")
    return [urljoin(base_url, anchor["href"]) for anchor in soup.select("#navigation a[href]")]


def scrape(url: str, collector: Collector) -> list[Proxy]:
    """Collect proxies from the start page and every page it navigates to."""
    proxies: list[Proxy] = []

    def visit(target: str) -> None:
        page = collector.get(target)
        if page is None:
            return
        proxies.extend(parse_page(page.text))
        for link in page_links(page.text, page.url):
            visit(link)

    visit(url)
    return proxies