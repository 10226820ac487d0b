"""Scraper for the xseo proxy list, fetched with a form post."""

from __future__ import annotations

from bs4 import BeautifulSoup
from bs4.element import Tag

from proxytoxy.collector import Collector
from proxytoxy.parsing import UNKNOWN_COUNTRY, compare_slices, decode_port, parse_country
from proxytoxy.proxy import Proxy, Range

TITLE_ROW = (
    "IP адрес и порт proxy",
    "Хостнейм",
    "Тип",
    "*Анонимность",
    "Страна",
    "Дата проверки",
)

FORM_DATA = {"action": "/proxylist", "method": "post"}

_RANGE_MARKS = {"да": Range.ANONYMOUS, "да+": Range.ELITE}


def _script_text(tag: Tag) -> str:
    return (tag.string or "").strip()


def parse_page(html: str) -> list[Proxy]:
    """Proxies from the page's table rows, ``cls81`` rows before ``cls8`` rows.

    A row whose anonymity mark is not recognised keeps the level of the
    row before it.
    """
    soup = BeautifulSoup(html, "html.parser")
    body_scripts = soup.body.find_all("script") if soup.body else []
    digits = _script_text(body_scripts[0]) if body_scripts else ""

    proxies = []
    level = Range.ANONYMOUS
    for row in (*soup.select(".cls81"), *soup.select(".cls8")):
        fields = [cell.get_text().strip() for cell in row.find_all("td")]
        if compare_slices(TITLE_ROW, fields):
            continue
        port = decode_port(digits, "".join(_script_text(s) for s in row.find_all("script")))
        ip = fields[0].split(":")[0]
        proxy_type = fields[2].lower()
        level = _RANGE_MARKS.get(fields[3], level)
        country = parse_country(fields[4].split(" ")[0])
        if country != UNKNOWN_COUNTRY:
            proxies.append(Proxy(ip, port, country, proxy_type, level))
    return proxies


def scrape(url: str, collector: Collector) -> list[Proxy]:
    """Post the list form and collect the proxies of the answer."""
    page = collector.post(url, FORM_DATA)
    if page is None:
        return []
    return parse_page(page.text)