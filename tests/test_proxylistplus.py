import pytest
import responses

from proxytoxy.collector import Collector
from proxytoxy.providers.proxylistplus import (
    SECOND_PAGE,
    page_links,
    page_type,
    parse_page,
    scrape,
)
from proxytoxy.proxy import Proxy, Range

START = "https://list.proxylistplus.com/Socks-List-1"
HTTP_PAGE = "https://list.proxylistplus.com/Fresh-HTTP-Proxy-List-1"

SOCKS_H3 = "<h3>Socks Proxy List - Verified</h3>"
HTTP_H3 = "<h3>Free  Proxy List - verified</h3>"


def cells(ip, port, country):
    return (
        f'<tr class="cells"><td>1</td><td>{ip}</td><td>{port}</td>'
        f"<td>kind</td><td>{country}</td></tr>"
    )


def table(rows):
    return f'<table class="bg"><tr class="cells"><th>No</th></tr>{rows}</table>'


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


def test_page_type_socks():
    assert page_type(SOCKS_H3) == "socks5"


def test_page_type_http():
    assert page_type(HTTP_H3) == "http"


def test_page_type_unknown():
    assert page_type("<h3>Something else</h3>") == ""


def test_parse_page_rows():
    html = table(cells("1.2.3.4", "1080", "US") + cells("5.6.7.8", "8080", "DE"))
    assert parse_page(html, "socks5") == [
        Proxy("1.2.3.4", "1080", "US", "socks5", Range.ANONYMOUS),
        Proxy("5.6.7.8", "8080", "DE", "socks5", Range.ANONYMOUS),
    ]


def test_parse_page_port_with_newlines():
    html = table(cells("1.2.3.4", "\n  \n3128\n", "US"))
    assert [p.port for p in parse_page(html, "http")] == ["3128"]


def test_parse_page_skips_unknown_country():
    html = table(cells("1.2.3.4", "1080", "Atlantis") + cells("5.6.7.8", "80", "Germany"))
    assert [(p.addr, p.country) for p in parse_page(html, "http")] == [("5.6.7.8", "DE")]


def test_page_links_filters():
    html = (
        '<table><tr class="cells"><td><a href="/Fresh-HTTP-Proxy-List-1">1</a>'
        '<a href="/about">about</a></td></tr></table>'
    )
    assert page_links(html, START) == [HTTP_PAGE]


def test_scrape_visits_linked_and_second_page(rsps):
    first = (
        SOCKS_H3
        + table(cells("1.2.3.4", "1080", "US"))
        + '<table><tr class="cells"><td><a href="Fresh-HTTP-Proxy-List-1">h</a></td></tr></table>'
    )
    rsps.add(responses.GET, START, body=first, status=200)
    rsps.add(
        responses.GET, HTTP_PAGE, body=HTTP_H3 + table(cells("5.6.7.8", "80", "DE")), status=200
    )
    rsps.add(
        responses.GET,
        SECOND_PAGE,
        body=SOCKS_H3 + table(cells("9.9.9.9", "1081", "FR")),
        status=200,
    )
    proxies = scrape(START, Collector(delay=0, random_delay=0))
    assert [(p.addr, p.type) for p in proxies] == [
        ("1.2.3.4", "socks5"),
        ("5.6.7.8", "http"),
        ("9.9.9.9", "socks5"),
    ]
    assert len(rsps.calls) == 3