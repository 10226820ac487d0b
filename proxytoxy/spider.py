"""Runs every provider scraper and merges their proxies."""

from __future__ import annotations

from typing import Callable, Iterable, Mapping

from proxytoxy.collector import Collector
from proxytoxy.providers import myproxy, nntime, proxylistplus, xseo
from proxytoxy.proxy import Proxy

ProviderFunc = Callable[[str, Collector], "list[Proxy]"]


def provider_funcs() -> dict[str, ProviderFunc]:
    """The start URL of each provider mapped to the scraper that reads it."""
    return {
        "https://xseo.in/proxylist": xseo.scrape,
        "http://nntime.com": nntime.scrape,
        "https://www.my-proxy.com/free-socks-5-proxy.html": myproxy.scrape,
        "https://list.proxylistplus.com/Socks-List-1": proxylistplus.scrape,
    }


def deduplicate(groups: Iterable[Iterable[Proxy]]) -> list[Proxy]:
    """Flatten the groups, keeping the first proxy seen for each address."""
    seen: set[str] = set()
    unique: list[Proxy] = []
    for group in groups:
        for proxy in group:
            address = proxy.full_addr()
            if address not in seen:
                seen.add(address)
                unique.append(proxy)
    return unique


class Spider:
    """Collects proxies from a set of providers."""

    def __init__(self, providers: Mapping[str, ProviderFunc] | None = None) -> None:
        self.providers = dict(providers) if providers is not None else provider_funcs()

    def collect_all(self, collector_proxies: Iterable[str] | None = None) -> list[Proxy]:
        """Scrape every provider, each with its own collector, and merge the results.

        ``collector_proxies`` are proxy URLs the requests rotate through;
        an invalid one raises ValueError.
        """
        collector = Collector(collector_proxies)
        groups = [scrape(url, collector.clone()) for url, scrape in self.providers.items()]
        proxies = deduplicate(groups)
        print(f"{len(proxies)} proxies collected. We must to check them before use.")
        return proxies