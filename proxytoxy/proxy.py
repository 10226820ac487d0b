"""Proxy records, anonymity checks and concurrent verification."""

from __future__ import annotations

import http.client
import socket
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Iterator
from urllib.parse import urlsplit

import requests

IDENT_URL = "http://ident.me"
DEFAULT_TIMEOUT = 15.0
MAX_WORKERS = 64

_SUPPORTED_TYPES = ("socks5", "http")


class Range(IntEnum):
    """How well a proxy hides the address of its user."""

    ANONYMOUS = 0
    ELITE = 1
    NOT_ANONYMOUS = 2

    @property
    def label(self) -> str:
        return _RANGE_LABELS[self]

    def __str__(self) -> str:
        return self.label


_RANGE_LABELS = {
    Range.ANONYMOUS: "Anonymous",
    Range.ELITE: "Elite",
    Range.NOT_ANONYMOUS: "NotAnonymous",
}


class ProxyCheckError(Exception):
    """A proxy check failed; ``kind`` tells which stage failed."""

    RESPONSE = "response"
    IP_CHECK = "ip_check"
    RANGE = "range"
    CLIENT = "client"

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


@dataclass
class Proxy:
    """A proxy server found at some provider."""

    addr: str
    port: str
    country: str
    type: str
    range: Range = Range.ANONYMOUS

    def __post_init__(self) -> None:
        self.range = Range(self.range)

    def full_addr(self) -> str:
        return f"{self.addr}:{self.port}"

    def __str__(self) -> str:
        return f"{self.addr}:{self.port} {self.country} {self.type} {self.range.label}"

    def check(self) -> None:
        """Verify that the proxy responds and hides our address.

        Raises ProxyCheckError when a stage of the check fails. Proxies of
        a type that cannot be checked pass without a request through them.
        """
        address = self.full_addr()
        try:
            own_ip = fetch_ip(None, None)
        except (ValueError, OSError, requests.RequestException, http.client.HTTPException) as exc:
            raise ProxyCheckError(
                ProxyCheckError.IP_CHECK,
                f"My ip cannot be checked: {IDENT_URL} error",
            ) from exc

        if self.type not in _SUPPORTED_TYPES:
            return

        try:
            seen_ip = fetch_ip(self.type, address)
        except ValueError as exc:
            raise ProxyCheckError(
                ProxyCheckError.CLIENT, "Error of proxy's address parsing"
            ) from exc
        except (OSError, requests.RequestException, http.client.HTTPException) as exc:
            raise ProxyCheckError(
                ProxyCheckError.RESPONSE, f"Proxy host not responding: {address}"
            ) from exc

        if seen_ip == own_ip:
            raise ProxyCheckError(
                ProxyCheckError.RANGE, f"Proxy host did not change my ip: {address}"
            )


def _split_address(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep or not host or not port.isdigit() or not 0 < int(port) < 65536:
        raise ValueError(f"invalid proxy address: {address!r}")
    return host, int(port)


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    data = bytearray()
    while len(data) < size:
        chunk = sock.recv(size - len(data))
        if not chunk:
            raise ConnectionError("connection closed by the proxy")
        data.extend(chunk)
    return bytes(data)


def _socks5_get(address: str, url: str, timeout: float) -> str:
    host, port = _split_address(address)
    target = urlsplit(url)
    target_host = target.hostname or ""
    target_port = target.port or 80
    path = target.path or "/"

    with socket.create_connection((host, port), timeout=timeout) as sock:
        sock.sendall(b"\x05\x01\x00")
        if _recv_exact(sock, 2) != b"\x05\x00":
            raise ConnectionError("SOCKS5 proxy refused the handshake")

        name = target_host.encode("idna")
        sock.sendall(
            b"\x05\x01\x00\x03" + bytes([len(name)]) + name + target_port.to_bytes(2, "big")
        )
        reply = _recv_exact(sock, 4)
        if reply[0] != 5 or reply[1] != 0:
            raise ConnectionError(f"SOCKS5 connect failed with code {reply[1]}")
        address_type = reply[3]
        if address_type == 1:
            bound_size = 4
        elif address_type == 4:
            bound_size = 16
        elif address_type == 3:
            bound_size = _recv_exact(sock, 1)[0]
        else:
            raise ConnectionError(f"SOCKS5 reply has unknown address type {address_type}")
        _recv_exact(sock, bound_size + 2)

        request = (
            f"GET {path} HTTP/1.1\r\n"
            f"Host: {target_host}\r\n"
            "User-Agent: proxytoxy\r\n"
            "Accept: */*\r\n"
            "Connection: close\r\n\r\n"
        )
        sock.sendall(request.encode("ascii"))
        response = http.client.HTTPResponse(sock)
        try:
            response.begin()
            body = response.read()
        finally:
            response.close()
    return body.decode("utf-8", errors="replace")


def fetch_ip(proxy_type: str | None, address: str | None, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Return the address the ident service sees, optionally through a proxy.

    Raises ValueError for an unusable proxy address or type, and a network
    error when the service or the proxy cannot be reached.
    """
    if proxy_type is None:
        return requests.get(IDENT_URL, timeout=timeout).text
    if proxy_type == "socks5":
        return _socks5_get(address or "", IDENT_URL, timeout)
    if proxy_type == "http":
        _split_address(address or "")
        proxy_url = f"http://{address}"
        return requests.get(
            IDENT_URL,
            proxies={"http": proxy_url, "https": proxy_url},
            timeout=timeout,
        ).text
    raise ValueError(f"unsupported proxy type: {proxy_type!r}")


def select_checked(
    results: Iterable[tuple[Proxy, ProxyCheckError | None]], anon_flag: bool
) -> list[Proxy]:
    """Keep every proxy that responded.

    Proxies that did not hide the address are marked NOT_ANONYMOUS; with
    ``anon_flag`` they are listed an extra time.
    """
    selected: list[Proxy] = []
    for proxy, error in results:
        kind = error.kind if error is not None else None
        if kind == ProxyCheckError.RESPONSE:
            continue
        if kind == ProxyCheckError.RANGE:
            proxy.range = Range.NOT_ANONYMOUS
            if anon_flag:
                selected.append(proxy)
        selected.append(proxy)
    return selected


def _outcome(proxy: Proxy) -> ProxyCheckError | None:
    try:
        proxy.check()
    except ProxyCheckError as exc:
        return exc
    return None


def _checked(proxies: list[Proxy]) -> Iterator[tuple[Proxy, ProxyCheckError | None]]:
    if not proxies:
        return
    with ThreadPoolExecutor(max_workers=min(MAX_WORKERS, len(proxies))) as pool:
        futures = {pool.submit(_outcome, proxy): proxy for proxy in proxies}
        for future in as_completed(futures):
            yield futures[future], future.result()


def check_proxies(proxies: Iterable[Proxy], anon_flag: bool) -> list[Proxy]:
    """Check all proxies concurrently; results come in completion order."""
    return select_checked(_checked(list(proxies)), anon_flag)