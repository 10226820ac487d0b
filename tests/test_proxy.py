import socket
import threading

import pytest
import requests
import responses

from proxytoxy.proxy import (
    IDENT_URL,
    Proxy,
    ProxyCheckError,
    Range,
    check_proxies,
    fetch_ip,
    select_checked,
)


def _free_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def _recv_until(conn, marker):
    data = b""
    while marker not in data:
        chunk = conn.recv(1024)
        if not chunk:
            break
        data += chunk
    return data


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


@pytest.fixture
def socks_server():
    server = socket.socket()
    server.bind(("127.0.0.1", 0))
    server.listen(1)
    body = b"192.0.2.55"

    def serve():
        conn, _ = server.accept()
        with conn:
            conn.recv(3)
            conn.sendall(b"\x05\x00")
            head = conn.recv(5)
            conn.recv(head[4] + 2)
            conn.sendall(b"\x05\x00\x00\x01\x7f\x00\x00\x01\x00\x50")
            _recv_until(conn, b"\r\n\r\n")
            conn.sendall(
                b"HTTP/1.1 200 OK\r\nContent-Length: "
                + str(len(body)).encode()
                + b"\r\nConnection: close\r\n\r\n"
                + body
            )

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    yield server.getsockname()[1], body.decode()
    thread.join(timeout=5)
    server.close()


def test_full_addr_joins_address_and_port():
    proxy = Proxy("10.0.0.1", "8080", "DE", "http", Range.ELITE)
    assert proxy.full_addr() == "10.0.0.1:8080"


def test_str_lists_all_fields():
    proxy = Proxy("10.0.0.1", "8080", "DE", "http", Range.ELITE)
    assert str(proxy) == "10.0.0.1:8080 DE http Elite"


@pytest.mark.parametrize(
    "rank, label", [(0, "Anonymous"), (1, "Elite"), (2, "NotAnonymous")]
)
def test_range_label_in_proxy_string(rank, label):
    proxy = Proxy("10.0.0.1", "80", "US", "socks5", rank)
    assert str(proxy) == f"10.0.0.1:80 US socks5 {label}"


def test_range_accepts_plain_int():
    proxy = Proxy("10.0.0.1", "80", "US", "http", 1)
    assert proxy.range is Range.ELITE


def test_fetch_ip_direct(rsps):
    rsps.add(responses.GET, IDENT_URL, body="203.0.113.7")
    assert fetch_ip(None, None, 5) == "203.0.113.7"


def test_fetch_ip_rejects_unknown_type():
    with pytest.raises(ValueError):
        fetch_ip("ftp", "10.0.0.1:21", 1)


@pytest.mark.parametrize("address", ["nonsense", "10.0.0.1:", "10.0.0.1:port", ":80"])
def test_fetch_ip_rejects_bad_address(address):
    with pytest.raises(ValueError):
        fetch_ip("socks5", address, 1)
    with pytest.raises(ValueError):
        fetch_ip("http", address, 1)


def test_fetch_ip_through_socks5(socks_server):
    port, expected = socks_server
    assert fetch_ip("socks5", f"127.0.0.1:{port}", 5) == expected


def test_check_passes_when_ip_changes(rsps):
    rsps.add(responses.GET, IDENT_URL, body="203.0.113.1")
    rsps.add(responses.GET, IDENT_URL, body="198.51.100.2")
    proxy = Proxy("10.0.0.1", "3128", "FR", "http")
    assert proxy.check() is None
    assert len(rsps.calls) == 2


def test_check_reports_unchanged_ip(rsps):
    rsps.add(responses.GET, IDENT_URL, body="203.0.113.1")
    proxy = Proxy("10.0.0.1", "3128", "FR", "http")
    with pytest.raises(ProxyCheckError) as info:
        proxy.check()
    assert info.value.kind == ProxyCheckError.RANGE
    assert "10.0.0.1:3128" in str(info.value)


def test_check_reports_ident_failure(rsps):
    rsps.add(responses.GET, IDENT_URL, body=requests.ConnectionError("down"))
    proxy = Proxy("10.0.0.1", "3128", "FR", "http")
    with pytest.raises(ProxyCheckError) as info:
        proxy.check()
    assert info.value.kind == ProxyCheckError.IP_CHECK


def test_check_reports_dead_socks_proxy(rsps):
    rsps.add(responses.GET, IDENT_URL, body="203.0.113.1")
    proxy = Proxy("127.0.0.1", str(_free_port()), "FR", "socks5")
    with pytest.raises(ProxyCheckError) as info:
        proxy.check()
    assert info.value.kind == ProxyCheckError.RESPONSE


def test_check_reports_unparsable_address(rsps):
    rsps.add(responses.GET, IDENT_URL, body="203.0.113.1")
    proxy = Proxy("10.0.0.1", "notaport", "FR", "socks5")
    with pytest.raises(ProxyCheckError) as info:
        proxy.check()
    assert info.value.kind == ProxyCheckError.CLIENT


def test_check_of_unknown_type_only_asks_for_own_ip(rsps):
    rsps.add(responses.GET, IDENT_URL, body="203.0.113.1")
    proxy = Proxy("10.0.0.1", "80", "FR", "socks4")
    assert proxy.check() is None
    assert len(rsps.calls) == 1


def _error(kind):
    return ProxyCheckError(kind, kind)


def test_select_checked_drops_dead_proxies():
    alive = Proxy("10.0.0.1", "80", "US", "http")
    dead = Proxy("10.0.0.2", "80", "US", "http")
    result = select_checked([(alive, None), (dead, _error(ProxyCheckError.RESPONSE))], False)
    assert result == [alive]


def test_select_checked_marks_non_anonymous():
    leaky = Proxy("10.0.0.3", "80", "US", "http", Range.ELITE)
    result = select_checked([(leaky, _error(ProxyCheckError.RANGE))], False)
    assert result == [leaky]
    assert leaky.range is Range.NOT_ANONYMOUS


def test_select_checked_with_anon_flag_lists_non_anonymous_twice():
    leaky = Proxy("10.0.0.3", "80", "US", "http")
    result = select_checked([(leaky, _error(ProxyCheckError.RANGE))], True)
    assert result == [leaky, leaky]


@pytest.mark.parametrize("kind", [ProxyCheckError.IP_CHECK, ProxyCheckError.CLIENT])
def test_select_checked_keeps_other_failures(kind):
    proxy = Proxy("10.0.0.4", "80", "US", "http")
    assert select_checked([(proxy, _error(kind))], False) == [proxy]


def test_check_proxies_of_nothing():
    assert check_proxies([], True) == []


@pytest.mark.parametrize("anon_flag, copies", [(False, 1), (True, 2)])
def test_check_proxies_concurrently(rsps, anon_flag, copies):
    rsps.add(responses.GET, IDENT_URL, body="203.0.113.1")
    leaky = [Proxy(f"10.0.1.{n}", "8080", "US", "http") for n in range(1, 4)]
    dead = Proxy("127.0.0.1", str(_free_port()), "US", "socks5")
    result = check_proxies(leaky + [dead], anon_flag)
    assert dead not in result
    assert len(result) == copies * len(leaky)
    assert {p.full_addr() for p in result} == {p.full_addr() for p in leaky}
    assert all(p.range is Range.NOT_ANONYMOUS for p in result)