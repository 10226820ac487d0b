"""The program: collect, filter, check and print proxies."""

from __future__ import annotations

import os
import sys
from typing import Callable, Iterable, Sequence, TextIO

from proxytoxy.cli import USAGE, HelpRequested, Task, UsageError, parse_args
from proxytoxy.proxy import Proxy, check_proxies
from proxytoxy.spider import Spider

Checker = Callable[[list[Proxy], bool], "list[Proxy]"]


def read_proxy_file(path: str) -> list[str]:
    """The lines of a file, without their line endings."""
    with open(path, encoding="utf-8") as handle:
        return [line.rstrip("\n") for line in handle]


def format_proxy(proxy: Proxy, short: bool) -> str:
    """Address and port only when short, the full description otherwise."""
    return proxy.full_addr() if short else str(proxy)


def write_to_file(proxies: Iterable[Proxy], task: Task) -> None:
    """Write one proxy per line to ``task.to_file``.

    The file is created when missing and written from its start without
    being truncated first.
    """
    fd = os.open(task.to_file, os.O_RDWR | os.O_CREAT, 0o666)
    with open(fd, "w", encoding="utf-8") as handle:
        for proxy in proxies:
            handle.write(format_proxy(proxy, task.short) + "\n")


class App:
    """Ties the spider, the checker and the output together."""

    def __init__(
        self,
        spider: Spider | None = None,
        checker: Checker | None = None,
        out: TextIO | None = None,
    ) -> None:
        self.spider = spider if spider is not None else Spider()
        self.checker = checker if checker is not None else check_proxies
        self.out = out

    def run(self, task: Task) -> list[Proxy]:
        """Collect proxies matching the task, check them and print at most ``task.number``."""
        if task.proxy_file:
            task.proxies = read_proxy_file(task.proxy_file)

        collected = self.spider.collect_all(task.proxies)
        useful = [p for p in collected if p.country == task.country and p.type == task.type]
        proxies = list(self.checker(useful, task.anon))[: task.number]

        out = self.out if self.out is not None else sys.stdout
        for proxy in proxies:
            print(format_proxy(proxy, task.short), file=out)

        if task.to_file:
            write_to_file(proxies, task)
        return proxies


def main(argv: Sequence[str] | None = None) -> int:
    """Command entry point; returns the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        task = parse_args(args)
    except HelpRequested:
        print(USAGE)
        return 0
    except UsageError as exc:
        print(USAGE)
        print(exc, file=sys.stderr)
        return 1

    try:
        App().run(task)
    except (OSError, ValueError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())