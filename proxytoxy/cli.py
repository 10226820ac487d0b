"""Command-line option parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Sequence

USAGE = """
proxytoxy - fast collector of free proxies

Usage: proxytoxy [OPTIONS] [ARGS]

Options:

-h | --help    read this message

-c [STRING] | --country [STRING]      The proxy's country. Required.
-n [NUM]    | --number  [NUM]         The number of proxies. Required.
-t [STRING] | --type    [STRING]      The proxy's type. Required.
Allowed types: "socks5", "http".

-p [ARGS...] | --proxies [ARGS...]    One or more socks5 proxies separated by commas
for crawling sites of providers. Format of proxies: "socks5://IP:PORT".
Not required option.

-P [PATH]    | --proxy-file           Get proxies for crawler from file.
This option can't be set with "-p" option together.

-a           | --anon                 If during the proxy check it turns out that
the proxy does not hide the IP, such a proxy WILL BE included in the
app output anyway.

-s           | --short                  Print proxy address and port only
"""

ARG_MISSING = "Argument is missing"
PROXIES_CONFLICT = "--proxies and --proxy-file: only one option allowed"

_HELP = re.compile(r"-h|--help")
# The anon flag also selects the short output format.
_ANON = re.compile(r"-a|--anon")
_NUMBER = re.compile(r"(?:-n|--number) ?(?P<number>\b\d+\b)", re.ASCII)
_TYPE = re.compile(r"(?:-t|--type) ?(?P<type>socks5|http)")
_COUNTRY = re.compile(r"(?:-c|--country) ?(?P<country>[A-Z]{2})")
_PROXIES = re.compile(
    r"(?:-p|--proxies) ?(?P<proxy>(?:socks5://(?:\d{1,3}\.?){4}:\d{2,5}(?:, )?)+)",
    re.ASCII,
)
_PROXY_FILE = re.compile(r"(?:-P|--proxy-file) ?.")


class UsageError(Exception):
    """The command line lacks a required option or combines forbidden ones."""


class HelpRequested(Exception):
    """The command line asks for the usage text."""


@dataclass
class Task:
    """What the user asked the program to collect."""

    type: str = ""
    country: str = ""
    number: int = 0
    max_workers: int = 0
    proxies: list[str] = field(default_factory=list)
    proxy_file: str = ""
    to_file: str = ""
    anon: bool = False
    short: bool = False


def _required(pattern: re.Pattern[str], text: str, group: str, option: str) -> str:
    match = pattern.search(text)
    if match is None:
        raise UsageError(f"{ARG_MISSING}: {option}")
    return match.group(group)


def parse_args(args: Sequence[str]) -> Task:
    """Build a Task from the command-line arguments.

    Raises HelpRequested for -h/--help and UsageError for a missing
    required option or for -p used together with -P.
    """
    text = " ".join(args)
    if _HELP.search(text):
        raise HelpRequested()

    task = Task()
    task.number = int(_required(_NUMBER, text, "number", "-n"))
    task.country = _required(_COUNTRY, text, "country", "-c")
    task.type = _required(_TYPE, text, "type", "-t")

    if _PROXIES.search(text) and _PROXY_FILE.search(text):
        raise UsageError(PROXIES_CONFLICT)
    match = _PROXIES.search(text)
    task.proxies = match.group("proxy").split(", ") if match else []

    flagged = bool(_ANON.search(text))
    task.anon = flagged
    task.short = flagged
    return task