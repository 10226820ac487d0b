# proxytoxy

A collector of free proxies. It crawls several public proxy-list sites,
keeps the proxies of the country and type you ask for, checks each one
against an IP echo service, and prints the result.

## Installation

    pip install .

## Usage

    proxytoxy -c US -t socks5 -n 10

The arguments are joined with spaces and searched for these options:

    -h | --help                  print the usage text and exit with status 0
    -c | --country CODE          two upper-case letters, required
    -n | --number NUM            print at most this many proxies, required
    -t | --type TYPE             "socks5" or "http", required
    -p | --proxies LIST          socks5 proxies the crawler's requests rotate
                                 through, in the form socks5://IP:PORT,
                                 separated by ", "
    -a | --anon                  see below

`-a` / `--anon` does two things: it switches the output to the short form
(address and port only), and it lists proxies that did not hide your IP
twice instead of once. `-s` / `--short` appears in the usage text but has
no effect of its own.

`-p` and `-P` / `--proxy-file` must not be given together; doing so is a
usage error.

When a required option is missing, the usage text is printed, the error
goes to standard error and the exit status is 1.

### Output

The long form gives address, port, country, type and anonymity level:

    203.0.113.7:1080 US socks5 Elite

The short form prints only `203.0.113.7:1080`.

### Which proxies are kept

Every collected proxy of the requested country and type is checked
concurrently. A proxy that did not respond is dropped. A proxy whose
answer shows your own IP is kept and marked `NotAnonymous`. All others
are kept with the level their provider gave them. Results come in the
order the checks finish, cut to the requested number.

## As a library

```python
from proxytoxy.cli import parse_args
from proxytoxy.app import App

task = parse_args(["-c", "DE", "-t", "http", "-n", "5"])
App().run(task)
```

- `proxytoxy.cli.parse_args` returns a `Task`; it raises `HelpRequested`
  for `-h` and `UsageError` for a missing option or `-p` with `-P`.
- `proxytoxy.app.App(spider, checker, out)` runs a task. When
  `Task.proxy_file` is set, crawler proxies are read from that file, one
  per line; when `Task.to_file` is set, the printed proxies are also
  written there.
- `proxytoxy.proxy` holds `Proxy`, `Range`, `ProxyCheckError`,
  `fetch_ip` and `check_proxies`.
- `proxytoxy.spider.Spider().collect_all()` runs every provider scraper
  and returns the proxies without checking them, one per address.
- `proxytoxy.collector.Collector` fetches pages: each URL once, two at a
  time, with a pause of one second plus up to two random seconds.
- `proxytoxy.providers` has one scraper module per site: `myproxy`,
  `nntime`, `proxylistplus` and `xseo`.

## What it does not do

The command has no option to write results to a file, and `-P` does not
load a file from the command line: both are only available by setting
`Task.to_file` and `Task.proxy_file` in code.

## Tests

    pip install ".[test]"
    pytest