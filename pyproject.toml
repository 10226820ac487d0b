[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "proxytoxy"
version = "0.1.0"
description = "Collector and checker of free public proxies"
requires-python = ">=3.10"
keywords = ["proxy", "socks5", "http", "scraper", "proxy-list"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: Proxy Servers",
]
dependencies = [
    "requests",
    "beautifulsoup4",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
proxytoxy = "proxytoxy.app:main"

[tool.hatch.build.targets.wheel]
packages = ["proxytoxy"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
