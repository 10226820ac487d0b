"""Collect free proxies from public lists and check that they work."""

__version__ = "0.1.0"