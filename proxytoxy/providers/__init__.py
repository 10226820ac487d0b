"""Scrapers for the public proxy-list sites: myproxy, nntime, proxylistplus and xseo."""