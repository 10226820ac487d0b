"""Helpers shared by the provider scrapers: countries and obfuscated ports."""

from __future__ import annotations

import re
from typing import Sequence

UNKNOWN_COUNTRY = "unknown"

_ALPHA2_WORD = re.compile(r"\b([A-Z]{2})\b", re.ASCII)
_PORT_SCRIPT = re.compile(r"(\w=\d)", re.ASCII)
_PORT_REF = re.compile(r"(\+\w)", re.ASCII)

_COUNTRIES = """\
AF Afghanistan|AL Albania|DZ Algeria|AR Argentina|AM Armenia|AU Australia
AT Austria|AZ Azerbaijan|BD Bangladesh|BY Belarus|BE Belgium|BO Bolivia
BA Bosnia and Herzegovina|BR Brazil|BG Bulgaria|KH Cambodia|CM Cameroon
CA Canada|CL Chile|CN China|CO Colombia|CR Costa Rica|HR Croatia|CU Cuba
CY Cyprus|CZ Czechia|DK Denmark|DO Dominican Republic|EC Ecuador|EG Egypt
SV El Salvador|EE Estonia|ET Ethiopia|FI Finland|FR France|GE Georgia
DE Germany|GH Ghana|GR Greece|GT Guatemala|HN Honduras|HK Hong Kong
HU Hungary|IS Iceland|IN India|ID Indonesia|IR Iran|IQ Iraq|IE Ireland
IL Israel|IT Italy|JM Jamaica|JP Japan|JO Jordan|KZ Kazakhstan|KE Kenya
KR South Korea|KP North Korea|KW Kuwait|KG Kyrgyzstan|LA Laos|LV Latvia
LB Lebanon|LY Libya|LT Lithuania|LU Luxembourg|MO Macao|MY Malaysia
MV Maldives|MT Malta|MX Mexico|MD Moldova|MN Mongolia|ME Montenegro
MA Morocco|MZ Mozambique|MM Myanmar|NP Nepal|NL Netherlands|NZ New Zealand
NI Nicaragua|NG Nigeria|MK North Macedonia|NO Norway|PK Pakistan
PS Palestine|PA Panama|PY Paraguay|PE Peru|PH Philippines|PL Poland
PT Portugal|PR Puerto Rico|QA Qatar|RO Romania|RU Russian Federation
RS Serbia|SA Saudi Arabia|SN Senegal|SG Singapore|SK Slovakia|SI Slovenia
ZA South Africa|ES Spain|LK Sri Lanka|SE Sweden|CH Switzerland|SY Syria
TW Taiwan|TJ Tajikistan|TZ Tanzania|TH Thailand|TN Tunisia|TR Turkey
TM Turkmenistan|UG Uganda|UA Ukraine|AE United Arab Emirates
GB United Kingdom|US United States|UY Uruguay|UZ Uzbekistan|VE Venezuela
VN Viet Nam|YE Yemen|ZM Zambia|ZW Zimbabwe"""

_ALIASES = {
    "Russia": "RU",
    "Vietnam": "VN",
    "Czech Republic": "CZ",
    "Great Britain": "GB",
    "UK": "GB",
    "Korea": "KR",
    "United States of America": "US",
    "Macedonia": "MK",
    "Macau": "MO",
}


def _normalize(text: str) -> str:
    return "".join(ch for ch in text.casefold() if ch.isalnum())


def _build_lookup() -> dict[str, str]:
    lookup: dict[str, str] = {}
    for entry in re.split(r"[|\n]", _COUNTRIES):
        alpha2, name = entry.split(maxsplit=1)
        lookup[_normalize(alpha2)] = alpha2
        lookup[_normalize(name)] = alpha2
    for alias, alpha2 in _ALIASES.items():
        lookup[_normalize(alias)] = alpha2
    return lookup


_COUNTRY_LOOKUP = _build_lookup()


def parse_country(unparsed: str) -> str:
    """Turn a provider's country field into an alpha-2 code.

    Text that already holds a two-letter upper-case word is returned as it
    is; otherwise a country name or code is looked up, and UNKNOWN_COUNTRY
    is returned when nothing matches.
    """
    if _ALPHA2_WORD.search(unparsed):
        return unparsed
    return _COUNTRY_LOOKUP.get(_normalize(unparsed), UNKNOWN_COUNTRY)


def decode_port_script(script: str) -> dict[str, str]:
    """Map each ``x=N`` assignment of a page script to its digit."""
    return {match[0]: match[2] for match in _PORT_SCRIPT.findall(script)}


def decode_port(script: str, port_script: str) -> str:
    """Rebuild a port from ``+x`` references using the page's digit table."""
    digits = decode_port_script(script)
    return "".join(digits.get(ref[1], "") for ref in _PORT_REF.findall(port_script))


def compare_slices(a: Sequence[str], b: Sequence[str]) -> bool:
    """False only when both have the same length and some element differs."""
    if len(a) != len(b):
        return True
    return all(x == y for x, y in zip(a, b))