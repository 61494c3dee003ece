"""
Deep links to external systems.

Templates come from the `links` config section and are filled with
str.format; values are URL-quoted first.
"""

from __future__ import annotations
import math
from typing import Optional
from urllib.parse import quote

DEFAULT_NAVIGATION = "nmap://navigation?dlat={lat}&dlng={lon}&dname={name}&appname={app_name}"
DEFAULT_MAP_SEARCH = "https://map.naver.com/p/search/{query}"


def contract_lookup_url(contract_no: str, template: Optional[str]) -> Optional[str]:
    """URL of the contract in the lookup system, or None if none is configured."""
    if not template or not contract_no:
        return None
    return template.format(contract_no=quote(contract_no, safe=""))


def navigation_url(
    lat: float,
    lon: float,
    name: str = "",
    app_name: str = "",
    template: Optional[str] = None,
) -> Optional[str]:
    if math.isnan(lat) or math.isnan(lon):
        return None
    return (template or DEFAULT_NAVIGATION).format(
        lat=f"{lat:.6f}",
        lon=f"{lon:.6f}",
        name=quote(name or "", safe=""),
        app_name=quote(app_name or "", safe=""),
    )


def map_search_url(query: str, template: Optional[str] = None) -> Optional[str]:
    """Map-service search for an address (or 'lat,lon' text)."""
    if not query:
        return None
    return (template or DEFAULT_MAP_SEARCH).format(query=quote(query, safe=""))
