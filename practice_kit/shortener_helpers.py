"""Helpers for checking and normalising URLs to shorten."""

from __future__ import annotations

import os


def enforce_http(url: str) -> str:
    """Prefix ``url`` with the http scheme."""
    if len(url) < 4:
        raise ValueError(f"url too short: {url!r}")
    return "http://" + url


def remove_domain_error(url: str, domain: str | None = None) -> bool:
    """Whether ``url`` points somewhere other than the service's own domain."""
    if domain is None:
        domain = os.environ.get("DOMAIN", "")
    if url == domain:
        return False
    host = url.replace("http://", "", 1).replace("https://", "", 1).replace("www.", "", 1)
    return host.split("/")[0] != domain