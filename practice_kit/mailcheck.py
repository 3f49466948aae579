"""Check a domain's MX, SPF and DMARC records."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Any

import dns.exception
import dns.resolver

logger = logging.getLogger(__name__)

HEADER = "domain, hasMX, hasSPF, spfRecord, hasDMARC, dmarcRecord\n"


@dataclass(frozen=True)
class DomainReport:
    """Mail-related DNS facts about one domain."""

    domain: str
    has_mx: bool = False
    has_spf: bool = False
    spf_record: str = ""
    has_dmarc: bool = False
    dmarc_record: str = ""


def _lookup(resolver: Any, name: str, rdtype: str) -> list[Any]:
    try:
        return list(resolver.resolve(name, rdtype))
    except dns.exception.DNSException as err:
        logger.error("Error: %s", err)
        return []


def _first_txt(resolver: Any, name: str, prefix: str) -> str | None:
    for record in _lookup(resolver, name, "TXT"):
        text = b"".join(record.strings).decode("utf-8", errors="replace")
        if text.startswith(prefix):
            return text
    return None


def check_domain(domain: str, resolver: Any = None) -> DomainReport:
    """Look up the MX, SPF and DMARC records of ``domain``; lookup errors are logged."""
    resolver = resolver or dns.resolver.Resolver()
    spf = _first_txt(resolver, domain, "v=spf1")
    dmarc = _first_txt(resolver, "_dmarc." + domain, "v=DMARC1")
    return DomainReport(
        domain,
        bool(_lookup(resolver, domain, "MX")),
        spf is not None,
        spf or "",
        dmarc is not None,
        dmarc or "",
    )


def format_report(report: DomainReport) -> str:
    """Render a report as one comma-separated row, without a line break."""
    r = report
    fields = [r.domain, r.has_mx, r.has_spf, r.spf_record, r.has_dmarc, r.dmarc_record]
    return ", ".join(str(f).lower() if isinstance(f, bool) else f for f in fields)


def main(argv: list[str] | None = None) -> int:
    """Read domains from standard input and print a report row for each."""
    argparse.ArgumentParser(description="Check mail DNS records of domains read from stdin.").parse_args(argv)
    resolver = dns.resolver.Resolver()
    sys.stdout.write(HEADER)
    try:
        for line in sys.stdin:
            sys.stdout.write(format_report(check_domain(line.rstrip("\r\n"), resolver)))
    except OSError as err:
        logger.error("Error: could not read from input: %s", err)
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())