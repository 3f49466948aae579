"""Scrape result links from search-engine result pages."""

from __future__ import annotations

import argparse
import random
import sys
import time
from dataclasses import dataclass

import requests
from bs4 import BeautifulSoup

GOOGLE_DOMAINS = {
    "com": "https://www.google.com/search?q=",
    "za": "https://www.google..co.za/search?q=",
}

USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36 Edg/119.0.0.0",
    "Mozilla/5.0 (X11; Ubuntu; Linux x86_64; rv:109.0) Gecko/20100101 Firefox/119.0",
]

BAN_MESSAGE = "scraper received a non-200 status code suggesting a ban"


class ScrapeError(Exception):
    """Raised when a search cannot be built or fetched."""


@dataclass(frozen=True)
class SearchResult:
    """One organic search result."""

    rank: int
    url: str
    title: str
    desc: str

    def __str__(self) -> str:
        return f"{{{self.rank} {self.url} {self.title} {self.desc}}}"


def random_user_agent() -> str:
    """Pick one of the known browser user agents at random."""
    return random.choice(USER_AGENTS)


def build_google_urls(
    search_term: str, country_code: str, language_code: str, pages: int, count: int
) -> list[str]:
    """Build the result-page URLs to fetch for a search."""
    base = GOOGLE_DOMAINS.get(country_code)
    if base is None:
        raise ScrapeError(f"country ({country_code}) is currently not supported")
    term = search_term.strip(" ").replace(" ", "+")
    return [
        f"{base}{term}&num={count}&hl={language_code}&start={page * count}&filter=0"
        for page in range(pages)
    ]


def parse_google_results(html: str | bytes, rank: int) -> list[SearchResult]:
    """Extract results from a result page; numbering continues after ``rank``."""
    soup = BeautifulSoup(html, "html.parser")
    results = []
    rank += 1
    for item in soup.select("div.g"):
        anchor = item.find("a")
        link = (anchor.get("href") or "") if anchor is not None else ""
        title = "".join(tag.get_text() for tag in item.find_all("h3"))
        desc = "".join(tag.get_text() for tag in item.select("span.st"))
        link = link.strip(" ")
        if link and link != "#" and not link.startswith("/"):
            results.append(SearchResult(rank, link, title, desc))
            rank += 1
    return results


def scrape_client_request(search_url: str, proxy: object = None) -> requests.Response:
    """Fetch a result page, through ``proxy`` when it is a URL string."""
    proxies = {"http": proxy, "https": proxy} if isinstance(proxy, str) else None
    try:
        response = requests.get(
            search_url, headers={"User-Agent": random_user_agent()}, proxies=proxies
        )
    except requests.RequestException as err:
        raise ScrapeError(str(err)) from err
    if response.status_code != 200:
        raise ScrapeError(BAN_MESSAGE)
    return response


def google_scrape(
    search_term: str,
    country_code: str,
    language_code: str,
    proxy: object,
    pages: int,
    count: int,
    backoff: float,
) -> list[SearchResult]:
    """Fetch and parse every result page, pausing ``backoff`` seconds after each."""
    results: list[SearchResult] = []
    for page in build_google_urls(search_term, country_code, language_code, pages, count):
        response = scrape_client_request(page, proxy)
        results.extend(parse_google_results(response.content, len(results)))
        time.sleep(backoff)
    return results


def main(argv: list[str] | None = None) -> int:
    """Run a search and print its results."""
    parser = argparse.ArgumentParser(description="Scrape search results.")
    parser.add_argument("term", nargs="?", default="akhil sharma")
    args = parser.parse_args(argv)
    try:
        results = google_scrape(args.term, "com", "en", None, 1, 30, 10)
    except ScrapeError:
        return 0
    for result in results:
        print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())