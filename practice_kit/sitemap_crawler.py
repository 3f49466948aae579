"""Crawl a sitemap and collect SEO data for every page it lists."""

from __future__ import annotations

import argparse
import logging
import random
import sys
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Protocol

import requests
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36 Edg/119.0.0.0",
    "Mozilla/5.0 (X11; Ubuntu; Linux x86_64; rv:109.0) Gecko/20100101 Firefox/119.0",
]

REQUEST_TIMEOUT = 10


@dataclass(frozen=True)
class SeoData:
    """SEO-relevant facts about one page."""

    url: str = ""
    title: str = ""
    h1: str = ""
    meta_description: str = ""
    status_code: int = 0

    def __str__(self) -> str:
        return (
            f"{{{self.url} {self.title} {self.h1} {self.meta_description} {self.status_code}}}"
        )


class Parser(Protocol):
    """Anything that turns a page response into SEO data."""

    def get_seo_data(self, response: requests.Response) -> SeoData: ...


def _first_text(soup: BeautifulSoup, name: str) -> str:
    tag = soup.find(name)
    return tag.get_text() if tag is not None else ""


class DefaultParser:
    """Reads title, first heading and meta description from HTML."""

    def get_seo_data(self, response: requests.Response) -> SeoData:
        """Extract SEO data from a page response."""
        soup = BeautifulSoup(response.content, "html.parser")
        meta = soup.select_one("meta[name^=description]")
        description = (meta.get("content") or "") if meta is not None else ""
        return SeoData(
            url=response.url,
            title=_first_text(soup, "title"),
            h1=_first_text(soup, "h1"),
            meta_description=description,
            status_code=response.status_code,
        )


def random_user_agent() -> str:
    """Pick one of the known browser user agents at random."""
    return random.choice(USER_AGENTS)


def is_sitemap(urls: Iterable[str]) -> tuple[list[str], list[str]]:
    """Split URLs into sitemap files (containing "xml") and ordinary pages."""
    sitemap_files: list[str] = []
    pages: list[str] = []
    for page in urls:
        if "xml" in page:
            print("Found Sitemap", page)
            sitemap_files.append(page)
        else:
            pages.append(page)
    return sitemap_files, pages


def extract_urls(content: str | bytes) -> list[str]:
    """Return the text of every ``loc`` element in a sitemap document."""
    soup = BeautifulSoup(content, "html.parser")
    return [loc.get_text() for loc in soup.find_all("loc")]


def make_request(url: str) -> requests.Response:
    """GET ``url`` with a browser user agent and a ten-second timeout."""
    return requests.get(
        url, headers={"User-Agent": random_user_agent()}, timeout=REQUEST_TIMEOUT
    )


def _fetch_sitemap(link: str) -> tuple[list[str], list[str]]:
    try:
        response = make_request(link)
    except requests.RequestException as err:
        logger.error("error retrieving URL: %s with error: %s", link, err)
        return [], []
    return is_sitemap(extract_urls(response.content))


def extract_sitemap_urls(start_url: str) -> list[str]:
    """Follow nested sitemaps from ``start_url`` and return every page URL found."""
    to_crawl: list[str] = []
    pending = [start_url]
    with ThreadPoolExecutor() as pool:
        while pending:
            next_round: list[str] = []
            for sitemap_files, pages in pool.map(_fetch_sitemap, pending):
                next_round.extend(sitemap_files)
                to_crawl.extend(pages)
            pending = next_round
    return to_crawl


def _scrape_page(url: str, parser: Parser) -> SeoData | None:
    logger.info("requesting URL: %s", url)
    try:
        return parser.get_seo_data(make_request(url))
    except (requests.RequestException, ValueError) as err:
        logger.error("encountered error, URL: %s with error: %s", url, err)
        return None


def scrape_urls(urls: Iterable[str], parser: Parser, concurrency: int) -> list[SeoData]:
    """Scrape every non-empty URL with at most ``concurrency`` requests at once."""
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")
    targets = [url for url in urls if url]
    with ThreadPoolExecutor(max_workers=concurrency) as pool:
        scraped = pool.map(lambda url: _scrape_page(url, parser), targets)
        return [data for data in scraped if data is not None]


def scrape_sitemap(url: str, parser: Parser, concurrency: int) -> list[SeoData]:
    """Crawl the sitemap at ``url`` and scrape every page it lists."""
    return scrape_urls(extract_sitemap_urls(url), parser, concurrency)


def main(argv: list[str] | None = None) -> int:
    """Crawl a sitemap and print the SEO data of each page."""
    arg_parser = argparse.ArgumentParser(description="Crawl a sitemap for SEO data.")
    arg_parser.add_argument("url", nargs="?", default="https://www.quicksprout.com/sitemap.xml")
    arg_parser.add_argument("-c", "--concurrency", type=int, default=10)
    args = arg_parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    for result in scrape_sitemap(args.url, DefaultParser(), args.concurrency):
        print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())