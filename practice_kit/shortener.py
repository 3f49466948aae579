"""A URL shortener backed by a key-value store, with per-client rate limiting."""

from __future__ import annotations

import argparse
import json
import os
import re
import sys
import uuid
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

import redis
from dotenv import load_dotenv
from flask import Flask, Response, redirect, request

from practice_kit.shortener_helpers import enforce_http, remove_domain_error

RATE_WINDOW = 30 * 60
DEFAULT_EXPIRY_HOURS = 24
_SCHEMES = {"http", "https", "ftp", "tcp", "udp", "ws", "wss"}
_HOST = re.compile(
    r"localhost"
    r"|(?:\d{1,3}\.){3}\d{1,3}"
    r"|(?:[A-Za-z0-9_](?:[A-Za-z0-9_-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,63}",
)


class ShortenerError(Exception):
    """A failed request, with the HTTP status and JSON body to answer with."""

    def __init__(self, status: int, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.status = status
        self.body = {"error": message, **extra}


def create_client(db_no: int) -> redis.Redis:
    """Client for database ``db_no`` at ``DB_ADDR`` with password ``DB_PASS``."""
    address = os.environ.get("DB_ADDR") or "localhost:6379"
    if ":" in address:
        host, _, port = address.rpartition(":")
    else:
        host, port = address, ""
    password = os.environ.get("DB_PASS") or None
    return redis.Redis(
        host=host or "localhost",
        port=int(port) if port else 6379,
        password=password,
        db=db_no,
        decode_responses=True,
    )


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _to_int(value: Any) -> int:
    try:
        return int(_text(value))
    except ValueError:
        return 0


def _minutes(ttl: Any) -> int:
    return int(int(ttl or 0) / 60)


def _is_url(url: str) -> bool:
    if len(url) <= 3 or len(url) >= 2083 or url.startswith(".") or re.search(r"\s", url):
        return False
    candidate = url if "://" in url else "http://" + url
    try:
        parts = urlsplit(candidate)
        parts.port
    except ValueError:
        return False
    if parts.scheme.lower() not in _SCHEMES:
        return False
    host = parts.hostname or ""
    return bool(host) and not host.startswith(".") and _HOST.fullmatch(host) is not None


def _field(payload: Mapping[str, Any], name: str) -> Any:
    if name in payload:
        return payload[name]
    return next((value for key, value in payload.items() if key.lower() == name), None)


def _parse_request(payload: Any) -> tuple[str, str, int]:
    if not isinstance(payload, Mapping):
        raise ShortenerError(400, "request body must be a JSON object")
    url = _field(payload, "url")
    short = _field(payload, "short")
    expiry = _field(payload, "expiry")
    if url is not None and not isinstance(url, str):
        raise ShortenerError(400, "url must be a string")
    if short is not None and not isinstance(short, str):
        raise ShortenerError(400, "short must be a string")
    if expiry is not None and (isinstance(expiry, bool) or not isinstance(expiry, int)):
        raise ShortenerError(400, "expiry must be an integer")
    return url or "", short or "", expiry or 0


class URLShortener:
    """Stores short codes in ``urls`` and rate-limit counters in ``limits``."""

    def __init__(
        self,
        urls: Any,
        limits: Any,
        domain: str | None = None,
        api_quota: str | None = None,
    ) -> None:
        self.urls = urls
        self.limits = limits
        self._domain = domain
        self._api_quota = api_quota

    @property
    def domain(self) -> str:
        """The service's own domain, from ``DOMAIN`` unless given."""
        return self._domain if self._domain is not None else os.environ.get("DOMAIN", "")

    @property
    def api_quota(self) -> str:
        """Requests allowed per window, from ``API_QUOTA`` unless given."""
        return self._api_quota if self._api_quota is not None else os.environ.get("API_QUOTA", "")

    def resolve(self, short: str) -> str:
        """Return the URL stored under ``short`` and count the visit."""
        try:
            value = self.urls.get(short)
        except redis.RedisError as err:
            raise ShortenerError(500, str(err)) from err
        if value is None:
            raise ShortenerError(404, "short URL not found in database")
        self.limits.incr("counter")
        return _text(value)

    def shorten(self, ip: str, payload: Any) -> dict[str, Any]:
        """Store a short code for the URL in ``payload`` on behalf of client ``ip``."""
        url, short, expiry = _parse_request(payload)

        remaining = self.limits.get(ip)
        if remaining is None:
            self.limits.set(ip, self.api_quota, ex=RATE_WINDOW)
        elif _to_int(remaining) <= 0:
            raise ShortenerError(
                429, "Rate limit exceeded", rate_limit_rest=_minutes(self.limits.ttl(ip))
            )

        if not _is_url(url):
            raise ShortenerError(400, "Invalid URL")
        if not remove_domain_error(url, self.domain):
            raise ShortenerError(503, "remove domain error")
        url = enforce_http(url)

        code = short or str(uuid.uuid4())[:6]
        if _text(self.urls.get(code)):
            raise ShortenerError(409, "URL custom short already exists")

        if expiry == 0:
            expiry = DEFAULT_EXPIRY_HOURS
        try:
            self.urls.set(code, url, ex=expiry * 3600)
        except redis.RedisError as err:
            raise ShortenerError(500, str(err)) from err

        self.limits.decr(ip)
        return {
            "url": url,
            "short": f"{self.domain}/{code}",
            "expiry": expiry,
            "rate_limit": _to_int(self.limits.get(ip)),
            "rate_limit_rest": _minutes(self.limits.ttl(ip)),
        }


def _json(payload: Any, status: int) -> Response:
    return Response(json.dumps(payload), status=status, mimetype="application/json")


def _request_payload() -> Any:
    if request.is_json:
        try:
            return json.loads(request.get_data() or b"null")
        except ValueError as err:
            raise ShortenerError(400, str(err)) from err
    if request.mimetype in ("application/x-www-form-urlencoded", "multipart/form-data"):
        form: dict[str, Any] = dict(request.form.items())
        if "expiry" in form:
            try:
                form["expiry"] = int(form["expiry"]) if form["expiry"] else 0
            except ValueError as err:
                raise ShortenerError(400, str(err)) from err
        return form
    raise ShortenerError(400, "Unprocessable Entity")


def create_app(shortener: URLShortener | None = None) -> Flask:
    """Build the HTTP application."""
    if shortener is None:
        shortener = URLShortener(create_client(0), create_client(1))
    app = Flask(__name__)

    @app.get("/<url>")
    def resolve_url(url: str) -> Response:
        try:
            target = shortener.resolve(url)
        except ShortenerError as err:
            return _json(err.body, err.status)
        return redirect(target, code=301)

    @app.post("/api/v1")
    def shorten_url() -> Response:
        try:
            result = shortener.shorten(request.remote_addr or "", _request_payload())
        except ShortenerError as err:
            return _json(err.body, err.status)
        return _json(result, 200)

    return app


def main(argv: list[str] | None = None) -> int:
    """Load ``.env`` and serve the shortener on the address in ``APP_PORT``."""
    parser = argparse.ArgumentParser(description="URL shortener service.")
    parser.parse_args(argv)
    if not load_dotenv():
        print("open .env: no such file or directory")
    address = os.environ.get("APP_PORT", "")
    host, _, port = address.rpartition(":")
    create_app().run(host=host or "0.0.0.0", port=int(port) if port else 0)
    return 0


if __name__ == "__main__":
    sys.exit(main())