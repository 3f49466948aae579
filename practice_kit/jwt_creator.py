"""Issue short-lived signed tokens over HTTP."""

from __future__ import annotations

import argparse
import os
import sys
from datetime import datetime, timedelta, timezone

import jwt
from flask import Flask, Response

AUDIENCE = "billing.jwtgo.io"
ISSUER = "jwtgo.io"
LIFETIME = timedelta(minutes=1)


def _key(signing_key: bytes | str | None) -> bytes:
    if signing_key is None:
        signing_key = os.environ.get("SECRET_KEY", "")
    return signing_key.encode("utf-8") if isinstance(signing_key, str) else signing_key


def get_jwt(signing_key: bytes | str | None = None, now: datetime | None = None) -> str:
    """Return an HS256 token for the billing audience that expires a minute from ``now``."""
    now = now or datetime.now(timezone.utc)
    claims = {
        "authorized": True,
        "client": "jack",
        "iss": ISSUER,
        "aud": [AUDIENCE],
        "exp": int((now + LIFETIME).timestamp()),
    }
    try:
        return jwt.encode(claims, _key(signing_key), algorithm="HS256")
    except jwt.PyJWTError as err:
        print(f"Something went wrong: {err}")
        raise


def create_app(signing_key: bytes | str | None = None) -> Flask:
    """Build the HTTP application that hands out a fresh token on every path."""
    key = _key(signing_key)
    app = Flask(__name__)

    @app.route("/", defaults={"rest": ""})
    @app.route("/<path:rest>")
    def index(rest: str) -> Response:
        try:
            token = get_jwt(key)
        except jwt.PyJWTError as err:
            print(f"failed to genrate token: {err}")
            token = ""
        print(token)
        return Response(token, mimetype="text/plain")

    return app


def main(argv: list[str] | None = None) -> int:
    """Serve tokens on port 8888."""
    argparse.ArgumentParser(description="Token issuing service.").parse_args(argv)
    create_app().run(host="0.0.0.0", port=8888)
    return 0


if __name__ == "__main__":
    sys.exit(main())