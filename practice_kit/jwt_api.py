"""An HTTP endpoint guarded by a signed token in the ``Token`` header."""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timezone
from typing import Any

import jwt
from flask import Flask, Response, request

from .jwt_creator import AUDIENCE, ISSUER, _key

SECRET_PAGE = "Super Secret Information"
NO_TOKEN_MESSAGE = "no authorization token provided"
_ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


class TokenError(Exception):
    """Raised when a token is malformed, untrusted or expired."""


def validate_token(token: str, signing_key: bytes | str | None = None, now: datetime | None = None) -> dict[str, Any]:
    """Check a token's method, audience, issuer, expiry and signature; return its claims."""
    moment = (now or datetime.now(timezone.utc)).timestamp()
    try:
        algorithm = jwt.get_unverified_header(token).get("alg")
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as err:
        raise TokenError(f"token is malformed: {err}") from err

    if algorithm not in {"HS256", "HS384", "HS512"}:
        raise TokenError("Invalid signning method")
    audiences = claims.get("aud", [])
    if isinstance(audiences, str):
        audiences = [audiences]
    if not isinstance(audiences, list) or not all(isinstance(a, str) for a in audiences):
        raise TokenError("invalid type for claim: aud")
    if len(audiences) != 1:
        raise TokenError("wrong token audience length")
    if audiences[0] != AUDIENCE:
        raise TokenError("wrong token audience")
    issuer = claims.get("iss", "")
    if not isinstance(issuer, str):
        raise TokenError("invalid type for claim: iss")
    if issuer != ISSUER:
        raise TokenError("wrong token issuer")
    expires = claims.get("exp")
    if isinstance(expires, bool) or not isinstance(expires, (int, float)):
        raise TokenError("token has no valid expiration time")
    if expires <= moment:
        raise TokenError("token expired")

    checks = ("exp", "nbf", "iat", "aud", "iss")
    try:
        jwt.decode(token, _key(signing_key), algorithms=[algorithm],
                   options={f"verify_{name}": False for name in checks})
    except jwt.PyJWTError as err:
        raise TokenError(f"token signature is invalid: {err}") from err

    not_before = claims.get("nbf")
    if isinstance(not_before, (int, float)) and moment < not_before:
        raise TokenError("token is not valid yet")
    return claims


def create_app(signing_key: bytes | str | None = None) -> Flask:
    """Build the HTTP application serving the guarded page on every path."""
    key = _key(signing_key)
    app = Flask(__name__)

    @app.route("/", defaults={"rest": ""}, methods=_ALL_METHODS)
    @app.route("/<path:rest>", methods=_ALL_METHODS)
    def home(rest: str) -> Response:
        token = request.headers.get("Token")
        if token is None:
            return Response(NO_TOKEN_MESSAGE, mimetype="text/plain")
        try:
            validate_token(token, key)
        except TokenError as err:
            return Response(str(err), mimetype="text/plain")
        return Response(SECRET_PAGE, mimetype="text/plain")

    return app


def main(argv: list[str] | None = None) -> int:
    """Serve the guarded endpoint on port 9001."""
    argparse.ArgumentParser(description="Token-guarded service.").parse_args(argv)
    print("server started", end="", flush=True)
    create_app().run(host="0.0.0.0", port=9001)
    return 0


if __name__ == "__main__":
    sys.exit(main())