from datetime import datetime, timezone

import jwt
import pytest

from practice_kit.jwt_creator import create_app, get_jwt

SIGNING_KEY = b"secret"
OTHER_KEY = b"placeholder"


def _decode(token, key=SIGNING_KEY):
    return jwt.decode(
        token,
        key,
        algorithms=["HS256"],
        audience="billing.jwtgo.io",
        options={"verify_exp": False},
    )


def test_claims():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    claims = _decode(get_jwt(SIGNING_KEY, now))
    assert claims["authorized"] is True
    assert claims["client"] == "jack"
    assert claims["iss"] == "jwtgo.io"
    assert claims["aud"] == ["billing.jwtgo.io"]
    assert claims["exp"] - int(now.timestamp()) == 60


def test_header_is_hs256():
    header = jwt.get_unverified_header(get_jwt(SIGNING_KEY))
    assert header["alg"] == "HS256"


def test_str_key_matches_bytes_key():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert get_jwt("secret", now) == get_jwt(SIGNING_KEY, now)


def test_wrong_key_fails_verification():
    with pytest.raises(jwt.InvalidSignatureError):
        _decode(get_jwt(SIGNING_KEY), OTHER_KEY)


def test_app_serves_valid_token_on_any_path():
    client = create_app(SIGNING_KEY).test_client()
    for path in ("/", "/anything"):
        reply = client.get(path)
        assert reply.status_code == 200
        assert _decode(reply.get_data(as_text=True))["client"] == "jack"