import pytest

from practice_kit.shortener import ShortenerError, URLShortener, create_app, create_client

DOMAIN = "localhost:3000"
IP = "10.0.0.1"


class FakeRedis:
    def __init__(self):
        self.values = {}
        self.expiry = {}

    def get(self, key):
        return self.values.get(key)

    def set(self, key, value, ex=None):
        self.values[key] = str(value)
        if ex is None:
            self.expiry.pop(key, None)
        else:
            self.expiry[key] = ex
        return True

    def incr(self, key):
        self.values[key] = str(int(self.values.get(key, "0")) + 1)
        return int(self.values[key])

    def decr(self, key):
        self.values[key] = str(int(self.values.get(key, "0")) - 1)
        return int(self.values[key])

    def ttl(self, key):
        if key not in self.values:
            return -2
        return self.expiry.get(key, -1)


@pytest.fixture
def stores():
    return FakeRedis(), FakeRedis()


@pytest.fixture
def shortener(stores):
    urls, limits = stores
    return URLShortener(urls, limits, domain=DOMAIN, api_quota="10")


def test_shorten_with_custom_code(shortener, stores):
    urls, limits = stores
    result = shortener.shorten(IP, {"url": "example.com", "short": "abc"})
    assert result["short"] == DOMAIN + "/abc"
    assert result["url"] == "http://example.com"
    assert result["expiry"] == 24
    assert result["rate_limit"] == 9
    assert result["rate_limit_rest"] == 30
    assert urls.get("abc") == "http://example.com"
    assert urls.expiry["abc"] == 24 * 3600


def test_shorten_generates_six_character_code(shortener, stores):
    urls, _ = stores
    result = shortener.shorten(IP, {"url": "example.com/page", "expiry": 2})
    code = result["short"].split("/", 1)[1]
    assert len(code) == 6
    assert urls.expiry[code] == 2 * 3600
    assert result["expiry"] == 2


def test_quota_decreases_each_request(shortener):
    first = shortener.shorten(IP, {"url": "example.com"})
    second = shortener.shorten(IP, {"url": "example.com"})
    assert second["rate_limit"] == first["rate_limit"] - 1


def test_rate_limit_exceeded(shortener, stores):
    _, limits = stores
    limits.set(IP, "0", ex=1800)
    with pytest.raises(ShortenerError) as info:
        shortener.shorten(IP, {"url": "example.com"})
    assert info.value.status == 429
    assert info.value.body == {"error": "Rate limit exceeded", "rate_limit_rest": 30}


def test_invalid_url(shortener):
    with pytest.raises(ShortenerError) as info:
        shortener.shorten(IP, {"url": "not a url"})
    assert info.value.status == 400
    assert info.value.body == {"error": "Invalid URL"}


def test_own_domain_rejected(shortener):
    with pytest.raises(ShortenerError) as info:
        shortener.shorten(IP, {"url": "http://" + DOMAIN + "/x"})
    assert info.value.status == 503
    assert info.value.body["error"] == "remove domain error"


def test_custom_code_conflict(shortener, stores):
    urls, _ = stores
    urls.set("taken", "http://example.org")
    with pytest.raises(ShortenerError) as info:
        shortener.shorten(IP, {"url": "example.com", "short": "taken"})
    assert info.value.status == 409
    assert info.value.body["error"] == "URL custom short already exists"


def test_bad_payload_type(shortener):
    with pytest.raises(ShortenerError) as info:
        shortener.shorten(IP, {"url": "example.com", "expiry": "soon"})
    assert info.value.status == 400


def test_resolve_missing(shortener):
    with pytest.raises(ShortenerError) as info:
        shortener.resolve("nope")
    assert info.value.status == 404
    assert info.value.body == {"error": "short URL not found in database"}


def test_resolve_counts_visits(shortener, stores):
    urls, limits = stores
    urls.set("go", "http://example.com")
    assert shortener.resolve("go") == "http://example.com"
    shortener.resolve("go")
    assert limits.get("counter") == "2"


def test_app_round_trip(shortener):
    client = create_app(shortener).test_client()
    created = client.post("/api/v1", json={"url": "example.com", "short": "abc"})
    assert created.status_code == 200
    assert created.get_json()["short"] == DOMAIN + "/abc"

    visited = client.get("/abc")
    assert visited.status_code == 301
    assert visited.headers["Location"] == "http://example.com"


def test_app_errors(shortener):
    client = create_app(shortener).test_client()
    missing = client.get("/unknown")
    assert missing.status_code == 404
    assert missing.get_json() == {"error": "short URL not found in database"}
    bad = client.post("/api/v1", data="{", content_type="application/json")
    assert bad.status_code == 400


def test_create_client_reads_environment(monkeypatch):
    monkeypatch.setenv("DB_ADDR", "localhost:6380")
    monkeypatch.delenv("DB_PASS", raising=False)
    client = create_client(1)
    kwargs = client.connection_pool.connection_kwargs
    assert (kwargs["host"], kwargs["port"], kwargs["db"]) == ("localhost", 6380, 1)