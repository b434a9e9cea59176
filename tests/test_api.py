"""Tests for golink/api.py — request handling."""

import pytest
from fastapi.testclient import TestClient

from golink.api import create_app
from golink.models import ProductRecord, RecordSource

ASIN = "B09P21T2GC"


class RecordingResolver:
    def __init__(self, record_factory=None):
        self.asins = []
        self.record_factory = record_factory or (
            lambda asin: ProductRecord.build(asin, "Echo Dot", None, "$49.99", RecordSource.SCRAPE))

    async def resolve(self, asin, credentials_available=None):
        self.asins.append(asin)
        return self.record_factory(asin)


@pytest.fixture
def resolver():
    return RecordingResolver()


@pytest.fixture
def client(settings, resolver):
    return TestClient(create_app(settings, resolver=resolver))


@pytest.mark.parametrize("path", [
    f"/{ASIN}",
    f"/go/{ASIN}",
    f"/?url=https://amazon.com/dp/{ASIN}/ref=xyz",
    f"/go?url=https://amazon.com/gp/product/{ASIN}",
    "/?url=https%3A%2F%2Famzn.to%2F468mKVM",
])
def test_resolvable_requests(client, resolver, path):
    response = client.get(path)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert resolver.asins == [ASIN]
    assert "https://www.amazon.com/dp/B09P21T2GC?tag=test-20" in response.text


@pytest.mark.parametrize("path", [
    "/",
    "/go",
    "/not-an-asin",
    "/go/short",
    "/?url=https://example.com/nothing",
])
def test_unresolvable_requests_404(client, resolver, path):
    response = client.get(path)

    assert response.status_code == 404
    assert "Invalid Amazon Link" in response.text
    assert resolver.asins == []


def test_never_redirects(client):
    response = client.get(f"/{ASIN}", follow_redirects=False)
    assert response.status_code == 200


def test_placeholder_record_still_200(settings):
    resolver = RecordingResolver(ProductRecord.placeholder)
    client = TestClient(create_app(settings, resolver=resolver))

    response = client.get(f"/{ASIN}")
    assert response.status_code == 200
    assert "Amazon Deal - B09P21T2GC" in response.text


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}
