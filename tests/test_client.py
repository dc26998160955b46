"""Tests for the backend HTTP client and category listings."""

import http.client
import json
import urllib.error

import pytest

from storefront.catalog import client as client_module
from storefront.catalog.client import CategoryListing, StorefrontClient
from storefront.models import Product


class FakeBackend:
    """Canned responses keyed by path; missing paths behave like a failed request."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def __call__(self, path, body=None):
        self.calls.append((path, body))
        return self.responses.get(path)


@pytest.fixture
def backend():
    return FakeBackend({})


@pytest.fixture
def api(backend, monkeypatch):
    api = StorefrontClient("http://backend.test/")
    monkeypatch.setattr(api, "_request_json", backend)
    return api


class TestRequests:
    """Tests for the urllib layer."""

    def test_sends_tunnel_headers_and_json_body(self, monkeypatch):
        seen = {}

        class Response:
            status = 200

            def read(self):
                return b'[{"id": 1, "title": "Dune", "price": "\xc2\xa38.99"}]'

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

        def fake_urlopen(request, timeout):
            seen["url"] = request.full_url
            seen["method"] = request.get_method()
            seen["headers"] = {k.lower(): v for k, v in request.header_items()}
            seen["body"] = json.loads(request.data)
            seen["timeout"] = timeout
            return Response()

        monkeypatch.setattr(client_module.urllib.request, "urlopen", fake_urlopen)

        products = StorefrontClient("http://backend.test/", timeout=3).lookup_history([1])

        assert [p.title for p in products] == ["Dune"]
        assert seen["url"] == "http://backend.test/history"
        assert seen["method"] == "POST"
        assert seen["body"] == {"ids": [1]}
        assert seen["headers"]["bypass-tunnel-reminder"] == "true"
        assert seen["headers"]["ngrok-skip-browser-warning"] == "true"
        assert seen["timeout"] == 3

    def test_network_error_returns_none(self, monkeypatch, caplog):
        def refuse(request, timeout):
            raise urllib.error.URLError("connection refused")

        monkeypatch.setattr(client_module.urllib.request, "urlopen", refuse)

        assert StorefrontClient("http://backend.test")._request_json("/navigation") is None
        assert "Error fetching http://backend.test/navigation" in caplog.text

    @pytest.mark.parametrize(
        "error",
        [http.client.BadStatusLine("garbage"), http.client.IncompleteRead(b"[{"), http.client.LineTooLong("header")],
    )
    def test_protocol_errors_mark_listing_failed(self, monkeypatch, error):
        def broken(request, timeout):
            raise error

        monkeypatch.setattr(client_module.urllib.request, "urlopen", broken)
        listing = CategoryListing(StorefrontClient("http://backend.test"), "crime")

        listing.load()

        assert listing.error is True
        assert listing.products == []
        assert listing.load_more() == 0


class TestListings:
    def test_navigation_hides_top_level_groups(self, api, backend):
        backend.responses["/navigation"] = [
            {"id": 1, "title": "Fiction Books", "url": "/f"},
            {"id": 2, "title": "Crime & Thriller", "url": "/c"},
            {"id": 3, "title": "Rare Books", "url": "/r"},
        ]

        assert [c.title for c in api.get_navigation()] == ["Crime & Thriller"]

    def test_failures_become_empty(self, api):
        assert api.get_navigation() == []
        assert api.get_bestsellers() == []
        assert api.get_products("crime") == []
        assert api.get_category("crime") is None

    def test_malformed_payload_becomes_empty(self, api, backend):
        backend.responses["/bestsellers"] = [{"slug": "no-title"}]

        assert api.get_bestsellers() == []

    def test_legacy_products(self, api, backend):
        backend.responses["/products?category=crime-thriller-books"] = [
            {"title": "Gone Girl", "price": "£4.25", "image": "gone.jpg"}
        ]

        assert api.get_products("crime-thriller-books")[0].title == "Gone Girl"


class TestEnrichProduct:
    def test_merges_detail_over_product(self, api, backend):
        backend.responses["/search?q=The+Big+Sleep"] = {
            "summary": "Marlowe takes a case.",
            "specifications": {"Format": "Paperback"},
            "reviews": None,
        }
        product = Product(id=3, title="The Big Sleep", price="£5.99", image="sleep.jpg")

        detail = api.enrich_product(product)

        assert detail.id == 3
        assert detail.price == "£5.99"
        assert detail.summary == "Marlowe takes a case."
        assert detail.specifications == {"Format": "Paperback"}
        assert detail.reviews == []
        assert detail.recommendations == []

    def test_falls_back_to_product(self, api):
        product = Product(id=3, title="The Big Sleep", price="£5.99", image="sleep.jpg")

        detail = api.enrich_product(product)

        assert detail.title == "The Big Sleep"
        assert detail.summary is None
        assert detail.specifications == {}


class TestLookupHistory:
    def test_reorders_to_requested_ids(self, api, backend):
        backend.responses["/history"] = [
            {"id": 1, "title": "Dune"},
            {"id": 4, "title": "Gone Girl"},
            {"id": 3, "title": "The Big Sleep"},
        ]

        products = api.lookup_history([3, "1", 99, 4])

        assert [p.title for p in products] == ["The Big Sleep", "Dune", "Gone Girl"]
        assert backend.calls == [("/history", {"ids": [3, "1", 99, 4]})]

    def test_empty_ids_skip_request(self, api, backend):
        assert api.lookup_history([]) == []
        assert backend.calls == []

    def test_failure_is_empty(self, api):
        assert api.lookup_history([1, 2]) == []


class TestCategoryListing:
    def test_load(self, api, backend):
        backend.responses["/category/crime"] = [{"id": 3, "title": "The Big Sleep"}]
        listing = CategoryListing(api, "crime")

        listing.load()

        assert [p.id for p in listing.products] == [3]
        assert listing.error is False
        assert listing.loading is False

    def test_load_failure_sets_error(self, api):
        listing = CategoryListing(api, "crime")
        listing.products = [Product(id=1, title="stale")]

        listing.load()

        assert listing.error is True
        assert listing.products == []

    def test_load_more_appends_unseen(self, api, backend):
        backend.responses["/category/crime"] = [{"id": 3, "title": "A"}, {"id": 4, "title": "B"}]
        backend.responses["/category/crime?loadMore=true"] = [
            {"id": 3, "title": "A"},
            {"id": 4, "title": "B"},
            {"id": 6, "title": "C"},
        ]
        listing = CategoryListing(api, "crime")
        listing.load()

        added = listing.load_more()

        assert added == 1
        assert [p.id for p in listing.products] == [3, 4, 6]

    def test_load_more_failure_keeps_products(self, api, backend):
        backend.responses["/category/crime"] = [{"id": 3, "title": "A"}]
        listing = CategoryListing(api, "crime")
        listing.load()

        assert listing.load_more() == 0
        assert [p.id for p in listing.products] == [3]
        assert listing.error is False
        assert listing.loading_more is False

    def test_load_more_ignores_reentry(self, api, backend, monkeypatch):
        listing = CategoryListing(api, "crime")
        nested = []

        def slow_category(slug, load_more=False):
            nested.append(listing.load_more())
            return [Product(id=8, title="New")]

        monkeypatch.setattr(api, "get_category", slow_category)

        assert listing.load_more() == 1
        assert nested == [0]
        assert [p.id for p in listing.products] == [8]
