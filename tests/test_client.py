from __future__ import annotations

import logging

import httpx
import pytest

from src.fetchers.funda import FetchError, FundaFeedClient
from src.fetchers.funda.client import build_page_url

from tests.helpers import FeedServer, feed_xml

BASE = "http://feed.test/feeds/Aanbod.svc/test-key/?type=koop&zo=/amsterdam/"


def test_build_page_url_appends_paging_parameters() -> None:
    assert build_page_url(BASE, 3, 100) == BASE + "&page=3&pagesize=100"


def test_build_page_url_without_query_string() -> None:
    assert build_page_url("http://feed.test/x", 1, 25) == "http://feed.test/x?page=1&pagesize=25"


def test_fetch_page_requests_page_uri(config) -> None:
    server = FeedServer({2: feed_xml([("A", "1")], total_pages=4)})
    with FundaFeedClient(config, transport=server.transport) as client:
        page = client.fetch_page(BASE, 2)

    assert page is not None
    assert str(server.requests[0].url) == BASE + "&page=2&pagesize=2"
    assert page.url == BASE + "&page=2&pagesize=2"
    assert page.total_pages == 4


def test_fetch_page_explicit_page_size(config) -> None:
    server = FeedServer({1: feed_xml([])})
    with FundaFeedClient(config, transport=server.transport) as client:
        client.fetch_page(BASE, 1, page_size=100)

    assert str(server.requests[0].url).endswith("&page=1&pagesize=100")


def test_fetch_page_rejects_page_zero(config) -> None:
    with FundaFeedClient(config) as client:
        with pytest.raises(ValueError):
            client.fetch_page(BASE, 0)


def test_fetch_page_extracts_nested_objects_in_order(config) -> None:
    server = FeedServer({1: feed_xml([("Broker One", "11"), ("Broker Two", "22")])})
    with FundaFeedClient(config, transport=server.transport) as client:
        page = client.fetch_page(BASE, 1)

    assert page is not None
    assert [(r.broker_name, r.broker_id) for r in page.records] == [
        ("Broker One", "11"),
        ("Broker Two", "22"),
    ]
    assert page.records[0].listing_id == "obj-0"
    assert page.records[0].details == {"Woonplaats": "Amsterdam"}


def test_fetch_page_without_namespace(config) -> None:
    server = FeedServer({1: feed_xml([("A", "1")], total_pages=2, namespace=None)})
    with FundaFeedClient(config, transport=server.transport) as client:
        page = client.fetch_page(BASE, 1)

    assert page is not None
    assert len(page.records) == 1
    assert page.total_pages == 2


@pytest.mark.parametrize("total_pages", [None, "", "many"])
def test_missing_or_invalid_paging_defaults_to_zero(config, total_pages) -> None:
    server = FeedServer({1: feed_xml([("A", "1")], total_pages=total_pages)})
    with FundaFeedClient(config, transport=server.transport) as client:
        page = client.fetch_page(BASE, 1)

    assert page is not None
    assert page.total_pages == 0


def test_empty_body_is_no_document(config) -> None:
    server = FeedServer({1: b"  \n"})
    with FundaFeedClient(config, transport=server.transport) as client:
        assert client.fetch_page(BASE, 1) is None


def test_http_error_status_raises_fetch_error(config) -> None:
    server = FeedServer({1: httpx.Response(503, text="Service Unavailable")})
    with FundaFeedClient(config, transport=server.transport) as client:
        with pytest.raises(FetchError) as excinfo:
            client.fetch_page(BASE, 1)

    assert "503" in str(excinfo.value)
    assert excinfo.value.response_text == "Service Unavailable"
    assert excinfo.value.url == BASE + "&page=1&pagesize=2"
    # No retry
    assert len(server.requests) == 1


def test_malformed_xml_raises_fetch_error(config) -> None:
    server = FeedServer({1: b"<LocatieFeed><Objects>"})
    with FundaFeedClient(config, transport=server.transport) as client:
        with pytest.raises(FetchError, match="parse feed XML"):
            client.fetch_page(BASE, 1)


def test_object_without_broker_raises_fetch_error(config) -> None:
    body = b"<LocatieFeed><Object><MakelaarNaam>A</MakelaarNaam></Object></LocatieFeed>"
    server = FeedServer({1: body})
    with FundaFeedClient(config, transport=server.transport) as client:
        with pytest.raises(FetchError, match="MakelaarId"):
            client.fetch_page(BASE, 1)


def test_network_failure_raises_fetch_error(config) -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    with FundaFeedClient(config, transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(FetchError, match="request failed"):
            client.fetch_page(BASE, 1)

    assert len(calls) == 1


def test_client_uses_configured_timeout(config) -> None:
    client = FundaFeedClient(config)
    try:
        http = client._get_client()
        assert http.timeout.read == 5.0
        assert http.timeout.connect == 5.0
    finally:
        client.close()
    assert client._client is None


def test_request_log_omits_api_key(config, caplog) -> None:
    server = FeedServer({1: feed_xml([("A", "1")])})
    with caplog.at_level(logging.DEBUG, logger="src.fetchers.funda.client"):
        with FundaFeedClient(config, transport=server.transport) as client:
            client.fetch_page(BASE, 1)

    assert "page=1&pagesize=2" in caplog.text
    assert "test-key" not in caplog.text
