"""Feed document builders and a fake feed server for tests."""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import httpx

from src.models.listing import ListingRecord

FEED_NS = "http://schemas.datacontract.org/2004/07/FundaAPI.Feeds.Entities"


def feed_xml(
    objects: list[tuple[str, str]],
    total_pages: int | str | None = 1,
    namespace: str | None = FEED_NS,
) -> bytes:
    """Build a feed document holding ``(broker_name, broker_id)`` objects."""
    xmlns = f' xmlns="{namespace}"' if namespace else ""
    items = "".join(
        "<Object>"
        f"<Id>obj-{index}</Id>"
        f"<MakelaarNaam>{name}</MakelaarNaam>"
        f"<MakelaarId>{broker_id}</MakelaarId>"
        "<Woonplaats>Amsterdam</Woonplaats>"
        "</Object>"
        for index, (name, broker_id) in enumerate(objects)
    )
    paging = ""
    if total_pages is not None:
        paging = f"<Paging><AantalPaginas>{total_pages}</AantalPaginas></Paging>"
    return (
        f'<?xml version="1.0" encoding="utf-8"?>'
        f"<LocatieFeed{xmlns}><Objects>{items}</Objects>{paging}</LocatieFeed>"
    ).encode()


def _page_of(request: httpx.Request) -> int:
    return int(parse_qs(urlsplit(str(request.url)).query)["page"][0])


class FeedServer:
    """Serves prepared page bodies keyed by page number and records requests."""

    def __init__(self, pages: dict[int, bytes | httpx.Response]) -> None:
        self.pages = pages
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = self.pages.get(_page_of(request), b"")
        if isinstance(body, httpx.Response):
            return body
        return httpx.Response(200, content=body)

    @property
    def requested_pages(self) -> list[int]:
        return [_page_of(r) for r in self.requests]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def record(name: str, broker_id: str) -> ListingRecord:
    return ListingRecord(broker_name=name, broker_id=broker_id)
