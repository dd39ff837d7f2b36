"""Funda partner feed XML client."""

import logging
from typing import Any

import httpx
from lxml import etree

from src.models.config import FundaConfig
from src.models.listing import ListingRecord, Page
from src.normalizers.funda import (
    default_namespace,
    parse_listing,
    parse_total_pages,
    qualify,
)


logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Feed fetch error.

    Covers transport failures, non-success responses and documents that
    cannot be parsed. Never retried.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        response_text: str | None = None,
    ):
        super().__init__(message)
        self.url = url
        self.response_text = response_text
        # Filled in by the pagination driver when a run aborts
        self.partial_records: list[ListingRecord] = []
        self.pages_fetched: int = 0


def build_page_url(base_query: str, page: int, page_size: int) -> str:
    """Append page parameters to a base query URI."""
    separator = "&" if "?" in base_query else "?"
    return f"{base_query}{separator}page={page}&pagesize={page_size}"


class FundaFeedClient:
    """Client for the Funda ``Aanbod.svc`` XML feed.

    Fetches one page per call. There is no retry: any failure is raised
    as FetchError.
    """

    def __init__(self, config: FundaConfig, transport: httpx.BaseTransport | None = None):
        self.config = config
        self._transport = transport
        self._client: httpx.Client | None = None
        self._parser = etree.XMLParser(resolve_entities=False, no_network=True)

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.config.timeout,
                headers=dict(self.config.headers),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "FundaFeedClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _make_request(self, url: str) -> httpx.Response:
        """Issue a single GET, mapping httpx failures to FetchError."""
        client = self._get_client()
        # Feed path carries the API key
        logger.debug(f"GET ?{url.split('?', 1)[-1]}")

        try:
            response = client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"Feed returned HTTP {e.response.status_code}",
                url=url,
                response_text=e.response.text[:500],
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Feed request failed: {e}", url=url) from e

        return response

    def parse_page(self, content: bytes, url: str) -> Page | None:
        """Parse a feed document into a Page.

        Args:
            content: Raw response body
            url: Page URI, kept for tracking and error reporting

        Returns:
            Parsed Page, or None if the body holds no document

        Raises:
            FetchError: If the body is not well-formed XML or a listing
                lacks its broker fields
        """
        if not content.strip():
            return None

        try:
            root = etree.fromstring(content, self._parser)
        except etree.XMLSyntaxError as e:
            raise FetchError(
                f"Failed to parse feed XML: {e}",
                url=url,
                response_text=content[:500].decode("utf-8", errors="replace"),
            ) from e

        namespace = default_namespace(root)

        try:
            records = [
                parse_listing(element, namespace)
                for element in root.iter(qualify(namespace, "Object"))
            ]
        except ValueError as e:
            raise FetchError(str(e), url=url) from e

        return Page(
            records=records,
            total_pages=parse_total_pages(root, namespace),
            url=url,
        )

    def fetch_page(
        self,
        base_query: str,
        page: int,
        page_size: int | None = None,
    ) -> Page | None:
        """Fetch and parse a single page of listings.

        Args:
            base_query: Query URI already carrying the search filters
            page: Page number (1-indexed)
            page_size: Listings per page, defaults to the configured size

        Returns:
            Parsed Page, or None when the feed returned no document
        """
        if page < 1:
            raise ValueError("Page index must start from 1")

        if page_size is None:
            page_size = self.config.pagination.page_size

        url = build_page_url(base_query, page, page_size)
        response = self._make_request(url)
        result = self.parse_page(response.content, url)

        if result is None:
            logger.debug(f"Page {page}: empty document")
        else:
            logger.debug(
                f"Page {page}: {len(result.records)} records, "
                f"declared pages: {result.total_pages}"
            )

        return result
