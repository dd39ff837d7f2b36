"""Funda listings fetcher with pagination."""

import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

import httpx

from src.models.config import FundaConfig
from src.models.listing import ListingRecord, Page

from .client import FetchError, FundaFeedClient


logger = logging.getLogger(__name__)


@dataclass
class FetchProgress:
    """Progress tracking for fetch operation."""

    page_no: int = 0
    total_pages: int = 0
    total_records: int = 0
    start_time: float = field(default_factory=time.time)

    @property
    def duration(self) -> float:
        return time.time() - self.start_time


class FundaFetcher:
    """Fetcher for every page of a feed query.

    Pages are requested strictly one after another. The first failure
    aborts the run.
    """

    def __init__(self, config: FundaConfig, transport: httpx.BaseTransport | None = None):
        self.config = config
        self.client = FundaFeedClient(config, transport=transport)

    def close(self) -> None:
        """Close resources."""
        self.client.close()

    def __enter__(self) -> "FundaFetcher":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def iter_pages(
        self,
        base_query: str,
        progress: FetchProgress | None = None,
    ) -> Iterator[Page]:
        """Iterate over result pages until the declared page count is reached.

        Stops early when the feed returns no document. When the paging
        element is missing the declared count is 0, so only page 1 is read.
        """
        if progress is None:
            progress = FetchProgress()

        page_size = self.config.pagination.page_size
        page_no = 1

        while True:
            page = self.client.fetch_page(base_query, page_no, page_size)
            if page is None:
                logger.info(f"No document at page {page_no}, stopping")
                return

            progress.page_no = page_no
            progress.total_pages = page.total_pages
            progress.total_records += len(page.records)
            yield page

            page_no += 1
            if page_no > page.total_pages:
                return

    def fetch_all(self, base_query: str) -> list[ListingRecord]:
        """Fetch all listings for a query, in page then document order.

        Raises:
            FetchError: On the first failed page. Records read before the
                failure are attached as ``partial_records`` and not returned.
        """
        progress = FetchProgress()
        records: list[ListingRecord] = []

        logger.info(
            f"Starting feed fetch: {base_query.split('?', 1)[-1]}, "
            f"page_size={self.config.pagination.page_size}"
        )

        try:
            for page in self.iter_pages(base_query, progress):
                records.extend(page.records)
        except FetchError as e:
            e.partial_records = records
            e.pages_fetched = progress.page_no
            logger.error(f"Fetch aborted after {progress.page_no} pages: {e}")
            raise
        finally:
            logger.info(
                f"Fetch finished: {progress.page_no} pages "
                f"(declared {progress.total_pages}), "
                f"{progress.total_records} records, "
                f"{progress.duration:.1f}s"
            )

        return records
