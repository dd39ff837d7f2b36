"""Funda partner feed fetcher module."""

from .client import FetchError, FundaFeedClient
from .fetcher import FundaFetcher

__all__ = ["FetchError", "FundaFeedClient", "FundaFetcher"]
