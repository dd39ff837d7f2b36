"""Data models for feed listings and configuration."""

from .listing import BrokerGroup, ListingRecord, Page
from .config import FundaConfig, PaginationConfig

__all__ = [
    "BrokerGroup",
    "ListingRecord",
    "Page",
    "FundaConfig",
    "PaginationConfig",
]
