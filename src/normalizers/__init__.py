"""Data normalizers for converting feed XML into listing records."""

from .funda import parse_listing, parse_total_pages

__all__ = ["parse_listing", "parse_total_pages"]
