"""Aggregations over fetched listings."""

from .brokers import top_brokers

__all__ = ["top_brokers"]
