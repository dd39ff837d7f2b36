"""Broker ranking over fetched listings."""

from collections.abc import Iterable
from typing import Literal

from src.models.listing import BrokerGroup, ListingRecord


GroupBy = Literal["name", "id"]


def top_brokers(
    records: Iterable[ListingRecord],
    limit: int = 10,
    group_by: GroupBy = "name",
) -> list[BrokerGroup]:
    """Rank brokers by number of listings.

    Grouping by name is the default. Two broker ids under one name then
    collapse into a single group that reports the id of the first record
    seen. With ``group_by="id"`` the roles swap and the first name seen
    is reported.

    Args:
        records: Listings to aggregate; not modified
        limit: Maximum number of groups returned
        group_by: Grouping key, ``"name"`` or ``"id"``

    Returns:
        Groups ordered by count descending, ties in first-seen order
    """
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    if group_by not in ("name", "id"):
        raise ValueError(f"Unknown group_by: {group_by}")

    # dict keeps first-seen order, which sorted() preserves for equal counts
    groups: dict[str, BrokerGroup] = {}
    for record in records:
        key = record.broker_name if group_by == "name" else record.broker_id
        group = groups.get(key)
        if group is None:
            groups[key] = BrokerGroup(
                name=record.broker_name,
                broker_id=record.broker_id,
                count=1,
            )
        else:
            group.count += 1

    ranked = sorted(groups.values(), key=lambda g: g.count, reverse=True)
    return ranked[:limit]
