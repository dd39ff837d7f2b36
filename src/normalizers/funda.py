"""Funda feed XML extraction to ListingRecord."""

from lxml import etree

from src.models.listing import ListingRecord


# Object child elements mapped onto named ListingRecord fields
REQUIRED_FIELDS = {
    "MakelaarNaam": "broker_name",
    "MakelaarId": "broker_id",
}
OPTIONAL_FIELDS = {
    "Id": "listing_id",
}


def qualify(namespace: str | None, tag: str) -> str:
    """Return the Clark-notation name of ``tag`` in ``namespace``."""
    if namespace:
        return f"{{{namespace}}}{tag}"
    return tag


def default_namespace(root: etree._Element) -> str | None:
    """Get the default (unprefixed) namespace declared on the document root."""
    return root.nsmap.get(None)


def _child_text(element: etree._Element, namespace: str | None, tag: str) -> str | None:
    child = element.find(qualify(namespace, tag))
    if child is None:
        return None
    return (child.text or "").strip()


def parse_total_pages(root: etree._Element, namespace: str | None) -> int:
    """Extract the declared page count from ``Paging/AantalPaginas``.

    Returns 0 when the element is absent, blank or not an integer.
    """
    paging = root.find(qualify(namespace, "Paging"))
    if paging is None:
        return 0

    value = _child_text(paging, namespace, "AantalPaginas")
    if not value:
        return 0

    try:
        return int(value)
    except ValueError:
        return 0


def parse_listing(element: etree._Element, namespace: str | None) -> ListingRecord:
    """Convert one ``Object`` element into a ListingRecord.

    Args:
        element: ``Object`` element from the feed document
        namespace: Default namespace of the document

    Returns:
        Parsed ListingRecord

    Raises:
        ValueError: If a required broker field is missing
    """
    values: dict[str, str | None] = {}

    for tag, field_name in REQUIRED_FIELDS.items():
        text = _child_text(element, namespace, tag)
        if text is None:
            raise ValueError(f"Object element missing required field {tag}")
        values[field_name] = text

    for tag, field_name in OPTIONAL_FIELDS.items():
        values[field_name] = _child_text(element, namespace, tag) or None

    # Remaining leaf children pass through by local name
    details: dict[str, str] = {}
    for child in element:
        if not isinstance(child.tag, str) or len(child):
            continue
        name = etree.QName(child).localname
        if name in REQUIRED_FIELDS or name in OPTIONAL_FIELDS:
            continue
        details[name] = (child.text or "").strip()

    return ListingRecord(**values, details=details)
