"""Decide whether a fetched listing page is usable."""

from .models import PageRejection, PageSnapshot, PageValidity

# What Chromium serializes for a document with nothing in it
EMPTY_DOCUMENT = "<html><head></head><body></body></html>"


def check_page_validity(
    status_code: int | None, html: str, title: str | None
) -> PageValidity:
    """Run the ordered rejection checks over a fetched page.

    1. No response, or a status of 400 and above.
    2. Markup identical to an empty document.
    3. A title carrying "404" or "not found" (case-insensitive).
    """
    if status_code is None or status_code >= 400:
        return PageValidity(valid=False, reason=PageRejection.BAD_STATUS)

    if html.strip() == EMPTY_DOCUMENT:
        return PageValidity(valid=False, reason=PageRejection.EMPTY_CONTENT)

    title = title or ""
    if "404" in title or "not found" in title.lower():
        return PageValidity(valid=False, reason=PageRejection.NOT_FOUND_TITLE)

    return PageValidity(valid=True)


def check_snapshot(snapshot: PageSnapshot) -> PageValidity:
    return check_page_validity(snapshot.status_code, snapshot.html, snapshot.title)
