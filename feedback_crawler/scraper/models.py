"""Data models for feedback items and crawl results."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FeedbackType(str, Enum):
    COMMENT = "comment"
    REVIEW = "review"


class FeedbackItem(BaseModel):
    """A comment or review extracted from a listing page.

    ``id`` is the container's raw identifier attribute (prefix included), so it
    is stable across crawls and serves as the storage key. ``source_id`` is the
    same identifier without its type prefix.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    source_id: str = Field(alias="sourceId")
    type: FeedbackType
    text: str = Field(min_length=1)

    @classmethod
    def build(
        cls, type: FeedbackType, source_id: str, text: str, prefix: str
    ) -> "FeedbackItem":
        """Create an item, deriving ``id`` from the type prefix and source id."""
        return cls(id=f"{prefix}{source_id}", source_id=source_id, type=type, text=text)

    def to_record(self, company_slug: str) -> dict[str, Any]:
        """Insert payload for the store, keyed by ``id`` and partitioned by company."""
        return {
            "id": self.id,
            "text": self.text,
            "type": self.type.value,
            "source_id": self.source_id,
            "company_id": company_slug,
        }


class PageSnapshot(BaseModel):
    """What a navigation produced: the three signals used to judge a page."""

    url: str
    status_code: int | None = None
    html: str = ""
    title: str = ""


class PageRejection(str, Enum):
    BAD_STATUS = "bad status"
    EMPTY_CONTENT = "empty content"
    NOT_FOUND_TITLE = "404 title"


class PageValidity(BaseModel):
    """Outcome of the page validity check."""

    valid: bool
    reason: PageRejection | None = None


class CrawlSummary(BaseModel):
    """Result of crawling every listing page of one company."""

    company: str
    total: int = 0
    items: list[FeedbackItem] = Field(default_factory=list)
    total_pages: int = 0
    skipped_pages: list[int] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: datetime | None = None
    duration_seconds: float | None = None

    def finalize(self) -> None:
        """Mark crawl as complete and calculate duration."""
        self.completed_at = datetime.utcnow()
        self.duration_seconds = (self.completed_at - self.started_at).total_seconds()
