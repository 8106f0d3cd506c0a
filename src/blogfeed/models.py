"""Canonical feed models shared by the proxy endpoint and the reader page."""

from __future__ import annotations

from typing import List, Optional

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, StrictStr, TypeAdapter, ValidationError, field_validator

__all__ = ["BlogPost", "FeedInfo", "FeedResult", "OK_STATUS"]

#: Status marker the aggregator uses for a successful conversion.
OK_STATUS = "ok"

_absolute_url = TypeAdapter(AnyUrl)


class BlogPost(BaseModel):
    """One article entry within the feed."""

    model_config = ConfigDict(populate_by_name=True)

    title: StrictStr
    link: StrictStr
    published_at: StrictStr = Field(alias="pubDate")
    description: Optional[StrictStr] = None
    content: Optional[StrictStr] = None
    thumbnail: Optional[StrictStr] = None
    guid: StrictStr

    @field_validator("link")
    @classmethod
    def _link_is_absolute_url(cls, value: str) -> str:
        # Validate only; the upstream string is kept untouched.
        try:
            _absolute_url.validate_python(value)
        except ValidationError as exc:
            raise ValueError("Invalid url") from exc
        return value


class FeedInfo(BaseModel):
    """Metadata of the source feed."""

    title: StrictStr
    description: StrictStr
    link: StrictStr


class FeedResult(BaseModel):
    """Validated aggregator response: feed metadata plus posts in upstream order."""

    status: StrictStr
    feed: FeedInfo
    items: List[BlogPost]

    @property
    def ok(self) -> bool:
        return self.status == OK_STATUS
