"""Domain models used across the application."""

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class FeedEntry(BaseModel):
    """One extracted article destined for a feed document."""

    title: str = ""
    link: str
    description: str = ""
    created: datetime

    @property
    def id(self) -> str:
        """The absolute link doubles as the entry's unique identifier."""

        return self.link


class Feed(BaseModel):
    """A feed assembled for a single request."""

    title: str = ""
    link: str
    description: str = ""
    created: datetime
    entries: List[FeedEntry] = Field(default_factory=list)
