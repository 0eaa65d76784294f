"""Data contracts exchanged between callers, steps and the generation backend."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .constants import DEFAULT_PROGRAM_NAME


class SpeakerMode(str, Enum):
    """How many hosts read the script."""

    SINGLE = "SINGLE"
    MULTI = "MULTI"


class ContentItem(BaseModel):
    """An article to be introduced on the program."""

    id: str
    title: str
    content: str
    author: str
    tags: List[str] = Field(default_factory=list)
    created_at: str


class ListenerNote(BaseModel):
    """A letter sent in by a listener."""

    id: str
    name: str
    text: str


class TriggerPayload(BaseModel):
    """Input of one script generation run. ``items`` order is preserved end-to-end."""

    items: List[ContentItem] = Field(default_factory=list)
    program_name: str = DEFAULT_PROGRAM_NAME
    program_date: date
    speaker_mode: SpeakerMode = SpeakerMode.SINGLE
    listener_notes: List[ListenerNote] = Field(default_factory=list)
    user_name: Optional[str] = None
    feed_name: Optional[str] = None


class ItemSummary(BaseModel):
    """Structured output requested when summarizing one article."""

    summary: str = Field(description="Summary of the article")
    key_points: List[str] = Field(
        default_factory=list, description="Key points an engineer can learn from"
    )


class SummarizedItem(BaseModel):
    """Output of a summarize step: item metadata plus the generated summary."""

    id: str
    title: str
    author: str
    tags: List[str] = Field(default_factory=list)
    created_at: str
    summary: str
    key_points: List[str] = Field(default_factory=list)

    @classmethod
    def from_item(cls, item: ContentItem, summary: ItemSummary) -> "SummarizedItem":
        return cls(
            id=item.id,
            title=item.title,
            author=item.author,
            tags=list(item.tags),
            created_at=item.created_at,
            summary=summary.summary,
            key_points=list(summary.key_points),
        )


class HeadlinePostSection(BaseModel):
    """Explanation of one article in a headline topic program."""

    id: str = Field(description="Article id")
    title: str = Field(description="Article title")
    intro: str = Field(description="Introduction of the article")
    explanation: str = Field(description="Point by point explanation")
    summary: str = Field(description="Wrap-up of the article")


class HeadlineTopicScript(BaseModel):
    """Full script of a headline topic program."""

    title: str = Field(description="Program title")
    opening: str = Field(description="Program opening")
    posts: List[HeadlinePostSection] = Field(description="One section per article")
    ending: str = Field(description="Program ending")


class PostDescription(BaseModel):
    """Explanation of one article in a personalized program."""

    id: str = Field(description="Article id")
    title: str = Field(description="Article title")
    description: str = Field(description="Explanation of the article")


class PersonalizedProgramScript(BaseModel):
    """Full script of a personalized program."""

    title: str = Field(description="Program title")
    opening: str = Field(description="Program opening")
    posts: List[PostDescription] = Field(description="One description per article")
    ending: str = Field(description="Program ending")
