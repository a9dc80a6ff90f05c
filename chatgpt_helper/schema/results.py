from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class GeneratedContent(BaseModel):
    """Outcome of one templated generation call."""

    success: bool
    type: str
    content: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)
    tokens_used: int = 0
    estimated_cost: float = 0.0
    error: str = ""

    # Set by generate_variations / generate_series
    variation: int | None = None
    series_part: int | None = None
    title: str = ""


class ContentSeries(BaseModel):
    success: bool
    topic: str
    outline: str = ""
    posts: list[GeneratedContent] = Field(default_factory=list)
    error: str = ""

    @property
    def total_tokens(self) -> int:
        return sum(p.tokens_used for p in self.posts)

    @property
    def total_estimated_cost(self) -> float:
        return sum(p.estimated_cost for p in self.posts)


class SeoReport(BaseModel):
    success: bool
    keyword: str
    original_content: str = ""
    recommendations: str = ""
    tokens_used: int = 0
    error: str = ""


class TicketReply(BaseModel):
    """Support bot answer to one customer message."""

    success: bool
    response: str = ""
    tokens_used: int = 0
    needs_escalation: bool = False
    error: str = ""
    fallback_response: str = ""
