"""Request/response schemas for article endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ArticleCreate(BaseModel):
    url: str = Field(..., max_length=2048, description="Absolute http(s) URL")


class ArticleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    url: str
    owner_id: int
    owner_username: str
    created_at: datetime
    can_delete: bool = False


class ArticlesListResponse(BaseModel):
    articles: list[ArticleResponse]
