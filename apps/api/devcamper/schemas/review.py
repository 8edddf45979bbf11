"""Review API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from devcamper.schemas.bootcamp import BootcampSummary


class Review(BaseModel):
    id: str
    owner_id: str
    bootcamp_id: str
    title: str
    text: str
    rating: int
    created_at: datetime
    bootcamp: BootcampSummary | None = None


class CreateReviewRequest(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    text: str = Field(min_length=1)
    rating: int = Field(ge=1, le=10)


class UpdateReviewRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=100)
    text: str | None = Field(default=None, min_length=1)
    rating: int | None = Field(default=None, ge=1, le=10)
