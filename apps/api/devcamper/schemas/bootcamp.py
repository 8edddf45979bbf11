"""Bootcamp API schemas."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class Career(str, Enum):
    WEB_DEVELOPMENT = "Web Development"
    MOBILE_DEVELOPMENT = "Mobile Development"
    UI_UX = "UI/UX"
    DATA_SCIENCE = "Data Science"
    BUSINESS = "Business"
    OTHER = "Other"


class Location(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: list[float] = Field(min_length=2, max_length=2)
    formatted_address: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None
    country: str | None = None


class Bootcamp(BaseModel):
    id: str
    owner_id: str
    name: str
    slug: str
    description: str
    website: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    location: Location | None = None
    careers: list[Career]
    housing: bool = False
    job_assistance: bool = False
    job_guarantee: bool = False
    accept_gi: bool = False
    average_cost: float | None = None
    average_rating: float | None = None
    photo: str = "no-photo.jpg"
    created_at: datetime


class BootcampSummary(BaseModel):
    id: str
    name: str | None = None
    description: str | None = None


class CreateBootcampRequest(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    description: str = Field(min_length=1, max_length=500)
    website: str | None = None
    phone: str | None = Field(default=None, max_length=20)
    email: str | None = None
    address: str = Field(min_length=1)
    careers: list[Career] = Field(min_length=1)
    housing: bool = False
    job_assistance: bool = False
    job_guarantee: bool = False
    accept_gi: bool = False


class UpdateBootcampRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, min_length=1, max_length=500)
    website: str | None = None
    phone: str | None = Field(default=None, max_length=20)
    email: str | None = None
    address: str | None = Field(default=None, min_length=1)
    careers: list[Career] | None = Field(default=None, min_length=1)
    housing: bool | None = None
    job_assistance: bool | None = None
    job_guarantee: bool | None = None
    accept_gi: bool | None = None
