"""Course API schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from devcamper.schemas.bootcamp import BootcampSummary


class MinimumSkill(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Course(BaseModel):
    id: str
    owner_id: str
    bootcamp_id: str
    title: str
    description: str
    weeks: str
    tuition: float
    minimum_skill: MinimumSkill
    scholarship_available: bool = False
    created_at: datetime
    bootcamp: BootcampSummary | None = None


class CreateCourseRequest(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    weeks: str = Field(min_length=1)
    tuition: float = Field(ge=0)
    minimum_skill: MinimumSkill
    scholarship_available: bool = False


class UpdateCourseRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    weeks: str | None = Field(default=None, min_length=1)
    tuition: float | None = Field(default=None, ge=0)
    minimum_skill: MinimumSkill | None = None
    scholarship_available: bool | None = None
