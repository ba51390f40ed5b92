"""
Courseware Backend — Course Schemas
=====================================

What:  Pydantic models describing a Course, plus the `COURSE` resource definition.
How:   Attributes are snake_case in Python and camelCase on the wire
       (`last_updated` ↔ `lastUpdated`); both spellings are accepted on input.
Who:   Used by the course routes (request/response models), the SQL store
       (column names) and the course client (response decoding).

Every field is optional. Nested sequences (description, instructor,
certificate) keep their order as given.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from courseware.schemas.resource import ResourceDefinition


class CourseModel(BaseModel):
    """Shared config: camelCase aliases, lax coercion, unknown keys dropped."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class CourseDescription(CourseModel):
    about: Optional[str] = None
    learning: Optional[List[str]] = None
    materials: Optional[List[str]] = None


class CourseInstructor(CourseModel):
    user: Optional[str] = None
    title: Optional[str] = None


class CourseCertificate(CourseModel):
    is_locked: Optional[bool] = None


class CourseCreate(CourseModel):
    """
    Payload accepted by POST /api/courses.

    No field is required; a request body of `{}` creates an empty course.
    """

    title: Optional[str] = None
    description: Optional[List[CourseDescription]] = None
    duration: Optional[float] = Field(default=None, description="Length in hours")
    rating: Optional[float] = None
    level: Optional[str] = None
    instructor: Optional[List[CourseInstructor]] = None
    language: Optional[str] = None
    last_updated: Optional[datetime] = None
    course_type: Optional[str] = None
    enrolled: Optional[float] = Field(default=None, description="Number of enrolled learners")
    certificate: Optional[List[CourseCertificate]] = None

    @field_validator("last_updated")
    @classmethod
    def last_updated_as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        """Hold timestamps as UTC instants; naive values are taken to be UTC."""
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class CourseResponse(CourseCreate):
    """A persisted course: the create fields plus the storage-assigned id."""

    id: str = Field(description="Storage-assigned identifier (immutable)")


COURSE: ResourceDefinition[CourseResponse] = ResourceDefinition(
    name="course",
    path="courses",
    label="Course",
    create_model=CourseCreate,
    read_model=CourseResponse,
)
