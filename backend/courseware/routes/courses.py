"""
Courseware Backend — Course Routes
====================================

What:  Mounts the generic resource routes for the Course resource.
How:   `get_course_service` builds a SQL-backed ResourceService from the
       request's session; tests override it via `app.dependency_overrides`.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from courseware.database import get_db_session
from courseware.models.course import CourseRecord
from courseware.routes.resources import build_resource_router
from courseware.schemas.course import COURSE, CourseResponse
from courseware.services.resource_service import ResourceService
from courseware.services.storage import SQLAlchemyResourceStore


def get_course_service(
    db: AsyncSession = Depends(get_db_session),
) -> ResourceService[CourseResponse]:
    store = SQLAlchemyResourceStore(db, CourseRecord, COURSE.field_names)
    return ResourceService(COURSE, store)


router = build_resource_router(COURSE, get_course_service)
