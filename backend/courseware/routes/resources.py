"""
Courseware Backend — Generic Resource Routes
==============================================

What:  Builds the three-route table for any ResourceDefinition.
How:   Maps HTTP verbs onto ResourceService operations; the service comes
       from a FastAPI dependency so tests can swap the storage collaborator.
Who:   Used by routes/courses.py (and by any future resource module).

Route Table (for path "courses", mounted under the API prefix):
    POST /courses        → create(body)   → 201 instance     | 500
    GET  /courses        → list()         → 200 [instances]  | 404 "No courses" | 500
    GET  /courses/{id}   → get_by_id(id)  → 200 instance     | 404 "Course not found" | 500

Errors are raised as application exceptions and rendered by the global
handlers in main.py, so the route functions stay one line long.
"""

from typing import Any, Callable, List

from fastapi import APIRouter, Body, Depends

from courseware.schemas.common import ErrorResponse
from courseware.schemas.resource import ResourceDefinition
from courseware.services.resource_service import ResourceService


def build_resource_router(
    definition: ResourceDefinition,
    get_service: Callable[..., ResourceService],
) -> APIRouter:
    """
    Create an APIRouter exposing list / get-by-id / create for one resource.

    Args:
        definition:  Resource schema, path and messages
        get_service: FastAPI dependency returning a ResourceService for the request

    Returns:
        Router with prefix "/{definition.path}"; include it under the API prefix.
    """
    read_model = definition.read_model
    router = APIRouter(prefix=f"/{definition.path}", tags=[definition.label])

    @router.post(
        "",
        name=f"create_{definition.name}",
        status_code=201,
        response_model=read_model,
        response_model_exclude_none=True,
        responses={
            201: {"description": f"{definition.label} created", "model": read_model},
            500: {"description": "Storage error, or payload not assignable to the schema", "model": ErrorResponse},
        },
        summary=f"Create a {definition.name}",
    )
    async def create_resource(
        payload: Any = Body(..., description=f"{definition.label} fields"),
        service: ResourceService = Depends(get_service),
    ):
        return await service.create(payload)

    @router.get(
        "",
        name=f"list_{definition.path}",
        response_model=List[read_model],
        response_model_exclude_none=True,
        responses={
            200: {"description": f"Every stored {definition.name}"},
            404: {"description": definition.empty_message, "model": ErrorResponse},
            500: {"description": "Storage error", "model": ErrorResponse},
        },
        summary=f"List {definition.path}",
    )
    async def list_resources(service: ResourceService = Depends(get_service)):
        return await service.list()

    @router.get(
        "/{resource_id}",
        name=f"get_{definition.name}",
        response_model=read_model,
        response_model_exclude_none=True,
        responses={
            200: {"description": f"The {definition.name}", "model": read_model},
            404: {"description": definition.not_found_message, "model": ErrorResponse},
            500: {"description": "Storage error (including malformed ids)", "model": ErrorResponse},
        },
        summary=f"Get a {definition.name} by id",
    )
    async def get_resource(
        resource_id: str,
        service: ResourceService = Depends(get_service),
    ):
        return await service.get_by_id(resource_id)

    return router
