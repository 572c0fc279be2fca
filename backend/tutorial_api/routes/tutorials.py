"""
Tutorial API - Tutorial Route Handlers
======================================

What:  The /tutorials dispatch table.
How:   Each handler parses its input, calls TutorialService, and returns the
       result. Errors are raised as application exceptions and turned into
       JSON responses by the global handlers in main.py.

Route Inventory:
    POST   /tutorials              create            → 201 Tutorial
    GET    /tutorials?title=...    find_all          → 200 [Tutorial]
    GET    /tutorials/published    find_all_published→ 200 [Tutorial]
    GET    /tutorials/{id}         find_by_id        → 200 Tutorial | 404
    PUT    /tutorials/{id}         update            → 200 message  | 404
    DELETE /tutorials/{id}         delete_by_id      → 200 message  | 404
    DELETE /tutorials              delete_all        → 200 message + count

/tutorials/published is declared before /tutorials/{tutorial_id}; routes
match in declaration order.

Request bodies may be JSON or form-encoded; `parse_body` reads either and
validates the result against the same schema.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from tutorial_api.exceptions import ValidationError
from tutorial_api.schemas.tutorial import (
    DeleteAllResponse,
    ErrorResponse,
    MessageResponse,
    Tutorial,
    TutorialCreate,
    TutorialUpdate,
)
from tutorial_api.services.tutorial_service import TutorialService, get_tutorial_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tutorials", tags=["Tutorials"])

ModelT = TypeVar("ModelT", bound=BaseModel)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


# ══════════════════════════════════════════════════════════════════════════
# Body Parsing
# ══════════════════════════════════════════════════════════════════════════


async def parse_body(request: Request, model: Type[ModelT]) -> ModelT:
    """
    Read a JSON or form-encoded request body and validate it against `model`.

    An empty body is treated as an empty object, so required fields surface
    as validation errors rather than parse errors.

    Raises:
        ValidationError: the body is not an object, cannot be decoded, or
            fails schema validation (→ 400)
    """
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        payload: Any = {key: value for key, value in form.items()}
    else:
        raw = await request.body()
        try:
            payload = json.loads(raw) if raw.strip() else {}
        except ValueError as e:
            raise ValidationError(
                message="Request body is not valid JSON",
                context={"error": str(e)},
            )

    if not isinstance(payload, dict):
        raise ValidationError(message="Request body must be a JSON object")

    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        errors = [
            {
                "field": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
            }
            for err in e.errors(include_url=False, include_context=False, include_input=False)
        ]
        first = errors[0]
        raise ValidationError(
            message=f"{first['field']}: {first['message']}" if first["field"] else first["message"],
            field=first["field"] or None,
            context={"errors": errors},
        )


def _request_body_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """OpenAPI requestBody for a handler that reads the body via parse_body."""
    schema = model.model_json_schema()
    return {
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": schema},
                "application/x-www-form-urlencoded": {"schema": schema},
            },
        }
    }


# ══════════════════════════════════════════════════════════════════════════
# Handlers
# ══════════════════════════════════════════════════════════════════════════


@router.post(
    "",
    status_code=201,
    response_model=Tutorial,
    responses={
        400: {"description": "Missing or blank title", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a tutorial",
    openapi_extra=_request_body_schema(TutorialCreate),
)
async def create_tutorial(
    request: Request,
    service: TutorialService = Depends(get_tutorial_service),
) -> Tutorial:
    data = await parse_body(request, TutorialCreate)
    return await service.create(data)


@router.get(
    "",
    response_model=List[Tutorial],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List tutorials, optionally filtered by title",
)
async def list_tutorials(
    title: Optional[str] = Query(
        default=None,
        description="Case-insensitive substring the title must contain",
    ),
    service: TutorialService = Depends(get_tutorial_service),
) -> List[Tutorial]:
    return await service.find_all(title)


@router.get(
    "/published",
    response_model=List[Tutorial],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List published tutorials",
)
async def list_published_tutorials(
    service: TutorialService = Depends(get_tutorial_service),
) -> List[Tutorial]:
    return await service.find_all_published()


@router.get(
    "/{tutorial_id}",
    response_model=Tutorial,
    responses={
        404: {"description": "Tutorial not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a tutorial by id",
)
async def get_tutorial(
    tutorial_id: str,
    service: TutorialService = Depends(get_tutorial_service),
) -> Tutorial:
    return await service.find_by_id(tutorial_id)


@router.put(
    "/{tutorial_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Empty or invalid update", "model": ErrorResponse},
        404: {"description": "Tutorial not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update a tutorial (partial)",
    openapi_extra=_request_body_schema(TutorialUpdate),
)
async def update_tutorial(
    tutorial_id: str,
    request: Request,
    service: TutorialService = Depends(get_tutorial_service),
) -> MessageResponse:
    """
    Only the fields present in the body are changed. A body with no
    updatable fields is rejected before the database is touched.
    """
    data = await parse_body(request, TutorialUpdate)
    if not data.to_update_fields():
        raise ValidationError(message="Data to update can not be empty!")

    await service.update(tutorial_id, data)
    return MessageResponse(message="Tutorial was updated successfully.")


@router.delete(
    "/{tutorial_id}",
    response_model=MessageResponse,
    responses={
        404: {"description": "Tutorial not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a tutorial",
)
async def delete_tutorial(
    tutorial_id: str,
    service: TutorialService = Depends(get_tutorial_service),
) -> MessageResponse:
    await service.delete_by_id(tutorial_id)
    return MessageResponse(message="Tutorial was deleted successfully!")


@router.delete(
    "",
    response_model=DeleteAllResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Delete all tutorials",
)
async def delete_all_tutorials(
    service: TutorialService = Depends(get_tutorial_service),
) -> DeleteAllResponse:
    deleted = await service.delete_all()
    return DeleteAllResponse(
        message=f"{deleted} Tutorials were deleted successfully!",
        deleted_count=deleted,
    )
