import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from taskflow.models.user import User
from taskflow.schemas.subtask import GenerateSubtasksRequest, GenerateSubtasksResponse
from taskflow.services.subtask_generator import (
    SubtaskGenerator,
    SubtaskGenerationError,
    get_subtask_generator,
)
from taskflow.api.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post(
    "/generate-subtasks",
    response_model=GenerateSubtasksResponse,
    responses={400: {"description": "Missing task title"}, 500: {"description": "Generation failed"}},
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": GenerateSubtasksRequest.model_json_schema()}},
        }
    },
)
async def generate_subtasks(
    request: Request,
    current_user: User = Depends(get_current_user),
    generator: SubtaskGenerator = Depends(get_subtask_generator),
):
    """
    Break a task title down into 5-7 subtask titles.

    The body is read by hand so that a malformed payload still answers with
    `{"error": "..."}` instead of FastAPI's 422 `detail` shape.
    """
    try:
        payload = await request.json()
    except ValueError as e:
        logger.warning("Unreadable generate-subtasks body: %s", e)
        return error_response(400, "Invalid request body")

    try:
        body = GenerateSubtasksRequest.model_validate(payload)
    except ValidationError:
        return error_response(400, "Task title is required")

    try:
        subtasks = await run_in_threadpool(generator.generate, body.task_title or "")
    except SubtaskGenerationError as e:
        return error_response(e.status_code, e.message)

    return GenerateSubtasksResponse(subtasks=subtasks)
