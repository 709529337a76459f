import logging
from typing import List

from .api import FUNCTIONS_PREFIX, ApiClient
from .errors import ClientError, InvalidInputError, SubtaskGenerationError

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Failed to generate subtasks"


class SubtaskGenerationProxy:
    """Calls the generate-subtasks function; every failure looks the same to the caller."""

    def __init__(self, api: ApiClient):
        self.api = api

    def generate(self, task_title: str) -> List[str]:
        if not task_title or not task_title.strip():
            raise InvalidInputError("Task title is required")

        try:
            body = self.api.post(
                f"{FUNCTIONS_PREFIX}/generate-subtasks",
                json={"taskTitle": task_title.strip()},
            )
        except ClientError as e:
            logger.error("Subtask generation failed for %r: %s", task_title, e.message)
            raise SubtaskGenerationError(GENERIC_FAILURE, e.status_code) from e

        subtasks = body.get("subtasks") if isinstance(body, dict) else None
        if not isinstance(subtasks, list) or not all(isinstance(item, str) for item in subtasks):
            logger.error("Unexpected generate-subtasks response: %r", body)
            raise SubtaskGenerationError(GENERIC_FAILURE)

        return subtasks
