import json
import logging
from typing import Any, List, Optional

from openai import OpenAI, OpenAIError

from taskflow.core.config import settings

logger = logging.getLogger(__name__)

# --- SYSTEM PROMPT ---
SYSTEM_PROMPT = """
Break down the main task provided by the user into a list of 5 to 7 practical, concise subtasks written in plain language. Subtasks should cover the essential steps needed to complete the main task. Return the subtasks as a plain JSON array, without any additional explanations, text, or formatting. Each subtask should be clear, specific, and actionable.

Output format: A single JSON array with each subtask as a string element.

Example:
Input: Plan a wedding
Output:
["Book wedding venue", "Hire photographer", "Send invitations", "Arrange catering", "Plan wedding ceremony", "Choose wedding dress", "Plan honeymoon"]

REMINDER: Generate 5-7 clear, actionable subtasks for the given task, written in plain language, and return them in a JSON array with no extra explanation or formatting.
"""


class SubtaskGenerationError(Exception):
    """Raised with the message that is safe to hand back to the caller."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def parse_subtasks(text: str) -> List[str]:
    """
    Parse a completion into a list of subtask titles.

    The whole text must be a JSON array of strings; anything else is rejected
    rather than partially accepted.
    """
    try:
        subtasks = json.loads(text.strip())
    except json.JSONDecodeError as e:
        raise SubtaskGenerationError("Failed to parse generated subtasks") from e

    if not isinstance(subtasks, list) or not all(isinstance(item, str) for item in subtasks):
        raise SubtaskGenerationError("Failed to parse generated subtasks")

    return subtasks


class SubtaskGenerator:
    """Single request/response call to an OpenAI-compatible chat completion endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        client: Any = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def generate(self, task_title: str) -> List[str]:
        if not task_title or not task_title.strip():
            raise SubtaskGenerationError("Task title is required", status_code=400)

        if not self.api_key:
            raise SubtaskGenerationError("OpenAI API key not configured")

        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": task_title.strip()},
                ],
                temperature=1,
                max_tokens=2048,
                top_p=1,
                frequency_penalty=0,
                presence_penalty=0,
            )
        except OpenAIError as e:
            logger.error("Completion API error: %s", e)
            raise SubtaskGenerationError("Failed to generate subtasks") from e

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise SubtaskGenerationError("No subtasks generated")

        try:
            return parse_subtasks(content)
        except SubtaskGenerationError:
            logger.error("Failed to parse subtasks from completion: %r", content)
            raise


# Dependency: built per request so configuration changes are picked up
def get_subtask_generator() -> SubtaskGenerator:
    return SubtaskGenerator(
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_MODEL,
        base_url=settings.OPENAI_BASE_URL,
    )
