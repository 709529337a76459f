from typing import Optional

import httpx


class ClientError(Exception):
    """An operation failed; `message` is fit for an error banner."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthError(ClientError):
    pass


class InvalidInputError(ClientError):
    pass


class NotFoundError(ClientError):
    pass


class SubtaskGenerationError(ClientError):
    pass


def _message_from_body(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Request failed with status {response.status_code}"

    if isinstance(body, dict):
        if body.get("error"):
            return str(body["error"])
        detail = body.get("detail")
        # FastAPI validation errors: a list of {"loc", "msg", ...}
        if isinstance(detail, list):
            messages = [str(item.get("msg", item)) if isinstance(item, dict) else str(item) for item in detail]
            return "; ".join(messages) or "Invalid request"
        if detail:
            return str(detail)
    return f"Request failed with status {response.status_code}"


def error_from_response(response: httpx.Response) -> ClientError:
    message = _message_from_body(response)
    code = response.status_code
    if code == 401:
        return AuthError(message, code)
    if code == 404:
        return NotFoundError(message, code)
    if code in (400, 422):
        return InvalidInputError(message, code)
    return ClientError(message, code)
