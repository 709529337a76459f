import logging
from typing import Any, Dict, Optional

import httpx

from .errors import ClientError, error_from_response

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
FUNCTIONS_PREFIX = "/functions/v1"


class ApiClient:
    """
    Thin HTTP layer shared by the gateways and repositories.

    Holds the bearer token of the signed-in session and turns every non-2xx
    response into a `ClientError`. Any `httpx.Client` works as transport,
    including FastAPI's `TestClient`.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ):
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.access_token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.access_token is not None

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        files: Any = None,
    ) -> Any:
        headers = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        # None means "no filter", not an empty query value
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        try:
            response = self.http.request(
                method, path, json=json, params=params or None, files=files, headers=headers
            )
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise ClientError(f"Network error: {e}") from e

        if response.status_code >= 400:
            error = error_from_response(response)
            logger.warning("%s %s -> %s: %s", method, path, response.status_code, error.message)
            raise error

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error("%s %s returned a non-JSON body: %s", method, path, e)
            raise ClientError("Unexpected response from server", response.status_code) from e

    def get(self, path: str, **kwargs) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> Any:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        self.http.close()
