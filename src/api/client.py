"""Async HTTP client for the sql-to-logsql service.

Every failure (non-200 status, transport error, malformed body) surfaces as `ApiError`, so callers
only need one except clause.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from src.api.schema import ErrorResponse, ServerConfig, TranslateRequest, TranslateResponse

logger = logging.getLogger(__name__)

CONFIG_PATH = "/api/v1/config"
SQL_TO_LOGSQL_PATH = "/api/v1/sql-to-logsql"


class ApiError(RuntimeError):
    """Raised when the service rejects a request or cannot be reached."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


def _error_message(resp: httpx.Response) -> str:
    try:
        message = ErrorResponse.model_validate(resp.json()).error
    except (ValueError, ValidationError):
        message = ""
    return message or f"status {resp.status_code}"


class SqlToLogsqlClient:
    """Thin wrapper around `httpx.AsyncClient` bound to the service base URL.

    Args:
        base_url: Service root, e.g. `http://localhost:8080`.
        timeout: Seconds; `None` disables client-side timeouts.
        transport: Optional transport override (tests use `httpx.MockTransport`).
    """

    def __init__(
            self,
            base_url: str,
            *,
            timeout: float | None = None,
            transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> SqlToLogsqlClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_config(self) -> ServerConfig:
        """Fetch server-side configuration (`endpoint`, `limit`)."""

        try:
            resp = await self._client.get(CONFIG_PATH)
        except httpx.HTTPError as exc:
            raise ApiError(f"config request failed: {exc}") from exc

        if resp.status_code != 200:
            raise ApiError(_error_message(resp), status=resp.status_code)

        try:
            return ServerConfig.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise ApiError("unexpected config response format", status=resp.status_code) from exc

    async def sql_to_logsql(
            self,
            request: TranslateRequest,
            *,
            bearer_token: str,
    ) -> TranslateResponse:
        """Translate (and, in `query` mode, execute) a SQL statement.

        Raises:
            ApiError: On any non-200 status, carrying the server-provided error text.
        """

        try:
            resp = await self._client.post(
                SQL_TO_LOGSQL_PATH,
                json=request.to_body(),
                headers={"Authorization": f"Bearer {bearer_token}"},
            )
        except httpx.HTTPError as exc:
            raise ApiError(f"request failed: {exc}") from exc

        if resp.status_code != 200:
            message = _error_message(resp)
            logger.debug("sql-to-logsql rejected status=%d error=%s", resp.status_code, message)
            raise ApiError(message, status=resp.status_code)

        try:
            return TranslateResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise ApiError("unexpected response format", status=resp.status_code) from exc
