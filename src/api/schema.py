"""JSON bodies exchanged with the sql-to-logsql service (Pydantic models).

Field names follow the service's camelCase JSON; Python attributes are snake_case.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.config.settings import ExecMode


class ServerConfig(BaseModel):
    """Response of `GET /api/v1/config`.

    A non-empty `endpoint` means the service enforces a fixed logs endpoint.
    """

    model_config = ConfigDict(extra="ignore")

    endpoint: str | None = None
    limit: int = 0

    @field_validator("limit", mode="before")
    @classmethod
    def default_missing_limit(cls, value: Any) -> Any:
        return 0 if value is None else value


class TranslateRequest(BaseModel):
    """Body of `POST /api/v1/sql-to-logsql`."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    sql: str
    start: str | None = None
    end: str | None = None
    exec_mode: ExecMode = Field(default="query", alias="execMode")
    endpoint: str | None = None
    bearer_token: str | None = Field(default=None, alias="bearerToken")

    def to_body(self) -> dict[str, Any]:
        """Serialize to the wire shape, leaving out unset optional fields."""

        return self.model_dump(by_alias=True, exclude_none=True)


class TranslateResponse(BaseModel):
    """Successful (HTTP 200) response of `POST /api/v1/sql-to-logsql`."""

    model_config = ConfigDict(extra="ignore")

    logsql: str = ""
    data: Any = None


class ErrorResponse(BaseModel):
    """Error body returned with any non-200 status."""

    model_config = ConfigDict(extra="ignore")

    error: str = ""
