"""Application composition root.

This module wires together configuration, the HTTP client, the time expression parser and the
execution controller for one client session.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from src.api.client import SqlToLogsqlClient
from src.config.settings import Settings
from src.execution.controller import ExecutionController
from src.execution.state import EndpointConfig
from src.timerange.expressions import Clock, TimeExpressionParser, utc_now


@dataclass(frozen=True)
class App:
    """Shared session dependencies."""

    settings: Settings
    client: SqlToLogsqlClient
    parser: TimeExpressionParser
    controller: ExecutionController
    clock: Clock

    async def aclose(self) -> None:
        await self.client.aclose()


def create_app(
        settings: Settings,
        *,
        clock: Clock = utc_now,
        transport: httpx.AsyncBaseTransport | None = None,
) -> App:
    """Create the application container.

    Note:
        The controller is not bootstrapped. Call `await app.controller.bootstrap()` at startup.
    """

    client = SqlToLogsqlClient(
        settings.api_url,
        timeout=settings.http_timeout_s,
        transport=transport,
    )
    parser = TimeExpressionParser(settings.tz)
    controller = ExecutionController(
        client,
        endpoint=EndpointConfig(url=settings.logs_endpoint, token=settings.logs_bearer_token),
        exec_mode=settings.exec_mode,
        parser=parser,
        clock=clock,
    )
    return App(
        settings=settings,
        client=client,
        parser=parser,
        controller=controller,
        clock=clock,
    )
