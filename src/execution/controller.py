"""Execution lifecycle controller.

State machine:
    Idle -> Loading -> Succeeded | Failed

`execute` is single-flight: while a request (or the config bootstrap) is outstanding, further
calls are no-ops that return the current `Loading` state. There is no cancellation and no retry;
the caller re-triggers `execute` after a failure.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from time import monotonic

from src.api.client import ApiError, SqlToLogsqlClient
from src.api.schema import ServerConfig, TranslateRequest
from src.config.settings import ExecMode
from src.execution.state import (
    SERVER_MANAGED_TOKEN,
    EndpointConfig,
    ExecutionEvent,
    ExecutionState,
    Failed,
    Idle,
    Loading,
    Succeeded,
    TimeRangeValue,
)
from src.execution.timing import success_message
from src.timerange.expressions import (
    Clock,
    ParseError,
    TimeExpressionParser,
    to_epoch_ms,
    utc_now,
)

logger = logging.getLogger(__name__)

Listener = Callable[[ExecutionEvent], None]

EXECUTE_ERROR_MESSAGE = "execute error:"
INTERNAL_ERROR_MESSAGE = "internal error"


class EndpointLockedError(ValueError):
    """Raised when overriding an endpoint that the service manages."""


class ExecutionController:
    """Owns `ExecutionState` and `EndpointConfig` for one session.

    Args:
        client: sql-to-logsql HTTP client.
        endpoint: Initial endpoint config; `bootstrap` may lock it to the server's value.
        exec_mode: Default mode for `execute`.
        parser: Time expression parser used to resolve range bounds.
        clock: Returns "now" for relative expressions; captured once per `execute`.
        timer: Monotonic seconds, used to measure request latency.
    """

    def __init__(
            self,
            client: SqlToLogsqlClient,
            *,
            endpoint: EndpointConfig,
            exec_mode: ExecMode = "query",
            parser: TimeExpressionParser | None = None,
            clock: Clock = utc_now,
            timer: Callable[[], float] = monotonic,
    ) -> None:
        self._client = client
        self._endpoint = replace(endpoint)
        self._exec_mode: ExecMode = exec_mode
        self._parser = parser or TimeExpressionParser()
        self._clock = clock
        self._timer = timer
        self._state: ExecutionState = Idle()
        self._listeners: list[Listener] = []
        self._bootstrapped = False
        self.limit = 0

    @property
    def state(self) -> ExecutionState:
        return self._state

    @property
    def endpoint(self) -> EndpointConfig:
        """A copy of the current endpoint config."""

        return replace(self._endpoint)

    @property
    def exec_mode(self) -> ExecMode:
        return self._exec_mode

    @property
    def is_loading(self) -> bool:
        return isinstance(self._state, Loading)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for execution events. Returns an unsubscribe callable."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_exec_mode(self, mode: ExecMode) -> None:
        self._exec_mode = mode

    def set_endpoint(self, url: str, token: str) -> None:
        """Override the logs endpoint sent with each request.

        Raises:
            EndpointLockedError: If the service enforces its own endpoint.
        """

        if not self._endpoint.enabled:
            raise EndpointLockedError("endpoint is managed by the server")
        self._endpoint = replace(self._endpoint, url=url, token=token)

    async def bootstrap(self) -> None:
        """Fetch server-side configuration once per session.

        Failure is not fatal: the error is logged and client-side defaults stay in place.
        """

        if self._bootstrapped:
            logger.debug("bootstrap skipped reason=already_done")
            return
        self._bootstrapped = True

        self._state = Loading()
        try:
            config = await self._client.get_config()
        except ApiError as exc:
            logger.warning("bootstrap failed, using defaults error=%s", exc.message)
        else:
            self._apply_server_config(config)
        finally:
            self._state = Idle()

    def _apply_server_config(self, config: ServerConfig) -> None:
        if config.endpoint:
            self._endpoint = EndpointConfig(
                url=config.endpoint,
                token=SERVER_MANAGED_TOKEN,
                enabled=False,
            )
        self.limit = config.limit
        logger.info(
            "bootstrap done endpoint_locked=%s limit=%d",
            not self._endpoint.enabled,
            self.limit,
        )

    def resolve_bound(self, text: str, now: datetime) -> datetime | None:
        """Resolve one range bound. Unset and unparseable bounds resolve to `None`."""

        if not text:
            return None
        result = self._parser.parse(text, now)
        if isinstance(result, ParseError):
            logger.warning("time bound ignored text=%r reason=%s", text, result.message)
            return None
        return result

    def build_request(
            self,
            sql: str,
            time_range: TimeRangeValue,
            mode: ExecMode,
            now: datetime,
    ) -> TranslateRequest:
        """Build the request body; endpoint overrides are only sent when enabled."""

        start = self.resolve_bound(time_range.from_, now)
        end = self.resolve_bound(time_range.to, now)

        # An epoch-0 bound is still sent, as "0"; only unset or unparseable bounds are omitted.
        request = TranslateRequest(
            sql=sql,
            start=str(to_epoch_ms(start)) if start is not None else None,
            end=str(to_epoch_ms(end)) if end is not None else None,
            exec_mode=mode,
        )
        if self._endpoint.enabled:
            request.endpoint = self._endpoint.url
            request.bearer_token = self._endpoint.token
        return request

    async def execute(
            self,
            sql: str,
            time_range: TimeRangeValue | None = None,
            mode: ExecMode | None = None,
    ) -> ExecutionState:
        """Run one translate/query request and return the settled state.

        Returns the current `Loading` state without issuing a request if one is in flight.
        """

        if self.is_loading:
            logger.info("execute skipped reason=in_flight")
            return self._state

        mode = mode or self._exec_mode
        request = self.build_request(sql, time_range or TimeRangeValue(), mode, self._clock())

        self._state = Loading()
        started = self._timer()
        try:
            response = await self._client.sql_to_logsql(request, bearer_token=self._endpoint.token)
        except ApiError as exc:
            self._state = Failed(message=exc.message)
            logger.warning(
                "execute failed mode=%s status=%s error=%s", mode, exc.status, exc.message
            )
            self._emit(
                ExecutionEvent(kind="error", message=EXECUTE_ERROR_MESSAGE, description=exc.message)
            )
            return self._state
        except Exception:
            self._state = Failed(message=INTERNAL_ERROR_MESSAGE)
            logger.exception("execute crashed mode=%s", mode)
            self._emit(
                ExecutionEvent(
                    kind="error",
                    message=EXECUTE_ERROR_MESSAGE,
                    description=INTERNAL_ERROR_MESSAGE,
                )
            )
            raise

        elapsed_ms = (self._timer() - started) * 1000
        message = success_message(elapsed_ms)
        self._state = Succeeded(
            query=response.logsql,
            results=response.data,
            elapsed_ms=elapsed_ms,
            message=message,
        )
        logger.info("execute done mode=%s latency_ms=%d", mode, int(elapsed_ms))
        self._emit(ExecutionEvent(kind="success", message=message))
        return self._state

    def _emit(self, event: ExecutionEvent) -> None:
        for listener in list(self._listeners):
            # noinspection PyBroadException
            try:
                listener(event)
            except Exception:
                logger.exception("execution listener failed kind=%s", event.kind)
