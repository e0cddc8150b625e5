"""Session data model: time range, endpoint config and execution state.

`ExecutionState` is a closed union. The controller replaces the whole state on each transition;
no state object is ever updated in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from src.timerange.caption import caption

DEFAULT_FROM = "1h ago"
DEFAULT_TO = "now"

# Token placeholder shown when the service manages endpoint credentials.
SERVER_MANAGED_TOKEN = "secret"


@dataclass(frozen=True)
class TimeRangeValue:
    """A pair of independent time expressions. `""` means the bound is unset."""

    from_: str = DEFAULT_FROM
    to: str = DEFAULT_TO

    @property
    def caption(self) -> str:
        return caption(self.from_, self.to)


@dataclass
class EndpointConfig:
    """Logs endpoint the service should query on the user's behalf.

    `enabled=False` means the service enforces its own endpoint and the client must not send
    `endpoint`/`bearerToken` overrides.
    """

    url: str
    token: str = ""
    enabled: bool = True


@dataclass(frozen=True)
class Idle:
    kind: Literal["idle"] = "idle"


@dataclass(frozen=True)
class Loading:
    kind: Literal["loading"] = "loading"


@dataclass(frozen=True)
class Succeeded:
    """A fully applied response: translated query, payload and timing."""

    query: str
    results: Any
    elapsed_ms: float
    message: str
    kind: Literal["succeeded"] = "succeeded"


@dataclass(frozen=True)
class Failed:
    message: str
    kind: Literal["failed"] = "failed"


ExecutionState = Idle | Loading | Succeeded | Failed

EventKind = Literal["error", "success"]


@dataclass(frozen=True)
class ExecutionEvent:
    """Notification published to subscribers after an execution settles."""

    kind: EventKind
    message: str
    description: str = ""
