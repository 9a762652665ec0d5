from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from fastapi import Request

from schemas.webhook import AlertGroup


@dataclass(frozen=True)
class ConnectionArgs:
    """Store connection parameters, consumed once when the storer is built."""

    dsn: str
    max_idle_conns: int = 2
    max_open_conns: int = 2
    max_conn_lifetime_seconds: int = 600


@runtime_checkable
class Storer(Protocol):
    """Anything that can persist webhooks and report on its own health."""

    def save(self, group: AlertGroup, deadline: Optional[float] = None) -> None:
        """Persist one webhook atomically; deadline is a time.monotonic() value."""
        ...

    def ping(self) -> None:
        """Raise if the store is not reachable."""
        ...

    def check_model(self) -> None:
        """Raise if the store schema version is not the supported one."""
        ...

    def close(self) -> None:
        """Release every held connection."""
        ...


# Dependency to get the storer the application was started with
def get_storer(request: Request) -> Storer:
    return request.app.state.storer
