"""Ingestion service - decodes a webhook and hands it to the storer."""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from db.base import Storer
from exceptions import (
    CommitError,
    ConnectError,
    PayloadError,
    RollbackError,
    SaveCancelledError,
    StoreError,
    WriteError,
)
from schemas.webhook import AlertGroup
from services.decoder import decode

logger = logging.getLogger(__name__)


class OutcomeKind(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    STORE_FAILED = "store_failed"


@dataclass(frozen=True)
class Outcome:
    """Result of ingesting one webhook. Never a partial success."""

    kind: OutcomeKind
    reason: str = ""
    group: Optional[AlertGroup] = None
    error: Optional[Exception] = None

    @property
    def accepted(self) -> bool:
        return self.kind is OutcomeKind.ACCEPTED


def _store_reason(e: StoreError) -> str:
    # Driver messages stay in the logs, the caller gets the failing step
    if isinstance(e, SaveCancelledError):
        return e.message
    if isinstance(e, WriteError):
        return f"failed to insert into {e.step}"
    if isinstance(e, RollbackError):
        return f"failed to insert into {e.write_error.step}, and the rollback failed"
    if isinstance(e, CommitError):
        return "failed to commit transaction"
    if isinstance(e, ConnectError):
        return "database is not reachable"
    return e.message


class IngestionHandler:
    """Runs decode then save for each webhook. Does not retry; the sender does."""

    def __init__(self, storer: Storer, debug: bool = False):
        self.storer = storer
        self.debug = debug

    def handle(self, raw: bytes, deadline: Optional[float] = None) -> Outcome:
        """
        Ingest one webhook payload.

        Args:
            raw: Request body
            deadline: Optional time.monotonic() value bounding the store write

        Returns:
            ACCEPTED when every row was committed, REJECTED when the payload is
            invalid, STORE_FAILED when the write was rolled back or never started
        """
        if self.debug:
            logger.debug(f"Received webhook payload: {raw.decode('utf-8', errors='replace')}")

        try:
            group = decode(raw)
        except PayloadError as e:
            logger.error(f"Invalid payload: {e}")
            return Outcome(OutcomeKind.REJECTED, reason=f"Invalid payload: {e}", error=e)

        try:
            self.storer.save(group, deadline=deadline)
        except StoreError as e:
            logger.error(f"failed to save alerts: {e}", exc_info=e.__cause__ is not None)
            return Outcome(OutcomeKind.STORE_FAILED, reason=f"failed to save alerts: {_store_reason(e)}", group=group, error=e)

        logger.debug(f"Saved {len(group.alerts)} alerts from receiver {group.receiver}")
        return Outcome(OutcomeKind.ACCEPTED, group=group)
