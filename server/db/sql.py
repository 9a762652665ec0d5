"""Relational storer - writes webhooks to MySQL or PostgreSQL through SQLAlchemy."""
import logging
import threading
import time
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, TypeVar

from prometheus_client import Gauge
from sqlalchemy import create_engine, func, select, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from db.base import ConnectionArgs
from db.models import (
    SUPPORTED_MODEL,
    AlertAnnotationRow,
    AlertGroupRow,
    AlertLabelRow,
    AlertRow,
    CommonAnnotationRow,
    CommonLabelRow,
    GroupLabelRow,
    ModelVersion,
)
from exceptions import (
    CommitError,
    ConnectError,
    ModelReadError,
    PingTimeoutError,
    RollbackError,
    SaveCancelledError,
    UnsupportedModelError,
    WriteError,
)
from schemas.webhook import AlertGroup
from services.metrics import DATABASE_UP

logger = logging.getLogger(__name__)

PING_TIMEOUT_SECONDS = 1.0

T = TypeVar("T")


class SQLDB:
    """Storer backed by a pooled SQLAlchemy engine."""

    def __init__(
        self,
        args: ConnectionArgs,
        up_gauge: Gauge = DATABASE_UP,
        ping_timeout: float = PING_TIMEOUT_SECONDS,
    ):
        if not args.dsn:
            raise ConnectError("empty DSN provided, can't connect to the database")

        self.up_gauge = up_gauge
        self.ping_timeout = ping_timeout

        try:
            url = make_url(args.dsn)
        except ArgumentError as e:
            raise ConnectError(f"invalid DSN: {e}") from e

        logger.debug(f"Connecting to database {url.render_as_string(hide_password=True)}")

        connect_args = {}
        if url.get_backend_name() == "sqlite":
            # Probes run on their own thread
            connect_args["check_same_thread"] = False

        pool_size = min(args.max_idle_conns, args.max_open_conns)
        try:
            self.engine = create_engine(
                url,
                pool_size=pool_size,
                max_overflow=args.max_open_conns - pool_size,
                pool_recycle=args.max_conn_lifetime_seconds,
                connect_args=connect_args,
            )
        except (ArgumentError, ImportError) as e:
            raise ConnectError(f"failed to open database connection: {e}") from e

        self.dialect = self.engine.dialect.name
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self._probes = ThreadPoolExecutor(max_workers=2, thread_name_prefix="db-probe")
        # At most one ping and one model read in flight; later probes wait on it
        self._inflight: Dict[str, Future] = {}
        self._probe_lock = threading.Lock()

    # Writing

    def save(self, group: AlertGroup, deadline: Optional[float] = None) -> None:
        """
        Persist a webhook and all its alerts in a single transaction.

        Either every row of the webhook is committed or none is.

        Args:
            group: Decoded webhook
            deadline: Optional time.monotonic() value after which the write is abandoned

        Raises:
            ConnectError: transaction could not be started
            WriteError: an insert failed (or the deadline expired); the transaction was rolled back
            RollbackError: an insert failed and the rollback failed as well
            CommitError: the final commit failed
        """
        self._unit_of_work(lambda session: self._write(session, group, deadline))

    def _unit_of_work(self, work: Callable[[Session], None]) -> None:
        if self.engine is None:
            raise ConnectError("database connection is closed")

        with self.SessionLocal() as session:
            try:
                session.connection()
            except SQLAlchemyError as e:
                raise ConnectError(f"failed to begin transaction: {e}") from e

            try:
                work(session)
            except WriteError as e:
                try:
                    session.rollback()
                except SQLAlchemyError as rollback_exc:
                    raise RollbackError(e, rollback_exc) from e
                raise

            try:
                session.commit()
            except SQLAlchemyError as e:
                raise CommitError(f"failed to commit transaction: {e}") from e

    def _write(self, session: Session, group: AlertGroup, deadline: Optional[float]) -> None:
        group_row = self._insert(session, "AlertGroup", deadline, AlertGroupRow(
            time=func.now(),
            receiver=group.receiver,
            status=group.status,
            external_url=group.external_url,
            group_key=group.group_key,
        ))

        for key, value in group.group_labels.items():
            self._insert(session, "GroupLabel", deadline, GroupLabelRow(
                alert_group_id=group_row.id, label=key, value=value))
        for key, value in group.common_labels.items():
            self._insert(session, "CommonLabel", deadline, CommonLabelRow(
                alert_group_id=group_row.id, label=key, value=value))
        for key, value in group.common_annotations.items():
            self._insert(session, "CommonAnnotation", deadline, CommonAnnotationRow(
                alert_group_id=group_row.id, annotation=key, value=value))

        for alert in group.alerts:
            alert_row = self._insert(session, "Alert", deadline, AlertRow(
                alert_group_id=group_row.id,
                status=alert.status,
                starts_at=_utc_naive(alert.starts_at),
                ends_at=None if alert.is_open_ended else _utc_naive(alert.ends_at),
                generator_url=alert.generator_url,
                fingerprint=alert.fingerprint,
            ))

            for key, value in alert.labels.items():
                self._insert(session, "AlertLabel", deadline, AlertLabelRow(
                    alert_id=alert_row.id, label=key, value=value))
            for key, value in alert.annotations.items():
                self._insert(session, "AlertAnnotation", deadline, AlertAnnotationRow(
                    alert_id=alert_row.id, annotation=key, value=value))

        _check_deadline(deadline, "commit")

    def _insert(self, session: Session, step: str, deadline: Optional[float], row: T) -> T:
        _check_deadline(deadline, step)
        session.add(row)
        try:
            # Flush per row: children need the generated parent ID
            session.flush()
        except SQLAlchemyError as e:
            raise WriteError(step, e) from e
        return row

    # Health

    def ping(self) -> None:
        """Check connectivity, bounded by ping_timeout. Updates the database_up gauge."""
        try:
            self._probe("ping", self._ping_once)
        except FutureTimeoutError as e:
            self.up_gauge.set(0)
            logger.debug(f"Database ping timed out after {self.ping_timeout}s")
            raise PingTimeoutError(self.ping_timeout) from e
        except SQLAlchemyError as e:
            self.up_gauge.set(0)
            logger.debug(f"Failed to ping database: {e}")
            raise ConnectError(f"failed to ping database: {e}") from e
        except ConnectError:
            self.up_gauge.set(0)
            raise

        self.up_gauge.set(1)
        logger.debug("Pinged database...")

    def _ping_once(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def check_model(self) -> None:
        """Compare the stored schema version with SUPPORTED_MODEL. Read only."""
        try:
            model = self._probe("model", self._read_model)
        except FutureTimeoutError as e:
            raise ModelReadError(
                f"failed to fetch model version from the database: no answer within {self.ping_timeout:g}s"
            ) from e
        except SQLAlchemyError as e:
            raise ModelReadError(f"failed to fetch model version from the database: {e}") from e
        except ConnectError as e:
            raise ModelReadError(f"failed to fetch model version from the database: {e}") from e

        if model is None:
            raise ModelReadError("failed to read model version from the database: empty resultset")
        if model != SUPPORTED_MODEL:
            raise UnsupportedModelError(model, SUPPORTED_MODEL)

    def _read_model(self) -> Optional[str]:
        with self.SessionLocal() as session:
            return session.execute(
                select(ModelVersion.version).order_by(ModelVersion.id).limit(1)
            ).scalars().first()

    def _probe(self, name: str, fn: Callable[[], T]) -> T:
        with self._probe_lock:
            if self.engine is None:
                raise ConnectError("database connection is closed")
            future = self._inflight.get(name)
            if future is None or future.done():
                try:
                    future = self._probes.submit(fn)
                except RuntimeError as e:
                    # Executor already shut down by close()
                    raise ConnectError("database connection is closed") from e
                self._inflight[name] = future
        try:
            return future.result(timeout=self.ping_timeout)
        except CancelledError as e:
            raise ConnectError("database connection is closed") from e

    # Lifecycle

    def close(self) -> None:
        with self._probe_lock:
            if self.engine is not None:
                self.engine.dispose()
                self.engine = None
            self._inflight.clear()
            self._probes.shutdown(wait=False, cancel_futures=True)

    def __str__(self) -> str:
        return f"{self.dialect} database driver"


def _utc_naive(value: datetime) -> datetime:
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _check_deadline(deadline: Optional[float], step: str) -> None:
    if deadline is not None and time.monotonic() >= deadline:
        raise SaveCancelledError(step)
