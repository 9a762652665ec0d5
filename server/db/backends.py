"""Storer construction for the configured database backend."""
import logging

from db.base import ConnectionArgs, Storer
from db.null import NullDB
from db.sql import SQLDB
from exceptions import StoreError

logger = logging.getLogger(__name__)

SQL_BACKENDS = ("mysql", "postgres")


def connect(backend: str, args: ConnectionArgs) -> Storer:
    """
    Build a ready-to-use storer.

    SQL storers are pinged and their schema version verified before they are
    returned; a storer that fails either check is closed and never handed out.

    Raises:
        ValueError: unknown backend
        StoreError: the database is unreachable or has an unsupported schema
    """
    backend = backend.lower()
    if backend == "null":
        logger.info("Using the null database driver, webhooks will not be stored")
        return NullDB()
    if backend not in SQL_BACKENDS:
        raise ValueError(f"invalid database backend {backend!r}")

    db = SQLDB(args)
    try:
        db.ping()
        db.check_model()
    except StoreError:
        db.close()
        raise

    logger.info(f"Connected using {db}")
    return db
