import logging
from typing import Optional

from schemas.webhook import AlertGroup

logger = logging.getLogger(__name__)


class NullDB:
    """Storer that accepts everything and writes nothing. Used for dry runs."""

    def save(self, group: AlertGroup, deadline: Optional[float] = None) -> None:
        logger.info(f"save alert group {group.model_dump(by_alias=True, mode='json')}")

    def ping(self) -> None:
        logger.info("pong")

    def check_model(self) -> None:
        logger.info("check model")

    def close(self) -> None:
        pass

    def __str__(self) -> str:
        return "null database driver"
