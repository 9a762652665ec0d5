"""Error taxonomy for webhook decoding and alert storage."""
from typing import Optional


class RecorderError(Exception):
    """Base for all alert recorder errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class PayloadError(RecorderError):
    """The webhook payload cannot be accepted (maps to 400)."""


class DecodeError(PayloadError):
    """The payload is not a parseable webhook document."""


class UnsupportedVersionError(PayloadError):
    """The payload declares a webhook version other than the supported one."""

    def __init__(self, version: str, supported: str) -> None:
        self.version = version
        self.supported = supported
        super().__init__(f"webhook version {version} is not supported (expected {supported})")


class StoreError(RecorderError):
    """The store failed to do its job (maps to 500/503)."""


class ConnectError(StoreError):
    """The store cannot be reached."""


class PingTimeoutError(ConnectError):
    """The connectivity probe did not answer in time."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"database did not answer ping within {timeout:g}s")


class ModelReadError(StoreError):
    """The schema version marker cannot be read."""


class UnsupportedModelError(StoreError):
    """The store schema version does not match the one this application supports."""

    def __init__(self, model: str, supported: str) -> None:
        self.model = model
        self.supported = supported
        super().__init__(f"database model '{model}' is not supported by this application ({supported})")


class WriteError(StoreError):
    """An insert inside the save transaction failed."""

    def __init__(self, step: str, cause: Optional[BaseException] = None, message: Optional[str] = None) -> None:
        self.step = step
        self.cause = cause
        if message is None:
            message = f"failed to insert into {step}"
            if cause is not None:
                message = f"{message}: {cause}"
        super().__init__(message)


class SaveCancelledError(WriteError):
    """The save deadline expired before the transaction could commit."""

    def __init__(self, step: str) -> None:
        super().__init__(step, message=f"save deadline exceeded before {step}")


class RollbackError(StoreError):
    """The transaction could not be rolled back after a failed write."""

    def __init__(self, write_error: WriteError, rollback_error: BaseException) -> None:
        self.write_error = write_error
        self.rollback_error = rollback_error
        super().__init__(
            f"failed to rollback transaction ({rollback_error}) after failing execution: {write_error}"
        )


class CommitError(StoreError):
    """The transaction could not be committed."""
