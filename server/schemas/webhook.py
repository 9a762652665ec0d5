"""Alertmanager webhook document, decoded into the entities we persist."""
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

AlertStatus = Literal["firing", "resolved"]


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError as e:
        # e.g. 0001-01-01T00:30:00+01:00 has no UTC equivalent
        raise ValueError(f"timestamp {value.isoformat()} is outside the representable UTC range") from e


class Alert(BaseModel):
    status: AlertStatus
    labels: Dict[str, str] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)
    starts_at: datetime = Field(alias="startsAt")
    # Alertmanager sends 0001-01-01T00:00:00Z while the alert is still open
    ends_at: Optional[datetime] = Field(alias="endsAt", default=None)
    generator_url: str = Field(alias="generatorURL", default="")
    fingerprint: str = ""

    @field_validator("starts_at", "ends_at")
    def _default_utc(cls, v: Optional[datetime]):
        return _as_utc(v)

    @property
    def is_open_ended(self) -> bool:
        """True when the sender did not report a real end time."""
        return self.ends_at is None or self.ends_at < self.starts_at

    class Config:
        frozen = True
        populate_by_name = True


class AlertGroup(BaseModel):
    """One webhook notification: a group of alerts and their shared metadata."""

    version: str = ""
    group_key: str = Field(alias="groupKey", default="")
    status: AlertStatus
    receiver: str
    group_labels: Dict[str, str] = Field(alias="groupLabels", default_factory=dict)
    common_labels: Dict[str, str] = Field(alias="commonLabels", default_factory=dict)
    common_annotations: Dict[str, str] = Field(alias="commonAnnotations", default_factory=dict)
    external_url: str = Field(alias="externalURL", default="")
    alerts: List[Alert] = Field(default_factory=list)

    class Config:
        frozen = True
        populate_by_name = True
