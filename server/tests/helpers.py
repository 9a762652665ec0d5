"""Shared test data and fakes."""
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

T0 = "2024-01-08T10:30:00Z"
T1 = "2024-01-08T11:00:00Z"
OPEN_ENDED = "0001-01-01T00:00:00Z"

# Alertmanager webhook for one group with two alerts
BASE_PAYLOAD = {
    "version": "4",
    "groupKey": '{}:{alertname="HighLoad"}',
    "truncatedAlerts": 0,
    "status": "firing",
    "receiver": "ops",
    "groupLabels": {},
    "commonLabels": {"severity": "critical"},
    "commonAnnotations": {},
    "externalURL": "http://alertmanager:9093",
    "alerts": [
        {
            "status": "firing",
            "labels": {},
            "annotations": {},
            "startsAt": T0,
            "endsAt": OPEN_ENDED,
            "generatorURL": "http://prometheus:9090/graph?g0.expr=up",
            "fingerprint": "f1",
        },
        {
            "status": "firing",
            "labels": {},
            "annotations": {},
            "startsAt": T0,
            "endsAt": T1,
            "generatorURL": "http://prometheus:9090/graph?g0.expr=up",
            "fingerprint": "f2",
        },
    ],
}


class FakeStorer:
    """In-memory storer with switchable failures."""

    def __init__(self):
        self.saved: List = []
        self.save_error: Optional[Exception] = None
        self.ping_error: Optional[Exception] = None
        self.model_error: Optional[Exception] = None
        self.closed = False

    def save(self, group, deadline=None):
        if self.save_error is not None:
            raise self.save_error
        self.saved.append(group)

    def ping(self):
        if self.ping_error is not None:
            raise self.ping_error

    def check_model(self):
        if self.model_error is not None:
            raise self.model_error

    def close(self):
        self.closed = True

    def __str__(self):
        return "fake database driver"


def count_rows(engine, model) -> int:
    with Session(engine) as db:
        return db.execute(select(func.count()).select_from(model)).scalar_one()
