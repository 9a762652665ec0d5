"""Alertmanager webhook receiver endpoint."""
import time

from fastapi import APIRouter, Depends, HTTPException, Request, status
from starlette.concurrency import run_in_threadpool

from config import settings
from db.base import Storer, get_storer
from services import metrics
from services.ingestion import IngestionHandler, OutcomeKind

router = APIRouter(tags=["Webhook"])


@router.post("/webhook", status_code=status.HTTP_202_ACCEPTED)
async def webhook_post(request: Request, storer: Storer = Depends(get_storer)):
    """Receive an Alertmanager webhook and store it with all its alerts."""
    metrics.WEBHOOKS_RECEIVED.inc()

    raw = await request.body()
    deadline = time.monotonic() + settings.WEBHOOK_SAVE_TIMEOUT_SECONDS

    handler = IngestionHandler(storer, debug=settings.DEBUG)
    outcome = await run_in_threadpool(handler.handle, raw, deadline)

    if outcome.kind is OutcomeKind.REJECTED:
        metrics.INVALID_WEBHOOKS.inc()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=outcome.reason)

    group = outcome.group
    alert_count = len(group.alerts)
    metrics.ALERTS_RECEIVED.labels(group.receiver, group.status).inc(alert_count)

    if outcome.kind is OutcomeKind.STORE_FAILED:
        metrics.ALERTS_SAVING_FAILURES.labels(group.receiver, group.status).inc(alert_count)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=outcome.reason)

    metrics.ALERTS_SAVED.labels(group.receiver, group.status).inc(alert_count)
    return {"received": alert_count}
