"""Liveness, readiness and metrics endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from db.base import Storer, get_storer
from exceptions import StoreError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Probes"])


@router.get("/-/health")
def healthy_probe(storer: Storer = Depends(get_storer)):
    """Healthy while the database answers pings."""
    try:
        storer.ping()
    except StoreError as e:
        logger.error(f"failed to ping database server: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"failed to ping database server: {e}",
        )
    return {"status": "healthy"}


@router.get("/-/ready")
def ready_probe(storer: Storer = Depends(get_storer)):
    """Ready while the database answers pings and has a supported schema version."""
    try:
        storer.ping()
    except StoreError as e:
        logger.error(f"database is not reachable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"database is not reachable: {e}",
        )
    try:
        storer.check_model()
    except StoreError as e:
        logger.error(f"invalid model: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"invalid model: {e}",
        )
    return {"status": "ready"}


@router.get("/metrics")
def prometheus_metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
