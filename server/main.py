from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from config import settings
from db.backends import connect
from db.base import ConnectionArgs
from api import probes, webhook

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect the storer before serving; refuse to start if it is unusable."""
    args = ConnectionArgs(
        dsn=settings.DATABASE_URL,
        max_idle_conns=settings.DB_MAX_IDLE_CONNS,
        max_open_conns=settings.DB_MAX_OPEN_CONNS,
        max_conn_lifetime_seconds=settings.DB_MAX_CONN_LIFETIME_SECONDS,
    )
    logger.info(f"Connecting to {settings.effective_backend} database backend...")
    app.state.storer = connect(settings.effective_backend, args)

    yield  # Application runs here

    logger.info(f"Closing {app.state.storer}...")
    app.state.storer.close()


# FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG,
    version="0.1.0",
    lifespan=lifespan
)

# Include routers
app.include_router(webhook.router)
app.include_router(probes.router)


@app.get("/")
def root():
    return {"message": settings.APP_NAME, "version": "0.1.0"}


if __name__ == "__main__":
    import uvicorn

    configure_logging()
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)
