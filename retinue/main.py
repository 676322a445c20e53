from __future__ import annotations

import logging

from fastapi import FastAPI

from .config import DEBUG, LOG_LEVEL
from .db import init_db
from .routers import catalog, rosters

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Retinue", debug=DEBUG)


@app.on_event("startup")
def startup_event() -> None:
    init_db()
    logger.info("Application started")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(catalog.router)
app.include_router(rosters.router)
