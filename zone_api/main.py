"""
main.py
Backend entrypoint. Creates the FastAPI app and wires everything.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from .config import settings
from .db.mongo import ensure_indexes, get_db
from .errors import ApiError, DATABASE_ERROR, retrieve_error
from .routers import health, zones

logger = logging.getLogger("zone_api")


def create_app(db: Optional[AsyncIOMotorDatabase] = None) -> FastAPI:
    app = FastAPI(title="Zones API", version="1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # include routers
    app.include_router(health.router)
    app.include_router(zones.router)

    # database handle for DI (tests pass their own)
    app.state.db = db if db is not None else get_db()

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return JSONResponse(status_code=exc.status_code, content=exc.envelope())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=500,
            content={"success": False, "errors": retrieve_error(DATABASE_ERROR, exc)},
        )

    @app.on_event("startup")
    async def startup():
        await wait_for_mongo(app.state.db)
        await ensure_indexes(app.state.db)

    return app


async def wait_for_mongo(
    db: AsyncIOMotorDatabase,
    attempts: Optional[int] = None,
    max_delay_s: Optional[float] = None,
) -> None:
    """
    Pings Mongo until it answers, doubling the pause between tries
    (0.5s, 1s, 2s ... capped). Gives up after `attempts` failed pings.
    """
    attempts = attempts or settings.mongo_connect_attempts
    max_delay_s = max_delay_s or settings.mongo_connect_backoff_max_s
    delay_s = 0.5
    last_exc: Optional[PyMongoError] = None
    for attempt in range(1, attempts + 1):
        try:
            await db.command("ping")
            if attempt > 1:
                logger.info("MongoDB reachable after %s attempts", attempt)
            return
        except PyMongoError as exc:
            last_exc = exc
            logger.warning("MongoDB ping %s/%s failed: %s", attempt, attempts, exc)
        if attempt < attempts:
            await asyncio.sleep(delay_s)
            delay_s = min(delay_s * 2, max_delay_s)
    raise RuntimeError(f"MongoDB unreachable after {attempts} pings") from last_exc


def serve() -> None:
    import uvicorn

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.host, port=settings.port)


app = create_app()

__all__ = ["app", "create_app", "serve", "wait_for_mongo"]
