"""
health.py
Provides /health for readiness checks.
Includes Mongo ping so persistence is validated.
"""

import time

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..deps import get_database

router = APIRouter()


@router.get("/health")
async def health(db: AsyncIOMotorDatabase = Depends(get_database)):
    await db.command("ping")
    return {"ok": True, "ts_ms": int(time.time() * 1000)}
