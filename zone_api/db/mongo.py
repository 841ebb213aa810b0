"""
db/mongo.py
What this file does:
- Creates the async MongoDB client (Motor).
- Defines the zones collection.
- Builds indexes at startup (so list queries stay fast).
"""

from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from typing import Optional

from ..config import settings

ZONES = "zones"

_client: Optional[AsyncIOMotorClient] = None
_db: Optional[AsyncIOMotorDatabase] = None


def get_client() -> AsyncIOMotorClient:
    global _client
    if _client is None:
        _client = AsyncIOMotorClient(
            settings.mongo_uri,
            minPoolSize=settings.mongo_min_pool_size,
            maxPoolSize=settings.mongo_max_pool_size,
        )
    return _client


def get_db() -> AsyncIOMotorDatabase:
    global _db
    if _db is None:
        _db = get_client()[settings.mongo_db]
    return _db


def col_zones(db: Optional[AsyncIOMotorDatabase] = None) -> AsyncIOMotorCollection:
    return (db if db is not None else get_db())[ZONES]


async def ensure_indexes(db: Optional[AsyncIOMotorDatabase] = None) -> None:
    # Zones: list filters (name regex, exact type, updatedAt range)
    await col_zones(db).create_index([("name.en", ASCENDING)])
    await col_zones(db).create_index([("type", ASCENDING)])
    await col_zones(db).create_index([("updatedAt", DESCENDING)])
