"""
deps.py
FastAPI dependency helpers for shared app state.
"""

from __future__ import annotations

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

from .db.mongo import col_zones


def get_database(request: Request) -> AsyncIOMotorDatabase:
    return request.app.state.db


def get_zones_col(request: Request) -> AsyncIOMotorCollection:
    return col_zones(get_database(request))
