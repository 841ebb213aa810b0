"""
errors.py
What this file does:
- Holds the coded error catalog returned inside error envelopes.
- Defines ApiError, which routes raise and main.py renders as
  {"success": false, <key>: <coded error>}.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

DATABASE_ERROR = 5
ZONE_UPDATE_NOT_FOUND = 26
ZONE_NOT_FOUND = 34

ERRORS: Dict[int, Dict[str, str]] = {
    0: {"type": "UNKNOWN_ERROR", "message": "Unknown error."},
    DATABASE_ERROR: {"type": "DATABASE_ERROR", "message": "Database operation failed."},
    ZONE_UPDATE_NOT_FOUND: {"type": "ZONE_NOT_FOUND", "message": "Zone to update was not found."},
    ZONE_NOT_FOUND: {"type": "ZONE_NOT_FOUND", "message": "Zone was not found."},
}


def retrieve_error(code: int, err: Optional[BaseException] = None) -> Dict[str, Any]:
    if code not in ERRORS:
        code = 0
    out: Dict[str, Any] = {"code": code, **ERRORS[code]}
    if err is not None:
        out["detail"] = str(err) or type(err).__name__
    return out


class ApiError(Exception):
    def __init__(
        self,
        status_code: int,
        code: int,
        err: Optional[BaseException] = None,
        key: str = "errors",
    ):
        super().__init__(f"{status_code} error code {code}")
        self.status_code = status_code
        self.code = code
        self.err = err
        self.key = key

    def envelope(self) -> Dict[str, Any]:
        return {"success": False, self.key: retrieve_error(self.code, self.err)}


class CastError(ValueError):
    """A body value that cannot be stored as its field's type."""

    def __init__(self, field: str, value: Any, kind: str):
        super().__init__(f'Cast to {kind} failed for value {value!r} at path "{field}"')
        self.field = field
        self.value = value
        self.kind = kind
