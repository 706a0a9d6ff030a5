# src/client_sqlite/api/routes.py
from __future__ import annotations

import sqlite3
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from client_sqlite.domain.errors import (
    ClientSqliteError,
    InputValidationError,
    ProcedureNotFoundError,
)
from client_sqlite.domain.models import ErrorResponse, ProcedureInfo, ProcedureListResponse
from client_sqlite.logging import get_logger
from client_sqlite.procedures import ProcedureRegistry

from .deps import get_registry

_LOG = get_logger(__name__)
router = APIRouter()


def _error_response(err: ClientSqliteError, http_status: int) -> JSONResponse:
    payload = ErrorResponse(
        error=err.message,
        code=err.code,
        details=err.details or {},
    ).model_dump()
    return JSONResponse(status_code=http_status, content=payload)


def _storage_error_response(err: sqlite3.Error) -> JSONResponse:
    payload = ErrorResponse(
        error=str(err),
        code="STORAGE_ERROR",
        details={"type": type(err).__name__},
    ).model_dump()
    return JSONResponse(status_code=500, content=payload)


@router.get("/healthz")
def healthz() -> dict:
    return {"ok": True}


@router.get("/procedures", response_model=ProcedureListResponse)
def list_procedures(registry: ProcedureRegistry = Depends(get_registry)):
    return ProcedureListResponse(
        procedures=[ProcedureInfo(path=p.name, description=p.description) for p in registry.procedures()]
    )


@router.post("/rpc/{name}")
async def call_procedure(
    name: str,
    payload: Optional[dict[str, Any]] = Body(default=None),
    registry: ProcedureRegistry = Depends(get_registry),
):
    """
    Invoke a procedure by dotted path, e.g. POST /rpc/logs.store

    Body is the procedure input (camelCase); response is its output.
    """
    try:
        result = await registry.call(name, payload or {})
    except ProcedureNotFoundError as e:
        return _error_response(e, 404)
    except InputValidationError as e:
        return _error_response(e, 400)
    except sqlite3.Error as e:
        _LOG.warning("Procedure %s failed in SQLite: %s", name, e)
        return _storage_error_response(e)
    return result.model_dump(mode="json", by_alias=True)
