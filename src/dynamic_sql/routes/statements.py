"""Statement routes: list, inspect and build registered statements."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from dynamic_sql.errors import EvaluationError
from dynamic_sql.registry import StatementRegistry, statements

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/statements", tags=["statements"])


def get_registry() -> StatementRegistry:
    """Registry the routes read from (overridable in tests)."""
    return statements


# =============================================================================
# Request/Response Models
# =============================================================================


class StatementListResponse(BaseModel):
    """Names of all registered statements."""

    names: list[str]


class StatementModel(BaseModel):
    """A registered statement in engine template form."""

    name: str
    raw: str


class BuildRequestModel(BaseModel):
    """Parameters to evaluate a statement against."""

    params: dict[str, Any] = Field(default_factory=dict)


class BuildResponseModel(BaseModel):
    """Evaluated statement text."""

    name: str
    sql: str


# =============================================================================
# Routes
# =============================================================================


@router.get("", response_model=StatementListResponse)
async def list_statements(
    registry: StatementRegistry = Depends(get_registry),
) -> StatementListResponse:
    """List registered statement names."""
    return StatementListResponse(names=registry.names())


@router.get("/{name}", response_model=StatementModel)
async def get_statement(
    name: str, registry: StatementRegistry = Depends(get_registry)
) -> StatementModel:
    """Get a statement's engine template text."""
    raw = registry.raw(name)
    if raw is None:
        raise HTTPException(status_code=404, detail=f"Statement {name} not found")
    return StatementModel(name=name, raw=raw)


@router.post("/{name}/build", response_model=BuildResponseModel)
async def build_statement(
    name: str,
    request: BuildRequestModel,
    registry: StatementRegistry = Depends(get_registry),
) -> BuildResponseModel:
    """Evaluate a statement against the request parameters."""
    try:
        sql = registry.build(name, request.params)
    except EvaluationError as e:
        logger.warning(f"Failed to build statement {name}: {e}")
        raise HTTPException(status_code=422, detail=str(e)) from e

    if sql is None:
        raise HTTPException(status_code=404, detail=f"Statement {name} not found")
    return BuildResponseModel(name=name, sql=sql)
