"""api/routes/tools.py — Direct tool invocation endpoint.

POST /tools/call  — Run a registered workshop tool by name with a params dict.
GET  /tools/list  — Registered tools with their parameter specs.

Tool failures (bad parameters, unknown style, invalid tempo program) are
returned in the body with ``success=False``; only an unknown tool name is
an HTTP error.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from tools.registry import get_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tools", tags=["tools"])


class ToolCallRequest(BaseModel):
    """POST /tools/call request body."""

    name: str = Field(..., max_length=100, description="Tool name, e.g. 'calculate_hole_positions'.")
    params: dict[str, Any] = Field(default_factory=dict)


class ToolCallResponse(BaseModel):
    """Mirror of tools.base.ToolResult."""

    success: bool
    data: Any = None
    error: str | None = None
    metadata: dict[str, Any] | None = None


@router.post("/call", response_model=ToolCallResponse)
def call_tool(request: ToolCallRequest) -> ToolCallResponse:
    """Execute a registered tool.

    Raises:
        HTTPException(404): Tool not registered.
    """
    registry = get_registry()
    tool = registry.get(request.name)
    if tool is None:
        raise HTTPException(
            status_code=404,
            detail=f"Tool '{request.name}' not found. Available tools: {registry.names()}",
        )

    result = tool(**request.params)
    if not result.success:
        logger.info("Tool %s failed: %s", request.name, result.error)
    return ToolCallResponse(
        success=result.success,
        data=result.data,
        error=result.error,
        metadata=result.metadata,
    )


@router.get("/list")
def list_tools() -> list[dict[str, Any]]:
    return get_registry().list_tools()
