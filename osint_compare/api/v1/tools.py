"""Tools API — registration and management of OSINT tool definitions."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status

from osint_compare.core.dependencies import get_tool_registry
from osint_compare.core.exceptions import NotFoundError
from osint_compare.gateway.types import OsintTool
from osint_compare.schemas.tool import ToolCreate, ToolResponse, ToolUpdate
from osint_compare.services.tool_service import ToolRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tools", tags=["tools"])


def _get_tool(registry: ToolRegistry, tool_id: str) -> OsintTool:
    tool = registry.get(tool_id)
    if tool is None:
        raise NotFoundError("Tool not found")
    return tool


@router.get("/", response_model=list[ToolResponse])
async def list_tools(registry: ToolRegistry = Depends(get_tool_registry)):
    return [t.to_dict() for t in registry.list_tools()]


@router.get("/active", response_model=list[ToolResponse])
async def list_active_tools(registry: ToolRegistry = Depends(get_tool_registry)):
    """Tools offered when launching a new investigation."""
    return [t.to_dict() for t in registry.list_active()]


@router.post("/", response_model=ToolResponse, status_code=status.HTTP_201_CREATED)
async def create_tool(data: ToolCreate, registry: ToolRegistry = Depends(get_tool_registry)):
    tool = registry.add(OsintTool(**data.model_dump()))
    return tool.to_dict()


@router.get("/{tool_id}", response_model=ToolResponse)
async def get_tool(tool_id: str, registry: ToolRegistry = Depends(get_tool_registry)):
    return _get_tool(registry, tool_id).to_dict()


@router.put("/{tool_id}", response_model=ToolResponse)
async def update_tool(tool_id: str, data: ToolUpdate, registry: ToolRegistry = Depends(get_tool_registry)):
    tool = registry.update(tool_id, **data.model_dump(exclude_unset=True))
    if tool is None:
        raise NotFoundError("Tool not found")
    return tool.to_dict()


@router.post("/{tool_id}/toggle", response_model=ToolResponse)
async def toggle_tool(tool_id: str, registry: ToolRegistry = Depends(get_tool_registry)):
    tool = registry.toggle_active(tool_id)
    if tool is None:
        raise NotFoundError("Tool not found")
    logger.info("Tool %s is now %s", tool.name, "active" if tool.is_active else "inactive")
    return tool.to_dict()


@router.delete("/{tool_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tool(tool_id: str, registry: ToolRegistry = Depends(get_tool_registry)):
    if not registry.delete(tool_id):
        raise NotFoundError("Tool not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
