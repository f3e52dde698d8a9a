"""Pydantic schemas for Tool Management API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from osint_compare.gateway.types import ToolCapability, ToolCategory


class ToolCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = Field("", max_length=2000)
    url: str = Field("", max_length=2000)
    api_key: str | None = Field(None, max_length=500)
    is_active: bool = True
    category: ToolCategory = ToolCategory.GENERAL
    capabilities: list[ToolCapability] = []
    response_format: str = Field("JSON", min_length=1, max_length=20)


class ToolUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    url: str | None = Field(None, max_length=2000)
    api_key: str | None = Field(None, max_length=500)
    is_active: bool | None = None
    category: ToolCategory | None = None
    capabilities: list[ToolCapability] | None = None
    response_format: str | None = Field(None, min_length=1, max_length=20)


class ToolResponse(BaseModel):
    id: str
    name: str
    description: str = ""
    url: str = ""
    has_api_key: bool = False
    is_active: bool = True
    category: ToolCategory
    capabilities: list[ToolCapability] = []
    response_format: str
