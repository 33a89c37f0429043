"""Shared Pydantic schemas for Tiergate-Engine."""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    error: str
    code: str
    detail: str = ""


class AccessDecisionResponse(BaseModel):
    allowed: bool
    reason: Optional[str] = None
    limit: Optional[int] = None
    upgrade_plan: Optional[str] = None


class OrderedItemIn(BaseModel):
    id: str = Field(..., min_length=1)
    position: int = Field(..., ge=0)


class OrderedItemOut(BaseModel):
    id: str
    position: int
