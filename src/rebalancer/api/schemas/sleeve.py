"""Pydantic schemas for sleeve and allocation model endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SleeveMemberSchema(BaseModel):
    """A ranked member of a sleeve."""

    model_config = {"from_attributes": True}

    ticker: str = Field(..., min_length=1, max_length=20)
    rank: int = Field(..., description="Replacement priority, 1 is preferred")
    is_active: bool = True
    is_legacy: bool = Field(default=False, description="Holding that must never be sold")


class SleeveCreateRequest(BaseModel):
    """Request schema for creating or replacing a sleeve."""

    name: str = Field(..., min_length=1, max_length=255)
    members: list[SleeveMemberSchema]
    is_active: bool = True


class SleeveResponse(BaseModel):
    model_config = {"from_attributes": True}

    sleeve_id: str
    name: str
    is_active: bool
    members: list[SleeveMemberSchema]


class SleeveListResponse(BaseModel):
    sleeves: list[SleeveResponse]
    count: int


class ModelMemberSchema(BaseModel):
    model_config = {"from_attributes": True}

    sleeve_id: str
    target_weight_bps: Optional[int] = Field(
        default=None,
        description="Target weight in basis points; omit on every member for equal weight",
    )
    is_active: bool = True


class ModelCreateRequest(BaseModel):
    """Request schema for creating or replacing an allocation model."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    members: list[ModelMemberSchema]


class EqualWeightModelRequest(BaseModel):
    """Request schema for an equal-weighted model over the given sleeves."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    sleeve_ids: list[str] = Field(..., min_length=1)


class ModelResponse(BaseModel):
    model_config = {"from_attributes": True, "protected_namespaces": ()}

    model_id: str
    name: str
    description: str
    members: list[ModelMemberSchema]
    updated_at_est: Optional[datetime] = None


class ModelListResponse(BaseModel):
    models: list[ModelResponse]
    count: int
