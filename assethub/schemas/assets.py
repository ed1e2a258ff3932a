import uuid
from datetime import date, datetime
from typing import Dict, List, Optional
from enum import Enum

from pydantic import BaseModel, field_validator


class OwnershipType(str, Enum):
    owned = "owned"
    rental = "rental"
    lease = "lease"
    byod = "byod"


class AssetStatus(str, Enum):
    available = "available"
    in_use = "in_use"
    repair = "repair"
    maintenance = "maintenance"
    disposed = "disposed"


def _strip_to_none(v):
    if v is None:
        return None
    v = str(v).strip()
    return v or None


def _blank_to_none(v):
    # Forms post "" for untouched numeric inputs
    if v == "" or v is None:
        return None
    return v


class AssetBase(BaseModel):
    management_id: Optional[str] = None
    serial: Optional[str] = None
    model: Optional[str] = None
    ownership: OwnershipType = OwnershipType.owned
    status: AssetStatus = AssetStatus.available
    purchase_date: Optional[date] = None
    contract_end_date: Optional[date] = None
    return_date: Optional[date] = None
    purchase_cost: Optional[int] = None
    depreciation_months: Optional[int] = None
    monthly_cost: Optional[int] = None
    months: Optional[int] = None
    assigned_user_id: Optional[uuid.UUID] = None
    accessories: Optional[List[str]] = None
    contract_file: Optional[str] = None
    note: Optional[str] = None

    @field_validator("management_id", "serial", "model", "contract_file", "note", mode="before")
    @classmethod
    def empty_str_to_none(cls, v):
        return _strip_to_none(v)

    @field_validator("purchase_cost", "depreciation_months", "monthly_cost", "months", mode="before")
    @classmethod
    def blank_number_to_none(cls, v):
        return _blank_to_none(v)


class AssetCreate(AssetBase):
    pass


class AssetUpdate(BaseModel):
    management_id: Optional[str] = None
    serial: Optional[str] = None
    model: Optional[str] = None
    ownership: Optional[OwnershipType] = None
    status: Optional[AssetStatus] = None
    purchase_date: Optional[date] = None
    contract_end_date: Optional[date] = None
    return_date: Optional[date] = None
    purchase_cost: Optional[int] = None
    depreciation_months: Optional[int] = None
    monthly_cost: Optional[int] = None
    months: Optional[int] = None
    assigned_user_id: Optional[uuid.UUID] = None
    accessories: Optional[List[str]] = None
    contract_file: Optional[str] = None
    note: Optional[str] = None

    @field_validator("management_id", "serial", "model", "contract_file", "note", mode="before")
    @classmethod
    def empty_str_to_none(cls, v):
        return _strip_to_none(v)

    @field_validator("purchase_cost", "depreciation_months", "monthly_cost", "months", mode="before")
    @classmethod
    def blank_number_to_none(cls, v):
        return _blank_to_none(v)

    @field_validator("ownership", "status", mode="before")
    @classmethod
    def reject_null(cls, v):
        # NOT NULL columns; omit the key to leave them unchanged
        if v is None:
            raise ValueError("must not be null")
        return v


class AssetResponse(AssetBase):
    id: uuid.UUID
    user_name: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AssetAssign(BaseModel):
    user_id: uuid.UUID


class AssetReturn(BaseModel):
    return_date: Optional[date] = None
    note: Optional[str] = None


class AssetCostResponse(BaseModel):
    asset_id: uuid.UUID
    year: int
    month: int
    monthly: int
    total: int


class AssetStatusStats(BaseModel):
    in_use: int = 0
    available: int = 0
    repair: int = 0
    maintenance: int = 0
    disposed: int = 0

    @classmethod
    def from_counts(cls, counts: Dict[str, int]) -> "AssetStatusStats":
        return cls(**{k: v for k, v in counts.items() if k in cls.model_fields})
