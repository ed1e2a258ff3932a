from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .assets import OwnershipType


ALL_OWNERSHIPS = [o for o in OwnershipType]


class OrganizationSettingsBase(BaseModel):
    name: str
    allowed_ownerships: List[OwnershipType] = Field(default_factory=lambda: list(ALL_OWNERSHIPS), min_length=1)
    contact_label: Optional[str] = None
    contact_value: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def name_not_blank(cls, v):
        v = str(v or "").strip()
        if not v:
            raise ValueError("Organization name is required")
        return v

    @field_validator("contact_label", "contact_value", mode="before")
    @classmethod
    def empty_str_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("allowed_ownerships")
    @classmethod
    def dedupe(cls, v):
        return list(dict.fromkeys(v))


class OrganizationSettingsUpdate(OrganizationSettingsBase):
    pass


class OrganizationSettingsResponse(OrganizationSettingsBase):
    class Config:
        from_attributes = True


class MasterData(BaseModel):
    companies: List[str] = []
    departments: List[str] = []
    branches: List[str] = []

    @field_validator("companies", "departments", "branches", mode="before")
    @classmethod
    def clean_names(cls, v):
        # First occurrence wins; blanks are dropped
        if v is None:
            return []
        names = [str(n).strip() for n in v]
        return list(dict.fromkeys(n for n in names if n))
