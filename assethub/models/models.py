import uuid
from datetime import datetime, date
from typing import Optional

from sqlalchemy import (
    String,
    DateTime,
    Date,
    ForeignKey,
    Integer,
    JSON,
    Text,
    Index,
    Uuid,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship, Mapped, mapped_column

from ..db import Base


def uuid_pk() -> Mapped[uuid.UUID]:
    return mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)


def tenant_fk() -> Mapped[uuid.UUID]:
    return mapped_column(Uuid(as_uuid=True), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)


class Tenant(Base):
    __tablename__ = "tenants"

    id: Mapped[uuid.UUID] = uuid_pk()
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = uuid_pk()
    tenant_id: Mapped[uuid.UUID] = tenant_fk()
    name: Mapped[Optional[str]] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(50), default="user")  # admin|manager|user
    # Profile-level organisation, used when no employment history exists
    company: Mapped[Optional[str]] = mapped_column(String(255))
    department: Mapped[Optional[str]] = mapped_column(String(255))
    status: Mapped[str] = mapped_column(String(50), default="active")  # active|inactive
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)

    history = relationship(
        "EmploymentHistory",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="EmploymentHistory.start_date.desc()",
    )
    assets = relationship("Asset", back_populates="user")

    __table_args__ = (
        Index("idx_user_tenant_email", "tenant_id", "email"),
    )


# =====================
# Asset domain
# =====================

class Asset(Base):
    """Computing devices and their ownership/cost model"""
    __tablename__ = "assets"

    id: Mapped[uuid.UUID] = uuid_pk()
    tenant_id: Mapped[uuid.UUID] = tenant_fk()
    management_id: Mapped[Optional[str]] = mapped_column(String(100), index=True)  # Tenant-scoped tag, e.g. PC-24-001
    serial: Mapped[Optional[str]] = mapped_column(String(255))
    model: Mapped[Optional[str]] = mapped_column(String(255))
    ownership: Mapped[str] = mapped_column(String(20), nullable=False, default="owned")  # owned|rental|lease|byod
    status: Mapped[str] = mapped_column(String(50), default="available", index=True)  # available|in_use|repair|maintenance|disposed
    # Purchase date for owned/byod, contract start for rental/lease
    purchase_date: Mapped[Optional[date]] = mapped_column(Date)
    contract_end_date: Mapped[Optional[date]] = mapped_column(Date)
    return_date: Mapped[Optional[date]] = mapped_column(Date)
    purchase_cost: Mapped[Optional[int]] = mapped_column(Integer)  # owned only
    depreciation_months: Mapped[Optional[int]] = mapped_column(Integer)  # owned only
    monthly_cost: Mapped[Optional[int]] = mapped_column(Integer)  # rental/lease only
    months: Mapped[Optional[int]] = mapped_column(Integer)  # lease contract length
    assigned_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), index=True)
    accessories: Mapped[Optional[list]] = mapped_column(JSON, default=list)
    contract_file: Mapped[Optional[str]] = mapped_column(String(500))
    note: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    user = relationship("User", back_populates="assets")

    __table_args__ = (
        Index("idx_asset_tenant_status", "tenant_id", "status"),
    )


class EmploymentHistory(Base):
    """Time-ordered organisational assignments of a user"""
    __tablename__ = "employment_history"

    id: Mapped[uuid.UUID] = uuid_pk()
    tenant_id: Mapped[uuid.UUID] = tenant_fk()
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date: Mapped[Optional[date]] = mapped_column(Date, index=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date)  # None means current
    company: Mapped[Optional[str]] = mapped_column(String(255))
    department: Mapped[Optional[str]] = mapped_column(String(255))
    branch: Mapped[Optional[str]] = mapped_column(String(255))
    position: Mapped[Optional[str]] = mapped_column(String(255))

    user = relationship("User", back_populates="history")

    __table_args__ = (
        Index("idx_history_user_start", "user_id", "start_date"),
    )


class AssetRequest(Base):
    """User-initiated lifecycle requests: new hire loan, breakdown, return"""
    __tablename__ = "requests"

    id: Mapped[uuid.UUID] = uuid_pk()
    tenant_id: Mapped[uuid.UUID] = tenant_fk()
    type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)  # new_hire|breakdown|return
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), index=True)
    asset_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), ForeignKey("assets.id", ondelete="SET NULL"))
    request_date: Mapped[Optional[date]] = mapped_column("date", Date, index=True)
    status: Mapped[str] = mapped_column(String(20), default="pending", index=True)  # pending|approved|completed|rejected
    detail: Mapped[Optional[str]] = mapped_column(Text)
    note: Mapped[Optional[str]] = mapped_column(Text)
    admin_note: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    user = relationship("User")

    __table_args__ = (
        Index("idx_request_tenant_type_date", "tenant_id", "type", "date"),
    )


class AuditLog(Base):
    """Append-only log of asset and request lifecycle changes"""
    __tablename__ = "audit_logs"

    id: Mapped[uuid.UUID] = uuid_pk()
    tenant_id: Mapped[uuid.UUID] = tenant_fk()
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)  # asset|request
    entity_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    action: Mapped[str] = mapped_column(String(50), nullable=False)  # ASSIGN|RETURN|REPAIR|DISPOSE|STATUS_CHANGE
    changes_json: Mapped[Optional[dict]] = mapped_column(JSON)
    context: Mapped[Optional[dict]] = mapped_column(JSON)
    timestamp_utc: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, index=True)


# =====================
# Organisation settings
# =====================

class OrganizationSettings(Base):
    """Per-tenant organisation profile and asset registration rules"""
    __tablename__ = "organization_settings"

    id: Mapped[uuid.UUID] = uuid_pk()
    tenant_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    allowed_ownerships: Mapped[list] = mapped_column(JSON, nullable=False, default=list)  # subset of owned|rental|lease|byod
    contact_label: Mapped[Optional[str]] = mapped_column(String(255))
    contact_value: Mapped[Optional[str]] = mapped_column(String(255))
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class MasterDataItem(Base):
    """Tenant-defined company/department/branch labels offered in forms"""
    __tablename__ = "master_data_items"

    id: Mapped[uuid.UUID] = uuid_pk()
    tenant_id: Mapped[uuid.UUID] = tenant_fk()
    kind: Mapped[str] = mapped_column(String(20), nullable=False)  # company|department|branch
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    sort_index: Mapped[int] = mapped_column(Integer, default=0)

    __table_args__ = (
        UniqueConstraint("tenant_id", "kind", "name", name="uq_master_data_tenant_kind_name"),
        Index("idx_master_data_tenant_kind", "tenant_id", "kind"),
    )
