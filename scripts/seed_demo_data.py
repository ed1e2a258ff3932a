"""
Seed the local database with a demo tenant, users with employment history,
assets across every ownership type and a few requests.

Usage:
  python scripts/seed_demo_data.py
  python scripts/seed_demo_data.py --tenant "Pantore Demo"

This script is idempotent: running it multiple times will upsert the same
records based on natural keys (tenant name, user email, management_id).
"""

import argparse
from datetime import date, datetime, timezone

from assethub.db import SessionLocal, Base, engine
from assethub.models.models import (
    Tenant,
    User,
    EmploymentHistory,
    Asset,
    AssetRequest,
)
from assethub.schemas.settings import MasterData
from assethub.services.org_settings import sync_master_data


def ensure_tenant(session, name: str) -> Tenant:
    tenant = session.query(Tenant).filter(Tenant.name == name).first()
    if tenant:
        return tenant
    tenant = Tenant(name=name, created_at=datetime.now(timezone.utc))
    session.add(tenant)
    session.flush()
    return tenant


def ensure_user(session, tenant: Tenant, email: str, name: str, **kwargs) -> User:
    user = session.query(User).filter(User.tenant_id == tenant.id, User.email == email).first()
    if user:
        user.name = name
        for k, v in kwargs.items():
            if hasattr(user, k):
                setattr(user, k, v)
        session.add(user)
        session.flush()
        return user
    user = User(
        tenant_id=tenant.id,
        email=email,
        name=name,
        created_at=datetime.now(timezone.utc),
        **{k: v for k, v in kwargs.items() if hasattr(User, k)}
    )
    session.add(user)
    session.flush()
    return user


def ensure_history(session, user: User, start_date: date, **kwargs) -> EmploymentHistory:
    row = (
        session.query(EmploymentHistory)
        .filter(EmploymentHistory.user_id == user.id, EmploymentHistory.start_date == start_date)
        .first()
    )
    if row:
        for k, v in kwargs.items():
            if hasattr(row, k):
                setattr(row, k, v)
        session.add(row)
        session.flush()
        return row
    row = EmploymentHistory(
        tenant_id=user.tenant_id,
        user_id=user.id,
        start_date=start_date,
        **{k: v for k, v in kwargs.items() if hasattr(EmploymentHistory, k)}
    )
    session.add(row)
    session.flush()
    return row


def ensure_asset(session, tenant: Tenant, management_id: str, **kwargs) -> Asset:
    asset = (
        session.query(Asset)
        .filter(Asset.tenant_id == tenant.id, Asset.management_id == management_id)
        .first()
    )
    now = datetime.now(timezone.utc)
    if asset:
        for k, v in kwargs.items():
            if hasattr(asset, k):
                setattr(asset, k, v)
        asset.updated_at = now
        session.add(asset)
        session.flush()
        return asset
    asset = Asset(
        tenant_id=tenant.id,
        management_id=management_id,
        created_at=now,
        **{k: v for k, v in kwargs.items() if hasattr(Asset, k)}
    )
    session.add(asset)
    session.flush()
    return asset


def ensure_request(session, tenant: Tenant, type_: str, user: User, request_date: date, **kwargs) -> AssetRequest:
    row = (
        session.query(AssetRequest)
        .filter(
            AssetRequest.tenant_id == tenant.id,
            AssetRequest.type == type_,
            AssetRequest.user_id == user.id,
            AssetRequest.request_date == request_date,
        )
        .first()
    )
    if row:
        for k, v in kwargs.items():
            if hasattr(row, k):
                setattr(row, k, v)
        session.add(row)
        session.flush()
        return row
    row = AssetRequest(
        tenant_id=tenant.id,
        type=type_,
        user_id=user.id,
        request_date=request_date,
        created_at=datetime.now(timezone.utc),
        **{k: v for k, v in kwargs.items() if hasattr(AssetRequest, k)}
    )
    session.add(row)
    session.flush()
    return row


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo assets, users and requests")
    parser.add_argument("--tenant", default="Pantore Demo", help="Tenant name to create or update")
    args = parser.parse_args()

    # Ensure tables exist (safe for SQLite dev)
    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        tenant = ensure_tenant(session, args.tenant)

        # Users
        sato = ensure_user(session, tenant, "sato@example.com", "Sato Taro", role="admin", company="Pantore HD", department="Sales")
        suzuki = ensure_user(session, tenant, "suzuki@example.com", "Suzuki Hanako", company="Pantore HD", department="Development")
        tanaka = ensure_user(session, tenant, "tanaka@example.com", "Tanaka Jiro", company="Pantore HD", department="Design", status="inactive")

        # Employment history (Sato transferred to Osaka in 2024)
        ensure_history(session, sato, date(2022, 4, 1), end_date=date(2024, 3, 31), company="Pantore HD", department="Sales", position="Staff")
        ensure_history(session, sato, date(2024, 4, 1), company="Pantore HD", branch="Osaka Branch", department="Sales", position="Lead")
        ensure_history(session, suzuki, date(2023, 10, 1), company="Pantore HD", department="Development", position="Engineer")

        # Assets
        pc1 = ensure_asset(
            session,
            tenant,
            "PC-24-001",
            serial="C02XG0",
            model="MacBook Pro 14",
            ownership="rental",
            status="in_use",
            purchase_date=date(2024, 4, 1),
            contract_end_date=date(2026, 3, 31),
            monthly_cost=15000,
            months=24,
            assigned_user_id=sato.id,
            accessories=["charger", "case"],
        )
        ensure_asset(
            session,
            tenant,
            "PC-23-014",
            serial="5CD3301",
            model="ThinkPad X1 Carbon",
            ownership="owned",
            status="in_use",
            purchase_date=date(2023, 10, 1),
            purchase_cost=240000,
            depreciation_months=48,
            assigned_user_id=suzuki.id,
        )
        ensure_asset(
            session,
            tenant,
            "PC-24-007",
            serial="LSE-7781",
            model="Surface Laptop 5",
            ownership="lease",
            status="available",
            purchase_date=date(2024, 1, 1),
            monthly_cost=9000,
            months=36,
        )
        ensure_asset(
            session,
            tenant,
            "BYOD-001",
            model="iPhone 15",
            ownership="byod",
            status="in_use",
            assigned_user_id=tanaka.id,
        )

        # Requests
        ensure_request(session, tenant, "breakdown", sato, date(2024, 5, 10), asset_id=pc1.id, status="completed", detail="Keyboard not responding")
        ensure_request(session, tenant, "breakdown", suzuki, date(2024, 5, 22), status="pending", detail="Battery swelling")
        ensure_request(session, tenant, "new_hire", suzuki, date(2023, 9, 20), status="completed", detail="Development laptop")

        # Master data offered in the user and history forms
        session.flush()
        sync_master_data(session, tenant.id, MasterData(
            companies=["Pantore HD"],
            departments=["Sales", "Development", "Design"],
            branches=["Osaka Branch"],
        ))

        # Commit all changes
        session.commit()
        print(f"Seed completed: tenant {tenant.name} ({tenant.id}) upserted.")
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


if __name__ == "__main__":
    main()
