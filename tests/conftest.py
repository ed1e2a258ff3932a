import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from assethub.config import settings
from assethub.db import Base, get_db
from assethub.main import app
from assethub.models.models import Tenant


engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    future=True,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def tenant(db):
    row = Tenant(name="Pantore Test")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def client(db, tenant):
    app.dependency_overrides[get_db] = override_get_db
    app.state.limiter.enabled = False
    c = TestClient(app)
    c.headers.update({settings.tenant_header: str(tenant.id)})
    try:
        yield c
    finally:
        app.dependency_overrides.clear()
