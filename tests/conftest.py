import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from datetime import date
from typing import AsyncGenerator, Callable, Dict
from httpx import AsyncClient, ASGITransport
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from app.core.database import get_async_session
from app.core.security import create_access_token
from app.db.seeds.initial_data import create_initial_data
from app.models import (
    CriticalIssue, Department, EnergyConsumption, EnergyRealization, KtaKpiData,
    MaintenanceRoutine, OperationalReport, SafetyIncident, User
)
from app.models.base import Base
from app.models.shared.enums import CriticalIssueStatus, StatusTindakLanjut
from app.schemas.auth.actor_schema import Actor

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def session_maker():
    """Fresh in-memory database per test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with maker() as session:
        await create_initial_data(session)

    yield maker

    await engine.dispose()


@pytest.fixture
async def session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest.fixture
async def directory(session_maker) -> Dict[str, Dict]:
    """Seeded departments by code and directory users by username"""
    async with session_maker() as s:
        departments = (await s.execute(select(Department))).scalars().all()
        users = (await s.execute(select(User))).scalars().all()
    return {
        "departments": {d.code: d for d in departments},
        "users": {u.username: u for u in users},
    }


@pytest.fixture
def actor_for(directory) -> Callable[[str], Actor]:
    def build(username: str) -> Actor:
        user = directory["users"][username]
        return Actor(actor_id=user.id, role=user.role, department_id=user.department_id)
    return build


@pytest.fixture
def headers_for(directory) -> Callable[[str], dict]:
    """Bearer headers as the identity provider would issue them"""
    def build(username: str) -> dict:
        user = directory["users"][username]
        token = create_access_token({
            "sub": str(user.id),
            "role": user.role.value,
            "department_id": user.department_id,
        })
        return {"Authorization": f"Bearer {token}"}
    return build


@pytest.fixture
async def records(session_maker, directory) -> Dict[str, int]:
    """One record of every governed kind, returned as {kind: id}"""
    departments = directory["departments"]
    async with session_maker() as s:
        report = OperationalReport(
            report_date=date(2025, 7, 21),
            equipment_id=101,
            department_id=departments["MMTC"].id,
            total_working=18,
            total_standby=4,
            total_breakdown=2,
            shift_type="DAY",
            is_complete=False,
        )
        kta = KtaKpiData(
            no_register="KTA-2025-0001",
            nama_pelapor="Budi",
            lokasi="Workshop 2",
            keterangan="Oil spill near compressor",
            pic_departemen="mmtc",
            status_tindak_lanjut=StatusTindakLanjut.OPEN,
            due_date=date(2025, 8, 1),
        )
        issue = CriticalIssue(
            issue_name="Crusher bearing overheating",
            department_id=departments["PMTC"].id,
            status=CriticalIssueStatus.INVESTIGASI,
        )
        routine = MaintenanceRoutine(
            unique_number="MMTC-21072025-001",
            job_name="Excavator PM 500h",
            start_date=date(2025, 7, 21),
            department_id=departments["MMTC"].id,
        )
        incident = SafetyIncident(month=7, year=2025, nearmiss=3)
        realization = EnergyRealization(year=2025, month=7, ikes_realization=1.2, emission_realization=0.8)
        consumption = EnergyConsumption(
            year=2025, month=7,
            tambang_consumption=1200, pabrik_consumption=3400, supporting_consumption=150,
        )
        rows = {
            "operational_report": report,
            "kta_tta": kta,
            "critical_issue": issue,
            "maintenance_routine": routine,
            "safety_incident": incident,
            "energy_realization": realization,
            "energy_consumption": consumption,
        }
        s.add_all(rows.values())
        await s.commit()
        return {kind: row.id for kind, row in rows.items()}


@pytest.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Create test client"""
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as s:
            yield s

    app.dependency_overrides[get_async_session] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
