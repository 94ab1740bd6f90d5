import os
import sys
import asyncio

# Add project root to Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", ".."))
sys.path.insert(0, project_root)

import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.models.auth.user import User
from app.models.organization.department import Department
from app.models.shared.enums import UserRole
from app.core.database import async_session_maker

logger = logging.getLogger(__name__)

DEPARTMENTS = [
    {"code": "MTCENG", "name": "MTC&ENG Bureau", "description": "Maintenance & engineering bureau"},
    {"code": "MMTC", "name": "Mine Maintenance", "description": "Mining equipment maintenance"},
    {"code": "PMTC", "name": "Plant Maintenance", "description": "Processing plant maintenance"},
    {"code": "ECDC", "name": "Electrical Control & Data Center", "description": "Electrical, control and data center"},
    {"code": "HETU", "name": "Heavy Equipment & Transport Unit", "description": "Heavy equipment and transport"},
]

# (username, full name, role, department code)
DIRECTORY_USERS = [
    ("admin", "System Administrator", UserRole.ADMIN, None),
    ("planner_mtceng", "Planner MTC&ENG", UserRole.PLANNER, "MTCENG"),
    ("planner_mmtc", "Planner MMTC", UserRole.PLANNER, "MMTC"),
    ("planner_pmtc", "Planner PMTC", UserRole.PLANNER, "PMTC"),
    ("planner_ecdc", "Planner ECDC", UserRole.PLANNER, "ECDC"),
    ("planner_hetu", "Planner HETU", UserRole.PLANNER, "HETU"),
    ("inputter_shift1", "Inputter Shift 1", UserRole.INPUTTER, "MMTC"),
    ("viewer", "Read-only Viewer", UserRole.VIEWER, None),
]

async def create_initial_data(session: AsyncSession):
    """Create initial data for the application"""
    try:
        logger.info("📋 Creating initial data...")

        departments = await create_initial_departments(session)
        await create_directory_users(session, departments)

        await session.commit()
        logger.info("✅ Initial data created successfully")
        return True

    except Exception as e:
        logger.error(f"❌ Error creating initial data: {str(e)}")
        await session.rollback()
        raise

async def create_initial_departments(session: AsyncSession) -> dict:
    """Create the maintenance departments, returning {code: Department}"""
    departments = {}
    for dept_data in DEPARTMENTS:
        result = await session.execute(
            select(Department).where(Department.code == dept_data["code"])
        )
        department = result.scalar_one_or_none()

        if not department:
            department = Department(**dept_data)
            session.add(department)
            logger.info(f"Created department: {dept_data['code']}")
        departments[dept_data["code"]] = department

    await session.flush()
    return departments

async def create_directory_users(session: AsyncSession, departments: dict):
    """Mirror the identity provider's users used for approver routing"""
    for username, full_name, role, dept_code in DIRECTORY_USERS:
        result = await session.execute(select(User).where(User.username == username))
        if result.scalar_one_or_none():
            continue

        session.add(User(
            username=username,
            full_name=full_name,
            role=role,
            department_id=departments[dept_code].id if dept_code else None,
            is_active=True,
        ))
        logger.info(f"Created directory user: {username} ({role.value})")

if __name__ == "__main__":
    async def main():
        """Main function to run the seeding process"""
        try:
            async with async_session_maker() as session:
                success = await create_initial_data(session)
                if success:
                    print("✅ Initial data setup complete.")
        except Exception as e:
            logger.error(f"❌ Failed to setup initial data: {str(e)}")
            print(f"❌ Failed to setup initial data: {str(e)}")

    asyncio.run(main())
