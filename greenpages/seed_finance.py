"""
Database seeding script for local finance development.

Creates an ADMIN (accountant) user, an AGENT user with its agent record,
and a business with Arabic and English names.
Run this script after database is set up but before first use.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from greenpages.app.db.session import AsyncSessionLocal, engine, Base
from greenpages.app.models.user import User
from greenpages.app.models.agent import Agent
from greenpages.app.models.business import Business, BusinessTranslation
from greenpages.app.models.enums import UserRole
from sqlalchemy import select


async def seed_finance():
    """
    Seed initial finance data.

    Creates:
    - 1 ADMIN user (accountant)
    - 1 AGENT user + agent AG-001
    - 1 business with ar/en translations
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("Starting finance seeding...")

        result = await db.execute(
            select(Agent).where(Agent.employee_code == "AG-001")
        )
        if result.scalar_one_or_none():
            print("Agent AG-001 already exists, skipping seeding")
            return

        accountant = User(email="accountant@greenpages.local", role=UserRole.ADMIN, is_active=True)
        agent_user = User(email="agent001@greenpages.local", role=UserRole.AGENT, is_active=True)
        db.add_all([accountant, agent_user])
        await db.flush()

        agent = Agent(employee_code="AG-001", user_id=agent_user.id, is_active=True)
        business = Business()
        db.add_all([agent, business])
        await db.flush()

        db.add_all([
            BusinessTranslation(business_id=business.id, locale="ar", name="مطعم الشام"),
            BusinessTranslation(business_id=business.id, locale="en", name="Al Sham Restaurant"),
        ])
        await db.commit()

        print(f"Created ADMIN user  id={accountant.id}")
        print(f"Created AGENT user  id={agent_user.id}")
        print(f"Created agent       id={agent.id} (AG-001)")
        print(f"Created business    id={business.id}")
        print("Seeding completed")


if __name__ == "__main__":
    asyncio.run(seed_finance())
