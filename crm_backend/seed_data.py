"""
Database seeding script for development data.

Creates a few humans and activities so route-interest expressions can be
recorded against them. The CRM's contact management lives elsewhere; this
only fills the tables the route-interest API references.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from crm_backend.app.db.session import AsyncSessionLocal, engine, Base
from crm_backend.app.main import app  # noqa: F401  (registers every model with Base)
from crm_backend.app.models.human import Human
from crm_backend.app.models.activity import Activity
from crm_backend.app.models.route_interest_enums import DisplayIdPrefix
from crm_backend.app.services.display_ids import new_id, next_display_id
from sqlalchemy import select

SEED_HUMANS = [
    ("Ada", "Lovelace", "Asked about London to Paris in June"),
    ("Alan", "Turing", "Wants a quote for Manchester to Rome"),
    ("Grace", "Hopper", None),
]


async def seed_data():
    """
    Seed humans, each optionally with one activity.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("🌱 Starting seeding...")

        result = await db.execute(select(Human).limit(1))
        if result.scalar_one_or_none():
            print("ℹ️  Humans already exist, skipping seeding")
            return

        for first_name, last_name, subject in SEED_HUMANS:
            human = Human(
                id=new_id(),
                display_id=await next_display_id(db, DisplayIdPrefix.HUMAN),
                first_name=first_name,
                last_name=last_name
            )
            db.add(human)
            print(f"✅ Created human {human.display_id} ({first_name} {last_name}, id={human.id})")

            if subject:
                activity = Activity(
                    id=new_id(),
                    display_id=await next_display_id(db, DisplayIdPrefix.ACTIVITY),
                    type="email",
                    subject=subject,
                    human_id=human.id
                )
                db.add(activity)
                print(f"   ↳ activity {activity.display_id}: {subject}")

        await db.commit()

        print("\n🎉 Seeding completed successfully!")


if __name__ == "__main__":
    asyncio.run(seed_data())
