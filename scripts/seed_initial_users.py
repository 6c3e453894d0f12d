"""Create the initial coach/admin account and a few demo athletes.

Idempotent: users are matched by email and left untouched when present.

    SEED_ADMIN_EMAIL=coach@example.com SEED_ADMIN_PASSWORD=... python scripts/seed_initial_users.py
"""

import asyncio
import os
import sys

# Add parent directory to path so we can import litework modules
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from sqlalchemy import select

from litework.core.enums import UserRole
from litework.core.security import hash_password
from litework.db.session import async_session_maker, engine
import litework.models  # noqa: F401 - register all models
from litework.models.athlete_group import AthleteGroup, AthleteGroupMember
from litework.models.user import User

DEMO_ATHLETES = [
    ("Alex", "Rivera", "alex.rivera@example.com"),
    ("Jordan", "Lee", "jordan.lee@example.com"),
    ("Sam", "Patel", "sam.patel@example.com"),
]
DEMO_GROUP = {"name": "Demo Squad", "sport": "Strength", "category": "General"}


async def get_or_create_user(session, email, password, first_name, last_name, role, coach_id=None):
    user = await session.scalar(select(User).where(User.email == email))
    if user:
        print(f"  exists: {email} ({user.role.value})")
        return user
    user = User(
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=role,
        coach_id=coach_id,
    )
    session.add(user)
    await session.flush()
    print(f"  created: {email} ({role.value})")
    return user


async def main():
    admin_email = os.environ.get("SEED_ADMIN_EMAIL", "coach@example.com").lower()
    admin_password = os.environ.get("SEED_ADMIN_PASSWORD")
    athlete_password = os.environ.get("SEED_ATHLETE_PASSWORD", "changeme123")
    if not admin_password:
        print("SEED_ADMIN_PASSWORD is required")
        sys.exit(1)

    async with async_session_maker() as session:
        print("Seeding users...")
        admin = await get_or_create_user(
            session, admin_email, admin_password, "Head", "Coach", UserRole.ADMIN
        )
        athletes = [
            await get_or_create_user(
                session, email, athlete_password, first, last, UserRole.ATHLETE, coach_id=admin.id
            )
            for first, last, email in DEMO_ATHLETES
        ]

        group = await session.scalar(select(AthleteGroup).where(AthleteGroup.name == DEMO_GROUP["name"]))
        if group is None:
            group = AthleteGroup(**DEMO_GROUP, coach_id=admin.id)
            session.add(group)
            await session.flush()
            for athlete in athletes:
                session.add(AthleteGroupMember(group_id=group.id, athlete_id=athlete.id))
            print(f"  created group: {group.name} ({len(athletes)} athletes)")
        await session.commit()

    await engine.dispose()
    print("Done.")


if __name__ == "__main__":
    asyncio.run(main())
