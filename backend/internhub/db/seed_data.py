"""
Database Seed Data Module

Creates the admin account (idempotent) and, optionally, a demo intern.
Run with: python -m internhub.db.seed_data [demo|clear]
"""
import asyncio
import sys
from datetime import datetime, timedelta

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from internhub.core.config import settings
from internhub.core.database import AsyncSessionLocal, init_db
from internhub.core.security import get_password_hash, create_user_token
from internhub.models.user import User, UserRole
from internhub.models.internship import Internship, InternshipStatus
from internhub.models.remark import Remark


DEMO_INTERN = {"email": "intern@example.com", "name": "Demo Intern", "password": "intern123"}


async def get_or_create_user(db: AsyncSession, email: str, name: str, password: str, role: UserRole) -> User:
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user:
        print(f"  User {email} already exists")
        return user

    user = User(
        email=email,
        name=name,
        hashed_password=get_password_hash(password),
        role=role,
    )
    db.add(user)
    await db.flush()
    print(f"  Created {role.value} {email}")
    return user


async def seed_admin(db: AsyncSession) -> User:
    """Create the admin user from SEED_ADMIN_* settings"""
    return await get_or_create_user(
        db,
        settings.SEED_ADMIN_EMAIL,
        settings.SEED_ADMIN_NAME,
        settings.SEED_ADMIN_PASSWORD,
        UserRole.ADMIN,
    )


async def seed_demo(db: AsyncSession) -> None:
    """A demo intern with one running and one finished internship"""
    intern = await get_or_create_user(
        db, DEMO_INTERN["email"], DEMO_INTERN["name"], DEMO_INTERN["password"], UserRole.USER
    )

    existing = await db.execute(select(Internship).where(Internship.user_id == intern.id))
    if existing.scalars().first():
        print("  Demo internships already exist")
        return

    now = datetime.utcnow()
    db.add_all([
        Internship(
            user_id=intern.id,
            title="Community Outreach Program",
            role="Research Intern",
            start_date=now - timedelta(days=30),
            end_date=now + timedelta(days=60),
            description="Field research and reporting for outreach projects",
            status=InternshipStatus.ACTIVE,
        ),
        Internship(
            user_id=intern.id,
            title="Digital Literacy Drive",
            role="Content Intern",
            start_date=now - timedelta(days=120),
            end_date=now - timedelta(days=30),
            status=InternshipStatus.COMPLETED,
        ),
    ])
    print("  Created 2 demo internships")


async def seed_all(with_demo: bool = False):
    print("=" * 50)
    print("Starting database seeding...")
    print("=" * 50)

    await init_db()

    async with AsyncSessionLocal() as db:
        try:
            admin = await seed_admin(db)
            if with_demo:
                await seed_demo(db)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    print("Database seeding completed successfully!")
    print(f"Admin login: {settings.SEED_ADMIN_EMAIL}")
    if settings.is_dev_mode():
        # No login endpoint here; handy for calling the API locally
        print(f"Admin bearer token: {create_user_token(admin)}")


async def clear_all():
    """Clear all internship data (users are kept)"""
    print("Clearing internship data...")
    async with AsyncSessionLocal() as db:
        await db.execute(delete(Remark))
        await db.execute(delete(Internship))
        await db.commit()
    print("All internship data cleared!")


def main():
    command = sys.argv[1] if len(sys.argv) > 1 else ""

    if command == "clear":
        asyncio.run(clear_all())
    else:
        asyncio.run(seed_all(with_demo=command == "demo"))


if __name__ == "__main__":
    main()
