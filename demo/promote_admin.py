#!/usr/bin/env python3
"""Promote an existing user to admin. Run on the server: promote_admin.py EMAIL"""
import argparse
import asyncio

from sqlalchemy import update
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from app.config import settings
from app.models.user import User, UserRole


async def promote(email: str) -> int:
    engine = create_async_engine(settings.DATABASE_URL)
    sf = async_sessionmaker(engine, class_=AsyncSession)
    async with sf() as s:
        r = await s.execute(
            update(User)
            .where(User.email == email.strip().lower())
            .values(role=UserRole.ADMIN)
        )
        await s.commit()
    await engine.dispose()
    return r.rowcount


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Promote a user to admin")
    parser.add_argument("email")
    args = parser.parse_args()
    print(f"Rows updated: {asyncio.run(promote(args.email))}")
