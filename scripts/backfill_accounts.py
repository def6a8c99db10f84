#!/usr/bin/env python3
"""Open login accounts for students or teachers saved without one.

Usage: python scripts/backfill_accounts.py <school_id> <student|teacher> [password]
"""
import asyncio
import os
import sys
from uuid import UUID

from dotenv import load_dotenv

load_dotenv()
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from ecogest.core.database import AsyncSessionLocal, close_db_connections  # noqa: E402
from ecogest.models import School  # noqa: E402
from ecogest.services.account_service import AccountService  # noqa: E402


async def backfill(school_id: str, role: str, password: str = None):
    async with AsyncSessionLocal() as db:
        school = await db.get(School, UUID(school_id))
        if not school:
            print(f"School {school_id} not found")
            return
        result = await AccountService(db).backfill(school, role, password)
    await close_db_connections()

    print(f"Accounts created: {result['success']}  errors: {result['errors']}")
    for detail in result["details"]:
        print(f"  - {detail}")


if __name__ == "__main__":
    if len(sys.argv) not in (3, 4):
        print(__doc__)
        sys.exit(1)
    asyncio.run(backfill(*sys.argv[1:]))
