#!/usr/bin/env python3
"""Rewrite the login identifiers of a school after its suffix changed.

Usage: python scripts/sync_identifiers.py <school_id> <old_suffix> <new_suffix>
"""
import asyncio
import os
import sys
from uuid import UUID

from dotenv import load_dotenv

load_dotenv()
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from ecogest.core.database import AsyncSessionLocal, close_db_connections  # noqa: E402
from ecogest.services.identifier_sync_service import IdentifierSyncService  # noqa: E402


async def sync_identifiers(school_id: str, old_suffix: str, new_suffix: str):
    async with AsyncSessionLocal() as db:
        result = await IdentifierSyncService(db).sync(UUID(school_id), old_suffix, new_suffix)
    await close_db_connections()

    stats = result["stats"]
    print(result["message"])
    print(f"Total: {stats['total']}  updated: {stats['success']}  errors: {stats['errors']}")
    for detail in result["error_details"]:
        print(f"  - {detail}")


if __name__ == "__main__":
    if len(sys.argv) != 4:
        print(__doc__)
        sys.exit(1)
    asyncio.run(sync_identifiers(*sys.argv[1:]))
