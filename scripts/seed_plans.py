#!/usr/bin/env python3
"""Create or refresh the subscription plans offered at checkout."""
import asyncio
import os
import sys

from dotenv import load_dotenv

load_dotenv()
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sqlalchemy import select  # noqa: E402

from ecogest.core.cache import cache_manager  # noqa: E402
from ecogest.core.database import AsyncSessionLocal, close_db_connections  # noqa: E402
from ecogest.models import SubscriptionPlan  # noqa: E402
from ecogest.services.subscription_service import PLANS_CACHE_KEY  # noqa: E402

# Prices in centimes (15 000 XOF -> 1500000)
PLANS = [
    {
        "code": "starter_monthly", "name": "Starter", "price": 1500000, "period": "monthly",
        "max_students": 200, "max_classes": 10,
        "features": ["identifiers", "grades", "bulletins", "announcements"],
    },
    {
        "code": "pro_monthly", "name": "Pro", "price": 3500000, "period": "monthly",
        "max_students": 1000, "max_classes": 40,
        "features": ["identifiers", "grades", "bulletins", "announcements", "payments", "schedules"],
    },
    {
        "code": "pro_annual", "name": "Pro (annual)", "price": 35000000, "period": "annual",
        "max_students": 1000, "max_classes": 40,
        "features": ["identifiers", "grades", "bulletins", "announcements", "payments", "schedules"],
    },
]


async def seed_plans():
    async with AsyncSessionLocal() as db:
        for data in PLANS:
            plan = (await db.execute(
                select(SubscriptionPlan).where(SubscriptionPlan.code == data["code"])
            )).scalar_one_or_none()
            if plan:
                for key, value in data.items():
                    setattr(plan, key, value)
                print(f"Updated plan {data['code']}")
            else:
                db.add(SubscriptionPlan(**data, currency="XOF", is_active=True))
                print(f"Created plan {data['code']}")
        await db.commit()

    await cache_manager.delete(PLANS_CACHE_KEY)
    await cache_manager.close()
    await close_db_connections()


if __name__ == "__main__":
    asyncio.run(seed_plans())
