from celery import Celery
from celery.schedules import crontab
import asyncio
import logging
import os

# Celery configuration
celery_app = Celery(
    "ecogest",
    broker=os.getenv("REDIS_URL", "redis://localhost:6379"),
    backend=os.getenv("REDIS_URL", "redis://localhost:6379"),
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    beat_schedule={
        "expire-subscriptions-hourly": {
            "task": "ecogest.expire_subscriptions",
            "schedule": crontab(minute=0),
        },
    },
)

logger = logging.getLogger(__name__)


async def _expire_subscriptions():
    from ecogest.core.database import AsyncBackgroundSessionLocal, background_engine
    from ecogest.services.subscription_service import SubscriptionService

    try:
        async with AsyncBackgroundSessionLocal() as db:
            return await SubscriptionService(db).expire_overdue()
    finally:
        await background_engine.dispose()


@celery_app.task(name="ecogest.expire_subscriptions")
def expire_subscriptions():
    """Hourly: flag subscriptions past their end date as expired."""
    result = asyncio.run(_expire_subscriptions())
    logger.info(f"Subscription expiry run: {result['expired_count']} expired")
    return result

