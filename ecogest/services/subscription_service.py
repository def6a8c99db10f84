# ecogest/services/subscription_service.py
"""Subscription plans, PayTech checkout, IPN handling and expiry."""
import base64
import calendar
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.cache import cache_manager
from ..core.config import settings
from ..core.exceptions import NotFoundError, PermissionDenied
from ..core.logging import sanitize_for_log
from ..models import (
    School, SubscriptionPlan, Subscription, PaymentTransaction,
    SubscriptionStatus, TransactionStatus,
)
from .paytech_client import PayTechClient

logger = logging.getLogger(__name__)

PLANS_CACHE_KEY = "subscription_plans"
SUCCESS_EVENTS = ("sale_complete", "payment_successful")
FAILURE_EVENTS = ("sale_failed", "payment_failed")


def add_months(value: datetime, months: int) -> datetime:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def period_end(start: datetime, period: str) -> datetime:
    return add_months(start, 12 if period == "annual" else 1)


def parse_custom_field(raw: Any) -> Dict[str, Any]:
    """custom_field arrives as JSON, or base64 encoded JSON."""
    if isinstance(raw, dict):
        return raw
    if not raw:
        return {}
    for decode in (lambda v: v, lambda v: base64.b64decode(v).decode("utf-8")):
        try:
            value = json.loads(decode(raw))
            if isinstance(value, dict):
                return value
        except (ValueError, TypeError):
            continue
    logger.warning("Could not parse custom_field: %s", sanitize_for_log(raw, 100))
    return {}


def plan_to_dict(plan: SubscriptionPlan) -> Dict[str, Any]:
    return {
        "id": str(plan.id),
        "code": plan.code,
        "name": plan.name,
        "price": plan.price,
        "display_price": plan.price / 100,
        "currency": plan.currency,
        "period": plan.period,
        "max_students": plan.max_students,
        "max_classes": plan.max_classes,
        "features": plan.features or [],
    }


class SubscriptionService:
    def __init__(self, db: AsyncSession, gateway: Optional[PayTechClient] = None):
        self.db = db
        self.gateway = gateway or PayTechClient()

    async def list_plans(self) -> List[Dict[str, Any]]:
        cached = await cache_manager.get(PLANS_CACHE_KEY)
        if cached:
            return cached
        stmt = select(SubscriptionPlan).where(
            SubscriptionPlan.is_active.is_(True), SubscriptionPlan.is_deleted.is_(False)
        ).order_by(SubscriptionPlan.price)
        plans = [plan_to_dict(p) for p in (await self.db.execute(stmt)).scalars().all()]
        await cache_manager.set(PLANS_CACHE_KEY, plans, ttl=3600)
        return plans

    async def get_plan(self, code: str) -> SubscriptionPlan:
        stmt = select(SubscriptionPlan).where(
            SubscriptionPlan.code == code, SubscriptionPlan.is_active.is_(True)
        )
        plan = (await self.db.execute(stmt)).scalar_one_or_none()
        if not plan:
            raise NotFoundError("Subscription plan", code)
        return plan

    async def current(self, school_id) -> Optional[Subscription]:
        stmt = select(Subscription).where(
            Subscription.school_id == school_id,
            Subscription.status == SubscriptionStatus.ACTIVE.value,
        ).order_by(Subscription.end_date.desc())
        return (await self.db.execute(stmt)).scalars().first()

    async def create_checkout(self, school: School, plan_code: str) -> Dict[str, Any]:
        plan = await self.get_plan(plan_code)
        logger.info("Creating checkout for school %s, plan %s", school.id, sanitize_for_log(plan_code, 50))

        subscription = Subscription(
            school_id=school.id,
            plan_id=plan.id,
            status=SubscriptionStatus.PENDING.value,
            amount=plan.price,
            currency=plan.currency,
        )
        self.db.add(subscription)
        await self.db.flush()
        reference = str(subscription.id)
        subscription.gateway_reference = reference

        transaction = PaymentTransaction(
            school_id=school.id,
            subscription_id=subscription.id,
            amount=plan.price,
            currency=plan.currency,
            status=TransactionStatus.PENDING.value,
            gateway_reference=reference,
        )
        self.db.add(transaction)
        # Committed before the gateway call; the IPN can arrive first
        await self.db.commit()

        payload = {
            "item_name": f"Subscription {plan.name} - {school.name}",
            "item_price": plan.price / 100,
            "currency": plan.currency,
            "ref_command": reference,
            "command_name": f"Subscription {plan.name}",
            "env": settings.paytech_env,
            "ipn_url": f"{settings.public_api_url.rstrip('/')}/api/v1/subscriptions/webhook",
            "success_url": f"{settings.site_url.rstrip('/')}/abonnement?success=true",
            "cancel_url": f"{settings.site_url.rstrip('/')}/abonnement?cancelled=true",
            "custom_field": json.dumps({
                "subscription_id": reference,
                "school_id": str(school.id),
                "plan_code": plan.code,
            }),
        }
        result = await self.gateway.request_payment(payload)

        transaction.gateway_token = result.get("token")
        transaction.gateway_response = result
        await self.db.commit()

        return {
            "success": True,
            "checkout_url": result["redirect_url"],
            "subscription_id": reference,
            "transaction_id": str(transaction.id),
            "amount": plan.price / 100,
            "currency": plan.currency,
        }

    async def handle_notification(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply a PayTech IPN to its subscription."""
        if not self.gateway.verify_notification(data):
            logger.warning("Rejected PayTech notification with bad key hashes")
            raise PermissionDenied("Invalid notification signature")

        event = data.get("type_event")
        reference = data.get("ref_command")
        custom = parse_custom_field(data.get("custom_field"))
        logger.info("PayTech notification %s for %s", sanitize_for_log(event, 50), sanitize_for_log(reference, 60))

        subscription = None
        if reference:
            stmt = select(Subscription).where(Subscription.gateway_reference == str(reference))
            subscription = (await self.db.execute(stmt)).scalar_one_or_none()
        if not subscription:
            logger.error("Subscription not found for ref_command %s", sanitize_for_log(reference, 60))
            raise NotFoundError("Subscription", reference)

        transaction = (await self.db.execute(
            select(PaymentTransaction)
            .where(PaymentTransaction.subscription_id == subscription.id)
            .order_by(PaymentTransaction.created_at.desc())
        )).scalars().first()

        old_status = subscription.status
        transaction_status = transaction.status if transaction else TransactionStatus.PENDING.value
        now = datetime.now(timezone.utc)

        if event in SUCCESS_EVENTS:
            subscription.status = SubscriptionStatus.ACTIVE.value
            subscription.start_date = now
            subscription.end_date = period_end(now, subscription.plan.period)
            transaction_status = TransactionStatus.SUCCESS.value
            logger.info("Subscription %s activated", subscription.id)
        elif event in FAILURE_EVENTS:
            subscription.status = SubscriptionStatus.CANCELED.value
            transaction_status = TransactionStatus.FAILED.value
            logger.info("Payment failed for subscription %s", subscription.id)
        else:
            logger.info("Unhandled PayTech event type: %s", sanitize_for_log(event, 50))

        if transaction:
            transaction.status = transaction_status
            transaction.gateway_response = {
                **(transaction.gateway_response or {}),
                "webhook_data": {k: v for k, v in data.items() if not k.endswith("_sha256")},
                "custom_field": custom,
                "processed_at": now.isoformat(),
            }

        if subscription.status == SubscriptionStatus.ACTIVE.value:
            school = await self.db.get(School, subscription.school_id)
            if school:
                school.subscription_status = "active"
                school.subscription_plan = subscription.plan.code

        await self.db.commit()
        return {
            "success": True,
            "message": "Notification processed",
            "subscription_id": str(subscription.id),
            "old_status": old_status,
            "status": subscription.status,
            "transaction_status": transaction_status,
        }

    async def expire_overdue(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Mark active subscriptions past their end date as expired."""
        now = now or datetime.now(timezone.utc)
        stmt = select(Subscription).where(
            Subscription.status == SubscriptionStatus.ACTIVE.value,
            Subscription.end_date < now,
        )
        expired = (await self.db.execute(stmt)).scalars().all()
        logger.info("%d expired subscriptions found", len(expired))

        for subscription in expired:
            subscription.status = SubscriptionStatus.EXPIRED.value
            school = await self.db.get(School, subscription.school_id)
            if school:
                school.subscription_status = "expired"
                logger.info("Subscription expired: %s (%s)", school.name, subscription.id)

        await self.db.commit()
        return {"success": True, "expired_count": len(expired), "processed_at": now.isoformat()}
