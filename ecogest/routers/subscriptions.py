# ecogest/routers/subscriptions.py
import json
import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import BadRequestError
from ..models import Profile, School, Subscription
from ..schemas.finance_schemas import CheckoutRequest
from ..services.subscription_service import SubscriptionService, plan_to_dict
from .deps import get_current_school, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/subscriptions", tags=["Subscriptions"])


def format_subscription(subscription: Subscription) -> dict:
    return {
        "id": str(subscription.id),
        "status": subscription.status,
        "amount": subscription.amount,
        "currency": subscription.currency,
        "start_date": subscription.start_date.isoformat() if subscription.start_date else None,
        "end_date": subscription.end_date.isoformat() if subscription.end_date else None,
        "plan": plan_to_dict(subscription.plan) if subscription.plan else None,
    }


@router.get("/plans", response_model=dict)
async def get_plans(db: AsyncSession = Depends(get_db)):
    return {"plans": await SubscriptionService(db).list_plans()}


@router.get("/current", response_model=dict)
async def current_subscription(
    admin: Profile = Depends(require_admin),
    school: School = Depends(get_current_school),
    db: AsyncSession = Depends(get_db),
):
    subscription = await SubscriptionService(db).current(school.id)
    return {
        "school_status": school.subscription_status,
        "trial_end_date": school.trial_end_date.isoformat() if school.trial_end_date else None,
        "subscription": format_subscription(subscription) if subscription else None,
    }


@router.post("/checkout", response_model=dict)
async def create_checkout(
    data: CheckoutRequest,
    admin: Profile = Depends(require_admin),
    school: School = Depends(get_current_school),
    db: AsyncSession = Depends(get_db),
):
    """Open a PayTech payment session; the client redirects to ``checkout_url``."""
    return await SubscriptionService(db).create_checkout(school, data.plan_code)


@router.post("/webhook", response_model=dict)
async def paytech_webhook(request: Request, db: AsyncSession = Depends(get_db)):
    """PayTech IPN. Sent either as JSON or as a urlencoded form."""
    content_type = request.headers.get("content-type", "")
    try:
        if "application/json" in content_type:
            data = await request.json()
        else:
            data = dict(await request.form())
    except (ValueError, json.JSONDecodeError):
        logger.warning("Unreadable PayTech notification body")
        raise BadRequestError("Invalid notification body")
    if not isinstance(data, dict):
        raise BadRequestError("Invalid notification body")

    return await SubscriptionService(db).handle_notification(data)
