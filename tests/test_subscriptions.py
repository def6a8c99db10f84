"""PayTech checkout, IPN handling and subscription expiry."""
import base64
import hashlib
import json
from datetime import datetime, timedelta, timezone
from uuid import UUID

import httpx
import pytest
from sqlalchemy import select

from ecogest.core.exceptions import NotFoundError, PaymentGatewayError, PermissionDenied
from ecogest.models import PaymentTransaction, School, Subscription, SubscriptionPlan
from ecogest.services.paytech_client import PayTechClient
from ecogest.services.subscription_service import (
    SubscriptionService,
    add_months,
    parse_custom_field,
    period_end,
)

API_KEY, API_SECRET = "test-key", "test-secret"


def _sha(value: str) -> str:
    return hashlib.sha256(value.encode()).hexdigest()


def _gateway(requests=None, status_code=200, body=None):
    def handler(request: httpx.Request):
        if requests is not None:
            requests.append(request)
        return httpx.Response(status_code, json=body if body is not None else {
            "success": 1,
            "token": "tok_123",
            "redirect_url": "https://paytech.sn/payment/checkout/tok_123",
        })

    return PayTechClient(API_KEY, API_SECRET, "https://paytech.test/api", transport=httpx.MockTransport(handler))


@pytest.fixture
async def plan(db):
    plan = SubscriptionPlan(code="pro_monthly", name="Pro", price=3500000, currency="XOF",
                            period="monthly", features=["grades"], is_active=True)
    annual = SubscriptionPlan(code="pro_annual", name="Pro (annual)", price=35000000, currency="XOF",
                              period="annual", features=["grades"], is_active=True)
    db.add_all([plan, annual])
    await db.commit()
    return plan


def _notification(reference, event="sale_complete", **extra):
    return {
        "type_event": event,
        "ref_command": reference,
        "api_key_sha256": _sha(API_KEY),
        "api_secret_sha256": _sha(API_SECRET),
        **extra,
    }


class TestHelpers:
    def test_add_months_clamps_day(self):
        assert add_months(datetime(2025, 1, 31), 1) == datetime(2025, 2, 28)
        assert add_months(datetime(2024, 12, 15), 1) == datetime(2025, 1, 15)

    def test_period_end(self):
        start = datetime(2025, 3, 10, tzinfo=timezone.utc)
        assert period_end(start, "monthly") == datetime(2025, 4, 10, tzinfo=timezone.utc)
        assert period_end(start, "annual") == datetime(2026, 3, 10, tzinfo=timezone.utc)

    def test_custom_field_forms(self):
        payload = {"subscription_id": "abc"}
        encoded = base64.b64encode(json.dumps(payload).encode()).decode()
        assert parse_custom_field(json.dumps(payload)) == payload
        assert parse_custom_field(encoded) == payload
        assert parse_custom_field(payload) == payload
        assert parse_custom_field("not json") == {}
        assert parse_custom_field(None) == {}

    def test_unconfigured_gateway_accepts_notifications(self):
        assert PayTechClient("", "", "https://paytech.test/api").verify_notification({})


class TestCheckout:
    async def test_checkout_creates_pending_subscription(self, db, school, plan):
        requests = []
        result = await SubscriptionService(db, _gateway(requests)).create_checkout(school, "pro_monthly")

        assert result["checkout_url"] == "https://paytech.sn/payment/checkout/tok_123"
        assert result["amount"] == 35000

        sent = requests[0]
        assert sent.url.path == "/api/payment/request-payment"
        assert sent.headers["API_KEY"] == API_KEY
        body = json.loads(sent.content)
        assert body["item_price"] == 35000
        assert body["ref_command"] == result["subscription_id"]

        subscription = await db.get(Subscription, UUID(result["subscription_id"]))
        assert subscription.status == "pending"
        transaction = (await db.execute(select(PaymentTransaction))).scalar_one()
        assert transaction.gateway_token == "tok_123"

    async def test_unknown_plan(self, db, school, plan):
        with pytest.raises(NotFoundError):
            await SubscriptionService(db, _gateway()).create_checkout(school, "platinum")

    async def test_gateway_refusal(self, db, school, plan):
        gateway = _gateway(body={"success": 0, "message": "Invalid API key"})
        with pytest.raises(PaymentGatewayError):
            await SubscriptionService(db, gateway).create_checkout(school, "pro_monthly")


class TestNotifications:
    async def test_success_activates_subscription_and_school(self, db, school, plan):
        service = SubscriptionService(db, _gateway())
        checkout = await service.create_checkout(school, "pro_monthly")
        custom = base64.b64encode(json.dumps({"school_id": str(school.id)}).encode()).decode()

        result = await service.handle_notification(_notification(checkout["subscription_id"], custom_field=custom))

        assert result["old_status"] == "pending"
        assert result["status"] == "active"
        assert result["transaction_status"] == "success"
        subscription = await db.get(Subscription, UUID(checkout["subscription_id"]))
        assert subscription.end_date == add_months(subscription.start_date, 1)
        await db.refresh(school)
        assert school.subscription_status == "active"
        assert school.subscription_plan == "pro_monthly"

    async def test_annual_plan_runs_twelve_months(self, db, school, plan):
        service = SubscriptionService(db, _gateway())
        checkout = await service.create_checkout(school, "pro_annual")
        await service.handle_notification(_notification(checkout["subscription_id"], event="payment_successful"))
        subscription = await db.get(Subscription, UUID(checkout["subscription_id"]))
        assert subscription.end_date == add_months(subscription.start_date, 12)

    async def test_failure_cancels(self, db, school, plan):
        service = SubscriptionService(db, _gateway())
        checkout = await service.create_checkout(school, "pro_monthly")
        result = await service.handle_notification(_notification(checkout["subscription_id"], event="sale_failed"))
        assert result["status"] == "canceled"
        assert result["transaction_status"] == "failed"
        await db.refresh(school)
        assert school.subscription_status == "trial"

    async def test_bad_signature_is_rejected(self, db, school, plan):
        service = SubscriptionService(db, _gateway())
        checkout = await service.create_checkout(school, "pro_monthly")
        data = _notification(checkout["subscription_id"], api_key_sha256=_sha("forged"))
        with pytest.raises(PermissionDenied):
            await service.handle_notification(data)

    async def test_unknown_reference(self, db, school, plan):
        with pytest.raises(NotFoundError):
            await SubscriptionService(db, _gateway()).handle_notification(_notification("missing-ref"))

    async def test_webhook_endpoint_accepts_form_posts(self, client, db, session_factory, school, plan):
        checkout = await SubscriptionService(db, _gateway()).create_checkout(school, "pro_monthly")

        # The endpoint uses the configured gateway, which has no keys in tests
        response = await client.post("/api/v1/subscriptions/webhook", data={
            "type_event": "sale_complete",
            "ref_command": checkout["subscription_id"],
        })
        assert response.status_code == 200
        assert response.json()["status"] == "active"

        async with session_factory() as session:
            refreshed = await session.get(School, school.id)
            assert refreshed.subscription_status == "active"

    async def test_webhook_unknown_reference_is_404(self, client):
        response = await client.post("/api/v1/subscriptions/webhook",
                                     json={"type_event": "sale_complete", "ref_command": "nope"})
        assert response.status_code == 404


async def test_expire_overdue(db, school, plan):
    now = datetime.now(timezone.utc)
    overdue = Subscription(school_id=school.id, plan_id=plan.id, status="active", amount=plan.price,
                           start_date=now - timedelta(days=40), end_date=now - timedelta(days=10))
    current = Subscription(school_id=school.id, plan_id=plan.id, status="active", amount=plan.price,
                           start_date=now, end_date=now + timedelta(days=20))
    school.subscription_status = "active"
    db.add_all([overdue, current])
    await db.commit()

    result = await SubscriptionService(db, _gateway()).expire_overdue(now)

    assert result["expired_count"] == 1
    await db.refresh(overdue)
    await db.refresh(current)
    await db.refresh(school)
    assert overdue.status == "expired"
    assert current.status == "active"
    assert school.subscription_status == "expired"
