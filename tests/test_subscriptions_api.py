from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from quickbill.crud.subscriptions import subscribe_user_in_db
from quickbill.models import SubscriptionPlan


@pytest.fixture()
async def plans(db):
    basic = SubscriptionPlan(name="Basic", price=Decimal("0"), features=["50 orders / month"])
    premium = SubscriptionPlan(name="Premium", price=Decimal("49"), features=["Unlimited orders", "Reports"])
    standard = SubscriptionPlan(name="Standard", price=Decimal("19"), features=["500 orders / month"])
    legacy = SubscriptionPlan(name="Legacy", price=Decimal("5"), features=[], is_active=False)
    db.add_all([basic, premium, standard, legacy])
    await db.commit()
    return {p.name: p for p in (basic, premium, standard, legacy)}


async def test_plans_are_listed_cheapest_first(client, auth, plans):
    resp = await client.get("/subscriptions/plans", headers=auth)
    assert resp.status_code == 200
    assert [p["name"] for p in resp.json()] == ["Basic", "Standard", "Premium"]
    assert resp.json()[2]["features"] == ["Unlimited orders", "Reports"]


async def test_subscribe_and_switch_plan(client, auth, plans):
    resp = await client.get("/subscriptions/me", headers=auth)
    assert resp.status_code == 200
    assert resp.json() is None

    resp = await client.post(f"/subscriptions/{plans['Standard'].id}", headers=auth)
    assert resp.status_code == 200, resp.text
    first = resp.json()
    assert first["plan"]["name"] == "Standard"
    assert first["status"] == "active"

    resp = await client.post(f"/subscriptions/{plans['Premium'].id}", headers=auth)
    second = resp.json()
    assert second["id"] == first["id"]
    assert second["plan"]["name"] == "Premium"

    resp = await client.get("/subscriptions/me", headers=auth)
    assert resp.json()["plan_id"] == str(plans["Premium"].id)


async def test_inactive_plan_cannot_be_chosen(client, auth, plans):
    resp = await client.post(f"/subscriptions/{plans['Legacy'].id}", headers=auth)
    assert resp.status_code == 404


async def test_subscription_runs_thirty_days(db, user_id, plans):
    now = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)
    sub = await subscribe_user_in_db(user_id, plans["Basic"].id, db, now=now)

    started = sub.started_at.replace(tzinfo=None)
    expires = sub.expires_at.replace(tzinfo=None)
    assert started == datetime(2026, 1, 10, 12, 0)
    assert expires - started == timedelta(days=30)
