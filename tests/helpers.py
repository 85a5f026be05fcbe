"""Shared test helper functions for NatureNest tests.

Regular functions, not fixtures; imported by the API test modules.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

API = "/api/v1"


def days_from_now(n: int) -> str:
    return (date.today() + timedelta(days=n)).isoformat()


def register(client, username: str = "guest") -> tuple[dict, dict]:
    """Register a user and return (auth headers, user json)."""
    response = client.post(
        f"{API}/auth/register",
        json={
            "email": f"{username}@naturenest.io",
            "username": username,
            "password": "secret123",
            "password2": "secret123",
            "first_name": username.title(),
            "last_name": "Tester",
        },
    )
    assert response.status_code == 200, response.text
    body = response.json()
    return {"Authorization": f"Bearer {body['access_token']}"}, body["user"]


def create_property(client, headers: dict, **overrides) -> dict:
    payload = {
        "name": "Cozy Mountain Cabin",
        "tag_line": "Perfect mountain getaway",
        "description": "A cabin in the woods",
        "price": 100.0,
        "category_id": 1,
        "cover_url": "https://example.com/cabin.jpg",
        "guests": 4,
        "bedrooms": 2,
        "beds": 3,
        "baths": 1,
        "amenity_ids": [1, 2],
        "country_code": "US",
    }
    payload.update(overrides)
    response = client.post(f"{API}/properties", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def book(client, headers: dict, property_id: int, start: int, end: int, guests: int):
    """POST /reservations with start/end given as days from today."""
    return client.post(
        f"{API}/reservations",
        json={
            "property_id": property_id,
            "start_date": days_from_now(start),
            "end_date": days_from_now(end),
            "number_of_guests": guests,
        },
        headers=headers,
    )


async def seed_property(factory, *, guests: int = 4, price: str = "100.00") -> tuple[int, int]:
    """Create tables, the catalog, an owner and one property.

    Returns (owner id, property id). For tests that bypass the HTTP layer.
    """
    from naturenest.db import crud_catalog, crud_properties, crud_users
    from naturenest.db import session as db_session

    await db_session.init_models()
    async with factory() as db:
        await crud_catalog.sync_categories(db)
        owner = await crud_users.create_user(
            db,
            username="owner",
            email="owner@naturenest.io",
            password="secret123",
            first_name="Olive",
            last_name="Owner",
        )
        prop = await crud_properties.create_property(
            db,
            creator_id=owner.id,
            category_id=1,
            name="Lakeside Cabin",
            tag_line="Quiet lake views",
            description="Two rooms by the water",
            price=Decimal(price),
            cover_url="https://example.com/lake.jpg",
            guests=guests,
            bedrooms=2,
            beds=2,
            baths=1,
            country_code="CA",
            total_nights_booked=0,
            total_income=Decimal("0"),
        )
        return owner.id, prop.id
