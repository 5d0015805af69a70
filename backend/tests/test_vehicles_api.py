"""Vehicle catalog and pricing quote API tests."""

from __future__ import annotations

import pytest

from sharenest.services.identity_service import create_access_token_for_user

pytestmark = pytest.mark.asyncio

NEW_VEHICLE = {
    "id": "eqb350-2022",
    "title": "Mercedes EQB350",
    "brand": "Mercedes-Benz",
    "model": "EQB 350",
    "year": 2022,
    "seats": 7,
    "powertrain": "EV",
    "rangeKm": 350,
    "dailyRate": 23000,
    "hourlyRate": 0,
    "perKmRate": 25,
    "depositAmount": 50000,
    "pickupPoints": ["Kyoto Station", "Osaka Umeda"],
}


def _auth(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token_for_user(user)}"}


async def test_list_and_get_vehicles(app_context) -> None:
    client = app_context["client"]
    response = await client.get("/api/v1/vehicles")
    assert response.status_code == 200
    ids = {item["id"] for item in response.json()}
    assert ids == {"sakura-2023", "model3p-2022"}

    detail = await client.get("/api/v1/vehicles/sakura-2023")
    assert detail.status_code == 200
    body = detail.json()
    assert body["dailyRate"] == 6000
    assert body["rateVersion"] == 1

    missing = await client.get("/api/v1/vehicles/nope")
    assert missing.status_code == 404


async def test_admin_creates_vehicle(app_context) -> None:
    client = app_context["client"]
    response = await client.post(
        "/api/v1/vehicles", json=NEW_VEHICLE, headers=_auth(app_context["admin_user"])
    )
    assert response.status_code == 201, response.text
    assert response.json()["id"] == "eqb350-2022"

    duplicate = await client.post(
        "/api/v1/vehicles", json=NEW_VEHICLE, headers=_auth(app_context["admin_user"])
    )
    assert duplicate.status_code == 400


async def test_renter_cannot_manage_catalog(app_context) -> None:
    client = app_context["client"]
    response = await client.post(
        "/api/v1/vehicles", json=NEW_VEHICLE, headers=_auth(app_context["renter_user"])
    )
    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "forbidden"

    anonymous = await client.patch("/api/v1/vehicles/sakura-2023", json={"dailyRate": 1})
    assert anonymous.status_code == 401


async def test_rate_change_bumps_version(app_context) -> None:
    client = app_context["client"]
    headers = _auth(app_context["admin_user"])

    renamed = await client.patch(
        "/api/v1/vehicles/sakura-2023", json={"title": "SAKURA"}, headers=headers
    )
    assert renamed.status_code == 200
    assert renamed.json()["rateVersion"] == 1

    repriced = await client.patch(
        "/api/v1/vehicles/sakura-2023", json={"hourlyRate": 900}, headers=headers
    )
    assert repriced.status_code == 200
    assert repriced.json()["hourlyRate"] == 900
    assert repriced.json()["rateVersion"] == 2


async def test_retired_vehicle_hidden_from_catalog(app_context) -> None:
    client = app_context["client"]
    headers = _auth(app_context["admin_user"])
    await client.patch(
        "/api/v1/vehicles/model3p-2022", json={"isActive": False}, headers=headers
    )

    public = await client.get("/api/v1/vehicles")
    assert {item["id"] for item in public.json()} == {"sakura-2023"}

    admin_view = await client.get(
        "/api/v1/vehicles", params={"include_inactive": "true"}, headers=headers
    )
    assert {item["id"] for item in admin_view.json()} == {"sakura-2023", "model3p-2022"}

    quote = await client.post(
        "/api/v1/pricing/quote",
        json={"vehicleId": "model3p-2022", "hours": 24, "distanceKm": 400},
    )
    assert quote.status_code == 404


async def test_pricing_quote(app_context) -> None:
    client = app_context["client"]
    response = await client.post(
        "/api/v1/pricing/quote",
        json={"vehicleId": "model3p-2022", "hours": 24, "distanceKm": 400},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["rateVersion"] == 1
    assert body["breakdown"]["baseAmount"] == 20000
    assert body["breakdown"]["distanceAmount"] == 10000
    assert body["breakdown"]["totalAmount"] == 81000
    assert app_context["gateway"].create_calls == []
