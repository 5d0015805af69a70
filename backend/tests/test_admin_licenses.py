"""Driver license review API tests."""

from __future__ import annotations

import pytest

from sharenest.services.identity_service import create_access_token_for_user

pytestmark = pytest.mark.asyncio


def _auth(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token_for_user(user)}"}


async def _register(client, email: str) -> dict:
    response = await client.post(
        "/api/v1/auth/register",
        json={
            "email": email,
            "password": "Sup3rSecret",
            "name": "Pending Driver",
            "license_number": "KY-5555",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["user"]


async def test_admin_approves_license(app_context) -> None:
    client = app_context["client"]
    headers = _auth(app_context["admin_user"])
    user = await _register(client, "pending@example.com")

    pending = await client.get(
        "/api/v1/admin/licenses", params={"license_status": "pending"}, headers=headers
    )
    assert pending.status_code == 200
    assert [item["id"] for item in pending.json()] == [user["id"]]

    approved = await client.post(
        f"/api/v1/admin/licenses/{user['id']}/review",
        json={"action": "approve"},
        headers=headers,
    )
    assert approved.status_code == 200
    assert approved.json()["licenseStatus"] == "verified"
    assert approved.json()["isVerified"] is True


async def test_reject_requires_reason(app_context) -> None:
    client = app_context["client"]
    headers = _auth(app_context["admin_user"])
    user = await _register(client, "blurry@example.com")

    missing_reason = await client.post(
        f"/api/v1/admin/licenses/{user['id']}/review",
        json={"action": "reject"},
        headers=headers,
    )
    assert missing_reason.status_code == 400

    rejected = await client.post(
        f"/api/v1/admin/licenses/{user['id']}/review",
        json={"action": "reject", "reason": "Photo is unreadable"},
        headers=headers,
    )
    assert rejected.status_code == 200
    assert rejected.json()["licenseStatus"] == "rejected"
    assert rejected.json()["licenseRejectionReason"] == "Photo is unreadable"


async def test_license_review_is_admin_only(app_context) -> None:
    client = app_context["client"]
    response = await client.get(
        "/api/v1/admin/licenses", headers=_auth(app_context["renter_user"])
    )
    assert response.status_code == 403
