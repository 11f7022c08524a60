"""
Integration tests for the stakeholder API endpoints.
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient

ORDERS = "/api/v1/orders"


@pytest.fixture
def order_id(test_client: TestClient, order_payload) -> str:
    response = test_client.post(ORDERS, json=order_payload("PO-1"))
    assert response.status_code == status.HTTP_201_CREATED
    return "PO-1"


class TestStakeholderEndpoints:
    def test_invite_applies_defaults(self, test_client: TestClient, order_id, transport):
        response = test_client.post(
            f"{ORDERS}/{order_id}/stakeholders",
            json={"name": "Jo Smith", "email": "jo@x.com"},
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["orderId"] == order_id
        assert data["role"] == "buyer_employee"
        assert data["permissions"] == "read"
        assert transport.recipients == ["jo@x.com"]

    def test_invite_succeeds_when_email_bounces(
        self, test_client: TestClient, order_id, transport
    ):
        transport.fail_all = True

        response = test_client.post(
            f"{ORDERS}/{order_id}/stakeholders",
            json={"name": "Jo", "email": "jo@x.com", "permissions": "update"},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["permissions"] == "update"

    def test_invite_rejects_bad_email(self, test_client: TestClient, order_id):
        response = test_client.post(
            f"{ORDERS}/{order_id}/stakeholders",
            json={"name": "Jo", "email": "jo-at-x"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "email"

    def test_invite_rejects_unknown_role(self, test_client: TestClient, order_id):
        response = test_client.post(
            f"{ORDERS}/{order_id}/stakeholders",
            json={"name": "Jo", "email": "jo@x.com", "role": "ceo"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_invite_unknown_order_returns_404(self, test_client: TestClient):
        response = test_client.post(
            f"{ORDERS}/ghost/stakeholders",
            json={"name": "Jo", "email": "jo@x.com"},
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_list_oldest_first(self, test_client: TestClient, order_id, clock):
        for name in ("First", "Second"):
            test_client.post(
                f"{ORDERS}/{order_id}/stakeholders",
                json={"name": name, "email": f"{name.lower()}@x.com"},
            )
            clock.advance(minutes=1)

        response = test_client.get(f"{ORDERS}/{order_id}/stakeholders")

        assert [s["name"] for s in response.json()] == ["First", "Second"]

    def test_list_for_unknown_order_is_empty(self, test_client: TestClient):
        response = test_client.get(f"{ORDERS}/ghost/stakeholders")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    def test_remove(self, test_client: TestClient, order_id):
        created = test_client.post(
            f"{ORDERS}/{order_id}/stakeholders",
            json={"name": "Jo", "email": "jo@x.com"},
        ).json()

        response = test_client.delete(f"/api/v1/stakeholders/{created['id']}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == created["id"]
        assert test_client.get(f"{ORDERS}/{order_id}/stakeholders").json() == []

    def test_remove_missing_returns_404(self, test_client: TestClient):
        response = test_client.delete("/api/v1/stakeholders/nope")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_permissions(self, test_client: TestClient, order_id):
        created = test_client.post(
            f"{ORDERS}/{order_id}/stakeholders",
            json={"name": "Jo", "email": "jo@x.com"},
        ).json()

        response = test_client.patch(
            f"/api/v1/stakeholders/{created['id']}/permissions",
            json={"permissions": "comment"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["permissions"] == "comment"

    def test_update_permissions_rejects_unknown_level(
        self, test_client: TestClient, order_id
    ):
        created = test_client.post(
            f"{ORDERS}/{order_id}/stakeholders",
            json={"name": "Jo", "email": "jo@x.com"},
        ).json()

        response = test_client.patch(
            f"/api/v1/stakeholders/{created['id']}/permissions",
            json={"permissions": "admin"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestBulkInviteEndpoint:
    def test_bulk_invite_report(self, test_client: TestClient, order_id):
        response = test_client.post(
            f"{ORDERS}/{order_id}/stakeholders/bulk-invite",
            json={
                "emailList": "a@x.com, a@x.com\nbad-email, b@x.com",
                "defaultRole": "factory_manager",
                "defaultPermissions": "comment",
                "inviterName": "Sarah Chen",
            },
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["totalProcessed"] == 4
        assert data["addedCount"] == 2
        assert data["successCount"] == 2
        assert [r["status"] for r in data["results"]] == [
            "success",
            "exists",
            "invalid",
            "success",
        ]
        assert data["results"][0]["name"] == "A"
        assert data["results"][0]["stakeholderId"]

        stakeholders = test_client.get(f"{ORDERS}/{order_id}/stakeholders").json()
        assert {s["role"] for s in stakeholders} == {"factory_manager"}

    def test_bulk_invite_empty_list_is_400(self, test_client: TestClient, order_id):
        response = test_client.post(
            f"{ORDERS}/{order_id}/stakeholders/bulk-invite",
            json={"emailList": ""},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_bulk_invite_unknown_order_returns_404(self, test_client: TestClient):
        response = test_client.post(
            f"{ORDERS}/ghost/stakeholders/bulk-invite",
            json={"emailList": "a@x.com"},
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
