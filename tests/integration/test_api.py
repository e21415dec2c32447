"""Integration tests for API endpoints"""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def branches(client: TestClient) -> dict:
    """Two branches of the same organisation"""
    created = {}
    for key, name, city in (("main", "St. Mary Main", "Springfield"), ("east", "St. Mary East", "Shelbyville")):
        response = client.post(
            "/v1/branches",
            json={"organisation_id": "org-1", "name": name, "city": city},
        )
        assert response.status_code == 201
        created[key] = response.json()["id"]
    return created


@pytest.fixture
def transfer(client: TestClient, branches: dict) -> dict:
    response = client.post(
        "/v1/transfers",
        json={
            "member_id": "mem-001",
            "member_name": "John Doe",
            "source_branch_id": branches["main"],
            "destination_branch_id": branches["east"],
            "reason": "Relocating for work",
            "transfer_data": ["PERSONAL", "SACRAMENTS", "PERSONAL"],
        },
    )
    assert response.status_code == 201
    return response.json()


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    client.post("/v1/card-scanner/scan", json={"card_number": "RF-100001", "device_id": "device-001"})

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "parish_check_in_total" in response.text


def test_request_id_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


class TestBranches:
    def test_list_and_search(self, client: TestClient, branches: dict):
        response = client.get("/v1/branches", params={"q": "shelby"})

        assert response.status_code == 200
        assert [b["id"] for b in response.json()] == [branches["east"]]

    def test_get_branch(self, client: TestClient, branches: dict):
        response = client.get(f"/v1/branches/{branches['main']}")

        assert response.status_code == 200
        assert response.json()["name"] == "St. Mary Main"
        assert response.json()["is_active"] is True

    def test_partial_update(self, client: TestClient, branches: dict):
        response = client.patch(f"/v1/branches/{branches['main']}", json={"is_active": False})

        assert response.status_code == 200
        data = response.json()
        assert data["is_active"] is False
        assert data["city"] == "Springfield"

    def test_invalid_id_format(self, client: TestClient):
        response = client.get("/v1/branches/not-a-uuid")

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid branch ID format"

    def test_branch_not_found(self, client: TestClient):
        response = client.get(f"/v1/branches/{uuid.uuid4()}")
        assert response.status_code == 404


class TestTransfers:
    def test_create_transfer_is_pending(self, transfer: dict):
        assert transfer["status"] == "pending"
        assert transfer["transfer_data"] == ["PERSONAL", "SACRAMENTS"]
        assert transfer["approved_date"] is None

    def test_same_branch_rejected(self, client: TestClient, branches: dict):
        response = client.post(
            "/v1/transfers",
            json={
                "member_id": "mem-001",
                "member_name": "John Doe",
                "source_branch_id": branches["main"],
                "destination_branch_id": branches["main"],
                "reason": "No change",
                "transfer_data": ["PERSONAL"],
            },
        )

        assert response.status_code == 422
        assert response.json()["detail"] == "Source and destination branches must differ"

    def test_missing_reason(self, client: TestClient, branches: dict):
        response = client.post(
            "/v1/transfers",
            json={
                "member_id": "mem-001",
                "member_name": "John Doe",
                "source_branch_id": branches["main"],
                "destination_branch_id": branches["east"],
                "reason": "  ",
                "transfer_data": ["PERSONAL"],
            },
        )

        assert response.status_code == 422
        assert response.json()["detail"] == "Please provide a reason for the transfer"

    def test_unknown_destination_branch(self, client: TestClient, branches: dict):
        response = client.post(
            "/v1/transfers",
            json={
                "member_id": "mem-001",
                "member_name": "John Doe",
                "source_branch_id": branches["main"],
                "destination_branch_id": str(uuid.uuid4()),
                "reason": "Relocating",
                "transfer_data": ["PERSONAL"],
            },
        )
        assert response.status_code == 404

    @patch("parish_hub.infrastructure.clients.notifications.NotificationClient.send_event", new_callable=AsyncMock)
    def test_approve_then_complete(self, mock_send: AsyncMock, client: TestClient, transfer: dict):
        approved = client.patch(f"/v1/transfers/{transfer['id']}", json={"status": "approved"})
        assert approved.status_code == 200
        assert approved.json()["approved_date"] is not None
        mock_send.assert_not_called()

        completed = client.patch(f"/v1/transfers/{transfer['id']}", json={"status": "completed"})
        assert completed.status_code == 200
        assert completed.json()["status"] == "completed"
        assert completed.json()["completed_date"] is not None

        mock_send.assert_called_once()
        assert mock_send.call_args.args[0]["event"] == "TRANSFER_COMPLETED"

    @patch("parish_hub.infrastructure.clients.notifications.NotificationClient.send_event", new_callable=AsyncMock)
    def test_reject_uses_default_reason(self, mock_send: AsyncMock, client: TestClient, transfer: dict):
        response = client.patch(f"/v1/transfers/{transfer['id']}", json={"status": "rejected"})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "rejected"
        assert data["rejection_reason"] == "Request rejected"
        assert data["rejected_date"] is not None
        assert mock_send.call_args.args[0]["event"] == "TRANSFER_REJECTED"

    def test_complete_pending_is_conflict(self, client: TestClient, transfer: dict):
        response = client.patch(f"/v1/transfers/{transfer['id']}", json={"status": "completed"})

        assert response.status_code == 409
        assert response.json()["detail"] == "Cannot move transfer request from pending to completed"

    def test_rejected_is_final(self, client: TestClient, transfer: dict):
        client.patch(f"/v1/transfers/{transfer['id']}", json={"status": "rejected", "rejection_reason": "Duplicate"})
        response = client.patch(f"/v1/transfers/{transfer['id']}", json={"status": "approved"})

        assert response.status_code == 409

    def test_branch_incoming_and_outgoing(self, client: TestClient, branches: dict, transfer: dict):
        incoming = client.get(f"/v1/branches/{branches['east']}/transfers", params={"direction": "incoming"})
        outgoing = client.get(f"/v1/branches/{branches['east']}/transfers", params={"direction": "outgoing"})

        assert incoming.json()["total"] == 1
        assert incoming.json()["items"][0]["id"] == transfer["id"]
        assert outgoing.json()["total"] == 0

    def test_delete_transfer(self, client: TestClient, transfer: dict):
        response = client.delete(f"/v1/transfers/{transfer['id']}")
        assert response.status_code == 204

        assert client.get(f"/v1/transfers/{transfer['id']}").status_code == 404


class TestMembers:
    def test_search_and_paginate(self, client: TestClient):
        response = client.get("/v1/members", params={"q": "doe", "page_size": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["total_pages"] == 2
        assert len(data["items"]) == 2
        assert data["items"][0]["full_name"].endswith("Doe")

    def test_filter_by_status(self, client: TestClient):
        response = client.get("/v1/members", params={"status": "visitor"})
        assert [m["id"] for m in response.json()["items"]] == ["mem-006"]

    def test_member_not_found(self, client: TestClient):
        response = client.get("/v1/members/mem-999")

        assert response.status_code == 404
        assert response.json()["detail"] == "Member with ID mem-999 not found"


class TestAttendance:
    def test_record_and_duplicate(self, client: TestClient):
        body = {"member_id": "mem-004", "event_id": "evt-002", "method": "manual_entry"}

        first = client.post("/v1/attendance/records", json=body)
        assert first.status_code == 201
        assert first.json()["status"] == "checked_in"

        second = client.post("/v1/attendance/records", json=body)
        assert second.status_code == 409

    def test_check_out(self, client: TestClient):
        created = client.post(
            "/v1/attendance/records", json={"member_id": "mem-004", "event_id": "evt-002"}
        ).json()

        response = client.post(f"/v1/attendance/records/{created['id']}/check-out")
        assert response.status_code == 200
        assert response.json()["status"] == "checked_out"

        again = client.post(f"/v1/attendance/records/{created['id']}/check-out")
        assert again.status_code == 409

    def test_family_check_in(self, client: TestClient):
        response = client.post(
            "/v1/attendance/family-check-in",
            json={"primary_member_id": "mem-001", "family_member_ids": ["mem-002", "mem-003"], "event_id": "evt-002"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["family_check_in"] is True
        assert len(data["family_members"]) == 2

    def test_family_check_in_not_allowed(self, client: TestClient):
        response = client.post(
            "/v1/attendance/family-check-in",
            json={"primary_member_id": "mem-001", "family_member_ids": ["mem-002"], "event_id": "evt-003"},
        )
        assert response.status_code == 422

    def test_records_sorted_and_searched(self, client: TestClient):
        response = client.get(
            "/v1/attendance/records",
            params={"event_id": "evt-001", "q": "doe", "sort": "member_name", "direction": "asc"},
        )

        assert response.status_code == 200
        names = [r["member_name"] for r in response.json()["items"]]
        assert names == ["Jane Doe", "John Doe", "Timmy Doe"]

    def test_take_attendance(self, client: TestClient):
        response = client.post("/v1/attendance/events/evt-001/take", json={"select_all": True})

        assert response.status_code == 201
        assert [r["member_id"] for r in response.json()["marked"]] == ["mem-004", "mem-006"]

        repeat = client.post("/v1/attendance/events/evt-001/take", json={"select_all": True})
        assert repeat.status_code == 422
        assert repeat.json()["detail"] == "All selected members are already marked for this event"

    def test_take_attendance_nothing_selected(self, client: TestClient):
        response = client.post("/v1/attendance/events/evt-002/take", json={"member_ids": []})

        assert response.status_code == 422
        assert response.json()["detail"] == "No members selected"

    def test_create_event_and_list(self, client: TestClient):
        response = client.post(
            "/v1/attendance/events",
            json={
                "name": "Choir Rehearsal",
                "type": "rehearsal",
                "start_time": "2030-01-05T18:00:00Z",
                "end_time": "2030-01-05T20:00:00Z",
                "location_id": "loc-hall",
                "branch_id": "br-001",
            },
        )
        assert response.status_code == 201
        event_id = response.json()["id"]

        listed = client.get("/v1/attendance/events", params={"branch_id": "br-001"})
        assert event_id in [e["id"] for e in listed.json()]

    def test_naive_event_time_still_lists(self, client: TestClient):
        response = client.post(
            "/v1/attendance/events",
            json={
                "name": "Vigil",
                "type": "service",
                "start_time": "2030-01-05T18:00:00",
                "end_time": "2030-01-05T20:00:00",
                "location_id": "loc-sanctuary",
                "branch_id": "br-001",
            },
        )
        assert response.status_code == 201

        listed = client.get("/v1/attendance/events", params={"branch_id": "br-001"})
        assert listed.status_code == 200
        assert listed.json()[-1]["id"] == response.json()["id"]

    def test_create_event_end_before_start(self, client: TestClient):
        response = client.post(
            "/v1/attendance/events",
            json={
                "name": "Backwards",
                "type": "service",
                "start_time": "2030-01-05T18:00:00Z",
                "end_time": "2030-01-05T17:00:00Z",
                "location_id": "loc-hall",
                "branch_id": "br-001",
            },
        )
        assert response.status_code == 422

    def test_event_stats(self, client: TestClient):
        response = client.get("/v1/attendance/events/evt-001/stats")

        assert response.status_code == 200
        assert response.json()["total_attendees"] == 3

    def test_absence_alerts(self, client: TestClient):
        response = client.get("/v1/attendance/absence-alerts", params={"branch_id": "br-001"})

        assert response.status_code == 200
        assert [a["member_id"] for a in response.json()] == ["mem-004"]

    @pytest.mark.parametrize(
        "timeframe,label",
        [("week", "WEEKLY"), ("month", "MONTHLY"), ("quarter", "QUARTERLY"), ("year", "YEARLY")],
    )
    def test_analytics_periods(self, client: TestClient, timeframe: str, label: str):
        response = client.get("/v1/attendance/analytics", params={"timeframe": timeframe})

        assert response.status_code == 200
        data = response.json()
        assert data["timeframe"] == timeframe
        assert data["period"]["label"] == label

    def test_analytics_unknown_timeframe(self, client: TestClient):
        response = client.get("/v1/attendance/analytics", params={"timeframe": "decade"})
        assert response.status_code == 422


class TestCardsAndDevices:
    def test_register_card_conflict(self, client: TestClient):
        response = client.post("/v1/cards", json={"member_id": "mem-002", "card_number": "NF-200001"})
        assert response.status_code == 409

    def test_register_card_and_mark_lost(self, client: TestClient):
        card = client.post(
            "/v1/cards", json={"member_id": "mem-002", "card_number": "RF-300001", "card_type": "rfid"}
        ).json()
        assert card["status"] == "active"

        response = client.patch(f"/v1/cards/{card['id']}/status", json={"status": "lost"})
        assert response.json()["status"] == "lost"

        member = client.get("/v1/members/mem-002").json()
        assert member["has_card"] is False

    def test_register_and_assign_device(self, client: TestClient):
        device = client.post(
            "/v1/devices",
            json={"name": "Side Door", "location_id": "loc-hall", "branch_id": "br-001", "device_type": "kiosk"},
        ).json()
        assert device["status"] == "online"

        response = client.post(f"/v1/devices/{device['id']}/assign", json={"event_id": "evt-003"})
        assert response.status_code == 200
        assert response.json()["assigned_event_id"] == "evt-003"

    def test_device_status_update(self, client: TestClient):
        response = client.patch("/v1/devices/device-002/status", json={"status": "online"})

        assert response.status_code == 200
        assert response.json()["last_connected"] is not None

    def test_available_devices(self, client: TestClient):
        response = client.get(
            "/v1/devices/available",
            params={
                "start_time": "2030-01-05T09:00:00Z",
                "end_time": "2030-01-05T11:00:00Z",
                "location_id": "loc-sanctuary",
                "branch_id": "br-001",
            },
        )

        assert response.status_code == 200
        assert [d["id"] for d in response.json()] == ["device-001"]


class TestCardScanner:
    def test_scan_checks_in(self, client: TestClient):
        response = client.post("/v1/card-scanner/scan", json={"card_number": "RF-100001", "device_id": "device-001"})

        assert response.status_code == 201
        data = response.json()
        assert data["member_id"] == "mem-001"
        assert data["method"] == "card_scan"

    def test_scan_twice_conflicts(self, client: TestClient):
        body = {"card_number": "RF-100001", "device_id": "device-001"}
        client.post("/v1/card-scanner/scan", json=body)

        response = client.post("/v1/card-scanner/scan", json=body)
        assert response.status_code == 409

    def test_scan_unknown_card(self, client: TestClient):
        response = client.post("/v1/card-scanner/scan", json={"card_number": "XX-1", "device_id": "device-001"})

        assert response.status_code == 404
        assert response.json()["detail"] == "Active card with number XX-1 not found"

    def test_scan_offline_device(self, client: TestClient):
        response = client.post("/v1/card-scanner/scan", json={"card_number": "RF-100001", "device_id": "device-002"})
        assert response.status_code == 409


class TestFinances:
    def test_record_income_and_summary(self, client: TestClient, branches: dict):
        response = client.post(
            "/v1/finances/transactions",
            json={
                "type": "INCOME",
                "amount_cents": 25000,
                "transaction_date": datetime.now(timezone.utc).date().isoformat(),
                "branch_id": branches["main"],
                "fund_id": "general",
                "category": "Tithe",
                "payment_method": "Cash",
                "member_id": "mem-001",
            },
        )
        assert response.status_code == 201
        assert response.json()["amount_cents"] == 25000

        listed = client.get("/v1/finances/transactions", params={"branch_id": branches["main"]})
        assert listed.json()["total"] == 1

        summary = client.get("/v1/finances/summary", params={"timeframe": "year", "branch_id": branches["main"]})
        assert summary.status_code == 200
        assert summary.json()["income_cents"] == 25000
        assert summary.json()["net_cents"] == 25000

    def test_invalid_transaction_reports_all_fields(self, client: TestClient, branches: dict):
        response = client.post(
            "/v1/finances/transactions",
            json={
                "type": "EXPENSE",
                "amount_cents": 0,
                "transaction_date": (datetime.now(timezone.utc).date() + timedelta(days=2)).isoformat(),
                "branch_id": branches["main"],
                "fund_id": "",
                "category": "Utilities",
                "payment_method": "Cash",
            },
        )

        assert response.status_code == 422
        errors = response.json()["errors"]
        assert set(errors) == {"amount_cents", "transaction_date", "fund_id", "vendor_id"}
