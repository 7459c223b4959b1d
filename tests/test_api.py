from __future__ import annotations

from datetime import datetime, timezone

import pytest

from staff_roster.main import create_app

ADMIN_HEADERS = {"X-User-Id": "1", "X-User-Role": "ADMIN"}
ALICE_HEADERS = {"X-User-Id": "2", "X-User-Role": "STAFF"}


@pytest.fixture
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=container)
    return app.test_client()


def _create_shift(client, **overrides):
    body = {"date": "2026-03-02", "type": "MORNING", "startTime": "08:00", "endTime": "16:00", "capacity": 2}
    body.update(overrides)
    resp = client.post("/api/shifts", json=body, headers=ADMIN_HEADERS)
    assert resp.status_code == 201
    return resp.get_json()["shift"]["id"]


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}


def test_missing_identity_is_unauthorized(client):
    resp = client.get("/api/shifts")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Unauthorized"


def test_staff_cannot_list_shifts(client):
    assert client.get("/api/shifts", headers=ALICE_HEADERS).status_code == 403


def test_create_and_list_shift(client):
    shift_id = _create_shift(client)

    resp = client.get("/api/shifts?date=2026-03-02", headers=ADMIN_HEADERS)

    assert resp.status_code == 200
    [shift] = resp.get_json()["shifts"]
    assert shift["id"] == shift_id
    assert shift["startTime"] == "08:00"
    assert shift["availableSlots"] == 2
    assert shift["isFull"] is False


def test_invalid_shift_body_is_bad_request(client):
    resp = client.post(
        "/api/shifts",
        json={"date": "2026-03-02", "type": "MORNING", "startTime": "25:00", "endTime": "16:00"},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 400
    assert resp.get_json()["kind"] == "ValidationError"


def test_unknown_shift_is_not_found(client):
    assert client.get("/api/shifts/9999", headers=ALICE_HEADERS).status_code == 404


def test_assign_until_full_then_conflict(client):
    shift_id = _create_shift(client, capacity=1)

    first = client.post(f"/api/shifts/{shift_id}/assign", json={"userId": 2}, headers=ADMIN_HEADERS)
    second = client.post(f"/api/shifts/{shift_id}/assign", json={"userId": 3}, headers=ADMIN_HEADERS)

    assert first.status_code == 201
    assert first.get_json()["assignment"]["userId"] == 2
    assert second.status_code == 409
    assert second.get_json()["kind"] == "CapacityExceededError"

    detail = client.get(f"/api/shifts/{shift_id}", headers=ADMIN_HEADERS).get_json()["shift"]
    assert detail["isFull"] is True
    assert [a["userId"] for a in detail["assignments"]] == [2]


def test_unassign(client):
    shift_id = _create_shift(client)
    client.post(f"/api/shifts/{shift_id}/assign", json={"userId": 2}, headers=ADMIN_HEADERS)

    resp = client.delete(f"/api/shifts/{shift_id}/assign", json={"userId": 2}, headers=ADMIN_HEADERS)
    again = client.delete(f"/api/shifts/{shift_id}/assign", json={"userId": 2}, headers=ADMIN_HEADERS)

    assert resp.get_json() == {"success": True}
    assert again.status_code == 404


def test_conflicts_report(client, container):
    a = _create_shift(client, startTime="08:00", endTime="16:00")
    b = _create_shift(client, type="AFTERNOON", startTime="12:00", endTime="20:00")
    # Seed overlapping assignments directly; the API refuses to create them.
    container.assignments_repo.create(shift_id=a, user_id=2)
    container.assignments_repo.create(shift_id=b, user_id=2)

    resp = client.get("/api/conflicts?date=2026-03-02&days=1", headers=ADMIN_HEADERS)

    body = resp.get_json()
    assert body["count"] == 1
    assert body["conflicts"][0]["userName"] == "Alice Nurse"
    assert [s["id"] for s in body["conflicts"][0]["shifts"]] == [a, b]


def test_check_in_and_out_flow(client, monkeypatch):
    shift_id = _create_shift(client)
    client.post(f"/api/shifts/{shift_id}/assign", json={"userId": 2}, headers=ADMIN_HEADERS)

    monkeypatch.setattr("staff_roster.attendance.service.now_local", lambda: datetime(2026, 3, 2, 8, 10))
    check_in = client.post("/api/attendance/check-in", json={"shiftId": shift_id}, headers=ALICE_HEADERS)
    again = client.post("/api/attendance/check-in", json={"shiftId": shift_id}, headers=ALICE_HEADERS)

    monkeypatch.setattr("staff_roster.attendance.service.now_local", lambda: datetime(2026, 3, 2, 15, 30))
    check_out = client.post("/api/attendance/check-out", json={"shiftId": shift_id}, headers=ALICE_HEADERS)

    assert check_in.status_code == 200
    assert check_in.get_json()["attendance"]["status"] == "LATE"
    assert again.status_code == 409
    assert check_out.get_json()["attendance"]["status"] == "EARLY_EXIT"

    history = client.get("/api/attendance/user/2", headers=ALICE_HEADERS).get_json()["attendance"]
    assert [h["status"] for h in history] == ["EARLY_EXIT"]
    assert history[0]["shift"]["id"] == shift_id


def test_check_out_without_check_in_is_bad_request(client):
    shift_id = _create_shift(client)
    client.post(f"/api/shifts/{shift_id}/assign", json={"userId": 2}, headers=ADMIN_HEADERS)

    resp = client.post("/api/attendance/check-out", json={"shiftId": shift_id}, headers=ALICE_HEADERS)

    assert resp.status_code == 400
    assert resp.get_json()["kind"] == "NoCheckInError"


def test_admin_overrides_status(client, container):
    shift_id = _create_shift(client)
    client.post(f"/api/shifts/{shift_id}/assign", json={"userId": 2}, headers=ADMIN_HEADERS)
    record = container.attendance_repo.get_for_pair(shift_id=shift_id, user_id=2)

    resp = client.put(
        f"/api/attendance/{record.attendance_id}",
        json={"status": "present", "remarks": "approved leave swap"},
        headers=ADMIN_HEADERS,
    )
    denied = client.put(f"/api/attendance/{record.attendance_id}", json={"status": "LATE"}, headers=ALICE_HEADERS)

    assert resp.get_json()["attendance"]["status"] == "PRESENT"
    assert resp.get_json()["attendance"]["remarks"] == "approved leave swap"
    assert denied.status_code == 403


def test_staff_cannot_read_other_history(client):
    assert client.get("/api/attendance/user/3", headers=ALICE_HEADERS).status_code == 403


def test_dashboard_today(client, monkeypatch):
    shift_id = _create_shift(client, capacity=3)
    client.post(f"/api/shifts/{shift_id}/assign", json={"userId": 2}, headers=ADMIN_HEADERS)
    monkeypatch.setattr("staff_roster.shifts.controller.now_local", lambda: datetime(2026, 3, 2, 9, 0))

    stats = client.get("/api/dashboard/today", headers=ADMIN_HEADERS).get_json()["stats"]

    assert stats["totalShifts"] == 1
    assert stats["totalAssignments"] == 1
    assert stats["availableSlots"] == 2
    assert stats["attendance"]["ABSENT"] == 1


def _local(value: datetime) -> datetime:
    return value.astimezone().replace(tzinfo=None)


def test_admin_edit_accepts_timestamps_with_offset(client, container):
    shift_id = _create_shift(client)
    client.post(f"/api/shifts/{shift_id}/assign", json={"userId": 2}, headers=ADMIN_HEADERS)
    record = container.attendance_repo.get_for_pair(shift_id=shift_id, user_id=2)

    resp = client.put(
        f"/api/attendance/{record.attendance_id}",
        json={"checkIn": "2026-03-02T08:00:00+00:00", "checkOut": "2026-03-02T16:00:00Z"},
        headers=ADMIN_HEADERS,
    )

    assert resp.status_code == 200
    stored = container.attendance_repo.get_by_id(record.attendance_id)
    assert stored.check_in == _local(datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc))
    assert stored.check_out == _local(datetime(2026, 3, 2, 16, 0, tzinfo=timezone.utc))
    assert resp.get_json()["attendance"]["checkOut"] == stored.check_out.isoformat()


def test_mixed_offset_and_naive_edit_is_not_a_server_error(client, container, monkeypatch):
    shift_id = _create_shift(client)
    client.post(f"/api/shifts/{shift_id}/assign", json={"userId": 2}, headers=ADMIN_HEADERS)
    monkeypatch.setattr("staff_roster.attendance.service.now_local", lambda: datetime(2026, 3, 2, 8, 0))
    client.post("/api/attendance/check-in", json={"shiftId": shift_id}, headers=ALICE_HEADERS)
    record = container.attendance_repo.get_for_pair(shift_id=shift_id, user_id=2)

    resp = client.put(
        f"/api/attendance/{record.attendance_id}",
        json={"checkOut": "2026-03-03T15:30:00+00:00"},
        headers=ADMIN_HEADERS,
    )

    assert resp.status_code == 200
    assert container.attendance_repo.get_by_id(record.attendance_id).check_out.tzinfo is None


def test_staff_crud_over_http(client):
    created = client.post(
        "/api/staff",
        json={"name": "Erin Tech", "email": "erin@h.test", "staffRole": "technician", "department": "LABORATORY"},
        headers=ADMIN_HEADERS,
    )
    assert created.status_code == 201
    staff = created.get_json()["staff"]
    assert staff["staffRole"] == "TECHNICIAN"
    assert staff["isActive"] is True

    duplicate = client.post(
        "/api/staff",
        json={"name": "Erin Again", "email": "ERIN@h.test", "staffRole": "NURSE", "department": "ICU"},
        headers=ADMIN_HEADERS,
    )
    assert duplicate.status_code == 409
    assert duplicate.get_json()["kind"] == "DuplicateEmailError"

    listed = client.get("/api/staff?department=LABORATORY", headers=ADMIN_HEADERS).get_json()["staff"]
    assert [s["id"] for s in listed] == [staff["id"]]

    updated = client.put(f"/api/staff/{staff['id']}", json={"isActive": False}, headers=ADMIN_HEADERS)
    assert updated.get_json()["staff"]["isActive"] is False
    inactive = client.get("/api/staff?active=false", headers=ADMIN_HEADERS).get_json()["staff"]
    assert staff["id"] in {s["id"] for s in inactive}

    assert client.delete(f"/api/staff/{staff['id']}", headers=ADMIN_HEADERS).get_json() == {"success": True}
    assert client.get(f"/api/staff/{staff['id']}", headers=ADMIN_HEADERS).status_code == 404


def test_staff_routes_reject_bad_input_and_non_admins(client):
    bad_role = client.post(
        "/api/staff",
        json={"name": "X", "email": "x@h.test", "staffRole": "JANITOR", "department": "ICU"},
        headers=ADMIN_HEADERS,
    )
    assert bad_role.status_code == 400
    assert client.get("/api/staff", headers=ALICE_HEADERS).status_code == 403
    assert client.get("/api/staff/2", headers=ALICE_HEADERS).get_json()["staff"]["name"] == "Alice Nurse"
