from datetime import datetime, timedelta
from decimal import Decimal

from app.models.enums import RequestStatus
from app.models.id_request import IdRequest
from app.repositories import id_request_repository

API = "/api/v1"

REGISTRATION = {
    "student_id": "STU-2023-2345",
    "first_name": "Sarah",
    "last_name": "Johnson",
    "email": "sarah.johnson@example.com",
    "password": "password",
    "department": "Business Administration",
    "program": "MBA",
}


def test_register_login_and_me(client):
    resp = client.post(f"{API}/auth/register", json=REGISTRATION)
    assert resp.status_code == 201
    body = resp.json()
    assert body["roles"] == ["STUDENT"]
    assert "password" not in body

    resp = client.post(
        f"{API}/auth/login",
        json={"email": REGISTRATION["email"], "password": "password"},
    )
    assert resp.status_code == 200
    token = resp.json()["access_token"]

    resp = client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["student_id"] == "STU-2023-2345"


def test_register_cannot_self_assign_admin(client):
    resp = client.post(f"{API}/auth/register", json={**REGISTRATION, "roles": ["ADMIN"]})

    assert resp.status_code == 201
    assert resp.json()["roles"] == ["STUDENT"]


def test_register_duplicate_email_conflicts(client):
    assert client.post(f"{API}/auth/register", json=REGISTRATION).status_code == 201

    resp = client.post(
        f"{API}/auth/register",
        json={**REGISTRATION, "student_id": "STU-2023-0000"},
    )

    assert resp.status_code == 409
    assert resp.json()["field"] == "email"


def test_register_duplicate_student_id_conflicts(client):
    assert client.post(f"{API}/auth/register", json=REGISTRATION).status_code == 201

    resp = client.post(
        f"{API}/auth/register",
        json={**REGISTRATION, "email": "other@example.com"},
    )

    assert resp.status_code == 409
    assert resp.json()["field"] == "student_id"


def test_register_rejects_blank_and_malformed_fields(client):
    assert client.post(
        f"{API}/auth/register", json={**REGISTRATION, "first_name": "  "}
    ).status_code == 422
    assert client.post(
        f"{API}/auth/register", json={**REGISTRATION, "email": "nope"}
    ).status_code == 422


def test_login_with_wrong_password(client, student):
    resp = client.post(
        f"{API}/auth/token",
        data={"username": student.email, "password": "wrong"},
    )

    assert resp.status_code == 401


def test_requests_require_authentication(client):
    assert client.get(f"{API}/id-requests/me").status_code == 401


def test_student_submits_and_tracks_requests(client, student, headers_for):
    h = headers_for(student)

    resp = client.post(f"{API}/id-requests/", json={"type": "NEW"}, headers=h)
    assert resp.status_code == 201
    created = resp.json()
    assert created["status"] == "PENDING"
    assert created["paid"] is False

    resp = client.post(
        f"{API}/id-requests/",
        json={"type": "REPLACEMENT", "reason": "lost"},
        headers=h,
    )
    assert resp.status_code == 201

    resp = client.get(f"{API}/id-requests/me", headers=h)
    assert resp.status_code == 200
    assert len(resp.json()) == 2

    resp = client.get(f"{API}/id-requests/{created['id']}", headers=h)
    assert resp.status_code == 200


def test_replacement_without_reason_is_rejected(client, student, headers_for):
    resp = client.post(
        f"{API}/id-requests/", json={"type": "REPLACEMENT"}, headers=headers_for(student)
    )

    assert resp.status_code == 422


def test_my_requests_are_newest_first(client, db_session, student, headers_for):
    t1 = datetime(2024, 9, 1, 9, 0)
    older = id_request_repository.create(db_session, IdRequest(user=student, request_date=t1))
    newer = id_request_repository.create(
        db_session, IdRequest(user=student, request_date=t1 + timedelta(hours=1))
    )

    resp = client.get(f"{API}/id-requests/me", headers=headers_for(student))

    assert [r["id"] for r in resp.json()] == [newer.id, older.id]


def test_student_cannot_see_other_students_request(client, db_session, make_user, headers_for):
    owner = make_user()
    other = make_user()
    r = id_request_repository.create(db_session, IdRequest(user=owner))

    resp = client.get(f"{API}/id-requests/{r.id}", headers=headers_for(other))

    assert resp.status_code == 404


def test_admin_only_endpoints_forbid_students(client, student, headers_for):
    h = headers_for(student)

    assert client.get(f"{API}/id-requests/", headers=h).status_code == 403
    assert client.get(f"{API}/users/", headers=h).status_code == 403
    assert client.get(f"{API}/id-requests/summary", headers=h).status_code == 403


def test_admin_cannot_submit_requests(client, admin, headers_for):
    resp = client.post(f"{API}/id-requests/", json={"type": "NEW"}, headers=headers_for(admin))

    assert resp.status_code == 403


def test_admin_processes_request(client, db_session, student, admin, headers_for, enqueued):
    r = id_request_repository.create(db_session, IdRequest(user=student))
    h = headers_for(admin)

    resp = client.get(f"{API}/id-requests/", headers=h)
    assert resp.status_code == 200
    listed = resp.json()
    assert listed[0]["student_id"] == student.student_id
    assert listed[0]["student_name"] == student.full_name

    resp = client.put(f"{API}/id-requests/{r.id}/status", json={"status": "APPROVED"}, headers=h)
    assert resp.status_code == 200
    assert resp.json()["status"] == "APPROVED"
    assert enqueued == [(r.id, "PENDING", "APPROVED")]

    resp = client.put(f"{API}/id-requests/{r.id}/payment", json={"paid": True}, headers=h)
    assert resp.json()["paid"] is True

    resp = client.get(f"{API}/id-requests/", params={"status": "APPROVED"}, headers=h)
    assert [x["id"] for x in resp.json()] == [r.id]

    resp = client.get(f"{API}/id-requests/summary", headers=h)
    assert resp.json()["by_status"]["APPROVED"] == 1
    assert resp.json()["paid"] == 1


def test_invalid_transition_conflicts(client, db_session, student, admin, headers_for):
    r = id_request_repository.create(db_session, IdRequest(user=student))

    resp = client.put(
        f"{API}/id-requests/{r.id}/status",
        json={"status": "DELIVERED"},
        headers=headers_for(admin),
    )

    assert resp.status_code == 409
    assert id_request_repository.get(db_session, r.id).status == RequestStatus.PENDING


def test_missing_request_is_404(client, admin, headers_for):
    resp = client.put(
        f"{API}/id-requests/999/status",
        json={"status": "APPROVED"},
        headers=headers_for(admin),
    )

    assert resp.status_code == 404


def test_admin_manages_users(client, db_session, student, admin, headers_for):
    h = headers_for(admin)
    id_request_repository.create(db_session, IdRequest(user=student))

    resp = client.put(f"{API}/users/{student.id}/roles", json={"roles": ["STUDENT", "ADMIN"]}, headers=h)
    assert resp.status_code == 200
    assert sorted(resp.json()["roles"]) == ["ADMIN", "STUDENT"]

    assert client.delete(f"{API}/users/{student.id}", headers=h).status_code == 409
    assert client.delete(f"{API}/users/{admin.id}", headers=h).status_code == 400
    assert client.get(f"{API}/users/12345", headers=h).status_code == 404


def test_update_me(client, student, headers_for):
    resp = client.put(
        f"{API}/users/me", json={"program": "MSc Data Science"}, headers=headers_for(student)
    )

    assert resp.status_code == 200
    assert resp.json()["program"] == "MSc Data Science"


def test_notifications_listing_and_read(client, db_session, student, session_factory, monkeypatch, headers_for):
    from app.workers import tasks

    monkeypatch.setattr(tasks, "SessionLocal", session_factory)
    r = id_request_repository.create(db_session, IdRequest(user=student, status=RequestStatus.READY))
    tasks.status_notification_task(r.id, "PROCESSING", "READY")
    h = headers_for(student)

    resp = client.get(f"{API}/notifications/me", headers=h)
    assert resp.status_code == 200
    notes = resp.json()
    assert len(notes) == 1
    assert notes[0]["title"] == "Ready for pickup"

    resp = client.post(f"{API}/notifications/{notes[0]['id']}/read", headers=h)
    assert resp.json()["read"] is True

    resp = client.get(f"{API}/notifications/me", params={"unread_only": True}, headers=h)
    assert resp.json() == []


def test_health(client):
    assert client.get(f"{API}/health/live").json() == {"status": "ok"}
    assert client.get(f"{API}/health/db").json() == {"status": "ok"}


def test_fee_quote(client, student, headers_for):
    resp = client.get(
        f"{API}/id-requests/quote",
        params={"type": "REPLACEMENT", "delivery_method": "MAIL"},
        headers=headers_for(student),
    )

    assert resp.status_code == 200
    assert Decimal(resp.json()["total"]) == Decimal("40")


def test_mail_delivery_request(client, student, headers_for):
    h = headers_for(student)

    resp = client.post(f"{API}/id-requests/", json={"delivery_method": "MAIL"}, headers=h)
    assert resp.status_code == 422

    resp = client.post(
        f"{API}/id-requests/",
        json={"delivery_method": "MAIL", "address": "12 College Road"},
        headers=h,
    )
    assert resp.status_code == 201
    assert resp.json()["delivery_method"] == "MAIL"
    assert Decimal(resp.json()["fee"]) == Decimal("20")


def test_unknown_replacement_reason_is_rejected(client, student, headers_for):
    resp = client.post(
        f"{API}/id-requests/",
        json={"type": "REPLACEMENT", "reason": "other"},
        headers=headers_for(student),
    )

    assert resp.status_code == 422


def test_admin_search_and_department_filter(client, db_session, make_user, admin, headers_for):
    john = make_user(first_name="John", last_name="Smith", student_id="STU-2023-1234")
    sarah = make_user(first_name="Sarah", last_name="Johnson", department="Business Administration")
    r_john = id_request_repository.create(db_session, IdRequest(user=john))
    r_sarah = id_request_repository.create(db_session, IdRequest(user=sarah))
    h = headers_for(admin)

    resp = client.get(f"{API}/id-requests/", params={"search": "STU-2023-1234"}, headers=h)
    assert [x["id"] for x in resp.json()] == [r_john.id]

    resp = client.get(
        f"{API}/id-requests/", params={"department": "Business Administration"}, headers=h
    )
    assert [x["id"] for x in resp.json()] == [r_sarah.id]

    resp = client.get(f"{API}/id-requests/summary", headers=h)
    assert resp.json()["by_department"] == {
        "Business Administration": 1,
        "Computer Science": 1,
    }
