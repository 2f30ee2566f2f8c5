from __future__ import annotations

import pytest

import config.testing as testing_settings
from src.smart_attendance.smart_attendance.container import build_container
from src.smart_attendance.smart_attendance.main import create_app
from src.smart_attendance.smart_attendance.recognition.base import FaceRecognizer, RecognitionResult

ADMIN = {"email": "admin@example.com", "password": "admin123", "fullName": "Admin User", "role": "admin"}
STUDENT = {"email": "student@example.com", "password": "student123", "fullName": "Student User"}
ALICE = {"studentId": "cs101", "name": "Alice", "faculty": "Eng", "department": "CS", "year": 1, "semester": 1}


def _login(client, account):
    client.post("/api/auth/register", json=account)
    resp = client.post("/api/auth/login", json={"email": account["email"], "password": account["password"]})
    assert resp.status_code == 200
    return resp


@pytest.fixture
def admin_client(client):
    _login(client, ADMIN)
    return client


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "backend": "memory"}


def test_register_and_login(client):
    resp = client.post("/api/auth/register", json=STUDENT)
    assert resp.status_code == 201
    user = resp.get_json()["user"]
    assert user["role"] == "student"
    assert "password" not in user and "passwordHash" not in user

    resp = client.post("/api/auth/register", json=STUDENT)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "duplicate_email"

    resp = client.post("/api/auth/login", json={"email": "STUDENT@example.com", "password": "student123"})
    assert resp.status_code == 200
    assert resp.get_json()["user"]["lastLogin"] is not None

    me = client.get("/api/auth/me").get_json()["user"]
    assert me["email"] == "student@example.com"


def test_login_failures(client, app):
    client.post("/api/auth/register", json=STUDENT)

    resp = client.post("/api/auth/login", json={"email": STUDENT["email"], "password": "wrong-pw"})
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "invalid_credentials", "message": "Invalid email or password"}

    resp = client.post("/api/auth/login", json={"email": STUDENT["email"]})
    assert resp.status_code == 400

    container = app.extensions["smart_attendance"]
    account = container.accounts_repo.get_by_email(STUDENT["email"])
    container.accounts_repo.set_active(account.account_id, is_active=False)

    resp = client.post("/api/auth/login", json={"email": STUDENT["email"], "password": STUDENT["password"]})
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "account_inactive"


def test_register_validation_error(client):
    resp = client.post("/api/auth/register", json={"email": "a@example.com", "password": "123", "fullName": "Al"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


def test_gated_routes_require_login(client):
    assert client.get("/api/students").status_code == 401
    assert client.post("/api/attendance", json={"studentId": "CS101", "date": "2024-05-01"}).status_code == 401
    assert client.get("/api/attendance/stats?date=2024-05-01").status_code == 401
    assert client.get("/api/auth/me").status_code == 401


def test_logout_returns_to_anonymous(admin_client):
    assert admin_client.get("/api/students").status_code == 200
    assert admin_client.post("/api/auth/logout").status_code == 200
    assert admin_client.get("/api/students").status_code == 401


def test_student_role_cannot_mutate_roster(client):
    _login(client, STUDENT)

    resp = client.post("/api/students", json=ALICE)
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "forbidden"
    assert client.get("/api/students").status_code == 200
    assert client.get("/api/users").status_code == 403


def test_roster_crud(admin_client):
    resp = admin_client.post("/api/students", json=ALICE)
    assert resp.status_code == 201
    student = resp.get_json()["student"]
    assert student["studentId"] == "CS101"

    resp = admin_client.post("/api/students", json={**ALICE, "studentId": "CS101"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "duplicate_student_id"

    resp = admin_client.put(f"/api/students/{student['id']}", json={**ALICE, "semester": "2"})
    assert resp.status_code == 200
    assert resp.get_json()["student"]["semester"] == 2

    assert admin_client.get(f"/api/students/{student['id']}").status_code == 200
    assert [s["studentId"] for s in admin_client.get("/api/students").get_json()] == ["CS101"]

    assert admin_client.delete(f"/api/students/{student['id']}").status_code == 200
    assert admin_client.delete(f"/api/students/{student['id']}").status_code == 404
    assert admin_client.put(f"/api/students/{student['id']}", json=ALICE).status_code == 404


def test_mark_and_query_attendance(admin_client):
    body = {"studentId": "CS101", "name": "Alice", "date": "2024-05-01", "time": "08:00:00", "confidence": 0.9}

    resp = admin_client.post("/api/attendance", json=body)
    assert resp.status_code == 201
    assert resp.get_json()["attendance"]["status"] == "present"

    resp = admin_client.post("/api/attendance", json=body)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "duplicate_attendance"

    assert admin_client.post("/api/attendance", json={"studentId": "CS101"}).status_code == 400

    records = admin_client.get("/api/attendance?date=2024-05-01").get_json()
    assert len(records) == 1

    assert admin_client.get("/api/attendance?startDate=2024-05-01&endDate=2024-05-07").get_json() == records
    assert admin_client.get("/api/attendance?startDate=2024-05-07&endDate=2024-05-01").status_code == 400


def test_stats_endpoint(admin_client):
    admin_client.post("/api/students", json=ALICE)
    admin_client.post("/api/students", json={**ALICE, "studentId": "CS102", "name": "Bob"})
    admin_client.post("/api/attendance", json={"studentId": "CS101", "date": "2024-05-01"})

    stats = admin_client.get("/api/attendance/stats?date=2024-05-01").get_json()
    assert stats["totalPresent"] == 1
    assert stats["totalStudents"] == 2
    assert stats["averageAttendance"] == 50.0
    assert len(stats["records"]) == 1

    stats = admin_client.get("/api/attendance/stats?startDate=2024-05-02").get_json()
    assert stats["totalPresent"] == 0
    assert stats["averageAttendancePercent"] == 0


def test_export_csv(admin_client):
    admin_client.post("/api/attendance", json={"studentId": "CS101", "date": "2024-05-01"})

    resp = admin_client.get("/api/attendance/export?startDate=2024-05-01&endDate=2024-05-31")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "attachment" in resp.headers["Content-Disposition"]
    text = resp.data.decode("utf-8-sig")
    assert text.splitlines()[0].startswith("date,time,studentId")


def test_capture_requires_image(admin_client):
    resp = admin_client.post("/api/attendance/capture", json={})
    assert resp.status_code == 400


def test_admin_account_management(admin_client):
    admin_client.post("/api/auth/register", json=STUDENT)
    students = admin_client.get("/api/users?role=student").get_json()
    assert [u["email"] for u in students] == ["student@example.com"]

    resp = admin_client.patch(f"/api/users/{students[0]['id']}/active", json={"isActive": False})
    assert resp.status_code == 200
    assert resp.get_json()["user"]["isActive"] is False

    assert admin_client.patch("/api/users/999/active", json={"isActive": True}).status_code == 404
    assert admin_client.patch(f"/api/users/{students[0]['id']}/active", json={}).status_code == 400


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "not_found"


class _AlwaysAlice(FaceRecognizer):
    def recognize(self, image):
        return RecognitionResult(matched=True, student_id="cs101", name="Alice", confidence=0.91)


def test_capture_marks_recognized_student():
    container = build_container(backend="memory", recognizer=_AlwaysAlice())
    client = create_app(testing_settings, container=container).test_client()
    _login(client, ADMIN)
    client.post("/api/students", json=ALICE)

    resp = client.post("/api/attendance/capture", json={"image": "data:image/jpeg;base64,AAAA", "date": "2024-05-01"})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["matched"] is True
    assert body["attendance"]["studentId"] == "CS101"
    assert body["attendance"]["confidence"] == 0.91

    resp = client.post("/api/attendance/capture", json={"image": "data:image/jpeg;base64,AAAA", "date": "2024-05-01"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "duplicate_attendance"


def test_deactivated_account_loses_live_session(app):
    admin = app.test_client()
    student = app.test_client()
    _login(admin, ADMIN)
    _login(student, STUDENT)
    assert student.post("/api/attendance", json={"studentId": "CS101", "date": "2024-05-01"}).status_code == 201

    account_id = student.get("/api/auth/me").get_json()["user"]["id"]
    assert admin.patch(f"/api/users/{account_id}/active", json={"isActive": False}).status_code == 200

    resp = student.post("/api/attendance", json={"studentId": "CS102", "date": "2024-05-01"})
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "account_inactive"
    assert student.get("/api/auth/me").status_code == 403
    assert len(admin.get("/api/attendance?date=2024-05-01").get_json()) == 1


def test_non_string_password_is_validation_error(client):
    resp = client.post(
        "/api/auth/register",
        json={"email": "n@example.com", "password": 12345678, "fullName": "Number Pw"},
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


def test_oversized_attendance_fields_are_rejected(admin_client):
    for body in (
        {"studentId": "X" * 40, "date": "2024-05-01"},
        {"studentId": "CS101", "date": "2024-05-01", "name": "N" * 300},
        {"studentId": "CS101", "date": "2024-05-01", "time": "T" * 100},
    ):
        resp = admin_client.post("/api/attendance", json=body)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "validation_error"
    assert admin_client.get("/api/attendance").get_json() == []
