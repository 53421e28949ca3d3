from models import db, Member, User, Booking, ExpenseShare
from conftest import login


def test_list_members(client, admin_headers, members):
    resp = client.get("/api/members", headers=admin_headers)
    assert resp.status_code == 200
    names = {m["name"] for m in resp.get_json()}
    assert names == {"Admin", "Bala", "Chitra", "Dev"}


def test_create_member_with_login(client, admin_headers):
    resp = client.post("/api/members", json={
        "name": "  Esha ",
        "email": "Esha@Test.local",
        "phone": "9111111111",
        "password": "esha-pass",
    }, headers=admin_headers)
    assert resp.status_code == 201
    member = resp.get_json()
    assert member["name"] == "Esha"
    assert member["email"] == "esha@test.local"
    assert member["role"] == "member"
    assert member["status"] == "active"
    assert member["balance"] == 0
    assert member["user_id"] is not None

    data = login(client, "esha@test.local", "esha-pass")
    assert data["user"]["member_id"] == member["id"]


def test_create_member_without_login(client, admin_headers):
    resp = client.post("/api/members", json={"name": "Farah"}, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.get_json()["user_id"] is None


def test_duplicate_email_rejected(client, admin_headers, members):
    resp = client.post("/api/members", json={
        "name": "Other Bala", "email": "bala@test.local",
    }, headers=admin_headers)
    assert resp.status_code == 400


def test_blank_name_rejected(client, admin_headers):
    resp = client.post("/api/members", json={"name": "   "}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Name is required"


def test_update_member(client, admin_headers, members):
    resp = client.put(f"/api/members/{members[1]}", json={
        "phone": "9222222222", "status": "inactive",
    }, headers=admin_headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["phone"] == "9222222222"
    assert body["status"] == "inactive"
    assert body["name"] == "Chitra"

    assert client.put("/api/members/4242", json={"name": "X"}, headers=admin_headers).status_code == 404


def test_admin_member_cannot_be_deleted(client, admin_headers, admin_member_id):
    resp = client.delete(f"/api/members/{admin_member_id}", headers=admin_headers)
    assert resp.status_code == 403


def test_delete_member_removes_related_rows(app, foreign_keys, client, admin_headers,
                                           member_headers, members):
    booking = client.post("/api/bookings", json={
        "date": "2024-01-02", "time": "18:00", "court": "C1",
    }, headers=member_headers).get_json()
    client.post("/api/joiningFees", json={
        "member_id": members[0], "amount": 100, "date": "2024-01-01",
    }, headers=admin_headers)
    client.post("/api/expenses", json={
        "date": "2024-01-01", "category": "other", "description": "Balls",
        "amount": 30, "selected_members": members,
    }, headers=admin_headers)
    client.post("/api/attendance", json={
        "date": "2024-01-01", "member_id": members[0], "is_present": True,
    }, headers=admin_headers)

    resp = client.delete(f"/api/members/{members[0]}", headers=admin_headers)
    assert resp.status_code == 200

    with app.app_context():
        assert db.session.get(Member, members[0]) is None
        assert ExpenseShare.query.filter_by(member_id=members[0]).count() == 0
        assert User.query.filter_by(email="bala@test.local").first() is None
        # The booking stays on the calendar without an owner
        assert db.session.get(Booking, booking["id"]).booked_by is None

    # The deleted login can no longer use its token
    assert client.get("/api/auth/me", headers=member_headers).status_code == 401


def test_member_who_paid_an_expense_cannot_be_deleted(app, foreign_keys, client,
                                                     admin_headers, members):
    client.post("/api/expenses", json={
        "date": "2024-01-01", "category": "other", "description": "Balls",
        "amount": 30, "paid_by": members[1], "selected_members": members,
    }, headers=admin_headers)

    resp = client.delete(f"/api/members/{members[1]}", headers=admin_headers)
    assert resp.status_code == 400

    with app.app_context():
        assert db.session.get(Member, members[1]) is not None


def test_update_does_not_accept_password(client, admin_headers, members):
    resp = client.put(f"/api/members/{members[1]}", json={
        "name": "Chitra", "password": "new-secret",
    }, headers=admin_headers)
    assert resp.status_code == 400
    assert "password" in resp.get_json()["error"]
