from models import db, Attendance


def _rate(client, headers, member_id):
    return client.get(f"/api/members/{member_id}", headers=headers).get_json()["attendance_rate"]


def test_mark_attendance_upserts_single_row(app, client, admin_headers, members):
    body = {"date": "2024-08-01", "memberId": members[1], "isPresent": True}
    assert client.post("/api/attendance", json=body, headers=admin_headers).status_code == 201

    body["isPresent"] = False
    resp = client.post("/api/attendance", json=body, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.get_json()["is_present"] is False

    with app.app_context():
        assert Attendance.query.filter_by(member_id=members[1]).count() == 1


def test_attendance_rate_is_recomputed(client, admin_headers, members):
    days = [("2024-08-01", True), ("2024-08-02", True), ("2024-08-03", False), ("2024-08-04", True)]
    for day, present in days:
        client.post("/api/attendance", json={
            "date": day, "member_id": members[2], "is_present": present,
        }, headers=admin_headers)

    assert _rate(client, admin_headers, members[2]) == 75


def test_member_marks_only_themselves(client, admin_headers, member_headers, members):
    resp = client.post("/api/attendance", json={
        "date": "2024-08-01", "member_id": members[2], "is_present": True,
    }, headers=member_headers)
    assert resp.status_code == 201
    assert resp.get_json()["member_id"] == members[0]


def test_admin_must_name_member(client, admin_headers):
    resp = client.post("/api/attendance", json={"date": "2024-08-01", "is_present": True},
                       headers=admin_headers)
    assert resp.status_code == 400


def test_unknown_member_is_404(client, admin_headers):
    resp = client.post("/api/attendance", json={
        "date": "2024-08-01", "member_id": 4242, "is_present": True,
    }, headers=admin_headers)
    assert resp.status_code == 404


def test_bulk_marking(client, admin_headers, members):
    payload = [
        {"date": "2024-08-01", "member_id": member_id, "is_present": member_id != members[2]}
        for member_id in members
    ]
    resp = client.post("/api/attendance", json=payload, headers=admin_headers)
    assert resp.status_code == 201
    assert len(resp.get_json()) == 3

    day = client.get("/api/attendance/date/2024-08-01", headers=admin_headers).get_json()
    present = {r["member_id"] for r in day if r["is_present"]}
    assert present == {members[0], members[1]}


def test_bulk_marking_is_admin_only(client, member_headers, members):
    resp = client.post("/api/attendance", json=[
        {"date": "2024-08-01", "member_id": members[0], "is_present": True},
    ], headers=member_headers)
    assert resp.status_code == 403


def test_members_list_only_their_attendance(client, admin_headers, member_headers, members):
    client.post("/api/attendance", json=[
        {"date": "2024-08-01", "member_id": member_id, "is_present": True}
        for member_id in members
    ], headers=admin_headers)

    mine = client.get("/api/attendance", headers=member_headers).get_json()
    assert [r["member_id"] for r in mine] == [members[0]]

    everyone = client.get("/api/attendance?date=2024-08-01", headers=admin_headers).get_json()
    assert len(everyone) == 3
