def _book(client, headers, **overrides):
    body = {"date": "2024-07-01", "time": "18:00", "court": "Court 1", "players": 4}
    body.update(overrides)
    return client.post("/api/bookings", json=body, headers=headers)


def test_create_booking(client, member_headers, members):
    resp = _book(client, member_headers)
    assert resp.status_code == 201
    booking = resp.get_json()
    assert booking["status"] == "booked"
    assert booking["booked_by"]["id"] == members[0]
    assert booking["players"] == 4


def test_slot_conflict(client, admin_headers, member_headers):
    assert _book(client, member_headers).status_code == 201

    resp = _book(client, admin_headers)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "This time slot is already booked"

    # A different court at the same time is free
    assert _book(client, admin_headers, court="Court 2").status_code == 201


def test_cancelled_slot_can_be_rebooked(client, admin_headers, member_headers):
    booking = _book(client, member_headers).get_json()
    resp = client.put(f"/api/bookings/{booking['id']}", json={"status": "cancelled"},
                      headers=member_headers)
    assert resp.status_code == 200

    assert _book(client, admin_headers).status_code == 201


def test_update_into_taken_slot_rejected(client, admin_headers, member_headers):
    _book(client, admin_headers)
    booking = _book(client, member_headers, time="19:00").get_json()

    resp = client.put(f"/api/bookings/{booking['id']}", json={"time": "18:00"},
                      headers=member_headers)
    assert resp.status_code == 400


def test_members_see_only_their_bookings(client, admin_headers, member_headers):
    _book(client, admin_headers)
    _book(client, member_headers, time="20:00")

    mine = client.get("/api/bookings", headers=member_headers).get_json()
    assert [b["time"] for b in mine] == ["20:00"]

    everything = client.get("/api/bookings", headers=admin_headers).get_json()
    assert len(everything) == 2


def test_member_cannot_touch_other_bookings(client, admin_headers, member_headers):
    booking = _book(client, admin_headers).get_json()

    assert client.get(f"/api/bookings/{booking['id']}", headers=member_headers).status_code == 403
    assert client.put(f"/api/bookings/{booking['id']}", json={"players": 2},
                      headers=member_headers).status_code == 403
    assert client.delete(f"/api/bookings/{booking['id']}", headers=member_headers).status_code == 403

    assert client.delete(f"/api/bookings/{booking['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/bookings/{booking['id']}", headers=admin_headers).status_code == 404


def test_filter_by_date(client, admin_headers):
    _book(client, admin_headers, date="2024-07-01")
    _book(client, admin_headers, date="2024-07-02")

    resp = client.get("/api/bookings?date=2024-07-02", headers=admin_headers)
    assert [b["date"] for b in resp.get_json()] == ["2024-07-02"]

    assert client.get("/api/bookings?date=July", headers=admin_headers).status_code == 400
