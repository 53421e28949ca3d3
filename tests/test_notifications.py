def _expense(client, headers, members):
    return client.post("/api/expenses", json={
        "date": "2024-09-01", "category": "refreshments", "description": "Juice",
        "amount": 60, "selected_members": members,
    }, headers=headers).get_json()


def test_members_with_login_are_notified(client, admin_headers, member_headers, members):
    _expense(client, admin_headers, members)

    resp = client.get("/api/notifications", headers=member_headers)
    body = resp.get_json()
    assert body["unread_count"] == 1
    assert body["notifications"][0]["type"] == "expense_added"
    assert body["notifications"][0]["data"]["amount"] == 20

    # Admin is the payer and has no share
    assert client.get("/api/notifications/unread-count", headers=admin_headers).get_json()["count"] == 0


def test_payment_notification(client, admin_headers, member_headers, members):
    expense = _expense(client, admin_headers, members)
    client.post("/api/payments/mark-paid", json={
        "expense_id": expense["id"], "member_id": members[0],
    }, headers=admin_headers)

    types = [n["type"] for n in client.get("/api/notifications", headers=member_headers)
             .get_json()["notifications"]]
    assert sorted(types) == ["expense_added", "payment_approved"]


def test_mark_read_and_read_all(client, admin_headers, member_headers, members):
    _expense(client, admin_headers, members)
    _expense(client, admin_headers, members)

    notifications = client.get("/api/notifications", headers=member_headers).get_json()["notifications"]
    first = notifications[0]["id"]

    resp = client.patch(f"/api/notifications/{first}/read", headers=member_headers)
    assert resp.status_code == 200
    assert resp.get_json()["notification"]["read"] is True
    assert client.get("/api/notifications/unread-count", headers=member_headers).get_json()["count"] == 1

    client.patch("/api/notifications/read-all", headers=member_headers)
    assert client.get("/api/notifications/unread-count", headers=member_headers).get_json()["count"] == 0


def test_cannot_touch_other_users_notifications(client, admin_headers, member_headers, members):
    _expense(client, admin_headers, members)
    notification_id = client.get("/api/notifications", headers=member_headers) \
        .get_json()["notifications"][0]["id"]

    assert client.patch(f"/api/notifications/{notification_id}/read",
                        headers=admin_headers).status_code == 403
    assert client.delete(f"/api/notifications/{notification_id}",
                         headers=admin_headers).status_code == 403

    assert client.delete(f"/api/notifications/{notification_id}",
                         headers=member_headers).status_code == 200
    assert client.delete(f"/api/notifications/{notification_id}",
                         headers=member_headers).status_code == 404
