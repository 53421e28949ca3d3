from models import db, Expense


def _buy(client, headers, member_ids, date, purchased, used=0, amount=300):
    resp = client.post("/api/equipment", json={
        "date": date,
        "itemName": "Shuttlecocks",
        "amount": amount,
        "quantityPurchased": purchased,
        "quantityUsed": used,
        "selectedMembers": member_ids,
    }, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def _used(app, expense_id):
    with app.app_context():
        return db.session.get(Expense, expense_id).quantity_used


def test_purchase_is_split_like_an_expense(client, admin_headers, members, balance_of):
    lot = _buy(client, admin_headers, members, "2024-01-01", purchased=12)

    assert lot["is_inventory"] is True
    assert lot["category"] == "equipment"
    assert lot["item_name"] == "Shuttlecocks"
    assert lot["quantity_purchased"] == 12
    assert lot["quantity_used"] == 0
    assert all(balance_of(m) == 100 for m in members)


def test_usage_cannot_exceed_purchased(client, admin_headers, members):
    lot = _buy(client, admin_headers, members, "2024-01-01", purchased=10)

    resp = client.patch(f"/api/equipment/{lot['id']}/usage",
                        json={"quantity_used": 11}, headers=admin_headers)
    assert resp.status_code == 400

    resp = client.patch(f"/api/equipment/{lot['id']}/usage",
                        json={"quantity_used": 10}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()["quantity_used"] == 10


def test_initial_usage_over_purchased_rejected(client, admin_headers, members):
    resp = client.post("/api/equipment", json={
        "date": "2024-01-01",
        "item_name": "Grips",
        "amount": 50,
        "quantity_purchased": 2,
        "quantity_used": 3,
        "selected_members": members,
    }, headers=admin_headers)
    assert resp.status_code == 400


def test_usage_on_regular_expense_is_404(client, admin_headers, members):
    expense = client.post("/api/expenses", json={
        "date": "2024-01-01", "category": "other", "description": "Water",
        "amount": 30, "selected_members": members,
    }, headers=admin_headers).get_json()

    resp = client.patch(f"/api/equipment/{expense['id']}/usage",
                        json={"quantity_used": 1}, headers=admin_headers)
    assert resp.status_code == 404


def test_court_expense_consumes_oldest_lots_first(app, client, admin_headers, members):
    old = _buy(client, admin_headers, members, "2024-01-01", purchased=10, used=8)
    new = _buy(client, admin_headers, members, "2024-02-01", purchased=12)

    resp = client.post("/api/expenses", json={
        "date": "2024-03-01",
        "category": "court",
        "description": "Saturday session",
        "court_booking_cost": 200,
        "per_shuttle_cost": 20,
        "shuttles_used": 5,
        "reduce_from_stock": True,
        "selected_members": members,
    }, headers=admin_headers)
    assert resp.status_code == 201
    expense = resp.get_json()
    assert expense["amount"] == 300
    assert expense["stock_consumed"] == 5

    assert _used(app, old["id"]) == 10
    assert _used(app, new["id"]) == 3


def test_stock_exhaustion_consumes_what_is_left(app, client, admin_headers, members):
    lot = _buy(client, admin_headers, members, "2024-01-01", purchased=4, used=1)

    resp = client.post("/api/expenses", json={
        "date": "2024-03-01",
        "category": "court",
        "description": "Long session",
        "shuttles_used": 10,
        "per_shuttle_cost": 10,
        "reduce_from_stock": True,
        "selected_members": members,
    }, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.get_json()["stock_consumed"] == 3
    assert _used(app, lot["id"]) == 4


def test_stock_untouched_without_flag(app, client, admin_headers, members):
    lot = _buy(client, admin_headers, members, "2024-01-01", purchased=4)
    client.post("/api/expenses", json={
        "date": "2024-03-01", "category": "court", "description": "Session",
        "shuttles_used": 2, "per_shuttle_cost": 10, "selected_members": members,
    }, headers=admin_headers)
    assert _used(app, lot["id"]) == 0


def test_stock_summary_and_delete(client, admin_headers, members, balance_of):
    first = _buy(client, admin_headers, members, "2024-01-01", purchased=10, used=4)
    _buy(client, admin_headers, members, "2024-02-01", purchased=6)

    stock = client.get("/api/equipment/stock", headers=admin_headers).get_json()
    assert stock == {
        "lots": 2,
        "quantity_purchased": 16,
        "quantity_used": 4,
        "quantity_remaining": 12,
    }

    resp = client.delete(f"/api/equipment/{first['id']}", headers=admin_headers)
    assert resp.status_code == 200
    assert len(client.get("/api/equipment", headers=admin_headers).get_json()) == 1
    assert all(balance_of(m) == 100 for m in members)
