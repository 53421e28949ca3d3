from models import db, Expense
from services.expense_service import create_expense
from services.ledger_service import cleanup_orphan_shares


def _seed(client, admin_headers, members):
    client.post("/api/expenses", json={
        "date": "2024-05-01", "category": "court", "description": "Court hire",
        "court_booking_cost": 90, "selected_members": members,
    }, headers=admin_headers)
    client.post("/api/expenses", json={
        "date": "2024-05-10", "category": "refreshments", "description": "Snacks",
        "amount": 30, "selected_members": members,
    }, headers=admin_headers)
    client.post("/api/expenses", json={
        "date": "2024-06-10", "category": "other", "description": "Out of range",
        "amount": 300, "selected_members": members,
    }, headers=admin_headers)


def _report(client, headers, report_type, start="2024-05-01", end="2024-05-31"):
    return client.post("/api/reports/generate", json={
        "type": report_type, "period": {"start": start, "end": end},
    }, headers=headers)


def test_financial_report(client, admin_headers, members):
    _seed(client, admin_headers, members)

    resp = _report(client, admin_headers, "financial")
    assert resp.status_code == 201
    report = resp.get_json()
    assert report["type"] == "financial"
    assert report["period"] == {"start": "2024-05-01", "end": "2024-05-31"}
    assert report["data"]["total_expenses"] == 120
    assert report["data"]["expense_count"] == 2
    assert report["data"]["by_category"] == {"court": 90, "refreshments": 30}


def test_expense_report_by_status(client, admin_headers, members):
    _seed(client, admin_headers, members)
    summary = _report(client, admin_headers, "expense").get_json()["data"]["summary"]
    assert summary["total"] == 120
    assert summary["by_status"] == {"pending": 120}


def test_attendance_and_booking_reports(client, admin_headers, members):
    client.post("/api/attendance", json=[
        {"date": "2024-05-02", "member_id": members[0], "is_present": True},
        {"date": "2024-05-02", "member_id": members[1], "is_present": False},
    ], headers=admin_headers)
    client.post("/api/bookings", json={"date": "2024-05-03", "time": "18:00", "court": "Court 1"},
                headers=admin_headers)

    attendance = _report(client, admin_headers, "attendance").get_json()["data"]
    assert attendance["total_days"] == 31
    assert attendance["total_present"] == 1
    assert attendance["total_absent"] == 1

    booking = _report(client, admin_headers, "booking").get_json()["data"]
    assert booking["total_bookings"] == 1
    assert booking["by_court"] == {"Court 1": 1}


def test_report_validation(client, admin_headers, member_headers):
    assert _report(client, admin_headers, "payroll").status_code == 400
    assert _report(client, admin_headers, "financial", start="2024-06-01", end="2024-05-01").status_code == 400
    assert _report(client, member_headers, "financial").status_code == 403


def test_dashboard_summary(client, admin_headers, members):
    _seed(client, admin_headers, members)
    summary = client.get("/api/reports/summary", headers=admin_headers).get_json()
    assert summary["active_members"] == 4
    assert summary["total_outstanding"] == 420
    assert summary["pending_expenses"] == 3


def test_public_bills_need_no_auth(client, admin_headers, members):
    _seed(client, admin_headers, members)
    expense_id = client.get("/api/expenses", headers=admin_headers).get_json()[0]["id"]
    client.post("/api/payments/mark-paid", json={"expense_id": expense_id, "member_id": members[0]},
                headers=admin_headers)

    resp = client.get("/api/public/bills")
    assert resp.status_code == 200
    bills = resp.get_json()

    rows = {row["member_id"]: row for row in bills["members"]}
    # Only regular members are listed
    assert set(rows) == set(members)

    bala = rows[members[0]]
    assert bala["total_expense_share"] == 140
    assert bala["amount_paid"] == 100
    assert bala["outstanding_balance"] == 40
    assert [item["date"] for item in bala["breakdown"]] == ["2024-06-10", "2024-05-10", "2024-05-01"]
    assert bills["summary"]["total_share"] == 420


def test_cleanup_orphan_shares(app, members, balance_of):
    with app.app_context():
        from datetime import date

        expense = create_expense(
            category="other",
            description="Ghost",
            expense_date=date(2024, 1, 1),
            paid_by=members[0],
            amount=60,
            selected_member_ids=members,
        )
        # Remove the expense row behind the ORM's back, leaving its shares
        db.session.execute(db.delete(Expense).where(Expense.id == expense.id))
        db.session.commit()

        report = cleanup_orphan_shares(dry_run=True)
        assert report == {
            "orphan_shares": 2,
            "unpaid_orphans": 2,
            "members_rebalanced": 2,
            "dry_run": True,
        }

    assert balance_of(members[1]) == 20

    with app.app_context():
        cleanup_orphan_shares()
        assert cleanup_orphan_shares(dry_run=True)["orphan_shares"] == 0

    assert balance_of(members[1]) == 0
    assert balance_of(members[2]) == 0


def test_cleanup_command(app, members):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["cleanup-orphan-shares", "--dry-run"])
    assert result.exit_code == 0
    assert "Found orphan shares: 0" in result.output
    assert "Dry run mode enabled" in result.output
