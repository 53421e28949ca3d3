import pytest

from app import create_app
from config import TestConfig
from models import db, Member
from services.auth_service import ensure_admin_account, create_user


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        ensure_admin_account(app.config["ADMIN_EMAIL"], app.config["ADMIN_PASSWORD"])

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def foreign_keys(app):
    """Make SQLite enforce foreign keys the way Postgres does."""
    with app.app_context():
        # The in-memory engine keeps a single connection, so the pragma sticks
        with db.engine.connect() as conn:
            conn.exec_driver_sql("PRAGMA foreign_keys=ON")


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, email, password):
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(app, client):
    data = login(client, app.config["ADMIN_EMAIL"], app.config["ADMIN_PASSWORD"])
    return bearer(data["access_token"])


@pytest.fixture
def admin_member_id(app):
    with app.app_context():
        return Member.query.filter_by(role="admin").first().id


@pytest.fixture
def members(app):
    """Ids of three regular members: Bala, Chitra, Dev."""
    with app.app_context():
        created = [
            Member(name=name, email=f"{name.lower()}@test.local", phone="9000000000")
            for name in ("Bala", "Chitra", "Dev")
        ]
        db.session.add_all(created)
        db.session.commit()
        return [m.id for m in created]


@pytest.fixture
def member_headers(app, client, members):
    """Bearer headers for Bala, who gets a member login."""
    with app.app_context():
        member = db.session.get(Member, members[0])
        member.user = create_user(member.email, "member-pass", role="member")
        db.session.commit()

    data = login(client, "bala@test.local", "member-pass")
    return bearer(data["access_token"])


@pytest.fixture
def balance_of(app):
    def _balance(member_id):
        with app.app_context():
            return db.session.get(Member, member_id).balance
    return _balance
