import logging
import re

import click
from flask import Flask, jsonify
from flask_cors import CORS
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from config import Config
from models import db
from utils.helpers import first_error_message

# --------------------------------------------------
# APP SETUP
# --------------------------------------------------


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.logger.setLevel(app.config["LOG_LEVEL"])

    db.init_app(app)

    origins = [app.config["FRONTEND_URL"], *app.config["CORS_ORIGINS"]]
    origins.append(re.compile(app.config["CORS_ORIGIN_REGEX"]))
    CORS(app, supports_credentials=True, resources={r"/api/*": {"origins": origins}})

    register_blueprints(app)
    register_error_handlers(app)
    register_commands(app)

    @app.route("/health")
    def health_check():
        return jsonify({"status": "ok", "message": "Club manager API is running"})

    return app


def register_blueprints(app):
    from routes.auth import auth_bp
    from routes.members import members_bp
    from routes.bookings import bookings_bp
    from routes.attendance import attendance_bp
    from routes.expenses import expenses_bp
    from routes.payments import payments_bp
    from routes.reports import reports_bp
    from routes.notifications import notifications_bp
    from routes.equipment import equipment_bp
    from routes.joining_fees import joining_fees_bp
    from routes.public import public_bp

    for bp in (
        auth_bp, members_bp, bookings_bp, attendance_bp, expenses_bp,
        payments_bp, reports_bp, notifications_bp, equipment_bp,
        joining_fees_bp, public_bp,
    ):
        app.register_blueprint(bp)


# --------------------------------------------------
# ERRORS
# --------------------------------------------------

def register_error_handlers(app):
    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return jsonify({"error": first_error_message(e)}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        db.session.rollback()
        app.logger.exception("Unhandled error: %s", e)
        return jsonify({"error": "Internal server error"}), 500


# --------------------------------------------------
# CLI
# --------------------------------------------------

def register_commands(app):
    @app.cli.command("init-db")
    def init_db_command():
        """Create all tables (development only; use alembic elsewhere)."""
        db.create_all()
        click.echo("Database tables created")

    @app.cli.command("seed-admin")
    def seed_admin_command():
        """Create or repair the administrator account."""
        from services.auth_service import ensure_admin_account

        user = ensure_admin_account(app.config["ADMIN_EMAIL"], app.config["ADMIN_PASSWORD"])
        click.echo(f"Admin account ready: {user.email}")

    @app.cli.command("cleanup-orphan-shares")
    @click.option("--dry-run", is_flag=True, help="Report only, write nothing.")
    def cleanup_orphan_shares_command(dry_run):
        """Delete expense shares whose expense is gone and rebalance members."""
        from services.ledger_service import cleanup_orphan_shares

        result = cleanup_orphan_shares(dry_run=dry_run)
        click.echo(f"Found orphan shares: {result['orphan_shares']}")
        click.echo(f"Unpaid orphan shares affecting balances: {result['unpaid_orphans']}")
        click.echo(f"Members to rebalance: {result['members_rebalanced']}")
        if dry_run:
            click.echo("Dry run mode enabled. No database writes were made.")


if __name__ == "__main__":
    create_app().run(debug=True)
