import logging

import click
import sqlalchemy as sa
from flask import Flask, request, g, jsonify

from config import Config
from routes import health_bp, auth_bp, admin_bp, booking_bp

from models import db
from models.admin_user import AdminUser
from flask_migrate import Migrate
from booking import BookingError, build_orchestrator
from booking.validation import parse_grid
from utils.seed import seed_demo_catalog, ensure_admin
from utils.auth_context import load_current_admin
from security.csrf import require_csrf

logger = logging.getLogger(__name__)

CSRF_EXEMPT_PATHS = {
    "/auth/login",
    "/health",
}


def create_app(config_object=Config, orchestrator=None):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(booking_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    # Booking engine: one set of stores per process, chosen here and nowhere else
    if orchestrator is None:
        orchestrator = build_orchestrator(
            backend=app.config.get("STORE_BACKEND", "sql"),
            grid=parse_grid(app.config["SLOT_GRID"]),
            default_hero_image_url=app.config.get("DEFAULT_HERO_IMAGE_URL", ""),
        )
    app.extensions["booking"] = orchestrator
    logger.info("booking engine ready (backend=%s)", app.config.get("STORE_BACKEND"))

    with app.app_context():
        if app.config.get("AUTO_CREATE_TABLES"):
            db.create_all()

        if not _schema_ready():
            logger.warning("database schema missing; run `flask db upgrade` before seeding")
        else:
            if app.config.get("SEED_DEMO_CATALOG"):
                seed_demo_catalog(orchestrator)
            if app.config.get("ADMIN_EMAIL") and app.config.get("ADMIN_PASSWORD"):
                ensure_admin(app.config["ADMIN_EMAIL"], app.config["ADMIN_PASSWORD"])

    @app.before_request
    def _load_admin():
        load_current_admin()

    @app.before_request
    def _csrf_protect():
        # Only protect state-changing requests made with an admin session
        if request.method in ("POST", "PUT", "PATCH", "DELETE"):
            if request.path in CSRF_EXEMPT_PATHS:
                return None
            if getattr(g, "admin", None) is not None:
                return require_csrf()
        return None

    @app.errorhandler(BookingError)
    def _booking_error(exc):
        body = {"error": exc.message}
        if exc.details:
            body["details"] = exc.details
        return jsonify(body), exc.status_code

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    return app

def _schema_ready() -> bool:
    return sa.inspect(db.engine).has_table(AdminUser.__tablename__)

#-------------------------

def register_cli(app):
    @app.cli.command("make-admin")
    @click.argument("email")
    @click.password_option()
    def make_admin(email, password):
        """Create an admin login (or reset its password)."""
        admin = ensure_admin(email, password)
        click.echo(f"{admin.email} can now sign in to the dashboard")

    @app.cli.command("seed-catalog")
    def seed_catalog():
        """Load the launch services and professionals into an empty catalog."""
        created = seed_demo_catalog(app.extensions["booking"])
        click.echo(f"Created {created} catalog records")

#-------------------------


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
