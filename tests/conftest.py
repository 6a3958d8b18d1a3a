"""Shared test fixtures."""
import pytest

from app import create_app
from booking import build_orchestrator
from config import TestConfig
from models import db
from utils.seed import ensure_admin

DAY = "2024-06-01"
ADMIN_EMAIL = "admin@lumina.com"
ADMIN_PASSWORD = "admin-pass-123"


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def file_app(tmp_path):
    """App on a file-backed SQLite database, so worker threads get their own connections."""
    class FileConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'clinic.db'}"

    app = create_app(FileConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def engine(request):
    """A booking orchestrator on each store backend."""
    if request.param == "memory":
        yield build_orchestrator("memory", default_hero_image_url="https://img.test/hero.jpg")
        return

    app = create_app(TestConfig)
    with app.app_context():
        yield app.extensions["booking"]


@pytest.fixture
def memory_engine():
    return build_orchestrator("memory")


@pytest.fixture
def make_service():
    def _create(engine, **overrides):
        fields = {"title": "Clareamento a Laser", "price": "800.00", "duration_min": 60}
        fields.update(overrides)
        return engine.services.create(fields)
    return _create


@pytest.fixture
def make_professional():
    def _create(engine, **overrides):
        fields = {"name": "Dr. Roberto Silva", "specialty": "Implantodontia"}
        fields.update(overrides)
        return engine.professionals.create(fields)
    return _create


@pytest.fixture
def booking_payload(make_service, make_professional):
    """Create a service and a professional on the engine and return a valid booking request."""
    def _create(engine, time="10:00", day=DAY, **overrides):
        service = make_service(engine)
        professional = make_professional(engine)
        payload = {
            "service_id": service.id,
            "professional_id": professional.id,
            "date": day,
            "time": time,
            "client_name": "Fernanda Lima",
            "client_phone": "(82) 99888-7766",
        }
        payload.update(overrides)
        return payload
    return _create


@pytest.fixture
def admin_client(app, client):
    """Logged-in test client; ``client.csrf`` holds the header to send on writes."""
    ensure_admin(ADMIN_EMAIL, ADMIN_PASSWORD)
    resp = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    client.csrf = {"X-CSRF-Token": client.get_cookie("csrf_token").value}
    return client
