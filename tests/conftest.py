"""Pytest configuration and shared fixtures."""

import io

import pytest
from werkzeug.datastructures import FileStorage

from app import create_app
from auth_utils import generate_jwt_token
from complaints.complaint_db import ComplaintDatabase
from complaints.errors import StoreUnavailable
from complaints.intake import ComplaintIntake
from complaints.option_store import OptionStore
from complaints.seeding import seed_default_options
from complaints.taxonomy import TaxonomyResolver
from services.attachment_service import AttachmentService


class UnavailableStore:
    """Option store whose every read fails, as when the database is down."""

    def __init__(self):
        self.calls = 0

    def list_options(self, option_type, parent_category=None):
        self.calls += 1
        raise StoreUnavailable()


@pytest.fixture
def unavailable_store() -> UnavailableStore:
    return UnavailableStore()


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "complaints.db")


@pytest.fixture
def option_store(db_path) -> OptionStore:
    """Option store seeded with the default taxonomy."""
    store = OptionStore(db_path)
    store.initialize()
    seed_default_options(store)
    return store


@pytest.fixture
def complaint_db(db_path) -> ComplaintDatabase:
    db = ComplaintDatabase(db_path)
    db.initialize()
    return db


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def attachments(upload_dir) -> AttachmentService:
    return AttachmentService(upload_dir=str(upload_dir))


@pytest.fixture
def resolver(option_store) -> TaxonomyResolver:
    return TaxonomyResolver(option_store)


@pytest.fixture
def intake(resolver, complaint_db, attachments) -> ComplaintIntake:
    return ComplaintIntake(resolver, complaint_db, attachments)


@pytest.fixture
def make_upload():
    """Build a Werkzeug FileStorage like the one Flask hands to a route."""

    def _make(filename="evidence.png", size=1024, content_type="image/png"):
        return FileStorage(stream=io.BytesIO(b"x" * size), filename=filename, content_type=content_type)

    return _make


@pytest.fixture
def valid_submission() -> dict:
    return {
        "email": "s@x.com",
        "department": "Computer Science",
        "category": "hostel",
        "subCategory": "electricity",
        "description": "no power",
    }


@pytest.fixture
def app(tmp_path, db_path, upload_dir):
    app = create_app({
        "TESTING": True,
        "COMPLAINTS_DB_PATH": db_path,
        "UPLOAD_DIR": str(upload_dir),
        "SEED_ON_STARTUP": True,
    })
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def staff_headers(app) -> dict:
    with app.app_context():
        token = generate_jwt_token(1, "warden@college.com", "faculty")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def student_headers(app) -> dict:
    with app.app_context():
        token = generate_jwt_token(7, "s@x.com", "student")
    return {"Authorization": f"Bearer {token}"}
