import os
import tempfile
from decimal import Decimal
from pathlib import Path

import pytest

# Keep the application away from the user's real data folder
os.environ.setdefault("LANGSCHOOL_HOME", tempfile.mkdtemp(prefix="langschool-tests-"))
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from langschool.database import get_db, init_db  # noqa: E402
from langschool.models.course import Course  # noqa: E402
from langschool.models.student import Student  # noqa: E402
from langschool.pdf import pdf_path_for  # noqa: E402
from langschool.services import registry  # noqa: E402


class FakeRenderer:
    """Writes a placeholder file instead of a real PDF; can be told to fail."""

    def __init__(self, base_dir):
        self.base_dir = Path(base_dir)
        self.rendered = []
        self.fail_ids = set()

    def path_for(self, invoice):
        return pdf_path_for(self.base_dir, invoice.year, invoice.month, invoice.number)

    def render(self, invoice):
        if invoice.id in self.fail_ids:
            raise OSError("disk full")
        path = self.path_for(invoice)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(f"%PDF fake {invoice.number}".encode())
        self.rendered.append(invoice.number)
        return path


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def renderer(tmp_path):
    return FakeRenderer(tmp_path / "invoices")


@pytest.fixture
def client(session_factory, renderer):
    from langschool.routes.invoices_fastapi import get_renderer
    from main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_renderer] = lambda: renderer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# --- Factories ---

@pytest.fixture
def make_student(db):
    def _make(full_name="Anna Petrova", is_active=True):
        student = Student(full_name=full_name, is_active=is_active)
        db.add(student)
        db.commit()
        db.refresh(student)
        return student
    return _make


@pytest.fixture
def make_course(db):
    def _make(name="English B1", type="group", lesson_price="10", subscription_price="0", schedule_days=""):
        course = Course(
            name=name,
            type=type,
            lesson_price=Decimal(lesson_price),
            subscription_price=Decimal(subscription_price),
            schedule_days=schedule_days,
        )
        db.add(course)
        db.commit()
        db.refresh(course)
        return course
    return _make


@pytest.fixture
def make_enrollment(db):
    def _make(student, course, billing_mode="per_lesson", discount_pct=0, start_date=None, end_date=None):
        return registry.create_enrollment(
            db,
            student_id=student.id,
            course_id=course.id,
            billing_mode=billing_mode,
            discount_pct=discount_pct,
            start_date=start_date,
            end_date=end_date,
        )
    return _make
