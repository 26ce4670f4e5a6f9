"""Shared base class for HTTP tests: fresh SQLite file per test, seeded with the default admin."""

import shutil
import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from labeldesk.core.config import get_settings
from labeldesk.core.database import create_sqlite_engine, get_db, init_db
from labeldesk.main import app
from labeldesk.models.user import User
from labeldesk.services.users import create_user, ensure_initial_admin


class ApiTestCase(unittest.TestCase):
    """TestClient against the real app with get_db overridden to a per-test database."""

    def setUp(self) -> None:
        self._tmpdir = tempfile.mkdtemp(prefix="labeldesk_api_")
        self.engine = create_sqlite_engine(str(Path(self._tmpdir) / "app.db"))
        init_db(self.engine)
        self.Session = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

        db = self.Session()
        try:
            ensure_initial_admin(db, get_settings())
        finally:
            db.close()

        def _get_test_db():
            session = self.Session()
            try:
                yield session
            finally:
                session.close()

        app.dependency_overrides[get_db] = _get_test_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.client.close()
        self.engine.dispose()
        shutil.rmtree(self._tmpdir, ignore_errors=True)

    def login(self, login: str = "admin", password: str = "123456"):
        return self.client.post("/api/auth/login", json={"login": login, "password": password})

    def add_user(self, login: str, password: str, role: str = "user") -> int:
        db = self.Session()
        try:
            return create_user(db, login, password, role=role).id
        finally:
            db.close()

    def count_users(self, login: str | None = None) -> int:
        db = self.Session()
        try:
            query = db.query(User)
            if login is not None:
                query = query.filter(User.login == login)
            return query.count()
        finally:
            db.close()
