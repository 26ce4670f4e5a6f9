"""Test environment: point settings at a throwaway SQLite file before any labeldesk import."""

import os
import tempfile

os.environ["APP_ENV"] = "dev"
os.environ["SQLITE_PATH"] = os.path.join(tempfile.mkdtemp(prefix="labeldesk_test_"), "app.db")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CATALOG_API_URL"] = "http://catalog.test/api/v1"
