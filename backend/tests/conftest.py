"""Shared pytest setup: point the app at a throwaway SQLite database."""

import os
import tempfile

# Must run before geotrace.config is imported
_db_dir = tempfile.mkdtemp(prefix="geotrace-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_db_dir, "geotrace.db")
os.environ.setdefault("ENVIRONMENT", "test")
