"""
Pytest configuration for tests.

Points the data directory and database at throwaway locations BEFORE any
post_limit imports, so a developer's ~/.post-limit config never leaks in.
"""
import os
import tempfile

os.environ["POST_LIMIT_DATA_DIR"] = tempfile.mkdtemp(prefix="post-limit-tests-")
os.environ["POST_LIMIT_DATABASE_URL"] = "sqlite:///:memory:"
os.environ.pop("POST_LIMIT_STORE_TIMEZONE", None)
os.environ.pop("POST_LIMIT_API_KEY", None)
