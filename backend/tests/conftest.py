"""
Point the app at a throwaway SQLite file before anything imports app.db,
and create the schema once for the whole run.
"""
import os
import tempfile

_tmp = tempfile.mkdtemp(prefix="liftlog-tests-")
os.environ.setdefault("DB_URL", f"sqlite:///{os.path.join(_tmp, 'test.db')}")
os.environ.setdefault("DEFAULT_TIMEZONE", "UTC")

from app.db import Base, engine  # noqa: E402
from app import models  # noqa: E402,F401

Base.metadata.create_all(engine)
