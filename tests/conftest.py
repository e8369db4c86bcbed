import os
import tempfile

# point the app at a throwaway database before db.py reads the environment
_DB_DIR = tempfile.mkdtemp(prefix="arithmetic-trainer-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_DB_DIR, "test.db")

import models  # noqa: E402,F401
from db import Base, engine  # noqa: E402

Base.metadata.create_all(engine)
