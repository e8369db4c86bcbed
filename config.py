from __future__ import annotations

import os

# Length of one sitting of the arithmetic paper.
TEST_DURATION_SECONDS = int(os.getenv("TEST_DURATION_SECONDS", "1800"))

# Upper bound for every retry-until-valid loop in the generators.
MAX_GENERATION_ATTEMPTS = int(os.getenv("MAX_GENERATION_ATTEMPTS", "10000"))

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173",
    ).split(",")
    if o.strip()
]
