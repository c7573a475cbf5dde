"""Test configuration shared by every test package under src/."""

import os

# Read at import time by the token issuer and the user service
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-unit-tests")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
