"""JWT implementation of TokenIssuer (HS256, python-jose)."""

import os
import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

logger = logging.getLogger(__name__)

# JWT Configuration
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY environment variable is required. "
        "Generate a secure key with: openssl rand -hex 32"
    )
JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_DAYS = int(os.getenv("JWT_EXPIRATION_DAYS", "7"))


class JwtTokenIssuer:
    """Mints and verifies self-contained bearer tokens.

    Tokens carry ``sub`` (opaque user id), ``iat`` and ``exp``. Nothing is
    stored server-side, so expiry is the only way a token stops working on
    its own.
    """

    def __init__(
        self,
        secret_key: str = JWT_SECRET_KEY,
        expires_in: timedelta = timedelta(days=JWT_EXPIRATION_DAYS),
        algorithm: str = JWT_ALGORITHM,
    ):
        self.secret_key = secret_key
        self.expires_in = expires_in
        self.algorithm = algorithm

    def issue(self, user_id: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iat": now,
            "exp": now + self.expires_in,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> str | None:
        """Return the subject, or None for a malformed, forged or expired token."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug(f"JWT verification failed: {e}")
            return None

        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            logger.debug("JWT verification failed: missing subject")
            return None
        return user_id
