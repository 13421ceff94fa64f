"""
Anonymous session tokens.

Every caller gets a signed JWT identifying a session. The ``id`` claim is the
owner_id stored on mappings; nothing else in the app looks inside the token.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from shortlink_app.services.exceptions import Unauthorized


class SessionIssuer:
    """Issues and verifies session JWTs"""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl_days: int = 30):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = timedelta(days=ttl_days)

    @property
    def max_age_seconds(self) -> int:
        return int(self.ttl.total_seconds())

    def issue(self, owner_id: Optional[str] = None, session_type: str = "anonymous") -> str:
        """
        Sign a new session token.

        Args:
            owner_id: Session subject; a random UUID4 when omitted
            session_type: Value of the ``type`` claim

        Returns:
            Encoded JWT string
        """
        now = datetime.now(timezone.utc)
        payload = {
            "type": session_type,
            "id": owner_id or str(uuid.uuid4()),
            "iat": now,
            "exp": now + self.ttl,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict:
        """
        Decode and validate a token.

        Raises:
            Unauthorized: If the token is malformed, tampered with, expired,
                or carries no ``id`` claim
        """
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "id"]},
            )
        except jwt.ExpiredSignatureError:
            raise Unauthorized("Session token expired") from None
        except jwt.InvalidTokenError:
            raise Unauthorized("Invalid session token") from None

        if not isinstance(claims.get("id"), str) or not claims["id"]:
            raise Unauthorized("Invalid session token")
        return claims
