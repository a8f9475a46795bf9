"""Issuing and verifying the bearer tokens handed out at login."""
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict, Optional
import logging

from jose import ExpiredSignatureError, JOSEError, JWTError, jwt

from todo_api.config import get_settings
from todo_api.errors import InvalidTokenError, TokenExpiredError, TokenVerificationError
from todo_api.schemas.auth import TokenPayload

logger = logging.getLogger(__name__)


class TokenService:
    """HS256 JWTs carrying the user id (``sub``) and email."""

    def __init__(self, secret: str, algorithm: str = "HS256", expires_minutes: int = 60 * 24):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_minutes = expires_minutes

    def issue_token(self, user_id: str, email: str, expires_minutes: Optional[int] = None) -> str:
        """
        Create a signed token for a user.

        Args:
            user_id: Stored as the ``sub`` claim
            email: Stored as the ``email`` claim
            expires_minutes: Overrides the configured lifetime

        Returns:
            Encoded JWT string
        """
        issued_at = datetime.now(timezone.utc)
        lifetime = self.expires_minutes if expires_minutes is None else expires_minutes
        payload = {
            "sub": user_id,
            "email": email,
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=lifetime),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify_token(self, token: str) -> TokenPayload:
        """
        Verify signature and expiry, then return the claims.

        Raises:
            TokenExpiredError: The token was valid but has expired
            InvalidTokenError: Malformed, tampered, or missing ``sub``
            TokenVerificationError: Any other verification failure
        """
        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError as e:
            logger.debug(f"Rejected token: {e}")
            raise InvalidTokenError()
        except JOSEError as e:
            logger.warning(f"Token verification failed: {e}")
            raise TokenVerificationError()

        user_id = claims.get("sub")
        if not user_id:
            raise InvalidTokenError()

        return TokenPayload(
            user_id=user_id,
            email=claims.get("email"),
            issued_at=claims.get("iat"),
            expires_at=claims.get("exp"),
        )

    def decode_token(self, token: str) -> Optional[Dict[str, Any]]:
        """Read the claims without verifying them; for debugging only."""
        try:
            return jwt.get_unverified_claims(token)
        except JOSEError:
            return None


@lru_cache()
def get_token_service() -> TokenService:
    """Dependency returning the token service built from settings."""
    settings = get_settings()
    return TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_minutes=settings.jwt_expires_minutes,
    )
