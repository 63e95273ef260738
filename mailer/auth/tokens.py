# mailer/auth/tokens.py
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import urlparse
from jose import jwt, JWTError, ExpiredSignatureError
from mailer.errors import ConfigurationError, UnauthorizedError
import logging

logger = logging.getLogger(__name__)

ALGORITHM = "HS512"  # HMAC with SHA-512


class TokenService:
    """Issue and validate magic link tokens.

    Tokens are stateless JWTs binding a subscriber e-mail (``sub``) to the
    host of the deployment that issued them (``iss``). There is no refresh,
    revocation or secret rotation; changing the secret invalidates every
    token issued so far.

    See https://datatracker.ietf.org/doc/html/rfc7519
    """

    def __init__(self, secret: Optional[str], expires_in: timedelta = timedelta(days=365)):
        self.secret = secret
        self.expires_in = expires_in

    def _require_secret(self) -> str:
        if not self.secret:
            raise ConfigurationError("JWT_SECRET not defined")
        return self.secret

    def create_token(self, email: str, issuer: str) -> str:
        """Create a token for ``email``; ``issuer`` is the deployment origin URL"""
        secret = self._require_secret()
        now = datetime.now(timezone.utc)
        claims = {
            "sub": email,
            "iss": urlparse(issuer).hostname,
            "iat": now,
            "exp": now + self.expires_in,
        }
        return jwt.encode(claims, secret, algorithm=ALGORITHM)

    def validate_token(self, token: str, issuer: str) -> str:
        """Verify a token issued by host ``issuer`` and return its subject.

        Raises:
            UnauthorizedError: 401 with reason expired-token, invalid-token or missing-subject
        """
        secret = self._require_secret()
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[ALGORITHM],
                issuer=issuer,
                options={"verify_aud": False}
            )
        except ExpiredSignatureError as e:
            raise UnauthorizedError("expired-token", details=str(e))
        except JWTError as e:
            raise UnauthorizedError("invalid-token", details=str(e))

        subject = payload.get("sub")
        if not subject:
            raise UnauthorizedError("missing-subject", details="Missing token subject")
        return subject
