"""
JWT token issuance.

Tokens are signed with a shared secret (HS256 by default) and carry:
- sub: the authenticated username
- the claims passed by the caller (the role claim)
- iat / exp: issue and expiry time, as Unix timestamps
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Protocol
import jwt

class TokenIssuer(Protocol):
    def issue(self, subject: str, claims: Dict[str, Any]) -> str: ...

class JWTTokenIssuer:
    """Signs access tokens with PyJWT."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 30):
        if not secret_key:
            raise ValueError("JWTTokenIssuer requires a non-empty secret key")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, subject: str, claims: Dict[str, Any]) -> str:
        """
        Create a signed access token.

        Args:
            subject: Value of the sub claim
            claims: Extra claims to embed

        Returns:
            Encoded JWT token string
        """
        now = datetime.now(timezone.utc)
        to_encode = dict(claims)
        to_encode.update({
            "sub": subject,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        })
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)
