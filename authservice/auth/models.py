"""
Authentication models.

This module defines:
- The SQLAlchemy User model
- The password hashing contract and its bcrypt implementation
"""
from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime
from typing import Protocol
import bcrypt
from authservice.base_microservice import Base

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72

class User(Base):
    """User model for authentication."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"User(username={self.username!r}, role={self.role!r})"

class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def matches(self, password: str, hashed_password: str) -> bool: ...

class BcryptPasswordHasher:
    """Salted bcrypt hashing of user passwords."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Generate password hash using bcrypt."""
        return bcrypt.hashpw(
            password.encode('utf-8'),
            bcrypt.gensalt(rounds=self.rounds)
        ).decode('utf-8')

    def matches(self, password: str, hashed_password: str) -> bool:
        """Check if provided password matches the stored hash."""
        encoded = password.encode('utf-8')
        if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(encoded, hashed_password.encode('utf-8'))
