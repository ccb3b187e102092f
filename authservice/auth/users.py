"""
User authentication service.

This module provides functionality for:
- User registration
- User authentication and token issuance

Expected failures are returned as an AuthResult carrying an AuthErrorKind
rather than raised, so the request boundary can map them uniformly.
"""
import asyncio
from enum import Enum
from typing import Optional
from pydantic import BaseModel
from authservice.base_microservice import BaseMicroservice
from authservice.auth.models import User, PasswordHasher, BCRYPT_MAX_PASSWORD_BYTES
from authservice.auth.store import CredentialStore
from authservice.auth.jwt import TokenIssuer

ROLE_PREFIX = "ROLE_"

USER_NOT_FOUND = "Invalid credentials: user not found."
WRONG_PASSWORD = "Invalid credentials: wrong password."
USER_EXISTS = "User already exists."
SERVICE_UNAVAILABLE = "Authentication service unavailable."

class AuthErrorKind(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    DUPLICATE_USER = "duplicate_user"
    INVALID_INPUT = "invalid_input"
    DEPENDENCY_FAILURE = "dependency_failure"

class AuthResult(BaseModel):
    """Outcome of an auth operation."""
    ok: bool
    value: Optional[str] = None
    error: Optional[AuthErrorKind] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, value: Optional[str] = None) -> "AuthResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: AuthErrorKind, message: str) -> "AuthResult":
        return cls(ok=False, error=error, message=message)

# Pydantic models for request bodies
class UserCreate(BaseModel):
    """Model for user registration."""
    username: str
    password: str
    role: str

def validate_registration(username: str, password: str, role: str) -> Optional[str]:
    """
    Return an error message if the registration data is unacceptable, None otherwise.
    """
    if not username.strip():
        return "Username must not be blank."
    if not password:
        return "Password must not be empty."
    if len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        return f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes."
    if not role.strip():
        return "Role must not be blank."
    return None

class AuthService(BaseMicroservice):
    """
    Service for credential authentication and user registration.
    """
    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
    ):
        super().__init__()
        self.store = store
        self.hasher = hasher
        self.issuer = issuer

    async def authenticate(self, username: str, password: str) -> AuthResult:
        """
        Authenticate a user and issue an access token.

        Args:
            username: Login name
            password: Plaintext password

        Returns:
            AuthResult whose value is the signed token on success
        """
        try:
            user = await self.store.find_by_username(username)
            if user is None:
                return AuthResult.failure(AuthErrorKind.INVALID_CREDENTIALS, USER_NOT_FOUND)

            # Hashing runs in a worker thread
            if not await asyncio.to_thread(self.hasher.matches, password, user.hashed_password):
                return AuthResult.failure(AuthErrorKind.INVALID_CREDENTIALS, WRONG_PASSWORD)

            token = self.issuer.issue(user.username, {"role": ROLE_PREFIX + user.role})
        except Exception as e:
            self.log_error(e, context="User authentication")
            return AuthResult.failure(AuthErrorKind.DEPENDENCY_FAILURE, SERVICE_UNAVAILABLE)

        return AuthResult.success(token)

    async def register(self, username: str, password: str, role: str) -> AuthResult:
        """
        Register a new user.

        Args:
            username: Unique login name
            password: Plaintext password, stored only as a digest
            role: Role name, stored upper-cased

        Returns:
            AuthResult, ok when the user was persisted
        """
        problem = validate_registration(username, password, role)
        if problem is not None:
            return AuthResult.failure(AuthErrorKind.INVALID_INPUT, problem)

        try:
            if await self.store.find_by_username(username) is not None:
                return AuthResult.failure(AuthErrorKind.DUPLICATE_USER, USER_EXISTS)

            hashed_password = await asyncio.to_thread(self.hasher.hash, password)
            new_user = User(
                username=username,
                hashed_password=hashed_password,
                role=role.upper(),
            )

            # The store rejects the insert if another request won the race
            if not await self.store.save(new_user):
                return AuthResult.failure(AuthErrorKind.DUPLICATE_USER, USER_EXISTS)
        except Exception as e:
            self.log_error(e, context="User registration")
            return AuthResult.failure(AuthErrorKind.DEPENDENCY_FAILURE, SERVICE_UNAVAILABLE)

        return AuthResult.success()
