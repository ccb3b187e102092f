"""
Credential stores.

A store persists users keyed by username. `save` is an atomic
insert-if-absent: it returns False instead of overwriting an existing user.
"""
import asyncio
from typing import Dict, Optional, Protocol
from sqlalchemy.exc import IntegrityError
from sqlalchemy.future import select
from sqlalchemy.orm import sessionmaker
from authservice.auth.models import User

class CredentialStore(Protocol):
    async def find_by_username(self, username: str) -> Optional[User]: ...
    async def save(self, user: User) -> bool: ...

class SQLAlchemyCredentialStore:
    """
    Store backed by the users table.

    Uniqueness is enforced by the UNIQUE constraint on users.username, so
    two concurrent saves of the same username cannot both succeed.
    """
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    async def find_by_username(self, username: str) -> Optional[User]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(User).where(User.username == username)
            )
            return result.scalar_one_or_none()

    async def save(self, user: User) -> bool:
        async with self.session_factory() as session:
            session.add(user)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                return False
            await session.refresh(user)
            return True

class InMemoryCredentialStore:
    """
    Test/dummy store. Keys by username.
    """
    def __init__(self):
        self._users: Dict[str, User] = {}
        self._lock = asyncio.Lock()

    async def find_by_username(self, username: str) -> Optional[User]:
        return self._users.get(username)

    async def save(self, user: User) -> bool:
        async with self._lock:
            if user.username in self._users:
                return False
            self._users[user.username] = user
            return True
