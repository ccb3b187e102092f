import jwt
import pytest
from httpx import AsyncClient, ASGITransport

from authservice.base_microservice import create_engine, create_session_factory, init_models
from authservice.auth.jwt import JWTTokenIssuer
from authservice.auth.models import BcryptPasswordHasher
from authservice.auth.store import InMemoryCredentialStore, SQLAlchemyCredentialStore
from authservice.auth.users import AuthService
from authservice.main import create_app

TEST_SECRET = "test-secret-key-with-at-least-32-bytes"

@pytest.fixture
def hasher():
    # Minimum cost keeps the suite fast
    return BcryptPasswordHasher(rounds=4)

@pytest.fixture
def issuer():
    return JWTTokenIssuer(TEST_SECRET, expire_minutes=30)

@pytest.fixture
def decode_token():
    def decode(token):
        return jwt.decode(token, TEST_SECRET, algorithms=["HS256"])
    return decode

@pytest.fixture
def store():
    return InMemoryCredentialStore()

@pytest.fixture
def auth_service(store, hasher, issuer):
    return AuthService(store=store, hasher=hasher, issuer=issuer)

@pytest.fixture
def app(auth_service):
    return create_app(auth_service=auth_service)

@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://test", transport=transport) as ac:
        yield ac

@pytest.fixture
async def engine(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'users.db'}")
    await init_models(engine)
    yield engine
    await engine.dispose()

@pytest.fixture
def sql_store(engine):
    return SQLAlchemyCredentialStore(create_session_factory(engine))
