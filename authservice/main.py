from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from contextlib import asynccontextmanager
from typing import Optional

from authservice.base_microservice import BaseMicroservice, create_engine, create_session_factory, init_models
from authservice.config import AuthSettings
from authservice.auth.jwt import JWTTokenIssuer
from authservice.auth.models import BcryptPasswordHasher
from authservice.auth.router import router as auth_router
from authservice.auth.store import SQLAlchemyCredentialStore
from authservice.auth.users import AuthService

# Create shared base microservice instance
base_service = BaseMicroservice()

def build_auth_service(settings: AuthSettings, session_factory) -> AuthService:
    """Construct the AuthService and its collaborators from settings."""
    return AuthService(
        store=SQLAlchemyCredentialStore(session_factory),
        hasher=BcryptPasswordHasher(rounds=settings.bcrypt_rounds),
        issuer=JWTTokenIssuer(
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
            expire_minutes=settings.access_token_expire_minutes,
        ),
    )

def format_validation_error(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"][1:]) or "body"
        messages.append(f"{field}: {error['msg']}")
    return "; ".join(messages)

def create_app(
    auth_service: Optional[AuthService] = None,
    settings: Optional[AuthSettings] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    When no auth_service is given, one backed by the configured database is
    constructed and the users table is created at startup.
    """
    settings = settings or AuthSettings()
    engine = None
    if auth_service is None:
        engine = create_engine(settings.database_url)
        auth_service = build_auth_service(settings, create_session_factory(engine))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        base_service.log_event("service.startup", {"service": "auth"})
        if engine is not None:
            await init_models(engine)
        yield
        if engine is not None:
            await engine.dispose()
        base_service.log_event("service.shutdown", {"service": "auth"})

    app = FastAPI(
        title="Auth API",
        description="Username/password authentication and access token issuance",
        lifespan=lifespan,
    )
    app.state.auth_service = auth_service

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, replace with specific origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return PlainTextResponse(format_validation_error(exc), status_code=status.HTTP_400_BAD_REQUEST)

    app.include_router(auth_router, prefix="/auth", tags=["auth"])

    @app.get("/health", tags=["health"])
    async def health_check():
        """Overall system health check."""
        return base_service.mcp_response(
            message="System health",
            data={"status": "ok", "services": {"auth": "online"}},
        )

    return app

app = create_app()
