"""
Authentication router.

This module provides FastAPI router for authentication endpoints:
- POST /login: query or form parameters, returns the token as plain text
- POST /register: JSON body, returns a confirmation message
"""
from datetime import datetime, timezone
from typing import Dict
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import PlainTextResponse

from authservice.auth.users import AuthService, AuthErrorKind, AuthResult, UserCreate

REGISTERED_MESSAGE = "User registered successfully!"

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

STATUS_BY_ERROR: Dict[AuthErrorKind, int] = {
    AuthErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.DUPLICATE_USER: status.HTTP_400_BAD_REQUEST,
    AuthErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    AuthErrorKind.DEPENDENCY_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Create router
router = APIRouter(tags=["auth"])

def get_auth_service(request: Request) -> AuthService:
    """Dependency returning the AuthService wired into the application."""
    return request.app.state.auth_service

def failure_response(result: AuthResult) -> PlainTextResponse:
    return PlainTextResponse(result.message, status_code=STATUS_BY_ERROR[result.error])

async def read_login_params(request: Request) -> Dict[str, str]:
    """
    Collect username/password from the query string, falling back to form fields.
    """
    params = {key: request.query_params[key] for key in ("username", "password") if key in request.query_params}
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        for key in ("username", "password"):
            value = form.get(key)
            if key not in params and isinstance(value, str):
                params[key] = value
    return params

@router.get("/ping")
async def ping(auth: AuthService = Depends(get_auth_service)):
    """Liveness check for the auth service."""
    return auth.mcp_response(
        message="Auth service is alive",
        data={"timestamp": datetime.now(timezone.utc).isoformat()},
    )

@router.post("/login", response_class=PlainTextResponse)
async def login(request: Request, auth: AuthService = Depends(get_auth_service)):
    """
    Authenticate a user and return a signed access token.
    """
    params = await read_login_params(request)
    for key in ("username", "password"):
        if key not in params:
            return PlainTextResponse(
                f"Missing required parameter: {key}",
                status_code=status.HTTP_400_BAD_REQUEST,
            )

    result = await auth.authenticate(params["username"], params["password"])
    if not result.ok:
        auth.log_event("user.login.failed", {
            "username": params["username"],
            "reason": result.message
        })
        return failure_response(result)

    auth.log_event("user.login", {"username": params["username"]})
    return PlainTextResponse(result.value)

@router.post("/register", response_class=PlainTextResponse)
async def register_user(user_data: UserCreate, auth: AuthService = Depends(get_auth_service)):
    """
    Register a new user with a role.
    """
    result = await auth.register(user_data.username, user_data.password, user_data.role)
    if not result.ok:
        auth.log_event("user.register.failed", {
            "username": user_data.username,
            "reason": result.message
        })
        return failure_response(result)

    auth.log_event("user.registered", {
        "username": user_data.username,
        "role": user_data.role.upper()
    })
    return PlainTextResponse(REGISTERED_MESSAGE)
