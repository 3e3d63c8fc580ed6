from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from tilenotes.api.v1.schemas.auth import (
    AuthResponse,
    OAuthProvider,
    OAuthUrlResponse,
    RefreshRequest,
    SignInRequest,
    SignUpRequest,
)
from tilenotes.core.schemas.auth import AuthUser  # noqa: TCH001
from tilenotes.core.services.auth_service import AuthService  # noqa: TCH001
from tilenotes.dependencies import (
    get_auth_service,
    get_current_user,
    rate_limit_signin,
    rate_limit_signup,
)

router = APIRouter(
    responses={
        401: {"description": "Unauthorized"},
        429: {"description": "Too many requests"},
    }
)


def _bad_request(err: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err))


@router.post("/signup", response_model=AuthResponse, dependencies=[Depends(rate_limit_signup)])
async def sign_up_with_password(
    payload: SignUpRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    try:
        return await auth_service.sign_up(payload)
    except ValueError as err:
        raise _bad_request(err) from err


@router.post("/signin", response_model=AuthResponse, dependencies=[Depends(rate_limit_signin)])
async def sign_in_with_password(
    payload: SignInRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    try:
        return await auth_service.sign_in(payload)
    except ValueError as err:
        raise _bad_request(err) from err


@router.get("/oauth/{provider}", response_model=OAuthUrlResponse)
async def oauth_authorize_url(
    provider: OAuthProvider,
    redirect_to: str | None = None,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Provider authorize URL; the browser is redirected there by the client."""
    try:
        return await auth_service.sign_in_with_oauth(provider, redirect_to)
    except ValueError as err:
        raise _bad_request(err) from err


@router.post("/signout")
async def sign_out(
    current_user: AuthUser = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    return await auth_service.sign_out(current_user)


@router.get("/validate")
async def validate_token(current_user: AuthUser = Depends(get_current_user)):
    return {
        "id": str(current_user.id),
        "email": current_user.email,
        "role": current_user.role,
    }


@router.get("/session")
async def get_session(auth_service: AuthService = Depends(get_auth_service)):
    try:
        return await auth_service.get_session()
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(err)) from err


@router.post("/refresh", response_model=AuthResponse)
async def refresh_token(
    request: Request,
    payload: RefreshRequest | None = None,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Exchange a refresh token (JSON body, or bearer header) for a new session."""
    token = payload.refresh_token if payload else None
    if not token:
        auth_header = request.headers.get("authorization")
        if auth_header and auth_header.lower().startswith("bearer "):
            token = auth_header.split(" ", 1)[1].strip()
    try:
        return await auth_service.refresh_token(token)
    except ValueError as err:
        raise _bad_request(err) from err
