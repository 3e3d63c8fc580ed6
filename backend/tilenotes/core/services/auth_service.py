from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from tilenotes.api.v1.schemas.auth import AuthResponse, OAuthProvider, OAuthUrlResponse, SessionUser
from tilenotes.config import settings
from tilenotes.core.schemas.auth import AuthUser
from tilenotes.utils.logging import get_logger
from tilenotes.utils.validation import validate_password_strength

if TYPE_CHECKING:
    from tilenotes.api.v1.schemas.auth import SignInRequest, SignUpRequest


logger = get_logger(__name__)

# (phrases found in the GoTrue error, message shown to the client)
SIGN_UP_ERRORS: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("signup disabled", "signups disabled", "signups not allowed", "signup not allowed"),
        "Signups are disabled. Please request an invite.",
    ),
    (("already registered", "already exists"), "An account with this email already exists"),
    (("invalid email",), "Invalid email format"),
    (("weak password",), "Password does not meet security requirements"),
)
SIGN_IN_ERRORS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("invalid login credentials", "invalid email or password"), "Invalid email or password"),
    (("email not confirmed",), "Please confirm your email address before signing in"),
    (("too many requests",), "Too many signin attempts. Please try again later."),
)
REFRESH_ERRORS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("invalid", "expired"), "Invalid or expired refresh token"),
)


def _classify(err: Exception, table, default: str) -> str:
    error_msg = str(err).lower()
    for phrases, message in table:
        if any(p in error_msg for p in phrases):
            return message
    return default


def _session_response(resp: Any) -> AuthResponse:
    session = resp.session
    return AuthResponse(
        access_token=session.access_token,
        token_type="bearer",
        expires_in=session.expires_in,
        refresh_token=session.refresh_token,
        user=SessionUser(id=str(resp.user.id), email=resp.user.email or ""),
    )


class AuthService:
    """Thin wrapper over Supabase GoTrue that turns its errors into user-facing messages.

    Every failure is raised as `ValueError`; the endpoints map it to 400/401.
    """

    def __init__(self, supabase_client: Any):
        self.supabase = supabase_client

    async def _call(self, action: str, func, table, default: str, **log_extra):
        try:
            return await asyncio.to_thread(func)
        except Exception as err:
            logger.warning(
                "%s failed",
                action,
                extra={"error_type": type(err).__name__, "error_summary": str(err)[:100], **log_extra},
            )
            raise ValueError(_classify(err, table, default)) from err

    async def sign_up(self, payload: SignUpRequest) -> AuthResponse:
        ok, password_error = validate_password_strength(payload.password)
        if not ok:
            raise ValueError(password_error)

        email = payload.email.lower().strip()
        resp = await self._call(
            "Sign up",
            lambda: self.supabase.auth.sign_up({"email": email, "password": payload.password}),
            SIGN_UP_ERRORS,
            "Failed to create account. Please try again.",
            email=email,
        )
        if not resp.user or not getattr(resp, "session", None):
            raise ValueError("Account created but session not established. Please confirm your email or sign in.")

        logger.info("User signed up", extra={"user_id": str(resp.user.id)})
        return _session_response(resp)

    async def sign_in(self, payload: SignInRequest) -> AuthResponse:
        email = payload.email.lower().strip()
        if not email or not payload.password:
            raise ValueError("Email and password are required")

        resp = await self._call(
            "Sign in",
            lambda: self.supabase.auth.sign_in_with_password({"email": email, "password": payload.password}),
            SIGN_IN_ERRORS,
            "Authentication service error. Please try again.",
            email=email,
        )
        if not resp.user or not getattr(resp, "session", None):
            raise ValueError("Invalid email or password")

        logger.info("User signed in", extra={"user_id": str(resp.user.id)})
        return _session_response(resp)

    async def sign_in_with_oauth(self, provider: OAuthProvider, redirect_to: str | None = None) -> OAuthUrlResponse:
        """Return the provider authorize URL the client should navigate to."""
        options = {}
        target = redirect_to or settings.oauth_redirect_url
        if target:
            options["redirect_to"] = target
        resp = await self._call(
            "OAuth sign in",
            lambda: self.supabase.auth.sign_in_with_oauth({"provider": provider.value, "options": options}),
            (),
            "Failed to start OAuth sign in",
            provider=provider.value,
        )
        url = getattr(resp, "url", None)
        if not url:
            raise ValueError("Failed to start OAuth sign in")
        return OAuthUrlResponse(provider=provider, url=url)

    async def get_user(self, jwt: str) -> AuthUser:
        resp = await self._call(
            "JWT validation",
            lambda: self.supabase.auth.get_user(jwt),
            ((("invalid", "expired"), "Token is invalid or expired"),),
            "Authentication failed",
            jwt_length=len(jwt),
        )
        user = getattr(resp, "user", None)
        if not user or not getattr(user, "id", None):
            raise ValueError("Invalid user data")
        return AuthUser(id=user.id, email=user.email or "", role=getattr(user, "role", None))

    async def sign_out(self, current_user: AuthUser) -> dict[str, str]:
        # Tokens expire on their own, a failed revoke is not an error for the client
        try:
            await asyncio.to_thread(self.supabase.auth.sign_out)
            logger.info("User signed out", extra={"user_id": str(current_user.id)})
        except Exception as err:
            logger.warning("Sign out failed", extra={"error": str(err)[:100], "user_id": str(current_user.id)})
        return {"message": "Signed out successfully"}

    async def get_session(self) -> dict[str, Any]:
        resp = await self._call(
            "Session retrieval",
            self.supabase.auth.get_session,
            ((("no session", "invalid"), "No valid session found"),),
            "Failed to retrieve session",
        )
        session = getattr(resp, "session", None) or resp
        user = getattr(resp, "user", None)
        if not session or not user:
            raise ValueError("No active session found")
        return {
            "user": {"id": str(user.id), "email": user.email or ""},
            "session": {
                "access_token": session.access_token,
                "refresh_token": session.refresh_token,
                "expires_in": session.expires_in,
                "expires_at": session.expires_at,
            },
        }

    async def refresh_token(self, refresh_token: str | None) -> AuthResponse:
        if not refresh_token:
            raise ValueError("Refresh token is required")
        resp = await self._call(
            "Token refresh",
            lambda: self.supabase.auth.refresh_session(refresh_token),
            REFRESH_ERRORS,
            "Failed to refresh token",
        )
        if not resp.user or not getattr(resp, "session", None):
            raise ValueError("Invalid refresh token")
        return _session_response(resp)
