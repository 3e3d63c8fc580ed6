from __future__ import annotations

import math
import time
from functools import lru_cache
from typing import TYPE_CHECKING

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tilenotes.background.scheduler import EnrichmentScheduler
from tilenotes.config import settings
from tilenotes.core.repositories.implementations.supabase.attachment_repository import (
    SupabaseAttachmentRepository,
)
from tilenotes.core.repositories.implementations.supabase.note_repository import (
    SupabaseNoteRepository,
)
from tilenotes.core.repositories.implementations.supabase.settings_repository import (
    SupabaseSettingsRepository,
)
from tilenotes.core.repositories.implementations.supabase.task_repository import (
    SupabaseTaskRepository,
)
from tilenotes.core.schemas.auth import AuthUser
from tilenotes.core.services.attachment_service import AttachmentService
from tilenotes.core.services.auth_service import AuthService
from tilenotes.core.services.note_service import NoteService
from tilenotes.core.services.settings_service import SettingsService
from tilenotes.core.services.task_service import TaskService
from tilenotes.core.sync.notes import NoteSynchronizer
from tilenotes.core.sync.tasks import TaskSynchronizer
from tilenotes.core.sync.workspace import WorkspaceCache
from tilenotes.db.base import create_request_supabase_client
from tilenotes.utils.logging import get_logger

if TYPE_CHECKING:
    from supabase import Client

    from tilenotes.background.enrichment import EnrichmentOutcome
    from tilenotes.core.models.settings import UserSettings
    from tilenotes.core.repositories.attachment_repository import AttachmentRepository
    from tilenotes.core.repositories.note_repository import NoteRepository
    from tilenotes.core.repositories.settings_repository import SettingsRepository
    from tilenotes.core.repositories.task_repository import TaskRepository

logger = get_logger(__name__)

# auto_error=False so a missing token becomes our own 401
http_bearer = HTTPBearer(auto_error=False)


# In-memory rate limiting, per process
_login_attempts: dict[str, list[float]] = {}


def _recent_attempts(identifier: str, now: float) -> list[float]:
    window_start = now - settings.login_attempt_window
    attempts = [ts for ts in _login_attempts.get(identifier, []) if ts > window_start]
    _login_attempts[identifier] = attempts
    return attempts


def rate_limit_by_ip(request: Request, operation: str = "default") -> None:
    """Reject the call with 429 once an IP exceeds `max_login_attempts` per window."""
    if not settings.enable_rate_limiting:
        return
    client_ip = request.client.host if request.client else "unknown"
    identifier = f"{operation}:{client_ip}"
    now = time.time()
    attempts = _recent_attempts(identifier, now)

    if len(attempts) < settings.max_login_attempts:
        attempts.append(now)
        return

    logger.warning("Rate limited %s attempt", operation, extra={"ip": client_ip})
    seconds_until_reset = max(1, math.ceil(settings.login_attempt_window - (now - min(attempts))))
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail=f"Too many {operation} attempts. Please try again later.",
        headers={
            "Retry-After": str(seconds_until_reset),
            "RateLimit-Limit": str(settings.max_login_attempts),
            "RateLimit-Remaining": "0",
            "RateLimit-Reset": str(seconds_until_reset),
        },
    )


def rate_limit_signin(request: Request) -> None:
    rate_limit_by_ip(request, "signin")


def rate_limit_signup(request: Request) -> None:
    rate_limit_by_ip(request, "signup")


def get_request_supabase_client(request: Request) -> Client:
    """Supabase client carrying the caller's JWT so row-level security applies."""
    auth_header = request.headers.get("authorization")
    jwt: str | None = None
    if auth_header and auth_header.lower().startswith("bearer "):
        jwt = auth_header.split(" ", 1)[1].strip()
    return create_request_supabase_client(jwt)


def get_note_repository(client: Client = Depends(get_request_supabase_client)) -> NoteRepository:
    return SupabaseNoteRepository(client)


def get_task_repository(client: Client = Depends(get_request_supabase_client)) -> TaskRepository:
    return SupabaseTaskRepository(client)


def get_settings_repository(client: Client = Depends(get_request_supabase_client)) -> SettingsRepository:
    return SupabaseSettingsRepository(client)


def get_attachment_repository(client: Client = Depends(get_request_supabase_client)) -> AttachmentRepository:
    return SupabaseAttachmentRepository(client, settings.storage_bucket)


def get_note_service(repo: NoteRepository = Depends(get_note_repository)) -> NoteService:
    return NoteService(repo)


def get_task_service(repo: TaskRepository = Depends(get_task_repository)) -> TaskService:
    return TaskService(repo)


def get_settings_service(
    repo: SettingsRepository = Depends(get_settings_repository),
    note_service: NoteService = Depends(get_note_service),
    task_service: TaskService = Depends(get_task_service),
) -> SettingsService:
    return SettingsService(repo, note_service, task_service)


def get_attachment_service(repo: AttachmentRepository = Depends(get_attachment_repository)) -> AttachmentService:
    return AttachmentService(repo)


def get_auth_service(client: Client = Depends(get_request_supabase_client)) -> AuthService:
    return AuthService(client)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(http_bearer),
) -> AuthUser:
    """Validate the bearer JWT with Supabase and return the owner it names."""

    def unauthorized(detail: str) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not credentials:
        raise unauthorized("Authentication required")
    jwt = credentials.credentials
    if not jwt or len(jwt.split(".")) != 3:
        raise unauthorized("Invalid token format")

    auth_service = AuthService(create_request_supabase_client(jwt))
    try:
        user = await auth_service.get_user(jwt)
    except ValueError as err:
        raise unauthorized(str(err)) from err
    if not user.is_authenticated:
        raise unauthorized("User session required")
    return user


async def get_user_settings(
    current_user: AuthUser = Depends(get_current_user),
    service: SettingsService = Depends(get_settings_service),
) -> UserSettings:
    return await service.get_or_create(current_user.id)


@lru_cache
def get_workspace_cache() -> WorkspaceCache:
    return WorkspaceCache(max_workspaces=settings.workspace_cache_size)


@lru_cache
def get_enrichment_scheduler() -> EnrichmentScheduler:
    cache = get_workspace_cache()

    def fold_into_cache(outcome: EnrichmentOutcome) -> None:
        if not outcome.skipped:
            cache.apply_enrichment(outcome.user_id, outcome.note, outcome.tasks)

    return EnrichmentScheduler(on_complete=fold_into_cache)


def get_note_synchronizer(
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
    user_settings: UserSettings = Depends(get_user_settings),
    cache: WorkspaceCache = Depends(get_workspace_cache),
) -> NoteSynchronizer:
    workspace = cache.get(current_user.id)
    return NoteSynchronizer(
        service,
        current_user.id,
        workspace.notes,
        default_color=user_settings.default_note_color,
    )


def get_task_synchronizer(
    current_user: AuthUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
    cache: WorkspaceCache = Depends(get_workspace_cache),
) -> TaskSynchronizer:
    return TaskSynchronizer(service, current_user.id, cache.get(current_user.id).tasks)
