from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from tilenotes.api.v1.schemas.settings import DeleteAllResponse, UserSettingsRead, UserSettingsUpdate
from tilenotes.background.scheduler import EnrichmentScheduler  # noqa: TCH001
from tilenotes.core.schemas.auth import AuthUser  # noqa: TCH001
from tilenotes.core.services.settings_service import SettingsService  # noqa: TCH001
from tilenotes.core.sync.workspace import WorkspaceCache  # noqa: TCH001
from tilenotes.dependencies import (
    get_current_user,
    get_enrichment_scheduler,
    get_settings_service,
    get_workspace_cache,
)

router = APIRouter()


@router.get("/", response_model=UserSettingsRead)
async def get_settings(
    current_user: AuthUser = Depends(get_current_user),
    service: SettingsService = Depends(get_settings_service),
):
    return UserSettingsRead.model_validate(await service.get_or_create(current_user.id))


@router.patch("/", response_model=UserSettingsRead)
async def update_settings(
    payload: UserSettingsUpdate,
    current_user: AuthUser = Depends(get_current_user),
    service: SettingsService = Depends(get_settings_service),
):
    return UserSettingsRead.model_validate(await service.update(current_user.id, payload))


@router.get("/export")
async def export_data(
    current_user: AuthUser = Depends(get_current_user),
    service: SettingsService = Depends(get_settings_service),
):
    """Everything the user owns as a downloadable JSON file."""
    export = await service.export_data(current_user.id)
    filename = f"tilenotes-export-{export.export_date.date().isoformat()}.json"
    return JSONResponse(
        content=export.model_dump(mode="json"),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete("/data", response_model=DeleteAllResponse)
async def delete_all_data(
    current_user: AuthUser = Depends(get_current_user),
    service: SettingsService = Depends(get_settings_service),
    cache: WorkspaceCache = Depends(get_workspace_cache),
    scheduler: EnrichmentScheduler = Depends(get_enrichment_scheduler),
):
    """Irreversibly delete the user's tasks, notes and settings."""
    scheduler.cancel_for_user(current_user.id)
    result = await service.delete_all_data(current_user.id)
    cache.drop(current_user.id)
    return result
