import logging

from fastapi import APIRouter, Depends, HTTPException

from paralegal.api.deps import get_llm_service, get_settings_service
from paralegal.core.llm_service import CompletionClient
from paralegal.core.settings_service import SettingsService
from paralegal.schemas.settings import SettingsUpdateRequest, SettingsView

router = APIRouter()
logger = logging.getLogger("settings_api")

@router.get("/", response_model=SettingsView, response_model_by_alias=True)
async def get_settings(
    settings_service: SettingsService = Depends(get_settings_service),
    llm_service: CompletionClient = Depends(get_llm_service)
):
    """
    Get the user settings. The API key is reported only as configured or not.
    """
    return SettingsView.from_settings(settings_service.settings, llm_service.is_configured())

@router.put("/", response_model=SettingsView, response_model_by_alias=True)
async def update_settings(
    request: SettingsUpdateRequest,
    settings_service: SettingsService = Depends(get_settings_service),
    llm_service: CompletionClient = Depends(get_llm_service)
):
    """
    Update some or all settings; they are saved immediately.
    """
    changes = request.model_dump(exclude_none=True)
    logger.info(f"🔄 UPDATING SETTINGS: fields={sorted(changes)}")
    try:
        settings = settings_service.update(changes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SettingsView.from_settings(settings, llm_service.is_configured())
