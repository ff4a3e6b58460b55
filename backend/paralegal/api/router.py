from fastapi import APIRouter
from .endpoints import chat, violations, case_files, analyzer, settings, notifications
from datetime import datetime

router = APIRouter()

# Include all API endpoint routers
router.include_router(chat.router, prefix="/chat", tags=["Chat"])
router.include_router(violations.router, prefix="/violations", tags=["Violations"])
router.include_router(case_files.router, prefix="/case-file", tags=["Case File"])
router.include_router(analyzer.router, prefix="/analyzer", tags=["Document Analyzer"])
router.include_router(settings.router, prefix="/settings", tags=["Settings"])
router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])

# Add API-specific health check endpoint
@router.get("/health", tags=["Health"])
async def api_health_check():
    """
    API-specific health check that always responds immediately.
    """
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}
