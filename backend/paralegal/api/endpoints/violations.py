import logging

from fastapi import APIRouter, Depends, HTTPException

from paralegal.api.deps import get_violation_controller
from paralegal.core.violation_analysis import ViolationAnalysisController
from paralegal.schemas.violations import DetailSearchRequest, ViolationAlertState, ViolationAnalysisState

router = APIRouter()
logger = logging.getLogger("violations_api")

def _state(controller: ViolationAnalysisController) -> ViolationAnalysisState:
    return ViolationAnalysisState(
        alerts=[ViolationAlertState.from_alert(alert) for alert in controller.alerts],
        loading=controller.is_analyzing,
        error=controller.error,
    )

@router.get("/", response_model=ViolationAnalysisState)
async def list_violations(controller: ViolationAnalysisController = Depends(get_violation_controller)):
    """
    List the current violation alerts.
    """
    return _state(controller)

@router.post("/analyze", response_model=ViolationAnalysisState)
async def analyze_violations(controller: ViolationAnalysisController = Depends(get_violation_controller)):
    """
    Scan the whole case file for potential violations.
    On failure the previous alerts are kept and the error is reported.
    """
    logger.info("🔍 VIOLATION SCAN REQUESTED")
    await controller.analyze()
    return _state(controller)

@router.post("/{alert_id}/details", response_model=ViolationAlertState)
async def toggle_violation_details(
    alert_id: str,
    controller: ViolationAnalysisController = Depends(get_violation_controller)
):
    """
    Toggle the detailed analysis of one alert, fetching it the first time it is opened.
    """
    alert = await controller.expand_details(alert_id)
    if alert is None:
        raise HTTPException(status_code=404, detail="Violation alert not found")
    return ViolationAlertState.from_alert(alert)

@router.post("/{alert_id}/initial-details", response_model=ViolationAlertState)
async def toggle_initial_details(
    alert_id: str,
    controller: ViolationAnalysisController = Depends(get_violation_controller)
):
    alert = controller.toggle_initial_details(alert_id)
    if alert is None:
        raise HTTPException(status_code=404, detail="Violation alert not found")
    return ViolationAlertState.from_alert(alert)

@router.put("/{alert_id}/search", response_model=ViolationAlertState)
async def set_detail_search(
    alert_id: str,
    request: DetailSearchRequest,
    controller: ViolationAnalysisController = Depends(get_violation_controller)
):
    alert = controller.set_detail_search_query(alert_id, request.query)
    if alert is None:
        raise HTTPException(status_code=404, detail="Violation alert not found")
    return ViolationAlertState.from_alert(alert)
