import json
import logging
from typing import Callable, List, Optional

from pydantic import ValidationError

from paralegal.core.case_data import CaseDataService
from paralegal.core.errors import InvalidResponseError
from paralegal.core.llm_service import CompletionClient, StreamDelta
from paralegal.core.system_prompt import (
    BASE_SYSTEM_PROMPT,
    for_violation_analysis,
    for_violation_detail,
)
from paralegal.models.case_file import CaseFile
from paralegal.models.violations import ViolationAlert

# Configure logging
logger = logging.getLogger("violation_analysis")

DETAIL_ERROR_TEXT = "Error: Could not fetch details."

NewViolationListener = Callable[[List[ViolationAlert]], None]


def parse_violation_alerts(response_text: str) -> List[ViolationAlert]:
    """
    Parse the bulk scan response into fresh alerts.

    The response is a JSON array of alert objects. In JSON mode some endpoints
    wrap it in an object, so an object holding exactly one array is unwrapped,
    and a lone alert object is accepted as a one-item list.

    Raises:
        InvalidResponseError: The content is not JSON or an item is not a valid alert
    """
    try:
        data = json.loads(response_text)
    except (json.JSONDecodeError, TypeError) as e:
        raise InvalidResponseError(f"The AI returned an invalid analysis format: {str(e)}") from e

    if isinstance(data, dict):
        arrays = [value for value in data.values() if isinstance(value, list)]
        if len(arrays) == 1:
            data = arrays[0]
        elif "title" in data:
            data = [data]
        else:
            logger.warning(f"⚠️ ANALYSIS RESPONSE HAS NO ALERT LIST: keys={list(data.keys())}")
            data = []

    if not isinstance(data, list):
        raise InvalidResponseError("The AI returned an invalid analysis format: expected a list of violations.")

    alerts = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise InvalidResponseError(f"The AI returned an invalid violation at position {index}.")
        # Identity and UI state are always assigned locally
        fields = {key: value for key, value in item.items() if key not in ("id", "detailedExplanation")}
        try:
            alerts.append(ViolationAlert.model_validate(fields))
        except ValidationError as e:
            raise InvalidResponseError(
                f"The AI returned an invalid violation at position {index}: {e.error_count()} invalid field(s)."
            ) from e
    return alerts


def find_new_high_severity(old_alerts: List[ViolationAlert], new_alerts: List[ViolationAlert]) -> List[ViolationAlert]:
    """High-severity alerts whose titles were not already flagged High in the previous scan."""
    old_titles = {alert.title for alert in old_alerts if alert.severity == "High"}
    return [alert for alert in new_alerts if alert.severity == "High" and alert.title not in old_titles]


class ViolationAnalysisController:
    """
    Runs the bulk violation scan and the per-alert detail expansions.

    The scan is transactional: a failed re-scan leaves the previous alerts in
    place. Detail expansions are independent per alert and only ever touch the
    alert they were started for.
    """

    def __init__(self, case_data: CaseDataService, llm_service: CompletionClient):
        self.case_data = case_data
        self.llm_service = llm_service
        self.is_analyzing = False
        self.error: Optional[str] = None
        self._listeners: List[NewViolationListener] = []

    @property
    def alerts(self) -> List[ViolationAlert]:
        return self.case_data.case_file.violation_alerts

    def add_new_violation_listener(self, listener: NewViolationListener) -> None:
        self._listeners.append(listener)

    def get_alert(self, alert_id: str, case_file: Optional[CaseFile] = None) -> Optional[ViolationAlert]:
        alerts = case_file.violation_alerts if case_file is not None else self.alerts
        for alert in alerts:
            if alert.id == alert_id:
                return alert
        return None

    async def analyze(self, context: Optional[str] = None) -> List[ViolationAlert]:
        """
        Scan the case file for potential violations and replace the alert list.

        Args:
            context: Case context override; defaults to the full case file at call time

        Returns:
            The alert list after the scan (the previous one if the scan failed)
        """
        if self.is_analyzing:
            logger.warning("⚠️ VIOLATION SCAN IGNORED: a scan is already running")
            return self.alerts

        self.is_analyzing = True
        self.error = None
        # Results belong to the case file the scan was started on
        case_file = self.case_data.case_file
        previous_alerts = case_file.violation_alerts

        try:
            if context is None:
                context = self.case_data.get_full_context()
            system_prompt, user_prompt = for_violation_analysis(context)
            logger.info(f"🔄 VIOLATION SCAN STARTED: context_length={len(context)}")

            response_text = await self.llm_service.send_once(system_prompt, user_prompt, json_mode=True)
            new_alerts = parse_violation_alerts(response_text)

            case_file.violation_alerts = new_alerts
            logger.info(f"✅ VIOLATION SCAN COMPLETED: alerts={len(new_alerts)}")
        except Exception as e:
            logger.error(f"❌ VIOLATION SCAN FAILED: {str(e)}")
            self.error = str(e) or "Analysis failed."
            case_file.violation_alerts = previous_alerts
            return previous_alerts
        finally:
            self.is_analyzing = False

        self._emit_new_high_severity(find_new_high_severity(previous_alerts, new_alerts))
        self.case_data.save()
        return new_alerts

    def _emit_new_high_severity(self, new_high: List[ViolationAlert]) -> None:
        if not new_high:
            return
        logger.info(f"🚨 NEW HIGH-SEVERITY VIOLATIONS: {[alert.title for alert in new_high]}")
        for listener in self._listeners:
            try:
                listener(new_high)
            except Exception as e:
                logger.error(f"❌ VIOLATION LISTENER FAILED: {str(e)}")

    async def expand_details(self, alert_id: str) -> Optional[ViolationAlert]:
        """
        Toggle the detailed analysis panel of one alert, fetching the details the first time.

        The fetched text is kept on the alert, so later toggles never hit the
        network. A request for an alert whose details are still being fetched
        is ignored.

        Args:
            alert_id: ID of the alert

        Returns:
            The alert, or None if no alert has this ID
        """
        alert = self.get_alert(alert_id)
        if alert is None:
            logger.warning(f"⚠️ ALERT NOT FOUND: id={alert_id}")
            return None

        if alert.is_detailed_analysis_visible:
            alert.is_detailed_analysis_visible = False
            return alert

        alert.is_detailed_analysis_visible = True

        if alert.detailed_explanation and alert.detailed_explanation != DETAIL_ERROR_TEXT:
            return alert

        if alert.is_fetching_details:
            logger.info(f"🔄 DETAIL FETCH ALREADY RUNNING: id={alert_id}")
            return alert

        case_file = self.case_data.case_file
        alert.is_fetching_details = True
        alert.detailed_explanation = ""
        logger.info(f"🔄 FETCHING VIOLATION DETAILS: id={alert_id}, title={alert.title}")

        try:
            user_prompt = for_violation_detail(self.case_data.get_full_context(), alert)
            await self.llm_service.send_stream(
                BASE_SYSTEM_PROMPT,
                user_prompt,
                lambda delta: self._append_detail(case_file, alert_id, delta),
            )
            logger.info(f"✅ VIOLATION DETAILS FETCHED: id={alert_id}")
        except Exception as e:
            logger.error(f"❌ ERROR FETCHING VIOLATION DETAILS: id={alert_id}, error={str(e)}")
            target = self.get_alert(alert_id, case_file)
            if target is not None:
                target.detailed_explanation = DETAIL_ERROR_TEXT
        finally:
            target = self.get_alert(alert_id, case_file)
            if target is not None:
                target.is_fetching_details = False
            self.case_data.save()

        return self.get_alert(alert_id, case_file)

    def _append_detail(self, case_file: CaseFile, alert_id: str, delta: StreamDelta) -> None:
        if delta.is_error:
            raise delta.error
        # Looked up per delta: a re-scan may have replaced the alert list meanwhile
        target = self.get_alert(alert_id, case_file)
        if target is not None:
            target.detailed_explanation = (target.detailed_explanation or "") + delta.text

    def toggle_initial_details(self, alert_id: str) -> Optional[ViolationAlert]:
        alert = self.get_alert(alert_id)
        if alert is not None:
            alert.show_initial_details = not alert.show_initial_details
        return alert

    def set_detail_search_query(self, alert_id: str, query: str) -> Optional[ViolationAlert]:
        alert = self.get_alert(alert_id)
        if alert is not None:
            alert.detail_search_query = query
        return alert
