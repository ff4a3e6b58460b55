from functools import lru_cache

from paralegal import config
from paralegal.core.case_data import CaseDataService
from paralegal.core.case_summary_manager import CaseSummaryManager
from paralegal.core.conversation import ConversationController
from paralegal.core.document_analyzer import DocumentAnalyzer
from paralegal.core.llm_service import CompletionClient
from paralegal.core.notification_service import NotificationService
from paralegal.core.settings_service import SettingsService
from paralegal.core.storage import JsonFileStore
from paralegal.core.violation_analysis import ViolationAnalysisController

# Use lru_cache to create singleton instances of services
@lru_cache()
def get_store() -> JsonFileStore:
    """
    Returns the key-value store for the case file and the settings.
    """
    return JsonFileStore(config.data_dir)

@lru_cache()
def get_settings_service() -> SettingsService:
    """
    Returns a singleton instance of the Settings Service.
    Its settings object is loaded once and shared by reference.
    """
    return SettingsService(get_store())

@lru_cache()
def get_case_data_service() -> CaseDataService:
    """
    Returns a singleton instance of the Case Data Service, the owner of the case file.
    """
    return CaseDataService(get_store())

@lru_cache()
def get_llm_service() -> CompletionClient:
    """
    Returns a singleton instance of the Completion Client.
    """
    return CompletionClient(
        settings=get_settings_service().settings,
        default_api_key=config.deepseek_api_key,
    )

@lru_cache()
def get_notification_service() -> NotificationService:
    return NotificationService(get_settings_service().settings)

@lru_cache()
def get_conversation_controller() -> ConversationController:
    """
    Returns the single chat controller, so at most one turn runs at a time.
    """
    return ConversationController(get_case_data_service(), get_llm_service())

@lru_cache()
def get_violation_controller() -> ViolationAnalysisController:
    """
    Returns the violation analysis controller, wired to send new high-severity alerts to the user.
    """
    case_data = get_case_data_service()
    notification_service = get_notification_service()
    controller = ViolationAnalysisController(case_data, get_llm_service())
    controller.add_new_violation_listener(
        lambda alerts: notification_service.notify_new_violations(alerts, case_data.case_file.case_details.win)
    )
    return controller

@lru_cache()
def get_case_summary_manager() -> CaseSummaryManager:
    return CaseSummaryManager(get_case_data_service(), get_llm_service())

@lru_cache()
def get_document_analyzer() -> DocumentAnalyzer:
    return DocumentAnalyzer(get_case_data_service(), get_llm_service())
