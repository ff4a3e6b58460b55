import logging
from typing import Optional

from paralegal.core.case_data import CaseDataService
from paralegal.core.errors import InvalidResponseError
from paralegal.core.llm_service import CompletionClient, StreamDelta
from paralegal.core.system_prompt import for_executive_summary
from paralegal.models.case_file import CaseDetails

# Configure logging
logger = logging.getLogger("case_summary_manager")


class CaseSummaryManager:
    """
    Generates the executive case summary and streams it into the case details.
    """

    def __init__(self, case_data: CaseDataService, llm_service: CompletionClient):
        """
        Initialize the case summary manager.

        Args:
            case_data: Owner of the case file whose summary field is written
            llm_service: Client for the completion endpoint
        """
        self.case_data = case_data
        self.llm_service = llm_service
        self.is_generating = False
        self.error: Optional[str] = None

    async def generate_summary(self) -> Optional[str]:
        """
        Regenerate the case summary from the current case file.

        The summary field is filled as the text streams in. If generation fails
        (or produces nothing) the previous summary is put back.

        Returns:
            The new summary, or None if generation was skipped or failed
        """
        if self.is_generating:
            logger.warning("⚠️ SUMMARY GENERATION IGNORED: already running")
            return None

        self.is_generating = True
        self.error = None
        # Written only into the details the summary was started for
        details = self.case_data.case_file.case_details
        previous_summary = details.case_summary

        try:
            system_prompt, user_prompt = for_executive_summary(self.case_data.get_full_context())
            details.case_summary = ""
            logger.info("🔄 GENERATING CASE SUMMARY")

            await self.llm_service.send_stream(
                system_prompt,
                user_prompt,
                lambda delta: self._append_delta(details, delta),
            )

            summary = details.case_summary
            if not summary.strip():
                raise InvalidResponseError("The AI returned an empty summary.")
            logger.info(f"✅ CASE SUMMARY GENERATED: length={len(summary)}")
            return summary
        except Exception as e:
            logger.error(f"❌ CASE SUMMARY FAILED: {str(e)}")
            self.error = str(e) or "Summary generation failed."
            details.case_summary = previous_summary
            return None
        finally:
            self.is_generating = False
            self.case_data.save()

    @staticmethod
    def _append_delta(details: CaseDetails, delta: StreamDelta) -> None:
        if delta.is_error:
            raise delta.error
        details.case_summary += delta.text
