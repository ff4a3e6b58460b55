import logging
from typing import List, Optional

from paralegal.core.case_data import CaseDataService
from paralegal.core.llm_service import CompletionClient, StreamDelta
from paralegal.core.system_prompt import (
    BASE_SYSTEM_PROMPT,
    for_action_plan,
    for_family_law_analysis,
    for_general_chat,
    for_policy_adherence,
)
from paralegal.models.chat import Message

# Configure logging
logger = logging.getLogger("conversation")

CHAT_ERROR_MESSAGE = (
    "An error occurred while communicating with the AI. "
    "Please ensure your API key is correctly configured and try again."
)


class ConversationController:
    """
    Owns the chat message log of the case file and runs one chat turn at a time.

    A turn appends the user's message and an empty model placeholder, then
    appends each streamed delta to the placeholder. If the turn fails
    before any text arrived, both messages are removed again; a partially
    filled placeholder is replaced by a fixed error message instead.
    """

    def __init__(self, case_data: CaseDataService, llm_service: CompletionClient):
        self.case_data = case_data
        self.llm_service = llm_service
        self.is_loading = False
        self.last_error: Optional[str] = None

    @property
    def messages(self) -> List[Message]:
        return self.case_data.case_file.messages

    def _can_start(self, user_text: str) -> bool:
        if self.is_loading:
            logger.warning("⚠️ CHAT TURN IGNORED: another turn is in flight")
            return False
        if not user_text or not user_text.strip():
            return False
        return True

    async def submit(self, user_text: str, prompt: Optional[str] = None, context: Optional[str] = None) -> bool:
        """
        Run one chat turn against the full case context.

        Args:
            user_text: What is shown in the log as the user's message
            prompt: What is actually asked; defaults to ``user_text``
            context: Case context override; defaults to the full case file at call time

        Returns:
            False if the turn was rejected (blank text or a turn already in flight)
        """
        if not self._can_start(user_text):
            return False
        query = prompt if prompt is not None else user_text.strip()
        if context is None:
            context = self.case_data.get_full_context()
        return await self._run_turn(user_text, for_general_chat(context, query))

    async def send_message(self, text: str) -> bool:
        return await self.submit(text)

    async def generate_action_plan(self, focus: str = "") -> bool:
        """Ask for a step-by-step action plan; the log only shows a short label."""
        focus = (focus or "").strip()
        user_message = f"Generate Action Plan: {focus}" if focus else "Generate Action Plan"
        return await self.submit(user_message, for_action_plan(focus))

    async def analyze_policy_adherence(self) -> bool:
        """Policy review restricted to the uploaded documents."""
        label = "Analyze Policy Adherence"
        if not self._can_start(label):
            return False
        return await self._run_turn(label, for_policy_adherence(self.case_data.get_documents_context()))

    async def analyze_family_law(self) -> bool:
        label = "Analyze Family Law Case"
        if not self._can_start(label):
            return False
        return await self._run_turn(label, for_family_law_analysis(self.case_data.get_full_context()))

    async def _run_turn(self, user_text: str, user_prompt: str) -> bool:
        if not self._can_start(user_text):
            return False

        self.is_loading = True
        self.last_error = None
        # The turn only ever touches its own two messages in the log it started on
        messages = self.messages
        user_message = Message(role="user", text=user_text.strip())
        placeholder = Message(role="model", text="")
        messages.append(user_message)
        messages.append(placeholder)
        self.case_data.save()
        logger.info(f"🔄 CHAT TURN STARTED: messages={len(messages)}, prompt_length={len(user_prompt)}")

        try:
            await self.llm_service.send_stream(
                BASE_SYSTEM_PROMPT,
                user_prompt,
                lambda delta: self._append_delta(placeholder, delta),
            )
            logger.info(f"✅ CHAT TURN COMPLETED: response_length={len(placeholder.text)}")
        except Exception as e:
            logger.error(f"❌ CHAT TURN FAILED: {str(e)}")
            self.last_error = str(e) or CHAT_ERROR_MESSAGE
            self._rollback_placeholder(messages, user_message, placeholder)
        finally:
            self.is_loading = False
            self.case_data.save()

        return True

    @staticmethod
    def _append_delta(placeholder: Message, delta: StreamDelta) -> None:
        if delta.is_error:
            raise delta.error
        placeholder.text += delta.text

    @staticmethod
    def _rollback_placeholder(messages: List[Message], user_message: Message, placeholder: Message) -> None:
        if placeholder.text == "":
            # Nothing was received: the log goes back to how it was before the turn
            messages[:] = [m for m in messages if m is not user_message and m is not placeholder]
        else:
            # Partial output is discarded, not kept alongside the error
            placeholder.text = CHAT_ERROR_MESSAGE
