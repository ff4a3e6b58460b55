import logging

from fastapi import APIRouter, Depends

from paralegal.api.deps import get_conversation_controller
from paralegal.core.conversation import ConversationController
from paralegal.schemas.chat import ActionPlanRequest, ChatRequest, ChatState

router = APIRouter()
logger = logging.getLogger(__name__)

def _state(controller: ConversationController, accepted: bool = True) -> ChatState:
    return ChatState(
        messages=list(controller.messages),
        loading=controller.is_loading,
        error=controller.last_error,
        accepted=accepted,
    )

@router.get("/", response_model=ChatState)
async def get_chat(controller: ConversationController = Depends(get_conversation_controller)):
    """
    Get the message log and the state of the current turn.
    """
    return _state(controller)

@router.post("/", response_model=ChatState)
async def send_message(
    chat_request: ChatRequest,
    controller: ConversationController = Depends(get_conversation_controller)
):
    """
    Send a chat message and wait for the streamed answer to complete.
    Blank messages and messages sent while another turn is running are not accepted.
    """
    logger.info(f"🔄 RECEIVED CHAT REQUEST: query_length={len(chat_request.query)}")
    accepted = await controller.send_message(chat_request.query)
    return _state(controller, accepted)

@router.post("/action-plan", response_model=ChatState)
async def generate_action_plan(
    request: ActionPlanRequest,
    controller: ConversationController = Depends(get_conversation_controller)
):
    """
    Generate a step-by-step action plan, optionally with a specific focus.
    """
    logger.info(f"🔄 RECEIVED ACTION PLAN REQUEST: focus='{request.focus}'")
    accepted = await controller.generate_action_plan(request.focus or "")
    return _state(controller, accepted)

@router.post("/policy-adherence", response_model=ChatState)
async def analyze_policy_adherence(controller: ConversationController = Depends(get_conversation_controller)):
    """
    Review the uploaded documents for deviations from company policy.
    """
    accepted = await controller.analyze_policy_adherence()
    return _state(controller, accepted)

@router.post("/family-law", response_model=ChatState)
async def analyze_family_law(controller: ConversationController = Depends(get_conversation_controller)):
    """
    Run the family law analysis of the case.
    """
    accepted = await controller.analyze_family_law()
    return _state(controller, accepted)
