from pydantic import BaseModel
from typing import List, Optional

from paralegal.models.chat import Message

class ChatRequest(BaseModel):
    """Request payload for a chat turn."""
    query: str

class ActionPlanRequest(BaseModel):
    """Request payload for an action plan; the focus is optional."""
    focus: Optional[str] = ""

class ChatState(BaseModel):
    """The message log plus the state of the current turn."""
    messages: List[Message] = []
    loading: bool = False
    error: Optional[str] = None
    accepted: bool = True
