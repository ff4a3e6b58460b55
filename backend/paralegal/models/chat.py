from typing import List, Literal

from paralegal.models.base import CamelModel

GREETING = (
    "Hello! This is your AI Paralegal Assistant. I have been briefed with your complete case file. "
    "Ask me any questions about your case or ask me to generate an action plan."
)


class Message(CamelModel):
    role: Literal["user", "model"]
    text: str = ""


def default_messages() -> List[Message]:
    return [Message(role="model", text=GREETING)]
