from pydantic import BaseModel
from typing import Optional

class DocumentCreateRequest(BaseModel):
    """Schema for importing a text document into the case file."""
    name: str
    content: str

class CaseSummaryState(BaseModel):
    """Schema for the case summary and the state of its generation."""
    summary: str
    loading: bool = False
    error: Optional[str] = None
