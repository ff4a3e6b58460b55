import uuid
from typing import Any, List, Literal, Optional

from pydantic import Field, field_validator

from paralegal.models.base import CamelModel


def new_violation_id() -> str:
    return f"violation_{uuid.uuid4().hex}"


class ViolationAlert(CamelModel):
    # --- Persistent data ---
    id: str = Field(default_factory=new_violation_id)
    title: str
    explanation: str = ""
    severity: Literal["High", "Medium", "Low"] = "Medium"
    references: List[str] = []
    recommendations: List[str] = []
    detailed_explanation: Optional[str] = None

    # --- Transient UI state, never exported ---
    is_fetching_details: bool = Field(default=False, exclude=True)
    is_detailed_analysis_visible: bool = Field(default=False, exclude=True)
    show_initial_details: bool = Field(default=False, exclude=True)
    detail_search_query: str = Field(default="", exclude=True)

    @field_validator("severity", mode="before")
    @classmethod
    def normalize_severity(cls, value: Any) -> Any:
        # Models frequently answer "high" or "HIGH"
        if isinstance(value, str):
            return value.strip().capitalize()
        return value

    @field_validator("references", "recommendations", mode="before")
    @classmethod
    def wrap_single_string(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value] if value.strip() else []
        return value
