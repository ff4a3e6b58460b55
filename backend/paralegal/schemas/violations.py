from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Literal, Optional

from paralegal.models.violations import ViolationAlert

class ViolationAlertState(BaseModel):
    """An alert including its transient UI state, as shown to the client."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    explanation: str
    severity: Literal["High", "Medium", "Low"]
    references: List[str] = []
    recommendations: List[str] = []
    detailed_explanation: Optional[str] = None
    is_fetching_details: bool = False
    is_detailed_analysis_visible: bool = False
    show_initial_details: bool = False
    detail_search_query: str = ""

    @classmethod
    def from_alert(cls, alert: ViolationAlert) -> "ViolationAlertState":
        return cls(**{name: getattr(alert, name) for name in cls.model_fields})

class ViolationAnalysisState(BaseModel):
    """Response payload for the violations view."""
    alerts: List[ViolationAlertState] = []
    loading: bool = False
    error: Optional[str] = None

class DetailSearchRequest(BaseModel):
    query: str = ""
