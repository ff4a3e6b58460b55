import math
from typing import Any, List, Literal, Optional

from pydantic import Field

from paralegal.models.base import CamelModel
from paralegal.models.chat import Message, default_messages
from paralegal.models.documents import CaseDocument
from paralegal.models.violations import ViolationAlert


class ChecklistItem(CamelModel):
    id: int
    text: str
    checked: bool = False


class Discrepancy(CamelModel):
    title: str
    detail: str


class Contact(CamelModel):
    date: str
    person: str
    method: str = ""
    said: List[str] = []
    i_said: List[str] = []
    follow_up: List[str] = []
    discrepancy: Optional[Discrepancy] = None


class Deadline(CamelModel):
    date: str
    what: str
    action: str = ""
    status: Literal["TODAY", "Pending", "Future", "CRITICAL"] = "Pending"
    is_critical: bool = False


def amount_or_zero(value: Any) -> float:
    """Coerce a damages field to a number, treating missing and NaN values as zero."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return number


class DamageValues(CamelModel):
    lost_wages: Optional[float] = 0
    insurance_costs: Optional[float] = 0
    medical_expenses: Optional[float] = 0

    def total(self) -> float:
        return amount_or_zero(self.lost_wages) + amount_or_zero(self.insurance_costs) + amount_or_zero(self.medical_expenses)


class CaseDetails(CamelModel):
    win: str = ""
    phone: str = ""
    accommodation_claim: str = ""
    disability_claim: str = ""
    leave_claim: str = ""
    sedgwick_accommodation_contact: str = ""
    sedgwick_disability_contact: str = ""
    sedgwick_email: str = ""
    blue_cross_contact: str = ""
    primary_insurance_policy_name: str = ""
    policy_number: str = ""
    insurance_provider_contact: str = ""
    injury_date: str = ""
    denial_date: str = ""
    approval_date: str = ""
    insurance_stop_date: str = ""
    cleared_to_work_date: str = ""
    accommodation_deadline: str = ""
    eeoc_deadline: str = ""
    violations: str = ""
    case_value: str = ""
    case_summary: str = ""


# --- Family law ---

class FamilyLawCaseDetails(CamelModel):
    case_number: str = ""
    county: str = ""
    opposing_party: str = ""
    opposing_counsel: str = ""


class KeyIssue(CamelModel):
    id: int
    name: str
    status: Literal["Pending", "Resolved", "Disputed", "In Progress"] = "Pending"


class FamilyLawEvent(CamelModel):
    date: str
    description: str
    type: Literal["Hearing", "Mediation", "Deadline", "Meeting"] = "Meeting"


class FinancialLogEntry(CamelModel):
    id: int
    date: str
    description: str
    amount: float = 0
    type: Literal["Child Support", "Alimony", "Legal Fees", "Other"] = "Other"


class CaseFile(CamelModel):
    """
    The case-file aggregate. It owns every entity collection of the notebook and
    is persisted as a single flat JSON object.
    """
    case_details: CaseDetails = Field(default_factory=CaseDetails)
    timeline: str = ""
    action_tracker: List[ChecklistItem] = []
    evidence_have: List[ChecklistItem] = []
    evidence_need: List[ChecklistItem] = []
    contact_log: List[Contact] = []
    deadline_calendar: List[Deadline] = []
    damage_calculator: DamageValues = Field(default_factory=DamageValues)
    family_law_details: FamilyLawCaseDetails = Field(default_factory=FamilyLawCaseDetails)
    family_law_key_issues: List[KeyIssue] = []
    family_law_events: List[FamilyLawEvent] = []
    family_law_financial_log: List[FinancialLogEntry] = []
    documents: List[CaseDocument] = []
    violation_alerts: List[ViolationAlert] = []
    messages: List[Message] = Field(default_factory=default_messages)
