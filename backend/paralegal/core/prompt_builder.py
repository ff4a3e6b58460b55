import logging
from typing import Iterable, List

from paralegal.models.case_file import (
    CaseDetails,
    CaseFile,
    ChecklistItem,
    Contact,
    DamageValues,
    Deadline,
    amount_or_zero,
)
from paralegal.models.documents import CaseDocument

# Configure logging
logger = logging.getLogger("prompt_builder")

# Rendered in field declaration order
CASE_DETAIL_LABELS = {
    "win": "WIN",
    "phone": "Phone",
    "accommodation_claim": "Accommodation Claim #",
    "disability_claim": "Disability Claim #",
    "leave_claim": "Leave Claim #",
    "sedgwick_accommodation_contact": "Sedgwick Accommodation Contact",
    "sedgwick_disability_contact": "Sedgwick Disability Contact",
    "sedgwick_email": "Sedgwick Email",
    "blue_cross_contact": "Blue Cross Contact",
    "primary_insurance_policy_name": "Primary Insurance Policy",
    "policy_number": "Policy Number",
    "insurance_provider_contact": "Insurance Provider Contact",
    "injury_date": "Injury Date",
    "denial_date": "Denial Date",
    "approval_date": "Approval Date",
    "insurance_stop_date": "Insurance Stop Date",
    "cleared_to_work_date": "Cleared to Work Date",
    "accommodation_deadline": "Accommodation Deadline",
    "eeoc_deadline": "EEOC Deadline",
    "violations": "Violations",
    "case_value": "Case Value",
    "case_summary": "Case Summary",
}


def _label_for(field_name: str) -> str:
    return CASE_DETAIL_LABELS.get(field_name, field_name.replace("_", " ").title())


def render_case_details(details: CaseDetails) -> str:
    lines = ["## CASE DETAILS"]
    for field_name in CaseDetails.model_fields:
        lines.append(f"{_label_for(field_name)}: {getattr(details, field_name)}")
    return "\n".join(lines)


def render_checklist(title: str, items: Iterable[ChecklistItem]) -> str:
    lines = [f"## {title}"]
    for item in items:
        mark = "X" if item.checked else " "
        lines.append(f"[{mark}] {item.text}")
    return "\n".join(lines)


def render_contact_log(contacts: Iterable[Contact]) -> str:
    lines = ["## CONTACT LOG"]
    for contact in contacts:
        lines.append(f"- {contact.date} | {contact.person} ({contact.method})")
        for said in contact.said:
            lines.append(f"  They said: {said}")
        for i_said in contact.i_said:
            lines.append(f"  I said: {i_said}")
        for follow_up in contact.follow_up:
            lines.append(f"  Follow-up: {follow_up}")
        if contact.discrepancy:
            lines.append(f"  Discrepancy: {contact.discrepancy.title} - {contact.discrepancy.detail}")
    return "\n".join(lines)


def render_deadlines(deadlines: Iterable[Deadline]) -> str:
    lines = ["## DEADLINES"]
    for deadline in deadlines:
        critical = " (CRITICAL)" if deadline.is_critical else ""
        lines.append(f"- {deadline.date}: {deadline.what} | Action: {deadline.action} | Status: {deadline.status}{critical}")
    return "\n".join(lines)


def render_damages(damages: DamageValues) -> str:
    lost_wages = amount_or_zero(damages.lost_wages)
    insurance_costs = amount_or_zero(damages.insurance_costs)
    medical_expenses = amount_or_zero(damages.medical_expenses)
    return "\n".join([
        "## DAMAGES",
        f"Lost Wages: {lost_wages:.2f}",
        f"Insurance Costs: {insurance_costs:.2f}",
        f"Medical Expenses: {medical_expenses:.2f}",
        f"Total Damages: {damages.total():.2f}",
    ])


def render_family_law(case_file: CaseFile) -> str:
    details = case_file.family_law_details
    lines = [
        "## FAMILY LAW",
        f"Case Number: {details.case_number}",
        f"County: {details.county}",
        f"Opposing Party: {details.opposing_party}",
        f"Opposing Counsel: {details.opposing_counsel}",
        "Key Issues:",
    ]
    lines.extend(f"- {issue.name}: {issue.status}" for issue in case_file.family_law_key_issues)
    lines.append("Events:")
    lines.extend(f"- {event.date} [{event.type}] {event.description}" for event in case_file.family_law_events)
    lines.append("Financial Log:")
    lines.extend(
        f"- {entry.date} [{entry.type}] {entry.description}: {entry.amount:.2f}"
        for entry in case_file.family_law_financial_log
    )
    return "\n".join(lines)


def render_documents(documents: Iterable[CaseDocument]) -> str:
    sections = ["## DOCUMENTS"]
    for document in documents:
        sections.append(f"--- DOCUMENT: {document.name} ---\n{document.content}\n--- END OF DOCUMENT: {document.name} ---")
    return "\n".join(sections)


def build_full_context(case_file: CaseFile) -> str:
    """
    Serialize the current state of the case file into one context string.

    The output only depends on the case file, and every entity is included in
    full; nothing is truncated.

    Args:
        case_file: The case-file aggregate at request time

    Returns:
        The context text
    """
    sections: List[str] = [
        render_case_details(case_file.case_details),
        f"## MASTER TIMELINE\n{case_file.timeline}",
        render_checklist("ACTION TRACKER", case_file.action_tracker),
        render_checklist("EVIDENCE ON HAND", case_file.evidence_have),
        render_checklist("EVIDENCE NEEDED", case_file.evidence_need),
        render_contact_log(case_file.contact_log),
        render_deadlines(case_file.deadline_calendar),
        render_damages(case_file.damage_calculator),
        render_family_law(case_file),
        render_documents(case_file.documents),
    ]
    context = "\n\n".join(sections)
    logger.debug(f"🔄 CONTEXT BUILT: length={len(context)}, documents={len(case_file.documents)}")
    return context


def build_documents_context(documents: Iterable[CaseDocument]) -> str:
    """Context restricted to the uploaded documents."""
    return render_documents(documents)
