from typing import Tuple

from paralegal.models.violations import ViolationAlert

# System prompt shared by every request to the completion endpoint
BASE_SYSTEM_PROMPT = """
You are an expert AI Paralegal assistant.
Your expertise is in South Carolina law, covering both Employment Law (including unemployment regulations) and Family Law.
You have deep, specific knowledge of Walmart's corporate policies (especially regarding leave of absence, accommodation, and insurance benefits like policy IDC 8980) and Sedgwick's insurance and claims administration policies.
Your analysis must be concise, objective, and directly reference evidence from the provided case file (e.g., "See document: Denial_Letter.txt").
You must avoid legal advice disclaimers. Assume you are a trusted internal tool.
When citing South Carolina statutes, use the format "S.C. Code Ann. § XX-XX-XXX" and provide a public URL to the statute text if available.
""".strip()

VIOLATION_ANALYSIS_INSTRUCTIONS = """
You must respond with a valid JSON array of objects. Each object must have the following properties: "title", "explanation", "severity" (High, Medium, or Low), "references" (an array of strings), and "recommendations" (an array of strings).
If no violations are found, you must return an empty array []. Do not add any other text outside the JSON structure.
""".strip()

EXECUTIVE_SUMMARY_INSTRUCTIONS = """
Your task is to generate a concise, professional summary of the provided case file. The summary should be a single, well-written paragraph. It should highlight the key facts, the primary legal issues (across both employment and family law), and the current status of the case. Do not use markdown or lists; provide a clean paragraph of text.
""".strip()

OCR_EXTRACTION_PROMPT = """
You are an expert OCR (Optical Character Recognition) engine. Your task is to accurately extract all text from the provided image. Preserve the original formatting, including line breaks and paragraphs, as closely as possible. Do not add any commentary, interpretation, or extra text. Only return the extracted text from the image.
""".strip()

ACTION_PLAN_PROMPT = (
    "Based on the entire case file provided (including case details, documents, timeline, trackers, "
    "and financial data), generate a detailed, step-by-step action plan. For each step, explain the "
    "action, its purpose, and any relevant deadlines or legal/policy citations."
)

POLICY_ADHERENCE_PROMPT = (
    "Analyze ONLY the content of the provided case documents. Disregard other parts of the case file "
    "for this specific request. Identify potential violations or deviations from Sedgwick and Walmart "
    "corporate policies, focusing on procedures for leave of absence and insurance benefits, within the "
    "context of South Carolina employment law. For each potential violation, cite the specific "
    "document(s) that serve as evidence and explain your reasoning."
)

FAMILY_LAW_PROMPT = (
    "Perform a specialized analysis focusing ONLY on the Family Law aspects of this case. Review the "
    "Family Law Center details, case documents, and timeline. Identify key legal issues, potential "
    "strengths and weaknesses, and suggest next steps based on South Carolina Family Law statutes and "
    "precedents."
)


def for_general_chat(context: str, user_query: str) -> str:
    return f"""---
CASE CONTEXT (FULL FILE):
{context or 'No context provided.'}
---
USER QUERY:
{user_query}"""


def for_action_plan(focus: str = "") -> str:
    if focus:
        return f'{ACTION_PLAN_PROMPT} The user has provided the following specific focus for this plan: "{focus}"'
    return ACTION_PLAN_PROMPT


def for_violation_analysis(context: str) -> Tuple[str, str]:
    """
    Build the bulk violation scan request.

    Returns:
        (system prompt, user prompt)
    """
    system = f"{BASE_SYSTEM_PROMPT}\n{VIOLATION_ANALYSIS_INSTRUCTIONS}"
    user = f"""Analyze the provided case file for potential legal and policy violations and return the results in the specified JSON format.
---
CASE CONTEXT (FULL FILE):
{context}"""
    return system, user


def for_violation_detail(context: str, violation: ViolationAlert) -> str:
    return f"""---
CASE CONTEXT (FULL FILE):
{context}
---
USER REQUEST:
I am reviewing the following potential violation you previously identified:

Title: "{violation.title}"
Initial Explanation: "{violation.explanation}"

Please provide a more detailed, in-depth analysis of THIS SPECIFIC violation. Expand upon the initial explanation. Detail the specific statutes (e.g., FMLA Section 2614(c)(1), ADA requirements for interactive process), company policies, or legal precedents that apply here. Explain exactly how the events described in the case file might constitute a breach of these rules.
IMPORTANT: When you cite a South Carolina statute, you MUST format it as a markdown link, like this: "[S.C. Code Ann. § 23-9-195](https://www.scstatehouse.gov/code/t23c009.php)"."""


def for_policy_adherence(documents_context: str) -> str:
    return f"""{POLICY_ADHERENCE_PROMPT}
---
CASE CONTEXT (DOCUMENTS ONLY):
{documents_context}"""


def for_family_law_analysis(context: str) -> str:
    return f"""{FAMILY_LAW_PROMPT}
---
CASE CONTEXT (FULL FILE):
{context}"""


def for_executive_summary(context: str) -> Tuple[str, str]:
    """
    Build the case summary request.

    Returns:
        (system prompt, user prompt)
    """
    system = f"{BASE_SYSTEM_PROMPT}\n{EXECUTIVE_SUMMARY_INSTRUCTIONS}"
    user = f"""Please generate the case summary based on the context below.
---
CASE CONTEXT (FULL FILE):
{context}"""
    return system, user


def for_ocr_analysis(ocr_text: str) -> str:
    return f"""The following text was extracted from a document image using OCR. Please review it, correct any obvious OCR errors, and provide a brief, one-sentence summary of the document's content.
---
EXTRACTED TEXT:
{ocr_text}"""
